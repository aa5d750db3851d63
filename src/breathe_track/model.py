"""Modelos tipados para registros de signos vitales y pruebas de marcha."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

SYMPTOM_OPTIONS = (
    "Increased Dyspnea (Breathlessness)",
    "Increased Fatigue",
    "Cough Change (Frequency/Character)",
    "Sputum Change (Volume/Color)",
    "Wheezing",
    "Headache",
    "Ankle Swelling",
    "Confusion / Increased Drowsiness",
)

BORG_LABELS = {
    0: "Nothing at all",
    1: "Very slight",
    2: "Slight",
    3: "Moderate",
    4: "Somewhat severe",
    5: "Severe",
    6: "Severe+",
    7: "Very severe",
    8: "Very severe+",
    9: "Almost maximum",
    10: "Maximum",
}

FEET_TO_METERS = 0.3048


class Phase(str, Enum):
    """Moment of a six-minute walk test at which SpO2 was measured."""

    START = "start"
    MID = "mid"
    END = "end"
    RECOVERY = "recovery"


class SeverityBand(str, Enum):
    """Severity of a single SpO2 reading."""

    NORMAL = "normal"
    CAUTION = "caution"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Ordinal rank; lower is more severe."""
        return _BAND_RANK[self]


_BAND_RANK = {SeverityBand.LOW: 0, SeverityBand.CAUTION: 1, SeverityBand.NORMAL: 2}


class DesaturationTrend(str, Enum):
    """Change of SpO2 between the start and the end of exertion."""

    IMPROVED = "improved"
    MILD = "mild"
    SIGNIFICANT = "significant"

    @property
    def glyph(self) -> str:
        return _TREND_GLYPHS[self]


_TREND_GLYPHS = {
    DesaturationTrend.IMPROVED: "▲",
    DesaturationTrend.MILD: "―",
    DesaturationTrend.SIGNIFICANT: "▼",
}


class DistanceUnit(str, Enum):
    METERS = "meters"
    FEET = "feet"


@dataclass(frozen=True)
class VitalsReading:
    """One vitals log entry (timestamped)."""

    timestamp: datetime
    oxygen_on: bool = False
    spo2: float | None = None
    pulse: float | None = None
    oxygen_flow: float | None = None
    borg: int | None = None
    symptoms: frozenset[str] = field(default_factory=frozenset)
    notes: str | None = None


@dataclass(frozen=True)
class PhaseReading:
    """SpO2/pulse pair taken at one walk-test phase."""

    spo2: float | None = None
    pulse: float | None = None


@dataclass(frozen=True)
class WalkTestResult:
    """One administered six-minute walk test."""

    timestamp: datetime
    has_copd: bool | None = None
    oxygen_on: bool | None = None
    oxygen_flow: float | None = None
    start: PhaseReading = field(default_factory=PhaseReading)
    mid: PhaseReading = field(default_factory=PhaseReading)
    end: PhaseReading = field(default_factory=PhaseReading)
    recovery: PhaseReading = field(default_factory=PhaseReading)
    distance: float | None = None
    distance_unit: DistanceUnit | None = None

    def reading_for(self, phase: Phase) -> PhaseReading:
        """Return the SpO2/pulse pair recorded for ``phase``."""
        return {
            Phase.START: self.start,
            Phase.MID: self.mid,
            Phase.END: self.end,
            Phase.RECOVERY: self.recovery,
        }[phase]

    def with_distance(
        self, distance: float | None, unit: DistanceUnit | None
    ) -> WalkTestResult:
        """Return a copy with the walked distance attached."""
        return replace(self, distance=distance, distance_unit=unit)

    @property
    def distance_m(self) -> float | None:
        """Walked distance in meters (None if not recorded)."""
        if self.distance is None:
            return None
        if self.distance_unit == DistanceUnit.FEET:
            return round(self.distance * FEET_TO_METERS, 1)
        return self.distance


def as_number(value: object) -> float | None:
    """Resolve an optional numeric field; None for missing, non-numeric or NaN."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    number = float(value)
    if math.isnan(number):
        return None
    return number


def validate_vitals(reading: VitalsReading) -> None:
    """Check the rules a vitals entry must satisfy before it is stored.

    Args:
        reading: Entry to validate.

    Raises:
        ValueError: If the entry is empty or inconsistent.
    """
    has_notes = bool(reading.notes and reading.notes.strip())
    if (
        reading.spo2 is None
        and reading.pulse is None
        and reading.borg is None
        and not reading.symptoms
        and not has_notes
    ):
        raise ValueError(
            "Enter at least one value (SpO2, pulse, Borg, symptoms or notes)"
        )
    if reading.oxygen_on and reading.oxygen_flow is None:
        raise ValueError("Oxygen flow rate is required when on oxygen")
    if reading.borg is not None and not 0 <= reading.borg <= 10:
        raise ValueError(f"Borg score out of range: {reading.borg}")
    unknown = sorted(reading.symptoms - set(SYMPTOM_OPTIONS))
    if unknown:
        raise ValueError(f"Unknown symptoms: {', '.join(unknown)}")


def validate_walk_test(test: WalkTestResult) -> None:
    """Check the rules a walk test must satisfy before it is stored.

    Raises:
        ValueError: If oxygen flow is missing or the distance is inconsistent.
    """
    if test.oxygen_on and test.oxygen_flow is None:
        raise ValueError("Oxygen flow rate is required when on oxygen")
    if test.distance is not None and test.distance < 0:
        raise ValueError(f"Negative distance: {test.distance}")
