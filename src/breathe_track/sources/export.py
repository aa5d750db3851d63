"""Lectura de exportaciones JSON de BreatheTrack (logEntries + walkTestResults)."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import parser as date_parser
from dateutil import tz

from breathe_track.model import (
    SYMPTOM_OPTIONS,
    DistanceUnit,
    PhaseReading,
    VitalsReading,
    WalkTestResult,
)
from breathe_track.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)

_LOCAL_TZ = tz.tzlocal()


@dataclass(frozen=True)
class ExportPaths(SourcePaths):
    """Paths for BreatheTrack JSON exports."""

    # root: folder containing breathetrack_*.json


class ExportSource(DataSource):
    """BreatheTrack JSON export source."""

    def validate(self) -> None:
        """Validate that the export directory exists."""
        if not self.root.exists():
            raise FileNotFoundError(str(self.root))

    def newest_export(self) -> Path:
        """Return newest breathetrack_*.json by mtime."""
        files = sorted(
            self.root.glob("breathetrack_*.json"),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No breathetrack_*.json in {self.root}")
        return files[0]

    def load_vitals(self, path: Path) -> list[VitalsReading]:
        """Parse the ``logEntries`` list into typed readings.

        Args:
            path: Path to JSON export.

        Returns:
            Readings sorted by timestamp.

        Raises:
            ValueError: If JSON shape is invalid.
        """
        out: list[VitalsReading] = []
        for item in _load_section(path, "logEntries"):
            reading = _item_to_vitals(item)
            if reading is not None:
                out.append(reading)
        out.sort(key=lambda r: r.timestamp)
        return out

    def load_walk_tests(self, path: Path) -> list[WalkTestResult]:
        """Parse the ``walkTestResults`` list into typed results."""
        out: list[WalkTestResult] = []
        for item in _load_section(path, "walkTestResults"):
            test = _item_to_walk_test(item)
            if test is not None:
                out.append(test)
        out.sort(key=lambda t: t.timestamp)
        return out


def _load_section(path: Path, key: str) -> list[Any]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("BreatheTrack export must be a JSON object")
    section = raw.get(key, [])
    if not isinstance(section, list):
        raise ValueError(f"'{key}' must be a list")
    return section


def _optional_number(value: Any) -> float | None:
    """Numeric-or-empty form value -> float or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            logger.warning("Ignoring non-numeric value %r", value)
            return None
    else:
        return None
    return None if math.isnan(number) else number


def _optional_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def _parse_timestamp(value: Any) -> datetime:
    """Epoch milliseconds or ISO-8601 string -> aware datetime."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=_LOCAL_TZ)
    if isinstance(value, str) and value.strip():
        dt = date_parser.isoparse(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=_LOCAL_TZ)
        return dt
    raise ValueError(f"Missing or invalid timestamp: {value!r}")


def _parse_symptoms(value: Any) -> frozenset[str]:
    """Known symptom tags; unknown tags are logged and left out."""
    if not isinstance(value, list):
        return frozenset()
    tags = {str(s).strip() for s in value if str(s).strip()}
    unknown = sorted(tags - set(SYMPTOM_OPTIONS))
    if unknown:
        logger.warning("Ignoring unknown symptoms: %s", ", ".join(unknown))
    return frozenset(tags & set(SYMPTOM_OPTIONS))


def _parse_notes(value: Any) -> str | None:
    if value is None:
        return None
    notes = str(value).strip()
    return notes if notes else None


def _item_to_vitals(item: Any) -> VitalsReading | None:
    """Convierte un ítem dict en VitalsReading; None si no es un objeto.

    Stored entries are kept as-is: oxygen on without a flow keeps
    ``oxygen_flow=None``, which the classifiers read as 0 L/min.
    """
    if not isinstance(item, dict):
        return None
    oxygen_on = item.get("oxygenOn") is True
    borg = _optional_number(item.get("borg"))
    return VitalsReading(
        timestamp=_parse_timestamp(item.get("timestamp")),
        oxygen_on=oxygen_on,
        spo2=_optional_number(item.get("spo2")),
        pulse=_optional_number(item.get("pulse")),
        oxygen_flow=_optional_number(item.get("oxygenFlow")) if oxygen_on else None,
        borg=int(borg) if borg is not None else None,
        symptoms=_parse_symptoms(item.get("symptoms")),
        notes=_parse_notes(item.get("notes")),
    )


def _parse_unit(value: Any) -> DistanceUnit | None:
    if value is None or value == "":
        return None
    try:
        return DistanceUnit(value)
    except ValueError:
        logger.warning("Ignoring unknown distance unit %r", value)
        return None


def _item_to_walk_test(item: Any) -> WalkTestResult | None:
    """Convierte un ítem dict en WalkTestResult; None si no es un objeto."""
    if not isinstance(item, dict):
        return None
    oxygen_on = _optional_bool(item.get("oxygenOn"))
    return WalkTestResult(
        timestamp=_parse_timestamp(item.get("testTimestamp")),
        has_copd=_optional_bool(item.get("hasCOPD")),
        oxygen_on=oxygen_on,
        oxygen_flow=_optional_number(item.get("oxygenFlow")) if oxygen_on else None,
        start=PhaseReading(
            _optional_number(item.get("preTestSpo2")),
            _optional_number(item.get("preTestPulse")),
        ),
        mid=PhaseReading(
            _optional_number(item.get("midpointSpo2")),
            _optional_number(item.get("midpointPulse")),
        ),
        end=PhaseReading(
            _optional_number(item.get("postTestSpo2")),
            _optional_number(item.get("postTestPulse")),
        ),
        recovery=PhaseReading(
            _optional_number(item.get("recoverySpo2")),
            _optional_number(item.get("recoveryPulse")),
        ),
        distance=_optional_number(item.get("distance")),
        distance_unit=_parse_unit(item.get("distanceUnit")),
    )
