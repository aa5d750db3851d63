"""Clasificación de SpO2 por fase de la prueba de marcha (tabla de cortes).

Each rule is a set of cutpoints keyed by ``(family, phase, flow bracket)``.
A reading is ``low`` below ``low_below``; otherwise it is ``caution`` up to
``caution_to`` (inclusive or exclusive, as the clinical table states it);
anything above is ``normal``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from breathe_track.model import Phase, SeverityBand, as_number


class RuleFamily(str, Enum):
    HEALTHY = "healthy"
    COPD = "copd"


class FlowBracket(str, Enum):
    """Supplemental oxygen flow brackets (L/min)."""

    OFF = "off"
    UP_TO_1 = "<=1"
    EXACTLY_2 = "2"
    FROM_3_TO_4 = "3-4"
    ABOVE_4 = ">4"


@dataclass(frozen=True)
class Cutpoints:
    """Thresholds for one rule row."""

    low_below: float
    caution_to: float
    caution_inclusive: bool

    def classify(self, spo2: float) -> SeverityBand:
        if spo2 < self.low_below:
            return SeverityBand.LOW
        if self.caution_inclusive and spo2 <= self.caution_to:
            return SeverityBand.CAUTION
        if not self.caution_inclusive and spo2 < self.caution_to:
            return SeverityBand.CAUTION
        return SeverityBand.NORMAL


def _upto(low_below: float, caution_to: float) -> Cutpoints:
    return Cutpoints(low_below, caution_to, caution_inclusive=True)


def _below(low_below: float, caution_to: float) -> Cutpoints:
    return Cutpoints(low_below, caution_to, caution_inclusive=False)


_HEALTHY_RULES = {
    Phase.START: _upto(95, 95),
    Phase.MID: _below(95, 95),
    Phase.END: _upto(94, 94),
    Phase.RECOVERY: _upto(95, 95),
}

# Resting targets; recovery reuses them.
_COPD_REST = {
    FlowBracket.OFF: _upto(90, 91),
    FlowBracket.UP_TO_1: _upto(88, 89),
    FlowBracket.EXACTLY_2: _upto(90, 91),
    # Caution "exactly 92" is unreachable once < 93 is low.
    FlowBracket.FROM_3_TO_4: _below(93, 93),
    FlowBracket.ABOVE_4: _upto(94, 94),
}

_COPD_NADIR = {
    FlowBracket.OFF: _below(88, 92),
    FlowBracket.UP_TO_1: _below(88, 90),
    FlowBracket.EXACTLY_2: _below(90, 92),
    FlowBracket.FROM_3_TO_4: _below(91, 93),
    FlowBracket.ABOVE_4: _below(92, 94),
}

_COPD_END = {
    FlowBracket.OFF: _below(88, 90),
    FlowBracket.UP_TO_1: _below(88, 90),
    FlowBracket.EXACTLY_2: _below(90, 92),
    FlowBracket.FROM_3_TO_4: _below(92, 93),
    FlowBracket.ABOVE_4: _below(93, 94),
}

_COPD_RULES = {
    Phase.START: _COPD_REST,
    Phase.MID: _COPD_NADIR,
    Phase.END: _COPD_END,
    Phase.RECOVERY: _COPD_REST,
}

SEVERITY_RULES: dict[tuple[RuleFamily, Phase, FlowBracket], Cutpoints] = {
    **{
        (RuleFamily.HEALTHY, phase, bracket): cutpoints
        for phase, cutpoints in _HEALTHY_RULES.items()
        for bracket in FlowBracket
    },
    **{
        (RuleFamily.COPD, phase, bracket): cutpoints
        for phase, by_bracket in _COPD_RULES.items()
        for bracket, cutpoints in by_bracket.items()
    },
}


def rule_family(has_copd: bool | None) -> RuleFamily:
    """COPD rules only for an explicit ``True``; unknown falls back to healthy."""
    return RuleFamily.COPD if has_copd is True else RuleFamily.HEALTHY


def effective_flow(oxygen_on: bool | None, oxygen_flow: float | None) -> float:
    """Flow used for classification: the recorded flow when on oxygen, else 0."""
    if oxygen_on is not True:
        return 0.0
    if isinstance(oxygen_flow, bool) or not isinstance(oxygen_flow, (int, float)):
        return 0.0
    return float(oxygen_flow)


def flow_bracket(oxygen_on: bool | None, oxygen_flow: float | None) -> FlowBracket:
    """Map oxygen status and flow to a bracket.

    Flows between the listed brackets (e.g. 1.5 or 2.5 L/min) fall through
    to ``ABOVE_4``.
    """
    if oxygen_on is not True:
        return FlowBracket.OFF
    flow = effective_flow(oxygen_on, oxygen_flow)
    if flow <= 1:
        return FlowBracket.UP_TO_1
    if flow == 2:
        return FlowBracket.EXACTLY_2
    if 3 <= flow <= 4:
        return FlowBracket.FROM_3_TO_4
    return FlowBracket.ABOVE_4


def cutpoints_for(
    has_copd: bool | None,
    oxygen_on: bool | None,
    oxygen_flow: float | None,
    phase: Phase,
) -> Cutpoints:
    """Look up the rule row for a patient context and phase."""
    return SEVERITY_RULES[
        (rule_family(has_copd), Phase(phase), flow_bracket(oxygen_on, oxygen_flow))
    ]


def classify_spo2(
    spo2: float | None,
    has_copd: bool | None,
    oxygen_on: bool | None,
    oxygen_flow: float | None,
    phase: Phase,
) -> SeverityBand | None:
    """Classify one SpO2 reading.

    Args:
        spo2: Measured saturation (%), or None.
        has_copd: Comorbidity flag; only ``True`` selects the COPD rules.
        oxygen_on: Whether supplemental oxygen was in use.
        oxygen_flow: Oxygen flow (L/min) when on oxygen.
        phase: Walk-test phase of the reading.

    Returns:
        Severity band, or None when ``spo2`` is missing or not a number.
    """
    value = as_number(spo2)
    if value is None:
        return None
    return cutpoints_for(has_copd, oxygen_on, oxygen_flow, phase).classify(value)
