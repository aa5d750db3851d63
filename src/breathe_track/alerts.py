"""Alertas por reglas sobre la ventana reciente de registros de vitales."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from breathe_track.model import VitalsReading


@dataclass(frozen=True)
class AlertConfig:
    """Thresholds for the alert rules."""

    low_spo2: float = 88
    low_spo2_min_count: int = 3
    pulse_high: float = 110
    pulse_low: float = 50
    co2_spo2: float = 94
    recent_count: int = 3
    window_hours: int = 24


class AlertKind(str, Enum):
    LOW_SPO2 = "low_spo2"
    PULSE_HIGH = "pulse_high"
    PULSE_LOW = "pulse_low"
    CO2_RETENTION = "co2_retention"


@dataclass(frozen=True)
class Alert:
    """A fired alert: machine-readable kind plus display message."""

    kind: AlertKind
    message: str


def check_low_spo2(
    readings: Sequence[VitalsReading], config: AlertConfig = AlertConfig()
) -> Alert | None:
    """Several readings under the low SpO2 threshold."""
    low = [
        r for r in readings if r.spo2 is not None and r.spo2 < config.low_spo2
    ]
    if len(low) < config.low_spo2_min_count:
        return None
    return Alert(
        AlertKind.LOW_SPO2,
        f"Multiple low SpO₂ readings (<{config.low_spo2:g}%) detected recently "
        f"({len(low)} times). Consider contacting your provider.",
    )


def check_pulse(
    readings: Sequence[VitalsReading], config: AlertConfig = AlertConfig()
) -> Alert | None:
    """Last readings with a pulse all above or all below the limits."""
    recent = [r.pulse for r in readings if r.pulse is not None]
    recent = recent[-config.recent_count :]
    if len(recent) < config.recent_count:
        return None
    if all(p > config.pulse_high for p in recent):
        return Alert(
            AlertKind.PULSE_HIGH,
            f"Pulse rate has been consistently high (>{config.pulse_high:g} bpm) "
            "in recent readings. Please review.",
        )
    if all(p < config.pulse_low for p in recent):
        return Alert(
            AlertKind.PULSE_LOW,
            f"Pulse rate has been consistently low (<{config.pulse_low:g} bpm) "
            "in recent readings. Please review.",
        )
    return None


def check_co2_retention(
    readings: Sequence[VitalsReading], config: AlertConfig = AlertConfig()
) -> Alert | None:
    """High SpO2 on every recent oxygen reading (possible CO2 retention)."""
    recent = [r.spo2 for r in readings if r.oxygen_on is True and r.spo2 is not None]
    recent = recent[-config.recent_count :]
    if len(recent) < config.recent_count:
        return None
    if not all(s > config.co2_spo2 for s in recent):
        return None
    return Alert(
        AlertKind.CO2_RETENTION,
        f"Warning: SpO₂ consistently >{config.co2_spo2:g}% while using oxygen. "
        "Discuss with your doctor if this could indicate CO₂ retention.",
    )


def evaluate_alerts(
    readings: Sequence[VitalsReading], config: AlertConfig = AlertConfig()
) -> list[Alert]:
    """Run every rule over a time-ordered window.

    Args:
        readings: Readings of the window, oldest first.
        config: Alert thresholds.

    Returns:
        Fired alerts in rule order (low SpO2, pulse, CO2); empty if none.
    """
    checks = (check_low_spo2, check_pulse, check_co2_retention)
    out: list[Alert] = []
    for check in checks:
        alert = check(readings, config)
        if alert is not None:
            out.append(alert)
    return out


def alert_messages(
    readings: Sequence[VitalsReading], config: AlertConfig = AlertConfig()
) -> list[str]:
    """Display messages of :func:`evaluate_alerts`."""
    return [alert.message for alert in evaluate_alerts(readings, config)]
