from __future__ import annotations

from datetime import datetime, timedelta, timezone

from breathe_track.alerts import (
    AlertConfig,
    AlertKind,
    alert_messages,
    check_co2_retention,
    check_low_spo2,
    check_pulse,
    evaluate_alerts,
)
from breathe_track.model import VitalsReading

_T0 = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


def _readings(**columns: list[object]) -> list[VitalsReading]:
    count = len(next(iter(columns.values())))
    out = []
    for i in range(count):
        values = {name: col[i] for name, col in columns.items()}
        out.append(VitalsReading(timestamp=_T0 + timedelta(hours=i), **values))  # type: ignore[arg-type]
    return out


def test_low_spo2_fires_with_count() -> None:
    alert = check_low_spo2(_readings(spo2=[85, 86, 87]))
    assert alert is not None
    assert alert.kind is AlertKind.LOW_SPO2
    assert "3" in alert.message


def test_low_spo2_counts_every_low_reading() -> None:
    alert = check_low_spo2(_readings(spo2=[85, 95, 80, 87, 70]))
    assert alert is not None
    assert "(4 times)" in alert.message


def test_two_low_readings_do_not_fire() -> None:
    assert check_low_spo2(_readings(spo2=[85, 86, 88, None])) is None


def test_pulse_consistently_high() -> None:
    alert = check_pulse(_readings(pulse=[120, 115, 130]))
    assert alert is not None
    assert alert.kind is AlertKind.PULSE_HIGH
    assert "consistently high" in alert.message
    assert "consistently low" not in alert.message


def test_pulse_consistently_low() -> None:
    alert = check_pulse(_readings(pulse=[45, 40, 49]))
    assert alert is not None
    assert alert.kind is AlertKind.PULSE_LOW


def test_mixed_pulse_does_not_fire() -> None:
    assert check_pulse(_readings(pulse=[120, 40, 130])) is None


def test_pulse_uses_last_three_defined_values() -> None:
    readings = _readings(pulse=[80, 120, None, 115, 130, None])
    alert = check_pulse(readings)
    assert alert is not None
    assert alert.kind is AlertKind.PULSE_HIGH


def test_pulse_needs_three_values() -> None:
    assert check_pulse(_readings(pulse=[120, None, 130])) is None


def test_co2_retention_fires() -> None:
    readings = _readings(
        spo2=[96, 95, 97], oxygen_on=[True, True, True], oxygen_flow=[2, 2, 2]
    )
    alert = check_co2_retention(readings)
    assert alert is not None
    assert alert.kind is AlertKind.CO2_RETENTION
    assert "CO₂ retention" in alert.message


def test_co2_retention_ignores_readings_off_oxygen() -> None:
    readings = _readings(
        spo2=[96, 90, 95, 97],
        oxygen_on=[True, False, True, False],
        oxygen_flow=[2, None, 2, None],
    )
    assert check_co2_retention(readings) is None


def test_co2_retention_requires_all_above_94() -> None:
    readings = _readings(
        spo2=[96, 94, 97], oxygen_on=[True, True, True], oxygen_flow=[2, 2, 2]
    )
    assert check_co2_retention(readings) is None


def test_evaluate_alerts_order_and_idempotence() -> None:
    readings = _readings(
        spo2=[85, 86, 87, 96, 95, 97],
        pulse=[60, 70, 80, 120, 115, 130],
        oxygen_on=[False, False, False, True, True, True],
        oxygen_flow=[None, None, None, 2, 2, 2],
    )
    kinds = [a.kind for a in evaluate_alerts(readings)]
    assert kinds == [AlertKind.LOW_SPO2, AlertKind.PULSE_HIGH, AlertKind.CO2_RETENTION]
    assert alert_messages(readings) == alert_messages(readings)
    assert len(alert_messages(readings)) == 3


def test_no_alerts_for_empty_window() -> None:
    assert evaluate_alerts([]) == []


def test_custom_config() -> None:
    config = AlertConfig(low_spo2=90, low_spo2_min_count=2)
    alert = check_low_spo2(_readings(spo2=[89, 89.5]), config)
    assert alert is not None
    assert "<90%" in alert.message
