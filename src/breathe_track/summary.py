"""Resumen estadístico de los registros de vitales."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from breathe_track.model import VitalsReading

FRAME_COLUMNS = [
    "timestamp",
    "date",
    "spo2",
    "pulse",
    "oxygen_on",
    "oxygen_flow",
    "borg",
    "symptoms",
    "notes",
]

LOW_SPO2_MARK = 88


@dataclass(frozen=True)
class VitalsSummary:
    """Summary of a period (None where there is no data)."""

    avg_spo2: float | None
    lowest_spo2: float | None
    avg_pulse: float | None
    avg_borg: float | None
    below_88_count: int
    below_88_pct: float


def readings_to_frame(readings: Sequence[VitalsReading]) -> pd.DataFrame:
    """Convert vitals readings to a DataFrame ordered by timestamp."""
    rows = [
        {
            "timestamp": r.timestamp,
            "date": r.timestamp.date(),
            "spo2": r.spo2,
            "pulse": r.pulse,
            "oxygen_on": r.oxygen_on,
            "oxygen_flow": r.oxygen_flow,
            "borg": r.borg,
            "symptoms": " | ".join(sorted(r.symptoms)),
            "notes": r.notes,
        }
        for r in readings
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    if df.empty:
        return df
    for col in ("spo2", "pulse", "oxygen_flow", "borg"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df.sort_values("timestamp").reset_index(drop=True)


def _round_half_up(value: float, digits: int) -> float:
    """Round .5 away from zero (12.5 -> 13), not to the even neighbour."""
    if pd.isna(value):
        return value
    step = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))


def _mean(series: pd.Series, digits: int) -> float | None:
    values = series.dropna()
    if values.empty:
        return None
    return _round_half_up(float(values.mean()), digits)


def vitals_summary(frame: pd.DataFrame) -> VitalsSummary:
    """Average/lowest SpO2, average pulse and Borg, and readings below 88%."""
    if frame.empty:
        return VitalsSummary(None, None, None, None, 0, 0.0)

    spo2 = frame["spo2"].dropna()
    below = int((spo2 < LOW_SPO2_MARK).sum())
    pct = _round_half_up(below / len(spo2) * 100, 0) if len(spo2) else 0.0
    return VitalsSummary(
        avg_spo2=_mean(frame["spo2"], 1),
        lowest_spo2=float(spo2.min()) if not spo2.empty else None,
        avg_pulse=_mean(frame["pulse"], 0),
        avg_borg=_mean(frame["borg"], 1),
        below_88_count=below,
        below_88_pct=float(pct),
    )


def daily_vitals_summary(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate vitals by day (count/min/avg SpO2, avg pulse and Borg)."""
    columns = ["date", "spo2_count", "spo2_min", "spo2_avg", "pulse_avg", "borg_avg"]
    if frame.empty:
        return pd.DataFrame(columns=columns)
    g = frame.groupby("date", as_index=False).agg(
        spo2_count=("spo2", "count"),
        spo2_min=("spo2", "min"),
        spo2_avg=("spo2", "mean"),
        pulse_avg=("pulse", "mean"),
        borg_avg=("borg", "mean"),
    )
    g["spo2_avg"] = g["spo2_avg"].map(lambda v: _round_half_up(v, 1))
    g["pulse_avg"] = g["pulse_avg"].map(lambda v: _round_half_up(v, 0))
    g["borg_avg"] = g["borg_avg"].map(lambda v: _round_half_up(v, 1))
    return g[columns].sort_values("date").reset_index(drop=True)
