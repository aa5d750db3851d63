"""Indicador de desaturación de esfuerzo (antes vs después de la marcha)."""

from __future__ import annotations

from dataclasses import dataclass

from breathe_track.model import DesaturationTrend, as_number

COPD_SIGNIFICANT_DROP = 4
HEALTHY_SIGNIFICANT_DROP = 3


@dataclass(frozen=True)
class TrendResult:
    """Desaturation trend with the drop it was computed from."""

    trend: DesaturationTrend
    drop: float

    @property
    def glyph(self) -> str:
        return self.trend.glyph


def significant_drop_threshold(has_copd: bool | None) -> int:
    """Percentage points of drop considered significant."""
    return COPD_SIGNIFICANT_DROP if has_copd is True else HEALTHY_SIGNIFICANT_DROP


def classify_trend(
    pre_spo2: float | None,
    post_spo2: float | None,
    has_copd: bool | None,
    oxygen_on: bool | None = None,
) -> TrendResult | None:
    """Compare pre- and post-exercise SpO2.

    ``oxygen_on`` is accepted for rules that may depend on it; it does not
    change the result today.

    Returns:
        Trend and drop (positive means desaturation), or None when either
        reading is missing or not a number.
    """
    pre = as_number(pre_spo2)
    post = as_number(post_spo2)
    if pre is None or post is None:
        return None

    drop = pre - post
    threshold = significant_drop_threshold(has_copd)
    if drop >= threshold:
        trend = DesaturationTrend.SIGNIFICANT
    elif drop > 0:
        trend = DesaturationTrend.MILD
    else:
        trend = DesaturationTrend.IMPROVED
    return TrendResult(trend=trend, drop=drop)
