# apps/api/insights/services/scale_service.py

from __future__ import annotations

import math
from typing import Optional, Tuple

from insights.core.config import AnalyticsConfig
from insights.schemas.series import AxisConfig, ProcessedSeries, Thresholds


MIN_GRIDLINES = 4
MAX_GRIDLINES = 8
NICE_MANTISSAS = (1.0, 2.0, 5.0, 10.0)

_DEFAULT_CONFIG = AnalyticsConfig()


def observed_max(series: ProcessedSeries) -> float:
    """
    Max over every present aggregated value across all buckets, with
    jitter and shimmer pooled. 0.0 when nothing was measured.
    """
    best = 0.0
    for p in series.points:
        for v in (p.jitter_mean, p.shimmer_mean):
            if v is not None and math.isfinite(v) and v > best:
                best = v
    return best


def derive_thresholds(
    series: ProcessedSeries,
    config: Optional[AnalyticsConfig] = None,
) -> Thresholds:
    """
    calm < natural < expressive as fractions of max(observed_max, floor).

    Ordering holds by construction: the floor is positive and the fractions
    are strictly ascending (both enforced by AnalyticsConfig).
    """
    config = config or _DEFAULT_CONFIG
    peak = observed_max(series)
    padded = max(peak, config.expressive_floor)

    calm_f, natural_f, expressive_f = config.threshold_fractions
    return Thresholds(
        calm=padded * calm_f,
        natural=padded * natural_f,
        expressive=padded * expressive_f,
        observed_max=peak,
    )


def derive_axis(
    series: ProcessedSeries,
    config: Optional[AnalyticsConfig] = None,
    thresholds: Optional[Thresholds] = None,
) -> AxisConfig:
    """
    Y axis from 0 to max_value with `stride` gridline spacing.

    max_value >= headroom * max(observed_max, expressive) so neither data
    nor threshold lines get clipped.
    """
    config = config or _DEFAULT_CONFIG
    if thresholds is None:
        thresholds = derive_thresholds(series, config)

    peak = observed_max(series)
    top = config.axis_headroom * max(peak, thresholds.expressive)
    if not (math.isfinite(top) and top > 0):
        raise ValueError(f"axis top must be positive and finite, got {top!r}")

    stride, n = _stride_from_table(top, config.step_table)
    if stride is None:
        stride, n = _nice_stride(top)

    return AxisConfig(
        min_value=0.0,
        max_value=n * stride,
        stride=stride,
        gridlines=n,
    )


def _gridlines(top: float, stride: float) -> int:
    # smallest n with n * stride >= top; guard float fuzz at exact multiples
    n = max(1, math.ceil(top / stride - 1e-9))
    if n * stride < top:
        n += 1
    return n


def _stride_from_table(
    top: float,
    table: Tuple[Tuple[float, float], ...],
) -> Tuple[Optional[float], int]:
    for max_range, stride in table:
        if top <= max_range:
            n = _gridlines(top, stride)
            if MIN_GRIDLINES <= n <= MAX_GRIDLINES:
                return stride, n
            return None, 0
    return None, 0


def _nice_stride(top: float) -> Tuple[float, int]:
    """
    1-2-5 stride: the smallest nice step that fits top in MAX_GRIDLINES.
    Consecutive candidates differ by at most 2.5x, so at least
    ceil(8 / 2.5) = 4 gridlines remain.
    """
    exponent = math.floor(math.log10(top / MAX_GRIDLINES))
    base = 10.0 ** exponent
    for m in NICE_MANTISSAS:
        stride = m * base
        n = _gridlines(top, stride)
        if n <= MAX_GRIDLINES:
            return stride, n
    # unreachable: 10 * base > top / MAX_GRIDLINES
    stride = 10.0 * base
    return stride, _gridlines(top, stride)
