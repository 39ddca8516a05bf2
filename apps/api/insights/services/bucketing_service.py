# apps/api/insights/services/bucketing_service.py

from __future__ import annotations

import math
from bisect import bisect_right
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from insights.core import calendar
from insights.core.config import AnalyticsConfig
from insights.schemas.samples import VoiceSample
from insights.schemas.series import BucketedPoint, BucketUnit, Period, ProcessedSeries


# Measurement fields averaged per bucket. Pooled later for observed max.
TRACKED_FIELDS = ("jitter", "shimmer")

_DEFAULT_CONFIG = AnalyticsConfig()

_UNIT_DESCRIPTION = {
    BucketUnit.HOUR: "hourly averages",
    BucketUnit.DAY: "daily averages",
    BucketUnit.WEEK: "weekly averages",
    BucketUnit.MONTH: "monthly averages",
}


class _Accumulator:
    """Per-bucket running values; a field with no values stays missing."""

    __slots__ = ("count", "values")

    def __init__(self) -> None:
        self.count = 0
        self.values: Dict[str, List[float]] = {f: [] for f in TRACKED_FIELDS}

    def add(self, sample: VoiceSample) -> None:
        self.count += 1
        for f in TRACKED_FIELDS:
            v = getattr(sample, f)
            if v is not None:
                self.values[f].append(float(v))

    def mean(self, f: str) -> Optional[float]:
        vals = self.values[f]
        if not vals:
            return None
        return math.fsum(vals) / len(vals)


def bucket(
    samples: Sequence[VoiceSample],
    period: Period,
    now: datetime,
    config: Optional[AnalyticsConfig] = None,
) -> ProcessedSeries:
    """
    Group samples into calendar-aligned buckets for `period`.

    - window (unit, count) comes only from config.windows[period]
    - every bucket in the window is emitted, empty ones with count=0 and
      all means None
    - samples before the window start or after `now` are ignored
    """
    config = config or _DEFAULT_CONFIG
    period = Period(period)
    unit, lookback = config.window_for(period)

    starts = calendar.bucket_starts(now, unit, lookback)
    window_start = starts[0]
    accs = [_Accumulator() for _ in starts]

    in_window = 0
    for s in samples:
        ts = s.timestamp
        if ts < window_start or ts > now:
            continue
        # starts are ascending; rightmost start <= ts owns the sample
        idx = bisect_right(starts, ts) - 1
        accs[idx].add(s)
        in_window += 1

    points = [
        BucketedPoint(
            timestamp=start,
            count=acc.count,
            jitter_mean=acc.mean("jitter"),
            shimmer_mean=acc.mean("shimmer"),
            jitter_count=len(acc.values["jitter"]),
            shimmer_count=len(acc.values["shimmer"]),
        )
        for start, acc in zip(starts, accs)
    ]

    return ProcessedSeries(
        period=period,
        unit=unit,
        lookback=lookback,
        window_start=window_start,
        window_end=now,
        points=points,
        total_samples=in_window,
        sampling_info=_sampling_info(
            total=len(samples),
            in_window=in_window,
            filled=sum(1 for p in points if not p.is_empty),
            unit=unit,
        ),
    )


def _sampling_info(*, total: int, in_window: int, filled: int, unit: BucketUnit) -> str:
    if total == 0:
        return "No data available"
    if in_window == 0:
        return "No data in selected period"

    desc = _UNIT_DESCRIPTION[unit]
    if in_window == total:
        return f"Showing {filled} {desc} from {total} recordings"
    return f"Showing {filled} {desc} from {in_window} recordings in period ({total} total recordings)"
