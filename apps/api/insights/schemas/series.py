# apps/api/insights/schemas/series.py

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Upper bound for any single measurement or bucket mean. Jitter/shimmer are
# ratios well below 1; the slack admits percent-scale input while keeping
# sums, headroom and axis arithmetic finite.
MAX_MEASUREMENT = 1e6


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class BucketUnit(str, Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class BucketedPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime  # bucket start
    count: int = Field(..., ge=0)

    # None = no sample in this bucket carried the field (never 0.0)
    jitter_mean: Optional[float] = Field(default=None, ge=0, le=MAX_MEASUREMENT, allow_inf_nan=False)
    shimmer_mean: Optional[float] = Field(default=None, ge=0, le=MAX_MEASUREMENT, allow_inf_nan=False)
    jitter_count: int = Field(default=0, ge=0)
    shimmer_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.count == 0


class ProcessedSeries(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: Period
    unit: BucketUnit
    lookback: int = Field(..., ge=1)
    window_start: datetime
    window_end: datetime
    points: List[BucketedPoint]
    total_samples: int = Field(default=0, ge=0)
    sampling_info: str = ""


class Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    calm: float
    natural: float
    expressive: float
    observed_max: float = 0.0


class AxisConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_value: float = 0.0
    max_value: float
    stride: float
    gridlines: int
