# apps/api/insights/schemas/voice.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from insights.schemas.samples import VoiceSample
from insights.schemas.series import AxisConfig, Period, ProcessedSeries, Thresholds


class VoiceStabilityRequest(BaseModel):
    period: Period = Period.MONTH
    now: Optional[datetime] = None  # defaults to server UTC now
    samples: List[VoiceSample] = Field(default_factory=list)


class VoiceStabilityChart(BaseModel):
    model_config = ConfigDict(frozen=True)

    series: ProcessedSeries
    thresholds: Thresholds
    axis: AxisConfig
