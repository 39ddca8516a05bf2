# apps/api/insights/services/voice_stability_service.py

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from insights.core.config import AnalyticsConfig
from insights.schemas.samples import VoiceSample
from insights.schemas.series import Period
from insights.schemas.voice import VoiceStabilityChart
from insights.services.bucketing_service import bucket
from insights.services.scale_service import derive_axis, derive_thresholds


def build_voice_stability(
    samples: Sequence[VoiceSample],
    period: Period,
    now: datetime,
    config: Optional[AnalyticsConfig] = None,
) -> VoiceStabilityChart:
    """
    Bucketed jitter/shimmer series plus the thresholds and y axis drawn
    over it. Thresholds are derived first so the axis can leave room above
    the expressive line.
    """
    series = bucket(samples, period, now, config)
    thresholds = derive_thresholds(series, config)
    axis = derive_axis(series, config, thresholds=thresholds)
    return VoiceStabilityChart(series=series, thresholds=thresholds, axis=axis)
