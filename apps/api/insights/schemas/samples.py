# apps/api/insights/schemas/samples.py

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from insights.schemas.series import MAX_MEASUREMENT


class EmotionValence(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class EmotionIntensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmotionCategory(str, Enum):
    # declaration order doubles as tie-break order
    JOY = "joy"
    SADNESS = "sadness"
    ANGER = "anger"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    NEUTRAL = "neutral"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def is_negative(self) -> bool:
        return self in (EmotionCategory.SADNESS, EmotionCategory.ANGER, EmotionCategory.FEAR)

    @property
    def valence(self) -> EmotionValence:
        if self in (EmotionCategory.JOY, EmotionCategory.SURPRISE):
            return EmotionValence.POSITIVE
        if self is EmotionCategory.NEUTRAL:
            return EmotionValence.NEUTRAL
        return EmotionValence.NEGATIVE

    @property
    def intensity(self) -> EmotionIntensity:
        if self in (EmotionCategory.JOY, EmotionCategory.ANGER, EmotionCategory.FEAR):
            return EmotionIntensity.HIGH
        if self is EmotionCategory.NEUTRAL:
            return EmotionIntensity.LOW
        return EmotionIntensity.MEDIUM


class VoiceSample(BaseModel):
    """
    One voice-characteristics measurement.
    jitter / shimmer are ratios (0.05 == 5%); None means "not measured".
    Values above MAX_MEASUREMENT are rejected.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    jitter: Optional[float] = Field(default=None, ge=0, le=MAX_MEASUREMENT, allow_inf_nan=False)
    shimmer: Optional[float] = Field(default=None, ge=0, le=MAX_MEASUREMENT, allow_inf_nan=False)


class CheckInEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    emotion: Optional[EmotionCategory] = None
    intensity: Optional[float] = Field(default=None, ge=0, le=1, allow_inf_nan=False)
