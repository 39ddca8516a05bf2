# apps/api/insights/schemas/checkins.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from insights.schemas.samples import CheckInEvent, EmotionCategory, EmotionIntensity, EmotionValence
from insights.schemas.series import Period


class EmotionShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    emotion: EmotionCategory
    percentage: int  # floored, 1..100


class WeekdayPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_of_week: str  # Sun..Sat
    count: int = 0
    average_intensity: Optional[float] = None
    has_data: bool = False


class CheckInSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: Period
    window_start: datetime
    window_end: datetime

    total_check_ins: int
    weekly_check_ins: int
    most_common_emotion: Optional[EmotionCategory] = None
    average_intensity: Optional[float] = None
    emotional_valence: EmotionValence = EmotionValence.NEUTRAL
    intensity_level: EmotionIntensity = EmotionIntensity.MEDIUM  # from emotion categories, not the 0..1 field
    distribution: List[EmotionShare] = Field(default_factory=list)
    weekday_pattern: List[WeekdayPattern] = Field(default_factory=list)
    best_day: Optional[str] = None
    emotional_stability: str = "No Data"
    growth_area: str = "No Data"

    current_streak: int = 0
    streak_milestone: bool = False


class CheckInSummaryRequest(BaseModel):
    period: Period = Period.WEEK
    now: Optional[datetime] = None
    events: List[CheckInEvent] = Field(default_factory=list)


class StreakRequest(BaseModel):
    today: Optional[datetime] = None
    events: List[CheckInEvent] = Field(default_factory=list)


class StreakResponse(BaseModel):
    streak: int
    milestone: bool
    requires_today: bool
