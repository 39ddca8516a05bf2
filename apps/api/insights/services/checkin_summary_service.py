# apps/api/insights/services/checkin_summary_service.py

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from insights.core.config import AnalyticsConfig
from insights.schemas.checkins import CheckInSummary, EmotionShare, WeekdayPattern
from insights.schemas.samples import CheckInEvent, EmotionCategory, EmotionIntensity, EmotionValence
from insights.schemas.series import Period
from insights.services.streak_service import current_streak, is_milestone


WEEKDAY_SHORT = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

NO_DATA = "No Data"

_DEFAULT_CONFIG = AnalyticsConfig()


def _sunday_index(ts: datetime) -> int:
    # datetime.weekday(): Monday=0 .. Sunday=6
    return (ts.weekday() + 1) % 7


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return math.fsum(values) / len(values)


def most_common_emotion(emotions: Sequence[EmotionCategory]) -> Optional[EmotionCategory]:
    if not emotions:
        return None
    counts = Counter(emotions)
    top = max(counts.values())
    # ties -> declaration order
    for e in EmotionCategory:
        if counts.get(e, 0) == top:
            return e
    return None


def emotion_distribution(emotions: Sequence[EmotionCategory]) -> List[EmotionShare]:
    total = len(emotions)
    if total == 0:
        return []
    counts = Counter(emotions)
    out: List[EmotionShare] = []
    for e in EmotionCategory:
        pct = (counts.get(e, 0) * 100) // total
        if pct > 0:
            out.append(EmotionShare(emotion=e, percentage=pct))
    return out


def emotional_valence(emotions: Sequence[EmotionCategory]) -> EmotionValence:
    """Positive or negative only when that valence holds a strict majority."""
    total = len(emotions)
    if total == 0:
        return EmotionValence.NEUTRAL
    counts = Counter(e.valence for e in emotions)
    if counts[EmotionValence.POSITIVE] / total > 0.5:
        return EmotionValence.POSITIVE
    if counts[EmotionValence.NEGATIVE] / total > 0.5:
        return EmotionValence.NEGATIVE
    return EmotionValence.NEUTRAL


def intensity_level(emotions: Sequence[EmotionCategory]) -> EmotionIntensity:
    total = len(emotions)
    if total == 0:
        return EmotionIntensity.MEDIUM
    counts = Counter(e.intensity for e in emotions)
    if counts[EmotionIntensity.HIGH] / total > 0.4:
        return EmotionIntensity.HIGH
    if counts[EmotionIntensity.MEDIUM] / total > 0.4:
        return EmotionIntensity.MEDIUM
    return EmotionIntensity.LOW


def weekday_pattern(events: Sequence[CheckInEvent]) -> List[WeekdayPattern]:
    counts = [0] * 7
    intensities: List[List[float]] = [[] for _ in range(7)]
    for e in events:
        i = _sunday_index(e.timestamp)
        counts[i] += 1
        if e.intensity is not None:
            intensities[i].append(float(e.intensity))

    return [
        WeekdayPattern(
            day_of_week=WEEKDAY_SHORT[i],
            count=counts[i],
            average_intensity=_mean(intensities[i]),
            has_data=counts[i] > 0,
        )
        for i in range(7)
    ]


def best_day(events: Sequence[CheckInEvent]) -> Optional[str]:
    if not events:
        return None
    counts = Counter(_sunday_index(e.timestamp) for e in events)
    top = max(counts.values())
    for i in range(7):
        if counts.get(i, 0) == top:
            return WEEKDAY_NAMES[i]
    return None


def emotional_stability(emotions: Sequence[EmotionCategory]) -> str:
    unique = len(set(emotions))
    if unique <= 1:
        return "Very Stable"
    if unique <= 3:
        return "Stable"
    if unique <= 5:
        return "Variable"
    return "Dynamic"


def growth_area(events: Sequence[CheckInEvent]) -> str:
    if not events:
        return NO_DATA
    negative = sum(1 for e in events if e.emotion is not None and e.emotion.is_negative)
    share = negative / len(events)
    if share > 0.5:
        return "Emotional Regulation"
    if share > 0.3:
        return "Stress Management"
    return "Emotional Awareness"


def summarize_checkins(
    events: Sequence[CheckInEvent],
    period: Period,
    now: datetime,
    config: Optional[AnalyticsConfig] = None,
) -> CheckInSummary:
    """
    Longitudinal check-in metrics over the trailing window for `period`.

    Everything except the streak and weekly_check_ins looks only at events
    inside [now - summary_days[period], now]. weekly_check_ins always covers
    the trailing 7 days and the streak looks at all events.
    """
    config = config or _DEFAULT_CONFIG
    period = Period(period)
    window_start = now - timedelta(days=int(config.summary_days[period]))
    week_start = now - timedelta(days=7)

    in_window = [e for e in events if window_start <= e.timestamp <= now]
    emotions = [e.emotion for e in in_window if e.emotion is not None]
    intensities = [float(e.intensity) for e in in_window if e.intensity is not None]

    streak = current_streak(events, now, config)

    return CheckInSummary(
        period=period,
        window_start=window_start,
        window_end=now,
        total_check_ins=len(in_window),
        weekly_check_ins=sum(1 for e in events if week_start <= e.timestamp <= now),
        most_common_emotion=most_common_emotion(emotions),
        average_intensity=_mean(intensities),
        emotional_valence=emotional_valence(emotions),
        intensity_level=intensity_level(emotions),
        distribution=emotion_distribution(emotions),
        weekday_pattern=weekday_pattern(in_window),
        best_day=best_day(in_window),
        emotional_stability=emotional_stability(emotions) if in_window else NO_DATA,
        growth_area=growth_area(in_window),
        current_streak=streak,
        streak_milestone=is_milestone(streak),
    )
