# apps/api/insights/services/streak_service.py

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Set

from insights.core import calendar
from insights.core.config import AnalyticsConfig
from insights.schemas.samples import CheckInEvent


MILESTONES = (7, 30)
ONE_DAY = timedelta(days=1)

_DEFAULT_CONFIG = AnalyticsConfig()


def active_days(events: Iterable[CheckInEvent]) -> Set[date]:
    return {calendar.calendar_day(e.timestamp) for e in events}


def current_streak(
    events: Iterable[CheckInEvent],
    today: datetime,
    config: Optional[AnalyticsConfig] = None,
) -> int:
    """
    Consecutive active calendar days walking back from `today`.

    With the default (lenient) policy a day without a check-in yet does not
    reset the streak: the walk then starts from yesterday. When
    config.streak_requires_today is set, an inactive today means 0.
    Events after `today` never count.
    """
    config = config or _DEFAULT_CONFIG
    days = active_days(events)
    if not days:
        return 0

    cursor = calendar.calendar_day(today)
    if cursor not in days:
        if config.streak_requires_today:
            return 0
        cursor -= ONE_DAY

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def is_milestone(streak: int) -> bool:
    return streak in MILESTONES
