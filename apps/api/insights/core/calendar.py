from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List

from insights.schemas.series import BucketUnit


# Calendar primitives shared by bucketing, streaks and summaries.
# Timestamps are taken as already normalised (UTC or a caller-chosen zone);
# nothing here converts between zones, tzinfo is carried through unchanged.


def start_of_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def calendar_day(ts: datetime) -> date:
    return ts.date()


def align(ts: datetime, unit: BucketUnit) -> datetime:
    """Start of the calendar-aligned bucket of `unit` containing `ts`."""
    if unit is BucketUnit.HOUR:
        return ts.replace(minute=0, second=0, microsecond=0)
    if unit is BucketUnit.DAY:
        return start_of_day(ts)
    if unit is BucketUnit.WEEK:
        # ISO weeks: Monday 00:00
        day = start_of_day(ts)
        return day - timedelta(days=day.weekday())
    if unit is BucketUnit.MONTH:
        return start_of_day(ts).replace(day=1)
    raise ValueError(f"unknown bucket unit: {unit!r}")


def shift(anchor: datetime, unit: BucketUnit, steps: int) -> datetime:
    """Move an aligned bucket start by `steps` buckets (negative goes back)."""
    if unit is BucketUnit.HOUR:
        return anchor + timedelta(hours=steps)
    if unit is BucketUnit.DAY:
        return anchor + timedelta(days=steps)
    if unit is BucketUnit.WEEK:
        return anchor + timedelta(weeks=steps)
    if unit is BucketUnit.MONTH:
        months = anchor.year * 12 + (anchor.month - 1) + steps
        return anchor.replace(year=months // 12, month=months % 12 + 1)
    raise ValueError(f"unknown bucket unit: {unit!r}")


def bucket_starts(now: datetime, unit: BucketUnit, count: int) -> List[datetime]:
    """
    Starts of the `count` consecutive buckets ending with the one containing
    `now`, oldest first.
    """
    last = align(now, unit)
    return [shift(last, unit, i - (count - 1)) for i in range(count)]
