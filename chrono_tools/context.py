"""
context.py
----------
Coarse descriptions of where an instant sits relative to a reference:
elapsed-time buckets, day/time phrases and time-of-day labels.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from dateutil import tz


class ContextBucket(str, Enum):
    FUTURE = "in the future"
    JUST_NOW = "just now"
    EARLIER = "earlier"
    EARLIER_TODAY = "earlier today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this week"
    THIS_MONTH = "this month"
    A_WHILE_AGO = "a while ago"


MINUTE = 60
HOUR = 3600
DAY = 86400
TWO_DAYS = 172800
WEEK = 604800
THIRTY_DAYS = 2592000


def context_bucket(target: datetime, reference: datetime, seconds: float) -> ContextBucket:
    """Bucket a signed difference (positive when ``target`` precedes ``reference``).

    The "earlier today" test compares day-of-month numbers only, so instants
    in different months that share a day number are treated as the same day.
    """
    elapsed = abs(seconds)
    if seconds < 0:
        return ContextBucket.FUTURE
    if elapsed < MINUTE:
        return ContextBucket.JUST_NOW
    if elapsed < HOUR:
        return ContextBucket.EARLIER
    if elapsed < DAY:
        if target.day == reference.day:
            return ContextBucket.EARLIER_TODAY
        return ContextBucket.YESTERDAY
    if elapsed < TWO_DAYS:
        return ContextBucket.YESTERDAY
    if elapsed < WEEK:
        return ContextBucket.THIS_WEEK
    if elapsed < THIRTY_DAYS:
        return ContextBucket.THIS_MONTH
    return ContextBucket.A_WHILE_AGO


def days_between(target: datetime, reference: datetime) -> int:
    """Whole days from reference to target, truncated toward zero."""
    hours = (target.astimezone(tz.UTC) - reference.astimezone(tz.UTC)).total_seconds() / 3600
    return int(hours / 24)


def clock_12h(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def describe(target: datetime, reference: datetime, is_date_only: bool = False) -> str:
    days = days_between(target, reference)
    if days == 0:
        day_desc = "today"
    elif days == 1:
        day_desc = "tomorrow"
    elif days == -1:
        day_desc = "yesterday"
    elif 2 <= days <= 7:
        day_desc = f"next {target:%A}"
    elif -7 <= days <= -2:
        day_desc = f"last {target:%A}"
    else:
        day_desc = f"{target:%B} {target.day}, {target.year}"

    if is_date_only:
        return day_desc
    return f"{day_desc} at {clock_12h(target)}"


def relative_day(target: datetime, reference: datetime) -> Optional[str]:
    return {0: "today", -1: "yesterday", 1: "tomorrow"}.get(days_between(target, reference))


def time_of_day(hour: int) -> str:
    if 5 <= hour < 9:
        return "early_morning"
    if 9 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "late_night"


def typical_activity(hour: int, is_business_hours: bool) -> str:
    if 6 <= hour < 9:
        return "commute_time"
    if 12 <= hour < 13:
        return "lunch_time"
    if 17 <= hour < 19:
        return "commute_time"
    if 19 <= hour < 21:
        return "dinner_time"
    if hour >= 22 or hour < 6:
        return "sleeping_time"
    if is_business_hours:
        return "work_time"
    return "leisure_time"
