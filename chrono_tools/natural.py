"""
natural.py
----------
English natural-language time expressions ("tomorrow at 3pm", "next Monday",
"3 days ago", "in 2 hours") resolved against a reference instant.

A few day-anchored phrases are handled by explicit rules so their result does
not depend on dateparser's heuristics; everything else is delegated to
``dateparser`` with the reference as RELATIVE_BASE. dateparser wants that base
as naive wall time in the zone named by TIMEZONE; an aware base makes it drop
clock-only phrases ("3pm", "noon") outside UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, tzinfo
from typing import Optional, Tuple

import dateparser

from .parsing import as_aware
from .zones import zone_name

WEEKDAYS_EN = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

WORD_NUMS = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

DAY_OFFSETS = {"today": 0, "tomorrow": 1, "yesterday": -1}

_UNIT_WORDS = r"(?:second|minute|hour|day|week|month|year)s?"

_WORDNUM_RE = re.compile(
    r"\b(" + "|".join(map(re.escape, WORD_NUMS.keys())) + r")\b(?=\s+" + _UNIT_WORDS + r"\b)",
    re.IGNORECASE,
)

ORDINAL_SUFFIX_RE = re.compile(r"(?<=\d)(st|nd|rd|th)\b", re.IGNORECASE)

_CLOCK_TAIL = r"(?:\s+(?:at\s+)?(?P<clock>.+))?"

DAY_WORD_RE = re.compile(r"^(?P<day>today|tomorrow|yesterday)" + _CLOCK_TAIL + r"$", re.IGNORECASE)

RELATIVE_WEEKDAY_RE = re.compile(
    r"^(?P<dir>next|last|this)\s+(?P<wday>" + "|".join(WEEKDAYS_EN) + r")" + _CLOCK_TAIL + r"$",
    re.IGNORECASE,
)

CLOCK_RE = re.compile(
    r"^(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?::(?P<second>\d{2}))?"
    r"\s*(?P<meridiem>[ap])?\.?(?:m\.?)?$",
    re.IGNORECASE,
)

DATEPARSER_LANGUAGES = ["en"]

MIN_NUMERIC_LEN = 4


def normalize_phrase(text: str) -> str:
    s = " ".join(text.strip().split())

    def wordnum_to_digit(match: re.Match) -> str:
        return str(WORD_NUMS[match.group(0).lower()])

    s = _WORDNUM_RE.sub(wordnum_to_digit, s)
    return ORDINAL_SUFFIX_RE.sub("", s)


def parse_clock(text: str) -> Optional[Tuple[int, int, int]]:
    """Parse "3pm", "3:30 PM", "15:04", "noon" or "midnight" into (h, m, s)."""
    cleaned = text.strip().lower()
    if cleaned == "noon":
        return 12, 0, 0
    if cleaned == "midnight":
        return 0, 0, 0
    match = CLOCK_RE.match(cleaned)
    if not match:
        return None
    has_minutes = match.group("minute") is not None
    meridiem = match.group("meridiem")
    if not has_minutes and not meridiem:
        # a bare number is not a clock time
        return None
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    second = int(match.group("second") or 0)
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        hour = hour % 12 + (12 if meridiem == "p" else 0)
    if hour > 23 or minute > 59 or second > 59:
        return None
    return hour, minute, second


def _with_clock(day: datetime, clock: Optional[str]) -> Optional[datetime]:
    if not clock:
        return day
    parts = parse_clock(clock)
    if parts is None:
        return None
    hour, minute, second = parts
    return day.replace(hour=hour, minute=minute, second=second, microsecond=0)


def _weekday_shift(reference: datetime, direction: str, weekday_name: str) -> int:
    target_index = WEEKDAYS_EN.index(weekday_name)
    if direction == "last":
        days_back = (reference.weekday() - target_index) % 7
        return -(days_back or 7)
    days_ahead = (target_index - reference.weekday()) % 7
    return days_ahead or 7


def _match_rules(text: str, reference: datetime) -> Optional[datetime]:
    match = DAY_WORD_RE.match(text)
    if match:
        day = reference + timedelta(days=DAY_OFFSETS[match.group("day").lower()])
        return _with_clock(day, match.group("clock"))

    match = RELATIVE_WEEKDAY_RE.match(text)
    if match:
        shift = _weekday_shift(reference, match.group("dir").lower(), match.group("wday").lower())
        return _with_clock(reference + timedelta(days=shift), match.group("clock"))
    return None


def match_phrase(raw: str, reference: datetime, zone: tzinfo) -> Optional[datetime]:
    """Resolve one natural-language phrase; ``None`` when nothing matched."""
    text = normalize_phrase(raw)
    if not text:
        return None
    if text.isdigit() and len(text) < MIN_NUMERIC_LEN:
        # a lone short number is neither a date nor a clock time
        return None
    local_reference = reference.astimezone(zone)

    ruled = _match_rules(text, local_reference)
    if ruled is not None:
        return ruled.astimezone(zone)

    try:
        parsed = dateparser.parse(
            text,
            languages=DATEPARSER_LANGUAGES,
            settings={
                "RELATIVE_BASE": local_reference.replace(tzinfo=None),
                "TIMEZONE": zone_name(zone),
                "RETURN_AS_TIMEZONE_AWARE": True,
            },
        )
    except (ValueError, OverflowError):
        return None
    if parsed is None:
        return None
    return as_aware(parsed, zone)
