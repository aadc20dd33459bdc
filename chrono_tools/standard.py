"""
standard.py
-----------
Machine-generated timestamp formats (RFC 3339, Unix epochs, American numeric
dates, "Aug 12, 2025 3:00 PM", ...), resolved with ``dateutil.parser``.

dateutil is forgiving by design, so input is screened first: it must look like
a date and may only contain words from the timestamp vocabulary. Durations
("-14d") and prose ("3 days ago") never reach dateutil and are left to the
relative and natural-language layers.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

from dateutil import parser as duparser
from dateutil import tz

from .parsing import ParseOutcome, ParseRequest, as_aware

LAYER_NAME = "standard"

MONTH_WORDS = {
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept",
    "oct", "nov", "dec",
}
WEEKDAY_WORDS = {
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "mon", "tue", "tues", "wed", "thu", "thur", "thurs", "fri", "sat", "sun",
}
TIMESTAMP_WORDS = MONTH_WORDS | WEEKDAY_WORDS | {
    "am", "pm", "t", "z", "utc", "gmt", "st", "nd", "rd", "th", "at", "on", "of",
}

# ticks per second for each digit-only epoch length
EPOCH_DIGITS = {10: 1, 13: 1_000, 16: 1_000_000, 19: 1_000_000_000}
# digit-only calendar forms: YYYY, YYYYMMDD, YYYYMMDDhhmm, YYYYMMDDhhmmss
COMPACT_DIGITS = {4, 8, 12, 14}

_WORD_RE = re.compile(r"[A-Za-z]+")
_NUMERIC_DATE_RE = re.compile(r"\b\d{1,4}[/.-]\d{1,2}\b")
_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")
_ZONE_ABBR_RE = re.compile(r"^(?P<body>.+?(?:\d|[AaPp]\.?[Mm]\.?))\s+(?P<abbr>[A-Z]{2,4})$")


def _looks_like_date(text: str, words: list) -> bool:
    if _YEAR_RE.search(text) or _NUMERIC_DATE_RE.search(text):
        return True
    return any(word in MONTH_WORDS for word in words)


def _from_epoch(digits: str) -> datetime:
    divisor = EPOCH_DIGITS[len(digits)]
    seconds, remainder = divmod(int(digits), divisor)
    micros = remainder * 1_000_000 // divisor
    return datetime.fromtimestamp(seconds, tz.UTC) + timedelta(microseconds=micros)


def match_standard(raw: str, request: ParseRequest) -> Optional[datetime]:
    text = raw.strip()
    if not text:
        return None
    zone = request.zone

    if text.isdigit() and len(text) in EPOCH_DIGITS:
        try:
            return _from_epoch(text).astimezone(zone)
        except (OverflowError, OSError, ValueError):
            return None

    abbr_match = _ZONE_ABBR_RE.match(text)
    if abbr_match and abbr_match.group("abbr").lower() not in TIMESTAMP_WORDS:
        text = abbr_match.group("body")

    words = [word.lower() for word in _WORD_RE.findall(text)]
    if any(word not in TIMESTAMP_WORDS for word in words):
        return None
    if text.isdigit():
        if len(text) not in COMPACT_DIGITS:
            return None
    elif not _looks_like_date(text, words):
        return None

    reference = request.reference_in_zone
    default = datetime(reference.year, 1, 1)
    try:
        parsed = duparser.parse(text, default=default, dayfirst=False)
    except (ValueError, OverflowError):
        return None
    return as_aware(parsed, zone)


def standard_layer(raw: str, request: ParseRequest) -> ParseOutcome:
    parsed = match_standard(raw, request)
    if parsed is None:
        return ParseOutcome.failure(raw, LAYER_NAME, "not a recognised timestamp format")
    return ParseOutcome.success(raw, parsed, LAYER_NAME)
