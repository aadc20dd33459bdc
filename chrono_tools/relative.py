"""
relative.py
-----------
Offsets from a reference instant.

Short-unit form
    Elapsed durations in the familiar ``2h30m`` / ``-5s`` / ``1.5h`` / ``300ms``
    notation are added as absolute time. ``-14d``, ``2w``, ``-1M`` and ``1y``
    move the calendar instead: days and weeks shift the wall-clock date in the
    target zone, months and years use ``relativedelta`` (month ends clamp).

Compound form
    ``"3 days and 2 hours ago"``: both halves are resolved independently by the
    natural-language grammar against the same reference, and their offsets are
    summed. A half that does not resolve fails the whole expression.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, tzinfo
from decimal import Decimal
from typing import Optional

from dateutil import tz
from dateutil.relativedelta import relativedelta

from .natural import match_phrase

ELAPSED_UNITS = {
    "ns": Decimal("1e-9"),
    "us": Decimal("1e-6"),
    "µs": Decimal("1e-6"),
    "μs": Decimal("1e-6"),
    "ms": Decimal("1e-3"),
    "s": Decimal(1),
    "m": Decimal(60),
    "h": Decimal(3600),
}

_UNIT_ALT = "|".join(sorted(map(re.escape, ELAPSED_UNITS), key=len, reverse=True))
_ELAPSED_PART = r"(?:\d+(?:\.\d*)?|\.\d+)(?:" + _UNIT_ALT + r")"
ELAPSED_RE = re.compile(r"^(?P<sign>[+-]?)(?P<body>(?:" + _ELAPSED_PART + r")+)$")
ELAPSED_PART_RE = re.compile(r"(?P<value>\d+(?:\.\d*)?|\.\d+)(?P<unit>" + _UNIT_ALT + r")")

CALENDAR_RE = re.compile(r"^(-?)(\d+)([dwMy])$")

COMPOUND_RE = re.compile(r"^(.+?)\s+and\s+(.+?)(\s+ago)?$", re.IGNORECASE)


def parse_elapsed(text: str) -> Optional[timedelta]:
    """Parse Go-style duration text ("2h30m", "-1.5h", "0") into a timedelta."""
    text = text.strip()
    if text in {"0", "+0", "-0"}:
        return timedelta(0)
    match = ELAPSED_RE.match(text)
    if not match:
        return None
    total = Decimal(0)
    for part in ELAPSED_PART_RE.finditer(match.group("body")):
        total += Decimal(part.group("value")) * ELAPSED_UNITS[part.group("unit")]
    if match.group("sign") == "-":
        total = -total
    # timedelta keeps microseconds; finer units are truncated
    return timedelta(microseconds=int(total * 1_000_000))


def shift_calendar(reference: datetime, value: int, unit: str) -> datetime:
    if unit == "d":
        return reference + timedelta(days=value)
    if unit == "w":
        return reference + timedelta(weeks=value)
    if unit == "M":
        return reference + relativedelta(months=value)
    if unit == "y":
        return reference + relativedelta(years=value)
    raise ValueError(f"unsupported duration unit: {unit}")


def match_short_unit(raw: str, reference: datetime, zone: tzinfo) -> Optional[datetime]:
    """Resolve "-14d", "2h30m" and friends; ``None`` for anything else."""
    text = raw.strip()
    if not text:
        return None
    local_reference = reference.astimezone(zone)

    try:
        elapsed = parse_elapsed(text)
        if elapsed is not None:
            return (local_reference.astimezone(tz.UTC) + elapsed).astimezone(zone)
    except OverflowError:
        return None

    match = CALENDAR_RE.match(text)
    if not match:
        return None
    value = int(match.group(2))
    if match.group(1) == "-":
        value = -value
    try:
        return shift_calendar(local_reference, value, match.group(3))
    except (OverflowError, ValueError):
        return None


def match_compound(raw: str, reference: datetime, zone: tzinfo) -> Optional[datetime]:
    """Resolve "X and Y [ago]" by summing the offsets of both halves."""
    match = COMPOUND_RE.match(raw.strip())
    if not match:
        return None
    first = match.group(1).strip()
    second = match.group(2).strip()
    if match.group(3):
        first += " ago"
        second += " ago"

    anchor = reference.astimezone(tz.UTC)
    first_instant = match_phrase(first, reference, zone)
    if first_instant is None:
        return None
    second_instant = match_phrase(second, reference, zone)
    if second_instant is None:
        return None

    combined = (first_instant.astimezone(tz.UTC) - anchor) + (second_instant.astimezone(tz.UTC) - anchor)
    return (anchor + combined).astimezone(zone)
