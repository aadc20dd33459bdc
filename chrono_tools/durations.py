"""Human-readable rendering of second counts."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import List, Tuple

from .errors import InvalidStyleError

STYLES = ("full", "compact", "minimal")

PRECISE_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


def plural(n: int) -> str:
    return "" if n == 1 else "s"


def split_seconds(seconds: float) -> Tuple[int, int, int, int]:
    """Truncating (days, hours, minutes, seconds) decomposition."""
    whole = int(seconds)
    return int(seconds / 86400), (whole % 86400) // 3600, (whole % 3600) // 60, whole % 60


def format_duration(seconds: float, style: str = "full", is_negative: bool = False) -> str:
    """Render a non-negative second count; ``is_negative`` prefixes a ``-``.

    full     "1 day, 2 hours, 3 minutes, 4 seconds"
    compact  "1d 2h 3m 4s"
    minimal  "m:ss", "h:mm:ss" or "d:hh:mm:ss"
    """
    if style not in STYLES:
        raise InvalidStyleError(style, STYLES)
    days, hours, minutes, secs = split_seconds(seconds)

    if style == "minimal":
        if days > 0:
            text = f"{days}:{hours:02d}:{minutes:02d}:{secs:02d}"
        elif hours > 0:
            text = f"{hours}:{minutes:02d}:{secs:02d}"
        else:
            text = f"{minutes}:{secs:02d}"
    else:
        parts: List[str] = []
        for value, unit, short in (
            (days, "day", "d"),
            (hours, "hour", "h"),
            (minutes, "minute", "m"),
        ):
            if value > 0:
                parts.append(f"{value}{short}" if style == "compact" else f"{value} {unit}{plural(value)}")
        if secs > 0 or not parts:
            parts.append(f"{secs}s" if style == "compact" else f"{secs} second{plural(secs)}")
        text = (" " if style == "compact" else ", ").join(parts)

    if is_negative:
        text = "-" + text
    return text


def precise_timestamp(moment: datetime, zone: tzinfo) -> str:
    return moment.astimezone(zone).strftime(PRECISE_FORMAT)


def with_precise_timestamp(text: str, moment: datetime, zone: tzinfo) -> str:
    """Append the precise instant, e.g. ``2 hours (2025-08-12 17:00:00 UTC)``."""
    return f"{text} ({precise_timestamp(moment, zone)})"
