"""
zones.py
--------
Timezone lookup helpers: strict IANA resolution, best-effort detection of the
host's zone, and the catalog used by ``list_timezones``.
"""

from __future__ import annotations

import os
from datetime import datetime, tzinfo
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from dateutil import tz

from .errors import InvalidTimezoneError

UTC_NAME = "UTC"

POPULAR_TIMEZONES = [
    "UTC",
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Toronto",
    "America/Mexico_City",
    "America/Sao_Paulo",
    "America/Buenos_Aires",
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "Europe/Rome",
    "Europe/Amsterdam",
    "Europe/Zurich",
    "Europe/Stockholm",
    "Europe/Moscow",
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Asia/Hong_Kong",
    "Asia/Singapore",
    "Asia/Kolkata",
    "Asia/Dubai",
    "Australia/Sydney",
    "Pacific/Auckland",
]

_TIMEZONE_FILES = ("/etc/timezone", "/etc/TIMEZONE")
_LOCALTIME_LINK = "/etc/localtime"


def resolve_zone(name: str) -> ZoneInfo:
    """Return the zone for an IANA identifier, raising InvalidTimezoneError otherwise."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidTimezoneError(str(name), "empty timezone identifier")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(name, exc) from exc


def zone_name(zone: tzinfo) -> str:
    return getattr(zone, "key", None) or str(zone)


def now_in(zone: tzinfo) -> datetime:
    return datetime.now(tz.UTC).astimezone(zone)


def _valid_name(candidate: Optional[str]) -> Optional[str]:
    if not candidate:
        return None
    candidate = candidate.strip().lstrip(":")
    if not candidate:
        return None
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return candidate


def detect_system_timezone() -> str:
    """Best-effort IANA name of the host timezone; falls back to UTC."""
    found = _valid_name(os.environ.get("TZ"))
    if found:
        return found

    for path in _TIMEZONE_FILES:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError:
            continue
        for line in content.splitlines():
            line = line.split("#", 1)[0]
            if "=" in line:
                key, _, value = line.partition("=")
                if key.strip().upper() not in {"TZ", "ZONE", "TIMEZONE"}:
                    continue
                line = value.strip().strip('"')
            found = _valid_name(line)
            if found:
                return found

    try:
        target = os.path.realpath(_LOCALTIME_LINK)
    except OSError:
        target = ""
    marker = "zoneinfo" + os.sep
    if marker in target:
        found = _valid_name(target.split(marker, 1)[1])
        if found:
            return found

    return UTC_NAME


def all_timezone_ids() -> List[str]:
    return sorted(available_timezones())


def format_offset(offset_seconds: int) -> str:
    if offset_seconds == 0:
        return "+00:00"
    sign = "+"
    if offset_seconds < 0:
        sign = "-"
        offset_seconds = -offset_seconds
    hours = offset_seconds // 3600
    minutes = (offset_seconds % 3600) // 60
    return f"{sign}{hours:02d}:{minutes:02d}"
