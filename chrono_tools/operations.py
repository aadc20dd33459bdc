"""
operations.py
-------------
The externally callable time tools. Every function takes the timezone and the
fuzzy flag explicitly, accepts an overridable ``now`` and returns a
JSON-serialisable dict.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from dateutil import tz

from . import durations
from .context import (
    clock_12h,
    context_bucket,
    describe,
    relative_day,
    time_of_day,
    typical_activity,
)
from .errors import InvalidUnitError
from .fuzzy import parse_fuzzy_timestamp
from .invocation_log import log
from .zones import (
    POPULAR_TIMEZONES,
    all_timezone_ids,
    format_offset,
    now_in,
    resolve_zone,
    zone_name,
)

DIFFERENCE_UNITS = {"seconds": 1, "minutes": 60, "hours": 3600, "days": 86400}
ELAPSED_ADD_UNITS = {"seconds": 1, "minutes": 60, "hours": 3600}
CALENDAR_ADD_UNITS = {"days": 1, "weeks": 7}

POPULAR_LIMIT = 25
PAGE_LIMIT = 100

DATE_ONLY_LENGTH = len("YYYY-MM-DD")


def rfc3339(moment: datetime) -> str:
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        return text[:-6] + "Z"
    return text


def _resolve_now(now: Optional[datetime], zone) -> datetime:
    if now is None:
        return now_in(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz.UTC)
    return now.astimezone(zone)


def _seconds_between(start: datetime, end: datetime) -> float:
    return (end.astimezone(tz.UTC) - start.astimezone(tz.UTC)).total_seconds()


def current_datetime(timezone: str, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    zone = resolve_zone(timezone)
    moment = _resolve_now(now, zone)
    return {
        "iso": rfc3339(moment),
        "formatted": durations.precise_timestamp(moment, zone),
        "day_of_week": f"{moment:%A}",
        "timezone": zone_name(zone),
    }


def time_difference(
    timestamp1: str,
    timestamp2: str,
    *,
    unit: str = "auto",
    timezone: str = "UTC",
    fuzzy: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    unit = (unit or "auto").strip().lower()
    if unit != "auto" and unit not in DIFFERENCE_UNITS:
        raise InvalidUnitError(unit, ["auto", *DIFFERENCE_UNITS])
    zone = resolve_zone(timezone)
    reference = _resolve_now(now, zone)

    start = parse_fuzzy_timestamp(timestamp1, timezone, reference=reference, fuzzy=fuzzy)
    end = parse_fuzzy_timestamp(timestamp2, timezone, reference=reference, fuzzy=fuzzy)

    seconds = _seconds_between(start, end)
    is_negative = seconds < 0
    text = durations.format_duration(abs(seconds), "full", is_negative)
    result: Dict[str, Any] = {
        "seconds": seconds,
        "formatted": durations.with_precise_timestamp(text, end, zone),
        "is_negative": is_negative,
    }
    if unit != "auto":
        result["requested_unit"] = seconds / DIFFERENCE_UNITS[unit]
    return result


def time_since(
    timestamp: str,
    *,
    timezone: str = "UTC",
    fuzzy: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    zone = resolve_zone(timezone)
    reference = _resolve_now(now, zone)
    moment = parse_fuzzy_timestamp(timestamp, timezone, reference=reference, fuzzy=fuzzy)

    seconds = _seconds_between(moment, reference)
    is_negative = seconds < 0
    text = durations.format_duration(abs(seconds), "full", is_negative)
    return {
        "seconds": seconds,
        "formatted": durations.with_precise_timestamp(text, reference, zone),
        "context": context_bucket(moment, reference, seconds).value,
        "timezone": zone_name(zone),
    }


def parse_timestamp(
    timestamp: str,
    *,
    target_timezone: str = "UTC",
    source_timezone: Optional[str] = None,
    fuzzy: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    target_zone = resolve_zone(target_timezone)
    parse_tz = source_timezone or target_timezone
    reference = _resolve_now(now, resolve_zone(parse_tz))

    moment = parse_fuzzy_timestamp(timestamp, parse_tz, reference=reference, fuzzy=fuzzy)
    if source_timezone and source_timezone != target_timezone:
        moment = moment.astimezone(target_zone)
        log("Timestamp reprojected", source=source_timezone, target=target_timezone)

    return {
        "iso": rfc3339(moment),
        "unix": str(calendar.timegm(moment.utctimetuple())),
        "human": f"{moment:%B} {moment.day}, {moment.year} at {clock_12h(moment)} {moment:%Z}",
        "timezone": target_timezone,
        "day_of_week": f"{moment:%A}",
        "date": f"{moment:%Y-%m-%d}",
        "time": f"{moment:%H:%M:%S}",
        "source_timezone": parse_tz,
    }


def add_time(
    timestamp: str,
    duration: float,
    unit: str,
    *,
    timezone: str = "UTC",
    fuzzy: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    unit = (unit or "").strip().lower()
    if unit not in ELAPSED_ADD_UNITS and unit not in CALENDAR_ADD_UNITS:
        raise InvalidUnitError(unit, [*ELAPSED_ADD_UNITS, *CALENDAR_ADD_UNITS])
    zone = resolve_zone(timezone)
    reference = _resolve_now(now, zone)

    moment = parse_fuzzy_timestamp(timestamp, timezone, reference=reference, fuzzy=fuzzy)
    is_date_only = len(timestamp.strip()) == DATE_ONLY_LENGTH

    if unit in ELAPSED_ADD_UNITS:
        elapsed = timedelta(seconds=float(duration) * ELAPSED_ADD_UNITS[unit])
        shifted = (moment.astimezone(tz.UTC) + elapsed).astimezone(zone)
    else:
        # wall-clock days in the target zone
        shifted = moment.astimezone(zone) + timedelta(days=float(duration) * CALENDAR_ADD_UNITS[unit])

    return {
        "result": f"{shifted:%Y-%m-%d}" if is_date_only else f"{shifted:%Y-%m-%d %H:%M:%S}",
        "iso": rfc3339(shifted),
        "description": describe(shifted, reference, is_date_only),
    }


def timestamp_context(
    timestamp: str,
    *,
    timezone: str = "UTC",
    fuzzy: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    zone = resolve_zone(timezone)
    reference = _resolve_now(now, zone)
    moment = parse_fuzzy_timestamp(timestamp, timezone, reference=reference, fuzzy=fuzzy).astimezone(zone)

    hour = moment.hour
    is_weekend = moment.weekday() >= 5
    is_business_hours = not is_weekend and 9 <= hour < 17
    return {
        "time_of_day": time_of_day(hour),
        "day_of_week": f"{moment:%A}",
        "is_weekend": is_weekend,
        "is_business_hours": is_business_hours,
        "hour_24": hour,
        "typical_activity": typical_activity(hour, is_business_hours),
        "relative_day": relative_day(moment, reference),
    }


def format_duration(
    seconds: float,
    style: str = "full",
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    style = (style or "full").strip().lower()
    seconds = float(seconds)
    is_negative = seconds < 0
    magnitude = abs(seconds)
    text = durations.format_duration(magnitude, style, is_negative)

    reference = _resolve_now(now, tz.UTC)
    shift = timedelta(seconds=int(magnitude))
    target = reference - shift if is_negative else reference + shift
    return {
        "formatted": text,
        "style": style,
        "is_negative": is_negative,
        "precise_time": durations.precise_timestamp(target, tz.UTC),
    }


def _zone_entry(zone_id: str, now: datetime) -> Optional[Dict[str, Any]]:
    try:
        local = now.astimezone(resolve_zone(zone_id))
    except ValueError:
        return None
    offset = int(local.utcoffset().total_seconds())
    return {
        "id": zone_id,
        "name": zone_name(local.tzinfo),
        "offset": offset / 3600,
        "offset_str": format_offset(offset),
        "current_time": f"{local:%Y-%m-%d %H:%M:%S %Z}",
    }


def list_timezones(
    filter_text: str = "",
    limit: int = 0,
    page: int = 0,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    filter_text = filter_text or ""
    limit = int(limit or 0)
    page = int(page or 0)
    using_popular = limit <= 0 and not filter_text and page <= 0

    if limit <= 0:
        limit = POPULAR_LIMIT if using_popular else PAGE_LIMIT
    limit = min(limit, PAGE_LIMIT)
    page = max(page, 1)

    catalog = all_timezone_ids()
    source = POPULAR_TIMEZONES if using_popular else catalog
    needle = filter_text.lower()
    matching = [zone_id for zone_id in source if not needle or needle in zone_id.lower()]

    total = len(matching)
    start = (page - 1) * limit
    selected = matching[start:start + limit]

    moment = _resolve_now(now, tz.UTC)
    entries: List[Dict[str, Any]] = []
    for zone_id in selected:
        entry = _zone_entry(zone_id, moment)
        if entry is not None:
            entries.append(entry)

    total_pages = (total + limit - 1) // limit
    return {
        "total_available": len(catalog),
        "total_filtered": total,
        "returned_count": len(entries),
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
        "filter": filter_text,
        "using_popular": using_popular,
        "timezones": entries,
    }
