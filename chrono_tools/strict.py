"""
strict.py
---------
Format-of-last-resort parser. A short, ordered list of explicit layouts; the
first one that matches wins. Zone-bearing layouts are converted into the target
zone, zone-less layouts are read as wall time in the target zone.

The layouts go through ``strptime``, which is not fixed-width: single-digit
fields ("2025-8-1") and one to six fractional digits are accepted.
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Optional

from .errors import TimestampParseError
from .parsing import ParseOutcome, ParseRequest, as_aware
from .zones import resolve_zone

LAYER_NAME = "strict"

# (layout, carries its own offset)
STRICT_LAYOUTS = [
    ("%Y-%m-%dT%H:%M:%S%z", True),
    ("%Y-%m-%dT%H:%M:%S.%f%z", True),
    ("%Y-%m-%dT%H:%M:%S", False),
    ("%Y-%m-%dT%H:%M:%S.%f", False),
    ("%Y-%m-%d %H:%M:%S", False),
    ("%Y-%m-%d", False),
]
LEGACY_LAYOUT = "%Y-%m-%d %H:%M:%S"
MAX_SUFFIX_LEN = 4

# strptime's %f stops at microseconds; anything finer is truncated.
_SUBMICRO_RE = re.compile(r"(\.\d{6})\d+")


def _try_layout(text: str, layout: str) -> Optional[datetime]:
    try:
        return datetime.strptime(text, layout)
    except ValueError:
        return None


def match_strict(raw: str, zone: tzinfo) -> Optional[datetime]:
    text = raw.strip()
    if not text:
        return None
    trimmed = _SUBMICRO_RE.sub(r"\1", text)

    for layout, has_offset in STRICT_LAYOUTS:
        candidate = trimmed if "%f" in layout else text
        parsed = _try_layout(candidate, layout)
        if parsed is None:
            continue
        if has_offset:
            return parsed.astimezone(zone)
        return as_aware(parsed, zone)

    # "2025-07-19 08:45:40 PST": the abbreviation is dropped, the target zone wins.
    parts = text.split()
    if len(parts) == 3 and len(parts[2]) <= MAX_SUFFIX_LEN:
        parsed = _try_layout(f"{parts[0]} {parts[1]}", LEGACY_LAYOUT)
        if parsed is not None:
            return as_aware(parsed, zone)
    return None


def parse_strict(raw: str, timezone: str) -> datetime:
    zone = resolve_zone(timezone)
    parsed = match_strict(raw, zone)
    if parsed is None:
        raise TimestampParseError(raw.strip())
    return parsed


def strict_layer(raw: str, request: ParseRequest) -> ParseOutcome:
    parsed = match_strict(raw, request.zone)
    if parsed is None:
        return ParseOutcome.failure(raw, LAYER_NAME, "no strict layout matched")
    return ParseOutcome.success(raw, parsed, LAYER_NAME)
