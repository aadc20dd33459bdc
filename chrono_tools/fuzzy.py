"""
fuzzy.py
--------
Layered timestamp resolution. Layers run in a fixed order and the first one
that produces an instant wins:

1. relative durations ("-14d", "2h30m")               fuzzy only
2. standard machine formats (RFC 3339, epochs, ...)   always
3. natural language ("3 days and 2 hours ago",
   "tomorrow at 3pm")                                 fuzzy only
4. strict layouts                                     always

Layers report failure through ``ParseOutcome`` instead of raising; only
``parse_fuzzy_timestamp`` turns a total failure into ``TimestampParseError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from dateutil import tz

from .errors import TimestampParseError
from .invocation_log import log
from .natural import match_phrase
from .parsing import ParseOutcome, ParseRequest, as_aware
from .relative import match_compound, match_short_unit
from .standard import standard_layer
from .strict import strict_layer
from .zones import now_in, resolve_zone

Layer = Callable[[str, ParseRequest], ParseOutcome]


def relative_layer(raw: str, request: ParseRequest) -> ParseOutcome:
    parsed = match_short_unit(raw, request.reference, request.zone)
    if parsed is None:
        return ParseOutcome.failure(raw, "relative", "not a duration")
    return ParseOutcome.success(raw, parsed, "relative")


def natural_layer(raw: str, request: ParseRequest) -> ParseOutcome:
    zone = request.zone
    reference = request.reference_in_zone
    parsed = match_compound(raw, reference, zone)
    if parsed is not None:
        return ParseOutcome.success(raw, parsed, "natural-compound")
    parsed = match_phrase(raw, reference, zone)
    if parsed is None:
        return ParseOutcome.failure(raw, "natural", "no natural-language match")
    return ParseOutcome.success(raw, parsed, "natural")


@dataclass(frozen=True)
class LayerSpec:
    name: str
    run: Layer
    fuzzy_only: bool


PARSE_LAYERS: List[LayerSpec] = [
    LayerSpec("relative", relative_layer, True),
    LayerSpec("standard", standard_layer, False),
    LayerSpec("natural", natural_layer, True),
    LayerSpec("strict", strict_layer, False),
]


def resolve(raw: str, request: ParseRequest) -> ParseOutcome:
    """Run the enabled layers in order and return the first success."""
    if not raw or not raw.strip():
        return ParseOutcome.failure(raw or "", "input", "empty timestamp")

    last = ParseOutcome.failure(raw, "input", "no layer enabled")
    for layer in PARSE_LAYERS:
        if layer.fuzzy_only and not request.fuzzy:
            continue
        outcome = layer.run(raw, request)
        if outcome.ok:
            log("Timestamp resolved", raw=raw, layer=outcome.layer)
            return outcome
        last = outcome
    log("Timestamp unresolved", raw=raw, fuzzy=request.fuzzy)
    return last


def build_request(
    raw: str,
    timezone: str,
    *,
    reference: Optional[datetime] = None,
    fuzzy: bool = False,
) -> ParseRequest:
    zone = resolve_zone(timezone)
    anchor = now_in(zone) if reference is None else as_aware(reference, tz.UTC)
    return ParseRequest(raw=raw, timezone=timezone.strip(), reference=anchor, fuzzy=fuzzy)


def parse_fuzzy_timestamp(
    raw: str,
    timezone: str,
    *,
    reference: Optional[datetime] = None,
    fuzzy: bool = False,
) -> datetime:
    """Resolve ``raw`` to an aware datetime in ``timezone`` or raise.

    Raises InvalidTimezoneError for an unknown zone (before any parsing) and
    TimestampParseError once every enabled layer has failed.
    """
    request = build_request(raw, timezone, reference=reference, fuzzy=fuzzy)
    outcome = resolve(raw, request)
    if not outcome.ok:
        raise TimestampParseError((raw or "").strip())
    return outcome.instant
