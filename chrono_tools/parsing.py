"""Value types shared by the parsing layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from dateutil import tz

from .zones import resolve_zone


@dataclass(frozen=True)
class ParseRequest:
    raw: str
    timezone: str
    reference: datetime
    fuzzy: bool = False

    @property
    def zone(self) -> tzinfo:
        return resolve_zone(self.timezone)

    @property
    def reference_in_zone(self) -> datetime:
        return as_aware(self.reference, tz.UTC).astimezone(self.zone)


@dataclass(frozen=True)
class ParseOutcome:
    raw: str
    instant: Optional[datetime] = None
    layer: str = ""
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.instant is not None

    @classmethod
    def success(cls, raw: str, instant: datetime, layer: str) -> "ParseOutcome":
        return cls(raw=raw, instant=instant, layer=layer)

    @classmethod
    def failure(cls, raw: str, layer: str, reason: str) -> "ParseOutcome":
        return cls(raw=raw, layer=layer, reason=reason)


def as_aware(value: datetime, zone: tzinfo) -> datetime:
    """Attach ``zone`` to a naive wall time; aware values are converted to it."""
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)
