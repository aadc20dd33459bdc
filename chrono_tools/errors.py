"""Errors surfaced by chrono_tools operations."""

from __future__ import annotations

from typing import Sequence

ACCEPTED_FORMAT_EXAMPLES = (
    "ISO 8601 (e.g., '2025-07-19T08:45:40.501Z')",
    "'YYYY-MM-DD HH:MM:SS'",
    "'YYYY-MM-DD'",
)


class ChronoToolsError(ValueError):
    """Base class for every descriptive failure raised by the package."""


class InvalidTimezoneError(ChronoToolsError):
    def __init__(self, timezone: str, reason: object = None) -> None:
        self.timezone = timezone
        message = f"invalid timezone: '{timezone}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class TimestampParseError(ChronoToolsError):
    def __init__(self, raw: str, examples: Sequence[str] = ACCEPTED_FORMAT_EXAMPLES) -> None:
        self.raw = raw
        self.examples = tuple(examples)
        super().__init__(
            f"invalid timestamp format: '{raw}'. Expected "
            + ", ".join(self.examples[:-1])
            + f", or {self.examples[-1]}"
        )


class InvalidUnitError(ChronoToolsError):
    def __init__(self, unit: object, allowed: Sequence[str]) -> None:
        self.unit = unit
        super().__init__(f"invalid unit: {unit!r}. Use one of: {', '.join(allowed)}")


class InvalidStyleError(ChronoToolsError):
    def __init__(self, style: object, allowed: Sequence[str]) -> None:
        self.style = style
        super().__init__(f"invalid style: {style!r}. Use one of: {', '.join(allowed)}")
