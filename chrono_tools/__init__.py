"""Time and date tools: layered timestamp parsing, duration text and context."""

from .context import ContextBucket, context_bucket, describe
from .durations import format_duration
from .errors import (
    ChronoToolsError,
    InvalidStyleError,
    InvalidTimezoneError,
    InvalidUnitError,
    TimestampParseError,
)
from .fuzzy import parse_fuzzy_timestamp, resolve
from .parsing import ParseOutcome, ParseRequest
from .strict import parse_strict

__all__ = [
    "ChronoToolsError",
    "ContextBucket",
    "InvalidStyleError",
    "InvalidTimezoneError",
    "InvalidUnitError",
    "ParseOutcome",
    "ParseRequest",
    "TimestampParseError",
    "context_bucket",
    "describe",
    "format_duration",
    "parse_fuzzy_timestamp",
    "parse_strict",
    "resolve",
]
