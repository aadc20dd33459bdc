"""
invocation_log.py
-----------------
Per-invocation structured log shared by the handler and the parsers.

The handler binds one ``InvocationLogger`` for the duration of a call; code
below it reports through the module-level ``log()`` which is a no-op when
nothing is bound (library use, tests). Every entry is echoed to stdout so it
lands in CloudWatch, and can be returned to the caller via ``attach_logs``.
"""

from __future__ import annotations

import contextvars
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil import tz

LOG_PREFIX = "[chrono-tools]"
DETAIL_LIMIT = 400


def _utc_stamp() -> str:
    return datetime.now(tz.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _flatten(value: Any) -> str:
    """One-line, length-capped rendering of a detail value."""
    if isinstance(value, (dict, list, tuple)):
        try:
            text = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            text = repr(value)
    else:
        text = str(value)
    text = " ".join(text.splitlines())
    if len(text) > DETAIL_LIMIT:
        text = text[: DETAIL_LIMIT - 3] + "..."
    return text


@dataclass(frozen=True)
class LogEntry:
    time: str
    message: str
    details: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, message: str, details: Dict[str, Any]) -> "LogEntry":
        flat = {key: _flatten(value) for key, value in details.items() if value is not None}
        return cls(time=_utc_stamp(), message=str(message), details=flat)

    def as_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"time": self.time, "message": self.message}
        if self.details:
            entry["details"] = dict(self.details)
        return entry

    def summary(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} | {json.dumps(self.details, ensure_ascii=False)}"


class InvocationLogger:
    def __init__(self) -> None:
        self._entries: List[LogEntry] = []

    def log(self, message: str, **details: Any) -> None:
        entry = LogEntry.create(message, details)
        self._entries.append(entry)
        print(f"{LOG_PREFIX} {entry.time} {entry.summary()}")

    def has_entries(self) -> bool:
        return bool(self._entries)

    def export(self) -> List[Dict[str, Any]]:
        return [entry.as_dict() for entry in self._entries]

    def as_text(self) -> str:
        return "\n".join(f"{entry.time} - {entry.summary()}" for entry in self._entries)


_CURRENT_LOGGER: contextvars.ContextVar[Optional[InvocationLogger]] = contextvars.ContextVar(
    "chrono_tools_invocation_logger", default=None
)


def get_logger() -> Optional[InvocationLogger]:
    return _CURRENT_LOGGER.get()


def bind_logger(logger: InvocationLogger) -> contextvars.Token:
    return _CURRENT_LOGGER.set(logger)


def unbind_logger(token: contextvars.Token) -> None:
    _CURRENT_LOGGER.reset(token)


def log(message: str, **details: Any) -> None:
    logger = get_logger()
    if logger is not None:
        logger.log(message, **details)


def attach_logs(payload: Dict[str, Any], logger: Optional[InvocationLogger]) -> Dict[str, Any]:
    """Return a copy of ``payload`` carrying the collected entries, if any."""
    if logger is None or not logger.has_entries():
        return payload
    return {**payload, "debugLog": logger.export(), "debugLogText": logger.as_text()}
