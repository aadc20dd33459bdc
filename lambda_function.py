# lambda_function.py
# AWS Lambda for Agents for Amazon Bedrock (Action Group, function details).
# Exposes the chrono_tools time operations as named functions.
# Runtime: Python 3.12
# Deps: python-dateutil, dateparser, tzdata

from __future__ import annotations

import json
import os
from typing import Any, Callable, Dict, List, Optional

from chrono_tools import operations
from chrono_tools.invocation_log import (
    InvocationLogger,
    attach_logs,
    bind_logger,
    log,
    unbind_logger,
)
from chrono_tools.zones import detect_system_timezone


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name, "")
    if not v:
        return default
    v = v.strip().lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    return default


DEFAULT_TIMEZONE = (os.getenv("CHRONO_TOOLS_DEFAULT_TIMEZONE") or "UTC").strip()
FUZZY_DEFAULT = _env_bool("CHRONO_TOOLS_FUZZY_DEFAULT", False)
DEBUG_LOG = _env_bool("CHRONO_TOOLS_DEBUG_LOG", False)

_TIMESTAMP_HELP = (
    "standard formats (YYYY-MM-DD HH:MM:SS, ISO 8601, Unix epoch), durations (-14d, 2h30m, 1M), "
    "or natural language ('tomorrow at 3pm', '3 days and 2 hours ago') when enable_fuzzy_parsing is true"
)
_TIMEZONE_PARAM = {
    "type": "string",
    "description": "IANA timezone name (e.g., 'UTC', 'America/New_York').",
    "required": False,
}
_AUTODETECT_PARAM = {
    "type": "boolean",
    "description": "If true and no timezone is given, use the host's timezone instead of the default.",
    "required": False,
}
_FUZZY_PARAM = {
    "type": "boolean",
    "description": "If true, also accept durations and natural-language phrases.",
    "required": False,
}

FUNCTION_SCHEMAS: List[Dict[str, Any]] = [
    {
        "name": "current_datetime",
        "description": "Returns the current date and time in a timezone.",
        "parameters": {
            "timezone": _TIMEZONE_PARAM,
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
        },
    },
    {
        "name": "time_difference",
        "description": "Calculate the time difference between two timestamps.",
        "parameters": {
            "timestamp1": {"type": "string", "description": f"First timestamp: {_TIMESTAMP_HELP}.", "required": True},
            "timestamp2": {"type": "string", "description": f"Second timestamp: {_TIMESTAMP_HELP}.", "required": True},
            "unit": {"type": "string", "description": "auto, seconds, minutes, hours or days.", "required": False},
            "timezone": _TIMEZONE_PARAM,
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
            "enable_fuzzy_parsing": _FUZZY_PARAM,
        },
    },
    {
        "name": "time_since",
        "description": "Calculate time elapsed since a timestamp until now.",
        "parameters": {
            "timestamp": {"type": "string", "description": f"Past timestamp: {_TIMESTAMP_HELP}.", "required": True},
            "timezone": _TIMEZONE_PARAM,
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
            "enable_fuzzy_parsing": _FUZZY_PARAM,
        },
    },
    {
        "name": "parse_timestamp",
        "description": "Parse a timestamp and convert it to several formats.",
        "parameters": {
            "timestamp": {"type": "string", "description": f"Timestamp: {_TIMESTAMP_HELP}.", "required": True},
            "source_timezone": {"type": "string", "description": "Timezone of the input (defaults to target_timezone).", "required": False},
            "target_timezone": {"type": "string", "description": "Desired output timezone.", "required": False},
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
            "enable_fuzzy_parsing": _FUZZY_PARAM,
        },
    },
    {
        "name": "add_time",
        "description": "Add (or subtract) a duration to a timestamp.",
        "parameters": {
            "timestamp": {"type": "string", "description": f"Starting timestamp: {_TIMESTAMP_HELP}.", "required": True},
            "duration": {"type": "number", "description": "Amount to add; negative to subtract.", "required": True},
            "unit": {"type": "string", "description": "seconds, minutes, hours, days or weeks.", "required": True},
            "timezone": _TIMEZONE_PARAM,
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
            "enable_fuzzy_parsing": _FUZZY_PARAM,
        },
    },
    {
        "name": "timestamp_context",
        "description": "Describe a timestamp: time of day, weekday, business hours, typical activity.",
        "parameters": {
            "timestamp": {"type": "string", "description": f"Timestamp to analyze: {_TIMESTAMP_HELP}.", "required": True},
            "timezone": _TIMEZONE_PARAM,
            "autodetect_and_use_user_timezone": _AUTODETECT_PARAM,
            "enable_fuzzy_parsing": _FUZZY_PARAM,
        },
    },
    {
        "name": "format_duration",
        "description": "Format a duration in seconds into human-readable text.",
        "parameters": {
            "seconds": {"type": "number", "description": "Duration in seconds (can be negative).", "required": True},
            "style": {"type": "string", "description": "full, compact or minimal.", "required": False},
        },
    },
    {
        "name": "list_timezones",
        "description": (
            "List IANA timezone identifiers. Returns 25 popular timezones by default; "
            "use filter, limit (max 100) and page to search the full catalog."
        ),
        "parameters": {
            "filter": {"type": "string", "description": "Substring to match (e.g., 'America', 'London').", "required": False},
            "limit": {"type": "integer", "description": "Page size, max 100.", "required": False},
            "page": {"type": "integer", "description": "1-based page number.", "required": False},
        },
    },
]

_SCHEMAS_BY_NAME = {schema["name"]: schema for schema in FUNCTION_SCHEMAS}

_TRUE_STRINGS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n", "off", ""}


def _coerce_json(value: Any) -> Any:
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed and trimmed[0] in "{[" and trimmed[-1] in "]}" and len(trimmed) >= 2:
            try:
                return json.loads(trimmed)
            except json.JSONDecodeError:
                return value
    return value


def _param_list_to_dict(parameters: Any) -> Dict[str, Any]:
    mapped: Dict[str, Any] = {}
    if isinstance(parameters, list):
        for entry in parameters:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            if not isinstance(name, str) or not name:
                continue
            mapped[name] = _coerce_json(entry.get("value"))
    elif isinstance(parameters, dict):
        for key, value in parameters.items():
            if isinstance(key, str):
                mapped[key] = _coerce_json(value)
    return mapped


def _coerce_param(name: str, value: Any, kind: str) -> Any:
    if kind == "string":
        return value if isinstance(value, str) else str(value)
    if kind == "boolean":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"parameter '{name}' must be a boolean, got {value!r}")
    if kind in ("number", "integer"):
        if isinstance(value, bool):
            raise ValueError(f"parameter '{name}' must be a {kind}, got {value!r}")
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"parameter '{name}' must be a {kind}, got {value!r}") from exc
        return int(number) if kind == "integer" else number
    return value


def _collect_arguments(function: str, event: Dict[str, Any]) -> Dict[str, Any]:
    schema = _SCHEMAS_BY_NAME[function]
    raw = _param_list_to_dict(event.get("parameters"))
    for key in schema["parameters"]:
        if key not in raw and key in event:
            raw[key] = _coerce_json(event[key])

    arguments: Dict[str, Any] = {}
    for key, spec in schema["parameters"].items():
        value = raw.get(key)
        if value is None or (isinstance(value, str) and not value.strip() and spec["type"] != "string"):
            if spec.get("required"):
                raise ValueError(f"missing required parameter '{key}' for {function}")
            continue
        arguments[key] = _coerce_param(key, value, spec["type"])
    return arguments


def _pick_timezone(args: Dict[str, Any], key: str = "timezone") -> str:
    named = args.get(key)
    if isinstance(named, str) and named.strip():
        return named.strip()
    if args.get("autodetect_and_use_user_timezone"):
        detected = detect_system_timezone()
        log("Timezone autodetected", timezone=detected)
        return detected
    return DEFAULT_TIMEZONE


def _fuzzy(args: Dict[str, Any]) -> bool:
    return bool(args.get("enable_fuzzy_parsing", FUZZY_DEFAULT))


def _run_current_datetime(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.current_datetime(_pick_timezone(args))


def _run_time_difference(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.time_difference(
        args["timestamp1"],
        args["timestamp2"],
        unit=args.get("unit") or "auto",
        timezone=_pick_timezone(args),
        fuzzy=_fuzzy(args),
    )


def _run_time_since(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.time_since(args["timestamp"], timezone=_pick_timezone(args), fuzzy=_fuzzy(args))


def _run_parse_timestamp(args: Dict[str, Any]) -> Dict[str, Any]:
    source = args.get("source_timezone")
    return operations.parse_timestamp(
        args["timestamp"],
        target_timezone=_pick_timezone(args, "target_timezone"),
        source_timezone=source.strip() if isinstance(source, str) and source.strip() else None,
        fuzzy=_fuzzy(args),
    )


def _run_add_time(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.add_time(
        args["timestamp"],
        args["duration"],
        args["unit"],
        timezone=_pick_timezone(args),
        fuzzy=_fuzzy(args),
    )


def _run_timestamp_context(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.timestamp_context(args["timestamp"], timezone=_pick_timezone(args), fuzzy=_fuzzy(args))


def _run_format_duration(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.format_duration(args["seconds"], args.get("style") or "full")


def _run_list_timezones(args: Dict[str, Any]) -> Dict[str, Any]:
    return operations.list_timezones(
        filter_text=args.get("filter") or "",
        limit=args.get("limit") or 0,
        page=args.get("page") or 0,
    )


HANDLERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "current_datetime": _run_current_datetime,
    "time_difference": _run_time_difference,
    "time_since": _run_time_since,
    "parse_timestamp": _run_parse_timestamp,
    "add_time": _run_add_time,
    "timestamp_context": _run_timestamp_context,
    "format_duration": _run_format_duration,
    "list_timezones": _run_list_timezones,
}


def _pick_function(event: Dict[str, Any]) -> str:
    for candidate in (event.get("function"), event.get("op")):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip().lower()
    return ""


def _wrap_if_bedrock(event: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
    if not (event.get("actionGroup") and event.get("function")):
        return payload
    return {
        "messageVersion": "1.0",
        "response": {
            "actionGroup": event.get("actionGroup"),
            "function": event.get("function"),
            "functionResponse": {
                "responseBody": {"TEXT": {"body": json.dumps(payload, default=str)}}
            },
        },
        "sessionAttributes": event.get("sessionAttributes", {}),
        "promptSessionAttributes": event.get("promptSessionAttributes", {}),
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    event = event if isinstance(event, dict) else {}
    logger = InvocationLogger()
    token = bind_logger(logger)
    try:
        log(
            "Lambda invocation started",
            event_keys=list(event.keys()),
            has_parameters=bool(event.get("parameters")),
        )
        function = _pick_function(event)
        handler: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = HANDLERS.get(function)
        if handler is None:
            log("Unsupported function", function=function)
            payload: Dict[str, Any] = {
                "success": False,
                "function": function,
                "error": f"unsupported function '{function}'. Supported: {', '.join(HANDLERS)}",
            }
        else:
            try:
                arguments = _collect_arguments(function, event)
                log("Routing to function", function=function, arguments=arguments)
                payload = {"success": True, "function": function, "result": handler(arguments)}
                log("Function completed", function=function)
            except Exception as exc:
                log("Function failed", function=function, error=str(exc))
                payload = {"success": False, "function": function, "error": str(exc)}
        if DEBUG_LOG:
            payload = attach_logs(payload, logger)
        return _wrap_if_bedrock(event, payload)
    finally:
        unbind_logger(token)


if __name__ == "__main__":
    import sys

    request = json.loads(sys.stdin.read() or "{}")
    result = lambda_handler(request, None)
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")
