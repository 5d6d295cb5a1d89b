import json
from datetime import datetime, timezone
from typing import Any, Optional


def format_timestamp(value: Any) -> str:
    """
    Render a datetime as ISO-8601 UTC with millisecond precision, e.g. 2025-08-29T21:42:00.000Z.
    Naive datetimes are taken to already be in UTC.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"Cannot render timestamp of type {type(value).__name__}; expected datetime")

    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)

    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps_compact(value: Any, ensure_ascii: bool = False, sort_keys: bool = False) -> str:
    """
    json.dumps with the compact layout JSON.stringify produces: {"x":1}.
    Raises TypeError for unserializable values and ValueError for circular references.
    """
    return json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=ensure_ascii,
        sort_keys=sort_keys,
        default=json_default,
    )


def join_error_line(error_type: str, message: str, context_json: Optional[str] = None) -> str:
    line = f"{error_type}: {message}"
    if context_json:
        line = f"{line} {context_json}"
    return line
