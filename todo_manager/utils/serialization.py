"""
Serialization helpers for the persisted todo snapshot.

Timestamps travel as ISO-8601 UTC strings with millisecond precision
(``2024-05-01T09:30:00.123Z``), the format every strategy reads and writes.
"""

import json
from datetime import datetime, timezone
from typing import Any, Iterable, List


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """Render an aware (or naive UTC) datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the ``Z`` suffix, explicit offsets and naive strings (read as UTC).

    Raises:
        ValueError: if ``value`` is not a parseable timestamp string
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Expected ISO-8601 timestamp string, got {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def dumps_todos(todos: Iterable[Any]) -> str:
    """Encode todos (objects exposing ``to_dict``) as one JSON array."""
    return json.dumps([todo.to_dict() for todo in todos], ensure_ascii=False)


def loads_todo_dicts(payload: str) -> List[dict]:
    """
    Decode a JSON snapshot into a list of raw todo dicts.

    Raises:
        json.JSONDecodeError: malformed JSON
        ValueError: the document is not a JSON array of objects
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("Todo snapshot must be a JSON array")
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Todo snapshot entries must be JSON objects")
    return data
