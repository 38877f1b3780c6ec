"""Helpers for rendering log messages.

Statistics messages may be plain strings, sequences of strings or arbitrary
structured objects.  Structured objects are turned into pretty-printed JSON
text when they are logged; anything that cannot be represented as JSON
degrades to its ``str()`` form instead of raising.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel


def is_string_sequence(value: Any) -> bool:
    """Return ``True`` for list/tuple-like sequences made only of strings."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if not isinstance(value, Sequence):
        return False
    return all(isinstance(item, str) for item in value)


def to_plain(value: Any, *, _depth: int = 0) -> Any:
    """Return a JSON-compatible copy of *value*, preserving mapping order."""
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (str, int, float, bool)):
        return value

    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_plain(dataclasses.asdict(value), _depth=_depth + 1)

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {str(k): to_plain(v, _depth=_depth + 1) for k, v in value.items()}

    if isinstance(value, (Sequence, set, frozenset)):
        return [to_plain(v, _depth=_depth + 1) for v in value]

    return str(value)


def pretty_json(value: Any) -> str:
    """Pretty-print *value* as JSON with ``"key":value`` pairs on their own lines."""
    return json.dumps(to_plain(value), indent=2, separators=(",", ":"), ensure_ascii=False, default=str)


def render_message(value: Any) -> str:
    """Render a single stored message for a report."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if is_string_sequence(value):
        return "\n".join(value)
    try:
        return pretty_json(value)
    except (TypeError, ValueError):
        return str(value)
