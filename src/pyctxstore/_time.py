"""Millisecond timestamps.

Every timestamp stored by pyctxstore is an ``int`` count of milliseconds
since the Unix epoch.  Callers may pass numbers (already milliseconds) or
``datetime`` objects; they are normalised here.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BeforeValidator


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def normalize_timestamp_ms(value: Any) -> int | None:
    """Convert an epoch-millisecond number or a datetime to an ``int`` of ms.

    Returns ``None`` when the value is ``None``, empty, negative or not numeric.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp() * 1000)
    try:
        ts = float(value)
    except (TypeError, ValueError):
        return None
    if ts < 0:
        return None
    return int(ts)


def resolve_timestamp(value: Any) -> int:
    """Normalise a supplied timestamp, or return :func:`now_ms` for ``None``.

    Raises ``ValueError`` when a supplied value cannot be read as a timestamp.
    """
    if value is None:
        return now_ms()
    ts = normalize_timestamp_ms(value)
    if ts is None:
        raise ValueError(f"Invalid timestamp {value!r}")
    return ts


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def format_duration_ms(millis: int, *, long_format: bool = False, show_milliseconds: bool = False) -> str:
    """Render a duration as ``1d 2h 3m 4s`` or ``1 day, 2 hours, 3 minutes, 4 seconds``."""
    millis = abs(int(millis))
    seconds, ms = divmod(millis, 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    parts: list[str] = []
    for amount, short, long in ((days, "d", "day"), (hours, "h", "hour"), (minutes, "m", "minute"), (seconds, "s", "second")):
        if amount > 0:
            parts.append(f"{amount} {long}{_plural(amount)}" if long_format else f"{amount}{short}")
    if show_milliseconds and ms > 0:
        parts.append(f"{ms}ms")

    if not parts:
        return "0 seconds" if long_format else "0s"
    return (", " if long_format else " ").join(parts)


def _validate_timestamp(value: Any) -> Any:
    ts = normalize_timestamp_ms(value)
    return value if ts is None else ts


EpochMillis = Annotated[int, BeforeValidator(_validate_timestamp)]
"""Annotated type that coerces numbers or datetimes to epoch milliseconds."""
