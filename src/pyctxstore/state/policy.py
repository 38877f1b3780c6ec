"""Deterministic last-write-wins policy.

This module contains only decisions; it never builds or mutates cells.
"""

from __future__ import annotations


def should_accept_update(
    *,
    cached_ts: int | None,
    incoming_ts: int | None,
    force: bool = False,
) -> bool:
    """Decide whether an incoming timestamped write should be applied.

    Policy:
    - ``force`` always wins.
    - If either timestamp is missing there is nothing to compare: accept.
    - Otherwise accept when incoming is newer or equal; equal timestamps go
      to the later write in program order.
    """
    if force:
        return True
    if cached_ts is None or incoming_ts is None:
        return True
    return incoming_ts >= cached_ts


def next_timestamp(cached_ts: int | None, now: int) -> int:
    """Timestamp for an update stamped with the ambient clock.

    Never returns a value at or below *cached_ts*, so ambient updates always
    strictly advance even within the same millisecond.
    """
    if cached_ts is None:
        return now
    return max(now, cached_ts + 1)


def store_timestamp(requested_ts: int, cell_timestamps: list[int]) -> int:
    """Store-level timestamp after an update: never older than any given timestamp."""
    if not cell_timestamps:
        return requested_ts
    return max(requested_ts, max(cell_timestamps))
