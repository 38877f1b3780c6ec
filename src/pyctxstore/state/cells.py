"""Timestamped, immutable context value cells.

A cell pairs a value with the epoch-millisecond time it was last written.
Cells are frozen; every update returns a new cell and leaves the input
untouched, so any holder of an old cell keeps a valid value.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pyctxstore._time import EpochMillis, normalize_timestamp_ms, now_ms
from pyctxstore.exceptions import InvalidToggleTypeError
from pyctxstore.state.policy import next_timestamp, should_accept_update

_logger = logging.getLogger(__name__)

ValueT = TypeVar("ValueT")


class ContextValueCell(BaseModel, Generic[ValueT]):
    """A single named value with its last-updated timestamp."""

    model_config = ConfigDict(frozen=True)

    id: Any = Field(..., description="Identity of the cell, usually the field name")
    value: ValueT
    updated: EpochMillis = Field(default_factory=now_ms, description="Epoch milliseconds of the last write")

    def set(self, value: ValueT, timestamp: Any = None, *, force: bool = False) -> ContextValueCell[ValueT]:
        return set_value(self, value, timestamp, force=force)

    def toggle(self, timestamp: Any = None, *, force: bool = False) -> ContextValueCell[ValueT]:
        return toggle_boolean(self, timestamp, force=force)


def _resolve_write_timestamp(cell: ContextValueCell[Any], timestamp: Any, force: bool) -> int | None:
    """Timestamp for a write to *cell*, or ``None`` when the write is stale."""
    if timestamp is None:
        return next_timestamp(cell.updated, now_ms())

    ts = normalize_timestamp_ms(timestamp)
    if ts is None:
        raise ValueError(f"Invalid timestamp {timestamp!r} for cell {cell.id!r}")
    if not should_accept_update(cached_ts=cell.updated, incoming_ts=ts, force=force):
        _logger.debug("Rejected stale write cell=%r stored=%d incoming=%d", cell.id, cell.updated, ts)
        return None
    return ts


def set_value(
    cell: ContextValueCell[ValueT],
    new_value: ValueT,
    timestamp: Any = None,
    *,
    force: bool = False,
) -> ContextValueCell[ValueT]:
    """Return a copy of *cell* holding *new_value*.

    Without *timestamp* the write is stamped "now" (and always advances).
    A *timestamp* older than ``cell.updated`` is rejected and *cell* itself
    is returned, unless *force* is set.
    """
    ts = _resolve_write_timestamp(cell, timestamp, force)
    if ts is None:
        return cell
    return cell.model_copy(update={"value": new_value, "updated": ts})


def toggle_boolean(
    cell: ContextValueCell[Any],
    timestamp: Any = None,
    *,
    force: bool = False,
) -> ContextValueCell[Any]:
    """Return a copy of a ``bool`` cell with the value inverted.

    Raises
    ------
    InvalidToggleTypeError
        If the cell does not hold a ``bool``.
    """
    if not isinstance(cell.value, bool):
        raise InvalidToggleTypeError(cell.id, cell.value)
    return set_value(cell, not cell.value, timestamp, force=force)


def latest(current: ContextValueCell[ValueT] | None, incoming: ContextValueCell[ValueT]) -> ContextValueCell[ValueT]:
    """Last-write-wins choice between two observations of the same field.

    The greater ``updated`` wins; on a tie the *incoming* (later applied)
    cell wins.
    """
    if current is None:
        return incoming
    if should_accept_update(cached_ts=current.updated, incoming_ts=incoming.updated):
        return incoming
    return current
