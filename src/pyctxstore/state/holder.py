"""Single-owner holder of the current context snapshot.

The holder is the only mutable piece of the context layer: it swaps its
current :class:`~pyctxstore.state.context.ContextStore` for the snapshot an
update produces, counts the update and publishes one change per replaced
cell.  Snapshots handed out earlier are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic

from pyctxstore.events.bus import Signal
from pyctxstore.events.channels import ValueChange, create_value_change
from pyctxstore.state.cells import ContextValueCell
from pyctxstore.state.context import StoreT, apply_field_update, merge_fields, set_field, toggle_field
from pyctxstore.statistics import StatisticsCounter

_logger = logging.getLogger(__name__)


class ContextHolder(Generic[StoreT]):
    """Owns the latest snapshot of one context store.

    Not safe for uncoordinated concurrent mutation.
    """

    def __init__(
        self,
        snapshot: StoreT,
        *,
        statistics: StatisticsCounter | None = None,
        changed: Signal[ValueChange[Any]] | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._statistics = statistics if statistics is not None else StatisticsCounter()
        self._changed = changed

    @property
    def snapshot(self) -> StoreT:
        return self._snapshot

    @property
    def statistics(self) -> StatisticsCounter:
        return self._statistics

    def apply(self, cells_by_name: Mapping[str, ContextValueCell[Any]], timestamp: Any = None) -> StoreT:
        return self._commit(apply_field_update(self._snapshot, cells_by_name, timestamp))

    def merge(self, cells_by_name: Mapping[str, ContextValueCell[Any]], timestamp: Any = None) -> StoreT:
        return self._commit(merge_fields(self._snapshot, cells_by_name, timestamp))

    def set(self, name: str, value: Any, timestamp: Any = None, *, force: bool = False) -> StoreT:
        return self._commit(set_field(self._snapshot, name, value, timestamp, force=force))

    def toggle(self, name: str, timestamp: Any = None, *, force: bool = False) -> StoreT:
        return self._commit(toggle_field(self._snapshot, name, timestamp, force=force))

    def replace(self, snapshot: StoreT) -> StoreT:
        """Adopt a snapshot produced elsewhere (e.g. loaded by a persistence adapter)."""
        return self._commit(snapshot)

    def _commit(self, new: StoreT) -> StoreT:
        old = self._snapshot
        if new is old:
            return old

        old_cells = old.cells() if type(new) is type(old) else {}
        changed = [(name, cell) for name, cell in new.cells().items() if old_cells.get(name) is not cell]

        self._snapshot = new
        self._statistics.updated()
        _logger.debug("%s committed fields=%s updated=%d", type(new).__name__, [name for name, _ in changed], new.updated)

        if self._changed is not None:
            for name, cell in changed:
                self._changed.emit(create_value_change(new.id, name, cell.value, type="context", date=cell.updated))
        return new
