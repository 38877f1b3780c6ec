"""Copy-on-write context stores.

A :class:`ContextStore` is a frozen snapshot made of named
:class:`~pyctxstore.state.cells.ContextValueCell` fields.  Subclasses declare
one field per recognised name and a ``_DEFAULTS`` table with the initial
value of each; the schema is closed, so updates naming anything else fail
with :class:`~pyctxstore.exceptions.UnknownFieldError`.

Every update returns a new snapshot built with ``model_copy``: untouched
cells are the very same objects in the old and new snapshot (structural
sharing) and the old snapshot is never modified.

The store-level ``updated`` after an update is
``max(timestamp or now, max(cell.updated for every cell))``.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from pyctxstore._time import EpochMillis, now_ms, resolve_timestamp
from pyctxstore.exceptions import UnknownFieldError
from pyctxstore.state.cells import ContextValueCell, latest, set_value, toggle_boolean
from pyctxstore.state.policy import store_timestamp

_logger = logging.getLogger(__name__)

StoreT = TypeVar("StoreT", bound="ContextStore")

_RESERVED_FIELDS = frozenset({"id", "updated"})


class ContextStore(BaseModel):
    """Base for closed-schema snapshots of named cells."""

    _DEFAULTS: ClassVar[dict[str, Any]] = {}
    """Initial value for every cell field, keyed by field name."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Any = "context"
    updated: EpochMillis = Field(default_factory=now_ms)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        missing = [name for name in cls.field_names() if name not in cls._DEFAULTS]
        extra = [name for name in cls._DEFAULTS if name not in cls.model_fields or name in _RESERVED_FIELDS]
        if missing or extra:
            raise TypeError(f"{cls.__name__}._DEFAULTS does not match its cell fields (missing={missing}, unknown={extra})")

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(name for name in cls.model_fields if name not in _RESERVED_FIELDS)

    @classmethod
    def check_field(cls, name: str) -> None:
        if name not in cls.field_names():
            raise UnknownFieldError(name, store=cls.__name__)

    @classmethod
    def defaults(
        cls: type[StoreT],
        overrides: Mapping[str, Any] | None = None,
        timestamp: Any = None,
        *,
        id: Any = None,
    ) -> StoreT:
        """Build a fully populated store, then overlay *overrides*.

        An override replaces a whole cell.  Plain values are wrapped into a
        new cell stamped with *timestamp*; cells are used as given.
        """
        ts = resolve_timestamp(timestamp)
        overrides = dict(overrides or {})
        for name in overrides:
            cls.check_field(name)

        cells: dict[str, ContextValueCell[Any]] = {}
        for name in cls.field_names():
            if name in overrides:
                value = overrides[name]
                cells[name] = value if isinstance(value, ContextValueCell) else ContextValueCell(id=name, value=value, updated=ts)
            else:
                cells[name] = ContextValueCell(id=name, value=copy.deepcopy(cls._DEFAULTS[name]), updated=ts)

        store_ts = store_timestamp(ts, [cell.updated for cell in cells.values()])
        fields: dict[str, Any] = {"updated": store_ts, **cells}
        if id is not None:
            fields["id"] = id
        return cls(**fields)

    def cell(self, name: str) -> ContextValueCell[Any]:
        self.check_field(name)
        cell: ContextValueCell[Any] = getattr(self, name)
        return cell

    def cells(self) -> dict[str, ContextValueCell[Any]]:
        return {name: getattr(self, name) for name in self.field_names()}

    def values(self) -> dict[str, Any]:
        return {name: cell.value for name, cell in self.cells().items()}


def apply_field_update(
    store: StoreT,
    cells_by_name: Mapping[str, ContextValueCell[Any]],
    timestamp: Any = None,
) -> StoreT:
    """Return a new snapshot with the named cells replaced.

    Cells not named are shared with *store*.  An empty update returns
    *store* itself.  The new ``updated`` is never older than the previous
    snapshot or any of its cells.

    Raises
    ------
    UnknownFieldError
        If a name is not one of the store's cell fields.
    TypeError
        If a replacement is not a ``ContextValueCell``.
    ValueError
        If *timestamp* is given but is not a valid timestamp.
    """
    if not cells_by_name:
        return store

    for name, cell in cells_by_name.items():
        store.check_field(name)
        if not isinstance(cell, ContextValueCell):
            raise TypeError(f"{type(store).__name__}.{name} must be a ContextValueCell, got {type(cell).__name__}")

    requested = resolve_timestamp(timestamp)
    merged = {**store.cells(), **cells_by_name}
    updated = store_timestamp(requested, [store.updated, *(cell.updated for cell in merged.values())])

    _logger.debug("%s: replacing %s updated=%d", type(store).__name__, sorted(cells_by_name), updated)
    return store.model_copy(update={**cells_by_name, "updated": updated})


def with_field(store: StoreT, name: str, cell: ContextValueCell[Any], timestamp: Any = None) -> StoreT:
    return apply_field_update(store, {name: cell}, timestamp)


def merge_fields(
    store: StoreT,
    cells_by_name: Mapping[str, ContextValueCell[Any]],
    timestamp: Any = None,
) -> StoreT:
    """Apply only the cells that win last-write-wins against the stored ones."""
    accepted: dict[str, ContextValueCell[Any]] = {}
    for name, incoming in cells_by_name.items():
        current = store.cell(name)
        if latest(current, incoming) is incoming:
            accepted[name] = incoming
        else:
            _logger.debug("%s: kept newer %s (stored=%d incoming=%d)", type(store).__name__, name, current.updated, incoming.updated)
    return apply_field_update(store, accepted, timestamp)


def set_field(
    store: StoreT,
    name: str,
    value: Any,
    timestamp: Any = None,
    *,
    force: bool = False,
) -> StoreT:
    """Set one cell's value; a rejected stale write returns *store* unchanged."""
    current = store.cell(name)
    cell = set_value(current, value, timestamp, force=force)
    if cell is current:
        return store
    return apply_field_update(store, {name: cell}, cell.updated)


def toggle_field(store: StoreT, name: str, timestamp: Any = None, *, force: bool = False) -> StoreT:
    """Invert one ``bool`` cell; a rejected stale write returns *store* unchanged."""
    current = store.cell(name)
    cell = toggle_boolean(current, timestamp, force=force)
    if cell is current:
        return store
    return apply_field_update(store, {name: cell}, cell.updated)
