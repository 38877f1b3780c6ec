"""Identity-indexed record collections.

An :class:`IdentityCollection` is an ordered, mutable list of records that
each carry an identity, either as an ``id`` attribute (:class:`HasIdentity`)
or as an ``"id"`` key of a mapping.  Identities are not deduplicated:
uniqueness is the caller's policy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

from pyctxstore.events.channels import ValueChange, create_value_change
from pyctxstore.exceptions import RecordNotFoundError

if TYPE_CHECKING:
    from pyctxstore.config import StoreConfig
    from pyctxstore.events.bus import Signal
    from pyctxstore.statistics import StatisticsCounter

_logger = logging.getLogger(__name__)


@runtime_checkable
class HasIdentity(Protocol):
    """Anything with a read-only ``id``."""

    @property
    def id(self) -> Any: ...


RecordT = TypeVar("RecordT", bound="HasIdentity | Mapping[str, Any]")


def identity_of(record: Any) -> Any:
    """Return the identity of *record*, or ``None`` if it has none."""
    if isinstance(record, Mapping):
        return record.get("id")
    return getattr(record, "id", None)


class IdentityCollection(Generic[RecordT]):
    """Ordered records with identity lookup and optional statistics.

    The list passed to the constructor is used as-is (aliased, not copied),
    so the owner sees every ``add``/``remove``.

    ``remove`` counts every call on the attached counter by default, even
    when nothing matched.  Pass ``count_remove_attempts=False`` to count only
    actual removals; the boolean returned by ``remove`` always reports what
    happened.
    """

    def __init__(
        self,
        items: list[RecordT] | None = None,
        *,
        statistics: StatisticsCounter | None = None,
        changed: Signal[ValueChange[Any]] | None = None,
        name: str = "collection",
        count_remove_attempts: bool = True,
    ) -> None:
        self._items: list[RecordT] = items if items is not None else []
        self._statistics = statistics
        self._changed = changed
        self._name = name
        self._count_remove_attempts = count_remove_attempts

    @classmethod
    def from_items(
        cls,
        items: list[RecordT] | None = None,
        *,
        statistics: StatisticsCounter | None = None,
        changed: Signal[ValueChange[Any]] | None = None,
        name: str = "collection",
        config: StoreConfig | None = None,
    ) -> IdentityCollection[RecordT]:
        """Build a collection, treating a missing *items* list as empty."""
        count_attempts = config.count_remove_attempts if config is not None else True
        return cls(
            items if items is not None else [],
            statistics=statistics,
            changed=changed,
            name=name,
            count_remove_attempts=count_attempts,
        )

    @property
    def items(self) -> list[RecordT]:
        return self._items

    @property
    def statistics(self) -> StatisticsCounter | None:
        return self._statistics

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, record: RecordT, index: int | None = None) -> int:
        """Insert *record* at *index* when it is in range, else append.

        Returns the position the record now occupies.
        """
        if index is not None and 0 <= index <= len(self._items):
            self._items.insert(index, record)
            position = index
        else:
            self._items.append(record)
            position = len(self._items) - 1

        if self._statistics is not None:
            self._statistics.add_success()
        _logger.debug("%s: added id=%r at %d", self._name, identity_of(record), position)
        self._publish(record, "add")
        return position

    def remove(self, record: RecordT) -> bool:
        """Remove the first element equal to *record*.

        A missing record leaves the collection unchanged and is not an error.
        """
        removed = False
        for position, item in enumerate(self._items):
            if item is record or item == record:
                del self._items[position]
                removed = True
                break

        if self._statistics is not None and (removed or self._count_remove_attempts):
            self._statistics.deleted()
        _logger.debug("%s: remove id=%r removed=%s", self._name, identity_of(record), removed)
        if removed:
            self._publish(record, "remove")
        return removed

    def swap_by_id(self, source_id: Any, dest_id: Any) -> None:
        """Swap the positions of two records in place."""
        if source_id == dest_id:
            return
        source_index = self._index_of(source_id)
        if source_index is None:
            raise RecordNotFoundError(f"Invalid source id {source_id!r} when swapping records", identity=source_id)
        dest_index = self._index_of(dest_id)
        if dest_index is None:
            raise RecordNotFoundError(f"Invalid destination id {dest_id!r} when swapping records", identity=dest_id)
        items = self._items
        items[source_index], items[dest_index] = items[dest_index], items[source_index]

    def _publish(self, record: RecordT, kind: str) -> None:
        if self._changed is None:
            return
        self._changed.emit(create_value_change(identity_of(record), self._name, record, type=kind))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _index_of(self, identity: Any) -> int | None:
        for position, item in enumerate(self._items):
            if identity_of(item) == identity:
                return position
        return None

    def find_by_id(self, identity: Any) -> RecordT | None:
        """Return the first record whose identity equals *identity*, or ``None``."""
        if identity is None:
            return None
        for item in self._items:
            if identity_of(item) == identity:
                return item
        return None

    def must_find(self, identity: Any) -> RecordT:
        found = self.find_by_id(identity)
        if found is None:
            raise RecordNotFoundError(f"Unable to find {self._name} id: {identity!r}", identity=identity)
        return found

    def find_by_ids(self, ids: Iterable[Any] | None) -> list[RecordT]:
        wanted = list(ids or [])
        if not wanted:
            return []
        return [item for item in self._items if identity_of(item) in wanted]

    def find_by_not_ids(self, ids: Iterable[Any] | None) -> list[RecordT]:
        unwanted = list(ids or [])
        if not unwanted:
            return list(self._items)
        return [item for item in self._items if identity_of(item) not in unwanted]

    def ids(self) -> list[Any]:
        return [identity_of(item) for item in self._items]

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._items)

    def __getitem__(self, index: int) -> RecordT:
        return self._items[index]

    def __contains__(self, record: object) -> bool:
        return record in self._items

    def __repr__(self) -> str:
        return f"IdentityCollection(name={self._name!r}, size={len(self._items)})"
