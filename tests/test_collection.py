from __future__ import annotations

import dataclasses
from typing import Any

import pytest

from pyctxstore.collection import HasIdentity, IdentityCollection, identity_of
from pyctxstore.config import StoreConfig
from pyctxstore.events import ValueChange, collection_changed_signal
from pyctxstore.exceptions import RecordNotFoundError
from pyctxstore.statistics import StatisticsCounter


@dataclasses.dataclass
class Item:
    id: int
    name: str = ""


def _seeded() -> tuple[list[dict[str, str]], StatisticsCounter, IdentityCollection[dict[str, str]]]:
    records = [{"id": "1"}, {"id": "2"}, {"id": "3"}]
    stats = StatisticsCounter()
    return records, stats, IdentityCollection(records, statistics=stats)


def test_add_then_remove_updates_counters() -> None:
    records, stats, collection = _seeded()

    collection.add({"id": "4"})
    assert len(collection) == 4
    assert stats.total_processed == 1
    assert stats.successes == 1

    assert collection.remove(records[1]) is True
    assert len(collection) == 3
    assert stats.total_processed == 2
    assert stats.delete == 1
    assert collection.ids() == ["1", "3", "4"]


def test_collection_aliases_the_given_list() -> None:
    records, _, collection = _seeded()

    collection.add({"id": "4"})

    assert collection.items is records
    assert len(records) == 4


def test_remove_matches_structural_equality() -> None:
    _, _, collection = _seeded()

    assert collection.remove({"id": "2"}) is True
    assert collection.find_by_id("2") is None


def test_remove_missing_is_silent_but_counted() -> None:
    _, stats, collection = _seeded()

    assert collection.remove({"id": "99"}) is False
    assert len(collection) == 3
    assert stats.total_processed == 1
    assert stats.delete == 1


def test_remove_missing_not_counted_when_counting_actual_removals() -> None:
    stats = StatisticsCounter()
    collection = IdentityCollection([{"id": "1"}], statistics=stats, count_remove_attempts=False)

    assert collection.remove({"id": "99"}) is False
    assert stats.total_processed == 0
    assert collection.remove({"id": "1"}) is True
    assert stats.delete == 1


def test_total_processed_equals_number_of_calls() -> None:
    stats = StatisticsCounter()
    collection: IdentityCollection[Item] = IdentityCollection(statistics=stats)
    calls = 0
    for n in range(5):
        collection.add(Item(n))
        calls += 1
    for n in (1, 1, 7, 3):
        collection.remove(Item(n))
        calls += 1

    assert stats.total_processed == calls
    assert collection.ids() == [0, 2, 4]


class TestAdd:
    def test_insert_at_index(self) -> None:
        _, _, collection = _seeded()

        assert collection.add({"id": "0"}, 0) == 0
        assert collection.ids() == ["0", "1", "2", "3"]

    def test_index_equal_to_length_appends(self) -> None:
        _, _, collection = _seeded()

        assert collection.add({"id": "4"}, 3) == 3
        assert collection.ids()[-1] == "4"

    @pytest.mark.parametrize("index", [-1, 10])
    def test_out_of_range_index_appends(self, index: int) -> None:
        _, _, collection = _seeded()

        assert collection.add({"id": "x"}, index) == 3
        assert collection.ids() == ["1", "2", "3", "x"]

    def test_duplicate_identities_are_kept(self) -> None:
        collection: IdentityCollection[Item] = IdentityCollection()
        first = Item(1, "first")
        collection.add(first)
        collection.add(Item(1, "second"))

        assert len(collection) == 2
        assert collection.find_by_id(1) is first


class TestLookup:
    def test_find_by_id_returns_the_added_record(self) -> None:
        collection: IdentityCollection[Item] = IdentityCollection()
        item = Item(7, "seven")
        collection.add(item)

        assert collection.find_by_id(7) is item

    def test_find_by_id_miss_returns_none(self) -> None:
        _, _, collection = _seeded()

        assert collection.find_by_id("nope") is None
        assert collection.find_by_id(None) is None

    def test_must_find_raises(self) -> None:
        _, _, collection = _seeded()

        with pytest.raises(RecordNotFoundError) as excinfo:
            collection.must_find("nope")
        assert excinfo.value.identity == "nope"
        assert isinstance(excinfo.value, LookupError)

    def test_find_by_ids_and_not_ids(self) -> None:
        _, _, collection = _seeded()

        assert [r["id"] for r in collection.find_by_ids(["3", "1"])] == ["1", "3"]
        assert collection.find_by_ids([]) == []
        assert [r["id"] for r in collection.find_by_not_ids(["2"])] == ["1", "3"]
        assert len(collection.find_by_not_ids(None)) == 3

    def test_identity_of_attribute_and_mapping_records(self) -> None:
        assert identity_of(Item(3)) == 3
        assert identity_of({"id": "a"}) == "a"
        assert identity_of(object()) is None
        assert isinstance(Item(3), HasIdentity)


class TestFactoryAndSequence:
    def test_from_items_normalises_missing_input(self) -> None:
        collection: IdentityCollection[Item] = IdentityCollection.from_items(None)

        assert len(collection) == 0
        assert list(collection) == []

    def test_from_items_reads_config(self) -> None:
        stats = StatisticsCounter()
        collection = IdentityCollection.from_items(
            [{"id": "1"}],
            statistics=stats,
            config=StoreConfig(count_remove_attempts=False),
        )

        collection.remove({"id": "2"})
        assert stats.total_processed == 0

    def test_sequence_protocol(self) -> None:
        records, _, collection = _seeded()

        assert collection[0] is records[0]
        assert {"id": "2"} in collection
        assert [r["id"] for r in collection] == ["1", "2", "3"]


class TestSwap:
    def test_swap_by_id(self) -> None:
        _, _, collection = _seeded()

        collection.swap_by_id("1", "3")
        assert collection.ids() == ["3", "2", "1"]

    def test_swap_same_id_is_noop(self) -> None:
        _, _, collection = _seeded()

        collection.swap_by_id("2", "2")
        assert collection.ids() == ["1", "2", "3"]

    def test_swap_unknown_id_raises(self) -> None:
        _, _, collection = _seeded()

        with pytest.raises(RecordNotFoundError):
            collection.swap_by_id("1", "9")
        with pytest.raises(RecordNotFoundError):
            collection.swap_by_id("9", "1")


def test_changes_are_published() -> None:
    changed = collection_changed_signal()
    seen: list[ValueChange[Any]] = []
    changed.on(seen.append)
    collection: IdentityCollection[Item] = IdentityCollection(changed=changed, name="items")

    item = Item(1)
    collection.add(item)
    collection.remove(Item(2))
    collection.remove(item)

    assert [(c.id, c.name, c.type) for c in seen] == [(1, "items", "add"), (1, "items", "remove")]
    assert seen[0].value is item
