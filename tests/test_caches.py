"""Tests for geocoin.caches - coins, geocaches, and the snapshot store."""

import pytest

from geocoin.caches.coin import (
    Coin,
    Geocache,
    cache_id_for,
    decode_coins,
    generate_number_of_coins,
)
from geocoin.caches.errors import EmptyCacheError, MalformedSnapshot
from geocoin.caches.store import SnapshotStore
from geocoin.world.cell import Cell
from geocoin.world.luck import luck


def _cache_with(cell: Cell, count: int) -> Geocache:
    cache_id = cache_id_for(cell)
    coins = [Coin(f"{cell.i}:{cell.j}#{n}", cache_id) for n in range(count)]
    return Geocache(cell=cell, coins=coins)


class TestGenerateNumberOfCoins:
    """Tests for starting coin counts."""

    def test_fixed_value(self) -> None:
        assert generate_number_of_coins("cache-0", rand=lambda _: 0.37) == 4

    def test_extremes(self) -> None:
        assert generate_number_of_coins("k", rand=lambda _: 0.0) == 1
        assert generate_number_of_coins("k", rand=lambda _: 0.9999999) == 10

    def test_keyed_by_luck(self) -> None:
        expected = int(luck("cache-0") * 10) + 1
        assert generate_number_of_coins("cache-0") == expected

    def test_range(self) -> None:
        counts = {generate_number_of_coins(f"cache:{n}:0") for n in range(300)}
        assert counts <= set(range(1, 11))


class TestGeocache:
    """Tests for collecting from and depositing into a cache."""

    def test_id_from_cell(self) -> None:
        assert Geocache(cell=Cell(-2, 7)).id == "cache:-2:7"

    def test_generate_is_deterministic(self) -> None:
        a = Geocache.generate(Cell(4, -9))
        b = Geocache.generate(Cell(4, -9))
        assert a.coins == b.coins
        assert 1 <= a.coin_count <= 10

    def test_generated_coin_provenance(self) -> None:
        cache = Geocache.generate(Cell(3, 1), rand=lambda _: 0.25)
        assert [c.id for c in cache.coins] == ["3:1#0", "3:1#1", "3:1#2"]
        assert all(c.originating_cache_id == "cache:3:1" for c in cache.coins)

    def test_collect_until_empty(self) -> None:
        cache = _cache_with(Cell(0, 0), 3)
        for expected in (2, 1, 0):
            cache.collect()
            assert cache.coin_count == expected
        with pytest.raises(EmptyCacheError):
            cache.collect()
        assert cache.coin_count == 0

    def test_collect_is_last_in_first_out(self) -> None:
        cache = _cache_with(Cell(0, 0), 2)
        assert cache.collect().id == "0:0#1"

    def test_deposit_keeps_provenance(self) -> None:
        source = _cache_with(Cell(1, 1), 1)
        target = _cache_with(Cell(2, 2), 0)
        coin = source.collect()
        target.deposit(coin)
        assert target.coins == [coin]
        assert coin.originating_cache_id == "cache:1:1"

    def test_memento_round_trip(self) -> None:
        cache = _cache_with(Cell(-5, 12), 4)
        cache.deposit(Coin("9:9#0", "cache:9:9"))
        restored = Geocache.from_memento(Cell(-5, 12), cache.to_memento())
        assert restored == cache

    def test_memento_wrong_cell(self) -> None:
        cache = _cache_with(Cell(1, 2), 1)
        with pytest.raises(MalformedSnapshot):
            decode_coins(Cell(2, 1), cache.to_memento())

    @pytest.mark.parametrize(
        "memento",
        [
            "not json",
            "{}",
            '{"i": 0, "j": 0, "coins": [{"id": ""}]}',
            '{"i": "x", "j": 0, "coins": []}',
        ],
    )
    def test_memento_malformed(self, memento: str) -> None:
        with pytest.raises(MalformedSnapshot):
            decode_coins(Cell(0, 0), memento)


class TestSnapshotStore:
    """Tests for the memento registry."""

    def test_save_stores_cache_memento(self, store: SnapshotStore) -> None:
        cache = _cache_with(Cell(2, -3), 2)
        store.save(cache.id, cache.cell, cache.coins)
        assert store.snapshots[(2, -3)] == cache.to_memento()

    def test_restore_cache(self, store: SnapshotStore) -> None:
        cache = _cache_with(Cell(2, -3), 2)
        store.save_cache(cache)
        assert store.restore_cache(Cell(2, -3)) == cache
        assert store.restore_cache(Cell(0, 0)) is None

    def test_missing_is_none(self, store: SnapshotStore) -> None:
        assert store.try_restore(Cell(0, 0)) is None
        assert not store.has(Cell(0, 0))

    def test_save_and_restore(self, store: SnapshotStore) -> None:
        cache = _cache_with(Cell(5, 5), 2)
        store.save(cache.id, cache.cell, cache.coins)
        assert store.has(Cell(5, 5))
        assert Cell(5, 5) in store
        assert store.try_restore(Cell(5, 5)) == cache.coins

    def test_save_overwrites(self, store: SnapshotStore) -> None:
        cache = _cache_with(Cell(5, 5), 3)
        store.save_cache(cache)
        cache.collect()
        store.save_cache(cache)
        assert len(store) == 1
        assert len(store.try_restore(Cell(5, 5))) == 2

    def test_negative_keys_distinct(self, store: SnapshotStore) -> None:
        store.save_cache(_cache_with(Cell(-1, 12), 1))
        store.save_cache(_cache_with(Cell(-11, 2), 2))
        assert len(store.try_restore(Cell(-1, 12))) == 1
        assert len(store.try_restore(Cell(-11, 2))) == 2

    def test_empty_cache_snapshot(self, store: SnapshotStore) -> None:
        store.save_cache(_cache_with(Cell(0, 0), 0))
        assert store.try_restore(Cell(0, 0)) == []

    def test_corrupt_entry_raises(self, store: SnapshotStore) -> None:
        store.snapshots[(0, 0)] = "garbage"
        with pytest.raises(MalformedSnapshot):
            store.try_restore(Cell(0, 0))

    def test_discard_and_clear(self, store: SnapshotStore) -> None:
        store.save_cache(_cache_with(Cell(0, 0), 1))
        store.save_cache(_cache_with(Cell(0, 1), 1))
        store.discard(Cell(0, 0))
        store.discard(Cell(0, 0))
        assert list(store.keys()) == [(0, 1)]
        store.clear()
        assert len(store) == 0

    def test_records_round_trip(self, store: SnapshotStore) -> None:
        store.save_cache(_cache_with(Cell(3, -4), 2))
        store.save_cache(_cache_with(Cell(-8, 0), 5))
        copy = SnapshotStore()
        assert copy.load_records(store.to_records()) == 0
        assert copy.snapshots == store.snapshots

    def test_load_records_skips_bad_rows(self, store: SnapshotStore) -> None:
        good = _cache_with(Cell(1, 1), 1)
        rows = [
            {"i": 1, "j": 1, "snapshot": good.to_memento()},
            {"i": "one", "j": 1, "snapshot": "{}"},
            {"j": 2},
        ]
        assert store.load_records(rows) == 2
        assert store.try_restore(Cell(1, 1)) == good.coins
