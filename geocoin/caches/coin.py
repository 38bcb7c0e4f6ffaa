"""Coins and geocaches.

A ``Geocache`` is the content of one grid cell: an ordered pile of
``Coin`` objects.  Coins keep the id of the cache that minted them no
matter where they travel afterwards.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field

from pydantic import ValidationError

from geocoin.caches.errors import EmptyCacheError, MalformedSnapshot
from geocoin.caches.schemas import CacheSnapshot, CoinRecord
from geocoin.world.cell import Cell
from geocoin.world.luck import luck


def cache_id_for(cell: Cell) -> str:
    """Return the cache id used for ``cell``."""
    return f"cache:{cell.i}:{cell.j}"


def generate_number_of_coins(
    cache_id: str,
    max_coins: int = 10,
    *,
    rand: Callable[[str], float] = luck,
) -> int:
    """Return the starting coin count for a freshly generated cache.

    Args:
        cache_id: Identity string the count is keyed by.
        max_coins: Upper bound of the count.
        rand: Deterministic value source, ``luck`` unless overridden.

    Returns:
        ``floor(rand(cache_id) * max_coins) + 1``, in ``[1, max_coins]``.
    """
    return math.floor(rand(cache_id) * max_coins) + 1


@dataclass(frozen=True)
class Coin:
    """A unit of value.

    Attributes:
        id: ``"{i}:{j}#{serial}"`` of the minting cell and sequence number.
        originating_cache_id: Id of the cache that minted the coin.
    """

    id: str
    originating_cache_id: str

    def to_record(self) -> CoinRecord:
        return CoinRecord(id=self.id, origin=self.originating_cache_id)

    @classmethod
    def from_record(cls, record: CoinRecord) -> Coin:
        return cls(id=record.id, originating_cache_id=record.origin)


@dataclass
class Geocache:
    """The coins stored at one cell.

    Attributes:
        cell: The cell this cache occupies.
        coins: Coins in collection order (last in, first out).
        id: Cache identifier, derived from the cell.
    """

    cell: Cell
    coins: list[Coin] = field(default_factory=list)
    id: str = field(default="")

    def __post_init__(self) -> None:
        if not self.id:
            self.id = cache_id_for(self.cell)

    @classmethod
    def generate(
        cls,
        cell: Cell,
        max_coins: int = 10,
        *,
        rand: Callable[[str], float] = luck,
    ) -> Geocache:
        """Create the first-visit content of ``cell``.

        Coin ids are ``"{i}:{j}#{serial}"`` for serials ``0..n-1``.

        Args:
            cell: Cell to populate.
            max_coins: Upper bound on the starting coin count.
            rand: Deterministic value source.
        """
        cache_id = cache_id_for(cell)
        count = generate_number_of_coins(cache_id, max_coins, rand=rand)
        coins = [
            Coin(id=f"{cell.i}:{cell.j}#{serial}", originating_cache_id=cache_id)
            for serial in range(count)
        ]
        return cls(cell=cell, coins=coins, id=cache_id)

    @property
    def coin_count(self) -> int:
        return len(self.coins)

    def collect(self) -> Coin:
        """Remove and return the most recently added coin.

        Raises:
            EmptyCacheError: If the cache holds no coins.  Nothing changes.
        """
        if not self.coins:
            msg = f"{self.id} has no coins left to collect"
            raise EmptyCacheError(msg)
        return self.coins.pop()

    def deposit(self, coin: Coin) -> None:
        """Add ``coin`` to the top of the pile."""
        self.coins.append(coin)

    def to_snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(
            i=self.cell.i,
            j=self.cell.j,
            coins=[coin.to_record() for coin in self.coins],
        )

    def to_memento(self) -> str:
        """Serialize the coin state into an opaque string."""
        return self.to_snapshot().model_dump_json()

    @classmethod
    def from_memento(cls, cell: Cell, memento: str) -> Geocache:
        """Rebuild a cache for ``cell`` from ``to_memento`` output.

        Raises:
            MalformedSnapshot: If the memento does not validate or belongs
                to a different cell.
        """
        return cls(cell=cell, coins=decode_coins(cell, memento))


def decode_coins(cell: Cell, memento: str) -> list[Coin]:
    """Validate a memento for ``cell`` and return its coins in order.

    Raises:
        MalformedSnapshot: On schema failure or a cell mismatch.
    """
    try:
        snapshot = CacheSnapshot.model_validate_json(memento)
    except ValidationError as exc:
        msg = f"snapshot for ({cell.i}, {cell.j}) is malformed: {exc}"
        raise MalformedSnapshot(msg) from exc
    if (snapshot.i, snapshot.j) != cell.key:
        msg = (
            f"snapshot for ({cell.i}, {cell.j}) "
            f"describes ({snapshot.i}, {snapshot.j})"
        )
        raise MalformedSnapshot(msg)
    return [Coin.from_record(record) for record in snapshot.coins]
