"""SnapshotStore — memento registry for caches that are out of view.

Keyed directly by the ``(i, j)`` pair of a cell.  A snapshot is written
every time a cache is evicted and overwritten on the next eviction; the
store never forgets a cell on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from geocoin.caches.coin import Coin, Geocache
from geocoin.caches.schemas import SnapshotEntry
from geocoin.world.cell import Cell

logger = logging.getLogger(__name__)


@dataclass
class SnapshotStore:
    """Serialized coin state for every cache evicted so far.

    Attributes:
        snapshots: Opaque snapshot strings keyed by ``(i, j)``.
    """

    snapshots: dict[tuple[int, int], str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.snapshots)

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, Cell) and self.has(cell)

    def keys(self) -> Iterator[tuple[int, int]]:
        return iter(self.snapshots)

    def save(self, cache_id: str, cell: Cell, coins: Iterable[Coin]) -> None:
        """Serialize ``coins`` for ``cell``, replacing any older snapshot.

        Args:
            cache_id: Id of the cache being saved (for logging).
            cell: The cell the cache occupies.
            coins: Current coins in order.
        """
        self.save_cache(Geocache(cell=cell, coins=list(coins), id=cache_id))

    def save_cache(self, cache: Geocache) -> None:
        """Snapshot a live cache."""
        self.snapshots[cache.cell.key] = cache.to_memento()
        logger.debug("Saved snapshot of %s (%d coins)", cache.id, cache.coin_count)

    def try_restore(self, cell: Cell) -> list[Coin] | None:
        """Return the saved coins for ``cell``, or None if never saved.

        Raises:
            MalformedSnapshot: If the stored entry fails validation.
        """
        cache = self.restore_cache(cell)
        return None if cache is None else cache.coins

    def restore_cache(self, cell: Cell) -> Geocache | None:
        """Rebuild the cache saved for ``cell``, or None if never saved.

        Raises:
            MalformedSnapshot: If the stored entry fails validation.
        """
        memento = self.snapshots.get(cell.key)
        if memento is None:
            return None
        return Geocache.from_memento(cell, memento)

    def has(self, cell: Cell) -> bool:
        return cell.key in self.snapshots

    def discard(self, cell: Cell) -> None:
        """Forget the snapshot for ``cell`` if there is one."""
        self.snapshots.pop(cell.key, None)

    def clear(self) -> None:
        self.snapshots.clear()

    def to_records(self) -> list[dict[str, Any]]:
        """Dump the table as a list of ``{"i", "j", "snapshot"}`` dicts."""
        return [
            SnapshotEntry(i=i, j=j, snapshot=memento).model_dump()
            for (i, j), memento in sorted(self.snapshots.items())
        ]

    def load_records(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Merge entries produced by ``to_records``.

        Entries that fail validation are skipped so one bad row does not
        block the rest of the table.  Snapshot bodies are validated lazily
        by ``try_restore``.

        Args:
            records: Rows to load.

        Returns:
            Number of rows skipped.
        """
        skipped = 0
        for raw in records:
            try:
                entry = SnapshotEntry.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Skipping malformed snapshot entry: %s", exc)
                skipped += 1
                continue
            self.snapshots[(entry.i, entry.j)] = entry.snapshot
        return skipped
