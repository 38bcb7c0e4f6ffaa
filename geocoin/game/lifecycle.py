"""CacheLifecycleManager — keeps the caches around the player materialized.

Every cell moves through three states:

1. ``UNMATERIALIZED`` — never seen; content will be generated from
   ``luck`` the first time it enters the neighborhood.
2. ``LIVE`` — a ``Geocache`` object exists and can be collected from.
3. ``EVICTED`` — the cache left the neighborhood; its coins were written
   to the ``SnapshotStore`` and the live object dropped.

Evicted cells come back from their snapshot, never from generation, so
coins moved by the player survive any amount of wandering.  Membership in
the square neighborhood is the only admission rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from geocoin.caches.coin import Geocache
from geocoin.caches.errors import MalformedSnapshot, UnknownCacheError
from geocoin.caches.store import SnapshotStore
from geocoin.game.config import GameConfig
from geocoin.world.cell import Cell, LatLng
from geocoin.world.grid import Grid
from geocoin.world.luck import luck
from geocoin.world.visibility import caches_within

logger = logging.getLogger(__name__)


class CacheState(Enum):
    """Where a cell's cache currently lives."""

    UNMATERIALIZED = auto()
    LIVE = auto()
    EVICTED = auto()


@dataclass
class CacheLifecycleManager:
    """Creates, restores, and evicts caches as the neighborhood changes.

    Attributes:
        grid: Cell registry shared with the session.
        store: Snapshot table for evicted caches.
        config: Gameplay tunables.
        live: Materialized caches keyed by ``(i, j)``.
    """

    grid: Grid
    store: SnapshotStore
    config: GameConfig = field(default_factory=GameConfig)
    live: dict[tuple[int, int], Geocache] = field(init=False, default_factory=dict)

    def has_cache(self, cell: Cell) -> bool:
        """Return True if ``cell`` holds a cache at all."""
        return luck(f"{cell.i},{cell.j}") < self.config.cache_spawn_probability

    def state_of(self, cell: Cell) -> CacheState:
        if cell.key in self.live:
            return CacheState.LIVE
        if self.store.has(cell):
            return CacheState.EVICTED
        return CacheState.UNMATERIALIZED

    def materialized_caches(self) -> list[Geocache]:
        """Return the live caches in cell order."""
        return [self.live[key] for key in sorted(self.live)]

    def get(self, cache_id: str) -> Geocache:
        """Return the live cache with ``cache_id``.

        Raises:
            UnknownCacheError: If no live cache has that id.
        """
        for cache in self.live.values():
            if cache.id == cache_id:
                return cache
        msg = f"no live cache with id {cache_id!r}"
        raise UnknownCacheError(msg)

    def visible_cells(self, center: LatLng) -> list[Cell]:
        """Return the cells in the neighborhood of ``center`` that hold a cache."""
        return [
            cell
            for cell in self.grid.neighborhood(center, self.config.neighborhood_size)
            if self.has_cache(cell)
        ]

    def refresh(self, center: LatLng) -> None:
        """Bring the live set in line with the neighborhood of ``center``.

        Caches that fell out of range are snapshotted and dropped first;
        then every cache cell in range that is not yet live is restored
        from its snapshot or, on a first visit, generated.

        Args:
            center: The player's position.
        """
        wanted = {cell.key: cell for cell in self.visible_cells(center)}

        for key in [key for key in self.live if key not in wanted]:
            self.evict(self.grid.cell_for(*key))

        for key, cell in wanted.items():
            if key not in self.live:
                self.materialize(cell)

    on_player_moved = refresh

    def materialize(self, cell: Cell) -> Geocache:
        """Make ``cell``'s cache live and return it.

        A cell that is already live is returned as-is.  A snapshot that
        fails validation is dropped and the cell is generated afresh.
        """
        existing = self.live.get(cell.key)
        if existing is not None:
            return existing

        try:
            cache = self.store.restore_cache(cell)
        except MalformedSnapshot as exc:
            logger.warning("Regenerating cell (%d, %d): %s", cell.i, cell.j, exc)
            self.store.discard(cell)
            cache = None

        if cache is None:
            cache = Geocache.generate(cell, self.config.max_coins_per_cache)
            logger.debug("Generated %s with %d coins", cache.id, cache.coin_count)
        else:
            logger.debug("Restored %s with %d coins", cache.id, cache.coin_count)

        self.live[cell.key] = cache
        return cache

    def evict(self, cell: Cell) -> None:
        """Snapshot and drop the live cache at ``cell``.

        Evicting a cell that is not live leaves its snapshot untouched.
        """
        cache = self.live.pop(cell.key, None)
        if cache is None:
            return
        self.store.save_cache(cache)
        logger.debug("Evicted %s", cache.id)

    def caches_near(self, point: LatLng, max_m: float | None = None) -> list[Geocache]:
        """Return live caches whose cell centre is within ``max_m`` metres.

        Args:
            point: Reference point.
            max_m: Range in metres; ``config.visibility_meters`` if omitted.
        """
        if max_m is None:
            max_m = self.config.visibility_meters
        return caches_within(
            self.materialized_caches(),
            point,
            max_m,
            self.grid.bounds_of,
        )

    def clear(self) -> None:
        """Forget every live cache and snapshot."""
        self.live.clear()
        self.store.clear()
