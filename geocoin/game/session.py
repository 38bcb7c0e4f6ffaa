"""GameSession — the player and the cache world, wired together.

This is the surface the presentation layer talks to: it moves the player,
moves coins between the player and caches, and re-runs the cache
lifecycle whenever the player's position changes.
"""

from __future__ import annotations

import logging
from dataclasses import InitVar, dataclass, field

from geocoin.caches.coin import Coin, Geocache
from geocoin.caches.store import SnapshotStore
from geocoin.game.config import GameConfig
from geocoin.game.lifecycle import CacheLifecycleManager
from geocoin.game.player import Direction, Player
from geocoin.world.cell import LatLng
from geocoin.world.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Owns all mutable game state for one play session.

    Attributes:
        config: Gameplay tunables.
        initial_player: Player to resume with; a fresh one spawns at
            ``config.origin`` if omitted.
        store: Snapshot table, possibly pre-loaded from a saved game.
        player: The active player.
        grid: Cell registry.
        manager: Cache lifecycle manager.
    """

    config: GameConfig = field(default_factory=GameConfig)
    initial_player: InitVar[Player | None] = None
    store: SnapshotStore = field(default_factory=SnapshotStore)
    player: Player = field(init=False)
    grid: Grid = field(init=False)
    manager: CacheLifecycleManager = field(init=False)

    def __post_init__(self, initial_player: Player | None) -> None:
        """Build the grid and lifecycle manager, then materialize the start area."""
        self.grid = Grid(cell_width=self.config.cell_width)
        self.manager = CacheLifecycleManager(
            grid=self.grid,
            store=self.store,
            config=self.config,
        )
        if initial_player is None:
            initial_player = Player(position=self.config.origin)
        self.player = initial_player
        self.manager.refresh(self.player.position)

    def materialized_caches(self) -> list[Geocache]:
        return self.manager.materialized_caches()

    def caches_near(self, max_m: float | None = None) -> list[Geocache]:
        """Live caches within ``max_m`` metres of the player."""
        return self.manager.caches_near(self.player.position, max_m)

    def collect(self, cache_id: str) -> Coin:
        """Move one coin from the cache to the player.

        Raises:
            UnknownCacheError: If ``cache_id`` is not live.
            EmptyCacheError: If the cache is empty.  Nothing changes.
        """
        coin = self.manager.get(cache_id).collect()
        self.player.receive(coin)
        logger.debug("Collected %s from %s", coin.id, cache_id)
        return coin

    def deposit(self, cache_id: str, coin: Coin | None = None) -> None:
        """Move a coin from the player into the cache.

        Args:
            cache_id: Destination cache.
            coin: Coin to deposit; the most recently collected if omitted.

        Raises:
            UnknownCacheError: If ``cache_id`` is not live.
            NoCoinsHeldError: If the player holds no coins.  Nothing changes.
            ValueError: If ``coin`` is not held by the player.
        """
        cache = self.manager.get(cache_id)
        given = self.player.give(coin)
        cache.deposit(given)
        logger.debug("Deposited %s into %s", given.id, cache_id)

    def on_player_moved(self, position: LatLng) -> None:
        """Relocate the player (e.g. from a geolocation fix) and refresh caches."""
        self.player.move_to(position)
        self.manager.on_player_moved(position)

    def move(self, direction: Direction) -> LatLng:
        """Step one cell in ``direction`` and refresh caches.

        Returns:
            The player's new position.
        """
        position = self.player.step(direction, self.config.cell_width)
        self.manager.on_player_moved(position)
        return position

    def reset(self) -> None:
        """Return to the spawn point and rebuild the world from scratch.

        The player's coins and history are discarded along with every live
        cache and snapshot, so all caches regenerate on their next visit.
        """
        self.manager.clear()
        self.player = Player(position=self.config.origin)
        self.manager.refresh(self.player.position)
        logger.info("Session reset to %s", self.player.position)
