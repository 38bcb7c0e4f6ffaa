"""Shared fixtures for the Geocoin test suite."""

from __future__ import annotations

import pytest

from geocoin.caches.store import SnapshotStore
from geocoin.game.config import GameConfig
from geocoin.game.lifecycle import CacheLifecycleManager
from geocoin.game.session import GameSession
from geocoin.world.grid import Grid


@pytest.fixture
def grid() -> Grid:
    """A grid with the default 1e-4 degree cells."""
    return Grid(cell_width=1e-4)


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def dense_config() -> GameConfig:
    """Every cell holds a cache; 3x3 neighborhood centred on cell (5, 5)."""
    return GameConfig(
        origin_lat=5.5e-4,
        origin_lng=5.5e-4,
        cell_width=1e-4,
        neighborhood_size=1,
        cache_spawn_probability=1.0,
        max_coins_per_cache=10,
        visibility_meters=100.0,
    )


@pytest.fixture
def manager(grid: Grid, store: SnapshotStore, dense_config: GameConfig) -> CacheLifecycleManager:
    return CacheLifecycleManager(grid=grid, store=store, config=dense_config)


@pytest.fixture
def session(dense_config: GameConfig) -> GameSession:
    """A fresh session at cell (5, 5) with nine live caches."""
    return GameSession(config=dense_config)
