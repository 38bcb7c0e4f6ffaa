"""Config — load gameplay tunables from YAML files.

Grid geometry, cache density, and the spawn point live in YAML and are
parsed into a typed dataclass here, so the core stays data-driven.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from geocoin.world.cell import LatLng


@dataclass
class GameConfig:
    """Top-level game configuration.

    Attributes:
        origin_lat: Latitude of the spawn point.
        origin_lng: Longitude of the spawn point.
        cell_width: Side of a grid cell in degrees.
        neighborhood_size: Half-width, in cells, of the square block of
            cells kept materialized around the player.
        cache_spawn_probability: Chance that a given cell holds a cache.
        max_coins_per_cache: Upper bound on a new cache's coin count.
        visibility_meters: Default range for distance-based cache queries.
    """

    origin_lat: float = 36.98949379578401
    origin_lng: float = -122.06277128548504
    cell_width: float = 1e-4
    neighborhood_size: int = 8
    cache_spawn_probability: float = 0.1
    max_coins_per_cache: int = 10
    visibility_meters: float = 100.0

    @property
    def origin(self) -> LatLng:
        return LatLng(self.origin_lat, self.origin_lng)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GameConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated GameConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            origin_lat=data.get("origin_lat", cls.origin_lat),
            origin_lng=data.get("origin_lng", cls.origin_lng),
            cell_width=data.get("cell_width", cls.cell_width),
            neighborhood_size=data.get("neighborhood_size", cls.neighborhood_size),
            cache_spawn_probability=data.get(
                "cache_spawn_probability",
                cls.cache_spawn_probability,
            ),
            max_coins_per_cache=data.get(
                "max_coins_per_cache",
                cls.max_coins_per_cache,
            ),
            visibility_meters=data.get("visibility_meters", cls.visibility_meters),
        )
