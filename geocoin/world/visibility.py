"""Visibility — distance checks between points and caches.

Uses the equirectangular approximation (one degree of latitude is
111139 m, longitude is scaled by ``cos(lat)``).  The error grows with
distance from the reference latitude, so these helpers are only meant for
the short ranges the game works at.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from geocoin.caches.coin import Geocache
    from geocoin.world.cell import Cell, CellBounds, LatLng

METERS_PER_DEGREE = 111139.0


def distance_m(a: LatLng, b: LatLng) -> float:
    """Approximate ground distance in metres from ``a`` to ``b``.

    The longitude scale is taken at ``a``'s latitude.
    """
    d_lat = (b.lat - a.lat) * METERS_PER_DEGREE
    d_lng = (b.lng - a.lng) * METERS_PER_DEGREE * math.cos(math.radians(a.lat))
    return math.hypot(d_lat, d_lng)


def within_distance(
    points: Sequence[LatLng],
    center: LatLng,
    max_m: float,
) -> NDArray[np.bool_]:
    """Vectorised distance test for a batch of points.

    Args:
        points: Candidate positions.
        center: Reference point (also fixes the longitude scale).
        max_m: Maximum distance in metres, inclusive.

    Returns:
        Boolean mask, True where the point is within ``max_m``.
    """
    if not points:
        return np.zeros(0, dtype=np.bool_)
    coords = np.array([(p.lat, p.lng) for p in points], dtype=np.float64)
    d_lat = (coords[:, 0] - center.lat) * METERS_PER_DEGREE
    d_lng = (
        (coords[:, 1] - center.lng)
        * METERS_PER_DEGREE
        * math.cos(math.radians(center.lat))
    )
    return np.hypot(d_lat, d_lng) <= max_m


def caches_within(
    caches: Iterable[Geocache],
    center: LatLng,
    max_m: float,
    bounds_of: Callable[[Cell], CellBounds],
) -> list[Geocache]:
    """Return the caches whose cell centre lies within ``max_m`` of ``center``.

    Args:
        caches: Candidate caches.
        center: Reference point, usually the player position.
        max_m: Maximum distance in metres, inclusive.
        bounds_of: Maps a cell to its rectangle (``Grid.bounds_of``).
    """
    candidates = list(caches)
    mask = within_distance(
        [bounds_of(cache.cell).center for cache in candidates],
        center,
        max_m,
    )
    return [cache for cache, keep in zip(candidates, mask, strict=True) if keep]
