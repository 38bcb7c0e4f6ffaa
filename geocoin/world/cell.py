"""Cell — identity record for one square of the world grid.

Cells carry nothing but their integer indices.  The cached content lives
in ``Geocache`` objects, and the geographic rectangle is derived from the
indices on demand by the grid.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LatLng:
    """A geographic coordinate in decimal degrees.

    Attributes:
        lat: Latitude.
        lng: Longitude.
    """

    lat: float
    lng: float


@dataclass(frozen=True)
class Cell:
    """A single square of the grid.

    Equality and hashing depend only on ``(i, j)``.  The ``Grid`` hands
    out exactly one instance per pair, so identity comparison also holds
    for cells obtained from the same grid.

    Attributes:
        i: Row index (latitude direction).
        j: Column index (longitude direction).
    """

    i: int
    j: int

    @property
    def key(self) -> tuple[int, int]:
        """The ``(i, j)`` pair used to key registries."""
        return (self.i, self.j)


@dataclass(frozen=True)
class CellBounds:
    """Geographic rectangle covered by a cell.

    Attributes:
        south_west: Lower-left corner (inclusive).
        north_east: Upper-right corner (exclusive).
    """

    south_west: LatLng
    north_east: LatLng

    @property
    def center(self) -> LatLng:
        """Midpoint of the rectangle."""
        return LatLng(
            (self.south_west.lat + self.north_east.lat) / 2.0,
            (self.south_west.lng + self.north_east.lng) / 2.0,
        )

    def contains(self, point: LatLng) -> bool:
        """Return True if ``point`` lies inside the half-open rectangle."""
        return (
            self.south_west.lat <= point.lat < self.north_east.lat
            and self.south_west.lng <= point.lng < self.north_east.lng
        )
