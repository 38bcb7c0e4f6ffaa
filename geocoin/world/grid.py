"""Grid — maps geographic coordinates onto integer cells.

The Grid owns the flyweight registry of ``Cell`` objects: every lookup of
the same ``(i, j)`` returns the identical instance, and instances are kept
for the lifetime of the grid.  It also answers the two spatial questions
the cache lifecycle needs: the rectangle a cell covers, and the square
block of cells around a point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from geocoin.world.cell import Cell, CellBounds, LatLng


@dataclass
class Grid:
    """A fixed-width lat/lng grid with a flyweight cell registry.

    Attributes:
        cell_width: Side of a cell in degrees (both lat and lng).
        cells: Registered cells keyed by ``(i, j)``.
    """

    cell_width: float = 1e-4
    cells: dict[tuple[int, int], Cell] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        if self.cell_width <= 0:
            msg = f"cell_width must be positive, got {self.cell_width}"
            raise ValueError(msg)

    def __len__(self) -> int:
        return len(self.cells)

    def _index(self, value: float) -> int:
        """Floor ``value / cell_width`` so it agrees with ``bounds_of``.

        Float division can land a hair on the wrong side of an integer;
        the result is nudged so that ``index * w <= value < (index + 1) * w``
        holds with the same products ``bounds_of`` uses.
        """
        w = self.cell_width
        index = math.floor(value / w)
        if value < index * w:
            index -= 1
        elif value >= (index + 1) * w:
            index += 1
        return index

    def cell_for(self, i: int, j: int) -> Cell:
        """Return the registered cell for ``(i, j)``, creating it on a miss."""
        key = (i, j)
        cell = self.cells.get(key)
        if cell is None:
            cell = Cell(i=i, j=j)
            self.cells[key] = cell
        return cell

    def cell_at(self, point: LatLng) -> Cell:
        """Return the cell containing ``point``.

        A point on a cell edge belongs to the higher-index cell; negative
        coordinates use true floor division.

        Args:
            point: Geographic coordinate.

        Returns:
            The flyweight Cell for that position.
        """
        return self.cell_for(self._index(point.lat), self._index(point.lng))

    def bounds_of(self, cell: Cell) -> CellBounds:
        """Return the rectangle covered by ``cell``.

        Args:
            cell: Any cell (it need not be registered).

        Returns:
            South-west corner ``(i*w, j*w)`` and north-east corner
            ``((i+1)*w, (j+1)*w)``.
        """
        w = self.cell_width
        return CellBounds(
            south_west=LatLng(cell.i * w, cell.j * w),
            north_east=LatLng((cell.i + 1) * w, (cell.j + 1) * w),
        )

    def neighborhood(self, center: LatLng, radius: int) -> list[Cell]:
        """Return the square block of cells around ``center``.

        Every cell at offset ``(di, dj)`` with ``|di| <= radius`` and
        ``|dj| <= radius`` from the centre cell is included, in row-major
        order, giving ``(2 * radius + 1) ** 2`` cells.

        Args:
            center: Point whose cell is the centre of the block.
            radius: Half-width of the block in cells.

        Raises:
            ValueError: If ``radius`` is negative.
        """
        if radius < 0:
            msg = f"radius must be >= 0, got {radius}"
            raise ValueError(msg)
        origin = self.cell_at(center)
        result: list[Cell] = []
        for di in range(-radius, radius + 1):
            for dj in range(-radius, radius + 1):
                result.append(self.cell_for(origin.i + di, origin.j + dj))
        return result
