"""Layout grid — the shared 2-D array of cells every stage draws into.

The grid is sparse and grows with the cells written to it.  Writes and
reads are bounds-checked against a fixed addressable extent; the used
extent (``dimensions``) is what exporters emit.
"""

from __future__ import annotations

from collections.abc import Iterator

from gridhdl.catalog import AIR, Cell
from gridhdl.pipeline.config import LAYOUT_RULES
from gridhdl.pipeline.errors import LayoutError


class GridBoundsError(LayoutError, IndexError):
    """Raised for coordinates outside the addressable grid."""

    def __init__(self, x: int, y: int, max_width: int, max_height: int) -> None:
        self.x = x
        self.y = y
        super().__init__(
            f"Cell ({x}, {y}) outside the addressable grid "
            f"({max_width} x {max_height})"
        )


class Grid:
    """A bounded, growable grid of cells.  Unwritten cells are air.

    Writes are last-writer-wins: drawing code upgrades cells (a wire to a
    crossing, a corner to a T-junction) by overwriting them.
    """

    def __init__(
        self,
        max_width: int = LAYOUT_RULES.max_grid_width,
        max_height: int = LAYOUT_RULES.max_grid_height,
    ) -> None:
        self.max_width = max_width
        self.max_height = max_height
        self._cells: dict[tuple[int, int], Cell] = {}
        self._width = 0
        self._height = 0

    # ── Cell access ────────────────────────────────────────────────

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.max_width and 0 <= y < self.max_height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise GridBoundsError(x, y, self.max_width, self.max_height)

    def get(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return self._cells.get((x, y), AIR)

    def set(self, x: int, y: int, cell: Cell) -> None:
        self._check(x, y)
        self._cells[(x, y)] = cell
        self._width = max(self._width, x + 1)
        self._height = max(self._height, y + 1)

    # ── Extent / queries ───────────────────────────────────────────

    @property
    def dimensions(self) -> tuple[int, int]:
        """Used extent as (width, height); (0, 0) when nothing was drawn."""
        return (self._width, self._height)

    def rows(self) -> Iterator[list[Cell]]:
        """Yield each row of the used extent, top to bottom."""
        width, height = self.dimensions
        for y in range(height):
            yield [self._cells.get((x, y), AIR) for x in range(width)]

    def count(self, cell: Cell) -> int:
        """Number of positions holding exactly *cell*."""
        if cell == AIR:
            width, height = self.dimensions
            return width * height - sum(1 for c in self._cells.values() if c != AIR)
        return sum(1 for c in self._cells.values() if c == cell)

    def items(self) -> Iterator[tuple[tuple[int, int], Cell]]:
        """Yield ((x, y), cell) for every written, non-air position."""
        for pos, cell in self._cells.items():
            if cell != AIR:
                yield pos, cell

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.dimensions == other.dimensions
                and dict(self.items()) == dict(other.items()))
