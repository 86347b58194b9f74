"""Spatial substrate: a fixed rows × cols grid of organism bags.

Each cell holds zero or more organisms. Co-occupancy is allowed and is how
predator/prey encounters happen (a lumberjack landing on a tree cell, a
bear landing on a lumberjack cell).

Invariant: an organism is in exactly one cell's bag, and that cell's
coordinates equal the organism's stored (row, col).

Out-of-bounds contract: every coordinate-taking operation treats
coordinates outside [0, rows) × [0, cols) as a silent no-op or a False /
empty result. Nothing here raises for bad coordinates; callers that need a
guarantee check in_bounds() first.

Inconsistent index: removing or moving an organism that is not in the
stated cell is a programming error. By default it is logged and reported
as False so a running simulation never dies mid-tick. strict=True raises
InconsistentIndexError instead (used by tests).
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from .organism import Organism
from .rng import RandomSource, create_rng
from .types import OrganismView, Position

logger = logging.getLogger(__name__)

# Moore neighbourhood offsets, row-major (the scan order used everywhere)
MOORE_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class InconsistentIndexError(RuntimeError):
    """Grid contents and an organism's stored position disagree."""


class Grid:
    """rows × cols cells, each an unordered bag of Organisms."""

    def __init__(self, rows: int, cols: int,
                 rng: Optional[RandomSource] = None,
                 strict: bool = False):
        if not isinstance(rows, int) or not isinstance(cols, int):
            raise ValueError(f"Grid dimensions must be integers, got {rows!r} × {cols!r}")
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows} × {cols}")
        self.rows = rows
        self.cols = cols
        self.rng = rng if rng is not None else create_rng()
        self.strict = strict
        self._cells: List[List[List[Organism]]] = [
            [[] for _ in range(cols)] for _ in range(rows)
        ]

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    # ── queries ───────────────────────────────────────────────────────

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Tuple[Organism, ...]:
        """Occupants of a cell (a copy). Empty tuple when out of bounds."""
        if not self.in_bounds(row, col):
            return ()
        return tuple(self._cells[row][col])

    def is_open(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and not self._cells[row][col]

    def neighbors8(self, row: int, col: int) -> List[Position]:
        """In-bounds Moore neighbours of (row, col), excluding the cell itself.

        Interior cells yield 8, edges 5, corners 3 (fewer on 1-wide grids).
        Out-of-bounds centres yield [].
        """
        if not self.in_bounds(row, col):
            return []
        return [
            (row + dr, col + dc)
            for dr, dc in MOORE_OFFSETS
            if self.in_bounds(row + dr, col + dc)
        ]

    def open_neighbors8(self, row: int, col: int) -> List[Position]:
        """Subset of neighbors8() whose cells are currently empty."""
        return [(r, c) for r, c in self.neighbors8(row, col)
                if not self._cells[r][c]]

    def random_position(self) -> Position:
        """Uniform (row, col); may be occupied."""
        return (self.rng.random_int(0, self.rows),
                self.rng.random_int(0, self.cols))

    def occupants(self) -> Iterator[Organism]:
        """All organisms, row-major, in bag order within a cell."""
        for row in self._cells:
            for bag in row:
                yield from bag

    def iter_cells(self) -> Iterator[Tuple[int, int, Tuple[Organism, ...]]]:
        """(row, col, occupants) for every cell, row-major."""
        for r, row in enumerate(self._cells):
            for c, bag in enumerate(row):
                yield r, c, tuple(bag)

    def population_count(self) -> int:
        return sum(len(bag) for row in self._cells for bag in row)

    def contains(self, organism: Organism) -> bool:
        """True if the organism is in the cell its position names."""
        if not self.in_bounds(organism.row, organism.col):
            return False
        return any(o is organism for o in self._cells[organism.row][organism.col])

    def snapshot(self) -> Tuple[OrganismView, ...]:
        return tuple(o.view() for o in self.occupants())

    # ── mutations ─────────────────────────────────────────────────────

    def spawn(self, organism: Organism, row: int, col: int) -> bool:
        """Append an organism to a cell and place it there.

        No uniqueness check: co-occupancy is intended.
        Returns False (grid unchanged) when (row, col) is out of bounds.
        """
        if not self.in_bounds(row, col):
            return False
        organism._place(row, col)
        self._cells[row][col].append(organism)
        return True

    def remove(self, row: int, col: int, organism: Organism) -> bool:
        """Remove an organism from a cell by identity.

        Returns False when out of bounds or when the organism isn't there.
        """
        if not self.in_bounds(row, col):
            return False
        idx = self._index_in(row, col, organism)
        if idx is None:
            self._inconsistent(f"remove: {organism!r} not in cell ({row}, {col})")
            return False
        del self._cells[row][col][idx]
        return True

    def move(self, from_row: int, from_col: int, organism: Organism,
             to_row: int, to_col: int) -> bool:
        """Relocate an organism between cells.

        The only path that changes an organism's position after spawning.

        Returns:
            True if the organism moved. False (grid unchanged) when the
            target is out of bounds, equals the source, or the organism
            is not in the source cell.
        """
        if not self.in_bounds(to_row, to_col) or not self.in_bounds(from_row, from_col):
            return False
        if (from_row, from_col) == (to_row, to_col):
            return False
        idx = self._index_in(from_row, from_col, organism)
        if idx is None:
            self._inconsistent(
                f"move: {organism!r} not in source cell ({from_row}, {from_col})"
            )
            return False
        del self._cells[from_row][from_col][idx]
        self._cells[to_row][to_col].append(organism)
        organism._place(to_row, to_col)
        return True

    def clear(self) -> None:
        for row in self._cells:
            for bag in row:
                bag.clear()

    # ── internals ─────────────────────────────────────────────────────

    def _index_in(self, row: int, col: int, organism: Organism) -> Optional[int]:
        for i, occupant in enumerate(self._cells[row][col]):
            if occupant is organism:
                return i
        return None

    def _inconsistent(self, message: str) -> None:
        if self.strict:
            raise InconsistentIndexError(message)
        logger.warning("Inconsistent grid index: %s", message)
