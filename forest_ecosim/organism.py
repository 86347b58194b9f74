"""A single living entity on the forest grid.

Lifecycle:
  created at a grid cell with age = stage start age
  aged once per tick by advance_one_tick()
  matures to maturity.next exactly when age == maturity.age
  removed by the Ecosystem when felled, mauled or culled (alive → False)

Age keeps accumulating across transitions: a sapling created at age 0
becomes a tree at 12 and an elder at 120.

Position is written only by the Grid (spawn places, move relocates).
"""

from __future__ import annotations

from itertools import count
from typing import Optional

from .catalog import DEFAULT_CATALOG, SpeciesCatalog
from .types import OrganismView, Position, SpeciesGroup, StageParameters

_ids = count(1)


class Organism:
    """One tree, lumberjack or bear."""

    __slots__ = ('uid', 'stage', 'parameters', 'age', 'radius',
                 'row', 'col', 'alive', '_catalog')

    def __init__(self, stage: str, position: Position = (-1, -1),
                 catalog: Optional[SpeciesCatalog] = None):
        self._catalog = catalog if catalog is not None else DEFAULT_CATALOG
        params = self._catalog.lookup(stage)
        self.uid = next(_ids)
        self.stage = params.name
        self.parameters: StageParameters = params
        self.age = params.start_age
        self.radius = params.radius.start
        self.row, self.col = position
        self.alive = True

    @classmethod
    def create(cls, stage: str, position: Position = (-1, -1),
               catalog: Optional[SpeciesCatalog] = None) -> 'Organism':
        """Create an organism in `stage`.

        Raises:
            UnknownStage: If `stage` is not in the catalog.
        """
        return cls(stage, position, catalog)

    def __repr__(self) -> str:
        return (f"Organism(uid={self.uid}, stage={self.stage!r}, age={self.age}, "
                f"pos=({self.row}, {self.col}), alive={self.alive})")

    @property
    def species(self) -> SpeciesGroup:
        return self.parameters.species

    @property
    def position(self) -> Position:
        return (self.row, self.col)

    def advance_one_tick(self) -> bool:
        """Age by one tick, grow, and mature if due.

        Returns:
            True if the organism changed stage this tick.
        """
        self.age += 1
        growth = self.parameters.radius.growth
        if growth > 0:
            self.radius = min(self.radius + growth, self.parameters.radius.end)

        maturity = self.parameters.maturity
        if maturity.age > 0 and self.age == maturity.age and maturity.next:
            self.parameters = self._catalog.lookup(maturity.next)
            self.stage = self.parameters.name
            return True
        return False

    def view(self) -> OrganismView:
        return OrganismView(
            row=self.row,
            col=self.col,
            stage=self.stage,
            species=self.species,
            radius=self.radius,
            color=self.parameters.color,
        )

    # Grid-only: keeps the stored position equal to the occupied cell
    def _place(self, row: int, col: int) -> None:
        self.row = row
        self.col = col
