"""Core data types for Forest EcoSim.

This module is the SINGLE SOURCE OF TRUTH for:
  - SpeciesGroup enumeration (tree, lumberjack, bear)
  - Stage parameter records (Maturity, RadiusSpec, SpawnSpec, StageParameters)
  - Read-only organism views handed to renderers

Stage records are frozen: a stage transition swaps which record an organism
points at, it never edits a record in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class SpeciesGroup(str, Enum):
    """Broad category used for population indexing and interaction rules."""
    TREE = 'tree'
    LUMBERJACK = 'lumberjack'
    BEAR = 'bear'


# Index order for per-group arrays (model results, snapshots)
GROUP_ORDER = (SpeciesGroup.TREE, SpeciesGroup.LUMBERJACK, SpeciesGroup.BEAR)

Position = Tuple[int, int]
RGBA = Tuple[int, int, int, float]


# ═══════════════════════════════════════════════════════════════════════
# STAGE PARAMETER RECORDS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Maturity:
    """Age threshold and neighbouring stage names.

    age == 0 marks a terminal stage. Empty names mean "none".
    """
    age: int = 0
    previous: str = ''
    next: str = ''

    @property
    def is_terminal(self) -> bool:
        return self.age == 0 or not self.next


@dataclass(frozen=True)
class RadiusSpec:
    """Visual radius: starting value, cap, and growth per tick."""
    start: float
    end: float
    growth: float = 0.0


@dataclass(frozen=True)
class SpawnSpec:
    """Per-tick reproduction chance and the stage of the offspring."""
    chance: float = 0.0
    child: str = ''


@dataclass(frozen=True)
class StageParameters:
    """Everything the simulation needs to know about one lifecycle stage."""
    name: str
    maturity: Maturity
    radius: RadiusSpec
    spawn: SpawnSpec
    species: SpeciesGroup
    color: RGBA
    lumber_score: int = 0
    movement: int = 0
    start_age: int = 0

    @property
    def can_spawn(self) -> bool:
        return self.spawn.chance > 0 and bool(self.spawn.child)

    @property
    def is_lumber(self) -> bool:
        """Tree-group stages worth lumber are felled by lumberjacks."""
        return self.species is SpeciesGroup.TREE and self.lumber_score > 0

    @property
    def mpl_color(self) -> Tuple[float, float, float, float]:
        """Color as a matplotlib RGBA tuple (all channels in [0, 1])."""
        r, g, b, a = self.color
        return (r / 255.0, g / 255.0, b / 255.0, float(a))


# ═══════════════════════════════════════════════════════════════════════
# RENDERER DATA TRANSFER OBJECTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class OrganismView:
    """Read-only summary of one organism for renderers."""
    row: int
    col: int
    stage: str
    species: SpeciesGroup
    radius: float
    color: RGBA
