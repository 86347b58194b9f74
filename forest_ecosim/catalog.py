"""Species catalog: the static table of per-stage parameters.

Stages and their lifecycle chain:
  sapling → tree → elder        (tree group; only stages that age into others)
  lumberjack                    (terminal)
  bear                          (terminal)

The table is looked up when an organism is created and when it matures.
Nothing here is mutable.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .types import Maturity, RadiusSpec, SpawnSpec, SpeciesGroup, StageParameters


class UnknownStage(KeyError):
    """Raised when a stage name is not present in the catalog."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown stage '{self.name}'"


# ═══════════════════════════════════════════════════════════════════════
# DEFAULT STAGE TABLE
# ═══════════════════════════════════════════════════════════════════════

DEFAULT_STAGES = (
    StageParameters(
        name='sapling',
        maturity=Maturity(age=12, previous='', next='tree'),
        radius=RadiusSpec(start=2.0, end=11.0, growth=0.75),
        spawn=SpawnSpec(chance=0.0, child=''),
        species=SpeciesGroup.TREE,
        color=(200, 250, 28, 0.6),
        start_age=0,
    ),
    StageParameters(
        name='tree',
        maturity=Maturity(age=120, previous='sapling', next='elder'),
        radius=RadiusSpec(start=11.0, end=11.0),
        spawn=SpawnSpec(chance=0.1, child='sapling'),
        species=SpeciesGroup.TREE,
        color=(140, 230, 40, 0.6),
        lumber_score=1,
        start_age=12,
    ),
    StageParameters(
        name='elder',
        maturity=Maturity(age=0, previous='tree', next=''),
        radius=RadiusSpec(start=11.0, end=11.0),
        spawn=SpawnSpec(chance=0.2, child='sapling'),
        species=SpeciesGroup.TREE,
        color=(60, 180, 30, 0.6),
        lumber_score=2,
        start_age=120,
    ),
    StageParameters(
        name='lumberjack',
        maturity=Maturity(),
        radius=RadiusSpec(start=6.0, end=6.0),
        spawn=SpawnSpec(),
        species=SpeciesGroup.LUMBERJACK,
        color=(210, 45, 45, 0.5),
        movement=3,
        start_age=20,
    ),
    StageParameters(
        name='bear',
        maturity=Maturity(),
        radius=RadiusSpec(start=8.5, end=8.5),
        spawn=SpawnSpec(),
        species=SpeciesGroup.BEAR,
        color=(220, 180, 150, 0.8),
        movement=5,
        start_age=5,
    ),
)

# Stage each species group is seeded and respawned as
GROUP_SEED_STAGE = MappingProxyType({
    SpeciesGroup.TREE: 'tree',
    SpeciesGroup.LUMBERJACK: 'lumberjack',
    SpeciesGroup.BEAR: 'bear',
})


class SpeciesCatalog:
    """Immutable name → StageParameters lookup."""

    def __init__(self, stages: Iterable[StageParameters] = DEFAULT_STAGES,
                 validate: bool = True):
        table: Dict[str, StageParameters] = {}
        for stage in stages:
            if stage.name in table:
                raise ValueError(f"Duplicate stage '{stage.name}' in catalog")
            table[stage.name] = stage
        self._table: Mapping[str, StageParameters] = MappingProxyType(table)
        if validate:
            self.validate()

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def __iter__(self):
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    @property
    def names(self) -> List[str]:
        return list(self._table)

    def lookup(self, name: str) -> StageParameters:
        """Return the parameters for a stage.

        Raises:
            UnknownStage: If the name is not in the table.
        """
        try:
            return self._table[name]
        except KeyError:
            raise UnknownStage(name) from None

    def next_stage(self, name: str) -> Optional[StageParameters]:
        """Stage an organism of `name` matures into, or None if terminal."""
        stage = self.lookup(name)
        if stage.maturity.is_terminal:
            return None
        return self.lookup(stage.maturity.next)

    def stages_in(self, group: SpeciesGroup) -> List[StageParameters]:
        return [s for s in self._table.values() if s.species is group]

    def validate(self) -> None:
        """Check that all stage references resolve. Raises ValueError.

        Checks:
          - maturity.next / maturity.previous / spawn.child name real stages
          - a non-terminal stage's next stage is in the same species group
          - spawn chances are probabilities
        """
        for stage in self._table.values():
            refs = {
                'maturity.next': stage.maturity.next,
                'maturity.previous': stage.maturity.previous,
                'spawn.child': stage.spawn.child,
            }
            for field_name, ref in refs.items():
                if ref and ref not in self._table:
                    raise ValueError(
                        f"{stage.name}.{field_name} refers to unknown stage '{ref}'"
                    )
            if stage.maturity.age > 0 and stage.maturity.next:
                nxt = self._table[stage.maturity.next]
                if nxt.species is not stage.species:
                    raise ValueError(
                        f"{stage.name} matures into '{nxt.name}' of a "
                        f"different species group ({nxt.species.value})"
                    )
            if not (0.0 <= stage.spawn.chance <= 1.0):
                raise ValueError(
                    f"{stage.name}.spawn.chance must be in [0, 1], "
                    f"got {stage.spawn.chance}"
                )


DEFAULT_CATALOG = SpeciesCatalog()


def lookup(name: str) -> StageParameters:
    """Look a stage up in the default catalog."""
    return DEFAULT_CATALOG.lookup(name)
