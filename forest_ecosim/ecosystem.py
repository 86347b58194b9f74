"""Forest ecosystem: the per-tick state machine.

One tick runs these phases in order. Later phases see the effects of
earlier ones within the same tick:

  1. Trees: age/grow every tree-group organism; stages with a spawn
     chance try to seed ONE sapling into an open Moore
     neighbour (first neighbour whose Bernoulli trial passes).
  2. Lumberjacks: age, then up to `movement` random Moore steps. After each
     step, fell every tree/elder in the landing cell (lumber
     credited by stage score). Felling or meeting a bear ends
     the lumberjack's movement for this tick.
  3. Bears: age, then up to `movement` random Moore steps. After each
     step, maul every lumberjack in the landing cell. Any maul
     ends the bear's movement for this tick.
  4. Recalibrate the population index from a full grid scan.
  5. Extinction guard: respawn one lumberjack / bear at a random position
     if that group is empty.
  6. Year end (tick % 12 == 0): lumber quota = 2 × lumberjacks.
     Met: hire floor(lumber / quota) (1 if no lumberjacks).
     Missed: cull one random lumberjack (then re-guard).
     Any maul this year: cull one random bear; else add one.
     Reset yearly counters.

Phases iterate over a snapshot of the population list, so organisms
spawned mid-phase are not processed until the next tick, and removals
never disturb the iteration.

Removal updates the grid and the population index together. Phase 4 still
rebuilds the index from the grid as the authoritative source.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .catalog import DEFAULT_CATALOG, GROUP_SEED_STAGE, SpeciesCatalog
from .grid import Grid
from .organism import Organism
from .perf import PerfMonitor
from .rng import RandomSource, create_rng
from .stats import ForestStats, YearReport
from .types import GROUP_ORDER, OrganismView, SpeciesGroup

logger = logging.getLogger(__name__)

TICKS_PER_YEAR = 12
QUOTA_PER_LUMBERJACK = 2


class Ecosystem:
    """Grid + population index + statistics, advanced one tick at a time.

    All mutable simulation state is owned here and touched only from
    tick() and the helpers it calls.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        rng: Optional[RandomSource] = None,
        *,
        tree_ratio: float = 0.5,
        lumberjack_ratio: float = 0.1,
        bear_ratio: float = 0.05,
        catalog: Optional[SpeciesCatalog] = None,
        strict: bool = False,
        perf: Optional[PerfMonitor] = None,
    ):
        """
        Args:
            rows, cols: Grid dimensions (positive).
            rng: Shared random source. None → unseeded PCG64 source.
            tree_ratio, lumberjack_ratio, bear_ratio: Initial densities
                used by populate_forest(). Must be non-negative.
            catalog: Stage table. Defaults to the built-in catalog.
            strict: Raise on grid/index inconsistencies instead of logging.
            perf: Optional phase timer.
        """
        ratios = {
            SpeciesGroup.LUMBERJACK: lumberjack_ratio,
            SpeciesGroup.TREE: tree_ratio,
            SpeciesGroup.BEAR: bear_ratio,
        }
        for group, ratio in ratios.items():
            if ratio < 0:
                raise ValueError(f"{group.value}_ratio must be >= 0, got {ratio}")

        self.rng: RandomSource = rng if rng is not None else create_rng()
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.grid = Grid(rows, cols, rng=self.rng, strict=strict)
        self.ratios = ratios
        self.perf = perf if perf is not None else PerfMonitor(enabled=False)

        self.population: Dict[SpeciesGroup, List[Organism]] = {
            group: [] for group in GROUP_ORDER
        }
        self.stats = ForestStats()
        self.tick_count = 0
        self.history: List[YearReport] = []

    @classmethod
    def from_config(cls, config, rng: Optional[RandomSource] = None,
                    perf: Optional[PerfMonitor] = None) -> 'Ecosystem':
        """Build an (unpopulated) ecosystem from a SimulationConfig.

        If rng is None, a source seeded with config.simulation.seed is used.
        """
        if rng is None:
            rng = create_rng(config.simulation.seed)
        return cls(
            config.grid.rows,
            config.grid.cols,
            rng,
            tree_ratio=config.population.tree_ratio,
            lumberjack_ratio=config.population.lumberjack_ratio,
            bear_ratio=config.population.bear_ratio,
            strict=config.simulation.strict_index,
            perf=perf,
        )

    # ═══════════════════════════════════════════════════════════════════
    # SEEDING
    # ═══════════════════════════════════════════════════════════════════

    def seed_counts(self) -> Dict[SpeciesGroup, int]:
        """Initial organism count per group: round(grid size × ratio)."""
        size = self.grid.size
        # Round half up (not banker's rounding)
        return {group: int(math.floor(size * ratio + 0.5))
                for group, ratio in self.ratios.items()}

    def populate_forest(self) -> Dict[SpeciesGroup, int]:
        """Seed the grid from the configured ratios.

        Builds a list of `round(size × ratio)` entries per group plus empty
        placeholders for the rest of the grid, shuffles it (Fisher–Yates),
        and lays it out row-major. Any existing organisms are cleared.

        If the ratios ask for more organisms than cells, the empty count is
        clamped to zero and the overflow past the last cell is dropped.

        Returns:
            Organism count per group actually placed.
        """
        self.clear()
        counts = self.seed_counts()
        size = self.grid.size
        empty = size - sum(counts.values())
        if empty < 0:
            logger.warning(
                "Population ratios overflow the %d×%d grid by %d; clamping",
                self.grid.rows, self.grid.cols, -empty,
            )
            empty = 0

        entries: List[Optional[str]] = []
        for group in (SpeciesGroup.LUMBERJACK, SpeciesGroup.TREE, SpeciesGroup.BEAR):
            entries.extend([GROUP_SEED_STAGE[group]] * counts[group])
        entries.extend([None] * empty)
        self._shuffle(entries)

        for idx, stage in enumerate(entries[:size]):
            if stage is None:
                continue
            row, col = divmod(idx, self.grid.cols)
            self.spawn_organism(stage, row, col)

        placed = {group: len(orgs) for group, orgs in self.population.items()}
        logger.debug("Populated forest: %s", {g.value: n for g, n in placed.items()})
        return placed

    def _shuffle(self, items: list) -> None:
        """In-place uniform Fisher–Yates shuffle using the shared source."""
        for i in range(len(items) - 1, 0, -1):
            j = self.rng.random_int(0, i + 1)
            items[i], items[j] = items[j], items[i]

    def clear(self) -> None:
        """Remove every organism from the grid and the index."""
        for organism in self.grid.occupants():
            organism.alive = False
        self.grid.clear()
        for orgs in self.population.values():
            orgs.clear()

    # ═══════════════════════════════════════════════════════════════════
    # ORGANISM BOOKKEEPING (grid + index updated together)
    # ═══════════════════════════════════════════════════════════════════

    def spawn_organism(self, stage: str, row: int, col: int) -> Optional[Organism]:
        """Create an organism in `stage` at (row, col).

        Returns None (nothing created) if (row, col) is out of bounds.

        Raises:
            UnknownStage: If `stage` is not in the catalog.
        """
        organism = Organism.create(stage, (row, col), self.catalog)
        if not self.grid.spawn(organism, row, col):
            return None
        self.population[organism.species].append(organism)
        return organism

    def spawn_random(self, stage: str) -> Organism:
        """Spawn at a uniformly random (possibly occupied) position."""
        row, col = self.grid.random_position()
        return self.spawn_organism(stage, row, col)

    def remove_organism(self, organism: Organism) -> bool:
        """Take an organism off the grid and out of the index."""
        removed = self.grid.remove(organism.row, organism.col, organism)
        members = self.population[organism.species]
        for i, member in enumerate(members):
            if member is organism:
                del members[i]
                break
        organism.alive = False
        return removed

    def remove_random(self, group: SpeciesGroup) -> Optional[Organism]:
        """Cull one uniformly chosen member of a group (None if empty)."""
        members = self.population[group]
        if not members:
            return None
        victim = members[self.rng.random_int(0, len(members))]
        self.remove_organism(victim)
        return victim

    # ═══════════════════════════════════════════════════════════════════
    # TICK PHASES
    # ═══════════════════════════════════════════════════════════════════

    def tick(self) -> Optional[YearReport]:
        """Advance the simulation by one tick.

        Returns:
            The YearReport if this tick closed a year, else None.
        """
        self.tick_count += 1
        with self.perf.track('trees'):
            self.grow_trees()
        with self.perf.track('lumberjacks'):
            self.move_lumberjacks()
        with self.perf.track('bears'):
            self.move_bears()
        with self.perf.track('recalibrate'):
            self.recalibrate()
        with self.perf.track('extinction_guard'):
            self.guard_extinction()

        report = None
        if self.tick_count % TICKS_PER_YEAR == 0:
            with self.perf.track('year_end'):
                report = self.track_year_end()
        return report

    def grow_trees(self) -> int:
        """Phase 1. Returns the number of saplings spawned."""
        spawned = 0
        for tree in list(self.population[SpeciesGroup.TREE]):
            if not tree.alive:
                continue
            tree.advance_one_tick()
            spawn = tree.parameters.spawn
            if spawn.chance <= 0:
                continue
            for row, col in self.grid.open_neighbors8(tree.row, tree.col):
                if self.rng.uniform() <= spawn.chance:
                    self.spawn_organism(spawn.child, row, col)
                    spawned += 1
                    break
        return spawned

    def move_lumberjacks(self) -> None:
        """Phase 2."""
        for jack in list(self.population[SpeciesGroup.LUMBERJACK]):
            if not jack.alive:
                continue
            jack.advance_one_tick()
            for _ in range(jack.parameters.movement):
                if not self._step(jack):
                    break
                if self._lumberjack_event(jack):
                    break

    def move_bears(self) -> None:
        """Phase 3."""
        for bear in list(self.population[SpeciesGroup.BEAR]):
            if not bear.alive:
                continue
            bear.advance_one_tick()
            for _ in range(bear.parameters.movement):
                if not self._step(bear):
                    break
                if self._bear_event(bear):
                    break

    def recalibrate(self) -> None:
        """Phase 4: rebuild the population index from the grid."""
        for orgs in self.population.values():
            orgs.clear()
        for organism in self.grid.occupants():
            self.population[organism.species].append(organism)

    def guard_extinction(self) -> List[SpeciesGroup]:
        """Phase 5. Returns the groups that had to be respawned."""
        revived = []
        for group in (SpeciesGroup.LUMBERJACK, SpeciesGroup.BEAR):
            if not self.population[group]:
                self.spawn_random(GROUP_SEED_STAGE[group])
                revived.append(group)
                logger.debug("Tick %d: %s extinct, respawned one",
                             self.tick_count, group.value)
        return revived

    def track_year_end(self) -> YearReport:
        """Phase 6: lumber quota hiring/firing and bear regulation."""
        lumber = self.stats.lumber.year
        mauls = self.stats.maul.year
        lumberjacks = len(self.population[SpeciesGroup.LUMBERJACK])
        quota = QUOTA_PER_LUMBERJACK * lumberjacks

        report = YearReport(
            year=self.tick_count // TICKS_PER_YEAR,
            tick=self.tick_count,
            lumber=lumber,
            mauls=mauls,
            quota=quota,
        )

        if lumber >= quota:
            # quota is 0 only with no lumberjacks; hire exactly one then
            hires = lumber // quota if lumberjacks > 0 else 1
            for _ in range(hires):
                self.spawn_random(GROUP_SEED_STAGE[SpeciesGroup.LUMBERJACK])
            report.hired = hires
        else:
            if self.remove_random(SpeciesGroup.LUMBERJACK) is not None:
                report.fired = 1
            if not self.population[SpeciesGroup.LUMBERJACK]:
                self.spawn_random(GROUP_SEED_STAGE[SpeciesGroup.LUMBERJACK])
                report.hired = 1

        if mauls > 0:
            if self.remove_random(SpeciesGroup.BEAR) is not None:
                report.bears_removed = 1
        else:
            self.spawn_random(GROUP_SEED_STAGE[SpeciesGroup.BEAR])
            report.bears_added = 1

        self.stats.reset_yearly()
        report.populations = self.population_counts()
        self.history.append(report)
        logger.info(report.summary())
        return report

    # ── interaction helpers ───────────────────────────────────────────

    def _step(self, organism: Organism) -> bool:
        """Move to a uniformly random Moore neighbour (occupied or not)."""
        neighbors = self.grid.neighbors8(organism.row, organism.col)
        if not neighbors:
            return False
        to_row, to_col = neighbors[self.rng.random_int(0, len(neighbors))]
        return self.grid.move(organism.row, organism.col, organism, to_row, to_col)

    def _lumberjack_event(self, jack: Organism) -> bool:
        """Fell lumber in the landing cell. True if anything happened."""
        triggered = False
        for occupant in self.grid.cell(jack.row, jack.col):
            if occupant is jack:
                continue
            if occupant.parameters.is_lumber:
                self.stats.lumber.add(occupant.parameters.lumber_score)
                self.remove_organism(occupant)
                triggered = True
            elif occupant.species is SpeciesGroup.BEAR:
                triggered = True
        return triggered

    def _bear_event(self, bear: Organism) -> bool:
        """Maul lumberjacks in the landing cell. True if any were mauled."""
        triggered = False
        for occupant in self.grid.cell(bear.row, bear.col):
            if occupant.species is SpeciesGroup.LUMBERJACK:
                self.stats.maul.add(1)
                self.remove_organism(occupant)
                triggered = True
        return triggered

    # ═══════════════════════════════════════════════════════════════════
    # QUERIES
    # ═══════════════════════════════════════════════════════════════════

    @property
    def year(self) -> int:
        return self.tick_count // TICKS_PER_YEAR

    def population_counts(self) -> Dict[str, int]:
        return {group.value: len(self.population[group]) for group in GROUP_ORDER}

    def stage_counts(self) -> Dict[str, int]:
        counts = Counter(o.stage for o in self.grid.occupants())
        return {stage.name: counts.get(stage.name, 0) for stage in self.catalog}

    def snapshot(self) -> Tuple[OrganismView, ...]:
        """Read-only views of every organism, for renderers."""
        return self.grid.snapshot()

    def check_consistency(self) -> List[str]:
        """List index/grid invariant violations (empty when consistent).

        Checks:
          - every indexed organism is alive, in the right group, and in the
            cell its position names
          - no organism is indexed twice
          - every grid occupant sits at its stored position and is indexed
        """
        problems = []
        indexed = set()
        for group, members in self.population.items():
            for organism in members:
                if id(organism) in indexed:
                    problems.append(f"{organism!r} indexed more than once")
                indexed.add(id(organism))
                if organism.species is not group:
                    problems.append(f"{organism!r} indexed under {group.value}")
                if not organism.alive:
                    problems.append(f"{organism!r} indexed but not alive")
                if not self.grid.contains(organism):
                    problems.append(f"{organism!r} not in its grid cell")
        for row, col, occupants in self.grid.iter_cells():
            for organism in occupants:
                if organism.position != (row, col):
                    problems.append(f"{organism!r} stored in cell ({row}, {col})")
                if id(organism) not in indexed:
                    problems.append(f"{organism!r} on grid but not indexed")
        return problems
