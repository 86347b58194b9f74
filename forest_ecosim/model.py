"""Headless batch runs of the forest ecosystem.

Runs a populated Ecosystem for n ticks without a clock or renderer and
collects timeseries:

  Per tick (length n_ticks + 1, index 0 = after seeding):
    tick_population   (n_ticks + 1, 3)  tree, lumberjack, bear counts
    tick_stages       (n_ticks + 1, n_stages)  counts per catalog stage
  Per year (length = completed years):
    yearly_lumber, yearly_mauls, yearly_hired, yearly_fired
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from .config import SimulationConfig, default_config
from .ecosystem import Ecosystem
from .perf import PerfMonitor
from .rng import RandomSource
from .snapshots import SnapshotRecorder
from .stats import YearReport
from .types import GROUP_ORDER

logger = logging.getLogger(__name__)


@dataclass
class ForestSimResult:
    """Results from one batch run."""
    n_ticks: int = 0
    rows: int = 0
    cols: int = 0
    stage_names: List[str] = field(default_factory=list)

    tick_population: Optional[np.ndarray] = None   # (n_ticks + 1, 3) int
    tick_stages: Optional[np.ndarray] = None       # (n_ticks + 1, n_stages) int

    yearly_lumber: Optional[np.ndarray] = None
    yearly_mauls: Optional[np.ndarray] = None
    yearly_hired: Optional[np.ndarray] = None
    yearly_fired: Optional[np.ndarray] = None
    year_reports: List[YearReport] = field(default_factory=list)

    # Summary
    initial_population: dict = field(default_factory=dict)
    final_population: dict = field(default_factory=dict)
    total_lumber: int = 0
    total_mauls: int = 0

    @property
    def n_years(self) -> int:
        return len(self.year_reports)

    def group_series(self, group: str) -> np.ndarray:
        """Per-tick count for one species group name."""
        idx = [g.value for g in GROUP_ORDER].index(group)
        return self.tick_population[:, idx]


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_ticks: Optional[int] = None,
    rng: Optional[RandomSource] = None,
    recorder: Optional[SnapshotRecorder] = None,
    perf: Optional[PerfMonitor] = None,
    progress: Optional[Callable[[int, int], None]] = None,
) -> ForestSimResult:
    """Seed a forest from config and run it for n_ticks.

    Args:
        config: SimulationConfig; default_config() if None.
        n_ticks: Ticks to run; config.simulation.n_ticks if None.
        rng: Random source; seeded from config.simulation.seed if None.
        recorder: Optional snapshot recorder, offered every tick
            (including tick 0, right after seeding).
        perf: Optional phase timer passed to the Ecosystem.
        progress: Optional callback(tick, n_ticks) after each tick.

    Returns:
        ForestSimResult with per-tick and per-year timeseries.
    """
    if config is None:
        config = default_config()
    if n_ticks is None:
        n_ticks = config.simulation.n_ticks
    if n_ticks < 0:
        raise ValueError(f"n_ticks must be >= 0, got {n_ticks}")

    eco = Ecosystem.from_config(config, rng=rng, perf=perf)
    eco.populate_forest()
    stage_names = eco.catalog.names

    tick_population = np.zeros((n_ticks + 1, len(GROUP_ORDER)), dtype=np.int32)
    tick_stages = np.zeros((n_ticks + 1, len(stage_names)), dtype=np.int32)

    def record(t: int) -> None:
        pops = eco.population_counts()
        tick_population[t] = [pops[g.value] for g in GROUP_ORDER]
        stages = eco.stage_counts()
        tick_stages[t] = [stages[name] for name in stage_names]
        if recorder is not None:
            recorder.capture(eco)

    record(0)
    initial = eco.population_counts()
    logger.info("Seeded %d×%d forest: %s", config.grid.rows, config.grid.cols, initial)

    for t in range(1, n_ticks + 1):
        eco.tick()
        record(t)
        if progress is not None:
            progress(t, n_ticks)

    reports = list(eco.history)
    result = ForestSimResult(
        n_ticks=n_ticks,
        rows=config.grid.rows,
        cols=config.grid.cols,
        stage_names=stage_names,
        tick_population=tick_population,
        tick_stages=tick_stages,
        yearly_lumber=np.array([r.lumber for r in reports], dtype=np.int64),
        yearly_mauls=np.array([r.mauls for r in reports], dtype=np.int64),
        yearly_hired=np.array([r.hired for r in reports], dtype=np.int64),
        yearly_fired=np.array([r.fired for r in reports], dtype=np.int64),
        year_reports=reports,
        initial_population=initial,
        final_population=eco.population_counts(),
        total_lumber=eco.stats.lumber.total,
        total_mauls=eco.stats.maul.total,
    )
    logger.info("Finished %d ticks (%d years): lumber=%d, mauls=%d",
                n_ticks, result.n_years, result.total_lumber, result.total_mauls)
    return result
