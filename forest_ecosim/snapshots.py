"""Optional per-tick grid snapshot recording.

Records (row, col, radius, stage, color) for every organism at configurable
tick intervals, for renderers and for post-run inspection. Snapshots live in
memory only.

Usage:
    recorder = SnapshotRecorder(enabled=True, interval_ticks=12)

    # In simulation loop:
    recorder.capture(ecosystem)

    # After simulation:
    snap = recorder.get_snapshot(120)
    plot_grid_snapshot(snap)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from .types import OrganismView

if TYPE_CHECKING:
    from .ecosystem import Ecosystem


@dataclass
class GridSnapshot:
    """Positions and looks of every organism at one tick."""
    tick: int
    rows: int
    cols: int
    stage_names: List[str]     # code → stage name for `stage`
    # Parallel arrays, one entry per organism (row-major, bag order)
    row: np.ndarray            # int32
    col: np.ndarray            # int32
    radius: np.ndarray         # float32
    stage: np.ndarray          # int16 index into stage_names
    color: np.ndarray          # (n, 4) float32, matplotlib RGBA

    @property
    def n_organisms(self) -> int:
        return int(self.row.shape[0])

    def count(self, stage_name: str) -> int:
        if stage_name not in self.stage_names:
            return 0
        return int(np.sum(self.stage == self.stage_names.index(stage_name)))

    def occupancy(self) -> np.ndarray:
        """(rows, cols) int array of occupant counts per cell."""
        grid = np.zeros((self.rows, self.cols), dtype=np.int32)
        np.add.at(grid, (self.row, self.col), 1)
        return grid

    @classmethod
    def from_views(cls, tick: int, rows: int, cols: int,
                   views: Sequence[OrganismView],
                   stage_names: Sequence[str]) -> 'GridSnapshot':
        names = list(stage_names)
        codes = {name: i for i, name in enumerate(names)}
        n = len(views)
        color = np.zeros((n, 4), dtype=np.float32)
        for i, v in enumerate(views):
            r, g, b, a = v.color
            color[i] = (r / 255.0, g / 255.0, b / 255.0, a)
        return cls(
            tick=tick,
            rows=rows,
            cols=cols,
            stage_names=names,
            row=np.array([v.row for v in views], dtype=np.int32),
            col=np.array([v.col for v in views], dtype=np.int32),
            radius=np.array([v.radius for v in views], dtype=np.float32),
            stage=np.array([codes[v.stage] for v in views], dtype=np.int16),
            color=color,
        )


def take_snapshot(ecosystem: 'Ecosystem') -> GridSnapshot:
    """Snapshot the ecosystem as it stands now."""
    return GridSnapshot.from_views(
        tick=ecosystem.tick_count,
        rows=ecosystem.grid.rows,
        cols=ecosystem.grid.cols,
        views=ecosystem.snapshot(),
        stage_names=ecosystem.catalog.names,
    )


class SnapshotRecorder:
    """Records grid snapshots every `interval_ticks` ticks.

    When enabled=False, all methods are no-ops.
    """

    def __init__(
        self,
        enabled: bool = False,
        interval_ticks: int = 1,
        start_tick: int = 0,
        end_tick: Optional[int] = None,
    ):
        if interval_ticks <= 0:
            raise ValueError(f"interval_ticks must be positive, got {interval_ticks}")
        self.enabled = enabled
        self.interval_ticks = interval_ticks
        self.start_tick = start_tick
        self.end_tick = end_tick
        self.snapshots: Dict[int, GridSnapshot] = {}

    def should_capture(self, tick: int) -> bool:
        if not self.enabled:
            return False
        if tick < self.start_tick:
            return False
        if self.end_tick is not None and tick > self.end_tick:
            return False
        return (tick % self.interval_ticks) == 0

    def capture(self, ecosystem: 'Ecosystem') -> Optional[GridSnapshot]:
        tick = ecosystem.tick_count
        if not self.should_capture(tick):
            return None
        snap = take_snapshot(ecosystem)
        self.snapshots[tick] = snap
        return snap

    def get_ticks(self) -> List[int]:
        return sorted(self.snapshots)

    def get_snapshot(self, tick: int) -> Optional[GridSnapshot]:
        return self.snapshots.get(tick)

    def latest(self) -> Optional[GridSnapshot]:
        if not self.snapshots:
            return None
        return self.snapshots[max(self.snapshots)]
