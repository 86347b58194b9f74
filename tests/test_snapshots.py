"""Tests for forest_ecosim.snapshots: grid snapshots and the recorder."""

import numpy as np
import pytest

from forest_ecosim.ecosystem import Ecosystem
from forest_ecosim.rng import create_rng
from forest_ecosim.snapshots import GridSnapshot, SnapshotRecorder, take_snapshot


@pytest.fixture
def eco():
    e = Ecosystem(6, 7, create_rng(9), strict=True)
    e.spawn_organism('tree', 0, 0)
    e.spawn_organism('lumberjack', 0, 0)
    e.spawn_organism('bear', 5, 6)
    return e


class TestGridSnapshot:
    def test_arrays(self, eco):
        snap = take_snapshot(eco)
        assert snap.tick == 0
        assert (snap.rows, snap.cols) == (6, 7)
        assert snap.n_organisms == 3
        np.testing.assert_array_equal(snap.row, [0, 0, 5])
        np.testing.assert_array_equal(snap.col, [0, 0, 6])
        np.testing.assert_allclose(snap.radius, [11.0, 6.0, 8.5])
        assert snap.color.shape == (3, 4)

    def test_stage_codes(self, eco):
        snap = take_snapshot(eco)
        assert snap.stage_names == ['sapling', 'tree', 'elder', 'lumberjack', 'bear']
        assert [snap.stage_names[c] for c in snap.stage] == ['tree', 'lumberjack', 'bear']
        assert snap.count('tree') == 1
        assert snap.count('elder') == 0
        assert snap.count('wolf') == 0

    def test_occupancy(self, eco):
        occ = take_snapshot(eco).occupancy()
        assert occ.shape == (6, 7)
        assert occ[0, 0] == 2
        assert occ[5, 6] == 1
        assert occ.sum() == 3

    def test_colors_normalised(self, eco):
        snap = take_snapshot(eco)
        assert snap.color.min() >= 0.0
        assert snap.color.max() <= 1.0
        np.testing.assert_allclose(snap.color[2], [220 / 255, 180 / 255, 150 / 255, 0.8],
                                   rtol=1e-6)

    def test_empty_snapshot(self):
        snap = GridSnapshot.from_views(0, 3, 3, [], ['tree'])
        assert snap.n_organisms == 0
        assert snap.occupancy().sum() == 0


class TestSnapshotRecorder:
    def test_disabled_records_nothing(self, eco):
        rec = SnapshotRecorder(enabled=False)
        assert rec.capture(eco) is None
        assert rec.get_ticks() == []
        assert rec.latest() is None

    def test_interval(self, eco):
        rec = SnapshotRecorder(enabled=True, interval_ticks=3)
        for _ in range(10):
            eco.tick()
            rec.capture(eco)
        assert rec.get_ticks() == [3, 6, 9]
        assert rec.latest().tick == 9
        assert rec.get_snapshot(4) is None

    def test_window(self):
        rec = SnapshotRecorder(enabled=True, interval_ticks=2, start_tick=4, end_tick=8)
        assert [t for t in range(12) if rec.should_capture(t)] == [4, 6, 8]

    def test_bad_interval(self):
        with pytest.raises(ValueError):
            SnapshotRecorder(enabled=True, interval_ticks=0)
