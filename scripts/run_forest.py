#!/usr/bin/env python3
"""Run the forest ecosystem from a YAML configuration.

Batch mode runs headlessly and prints a yearly summary; --live drives the
ecosystem through SimulationClock at the configured tick period, printing
population counts after every tick.

Usage:
    python scripts/run_forest.py
    python scripts/run_forest.py --config configs/default.yaml --ticks 1200
    python scripts/run_forest.py --seed 7 --plot-dir results/forest
    python scripts/run_forest.py --live --ticks 48
"""

import argparse
import sys
import time
from pathlib import Path

# ── Project imports ──────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from forest_ecosim.clock import SimulationClock
from forest_ecosim.config import default_config, load_config
from forest_ecosim.ecosystem import Ecosystem
from forest_ecosim.logging_config import configure_logging
from forest_ecosim.model import run_simulation
from forest_ecosim.perf import PerfMonitor
from forest_ecosim.snapshots import SnapshotRecorder


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Forest ecosystem simulation")
    parser.add_argument('--config', type=Path, default=None,
                        help='Base YAML config (default: built-in defaults)')
    parser.add_argument('--override', type=Path, default=None,
                        help='Optional YAML merged over the base config')
    parser.add_argument('--ticks', type=int, default=None,
                        help='Ticks to run (default: simulation.n_ticks)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Override simulation.seed')
    parser.add_argument('--rows', type=int, default=None)
    parser.add_argument('--cols', type=int, default=None)
    parser.add_argument('--log-level', default=None,
                        help='DEBUG, INFO, WARNING (default: $FOREST_LOG_LEVEL or INFO)')
    parser.add_argument('--plot-dir', type=Path, default=None,
                        help='Write PNG plots to this directory')
    parser.add_argument('--profile', action='store_true',
                        help='Print a per-phase timing breakdown')
    parser.add_argument('--live', action='store_true',
                        help='Drive the ecosystem with the real-time clock')
    return parser.parse_args(argv)


def build_config(args):
    overrides = {}
    if args.seed is not None:
        overrides.setdefault('simulation', {})['seed'] = args.seed
    if args.rows is not None:
        overrides.setdefault('grid', {})['rows'] = args.rows
    if args.cols is not None:
        overrides.setdefault('grid', {})['cols'] = args.cols

    if args.config is not None:
        return load_config(args.config, args.override, overrides or None)

    config = default_config()
    for section, values in overrides.items():
        for key, value in values.items():
            setattr(getattr(config, section), key, value)
    return config


def run_live(config, n_ticks):
    eco = Ecosystem.from_config(config)
    eco.populate_forest()

    def text_renderer(views):
        counts = eco.population_counts()
        print(f"  tick {eco.tick_count:5d}  trees={counts['tree']:4d}  "
              f"lumberjacks={counts['lumberjack']:3d}  bears={counts['bear']:3d}")

    clock = SimulationClock(eco, delay_ms=config.simulation.delay_ms,
                            renderer=text_renderer)
    ticks = clock.run(intervals=n_ticks)
    print(f"\nRan {ticks} ticks; lumber total {eco.stats.lumber.total}, "
          f"mauls total {eco.stats.maul.total}")


def main(argv=None):
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    config = build_config(args)
    n_ticks = args.ticks if args.ticks is not None else config.simulation.n_ticks

    print("=" * 72)
    print("Forest EcoSim")
    print("=" * 72)
    print(f"Grid: {config.grid.rows} x {config.grid.cols}, seed {config.simulation.seed}")
    print(f"Ratios: trees {config.population.tree_ratio}, "
          f"lumberjacks {config.population.lumberjack_ratio}, "
          f"bears {config.population.bear_ratio}")
    print(f"Ticks: {n_ticks}")
    print()

    if args.live:
        run_live(config, n_ticks)
        return 0

    perf = PerfMonitor(enabled=args.profile)
    interval = config.output.snapshot_interval
    recorder = SnapshotRecorder(enabled=interval > 0, interval_ticks=max(interval, 1))

    t0 = time.time()
    result = run_simulation(config, n_ticks=n_ticks, recorder=recorder, perf=perf)
    elapsed = time.time() - t0

    for report in result.year_reports:
        print(f"  {report.summary()}")
    print()
    print(f"Initial population: {result.initial_population}")
    print(f"Final population:   {result.final_population}")
    print(f"Lumber total: {result.total_lumber}   Mauls total: {result.total_mauls}")
    print(f"Elapsed: {elapsed:.2f}s")

    if args.profile:
        print(perf.report())

    plot_dir = args.plot_dir
    if plot_dir is None and config.output.save_figures:
        plot_dir = Path(config.output.directory)
    if plot_dir is not None:
        from forest_ecosim.viz import (
            plot_grid_snapshot,
            plot_population_trajectory,
            plot_yearly_events,
        )
        plot_dir.mkdir(parents=True, exist_ok=True)
        plot_population_trajectory(result, save_path=str(plot_dir / 'population.png'))
        plot_yearly_events(result, save_path=str(plot_dir / 'yearly_events.png'))
        for tick in recorder.get_ticks():
            plot_grid_snapshot(recorder.get_snapshot(tick),
                               save_path=str(plot_dir / f'grid_t{tick:05d}.png'))
        print(f"Plots written to {plot_dir}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
