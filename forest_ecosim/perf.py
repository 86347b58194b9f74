"""Per-phase timing for ecosystem ticks.

Disabled monitors are no-ops, so Ecosystem.tick() always wraps its phases:

    perf = PerfMonitor(enabled=True)
    eco = Ecosystem(25, 25, perf=perf)
    for _ in range(120):
        eco.tick()
    print(perf.report())
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict


@dataclass
class PhaseStats:
    """Wall-clock totals for one tick phase."""
    total_time: float = 0.0
    call_count: int = 0
    max_time: float = 0.0

    @property
    def mean_time(self) -> float:
        return self.total_time / self.call_count if self.call_count > 0 else 0.0


class PerfMonitor:
    """Accumulates wall-clock time per named phase."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self._stats: Dict[str, PhaseStats] = defaultdict(PhaseStats)

    @contextmanager
    def track(self, phase: str):
        if not self.enabled:
            yield
            return
        t0 = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - t0
            stats = self._stats[phase]
            stats.total_time += elapsed
            stats.call_count += 1
            stats.max_time = max(stats.max_time, elapsed)

    def get_stats(self) -> Dict[str, PhaseStats]:
        return dict(self._stats)

    def summary(self) -> dict:
        """Phase timings as plain numbers, slowest first."""
        total = sum(s.total_time for s in self._stats.values())
        result = {}
        for name, stats in sorted(self._stats.items(), key=lambda x: -x[1].total_time):
            result[name] = {
                'total_s': round(stats.total_time, 4),
                'calls': stats.call_count,
                'mean_ms': round(stats.mean_time * 1000, 3),
                'pct': round(stats.total_time / total * 100, 1) if total > 0 else 0.0,
            }
        return result

    def report(self, title: str = "Tick Phase Breakdown") -> str:
        total = sum(s.total_time for s in self._stats.values())
        lines = [
            f"\n{'='*60}",
            f" {title}",
            f"{'='*60}",
            f"{'Phase':<25} {'Total (s)':>10} {'Calls':>8} {'Mean (ms)':>10} {'%':>6}",
            f"{'-'*25} {'-'*10} {'-'*8} {'-'*10} {'-'*6}",
        ]
        for name, row in self.summary().items():
            lines.append(
                f"{name:<25} {row['total_s']:>10.4f} {row['calls']:>8} "
                f"{row['mean_ms']:>10.3f} {row['pct']:>5.1f}%"
            )
        lines.append(f"{'-'*25} {'-'*10} {'-'*8} {'-'*10} {'-'*6}")
        lines.append(f"{'TOTAL':<25} {total:>10.4f}")
        lines.append(f"{'='*60}\n")
        return '\n'.join(lines)

    def reset(self) -> None:
        self._stats.clear()
