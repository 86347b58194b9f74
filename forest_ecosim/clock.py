"""Fixed-period driver for an Ecosystem.

The clock is the only caller of Ecosystem.tick(). Each timer firing either
runs one whole tick (then hands the renderer a snapshot) or, while paused,
does nothing. A tick is never interrupted, so pausing needs no saved state
and stopping is simply "no more firings".
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple

from .ecosystem import Ecosystem
from .types import OrganismView

logger = logging.getLogger(__name__)

Renderer = Callable[[Tuple[OrganismView, ...]], None]


class SimulationClock:
    """Calls ecosystem.tick() every `delay_ms` milliseconds."""

    def __init__(
        self,
        ecosystem: Ecosystem,
        delay_ms: int = 125,
        renderer: Optional[Renderer] = None,
        running: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            ecosystem: The simulation to drive.
            delay_ms: Period between firings (ms). Must be positive.
            renderer: Called with a grid snapshot after every tick.
            running: Start unpaused.
            sleep: Sleep function (seconds); swapped out in tests.
        """
        if delay_ms <= 0:
            raise ValueError(f"delay_ms must be positive, got {delay_ms}")
        self.ecosystem = ecosystem
        self.delay_ms = delay_ms
        self.renderer = renderer
        self.time = 0
        self._running = running
        self._stopped = False
        self._sleep = sleep

    @property
    def is_running(self) -> bool:
        return self._running

    def pause(self) -> None:
        self._running = False
        logger.info("Paused at tick %d", self.ecosystem.tick_count)

    def resume(self) -> None:
        self._running = True
        logger.info("Running from tick %d", self.ecosystem.tick_count)

    def toggle_pause(self) -> None:
        if self._running:
            self.pause()
        else:
            self.resume()

    def stop(self) -> None:
        """End run() after the current firing."""
        self._stopped = True

    def update(self) -> bool:
        """One timer firing. Returns True if a tick ran."""
        if not self._running:
            return False
        self.time += 1
        self.ecosystem.tick()
        if self.renderer is not None:
            self.renderer(self.ecosystem.snapshot())
        return True

    def run(self, intervals: Optional[int] = None) -> int:
        """Fire update() every delay_ms until `intervals` firings or stop().

        Args:
            intervals: Number of firings (paused firings count). None runs
                until stop() is called, e.g. from the renderer.

        Returns:
            Number of ticks actually run.
        """
        self._stopped = False
        if self.renderer is not None:
            self.renderer(self.ecosystem.snapshot())
        ticks = 0
        fired = 0
        while not self._stopped and (intervals is None or fired < intervals):
            if self.update():
                ticks += 1
            fired += 1
            self._sleep(self.delay_ms / 1000.0)
        return ticks
