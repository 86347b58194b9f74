"""Statistics dataclasses for the forest ecosystem.

Yearly counters reset every year (12 ticks); totals never reset.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class Tally:
    """A running yearly counter plus its lifetime total."""
    year: int = 0
    total: int = 0

    def add(self, amount: int = 1) -> None:
        self.year += amount
        self.total += amount

    def reset_year(self) -> None:
        self.year = 0


@dataclass
class ForestStats:
    """Lumber collected and maul incidents."""
    lumber: Tally = field(default_factory=Tally)
    maul: Tally = field(default_factory=Tally)

    def reset_yearly(self) -> None:
        self.lumber.reset_year()
        self.maul.reset_year()


@dataclass
class YearReport:
    """Outcome of one year-end population-control pass.

    Attributes:
        year: 1-based year number (tick // 12).
        tick: Tick at which the year closed.
        lumber: Lumber collected during the year.
        mauls: Maul incidents during the year.
        quota: Lumber quota in force (2 × lumberjacks at year end).
        hired: Lumberjacks hired.
        fired: Lumberjacks culled.
        bears_added: Bears spawned by the yearly adjustment.
        bears_removed: Bears culled.
        populations: Species-group counts after population control.
    """
    year: int
    tick: int
    lumber: int = 0
    mauls: int = 0
    quota: int = 0
    hired: int = 0
    fired: int = 0
    bears_added: int = 0
    bears_removed: int = 0
    populations: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> str:
        pops = ', '.join(f"{k}={v}" for k, v in self.populations.items())
        return (f"Year {self.year}: lumber={self.lumber} (quota {self.quota}), "
                f"mauls={self.mauls}, hired={self.hired}, fired={self.fired}, "
                f"bears +{self.bears_added}/-{self.bears_removed} [{pops}]")
