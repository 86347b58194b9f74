"""Configuration system for Forest EcoSim.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → override file → dict overrides (e.g. from the command line)

Sections map 1:1 to YAML top-level keys. Unknown keys are ignored.

Validation policy:
  - Hard preconditions (positive grid dimensions, non-negative ratios,
    positive tick delay) raise ValueError.
  - Ratios summing above 1 warn and degrade: the forest is seeded with the
    empty remainder clamped to zero.
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Run timing and control."""
    seed: int = 42
    delay_ms: int = 125          # Clock period between ticks (ms)
    n_ticks: int = 600           # Batch run length (50 years)
    strict_index: bool = False   # Raise on grid/index inconsistencies


@dataclass
class GridSection:
    """Grid dimensions."""
    rows: int = 25
    cols: int = 25


@dataclass
class PopulationSection:
    """Initial population densities (fraction of grid cells)."""
    tree_ratio: float = 0.5
    lumberjack_ratio: float = 0.10
    bear_ratio: float = 0.05

    @property
    def total_ratio(self) -> float:
        return self.tree_ratio + self.lumberjack_ratio + self.bear_ratio


@dataclass
class OutputSection:
    """Batch-run output control."""
    directory: str = "results/"
    snapshot_interval: int = 0   # Record a grid snapshot every N ticks (0 = off)
    save_figures: bool = False


@dataclass
class SimulationConfig:
    """Complete simulation configuration.

    Load from YAML via `load_config()`.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    grid: GridSection = field(default_factory=GridSection)
    population: PopulationSection = field(default_factory=PopulationSection)
    output: OutputSection = field(default_factory=OutputSection)


_SECTION_MAP = {
    'simulation': SimulationSection,
    'grid': GridSection,
    'population': PopulationSection,
    'output': OutputSection,
}


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> SimulationConfig:
    sections = {}
    for key, cls in _SECTION_MAP.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return SimulationConfig(**sections)


def config_to_dict(config: SimulationConfig) -> Dict[str, Dict[str, Any]]:
    """Plain nested dict (YAML-dumpable) view of a config."""
    return dataclasses.asdict(config)


def validate_config(config: SimulationConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure.

    Checks:
      - Grid dimensions are positive integers
      - Ratios are non-negative (sum > 1 only warns)
      - Seed, tick count and snapshot interval are non-negative
      - Tick delay is positive
    """
    g = config.grid
    for name, value in (('rows', g.rows), ('cols', g.cols)):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"grid.{name} must be an integer, got {value!r}")
        if value <= 0:
            raise ValueError(f"grid.{name} must be positive, got {value}")

    p = config.population
    for name in ('tree_ratio', 'lumberjack_ratio', 'bear_ratio'):
        value = getattr(p, name)
        if value < 0:
            raise ValueError(f"population.{name} must be >= 0, got {value}")
    if p.total_ratio > 1.0:
        warnings.warn(
            f"population ratios sum to {p.total_ratio:.3f} (> 1). "
            f"The grid will have no empty cells and the overflow is dropped.",
            UserWarning,
            stacklevel=2,
        )

    s = config.simulation
    if s.seed < 0:
        raise ValueError("simulation.seed must be non-negative")
    if s.delay_ms <= 0:
        raise ValueError(f"simulation.delay_ms must be positive, got {s.delay_ms}")
    if s.n_ticks < 0:
        raise ValueError(f"simulation.n_ticks must be >= 0, got {s.n_ticks}")

    if config.output.snapshot_interval < 0:
        raise ValueError(
            f"output.snapshot_interval must be >= 0, "
            f"got {config.output.snapshot_interval}"
        )


def _read_yaml(path: Path) -> Dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at top level")
    return data


def load_config(
    base_path: Union[str, Path],
    override_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → override file → overrides dict.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        override_path: Optional override YAML (skipped if it doesn't exist).
        overrides: Optional dict of overrides, same shape as the YAML.

    Returns:
        Validated SimulationConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    config_dict = _read_yaml(base_path)

    if override_path is not None:
        override_path = Path(override_path)
        if override_path.exists():
            deep_merge(config_dict, _read_yaml(override_path))

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config
