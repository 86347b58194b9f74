"""Forest grid and population visualizations.

Every function:
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)
  - Uses the shared theme from ``forest_ecosim.viz.style``

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import Optional, TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PatchCollection
from matplotlib.patches import Circle

from forest_ecosim.ecosystem import TICKS_PER_YEAR
from forest_ecosim.viz.style import (
    EVENT_COLORS,
    FOREST_BG,
    GRID_COLOR,
    GROUP_COLORS,
    PANEL_BG,
    TEXT_COLOR,
    forest_figure,
    save_figure,
)

if TYPE_CHECKING:
    from forest_ecosim.model import ForestSimResult
    from forest_ecosim.snapshots import GridSnapshot

# Largest radius in the catalog fills half a cell
MAX_DRAW_RADIUS = 11.0


def first_occupants(snapshot: 'GridSnapshot') -> np.ndarray:
    """Indices of the first organism in each occupied cell.

    The renderer shows one organism per cell, the first in the bag.
    """
    if snapshot.n_organisms == 0:
        return np.zeros(0, dtype=np.int64)
    flat = snapshot.row.astype(np.int64) * snapshot.cols + snapshot.col
    _, first = np.unique(flat, return_index=True)
    return np.sort(first)


# ═══════════════════════════════════════════════════════════════════════
# 1. GRID SNAPSHOT
# ═══════════════════════════════════════════════════════════════════════

def plot_grid_snapshot(
    snapshot: 'GridSnapshot',
    cell_size: float = 0.4,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Draw one circle per occupied cell, sized by radius, coloured by stage.

    Args:
        snapshot: GridSnapshot to draw.
        cell_size: Figure inches per grid cell.
        save_path: Optional path to save the figure.

    Returns:
        matplotlib Figure.
    """
    width = max(4.0, snapshot.cols * cell_size)
    height = max(4.0, snapshot.rows * cell_size)
    fig, ax = forest_figure(figsize=(width, height))

    idx = first_occupants(snapshot)
    circles = [
        Circle((snapshot.col[i] + 0.5, snapshot.row[i] + 0.5),
               radius=0.5 * float(snapshot.radius[i]) / MAX_DRAW_RADIUS)
        for i in idx
    ]
    if circles:
        collection = PatchCollection(
            circles,
            facecolors=snapshot.color[idx],
            edgecolors=GRID_COLOR,
            linewidths=0.5,
        )
        ax.add_collection(collection)

    ax.set_xlim(0, snapshot.cols)
    ax.set_ylim(snapshot.rows, 0)   # row 0 at the top
    ax.set_aspect('equal')
    ax.set_xticks([])
    ax.set_yticks([])
    year, month = divmod(snapshot.tick, TICKS_PER_YEAR)
    ax.set_title(f'Forest - tick {snapshot.tick} (year {year}, month {month})',
                 fontsize=12, fontweight='bold')

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 2. POPULATION TRAJECTORY
# ═══════════════════════════════════════════════════════════════════════

def plot_population_trajectory(
    result: 'ForestSimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Per-tick tree, lumberjack and bear counts.

    Trees share the left axis; lumberjacks and bears use the right axis
    since they are an order of magnitude fewer.
    """
    ticks = np.arange(result.n_ticks + 1)
    fig, ax = forest_figure()

    ax.plot(ticks, result.group_series('tree'), color=GROUP_COLORS['tree'],
            linewidth=2.0, label='Trees')
    ax.set_xlabel('Tick (month)', fontsize=12)
    ax.set_ylabel('Trees', fontsize=12)

    ax2 = ax.twinx()
    ax2.plot(ticks, result.group_series('lumberjack'),
             color=GROUP_COLORS['lumberjack'], linewidth=1.5, label='Lumberjacks')
    ax2.plot(ticks, result.group_series('bear'),
             color=GROUP_COLORS['bear'], linewidth=1.5, label='Bears')
    ax2.set_ylabel('Lumberjacks / bears', fontsize=12, color=TEXT_COLOR)
    ax2.tick_params(colors=TEXT_COLOR)

    for year_tick in range(TICKS_PER_YEAR, result.n_ticks + 1, TICKS_PER_YEAR):
        ax.axvline(year_tick, color=GRID_COLOR, linewidth=0.4, alpha=0.3)

    handles = ax.get_legend_handles_labels()[0] + ax2.get_legend_handles_labels()[0]
    ax.legend(handles=handles, facecolor=PANEL_BG, edgecolor=GRID_COLOR,
              labelcolor=TEXT_COLOR, fontsize=10, loc='upper left')
    ax.set_title('Population Trajectory', fontsize=14, fontweight='bold')
    ax.set_xlim(0, max(result.n_ticks, 1))
    ax.set_ylim(bottom=0)
    ax2.set_ylim(bottom=0)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 3. YEARLY LUMBER & MAULS
# ═══════════════════════════════════════════════════════════════════════

def plot_yearly_events(
    result: 'ForestSimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Bar chart of lumber collected and maul incidents per year."""
    years = np.arange(1, result.n_years + 1)
    fig, axes = forest_figure(nrows=2, ncols=1, figsize=(10, 8), sharex=True)

    axes[0].bar(years, result.yearly_lumber, 0.7,
                color=EVENT_COLORS['lumber'], alpha=0.9)
    axes[0].set_ylabel('Lumber', fontsize=12)
    axes[0].set_title('Yearly Lumber', fontsize=14, fontweight='bold')

    axes[1].bar(years, result.yearly_mauls, 0.7,
                color=EVENT_COLORS['maul'], alpha=0.9)
    axes[1].set_ylabel('Mauls', fontsize=12)
    axes[1].set_xlabel('Year', fontsize=12)
    axes[1].set_title('Yearly Maul Incidents', fontsize=14, fontweight='bold')

    for ax in axes:
        ax.set_ylim(bottom=0)
    fig.patch.set_facecolor(FOREST_BG)

    if save_path:
        save_figure(fig, save_path)
    return fig
