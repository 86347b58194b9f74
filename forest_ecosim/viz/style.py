"""Shared styling for Forest EcoSim plots.

Species colours come from the catalog so plots match the grid renderer.
"""

import matplotlib as mpl
mpl.use('Agg')

import matplotlib.pyplot as plt
import numpy as np

from forest_ecosim.catalog import DEFAULT_CATALOG

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

FOREST_BG = '#f4faea'          # pale green, the canvas background
PANEL_BG = '#fbfdf7'
TEXT_COLOR = '#2b2b2b'
GRID_COLOR = '#5a5a5a'

STAGE_COLORS = {stage.name: stage.mpl_color for stage in DEFAULT_CATALOG}

GROUP_COLORS = {
    'tree': '#6cb82a',
    'lumberjack': '#d22d2d',
    'bear': '#b98c64',
}

EVENT_COLORS = {
    'lumber': '#8b5a2b',
    'maul': '#7d1f1f',
}


# ═══════════════════════════════════════════════════════════════════════
# THEME HELPERS
# ═══════════════════════════════════════════════════════════════════════

def apply_forest_theme(fig=None, ax=None):
    """Apply the forest theme to a Figure and/or Axes."""
    if fig is not None:
        fig.patch.set_facecolor(FOREST_BG)
    if ax is not None:
        ax.set_facecolor(PANEL_BG)
        ax.tick_params(colors=TEXT_COLOR)
        ax.xaxis.label.set_color(TEXT_COLOR)
        ax.yaxis.label.set_color(TEXT_COLOR)
        ax.title.set_color(TEXT_COLOR)
        for spine in ax.spines.values():
            spine.set_color(GRID_COLOR)


def forest_figure(nrows=1, ncols=1, figsize=None, **kwargs):
    """Create a Figure + Axes with the forest theme applied.

    Returns (fig, ax) where ax may be a single Axes or an ndarray.
    """
    if figsize is None:
        figsize = (10, 6) if (nrows == 1 and ncols == 1) else (14, 5 * nrows)
    fig, axes = plt.subplots(nrows, ncols, figsize=figsize, **kwargs)
    apply_forest_theme(fig=fig)
    if isinstance(axes, np.ndarray):
        for a in axes.flat:
            apply_forest_theme(ax=a)
    else:
        apply_forest_theme(ax=axes)
    return fig, axes


def save_figure(fig, save_path, dpi=150):
    """Save a figure with tight layout, then close it."""
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=fig.get_facecolor(),
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
