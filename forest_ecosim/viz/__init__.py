"""Forest EcoSim visualization library.

Modules:
  - style: Forest theme colours and helpers
  - forest: Grid snapshot renderer, population and yearly-event plots
"""

from forest_ecosim.viz.style import (  # noqa: F401
    EVENT_COLORS,
    FOREST_BG,
    GRID_COLOR,
    GROUP_COLORS,
    PANEL_BG,
    STAGE_COLORS,
    TEXT_COLOR,
    apply_forest_theme,
    forest_figure,
    save_figure,
)

from forest_ecosim.viz.forest import (  # noqa: F401
    first_occupants,
    plot_grid_snapshot,
    plot_population_trajectory,
    plot_yearly_events,
)
