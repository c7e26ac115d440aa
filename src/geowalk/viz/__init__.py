"""
Visualization for the walkthrough and exercise.
"""

from .plot import (
    plot_layers,
    plot_choropleth,
    plot_buffers,
    plot_overlay,
    plot_distribution,
    save_figure,
)
from .interactive import web_map

__all__ = [
    'plot_layers',
    'plot_choropleth',
    'plot_buffers',
    'plot_overlay',
    'plot_distribution',
    'save_figure',
    'web_map',
]
