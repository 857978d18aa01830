"""Matplotlib figures for fitted lines and optimizer traces."""

from surfacefit.visualization.plots import (
    plot_fitted_lines,
    plot_loss_traces,
    plot_parameter_paths,
    save_figure,
)

__all__ = [
    "plot_fitted_lines",
    "plot_loss_traces",
    "plot_parameter_paths",
    "save_figure",
]
