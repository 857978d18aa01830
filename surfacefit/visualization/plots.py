"""Figures comparing the fitted lines and the optimizer traces."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.config import VisualizationConfig
from surfacefit.models.training import TrainingResult
from surfacefit.utils.constants import METHOD_LABELS, PRICE_COL, SURFACE_COL


def _label(method: str) -> str:
    return METHOD_LABELS.get(method, method)


def plot_fitted_lines(
    observations: pd.DataFrame,
    results: dict[str, TrainingResult],
    config: VisualizationConfig | None = None,
) -> plt.Figure:
    """Scatter the observations with one fitted line per method.

    Args:
        observations: DataFrame with ``surface_covered`` and ``price``.
        results: Training results keyed by method.
        config: Figure settings.

    Returns:
        Matplotlib figure.
    """
    config = config or VisualizationConfig()
    fig, ax = plt.subplots(figsize=config.figsize_chart)

    surface = observations[SURFACE_COL]
    ax.scatter(surface, observations[PRICE_COL], alpha=0.6, color="gray", label="Listings")

    grid = np.linspace(surface.min(), surface.max(), 100)
    for method, result in results.items():
        ax.plot(
            grid,
            result.fit.predict(grid),
            color=config.method_colors.get(method),
            linewidth=2,
            label=f"{_label(method)} (R²={result.metrics.r_squared:.3f})",
        )

    ax.set_xlabel("Covered surface (m²)")
    ax.set_ylabel("Price")
    ax.set_title("Price vs covered surface")
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def plot_loss_traces(
    results: dict[str, TrainingResult],
    config: VisualizationConfig | None = None,
    reference: str | None = "ols",
) -> plt.Figure:
    """Plot loss per iteration for every method with a trace.

    One panel per iterative method; the reference method's MSE is drawn as
    a horizontal line in each panel.
    """
    config = config or VisualizationConfig()
    traced = {m: r for m, r in results.items() if r.fit.trace is not None}
    if not traced:
        raise ValueError("No results with an iteration trace to plot")

    fig, axes = plt.subplots(1, len(traced), figsize=config.figsize_grid, squeeze=False)
    for ax, (method, result) in zip(axes[0], traced.items()):
        trace = result.fit.trace
        ax.plot(
            trace["iteration"],
            trace["loss"],
            color=config.method_colors.get(method),
            marker="o" if len(trace) <= 50 else None,
        )
        if reference is not None and reference in results:
            ax.axhline(
                results[reference].fit.loss,
                color=config.method_colors.get(reference),
                linestyle="--",
                label=f"{_label(reference)} MSE",
            )
            ax.legend()
        ax.set_title(_label(method))
        ax.set_xlabel("Iteration")
        ax.set_ylabel("MSE")
        ax.grid(alpha=0.3)

    fig.tight_layout()
    return fig


def plot_parameter_paths(
    results: dict[str, TrainingResult],
    config: VisualizationConfig | None = None,
    reference: str | None = "ols",
) -> plt.Figure:
    """Plot intercept and slope per iteration for every traced method."""
    config = config or VisualizationConfig()
    fig, (ax_int, ax_slope) = plt.subplots(1, 2, figsize=config.figsize_grid)

    for method, result in results.items():
        color = config.method_colors.get(method)
        if result.fit.trace is None:
            if method == reference:
                ax_int.axhline(result.fit.intercept, color=color, linestyle="--", label=_label(method))
                ax_slope.axhline(result.fit.slope, color=color, linestyle="--", label=_label(method))
            continue
        trace = result.fit.trace
        ax_int.plot(trace["iteration"], trace["intercept"], color=color, label=_label(method))
        ax_slope.plot(trace["iteration"], trace["slope"], color=color, label=_label(method))

    for ax, title in ((ax_int, "Intercept"), (ax_slope, "Slope")):
        ax.set_title(title)
        ax.set_xlabel("Iteration")
        ax.set_xscale("log")
        ax.legend()
        ax.grid(alpha=0.3)

    fig.tight_layout()
    return fig


def save_figure(fig: plt.Figure, path: str | Path, dpi: int = 150) -> Path:
    """Save a figure and close it.

    Args:
        fig: Figure to save.
        path: Destination file; parent directories are created.
        dpi: Resolution.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info(f"Saved figure to {path}")
    return path
