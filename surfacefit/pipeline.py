"""End-to-end analysis pipeline.

Loads listings, reduces them to one neighborhood's (surface, price)
observations, fits all three methods and writes the comparison table,
the optimizer traces and the figures.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd
from loguru import logger

from surfacefit.config import Config
from surfacefit.data.loaders import filter_listings, load_listings, prepare_observations
from surfacefit.evaluation.metrics import compare_models, summarize_trace
from surfacefit.models.training import ModelTrainer, TrainingResult
from surfacefit.utils.constants import FIT_METHODS, OLS, PRICE_COL, SURFACE_COL
from surfacefit.utils.logging import log_observations
from surfacefit.visualization.plots import (
    plot_fitted_lines,
    plot_loss_traces,
    plot_parameter_paths,
    save_figure,
)


@dataclass
class PipelineOutput:
    """Everything a pipeline run produced."""

    observations: pd.DataFrame
    results: dict[str, TrainingResult]
    comparison: pd.DataFrame
    files: dict[str, Path] = field(default_factory=dict)


class SurfacePricePipeline:
    """Main pipeline from listings file to comparison report."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        self.trainer = ModelTrainer(self.config)

    def load_observations(self, listings_path: Path | None = None) -> pd.DataFrame:
        """Load, filter and clean listings into the observation set."""
        path = listings_path or self.config.paths.listings_file
        listings = load_listings(path)
        filtered = filter_listings(listings, self.config.data)
        observations = prepare_observations(filtered, self.config.data)
        log_observations(observations, SURFACE_COL, PRICE_COL)
        return observations

    def fit(
        self,
        observations: pd.DataFrame,
        methods: list[str] | None = None,
    ) -> tuple[dict[str, TrainingResult], pd.DataFrame]:
        """Fit every method and build the comparison table."""
        results = self.trainer.train_all(observations, methods or FIT_METHODS)
        comparison = compare_models([r.to_dict() for r in results.values()], reference=OLS)
        return results, comparison

    def write_outputs(
        self,
        observations: pd.DataFrame,
        results: dict[str, TrainingResult],
        comparison: pd.DataFrame,
        output_dir: Path | None = None,
    ) -> dict[str, Path]:
        """Write comparison CSV, traces CSV, trace summaries and figures.

        Returns:
            Mapping of output name to written path.
        """
        output_dir = Path(output_dir or self.config.paths.outputs_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        viz = self.config.visualization
        files = {}

        files["comparison"] = output_dir / "comparison.csv"
        comparison.to_csv(files["comparison"], index=False)

        traces = [
            r.fit.trace.assign(method=m)
            for m, r in results.items()
            if r.fit.trace is not None
        ]
        if traces:
            files["traces"] = output_dir / "traces.csv"
            pd.concat(traces, ignore_index=True).to_csv(files["traces"], index=False)

            summaries = pd.DataFrame([
                {"method": m, **summarize_trace(r.fit.trace)}
                for m, r in results.items()
                if r.fit.trace is not None
            ])
            files["trace_summary"] = output_dir / "trace_summary.csv"
            summaries.to_csv(files["trace_summary"], index=False)

            files["loss_plot"] = save_figure(
                plot_loss_traces(results, viz), output_dir / "loss_traces.png", viz.dpi
            )
            files["parameter_plot"] = save_figure(
                plot_parameter_paths(results, viz), output_dir / "parameter_paths.png", viz.dpi
            )

        files["fit_plot"] = save_figure(
            plot_fitted_lines(observations, results, viz), output_dir / "fitted_lines.png", viz.dpi
        )

        logger.info(f"Wrote {len(files)} outputs to {output_dir}")
        return files

    def run(
        self,
        listings_path: Path | None = None,
        output_dir: Path | None = None,
        methods: list[str] | None = None,
    ) -> PipelineOutput:
        """Run the full pipeline."""
        observations = self.load_observations(listings_path)
        results, comparison = self.fit(observations, methods)
        files = self.write_outputs(observations, results, comparison, output_dir)
        return PipelineOutput(
            observations=observations,
            results=results,
            comparison=comparison,
            files=files,
        )
