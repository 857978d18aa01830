"""Fitting orchestration.

Standardizes observations, runs a fitter, maps the result back to original
units and evaluates it there.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.config import Config
from surfacefit.evaluation.metrics import (
    RegressionMetrics,
    ResidualDiagnostics,
    analyze_residuals,
    compare_models,
    compute_regression_metrics,
)
from surfacefit.features.standardization import (
    StandardizationParams,
    Standardizer,
    destandardize_coefficients,
    destandardize_trace,
)
from surfacefit.models.base import BaseFitter, FitResult
from surfacefit.models.gradient_descent import GradientDescentFitter
from surfacefit.models.random_search import LuusJaakolaFitter
from surfacefit.models.regression import OLSFitter
from surfacefit.utils.constants import (
    FIT_METHODS,
    GRADIENT_DESCENT,
    LUUS_JAAKOLA,
    OLS,
    PRICE_COL,
    SURFACE_COL,
)
from surfacefit.utils.logging import log_fit_metrics, method_context


@dataclass
class TrainingResult:
    """Complete results from one fitting run.

    Attributes:
        method: Fitting method identifier.
        standardized: Fit in standardized units, trace included.
        fit: Same fit mapped to original units.
        metrics: Fit quality on the observations, original units.
        residuals: Residual diagnostics.
        params: Standardization parameters used.
        data_info: Information about the fitted data.
    """

    method: str
    standardized: FitResult
    fit: FitResult
    metrics: RegressionMetrics
    residuals: ResidualDiagnostics
    params: StandardizationParams
    data_info: dict[str, Any] = field(default_factory=dict)

    def summary(self) -> str:
        """Get training summary."""
        lines = [
            f"Method: {self.method}",
            f"Intercept: {self.fit.intercept:,.2f}",
            f"Slope: {self.fit.slope:,.2f}",
            f"R²: {self.metrics.r_squared:.4f}",
            f"RMSE: {self.metrics.rmse:,.2f}",
            f"Residual skewness: {self.residuals.skewness:.3f}",
            f"Residual excess kurtosis: {self.residuals.kurtosis:.3f}",
        ]
        if self.residuals.normality_test_pvalue is not None:
            lines.append(f"Shapiro-Wilk p-value: {self.residuals.normality_test_pvalue:.4f}")
        if self.fit.trace is not None:
            lines.append(f"Iterations: {self.fit.n_iterations}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Flatten coefficients and metrics into one row."""
        row = {
            "method": self.method,
            "intercept": self.fit.intercept,
            "slope": self.fit.slope,
            "intercept_std": self.standardized.intercept,
            "slope_std": self.standardized.slope,
            "loss_std": self.standardized.loss,
            "n_iterations": self.fit.n_iterations,
        }
        row.update(self.metrics.to_dict())
        return row


class ModelTrainer:
    """Orchestrates the standardize / fit / rescale / evaluate workflow.

    Example:
        >>> trainer = ModelTrainer(config)
        >>> result = trainer.train(observations, method="gradient_descent")
        >>> print(result.summary())
        >>> table = trainer.compare_methods(observations)
    """

    def __init__(self, config: Config | None = None):
        """Initialize trainer.

        Args:
            config: Full configuration.
        """
        self.config = config or Config()
        self._trained: dict[str, TrainingResult] = {}

    def standardize(
        self,
        observations: pd.DataFrame,
    ) -> tuple[pd.DataFrame, StandardizationParams]:
        """Standardize surface and price.

        Raises:
            ValueError: If surface or price has zero variance.
        """
        standardizer = Standardizer()
        scaled = standardizer.fit_transform(observations)
        return scaled, standardizer.params

    def create_fitter(
        self,
        method: str,
        rng: np.random.Generator | None = None,
    ) -> BaseFitter:
        """Create a fitter instance.

        Args:
            method: One of 'luus_jaakola', 'gradient_descent', 'ols'.
            rng: Random generator for the random-search fitter; seeded from
                config when omitted.

        Returns:
            Configured fitter.
        """
        if method == LUUS_JAAKOLA:
            return LuusJaakolaFitter.from_config(self.config.random_search, rng=rng)

        elif method == GRADIENT_DESCENT:
            return GradientDescentFitter.from_config(self.config.gradient_descent)

        elif method == OLS:
            return OLSFitter()

        else:
            raise ValueError(f"Unknown fitting method: {method}. Choose from {FIT_METHODS}")

    def train(
        self,
        observations: pd.DataFrame,
        method: str = GRADIENT_DESCENT,
        rng: np.random.Generator | None = None,
    ) -> TrainingResult:
        """Full fitting workflow for one method.

        Args:
            observations: DataFrame with ``surface_covered`` and ``price``.
            method: Fitting method.
            rng: Random generator for the random-search fitter.

        Returns:
            TrainingResult in original units.
        """
        scaled, params = self.standardize(observations)
        fitter = self.create_fitter(method, rng=rng)

        with method_context(method):
            standardized = fitter.fit(scaled)

        intercept, slope = destandardize_coefficients(
            standardized.intercept, standardized.slope, params
        )
        trace = None
        if standardized.trace is not None:
            trace = destandardize_trace(standardized.trace, params)

        surface = observations[SURFACE_COL].to_numpy(dtype=float)
        price = observations[PRICE_COL].to_numpy(dtype=float)
        predictions = intercept + slope * surface

        metrics = compute_regression_metrics(price, predictions)
        fit = FitResult(
            method=method,
            intercept=intercept,
            slope=slope,
            loss=metrics.mse,
            trace=trace,
            metadata=dict(standardized.metadata),
        )
        log_fit_metrics(method, metrics, fit.n_iterations)

        result = TrainingResult(
            method=method,
            standardized=standardized,
            fit=fit,
            metrics=metrics,
            residuals=analyze_residuals(price - predictions),
            params=params,
            data_info={"n_samples": len(observations)},
        )
        self._trained[method] = result
        return result

    def train_all(
        self,
        observations: pd.DataFrame,
        methods: list[str] | None = None,
    ) -> dict[str, TrainingResult]:
        """Fit every requested method on the same observations."""
        methods = methods or FIT_METHODS
        results = {}
        for method in methods:
            logger.info(f"Fitting {method}...")
            results[method] = self.train(observations, method=method)
        return results

    def compare_methods(
        self,
        observations: pd.DataFrame,
        methods: list[str] | None = None,
    ) -> pd.DataFrame:
        """Fit several methods and tabulate them against OLS.

        Args:
            observations: DataFrame with ``surface_covered`` and ``price``.
            methods: Methods to compare (default: all three).

        Returns:
            Comparison table, one row per method.
        """
        results = self.train_all(observations, methods)
        return compare_models([r.to_dict() for r in results.values()], reference=OLS)

    def get_trained(self, method: str) -> TrainingResult | None:
        """Get a previously trained result by method name."""
        return self._trained.get(method)
