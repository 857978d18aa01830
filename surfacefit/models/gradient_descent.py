"""Batch gradient-descent line fitter."""

import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.config import GradientDescentConfig
from surfacefit.models.base import BaseFitter, FitResult, build_trace, linear_mse
from surfacefit.utils.constants import GRADIENT_DESCENT
from surfacefit.utils.logging import OptimizerProgress


class GradientDescentFitter(BaseFitter):
    """Fixed-step batch gradient descent on mean squared error.

    Each iteration steps both parameters against the analytic gradient

        d/d intercept = 2/n * sum(residual)
        d/d slope     = 2/n * sum(residual * x)

    with ``residual = intercept + slope * x - y``, then records the loss of
    the updated pair. There is no line search and no convergence check.

    Example:
        >>> fitter = GradientDescentFitter(learning_rate=0.01, iterations=1000)
        >>> result = fitter.fit(standardized)
    """

    method = GRADIENT_DESCENT

    def __init__(
        self,
        learning_rate: float = 0.01,
        iterations: int = 1000,
        initial_intercept: float = 0.0,
        initial_slope: float = 0.0,
        name: str | None = None,
    ):
        super().__init__(name or "Gradient descent")
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        if learning_rate <= 0:
            raise ValueError("learning_rate must be positive")

        self.learning_rate = learning_rate
        self.iterations = iterations
        self.initial_intercept = initial_intercept
        self.initial_slope = initial_slope

    @classmethod
    def from_config(cls, config: GradientDescentConfig) -> "GradientDescentFitter":
        """Build a fitter from config."""
        return cls(
            learning_rate=config.learning_rate,
            iterations=config.iterations,
            initial_intercept=config.initial_intercept,
            initial_slope=config.initial_slope,
        )

    def fit(self, data: pd.DataFrame) -> FitResult:
        """Run gradient descent.

        Args:
            data: Standardized observations.

        Returns:
            FitResult with the last pair and the per-iteration trace.
        """
        x, y = self._extract_xy(data)
        n = len(x)

        intercept = self.initial_intercept
        slope = self.initial_slope
        initial_loss = linear_mse(intercept, slope, x, y)
        rows = []
        progress = OptimizerProgress(self.name, self.iterations, initial_loss)

        for _ in range(self.iterations):
            residuals = intercept + slope * x - y
            grad_intercept = 2.0 / n * np.sum(residuals)
            grad_slope = 2.0 / n * np.sum(residuals * x)

            intercept -= self.learning_rate * grad_intercept
            slope -= self.learning_rate * grad_slope

            loss = linear_mse(intercept, slope, x, y)
            rows.append((intercept, slope, loss))
            progress.update(loss)

        progress.finish(f"learning rate {self.learning_rate}")

        if not np.isfinite(loss):
            logger.warning(
                f"{self.name} diverged (loss={loss}); "
                f"learning_rate={self.learning_rate} is above the stable range"
            )

        self._result = FitResult(
            method=self.method,
            intercept=float(intercept),
            slope=float(slope),
            loss=loss,
            trace=build_trace(rows),
            metadata={
                "initial_loss": initial_loss,
                "learning_rate": self.learning_rate,
            },
        )
        return self._result
