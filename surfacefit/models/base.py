"""Base classes for line fitters.

Every fitter takes standardized observations (``surface_covered_std``,
``price_std``) and returns a :class:`FitResult` for the line
``price = intercept + slope * surface``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from surfacefit.utils.constants import PRICE_STD_COL, SURFACE_STD_COL, TRACE_COLUMNS


def linear_mse(intercept, slope, x: np.ndarray, y: np.ndarray) -> float:
    """Mean squared error of ``intercept + slope * x`` against ``y``."""
    residuals = intercept + slope * x - y
    return float(np.mean(residuals**2))


def build_trace(rows: list[tuple[float, float, float]]) -> pd.DataFrame:
    """Turn per-iteration ``(intercept, slope, loss)`` tuples into a trace frame.

    Iterations are numbered from 1.
    """
    trace = pd.DataFrame(rows, columns=TRACE_COLUMNS[1:], dtype=float)
    trace.insert(0, "iteration", np.arange(1, len(trace) + 1))
    return trace


@dataclass
class FitResult:
    """Fitted line and its optimization history.

    Attributes:
        method: Fitting method identifier.
        intercept: Fitted intercept.
        slope: Fitted slope.
        loss: Final loss (MSE) of the fitted pair.
        trace: Per-iteration ``iteration, intercept, slope, loss``; None for
            closed-form fits.
        metadata: Method-specific details (hyperparameters, acceptances).
    """

    method: str
    intercept: float
    slope: float
    loss: float
    trace: pd.DataFrame | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def n_iterations(self) -> int:
        """Number of recorded iterations."""
        return 0 if self.trace is None else len(self.trace)

    def predict(self, surface) -> np.ndarray:
        """Predict price for the given surface values."""
        return self.intercept + self.slope * np.asarray(surface, dtype=float)

    def __repr__(self) -> str:
        return (
            f"FitResult({self.method}: intercept={self.intercept:.4f}, "
            f"slope={self.slope:.4f}, loss={self.loss:.4f})"
        )


class BaseFitter(ABC):
    """Abstract base class for all line fitters.

    Example:
        >>> fitter = GradientDescentFitter(learning_rate=0.01, iterations=1000)
        >>> result = fitter.fit(standardized)
        >>> result.trace.tail()
    """

    method: str = "base"

    def __init__(self, name: str | None = None):
        """Initialize fitter.

        Args:
            name: Fitter name/identifier.
        """
        self._name = name or self.__class__.__name__
        self._result: FitResult | None = None

    @property
    def name(self) -> str:
        """Get fitter name."""
        return self._name

    @property
    def is_fitted(self) -> bool:
        """Check if the fitter has run."""
        return self._result is not None

    @property
    def result(self) -> FitResult:
        """Result of the last fit."""
        self._check_fitted()
        return self._result

    @abstractmethod
    def fit(self, data: pd.DataFrame) -> FitResult:
        """Fit the line to standardized observations.

        Args:
            data: DataFrame with ``surface_covered_std`` and ``price_std``.

        Returns:
            FitResult in standardized units.
        """
        pass

    def _extract_xy(self, data: pd.DataFrame) -> tuple[np.ndarray, np.ndarray]:
        """Pull standardized surface and price out as float arrays."""
        missing = {SURFACE_STD_COL, PRICE_STD_COL} - set(data.columns)
        if missing:
            raise KeyError(
                f"{self.name} requires columns {missing} which are not in DataFrame. "
                f"Available columns: {list(data.columns)}"
            )
        if data.empty:
            raise ValueError(f"{self.name} cannot fit an empty dataset")

        x = data[SURFACE_STD_COL].to_numpy(dtype=float)
        y = data[PRICE_STD_COL].to_numpy(dtype=float)
        return x, y

    def _check_fitted(self) -> None:
        """Raise error if fitter has not run."""
        if not self.is_fitted:
            raise ValueError(f"{self.name} has not been fitted. Call fit() first.")
