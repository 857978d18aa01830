"""Closed-form ordinary least squares line fitter.

The reference solution the iterative fitters are compared against.
"""

import pandas as pd
from loguru import logger
from sklearn.linear_model import LinearRegression

from surfacefit.models.base import BaseFitter, FitResult, linear_mse
from surfacefit.utils.constants import OLS


class OLSFitter(BaseFitter):
    """Ordinary Least Squares via scikit-learn.

    Example:
        >>> result = OLSFitter().fit(standardized)
        >>> result.slope
    """

    method = OLS

    def __init__(self, name: str | None = None):
        super().__init__(name or "OLS")
        self._model: LinearRegression | None = None

    def fit(self, data: pd.DataFrame) -> FitResult:
        """Fit OLS.

        Args:
            data: Standardized observations.

        Returns:
            FitResult with no trace.
        """
        x, y = self._extract_xy(data)

        self._model = LinearRegression(fit_intercept=True)
        self._model.fit(x.reshape(-1, 1), y)

        intercept = float(self._model.intercept_)
        slope = float(self._model.coef_[0])

        self._result = FitResult(
            method=self.method,
            intercept=intercept,
            slope=slope,
            loss=linear_mse(intercept, slope, x, y),
        )

        logger.info(f"Fitted {self.name}: intercept={intercept:.4f}, slope={slope:.4f}")
        return self._result
