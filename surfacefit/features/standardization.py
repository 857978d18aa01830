"""Standardization of observations and rescaling of fitted coefficients.

The fitters work on zero-mean, unit-variance surface and price. The
transform is affine, so a line fitted in standardized units maps exactly
onto a line in original units:

    slope     = slope_std * sd_price / sd_surface
    intercept = intercept_std * sd_price + mean_price - slope * mean_surface

and every squared residual scales by ``sd_price ** 2``.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.utils.constants import PRICE_COL, STD_SUFFIX, SURFACE_COL


@dataclass(frozen=True)
class StandardizationParams:
    """Sample mean and standard deviation of surface and price.

    Attributes:
        mean_surface: Mean covered surface.
        sd_surface: Standard deviation of covered surface (ddof=1).
        mean_price: Mean price.
        sd_price: Standard deviation of price (ddof=1).
    """

    mean_surface: float
    sd_surface: float
    mean_price: float
    sd_price: float


class Standardizer:
    """Standardize surface and price by removing the mean and scaling to unit variance.

    z = (x - mean) / std

    Unlike a general-purpose scaler, a zero (or non-finite) standard
    deviation is an error: a constant column has no line to fit.

    Example:
        >>> standardizer = Standardizer()
        >>> scaled = standardizer.fit_transform(observations)
        >>> standardizer.params.sd_price
    """

    def __init__(
        self,
        surface_col: str = SURFACE_COL,
        price_col: str = PRICE_COL,
        suffix: str = STD_SUFFIX,
    ):
        self._surface_col = surface_col
        self._price_col = price_col
        self._suffix = suffix
        self._params: StandardizationParams | None = None

    @property
    def columns(self) -> list[str]:
        """Input column names."""
        return [self._surface_col, self._price_col]

    @property
    def is_fitted(self) -> bool:
        """Check if the standardizer has been fitted."""
        return self._params is not None

    @property
    def params(self) -> StandardizationParams:
        """Learned standardization parameters."""
        self._check_fitted()
        return self._params

    def fit(self, df: pd.DataFrame) -> "Standardizer":
        """Learn means and standard deviations.

        Args:
            df: Observations with surface and price columns.

        Returns:
            Self.

        Raises:
            KeyError: If a required column is missing.
            ValueError: If a column has zero or undefined variance.
        """
        self._check_columns(df)

        stats = {}
        for col in self.columns:
            mean = float(df[col].mean())
            std = float(df[col].std())
            if not np.isfinite(std) or std == 0:
                raise ValueError(
                    f"Column '{col}' has zero variance; cannot standardize"
                )
            stats[col] = (mean, std)

        self._params = StandardizationParams(
            mean_surface=stats[self._surface_col][0],
            sd_surface=stats[self._surface_col][1],
            mean_price=stats[self._price_col][0],
            sd_price=stats[self._price_col][1],
        )
        logger.debug(f"Standardizer fitted: {self._params}")
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply standardization.

        Args:
            df: Observations to transform.

        Returns:
            DataFrame with ``<col>_std`` columns.
        """
        self._check_fitted()
        self._check_columns(df)

        p = self._params
        result = pd.DataFrame(index=df.index)
        result[f"{self._surface_col}{self._suffix}"] = (
            df[self._surface_col] - p.mean_surface
        ) / p.sd_surface
        result[f"{self._price_col}{self._suffix}"] = (
            df[self._price_col] - p.mean_price
        ) / p.sd_price
        return result

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fit and transform in one step."""
        return self.fit(df).transform(df)

    def inverse_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Reverse standardization.

        Args:
            df: Standardized DataFrame.

        Returns:
            DataFrame with original scale.
        """
        self._check_fitted()

        p = self._params
        scales = {
            self._surface_col: (p.mean_surface, p.sd_surface),
            self._price_col: (p.mean_price, p.sd_price),
        }
        result = pd.DataFrame(index=df.index)
        for col, (mean, std) in scales.items():
            std_col = f"{col}{self._suffix}"
            if std_col in df.columns:
                result[col] = df[std_col] * std + mean
        return result

    def _check_fitted(self) -> None:
        if not self.is_fitted:
            raise ValueError(
                "Standardizer has not been fitted. Call fit() or fit_transform() first."
            )

    def _check_columns(self, df: pd.DataFrame) -> None:
        missing = set(self.columns) - set(df.columns)
        if missing:
            raise KeyError(
                f"Standardizer requires columns {missing} which are not in DataFrame. "
                f"Available columns: {list(df.columns)}"
            )


# =============================================================================
# COEFFICIENT RESCALING
# =============================================================================


def destandardize_coefficients(
    intercept: float,
    slope: float,
    params: StandardizationParams,
) -> tuple[float, float]:
    """Map a standardized (intercept, slope) pair to original units.

    Args:
        intercept: Intercept in standardized units.
        slope: Slope in standardized units.
        params: Standardization parameters of the data the pair was fitted on.

    Returns:
        Tuple of (intercept, slope) in original units.
    """
    slope_original = slope * (params.sd_price / params.sd_surface)
    intercept_original = (
        intercept * params.sd_price
        + params.mean_price
        - slope_original * params.mean_surface
    )
    return intercept_original, slope_original


def standardize_coefficients(
    intercept: float,
    slope: float,
    params: StandardizationParams,
) -> tuple[float, float]:
    """Inverse of :func:`destandardize_coefficients`."""
    slope_std = slope * (params.sd_surface / params.sd_price)
    intercept_std = (
        intercept + slope * params.mean_surface - params.mean_price
    ) / params.sd_price
    return intercept_std, slope_std


def destandardize_trace(
    trace: pd.DataFrame,
    params: StandardizationParams,
) -> pd.DataFrame:
    """Rescale every trace entry to original units.

    Intercept and slope go through :func:`destandardize_coefficients`
    element-wise; loss is multiplied by ``sd_price ** 2``. Row order and
    any other columns are preserved.

    Args:
        trace: Trace with ``intercept``, ``slope`` and ``loss`` columns.
        params: Standardization parameters.

    Returns:
        New DataFrame in original units.
    """
    result = trace.copy()
    intercept, slope = destandardize_coefficients(
        trace["intercept"].to_numpy(), trace["slope"].to_numpy(), params
    )
    result["intercept"] = intercept
    result["slope"] = slope
    result["loss"] = trace["loss"].to_numpy() * params.sd_price**2
    return result
