"""Evaluation metrics and diagnostics.

Fit-quality metrics in original price units, residual diagnostics, optimizer
trace summaries and the method comparison table.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


@dataclass
class RegressionMetrics:
    """Container for regression evaluation metrics.

    Attributes:
        r_squared: Coefficient of determination (R²).
        mse: Mean squared error.
        rmse: Root mean squared error.
        mae: Mean absolute error.
        n_samples: Number of samples evaluated.
    """

    r_squared: float
    mse: float
    rmse: float
    mae: float
    n_samples: int = 0

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "r_squared": self.r_squared,
            "mse": self.mse,
            "rmse": self.rmse,
            "mae": self.mae,
            "n_samples": self.n_samples,
        }

    def __repr__(self) -> str:
        return f"R²={self.r_squared:.4f}, RMSE={self.rmse:.4f}, MAE={self.mae:.4f}"


def compute_regression_metrics(
    y_true: pd.Series | np.ndarray,
    y_pred: pd.Series | np.ndarray,
) -> RegressionMetrics:
    """Compute regression metrics.

    Args:
        y_true: True target values.
        y_pred: Predicted values.

    Returns:
        RegressionMetrics with all computed metrics.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    mse = mean_squared_error(y_true, y_pred)
    return RegressionMetrics(
        r_squared=float(r2_score(y_true, y_pred)),
        mse=float(mse),
        rmse=float(np.sqrt(mse)),
        mae=float(mean_absolute_error(y_true, y_pred)),
        n_samples=len(y_true),
    )


@dataclass
class ResidualDiagnostics:
    """Diagnostics from residual analysis.

    Attributes:
        mean_residual: Mean of residuals (should be ~0).
        std_residual: Standard deviation of residuals.
        skewness: Residual skewness.
        kurtosis: Residual kurtosis (excess).
        normality_test_pvalue: Shapiro-Wilk p-value, None below 8 samples.
    """

    mean_residual: float
    std_residual: float
    skewness: float
    kurtosis: float
    normality_test_pvalue: float | None = None

    def is_well_behaved(self) -> bool:
        """Mean near zero, skewness and excess kurtosis not extreme."""
        return (
            abs(self.mean_residual) < 0.1 * self.std_residual
            and abs(self.skewness) < 1.0
            and abs(self.kurtosis) < 3.0
        )


def analyze_residuals(residuals: pd.Series | np.ndarray) -> ResidualDiagnostics:
    """Analyze model residuals for diagnostic purposes.

    Args:
        residuals: Model residuals (y_true - y_pred).

    Returns:
        ResidualDiagnostics with analysis results.
    """
    from scipy import stats

    residuals = np.asarray(residuals, dtype=float)
    residuals = residuals[~np.isnan(residuals)]

    normality_p = None
    if len(residuals) >= 8:
        _, normality_p = stats.shapiro(residuals)
        normality_p = float(normality_p)

    return ResidualDiagnostics(
        mean_residual=float(np.mean(residuals)),
        std_residual=float(np.std(residuals)),
        skewness=float(stats.skew(residuals)),
        kurtosis=float(stats.kurtosis(residuals)),
        normality_test_pvalue=normality_p,
    )


def summarize_trace(trace: pd.DataFrame) -> dict[str, float]:
    """Summarize an optimizer trace.

    Args:
        trace: Trace with a ``loss`` column in iteration order.

    Returns:
        Dict with iteration count, first/final/best loss, the iteration at
        which the best loss was first reached, and how many iterations
        lowered the loss.
    """
    loss = trace["loss"].to_numpy(dtype=float)
    improvements = int(np.sum(np.diff(loss) < 0))
    return {
        "n_iterations": len(loss),
        "first_loss": float(loss[0]),
        "final_loss": float(loss[-1]),
        "best_loss": float(np.min(loss)),
        "best_iteration": int(np.argmin(loss)) + 1,
        "improvements": improvements,
    }


def compare_models(
    results: list[dict],
    reference: str | None = "ols",
    metrics: list[str] | None = None,
) -> pd.DataFrame:
    """Create comparison table of fit results.

    Args:
        results: One dict per method with a ``method`` key, coefficients and
            metric keys.
        reference: Method whose coefficients and MSE the others are
            compared against; skipped if absent.
        metrics: Metric columns to include (default: R², MSE, RMSE, MAE).

    Returns:
        DataFrame comparing methods, best R² first.
    """
    if metrics is None:
        metrics = ["r_squared", "mse", "rmse", "mae"]

    df = pd.DataFrame(results)

    cols = ["method", "intercept", "slope"] + [c for c in metrics if c in df.columns]
    df = df[cols]

    if reference is not None and reference in set(df["method"]):
        ref = df.loc[df["method"] == reference].iloc[0]
        df["intercept_gap_pct"] = (df["intercept"] - ref["intercept"]) / abs(ref["intercept"]) * 100
        df["slope_gap_pct"] = (df["slope"] - ref["slope"]) / abs(ref["slope"]) * 100
        if "mse" in df.columns:
            df["mse_ratio"] = df["mse"] / ref["mse"]

    if "r_squared" in df.columns:
        df = df.sort_values("r_squared", ascending=False)

    return df.reset_index(drop=True)
