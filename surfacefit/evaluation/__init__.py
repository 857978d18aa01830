"""Fit evaluation: metrics, residual diagnostics and method comparison."""

from surfacefit.evaluation.metrics import (
    RegressionMetrics,
    ResidualDiagnostics,
    analyze_residuals,
    compare_models,
    compute_regression_metrics,
    summarize_trace,
)

__all__ = [
    "RegressionMetrics",
    "ResidualDiagnostics",
    "compute_regression_metrics",
    "analyze_residuals",
    "summarize_trace",
    "compare_models",
]
