"""Standardization of observations and coefficient rescaling."""

from surfacefit.features.standardization import (
    StandardizationParams,
    Standardizer,
    destandardize_coefficients,
    destandardize_trace,
    standardize_coefficients,
)

__all__ = [
    "StandardizationParams",
    "Standardizer",
    "destandardize_coefficients",
    "standardize_coefficients",
    "destandardize_trace",
]
