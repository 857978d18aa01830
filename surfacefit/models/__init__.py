"""Line fitters for price as a function of covered surface.

Two iterative optimizers (Luus-Jaakola random search, batch gradient
descent) and the closed-form OLS reference share one interface.
"""

from surfacefit.models.base import (
    BaseFitter,
    FitResult,
    build_trace,
    linear_mse,
)
from surfacefit.models.gradient_descent import GradientDescentFitter
from surfacefit.models.random_search import LuusJaakolaFitter, SearchState
from surfacefit.models.regression import OLSFitter
from surfacefit.models.training import ModelTrainer, TrainingResult

__all__ = [
    # Base
    "BaseFitter",
    "FitResult",
    "build_trace",
    "linear_mse",
    # Fitters
    "LuusJaakolaFitter",
    "SearchState",
    "GradientDescentFitter",
    "OLSFitter",
    # Training
    "ModelTrainer",
    "TrainingResult",
]
