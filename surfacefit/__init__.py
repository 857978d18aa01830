"""Surface vs Price Linear Fit.

Fits sale price as a linear function of covered surface for one
neighborhood's listings, three ways, and compares them:

- Luus-Jaakola random search
- Batch gradient descent
- Ordinary least squares (closed-form reference)

Usage:
    from surfacefit.config import load_config
    from surfacefit.pipeline import SurfacePricePipeline

Example:
    >>> config = load_config("configs/default.yaml")
    >>> output = SurfacePricePipeline(config).run()
    >>> print(output.comparison)
"""

__version__ = "0.1.0"

from surfacefit.config import Config, load_config
from surfacefit.models import (
    GradientDescentFitter,
    LuusJaakolaFitter,
    ModelTrainer,
    OLSFitter,
)
from surfacefit.pipeline import SurfacePricePipeline

__all__ = [
    "__version__",
    "Config",
    "load_config",
    "LuusJaakolaFitter",
    "GradientDescentFitter",
    "OLSFitter",
    "ModelTrainer",
    "SurfacePricePipeline",
]
