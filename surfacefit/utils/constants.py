"""Constants shared by the data, model and reporting layers.

Usage:
    from surfacefit.utils.constants import SURFACE_STD_COL, TRACE_COLUMNS
"""

from typing import Final


# =============================================================================
# OBSERVATION COLUMNS
# =============================================================================

# Canonical names of the two observation columns after preparation
SURFACE_COL: Final[str] = "surface_covered"
PRICE_COL: Final[str] = "price"

# Derived column used to screen out inconsistent listings
PRICE_PER_SQM_COL: Final[str] = "price_per_sqm"

# Suffix appended by the standardizer
STD_SUFFIX: Final[str] = "_std"
SURFACE_STD_COL: Final[str] = f"{SURFACE_COL}{STD_SUFFIX}"
PRICE_STD_COL: Final[str] = f"{PRICE_COL}{STD_SUFFIX}"


# =============================================================================
# FITTING METHODS
# =============================================================================

LUUS_JAAKOLA: Final[str] = "luus_jaakola"
GRADIENT_DESCENT: Final[str] = "gradient_descent"
OLS: Final[str] = "ols"

# Comparison order; OLS is the reference solution
FIT_METHODS: Final[list[str]] = [LUUS_JAAKOLA, GRADIENT_DESCENT, OLS]

METHOD_LABELS: Final[dict[str, str]] = {
    LUUS_JAAKOLA: "Luus-Jaakola",
    GRADIENT_DESCENT: "Gradient descent",
    OLS: "OLS",
}


# =============================================================================
# ITERATION TRACE
# =============================================================================

TRACE_COLUMNS: Final[list[str]] = ["iteration", "intercept", "slope", "loss"]
