"""Luus-Jaakola random-search line fitter.

Each iteration perturbs the best pair seen so far by a uniform draw inside a
search window. An improving candidate is adopted and the window shrinks;
otherwise the window grows. The recorded trace always holds the best pair
and best loss, so the loss column never increases.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.config import RandomSearchConfig
from surfacefit.models.base import BaseFitter, FitResult, build_trace, linear_mse
from surfacefit.utils.constants import LUUS_JAAKOLA
from surfacefit.utils.logging import OptimizerProgress


@dataclass
class SearchState:
    """Loop state: best pair, its loss and the current window radii."""

    intercept: float
    slope: float
    loss: float
    radius_intercept: float
    radius_slope: float

    def scale_window(self, factor: float, max_radius: float | None = None) -> None:
        """Multiply both radii by ``factor``, clipping at ``max_radius`` if set."""
        self.radius_intercept *= factor
        self.radius_slope *= factor
        if max_radius is not None:
            self.radius_intercept = min(self.radius_intercept, max_radius)
            self.radius_slope = min(self.radius_slope, max_radius)


class LuusJaakolaFitter(BaseFitter):
    """Random-search fitter with a shrinking/growing window.

    Args:
        iterations: Number of candidate draws.
        radius_intercept: Initial window radius for the intercept.
        radius_slope: Initial window radius for the slope.
        shrink: Window factor after an improving draw.
        grow: Window factor after a non-improving draw.
        initial_intercept: Starting intercept.
        initial_slope: Starting slope.
        max_radius: Optional cap on the radii. None leaves growth unbounded.
        rng: Random generator. Pass a seeded ``np.random.default_rng`` for
            reproducible runs.

    Example:
        >>> fitter = LuusJaakolaFitter(iterations=15, rng=np.random.default_rng(42))
        >>> result = fitter.fit(standardized)
    """

    method = LUUS_JAAKOLA

    def __init__(
        self,
        iterations: int = 15,
        radius_intercept: float = 1.0,
        radius_slope: float = 1.0,
        shrink: float = 0.95,
        grow: float = 1.05,
        initial_intercept: float = 0.0,
        initial_slope: float = 0.0,
        max_radius: float | None = None,
        rng: np.random.Generator | None = None,
        name: str | None = None,
    ):
        super().__init__(name or "Luus-Jaakola")
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        if radius_intercept <= 0 or radius_slope <= 0:
            raise ValueError("window radii must be positive")

        self.iterations = iterations
        self.radius_intercept = radius_intercept
        self.radius_slope = radius_slope
        self.shrink = shrink
        self.grow = grow
        self.initial_intercept = initial_intercept
        self.initial_slope = initial_slope
        self.max_radius = max_radius
        self._rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_config(
        cls,
        config: RandomSearchConfig,
        rng: np.random.Generator | None = None,
    ) -> "LuusJaakolaFitter":
        """Build a fitter from config; the generator is seeded from ``config.seed``
        unless one is given."""
        return cls(
            iterations=config.iterations,
            radius_intercept=config.radius_intercept,
            radius_slope=config.radius_slope,
            shrink=config.shrink,
            grow=config.grow,
            initial_intercept=config.initial_intercept,
            initial_slope=config.initial_slope,
            max_radius=config.max_radius,
            rng=rng if rng is not None else np.random.default_rng(config.seed),
        )

    def fit(self, data: pd.DataFrame) -> FitResult:
        """Run the random search.

        Args:
            data: Standardized observations.

        Returns:
            FitResult with the best pair and the best-so-far trace.
        """
        x, y = self._extract_xy(data)

        state = SearchState(
            intercept=self.initial_intercept,
            slope=self.initial_slope,
            loss=linear_mse(self.initial_intercept, self.initial_slope, x, y),
            radius_intercept=self.radius_intercept,
            radius_slope=self.radius_slope,
        )
        initial_loss = state.loss
        accepted = 0
        rows = []
        progress = OptimizerProgress(self.name, self.iterations, initial_loss)

        for i in range(self.iterations):
            candidate_intercept = state.intercept + self._rng.uniform(
                -state.radius_intercept, state.radius_intercept
            )
            candidate_slope = state.slope + self._rng.uniform(
                -state.radius_slope, state.radius_slope
            )
            candidate_loss = linear_mse(candidate_intercept, candidate_slope, x, y)

            if candidate_loss < state.loss:
                state.intercept = candidate_intercept
                state.slope = candidate_slope
                state.loss = candidate_loss
                state.scale_window(self.shrink, self.max_radius)
                accepted += 1
            else:
                state.scale_window(self.grow, self.max_radius)

            rows.append((state.intercept, state.slope, state.loss))
            progress.update(state.loss)
            logger.debug(
                f"Iteration {i + 1}: loss={state.loss:.6f}, "
                f"radii=({state.radius_intercept:.4f}, {state.radius_slope:.4f})"
            )

        self._result = FitResult(
            method=self.method,
            intercept=state.intercept,
            slope=state.slope,
            loss=state.loss,
            trace=build_trace(rows),
            metadata={
                "initial_loss": initial_loss,
                "accepted": accepted,
                "final_radius_intercept": state.radius_intercept,
                "final_radius_slope": state.radius_slope,
            },
        )

        progress.finish(f"{accepted} improving draws")
        return self._result
