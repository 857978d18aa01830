"""Loguru logging for fitting runs.

Every record carries a ``method`` field, set while a fitter runs, so console
and file output show which optimizer a line came from.

Usage:
    from loguru import logger
    from surfacefit.utils.logging import setup_logging, method_context

    # At application start
    setup_logging(level="DEBUG", log_file="outputs/fit.log")

    # Around a fitter
    with method_context("luus_jaakola"):
        logger.info("Starting")
"""

import sys
from pathlib import Path
from typing import Literal

from loguru import logger

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[method]: <16}</cyan> | "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[method]} | {name}:{line} | {message}"

# Shown in the method column outside any fitter
NO_METHOD = "-"


def setup_logging(level: LogLevel = "INFO", log_file: str | Path | None = None) -> None:
    """Configure console and optional file logging.

    Args:
        level: Minimum log level for every sink.
        log_file: Run log, overwritten on each call. Console only if None.
    """
    logger.remove()
    logger.configure(extra={"method": NO_METHOD})
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(log_path), format=FILE_FORMAT, level=level, mode="w")
        logger.info(f"Logging to file: {log_path}")


def method_context(method: str):
    """Tag every record logged inside the block with the fitting method."""
    return logger.contextualize(method=method)


def log_observations(df, surface_col: str, price_col: str) -> None:
    """Log size and ranges of the observation set about to be fitted."""
    surface = df[surface_col]
    price = df[price_col]
    logger.info(
        f"Observations: {len(df):,} rows, "
        f"surface {surface.min():,.1f}-{surface.max():,.1f}, "
        f"price {price.min():,.0f}-{price.max():,.0f}"
    )


def log_fit_metrics(method: str, metrics, n_iterations: int = 0) -> None:
    """Log one method's fit quality in original units.

    Args:
        method: Fitting method identifier.
        metrics: RegressionMetrics of the rescaled fit.
        n_iterations: Optimizer iterations; 0 for closed-form fits.
    """
    steps = f" after {n_iterations} iterations" if n_iterations else ""
    logger.info(
        f"{method}{steps}: R²={metrics.r_squared:.4f}, "
        f"RMSE={metrics.rmse:,.2f}, MAE={metrics.mae:,.2f}"
    )


class OptimizerProgress:
    """Track an iterative fitter's loss and report it at percentage marks.

    Example:
        >>> progress = OptimizerProgress("Gradient descent", total=1000, initial_loss=1.0)
        >>> for _ in range(1000):
        ...     progress.update(step())
        >>> progress.finish()
    """

    def __init__(
        self,
        name: str,
        total: int,
        initial_loss: float,
        log_interval: int = 10,
    ):
        """Initialize progress tracking.

        Args:
            name: Fitter name used in messages.
            total: Number of iterations the fitter will run.
            initial_loss: Loss at the starting pair.
            log_interval: Percentage step between DEBUG reports.
        """
        self.name = name
        self.total = total
        self.initial_loss = initial_loss
        self.log_interval = log_interval
        self.iteration = 0
        self.loss = initial_loss
        self.best_loss = initial_loss
        self._next_pct = log_interval

    def update(self, loss: float) -> None:
        """Record one iteration's loss."""
        self.iteration += 1
        self.loss = loss
        if loss < self.best_loss:
            self.best_loss = loss

        pct = 100 * self.iteration // self.total
        if pct >= self._next_pct:
            self._next_pct = (pct // self.log_interval + 1) * self.log_interval
            logger.debug(
                f"{self.name}: {pct}% ({self.iteration}/{self.total}), "
                f"loss={loss:.6f}, best={self.best_loss:.6f}"
            )

    def finish(self, detail: str = "") -> None:
        """Log the loss change over the whole run at INFO."""
        suffix = f", {detail}" if detail else ""
        logger.info(
            f"Fitted {self.name}: {self.iteration} iterations, "
            f"loss {self.initial_loss:.4f} -> {self.loss:.4f}{suffix}"
        )


# Initialize default console logging on import
setup_logging(level="INFO")
