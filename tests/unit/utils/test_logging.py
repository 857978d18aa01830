"""Tests for the logging helpers."""

import pytest
from loguru import logger

from surfacefit.evaluation.metrics import compute_regression_metrics
from surfacefit.utils.logging import (
    OptimizerProgress,
    log_fit_metrics,
    method_context,
    setup_logging,
)


@pytest.fixture
def records():
    """Capture formatted records at DEBUG."""
    messages = []
    handler_id = logger.add(
        lambda m: messages.append(str(m).rstrip("\n")),
        level="DEBUG",
        format="{level}|{extra[method]}|{message}",
    )
    yield messages
    logger.remove(handler_id)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_log_file_written(self, tmp_path):
        """Test that records reach the run log with the method column."""
        log_file = tmp_path / "logs" / "fit.log"
        setup_logging(level="INFO", log_file=log_file)
        try:
            with method_context("ols"):
                logger.info("fitted")
            logger.info("done")
        finally:
            setup_logging(level="INFO")

        lines = log_file.read_text().splitlines()
        assert any("| ols |" in line and line.endswith("fitted") for line in lines)
        assert any("| - |" in line and line.endswith("done") for line in lines)


class TestMethodContext:
    """Tests for method_context."""

    def test_tags_records_inside_block(self, records):
        with method_context("gradient_descent"):
            logger.info("inside")
        logger.info("outside")

        assert records == ["INFO|gradient_descent|inside", "INFO|-|outside"]


class TestOptimizerProgress:
    """Tests for OptimizerProgress."""

    def test_reports_at_percentage_marks(self, records):
        """Test one DEBUG record per 10% and an INFO summary."""
        progress = OptimizerProgress("Search", total=20, initial_loss=1.0)
        for i in range(20):
            progress.update(1.0 / (i + 2))
        progress.finish("3 improving draws")

        debug = [r for r in records if r.startswith("DEBUG")]
        info = [r for r in records if r.startswith("INFO")]
        assert len(debug) == 10
        assert debug[0] == "DEBUG|-|Search: 10% (2/20), loss=0.333333, best=0.333333"
        assert info == [
            "INFO|-|Fitted Search: 20 iterations, loss 1.0000 -> 0.0476, 3 improving draws"
        ]

    def test_tracks_best_loss(self):
        """Test that the best loss survives a worse later iteration."""
        progress = OptimizerProgress("GD", total=3, initial_loss=5.0)
        for loss in [2.0, 1.0, 4.0]:
            progress.update(loss)

        assert progress.best_loss == 1.0
        assert progress.loss == 4.0
        assert progress.iteration == 3


class TestLogFitMetrics:
    """Tests for log_fit_metrics."""

    def test_message(self, records):
        metrics = compute_regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 4.0])

        log_fit_metrics("luus_jaakola", metrics, n_iterations=15)
        log_fit_metrics("ols", metrics)

        assert records[0].startswith("INFO|-|luus_jaakola after 15 iterations: R²=")
        assert records[1].startswith("INFO|-|ols: R²=")
