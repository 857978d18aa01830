"""Tests for the Luus-Jaakola random-search fitter."""

import numpy as np
import pandas as pd
import pytest

from surfacefit.config import RandomSearchConfig
from surfacefit.models.base import linear_mse
from surfacefit.models.random_search import LuusJaakolaFitter, SearchState


def _xy(df: pd.DataFrame) -> tuple[np.ndarray, np.ndarray]:
    return df["surface_covered_std"].to_numpy(), df["price_std"].to_numpy()


class TestLuusJaakolaFitter:
    """Tests for LuusJaakolaFitter."""

    def test_reference_run(self, standardized_observations: pd.DataFrame):
        """Test the 68-row, 15-iteration reference configuration."""
        assert len(standardized_observations) == 68
        fitter = LuusJaakolaFitter(
            iterations=15,
            radius_intercept=1.0,
            radius_slope=1.0,
            shrink=0.95,
            grow=1.05,
            rng=np.random.default_rng(42),
        )

        result = fitter.fit(standardized_observations)

        loss = result.trace["loss"].to_numpy()
        assert len(result.trace) == 15
        assert np.all(np.diff(loss) <= 0)
        assert result.loss <= linear_mse(0.0, 0.0, *_xy(standardized_observations))

    def test_loss_non_increasing_long_run(self, standardized_observations: pd.DataFrame):
        """Test that the recorded loss never increases, whatever the draws."""
        for seed in range(5):
            fitter = LuusJaakolaFitter(iterations=300, rng=np.random.default_rng(seed))
            loss = fitter.fit(standardized_observations).trace["loss"].to_numpy()
            assert np.all(np.diff(loss) <= 0)

    def test_reproducible_with_seed(self, standardized_observations: pd.DataFrame):
        """Test that the same seed gives the same trace."""
        first = LuusJaakolaFitter(rng=np.random.default_rng(7)).fit(standardized_observations)
        second = LuusJaakolaFitter(rng=np.random.default_rng(7)).fit(standardized_observations)

        pd.testing.assert_frame_equal(first.trace, second.trace)
        assert first.intercept == second.intercept
        assert first.slope == second.slope

    def test_trace_records_best_so_far(self, standardized_observations: pd.DataFrame):
        """Test that non-improving iterations repeat the previous best pair."""
        result = LuusJaakolaFitter(iterations=50, rng=np.random.default_rng(3)).fit(
            standardized_observations
        )
        trace = result.trace
        x, y = _xy(standardized_observations)

        for i in range(1, len(trace)):
            if trace["loss"].iloc[i] == trace["loss"].iloc[i - 1]:
                assert trace["intercept"].iloc[i] == trace["intercept"].iloc[i - 1]
                assert trace["slope"].iloc[i] == trace["slope"].iloc[i - 1]

        # Every recorded loss is the loss of the recorded pair
        for _, row in trace.iterrows():
            assert row["loss"] == pytest.approx(linear_mse(row["intercept"], row["slope"], x, y))

        last = trace.iloc[-1]
        assert (result.intercept, result.slope, result.loss) == (
            last["intercept"], last["slope"], last["loss"]
        )

    def test_window_scaling(self, standardized_observations: pd.DataFrame):
        """Test that radii shrink per accepted draw and grow per rejected one."""
        result = LuusJaakolaFitter(iterations=15, rng=np.random.default_rng(42)).fit(
            standardized_observations
        )
        accepted = result.metadata["accepted"]
        expected = 0.95**accepted * 1.05 ** (15 - accepted)

        assert result.metadata["final_radius_intercept"] == pytest.approx(expected)
        assert result.metadata["final_radius_slope"] == pytest.approx(expected)
        assert accepted == int(np.sum(np.diff(
            np.r_[result.metadata["initial_loss"], result.trace["loss"]]
        ) < 0))

    def test_max_radius_caps_growth(self, standardized_observations: pd.DataFrame):
        """Test that the optional cap bounds the window."""
        result = LuusJaakolaFitter(
            iterations=100,
            grow=1.5,
            max_radius=1.0,
            rng=np.random.default_rng(0),
        ).fit(standardized_observations)

        assert result.metadata["final_radius_intercept"] <= 1.0
        assert result.metadata["final_radius_slope"] <= 1.0

    @pytest.mark.slow
    def test_improves_towards_ols_with_capped_window(self, standardized_observations: pd.DataFrame):
        """Test that a long search with a bounded window gets close to the least-squares loss."""
        x, y = _xy(standardized_observations)
        slope, intercept = np.polyfit(x, y, 1)
        ols_loss = linear_mse(intercept, slope, x, y)

        result = LuusJaakolaFitter(
            iterations=3000, max_radius=1.0, rng=np.random.default_rng(1)
        ).fit(standardized_observations)

        assert result.loss == pytest.approx(ols_loss, rel=0.05)

    def test_uncapped_window_grows_geometrically(self, standardized_observations: pd.DataFrame):
        """Test that without a cap the window keeps growing once draws stop improving."""
        iterations = 3000
        result = LuusJaakolaFitter(iterations=iterations, rng=np.random.default_rng(1)).fit(
            standardized_observations
        )
        loss = np.r_[result.metadata["initial_loss"], result.trace["loss"].to_numpy()]
        improving = np.flatnonzero(np.diff(loss) < 0) + 1
        last_improvement = int(improving[-1]) if len(improving) else 0
        accepted = result.metadata["accepted"]

        # Radius at the last accepted draw, then one growth step per rejection
        radius_at_last = 0.95**accepted * 1.05 ** (last_improvement - accepted)
        expected = radius_at_last * 1.05 ** (iterations - last_improvement)

        assert result.metadata["final_radius_intercept"] == pytest.approx(expected)
        assert result.metadata["final_radius_slope"] == pytest.approx(expected)
        assert last_improvement < iterations / 2
        assert np.all(loss[last_improvement:] == loss[last_improvement])
        assert result.metadata["final_radius_intercept"] > 1e30

    def test_from_config_seeds_generator(self, standardized_observations: pd.DataFrame):
        """Test that from_config seeds from config.seed."""
        config = RandomSearchConfig(seed=11)

        first = LuusJaakolaFitter.from_config(config).fit(standardized_observations)
        second = LuusJaakolaFitter.from_config(config).fit(standardized_observations)

        pd.testing.assert_frame_equal(first.trace, second.trace)

    def test_invalid_arguments(self):
        """Test that bad iteration counts and radii are rejected."""
        with pytest.raises(ValueError):
            LuusJaakolaFitter(iterations=0)
        with pytest.raises(ValueError):
            LuusJaakolaFitter(radius_slope=0.0)

    def test_missing_columns_raise(self, sample_observations: pd.DataFrame):
        """Test that unstandardized input is rejected."""
        with pytest.raises(KeyError):
            LuusJaakolaFitter().fit(sample_observations)

    def test_result_before_fit_raises(self):
        """Test that accessing the result before fit raises error."""
        with pytest.raises(ValueError, match="not been fitted"):
            LuusJaakolaFitter().result


class TestSearchState:
    """Tests for SearchState."""

    def test_scale_window(self):
        state = SearchState(intercept=0.0, slope=0.0, loss=1.0, radius_intercept=2.0, radius_slope=1.0)
        state.scale_window(0.5)
        assert (state.radius_intercept, state.radius_slope) == (1.0, 0.5)

    def test_scale_window_with_cap(self):
        state = SearchState(intercept=0.0, slope=0.0, loss=1.0, radius_intercept=2.0, radius_slope=1.0)
        state.scale_window(3.0, max_radius=4.0)
        assert (state.radius_intercept, state.radius_slope) == (4.0, 3.0)
