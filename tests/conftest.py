"""Pytest fixtures for testing the surface vs price fitters.

Provides a synthetic single-neighborhood dataset shaped like the real one
(68 apartments, price roughly linear in covered surface) and a listings
table with rows the filters must discard.
"""

from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd
import pytest


# =============================================================================
# PATH FIXTURES
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return project root directory."""
    return Path(__file__).parent.parent


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_observations() -> pd.DataFrame:
    """Create 68 (surface, price) observations for one neighborhood."""
    rng = np.random.default_rng(42)
    n = 68

    surface = rng.uniform(30, 200, n).round(1)
    price = (20_000 + 2_500 * surface + rng.normal(0, 25_000, n)).round(0)

    return pd.DataFrame({"surface_covered": surface, "price": price})


@pytest.fixture
def standardized_observations(sample_observations: pd.DataFrame) -> pd.DataFrame:
    """Standardized version of the sample observations."""
    from surfacefit.features.standardization import Standardizer

    return Standardizer().fit_transform(sample_observations)


@pytest.fixture
def sample_listings(sample_observations: pd.DataFrame) -> pd.DataFrame:
    """Create a listings table: the 68 target rows plus rows to be filtered out."""
    rng = np.random.default_rng(7)

    target = sample_observations.assign(
        l3="Palermo",
        property_type="Departamento",
        operation_type="Venta",
        currency="USD",
    )

    def others(n: int, **overrides) -> pd.DataFrame:
        base = {
            "l3": "Palermo",
            "property_type": "Departamento",
            "operation_type": "Venta",
            "currency": "USD",
            "surface_covered": rng.uniform(30, 200, n).round(1),
            "price": rng.uniform(50_000, 500_000, n).round(0),
        }
        base.update(overrides)
        return pd.DataFrame(base)

    invalid = pd.DataFrame({
        "l3": "Palermo",
        "property_type": "Departamento",
        "operation_type": "Venta",
        "currency": "USD",
        "surface_covered": [np.nan, 0.0, 55.0, 80.0],
        "price": [120_000.0, 90_000.0, -10.0, np.nan],
    })

    listings = pd.concat(
        [
            target,
            others(20, l3="Belgrano"),
            others(10, currency="ARS"),
            others(10, operation_type="Alquiler"),
            others(5, property_type="PH"),
            invalid,
        ],
        ignore_index=True,
    )
    listings["title"] = [f"Listing {i}" for i in range(len(listings))]
    return listings.sample(frac=1.0, random_state=0).reset_index(drop=True)


@pytest.fixture
def listings_csv(tmp_path: Path, sample_listings: pd.DataFrame) -> Path:
    """Write the sample listings to a CSV file with capitalized headers."""
    path = tmp_path / "raw" / "listings.csv"
    path.parent.mkdir(parents=True)
    sample_listings.rename(columns=str.upper).to_csv(path, index=False)
    return path


# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Create sample configuration dictionary."""
    return {
        "paths": {
            "listings_file": "data/raw/listings.csv",
            "outputs_dir": "outputs",
        },
        "data": {
            "neighborhood": "Palermo",
            "currency": "USD",
        },
        "random_search": {
            "iterations": 15,
            "seed": 123,
        },
        "gradient_descent": {
            "learning_rate": 0.01,
            "iterations": 1000,
        },
    }


@pytest.fixture
def config(tmp_path: Path, listings_csv: Path):
    """Default config pointing at the temporary listings and outputs."""
    from surfacefit.config import Config

    cfg = Config()
    cfg.paths.listings_file = listings_csv
    cfg.paths.outputs_dir = tmp_path / "outputs"
    return cfg


# =============================================================================
# MODEL FIXTURES
# =============================================================================


@pytest.fixture
def trained_results(sample_observations: pd.DataFrame):
    """Fit all three methods with default settings."""
    from surfacefit.models.training import ModelTrainer

    return ModelTrainer().train_all(sample_observations)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
