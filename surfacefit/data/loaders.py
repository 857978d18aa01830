"""Listings loading and observation preparation."""

from pathlib import Path

import numpy as np
import pandas as pd
from loguru import logger

from surfacefit.config import DataConfig
from surfacefit.data.schemas import ObservationSchema
from surfacefit.utils.constants import PRICE_COL, PRICE_PER_SQM_COL, SURFACE_COL


def load_listings(path: Path) -> pd.DataFrame:
    """Load a listings CSV export.

    Column names are lower-cased and stripped so config column names
    match regardless of the export's header style.

    Args:
        path: Path to the listings CSV.

    Returns:
        DataFrame with one row per listing.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Listings file not found at {path}")

    logger.info(f"Loading listings from {path}")
    df = pd.read_csv(path, encoding="utf-8", low_memory=False)
    df.columns = df.columns.str.lower().str.strip()

    logger.info(f"Loaded {len(df):,} listings")
    return df


def filter_listings(df: pd.DataFrame, config: DataConfig | None = None) -> pd.DataFrame:
    """Keep listings for one neighborhood, property type, operation and currency.

    Args:
        df: Raw listings.
        config: Column names and filter values.

    Returns:
        Filtered copy of the listings.

    Raises:
        KeyError: If a filter column is missing.
    """
    config = config or DataConfig()

    criteria = {
        config.neighborhood_col: config.neighborhood,
        config.property_type_col: config.property_type,
        config.operation_type_col: config.operation_type,
        config.currency_col: config.currency,
    }
    missing = set(criteria) - set(df.columns)
    if missing:
        raise KeyError(
            f"Listings are missing filter columns {sorted(missing)}. "
            f"Available columns: {list(df.columns)}"
        )

    mask = pd.Series(True, index=df.index)
    for col, value in criteria.items():
        mask &= df[col] == value

    result = df.loc[mask].copy()
    logger.info(
        f"Filtered listings: {len(result):,} of {len(df):,} rows "
        f"({config.neighborhood}, {config.property_type}, "
        f"{config.operation_type}, {config.currency})"
    )
    return result


def prepare_observations(
    df: pd.DataFrame,
    config: DataConfig | None = None,
) -> pd.DataFrame:
    """Reduce filtered listings to the (surface, price) observation set.

    Rows with a missing surface or price are dropped, then rows with a
    non-positive surface or whose derived price per m² is missing,
    infinite or negative.

    Args:
        df: Filtered listings.
        config: Column names and minimum row count.

    Returns:
        DataFrame with ``surface_covered``, ``price`` and ``price_per_sqm``,
        index reset.

    Raises:
        KeyError: If the surface or price column is missing.
        ValueError: If fewer than ``min_observations`` rows survive.
    """
    config = config or DataConfig()

    for col in (config.surface_col, config.price_col):
        if col not in df.columns:
            raise KeyError(f"Column '{col}' not found in listings")

    obs = df[[config.surface_col, config.price_col]].rename(
        columns={config.surface_col: SURFACE_COL, config.price_col: PRICE_COL}
    )
    obs = obs.apply(pd.to_numeric, errors="coerce").dropna()

    obs[PRICE_PER_SQM_COL] = obs[PRICE_COL] / obs[SURFACE_COL]
    valid = (
        np.isfinite(obs[PRICE_PER_SQM_COL])
        & (obs[PRICE_PER_SQM_COL] >= 0)
        & (obs[SURFACE_COL] > 0)
    )
    dropped = int((~valid).sum())
    if dropped:
        logger.debug(f"Dropped {dropped} rows with invalid price per m²")
    obs = obs.loc[valid].reset_index(drop=True)

    if len(obs) < config.min_observations:
        raise ValueError(
            f"Only {len(obs)} usable observations; "
            f"at least {config.min_observations} are required"
        )

    obs = ObservationSchema.validate(obs)
    logger.info(f"Prepared {len(obs):,} observations")
    return obs
