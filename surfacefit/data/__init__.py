"""Listings ingestion, filtering and validation."""

from .loaders import filter_listings, load_listings, prepare_observations
from .schemas import ListingsSchema, ObservationSchema, validate_dataframe

__all__ = [
    "load_listings",
    "filter_listings",
    "prepare_observations",
    "ListingsSchema",
    "ObservationSchema",
    "validate_dataframe",
]
