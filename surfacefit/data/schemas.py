"""Pandera schemas for data validation.

Schemas are the contract between listings ingestion and the fitters,
catching malformed rows before any statistics are computed.

Usage:
    from surfacefit.data.schemas import ObservationSchema, validate_dataframe

    validated_df = ObservationSchema.validate(observations)
"""

from typing import Optional

import pandera as pa
from pandera.typing import Series


# =============================================================================
# RAW DATA SCHEMAS
# =============================================================================


class ListingsSchema(pa.DataFrameModel):
    """Schema for a real-estate listings export (Properati layout).

    Only the columns the analysis reads are declared; the export carries
    many more (coordinates, rooms, title, description...).
    """

    l3: Series[str] = pa.Field(nullable=True, description="Neighborhood")
    property_type: Series[str] = pa.Field(nullable=True, description="Property type")
    operation_type: Series[str] = pa.Field(nullable=True, description="Sale or rent")
    currency: Series[str] = pa.Field(nullable=True, description="Price currency code")
    surface_covered: Series[float] = pa.Field(nullable=True, description="Covered surface (m²)")
    price: Series[float] = pa.Field(nullable=True, description="Listed price")

    class Config:
        """Schema configuration."""

        name = "Listings"
        strict = False  # Allow the remaining export columns
        coerce = True


# =============================================================================
# PROCESSED DATA SCHEMAS
# =============================================================================


class ObservationSchema(pa.DataFrameModel):
    """Schema for the cleaned (surface, price) observation set."""

    surface_covered: Series[float] = pa.Field(gt=0, description="Covered surface (m²)")
    price: Series[float] = pa.Field(ge=0, description="Sale price")

    class Config:
        """Schema configuration."""

        name = "Observations"
        strict = False  # Derived price_per_sqm may travel along
        coerce = True


# =============================================================================
# VALIDATION UTILITIES
# =============================================================================


def validate_dataframe(
    df,
    schema: type[pa.DataFrameModel],
    raise_on_error: bool = True,
) -> tuple[bool, Optional[pa.errors.SchemaErrors]]:
    """Validate a DataFrame against a schema.

    Args:
        df: DataFrame to validate.
        schema: Pandera DataFrameModel class.
        raise_on_error: If True, raise on validation failure.

    Returns:
        Tuple of (is_valid, errors). errors is None if valid.

    Raises:
        SchemaErrors: If validation fails and raise_on_error=True.
    """
    try:
        schema.validate(df, lazy=True)
        return True, None
    except pa.errors.SchemaErrors as e:
        if raise_on_error:
            raise
        return False, e
