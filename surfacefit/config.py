"""Configuration management using Pydantic models.

This module defines all configuration for the surface-price regression
analysis. Configuration is loaded from YAML files and validated at startup.

Usage:
    from surfacefit.config import load_config
    config = load_config("configs/default.yaml")
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class PathConfig(BaseModel):
    """Paths configuration for data and outputs."""

    listings_file: Path = Field(
        default=Path("data/raw/listings.csv"), description="Listings CSV file"
    )
    outputs_dir: Path = Field(default=Path("outputs"), description="Outputs directory")

    @field_validator("listings_file", "outputs_dir")
    @classmethod
    def ensure_path(cls, v: Path | str) -> Path:
        """Convert string to Path if needed."""
        return Path(v) if isinstance(v, str) else v


class DataConfig(BaseModel):
    """Column names and row filters for the listings table."""

    # Source columns
    neighborhood_col: str = Field(default="l3", description="Neighborhood column")
    property_type_col: str = Field(default="property_type", description="Property type column")
    operation_type_col: str = Field(default="operation_type", description="Operation column")
    currency_col: str = Field(default="currency", description="Currency column")
    surface_col: str = Field(default="surface_covered", description="Covered surface (m²)")
    price_col: str = Field(default="price", description="Sale price")

    # Filters
    neighborhood: str = Field(default="Palermo", description="Neighborhood to keep")
    property_type: str = Field(default="Departamento", description="Property type to keep")
    operation_type: str = Field(default="Venta", description="Operation to keep")
    currency: str = Field(default="USD", description="Price currency to keep")

    min_observations: int = Field(
        default=2, ge=2, description="Minimum rows required to fit a line"
    )


class RandomSearchConfig(BaseModel):
    """Configuration for the Luus-Jaakola random-search fitter."""

    iterations: int = Field(default=15, ge=1, description="Number of iterations")
    initial_intercept: float = Field(default=0.0, description="Starting intercept")
    initial_slope: float = Field(default=0.0, description="Starting slope")
    radius_intercept: float = Field(default=1.0, gt=0, description="Initial intercept radius")
    radius_slope: float = Field(default=1.0, gt=0, description="Initial slope radius")
    shrink: float = Field(default=0.95, gt=0, lt=1.0, description="Radius factor on improvement")
    grow: float = Field(default=1.05, ge=1.0, description="Radius factor on non-improvement")
    max_radius: float | None = Field(
        default=None, gt=0, description="Optional cap on window radii (None = unbounded)"
    )
    seed: int = Field(default=42, description="Random seed for reproducibility")

    @model_validator(mode="after")
    def check_radius_cap(self) -> "RandomSearchConfig":
        """Initial radii must fit under the cap when one is set."""
        if self.max_radius is not None and max(
            self.radius_intercept, self.radius_slope
        ) > self.max_radius:
            raise ValueError("initial radii must not exceed max_radius")
        return self


class GradientDescentConfig(BaseModel):
    """Configuration for the batch gradient-descent fitter."""

    learning_rate: float = Field(default=0.01, gt=0, description="Fixed step size")
    iterations: int = Field(default=1000, ge=1, description="Number of iterations")
    initial_intercept: float = Field(default=0.0, description="Starting intercept")
    initial_slope: float = Field(default=0.0, description="Starting slope")


class VisualizationConfig(BaseModel):
    """Configuration for figures."""

    figsize_chart: tuple[int, int] = Field(default=(10, 6), description="Figure size for charts")
    figsize_grid: tuple[int, int] = Field(default=(14, 5), description="Figure size for panels")
    dpi: int = Field(default=150, ge=72, le=300, description="Resolution for saved figures")
    method_colors: dict[str, str] = Field(
        default_factory=lambda: {
            "luus_jaakola": "tab:orange",
            "gradient_descent": "tab:green",
            "ols": "tab:blue",
        },
        description="Line color per fitting method",
    )


class Config(BaseModel):
    """Root configuration model combining all config sections."""

    paths: PathConfig = Field(default_factory=PathConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    random_search: RandomSearchConfig = Field(default_factory=RandomSearchConfig)
    gradient_descent: GradientDescentConfig = Field(default_factory=GradientDescentConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)

    # Metadata
    project_name: str = Field(
        default="Surface vs Price Linear Fit",
        description="Project name for reports",
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file. If None, uses defaults.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config values are invalid.
    """
    if config_path is None:
        return Config()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f)

    return Config.model_validate(raw_config or {})


def save_config(config: Config, config_path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Config object to save.
        config_path: Destination path.
    """
    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # JSON mode turns Paths and tuples into YAML-safe values
    config_dict = config.model_dump(mode="json")

    with open(path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
