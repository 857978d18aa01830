#!/usr/bin/env python3
"""Main CLI entry point for the surface vs price analysis.

Usage:
    python scripts/run_pipeline.py fit --config configs/default.yaml
    python scripts/run_pipeline.py fit --listings data/raw/listings.csv --method ols
    python scripts/run_pipeline.py info --listings data/raw/listings.csv
    python scripts/run_pipeline.py validate data/raw/listings.csv
"""

from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

app = typer.Typer(
    name="surfacefit",
    help="Fit price vs covered surface by random search, gradient descent and OLS",
    add_completion=False,
)


@app.command()
def fit(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to configuration file",
    ),
    listings: Optional[Path] = typer.Option(
        None,
        "--listings", "-l",
        help="Listings CSV (overrides config)",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir", "-o",
        help="Output directory for tables and figures (overrides config)",
    ),
    methods: Optional[List[str]] = typer.Option(
        None,
        "--method", "-m",
        help="Fitting method, repeatable: luus_jaakola, gradient_descent, ols",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random-search seed (overrides config)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log per-iteration details",
    ),
) -> None:
    """Fit the line with every method and compare the results.

    Runs the full pipeline:
    1. Load and filter listings to one neighborhood
    2. Standardize surface and price
    3. Fit each method and rescale to original units
    4. Write comparison table, traces and figures
    """
    from surfacefit.config import load_config
    from surfacefit.pipeline import SurfacePricePipeline
    from surfacefit.utils.logging import setup_logging

    config = load_config(config_path)
    if seed is not None:
        config.random_search.seed = seed
    output_dir = output_dir or config.paths.outputs_dir

    setup_logging(level="DEBUG" if verbose else "INFO", log_file=output_dir / "fit.log")
    logger.info("Starting fitting pipeline")

    pipeline = SurfacePricePipeline(config)
    try:
        output = pipeline.run(listings_path=listings, output_dir=output_dir, methods=methods)
    except (FileNotFoundError, KeyError, ValueError) as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo("\n" + "=" * 60)
    typer.echo(f"{config.project_name}: {len(output.observations)} observations")
    typer.echo("=" * 60)
    for result in output.results.values():
        typer.echo("\n" + result.summary())

    typer.echo("\n" + output.comparison.to_string(index=False, float_format=lambda v: f"{v:,.4f}"))
    typer.echo(f"\nSaved outputs to {output_dir}")


@app.command()
def info(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to configuration file",
    ),
    listings: Optional[Path] = typer.Option(
        None,
        "--listings", "-l",
        help="Listings CSV (overrides config)",
    ),
) -> None:
    """Show how many listings survive each filtering step."""
    from surfacefit.config import load_config
    from surfacefit.data.loaders import filter_listings, load_listings, prepare_observations
    from surfacefit.utils.logging import setup_logging

    setup_logging(level="WARNING")
    config = load_config(config_path)
    path = listings or config.paths.listings_file

    try:
        df = load_listings(path)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo(f"\nListings file: {path}")
    typer.echo("=" * 40)
    typer.echo(f"Rows: {len(df):,}")
    typer.echo(f"Columns: {len(df.columns)}")

    try:
        filtered = filter_listings(df, config.data)
    except KeyError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)

    typer.echo(
        f"After filters ({config.data.neighborhood}, {config.data.property_type}, "
        f"{config.data.operation_type}, {config.data.currency}): {len(filtered):,}"
    )

    try:
        observations = prepare_observations(filtered, config.data)
    except KeyError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        typer.echo(f"Usable observations: none ({e})")
        return

    typer.echo(f"Usable observations: {len(observations):,}")
    typer.echo("\n" + observations.describe().to_string())


@app.command()
def validate(
    listings: Path = typer.Argument(
        ...,
        help="Listings CSV to validate",
    ),
) -> None:
    """Validate a listings file against the listings schema."""
    from surfacefit.data.loaders import load_listings
    from surfacefit.data.schemas import ListingsSchema, validate_dataframe
    from surfacefit.utils.logging import setup_logging

    setup_logging(level="INFO")
    typer.echo(f"Validating {listings}...")

    try:
        df = load_listings(listings)
    except FileNotFoundError as e:
        typer.echo(f"  ✗ {e}")
        raise typer.Exit(1)

    is_valid, errors = validate_dataframe(df, ListingsSchema, raise_on_error=False)
    if is_valid:
        typer.echo(f"  ✓ {len(df):,} rows, {len(df.columns)} columns")
    else:
        typer.echo(f"  ✗ {len(errors.failure_cases)} schema failures")
        typer.echo(errors.failure_cases.head(20).to_string())
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
