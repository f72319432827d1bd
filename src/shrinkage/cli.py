"""
Command-line entry point.

    shrinkage compare DATA_PATH [--config FILE] [--seed N] ...
    shrinkage version

Configuration and domain errors end with exit code 1 and a one-line message.
"""

from typing import Optional

import pandas as pd
import typer
from pydantic import ValidationError

from . import __version__
from .config import RunConfig
from .logs import configure_logging
from .report import run

app = typer.Typer(help="Compare linear, ridge, LASSO and elastic-net regression")


def _parse_alpha(value: Optional[str]):
    if value is None or value == "search":
        return value
    try:
        return float(value)
    except ValueError:
        raise typer.BadParameter(f"expected a number in [0, 1] or 'search', got {value!r}")


@app.command()
def version():
    typer.echo(__version__)


@app.command()
def compare(
    data_path: str = typer.Argument(..., help="CSV file with the response column"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML run config"),
    response: Optional[str] = typer.Option(None, help="Response column name"),
    seed: Optional[int] = typer.Option(None, help="Seed for partitioning and folds"),
    proportion: Optional[float] = typer.Option(None, help="Training fraction"),
    folds: Optional[int] = typer.Option(None, help="Cross-validation folds"),
    alpha: Optional[str] = typer.Option(None, help="Elastic-net alpha or 'search'"),
    log_level: Optional[str] = typer.Option(None, help="Log level"),
    coefficients: bool = typer.Option(False, help="Also print fitted coefficients"),
):
    """
    Fit all four models on DATA_PATH and print the test-set comparison.
    """
    try:
        base = RunConfig.load(config) if config else RunConfig()
        log = None
        if log_level is not None:
            log = {**base.log.model_dump(), "level": log_level}
        cfg = base.with_overrides(
            data_path=data_path,
            response_column=response,
            seed=seed,
            proportion=proportion,
            folds=folds,
            alpha=_parse_alpha(alpha),
            log=log,
        )
    except (ValidationError, FileNotFoundError) as exc:
        typer.echo(f"invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1)

    configure_logging(cfg.log.level, cfg.log.dir, cfg.log.rotation, cfg.log.retention)

    try:
        report = run(cfg)
    # ShrinkageError is a ValueError; so are fold counts larger than the data
    except (ValueError, KeyError, FileNotFoundError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)

    with pd.option_context("display.float_format", "{:.6g}".format):
        typer.echo(report.to_frame().to_string(index=False))
        if coefficients:
            typer.echo()
            typer.echo(report.coefficient_frame().to_string())


def main():
    app()


if __name__ == "__main__":
    main()
