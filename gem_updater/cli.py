"""CLI entry point for gem-updater."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import load_config
from .outdated import detect
from .pipeline import run_updates


def configure_logging(verbose: bool) -> None:
    """Send log records (and configuration warnings) to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


@click.group()
@click.version_option()
def cli() -> None:
    """Open pull requests that update outdated gems across repositories."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML file with settings; environment variables take precedence.",
)
@click.option(
    "--limit", type=click.IntRange(min=0), help="Gems to update per repository."
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory repositories are cloned into.",
)
@click.option("--update-ruby", is_flag=True, help="Also propose a ruby version update.")
@click.option(
    "--strict",
    is_flag=True,
    help="Exit 1 if any gem update or repository failed.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every command and its output.")
def run(
    config_path: Path | None,
    limit: int | None,
    cache_dir: Path | None,
    update_ruby: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """Update the configured repositories.

    Failed updates are listed but only affect the exit status with --strict.
    """
    config = load_config(config_path)
    overrides: dict[str, object] = {}
    if limit is not None:
        overrides["update_limit"] = limit
    if cache_dir is not None:
        overrides["cache_dir"] = cache_dir
    if update_ruby:
        overrides["update_ruby"] = True
    if verbose:
        overrides["verbose"] = True
    config = config.model_copy(update=overrides)

    configure_logging(config.verbose)
    config.check()

    report = run_updates(config)
    for result in report.results:
        pr = "PR opened" if result.proposal_opened else "no PR"
        click.echo(f"  {result.status:8} {result.repository} {result.gem} ({pr})")
    for target in report.failed_targets:
        click.echo(f"  failed   {target}")
    if strict and not report.ok:
        raise SystemExit(1)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every command and its output.")
def outdated(path: Path, verbose: bool) -> None:
    """List outdated gems in PATH, most stale first."""
    configure_logging(verbose)
    for candidate in detect(path):
        click.echo(
            f"{candidate.name}\t{candidate.severity.value}\t{candidate.staleness_score}"
        )
