"""CLI entry point for monorelease."""

from __future__ import annotations

import os
from pathlib import Path

import click

from monorelease.config import load_config
from monorelease.errors import ReleaseError, SubprocessFailed
from monorelease.pipeline import run_release
from monorelease.shell import fatal


def report(err: ReleaseError) -> None:
    """Print an error with its hint and captured output, then exit."""
    if isinstance(err, SubprocessFailed) and err.stderr:
        click.echo(err.stderr.rstrip(), err=True)
    message = f"{err.message}\n  hint: {err.hint}" if err.hint else err.message
    fatal(message, err.exit_code)


@click.command()
@click.version_option(package_name="monorelease")
@click.argument("packages", nargs=-1, required=True)
@click.option(
    "-C",
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root to release from (default: current directory).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: monorelease.toml or [tool.monorelease] in pyproject.toml).",
)
def cli(packages: tuple[str, ...], root: Path | None, config_path: Path | None) -> None:
    """Build, version, tag and publish PACKAGES (or "all") from a lerna workspace.

    Only packages whose version changes during the interactive bump are
    committed, tagged and published.
    """
    if root is not None:
        os.chdir(root)

    try:
        config = load_config(Path.cwd(), config_path)
        run_release(packages, config=config)
    except ReleaseError as err:
        report(err)
