"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running external
commands, plus output formatting helpers. Every command is echoed before it
runs so the operator can follow along, and every failure raises
SubprocessFailed: release steps are never retried.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import click

from .errors import SubprocessFailed


def echo_command(args: tuple[str, ...] | list[str]) -> None:
    """Print a command line, styled so it stands out from tool output."""
    click.echo(click.style(" ".join(args), fg="white", bg="black"))


def run(*args: str, cwd: str | Path | None = None) -> None:
    """Run a command attached to the terminal.

    Output streams directly to the terminal (and stdin stays connected)
    so the operator sees build progress and can answer prompts.

    Args:
        *args: Command and arguments (e.g., "npm", "publish").
        cwd: Working directory for the child process.

    Raises:
        SubprocessFailed: If the command exits non-zero.
    """
    echo_command(args)
    result = subprocess.run(args, cwd=cwd)
    if result.returncode != 0:
        raise SubprocessFailed(list(args), result.returncode)


def capture(
    *args: str, cwd: str | Path | None = None, check: bool = True, echo: bool = True
) -> str:
    """Run a command and return its stdout as text.

    Args:
        *args: Command and arguments.
        cwd: Working directory for the child process.
        check: If True (default), raise on non-zero exit. Set to False
               for checks whose failure is acceptable.
        echo: If False, run silently without printing the command line.

    Returns:
        Stripped stdout of the command.

    Raises:
        SubprocessFailed: If check is True and the command exits non-zero.
    """
    if echo:
        echo_command(args)
    result = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    if check and result.returncode != 0:
        raise SubprocessFailed(list(args), result.returncode, result.stderr)
    return result.stdout.strip()


def git(*args: str, cwd: str | Path | None = None, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--porcelain").
        cwd: Repository to run in; defaults to the current directory.
        check: If True (default), raise on non-zero exit.
    """
    return capture("git", *args, cwd=cwd, check=check)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate major phases of the release pipeline in terminal output.
    """
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str, code: int = 1) -> None:
    """Print an error message and exit with the given code."""
    click.echo(f"ERROR: {msg}", err=True)
    sys.exit(code)
