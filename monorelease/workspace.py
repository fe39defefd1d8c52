"""Scoped calls into the workspace tool (lerna).

Every helper restricts the workspace tool to an explicit list of packages
by passing one ``--scope`` qualifier per name, in the order given. Names
are never merged, deduplicated or reordered here.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import TypeAdapter

from .models import WorkspaceEntry
from .shell import capture, run

DEFAULT_TOOL = "lerna"

_entries = TypeAdapter(list[WorkspaceEntry])


def scope_args(names: Sequence[str]) -> list[str]:
    """Build the scope qualifiers for a list of package names.

    Example:
        scope_args(["a", "b"]) → ["--scope", "a", "--scope", "b"]
    """
    args: list[str] = []
    for name in names:
        args.extend(["--scope", name])
    return args


def run_script(
    names: Sequence[str],
    script: str,
    *,
    parallel: bool = False,
    tool: str = DEFAULT_TOOL,
) -> None:
    """Run a package.json script across the named packages.

    With parallel=True the workspace tool runs every package at once; this
    call still blocks until all of them finish.
    """
    flags = ["--parallel"] if parallel else []
    run(tool, "run", script, *flags, *scope_args(names))


def exec_command(names: Sequence[str], command: str, *, tool: str = DEFAULT_TOOL) -> None:
    """Run a shell command inside each named package, attached to the terminal.

    ``command`` is a single shell string; the workspace tool hands it to a
    shell, so callers must quote its parts (see shlex.join).
    """
    run(tool, "exec", *scope_args(names), "--", command)


def capture_exec(names: Sequence[str], command: str, *, tool: str = DEFAULT_TOOL) -> str:
    """Run a shell command inside the named packages and return its output."""
    return capture(tool, "exec", *scope_args(names), "--", command)


def prepare_versions(
    names: Sequence[str], bump_args: Sequence[str], *, tool: str = DEFAULT_TOOL
) -> None:
    """Run the interactive version bump for the named packages.

    The workspace tool prompts per package and rewrites manifests; the
    arguments must tell it to skip publishing and git, which the pipeline
    does itself.
    """
    run(tool, *bump_args, *scope_args(names))


def list_package_names(*, tool: str = DEFAULT_TOOL) -> list[str]:
    """Return the names of every package the workspace tool knows about."""
    output = capture(tool, "list", "--json")
    return [entry.name for entry in _entries.validate_json(output or "[]")]
