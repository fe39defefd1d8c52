"""Errors raised by the release pipeline.

Every error is fatal to the run. Errors carry a human-readable message and
an optional hint with a suggested fix; the CLI prints both and exits with
``exit_code``.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for all orchestrator errors."""

    exit_code = 1

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class AuthenticationMissing(ReleaseError):
    """The registry ``whoami`` check failed."""

    def __init__(self) -> None:
        super().__init__(
            "`npm whoami` failed. Log in with `npm login`, and run `release` "
            "directly rather than through a wrapper such as `yarn`, which "
            "breaks `npm whoami`."
        )


class DirtyRepository(ReleaseError):
    """A package checkout has uncommitted changes."""

    def __init__(self, name: str, path: str) -> None:
        super().__init__(
            f"{name} ({path}) has uncommitted changes.",
            hint="Commit or stash them before releasing.",
        )
        self.name = name
        self.path = path


class DetachedHead(ReleaseError):
    """A package checkout is not on a branch."""

    def __init__(self, name: str, path: str) -> None:
        super().__init__(
            f"{name} ({path}) is in detached HEAD state.",
            hint="Check out the branch you want to release from.",
        )
        self.name = name
        self.path = path


class UserAborted(ReleaseError):
    """The operator declined the release confirmation."""

    def __init__(self) -> None:
        super().__init__("Release aborted by user.")


class SubprocessFailed(ReleaseError):
    """An external command exited non-zero.

    The process exits with the command's own status.
    """

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        super().__init__(f"Command failed ({returncode}): {' '.join(command)}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        # a child killed by signal N reports -N; shells report that as 128 + N
        self.exit_code = returncode if returncode > 0 else 128 - returncode


class PackageOutsideWorkspace(ReleaseError):
    """A package resolved to a directory outside the workspace root."""

    def __init__(self, name: str, path: str, root: str) -> None:
        super().__init__(f"{name} resolved to {path}, which is outside {root}.")


class ConfigError(ReleaseError):
    """The release configuration file is invalid."""


class NoPackagesSelected(ReleaseError):
    """The command line did not select a usable set of packages."""
