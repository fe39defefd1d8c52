"""Data models for monorelease.

These Pydantic models represent the core data structures used throughout
the release pipeline.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """Metadata for a single package selected for release.

    Everything except ``version`` is resolved once, when the batch is
    collected, and cannot be reassigned. ``version`` is written once, by
    record_version().

    Attributes:
        name: Package name as understood by the workspace tool.
        absolute_path: Absolute path of the package checkout.
        relative_path: Path of the package relative to the workspace root.
        prior_version: Version read before the version bump. Empty when the
                       manifest could not be matched.
        version: Version re-read after the version bump, or None before it.
        git_status: Raw ``git status --porcelain`` output at collection time.
        git_branch: Checked-out branch at collection time ("HEAD" when
                    detached).
    """

    name: str = Field(frozen=True)
    absolute_path: str = Field(frozen=True)
    relative_path: str = Field(frozen=True)
    prior_version: str = Field(frozen=True)
    version: str | None = None
    git_status: str = Field(default="", frozen=True)
    git_branch: str = Field(default="", frozen=True)

    def record_version(self, version: str) -> None:
        """Store the version read after the bump. It can be recorded only once.

        Raises:
            ValueError: If a version was already recorded.
        """
        if self.version is not None:
            raise ValueError(f"{self.name} already has version {self.version!r}")
        self.version = version

    @property
    def changed(self) -> bool:
        """True once the bumped version differs from the prior version."""
        return self.version is not None and self.version != self.prior_version

    @property
    def tag(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def commit_message(self) -> str:
        return f"chore(publish): publish {self.tag}"


class WorkspaceEntry(BaseModel):
    """One record of ``lerna list --json``.

    Only ``name`` is relied upon; the other fields are informational.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str | None = None
    location: str | None = None
    private: bool = False
