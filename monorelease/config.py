"""Release configuration.

Settings are optional and read with tomlkit from the workspace root, either
from a dedicated ``monorelease.toml`` or from the ``[tool.monorelease]``
table of a ``pyproject.toml``. Missing keys fall back to defaults that
match a stock lerna + npm workspace.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tomlkit.exceptions import ParseError

from .errors import ConfigError

CONFIG_FILENAME = "monorelease.toml"


class ReleaseConfig(BaseModel):
    """Tunable parts of the release pipeline.

    Attributes:
        workspace_tool: Executable of the workspace tool.
        registry_tool: Executable of the registry client.
        scripts: Workspace scripts run, in order, before the version bump.
        bump_args: Arguments of the interactive version-bump command. It
                   must leave registry publishing and git to us.
        commit_subject: Subject of the workspace-level release commit.
        pull_before_build: Run ``git pull`` in every package before building.
        prerelease_channel: Dist-tag for prerelease versions.
        stable_channel: Dist-tag for everything else.
    """

    model_config = ConfigDict(extra="forbid")

    workspace_tool: str = "lerna"
    registry_tool: str = "npm"
    scripts: list[str] = Field(default_factory=lambda: ["clean", "build", "test"])
    bump_args: list[str] = Field(
        default_factory=lambda: ["publish", "--skip-npm", "--skip-git", "--exact"]
    )
    commit_subject: str = "Publish"
    pull_before_build: bool = False
    prerelease_channel: str = "next"
    stable_channel: str = "latest"


def load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a TOML file."""
    try:
        return tomlkit.parse(path.read_text())
    except ParseError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc


def get_release_table(doc: tomlkit.TOMLDocument, path: Path) -> dict[str, Any]:
    """Return the settings table of a config document.

    A ``pyproject.toml`` keeps them under [tool.monorelease]; a dedicated
    config file keeps them at the top level.
    """
    if path.name == "pyproject.toml":
        table = doc.get("tool", {}).get("monorelease", {})
    else:
        table = doc
    if not table:
        return {}
    # unwrap() turns tomlkit containers into plain Python values
    return table.unwrap()


def find_config(root: Path) -> Path | None:
    """Locate the config file for a workspace root, if any.

    ``monorelease.toml`` wins over ``pyproject.toml``, and a pyproject
    only counts when it actually has a [tool.monorelease] table.
    """
    candidate = root / CONFIG_FILENAME
    if candidate.exists():
        return candidate
    pyproject = root / "pyproject.toml"
    if pyproject.exists() and "monorelease" in load_toml(pyproject).get("tool", {}):
        return pyproject
    return None


def load_config(root: Path, path: Path | None = None) -> ReleaseConfig:
    """Load the release configuration for a workspace.

    Args:
        root: Workspace root directory.
        path: Explicit config file; overrides discovery under root.

    Raises:
        ConfigError: If the file is missing, unparseable, or invalid.
    """
    if path is None:
        path = find_config(root)
        if path is None:
            return ReleaseConfig()
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    table = get_release_table(load_toml(path), path)
    try:
        return ReleaseConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc
