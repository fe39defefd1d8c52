"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from monorelease.config import ReleaseConfig
from monorelease.models import Package


@pytest.fixture
def config() -> ReleaseConfig:
    """Default release configuration."""
    return ReleaseConfig()


@pytest.fixture
def make_package() -> Callable[..., Package]:
    """Build a clean, on-branch Package under /work/packages/<name>."""

    def factory(name: str, prior_version: str = "1.0.0", **kwargs: str) -> Package:
        fields = {
            "absolute_path": f"/work/packages/{name}",
            "relative_path": f"packages/{name}",
            "git_status": "",
            "git_branch": "main",
            **kwargs,
        }
        return Package(name=name, prior_version=prior_version, **fields)

    return factory


@pytest.fixture
def manifest() -> Callable[[str, str], str]:
    """Render a package.json the way npm writes it."""

    def render(name: str, version: str) -> str:
        return f"""\
{{
  "name": "{name}",
  "version": "{version}",
  "main": "lib/index.js",
  "scripts": {{
    "build": "tsc"
  }}
}}"""

    return render


@pytest.fixture
def tmp_manifest(tmp_path: Path) -> Path:
    """Create a package.json in a temporary directory."""
    path = tmp_path / "package.json"
    path.write_text('{\n  "name": "pkg-a",\n  "version": "0.3.1"\n}\n')
    return path
