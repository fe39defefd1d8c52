"""Version reading and channel selection.

Versions are pulled out of package.json with a targeted text match rather
than a JSON parse, and classified with semver to pick a registry channel.
"""

from __future__ import annotations

import re

import semver

# Greedy on purpose: matches `sed -nE 's/.*"version": ?"(.*)".*/\1/p'`.
_VERSION_LINE = re.compile(r'.*"version": ?"(.*)".*')


def extract_version(manifest: str) -> str:
    """Extract the version from the text of a package.json.

    Every line shaped like ``"version": "<value>"`` contributes its value;
    a manifest with no such line yields an empty string.

    Examples:
        '{\\n  "name": "a",\\n  "version": "1.2.3"\\n}' → "1.2.3"
        '{"name": "a"}' → ""
    """
    matches = [m.group(1) for m in map(_VERSION_LINE.match, manifest.splitlines()) if m]
    return "\n".join(matches).strip()


def is_prerelease(version: str) -> bool:
    """Return True if the version carries a prerelease component.

    Never raises: a leading "v" and build metadata are ignored, and text
    semver cannot parse counts as a prerelease only if its core has a "-".
    The registry is left to reject versions that are actually invalid.

    Examples:
        "2.0.0-beta.1" → True
        "v2.0.0-beta.1" → True
        "2.0.0" → False
        "" → False
    """
    core = version.strip().lstrip("vV").split("+", 1)[0]
    try:
        parsed = semver.Version.parse(core, optional_minor_and_patch=True)
    except ValueError:
        return "-" in core
    return parsed.prerelease is not None


def select_channel(version: str, *, prerelease: str = "next", stable: str = "latest") -> str:
    """Pick the registry dist-tag for a version."""
    return prerelease if is_prerelease(version) else stable
