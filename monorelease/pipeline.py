"""Release pipeline: collect → check → confirm → build → bump → tag → publish.

This module orchestrates a multi-package release:
1. Make sure we are logged in to the registry
2. Collect path, version and git state for every selected package
3. Refuse to go on if any package checkout is dirty or detached
4. Ask the operator for confirmation
5. Clean, build and test every selected package
6. Let the workspace tool prompt for new versions, then re-read them
7. Commit and tag each package whose version changed
8. Publish those packages and push their commits and tags
9. Record the release in a single commit at the workspace root

Each phase finishes for the whole batch before the next one starts. Any
failure stops the run on the spot; nothing already done is undone.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import click

from .config import ReleaseConfig, load_config
from .errors import (
    AuthenticationMissing,
    DetachedHead,
    DirtyRepository,
    NoPackagesSelected,
    PackageOutsideWorkspace,
    SubprocessFailed,
    UserAborted,
)
from .models import Package
from .shell import capture, git, run, step
from .versions import extract_version, select_channel
from .workspace import (
    capture_exec,
    exec_command,
    list_package_names,
    prepare_versions,
    run_script,
)

ALL_PACKAGES = "all"
DETACHED_HEAD = "HEAD"


def check_registry_auth(config: ReleaseConfig) -> None:
    """Ask the registry ``whoami`` before touching anything else.

    Raises:
        AuthenticationMissing: If the registry does not know us.
    """
    try:
        capture(config.registry_tool, "whoami", echo=False)
    except SubprocessFailed as exc:
        raise AuthenticationMissing() from exc


def resolve_package_names(names: Sequence[str], config: ReleaseConfig) -> list[str]:
    """Turn command-line arguments into the ordered list of package names.

    The single keyword "all" selects every package in the workspace.

    Raises:
        NoPackagesSelected: If nothing is selected, "all" is mixed with
            names, or a name is repeated.
    """
    if ALL_PACKAGES in names:
        if len(names) != 1:
            raise NoPackagesSelected(
                f'"{ALL_PACKAGES}" cannot be combined with package names.'
            )
        selected = list_package_names(tool=config.workspace_tool)
    else:
        selected = list(names)

    if not selected:
        raise NoPackagesSelected("No packages selected for release.")

    duplicates = sorted({n for n in selected if selected.count(n) > 1})
    if duplicates:
        raise NoPackagesSelected(f"Packages listed more than once: {', '.join(duplicates)}")

    return selected


def read_version(name: str, config: ReleaseConfig) -> str:
    """Read a package's current version from its package.json."""
    manifest = capture_exec([name], "cat package.json", tool=config.workspace_tool)
    return extract_version(manifest)


def collect_packages(
    names: Sequence[str], root: Path, config: ReleaseConfig
) -> list[Package]:
    """Resolve location, version and git state of every selected package.

    Args:
        names: Package names in release order.
        root: Workspace root; every package must live under it.
        config: Release configuration.

    Returns:
        One Package per name, in the same order.

    Raises:
        PackageOutsideWorkspace: If a package resolves outside root.
        SubprocessFailed: If the workspace tool cannot resolve a name.
    """
    step(f"Collecting {len(names)} packages")

    tool = config.workspace_tool
    root = root.resolve()
    packages: list[Package] = []

    for name in names:
        absolute_path = capture_exec([name], "pwd", tool=tool)
        try:
            relative_path = Path(absolute_path).resolve().relative_to(root)
        except ValueError as exc:
            raise PackageOutsideWorkspace(name, absolute_path, str(root)) from exc

        packages.append(
            Package(
                name=name,
                absolute_path=absolute_path,
                relative_path=str(relative_path),
                prior_version=read_version(name, config),
                git_status=capture_exec([name], "git status --porcelain", tool=tool),
                git_branch=capture_exec(
                    [name], "git rev-parse --abbrev-ref HEAD", tool=tool
                ),
            )
        )

    for pkg in packages:
        version = pkg.prior_version or "<no version>"
        click.echo(f"  {pkg.name} {version} ({pkg.relative_path})")

    return packages


def validate_packages(packages: Sequence[Package]) -> None:
    """Check that every package checkout is safe to release from.

    Each package is reported before it is checked, so the operator can see
    how far the scan got. The first violation stops the run.

    Raises:
        DetachedHead: If a checkout is not on a branch.
        DirtyRepository: If a checkout has uncommitted changes.
    """
    step("Running preflight checks")

    for pkg in packages:
        click.echo(f"  {pkg.name}: {pkg.absolute_path} [{pkg.git_branch}]")
        if pkg.git_branch == DETACHED_HEAD:
            raise DetachedHead(pkg.name, pkg.absolute_path)
        if pkg.git_status:
            raise DirtyRepository(pkg.name, pkg.absolute_path)


def confirm_release(packages: Sequence[Package]) -> None:
    """Ask the operator to go ahead.

    Raises:
        UserAborted: Unless the answer is yes.
    """
    names = ", ".join(pkg.name for pkg in packages)
    if not click.confirm(f"\nRelease {len(packages)} package(s): {names}?", default=False):
        raise UserAborted()


def build_packages(names: Sequence[str], config: ReleaseConfig) -> None:
    """Run the configured scripts (clean, build, test) across all packages.

    Each script runs in parallel across the batch; the scripts themselves
    run strictly one after another.
    """
    step(f"Building {len(names)} packages")

    tool = config.workspace_tool
    if config.pull_before_build:
        exec_command(names, "git pull", tool=tool)
    for script in config.scripts:
        run_script(names, script, parallel=True, tool=tool)


def bump_versions(packages: Sequence[Package], config: ReleaseConfig) -> list[Package]:
    """Prompt for new versions, then re-read them.

    The workspace tool runs once for the whole batch and may leave any
    package at its old version.

    Returns:
        The packages whose version changed, in batch order.
    """
    step("Bumping versions")

    names = [pkg.name for pkg in packages]
    prepare_versions(names, config.bump_args, tool=config.workspace_tool)

    step("Reading new versions")
    for pkg in packages:
        pkg.record_version(read_version(pkg.name, config))
        if pkg.changed:
            click.echo(f"  {pkg.name}: {pkg.prior_version} → {pkg.version}")
        else:
            click.echo(f"  {pkg.name}: unchanged")

    return [pkg for pkg in packages if pkg.changed]


def tag_changed_packages(changed: Sequence[Package]) -> None:
    """Commit each package's changes and tag it as <name>@<version>."""
    step("Committing and tagging packages")

    for pkg in changed:
        git("commit", "-am", pkg.commit_message, cwd=pkg.absolute_path)
        git("tag", pkg.tag, "-m", pkg.commit_message, cwd=pkg.absolute_path)
        click.echo(f"  {pkg.tag}")


def publish_packages(changed: Sequence[Package], config: ReleaseConfig) -> None:
    """Publish each changed package, then push its commits and tags.

    The channel comes from the version text alone; the registry is the one
    to reject a version it cannot accept.
    """
    step(f"Publishing {len(changed)} packages")

    for pkg in changed:
        channel = select_channel(
            pkg.version or "",
            prerelease=config.prerelease_channel,
            stable=config.stable_channel,
        )
        click.echo(f"\n  {pkg.tag} → {channel}")
        run(
            config.registry_tool,
            "publish",
            "--tag",
            channel,
            cwd=pkg.absolute_path,
        )

    step("Pushing package commits and tags")
    exec_command(
        [pkg.name for pkg in changed],
        "git push && git push --tags",
        tool=config.workspace_tool,
    )


def commit_workspace(changed: Sequence[Package], config: ReleaseConfig) -> None:
    """Record the release in one commit at the workspace root and push it.

    The commit body lists every released package, one per line.
    """
    step("Committing release at workspace root")

    paths = [pkg.relative_path for pkg in changed]
    body = "\n".join(f"* {pkg.name} v{pkg.version}" for pkg in changed)

    git("add", *paths)
    git("commit", "-m", config.commit_subject, "-m", body)
    run("git", "push")
    click.echo(body)


def run_release(
    names: Sequence[str], *, config: ReleaseConfig | None = None
) -> list[Package]:
    """Execute the full release pipeline from the current directory.

    Args:
        names: Package names to release, or ["all"].
        config: Release configuration; loaded from the workspace if omitted.

    Returns:
        The packages that were released.
    """
    root = Path.cwd()
    if config is None:
        config = load_config(root)

    check_registry_auth(config)

    # Phase 1: Inspect
    selected = resolve_package_names(names, config)
    packages = collect_packages(selected, root, config)
    validate_packages(packages)
    confirm_release(packages)

    # Phase 2: Build and version
    build_packages(selected, config)
    changed = bump_versions(packages, config)
    if not changed:
        step("No package version changed; nothing to release.")
        return []

    # Phase 3: Release
    tag_changed_packages(changed)
    publish_packages(changed, config)
    commit_workspace(changed, config)

    click.echo(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
    return changed
