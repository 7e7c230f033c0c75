"""Collect the packages the release tool already bumped.

The release tool leaves a changelog file in every package it bumped,
including packages bumped only because an internal dependency changed.
Those files mark the starting ledger of a run; they are then removed since
release notes replace them.
"""

from __future__ import annotations

from collections.abc import Callable

from .console import step
from .manifests import ManifestIndex, write_manifest_version
from .models import Package

PRIVATE_VERSION = "0.0.0"


def collect_bumped_versions(
    index: ManifestIndex,
    changelog_file: str = "CHANGELOG.md",
    *,
    remove: bool = True,
    persist: Callable[[Package], None] | None = None,
) -> dict[str, str]:
    """Build the initial ledger from changelog files.

    Private packages get their version reset to 0.0.0, since the release
    tool bumps them even though they are never published.

    Args:
        index: Manifest index of the workspace.
        changelog_file: Name of the changelog file inside a package directory.
        remove: Delete each changelog file after collecting it.
        persist: Writes a reset private package; defaults to pyproject.toml.

    Returns:
        Map of package name → version for every bumped package.
    """
    step("Collecting bumped packages")

    persist = persist or (lambda p: write_manifest_version(index.root, p))

    ledger: dict[str, str] = {}
    for package in index.list_packages():
        if not package.name:
            continue

        changelog = index.root / package.path / changelog_file
        if not changelog.exists():
            continue

        if package.version:
            version = package.version
            if package.private:
                version = PRIVATE_VERSION
                persist(index.set_version(package.name, version))
                print(f"  {package.name}: {package.version} → {version} (private)")
            else:
                print(f"  {package.name}: {version}")
            ledger[package.name] = version

        if remove:
            changelog.unlink()

    if not ledger:
        print("  <none>")
    return ledger
