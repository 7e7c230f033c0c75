"""Workspace discovery and the manifest index.

The ManifestIndex is the read view over every workspace member for the
duration of a run. Version changes replace the stored Package with an
updated copy; writing them back to pyproject.toml is a separate, explicit
call (write_manifest_version).
"""

from __future__ import annotations

import glob
from pathlib import Path

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

from .console import fatal, step
from .models import Package
from .toml import (
    get_all_dependency_strings,
    get_project_name,
    get_project_version,
    get_workspace_member_globs,
    is_private,
    load_pyproject,
    set_project_version,
)


class ManifestIndex:
    """Ordered collection of workspace packages, looked up by name or location."""

    def __init__(self, root: Path, packages: list[Package]) -> None:
        self.root = root
        self._packages = list(packages)

    def list_packages(self) -> list[Package]:
        return list(self._packages)

    def find_by_name(self, name: str) -> Package | None:
        for package in self._packages:
            if package.name is not None and package.name == name:
                return package
        return None

    def find_by_path(self, path: str) -> Package | None:
        for package in self._packages:
            if package.path == path:
                return package
        return None

    def set_version(self, name: str, version: str) -> Package:
        """Replace the named package with a copy carrying ``version``.

        Raises:
            KeyError: If no package has that name.
        """
        for i, package in enumerate(self._packages):
            if package.name == name:
                updated = package.model_copy(update={"version": version})
                self._packages[i] = updated
                return updated
        raise KeyError(name)


def dep_canonical_name(dep_str: str) -> str | None:
    """Extract the canonical package name from a PEP 508 dependency string.

    Examples:
        "requests>=2.0" → "requests"
        "My_Package[extra]~=1.0" → "my-package"

    Returns None for strings that aren't valid requirements.
    """
    try:
        return canonicalize_name(Requirement(dep_str).name)
    except InvalidRequirement:
        return None


def discover_workspace(root: Path) -> ManifestIndex:
    """Scan the workspace and build the manifest index.

    Reads [tool.uv.workspace].members from root pyproject.toml to find
    package directories, then extracts name, version, private flag, and
    internal deps from each package's pyproject.toml.
    """
    step("Discovering workspace packages")

    root_doc = load_pyproject(root / "pyproject.toml")
    member_globs = get_workspace_member_globs(root_doc)

    # Expand globs to find all package directories
    member_dirs: list[Path] = []
    for pattern in member_globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "pyproject.toml").exists() and p not in member_dirs:
                member_dirs.append(p)

    if not member_dirs:
        fatal("No packages found matching workspace members")

    # First pass: collect basic info from each package
    docs = {d: load_pyproject(d / "pyproject.toml") for d in member_dirs}
    workspace_names = {
        name for name in (get_project_name(doc) for doc in docs.values()) if name
    }

    packages: list[Package] = []
    for d, doc in docs.items():
        # Second pass: keep only internal deps, first occurrence wins
        deps: list[str] = []
        for dep_str in get_all_dependency_strings(doc):
            dep_name = dep_canonical_name(dep_str)
            if dep_name in workspace_names and dep_name not in deps:
                deps.append(dep_name)

        packages.append(
            Package(
                name=get_project_name(doc),
                version=get_project_version(doc),
                private=is_private(doc),
                path=d.relative_to(root).as_posix(),
                dependencies=deps,
            )
        )

    # Print discovered packages for user feedback
    for package in packages:
        deps = (
            f" → [{', '.join(package.dependencies)}]" if package.dependencies else ""
        )
        flags = " private" if package.private else ""
        print(
            f"  {package.name or '<unnamed>'} {package.version or '<no version>'}"
            f"{flags} ({package.path}){deps}"
        )

    return ManifestIndex(root, packages)


def write_manifest_version(root: Path, package: Package) -> None:
    """Persist ``package.version`` to the package's pyproject.toml."""
    if package.version is None:
        raise ValueError(f"{package.name} has no version to write")
    set_project_version(root / package.path / "pyproject.toml", package.version)
