"""Data models for cascade-versions.

These Pydantic models represent the core data structures used throughout
the reconcile run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """A single package in the uv workspace.

    Packages are value objects: a version change replaces the stored
    instance rather than mutating it (see ManifestIndex.set_version).

    Attributes:
        name: Canonical package name, or None if the member declares none.
        version: Current version from pyproject.toml, or None if absent.
        private: True when the package carries the "Private :: Do Not Upload"
                 classifier.
        path: Relative path from workspace root to the package directory.
              This is the package's location in the dependency graph.
        dependencies: Canonical names of internal (workspace) dependencies.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None
    version: str | None = None
    private: bool = False
    path: str
    dependencies: list[str] = Field(default_factory=list)


class GraphNode(BaseModel):
    """A node of the forward dependency graph, keyed by package location.

    Attributes:
        dependencies: Locations of the packages this package depends on.
    """

    dependencies: list[str] = Field(default_factory=list)


class VersionPolicy(BaseModel):
    """Global bump semantics for a run, resolved from the main version.

    Attributes:
        main_version: Normalized main package version.
        is_prerelease: Whether the main version has a prerelease component.
        prerelease_id: Prerelease identifier (e.g. "alpha"); set iff
                       is_prerelease.
    """

    model_config = ConfigDict(frozen=True)

    main_version: str
    is_prerelease: bool = False
    prerelease_id: str | None = None


class PackageVersion(BaseModel):
    """A package name and its final version, as reported to callers."""

    name: str
    version: str


class ReconcileResult(BaseModel):
    """Output of a reconcile run."""

    main_version: str
    is_prerelease: bool
    prerelease_id: str | None = None
    package_versions: list[PackageVersion] = Field(default_factory=list)
