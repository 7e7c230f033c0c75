"""Configuration from the [tool.cascade-versions] table of the root pyproject.toml.

Example:

    [tool.cascade-versions]
    main-package = "app"
    linked-packages = [["app-api", "app-sdk"]]
    untyped-packages = ["docs"]
    package-order = ["app-api", "app-sdk", "app-cli"]
"""

from __future__ import annotations

from pathlib import Path

from packaging.utils import canonicalize_name
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .console import fatal
from .toml import get_tool_table, load_pyproject

TOOL_NAME = "cascade-versions"


class ReleaseConfig(BaseModel):
    """Settings for a reconcile run.

    Attributes:
        main_package: Package whose version is the release version.
        linked_packages: (trigger, target) pairs; when trigger is bumped and
                         target isn't, target is bumped too.
        untyped_packages: Packages left out of the reported version list.
        package_order: Display order of the reported version list.
        version_env_var: Environment variable that forces the main version.
        pre_state_file: Release tool's prerelease state file, relative to
                        the workspace root.
        changelog_file: File the release tool leaves in bumped packages.
        remove_changelogs: Delete changelog files once collected.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    main_package: str = Field(alias="main-package")
    linked_packages: list[tuple[str, str]] = Field(
        default_factory=list, alias="linked-packages"
    )
    untyped_packages: list[str] = Field(default_factory=list, alias="untyped-packages")
    package_order: list[str] = Field(default_factory=list, alias="package-order")
    version_env_var: str = Field("RELEASE_VERSION", alias="version-env-var")
    pre_state_file: str = Field(".changeset/pre.json", alias="pre-state-file")
    changelog_file: str = Field("CHANGELOG.md", alias="changelog-file")
    remove_changelogs: bool = Field(True, alias="remove-changelogs")

    @field_validator("main_package")
    @classmethod
    def _canonical_name(cls, value: str) -> str:
        return canonicalize_name(value)

    @field_validator("untyped_packages", "package_order")
    @classmethod
    def _canonical_names(cls, value: list[str]) -> list[str]:
        return [canonicalize_name(v) for v in value]

    @field_validator("linked_packages")
    @classmethod
    def _canonical_pairs(cls, value: list[tuple[str, str]]) -> list[tuple[str, str]]:
        return [(canonicalize_name(a), canonicalize_name(b)) for a, b in value]


def load_config(root: Path) -> ReleaseConfig:
    """Load and validate [tool.cascade-versions] from ``root``/pyproject.toml.

    Raises:
        SystemExit: If the table is missing or invalid.
    """
    table = get_tool_table(load_pyproject(root / "pyproject.toml"), TOOL_NAME)
    if table is None:
        fatal(f"No [tool.{TOOL_NAME}] table in root pyproject.toml")
    try:
        return ReleaseConfig.model_validate(table)
    except ValidationError as exc:
        fatal(f"Invalid [tool.{TOOL_NAME}] configuration:\n{exc}")
