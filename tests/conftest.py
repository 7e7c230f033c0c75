"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import tomlkit

from cascade_versions.manifests import ManifestIndex
from cascade_versions.models import Package

WriteWorkspace = Callable[..., Path]


def _package_toml(
    name: str | None, version: str | None, deps: list[str], private: bool
) -> str:
    lines = ["[project]"]
    if name is not None:
        lines.append(f'name = "{name}"')
    if version is not None:
        lines.append(f'version = "{version}"')
    if private:
        lines.append('classifiers = ["Private :: Do Not Upload"]')
    lines.append("dependencies = [" + ", ".join(f'"{d}"' for d in deps) + "]")
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_workspace(tmp_path: Path) -> WriteWorkspace:
    """Return a helper that writes a uv workspace under tmp_path.

    ``packages`` maps a directory name to a dict with optional keys
    name, version, deps, private, changelog.
    """

    def _write(packages: dict[str, dict], tool: str = 'main-package = "main"\n') -> Path:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.uv.workspace]\nmembers = ["packages/*"]\n\n'
            f"[tool.cascade-versions]\n{tool}"
        )
        for dirname, options in packages.items():
            pkg_dir = tmp_path / "packages" / dirname
            pkg_dir.mkdir(parents=True)
            (pkg_dir / "pyproject.toml").write_text(
                _package_toml(
                    options.get("name", dirname),
                    options.get("version", "1.0.0"),
                    options.get("deps", []),
                    options.get("private", False),
                )
            )
            if options.get("changelog"):
                (pkg_dir / "CHANGELOG.md").write_text("# Changelog\n")
        return tmp_path

    return _write


@pytest.fixture
def chain_index(tmp_path: Path) -> ManifestIndex:
    """In-memory index: main depends on plugin, plugin depends on core."""
    return ManifestIndex(
        tmp_path,
        [
            Package(name="core", version="1.0.0", path="packages/core"),
            Package(
                name="plugin",
                version="1.0.0",
                path="packages/plugin",
                dependencies=["core"],
            ),
            Package(
                name="main",
                version="1.0.0",
                path="packages/main",
                dependencies=["plugin"],
            ),
        ],
    )


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
# pinned by the release tool
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0",
]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "My_Package"
version = "2.0.0"
classifiers = ["Private :: Do Not Upload", "Programming Language :: Python"]
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
docs = ["sphinx>=7.0"]

[dependency-groups]
test = ["hypothesis>=6.0", {include-group = "dev"}]
dev = ["ruff"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.cascade-versions]
main-package = "my-package"
"""
    return tomlkit.parse(content)
