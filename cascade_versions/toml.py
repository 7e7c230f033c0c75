"""pyproject.toml access for workspace members.

Manifests are parsed with tomlkit so that rewriting a member's version keeps
the rest of its file (comments, ordering, quoting) exactly as it was.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from packaging.utils import canonicalize_name

from .console import fatal

PRIVATE_CLASSIFIER = "Private :: Do Not Upload"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Parse the manifest at ``path`` into a round-trippable document."""
    return tomlkit.parse(path.read_text())


def save_pyproject(path: Path, doc: tomlkit.TOMLDocument) -> None:
    """Write ``doc`` to ``path``; untouched keys serialize byte-for-byte."""
    path.write_text(tomlkit.dumps(doc))


def get_project_name(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract the canonical package name from [project].name.

    Names are normalized per PEP 503 (lowercase, hyphens instead of
    underscores) for consistent comparison. Returns None for members
    without a declared name (e.g. virtual workspace roots).
    """
    name = doc.get("project", {}).get("name")
    return canonicalize_name(str(name)) if name else None


def get_project_version(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract [project].version, or None if the package has no static version."""
    version = doc.get("project", {}).get("version")
    return str(version) if version else None


def is_private(doc: tomlkit.TOMLDocument) -> bool:
    """Whether the package opts out of publishing via its classifiers."""
    classifiers = doc.get("project", {}).get("classifiers", [])
    return PRIVATE_CLASSIFIER in [str(c) for c in classifiers]


def get_all_dependency_strings(doc: tomlkit.TOMLDocument) -> list[str]:
    """Every requirement a member declares, in any section.

    A member depends on a sibling whether the requirement sits in
    [project].dependencies, an extra, or a [dependency-groups] group, so all
    three feed the dependents graph. Group entries that aren't requirement
    strings ({include-group = "..."}) carry no package and are left out.
    """
    project = doc.get("project", {})
    sections = [project.get("dependencies", [])]
    sections.extend(project.get("optional-dependencies", {}).values())
    sections.extend(doc.get("dependency-groups", {}).values())
    return [
        str(req) for section in sections for req in section if isinstance(req, str)
    ]


def get_workspace_member_globs(doc: tomlkit.TOMLDocument) -> list[str]:
    """Member globs from the root manifest's [tool.uv.workspace].members.

    Raises:
        SystemExit: If the root declares no members; there is nothing to
            reconcile.
    """
    workspace = doc.get("tool", {}).get("uv", {}).get("workspace", {})
    members = workspace.get("members")
    if not members:
        fatal("No [tool.uv.workspace] members defined in root pyproject.toml")
    return [str(m) for m in members]


def get_tool_table(doc: tomlkit.TOMLDocument, tool: str) -> dict[str, Any] | None:
    """Return the [tool.<tool>] table as plain Python data, or None if absent."""
    table = doc.get("tool", {}).get(tool)
    if table is None:
        return None
    return table.unwrap()


def set_project_version(path: Path, version: str) -> None:
    """Rewrite [project].version of the pyproject.toml at ``path``.

    Raises:
        KeyError: If the file has no [project] table.
    """
    doc = load_pyproject(path)
    doc["project"]["version"] = version
    save_pyproject(path, doc)
