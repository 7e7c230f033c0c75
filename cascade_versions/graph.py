"""Dependency graph utilities.

The forward graph maps each package location to the locations it depends
on. Version propagation needs the opposite direction ("who depends on me"),
so the forward graph is inverted into a dependents map keyed by package
name, and transitive dependents are then found with a depth-first walk.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from .manifests import ManifestIndex
from .models import GraphNode


def build_dependency_graph(index: ManifestIndex) -> dict[str, GraphNode]:
    """Build the forward dependency graph of the workspace.

    Args:
        index: Manifest index of the workspace.

    Returns:
        Map of package location → GraphNode listing dependency locations.
        Dependencies that don't resolve to a workspace package are dropped.
    """
    graph: dict[str, GraphNode] = {}
    for package in index.list_packages():
        node = GraphNode()
        for dep_name in package.dependencies:
            dep = index.find_by_name(dep_name)
            if dep is not None:
                node.dependencies.append(dep.path)
        graph[package.path] = node
    return graph


def build_dependents_map(
    graph: Mapping[str, GraphNode], index: ManifestIndex
) -> dict[str, list[str]]:
    """Invert the forward graph into a package name → dependents map.

    Only direct dependencies are recorded; transitivity is handled by
    find_dependents(). Nodes and dependencies whose package has no name
    are skipped.

    Example:
        If plugin depends on core and app depends on plugin:
        build_dependents_map(...) → {"core": ["plugin"], "plugin": ["app"]}
    """
    dependents: dict[str, list[str]] = {}

    for location, node in graph.items():
        package = index.find_by_path(location)
        if package is None or not package.name:
            continue

        for dep_location in node.dependencies:
            dep = index.find_by_path(dep_location)
            if dep is None or not dep.name:
                continue
            dependents.setdefault(dep.name, []).append(package.name)

    return dependents


def find_dependents(
    name: str,
    dependents_map: Mapping[str, list[str]],
    dependents: list[str] | None = None,
    visited: set[str] | None = None,
) -> list[str]:
    """Find all transitive dependents of a package.

    Walks depth-first, reporting each dependent the first time it is
    discovered. Cycles terminate because every package is visited once;
    the starting package is never reported. Passing the same ``dependents``
    and ``visited`` to several calls keeps each package unique across them.

    Args:
        name: Package whose dependents to find.
        dependents_map: Map of package name → direct dependents.
        dependents: Accumulator to append to (a new list if omitted).
        visited: Packages already walked (a new set if omitted).

    Returns:
        The accumulator, in first-discovered depth-first order.

    Example:
        With core ← plugin ← app and core ← cli:
        find_dependents("core", ...) → ["plugin", "app", "cli"]
    """
    if dependents is None:
        dependents = []
    if visited is None:
        visited = set()

    if name in visited:
        return dependents
    visited.add(name)

    # One iterator per package on the current path replaces recursion
    stack: list[Iterator[str]] = [iter(dependents_map.get(name, ()))]
    while stack:
        for dependent in stack[-1]:
            if dependent in visited:
                continue
            visited.add(dependent)
            dependents.append(dependent)
            stack.append(iter(dependents_map.get(dependent, ())))
            break
        else:
            stack.pop()

    return dependents
