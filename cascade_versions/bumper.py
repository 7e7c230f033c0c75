"""Version bump engine.

A VersionBumper is the context of one reconcile run: it owns the manifest
index, the resolved version policy, the ledger of bumped versions, and the
dependents map (built on first use, then reused for the rest of the run).
"""

from __future__ import annotations

from collections.abc import Callable

from .graph import build_dependency_graph, build_dependents_map, find_dependents
from .manifests import ManifestIndex, write_manifest_version
from .models import Package, VersionPolicy
from .versions import increment, parse_version


class VersionBumper:
    """Bump packages and cascade the bump to their dependents.

    Args:
        index: Manifest index of the workspace.
        policy: Resolved version policy for the run.
        ledger: Versions already bumped this run (name → version). Shared,
                not copied, so the caller sees every bump.
        persist: Called with the updated Package after every bump. Defaults
                 to writing the version into the package's pyproject.toml.
    """

    def __init__(
        self,
        index: ManifestIndex,
        policy: VersionPolicy,
        ledger: dict[str, str] | None = None,
        persist: Callable[[Package], None] | None = None,
    ) -> None:
        self.index = index
        self.policy = policy
        self.ledger = ledger if ledger is not None else {}
        self.persist = persist or (lambda p: write_manifest_version(index.root, p))
        self._dependents_map: dict[str, list[str]] | None = None

    @property
    def dependents_map(self) -> dict[str, list[str]]:
        """Map of package name → direct dependents, built once per run."""
        if self._dependents_map is None:
            graph = build_dependency_graph(self.index)
            self._dependents_map = build_dependents_map(graph, self.index)
        return self._dependents_map

    def next_version(self, package: Package, version: str | None = None) -> str | None:
        """The version ``package`` would be bumped to, or None if undeterminable.

        Current versions that aren't semantic versions (e.g. PEP 440 "0.1" or
        "1.0.0a1") can't be incremented, so they count as undeterminable.
        """
        if version:
            return version
        if parse_version(package.version) is not None:
            return increment(str(package.version), self.policy)
        return None

    def bump(
        self, name: str, version: str | None = None, bump_dependents: bool = False
    ) -> None:
        """Bump a package, optionally cascading to its transitive dependents.

        Unknown packages and packages without a determinable version are
        skipped. Dependents are bumped with the policy's increment and do
        not cascade themselves: the transitive set is computed once here.

        Args:
            name: Canonical name of the package to bump.
            version: Explicit new version; incremented from the current one
                     if omitted.
            bump_dependents: Also bump every dependent not yet in the ledger.
        """
        package = self.index.find_by_name(name)
        if package is None:
            return

        new_version = self.next_version(package, version)
        if not new_version:
            return

        old_version = package.version
        updated = self.index.set_version(name, new_version)
        self.persist(updated)
        self.ledger[name] = new_version
        print(f"  {name}: {old_version or '<none>'} → {new_version}")

        if bump_dependents:
            for dependent in find_dependents(name, self.dependents_map):
                if dependent not in self.ledger:
                    self.bump(dependent)
