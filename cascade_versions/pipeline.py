"""Reconcile pipeline: discover → collect → policy → bump → report.

This module orchestrates a cascade-versions run:
1. Load configuration and discover all packages in the workspace
2. Collect the packages the release tool bumped (changelog files)
3. Resolve the main version policy (override, prerelease mode)
4. Force the main version if overridden, cascading to its dependents
5. Bump linked packages whose trigger was bumped, cascading as well
6. Report the final versions in display order

Dependents are bumped even when the release tool didn't flag them, so
every package depending on a new version is released alongside it.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from .bumper import VersionBumper
from .changelogs import collect_bumped_versions
from .config import ReleaseConfig, load_config
from .console import step
from .manifests import discover_workspace
from .models import PackageVersion, ReconcileResult, VersionPolicy
from .policy import resolve_policy


def sort_by_external_order(names: Iterable[str], order: list[str]) -> list[str]:
    """Sort names by an externally supplied order.

    Names listed in ``order`` come first, in that order; the rest follow
    alphabetically.

    Example:
        sort_by_external_order(["c", "b", "a"], ["b"]) → ["b", "a", "c"]
    """
    rank = {name: i for i, name in enumerate(order)}
    return sorted(names, key=lambda n: (rank.get(n, len(rank)), n))


def get_override_version(
    config: ReleaseConfig,
    cli_version: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Return the forced main version, if any.

    The CLI value wins over the configured environment variable; empty
    values count as unset.
    """
    if cli_version:
        return cli_version
    environ = os.environ if environ is None else environ
    return environ.get(config.version_env_var) or None


def build_result(
    policy: VersionPolicy, ledger: Mapping[str, str], config: ReleaseConfig
) -> ReconcileResult:
    """Shape the ledger into the reported result.

    The main package and untyped packages are left out of the version list.
    """
    excluded = {config.main_package, *config.untyped_packages}
    names = sort_by_external_order(
        (name for name in ledger if name not in excluded), config.package_order
    )
    return ReconcileResult(
        main_version=policy.main_version,
        is_prerelease=policy.is_prerelease,
        prerelease_id=policy.prerelease_id,
        package_versions=[PackageVersion(name=n, version=ledger[n]) for n in names],
    )


def run_reconcile(
    root: Path | None = None,
    *,
    main_version: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ReconcileResult:
    """Execute a full reconcile run.

    Args:
        root: Workspace root; defaults to the current directory.
        main_version: Forced main version (takes precedence over the
                      configured environment variable).
        environ: Environment to read the override from; os.environ if omitted.

    Raises:
        VersionPolicyError: If the main version is missing, invalid, or
            inconsistent with the release tool's prerelease mode.
    """
    root = root or Path.cwd()

    # Phase 1: Discovery
    config = load_config(root)
    index = discover_workspace(root)
    ledger = collect_bumped_versions(
        index, config.changelog_file, remove=config.remove_changelogs
    )

    # Phase 2: Policy
    step("Resolving main version")
    override = get_override_version(config, main_version, environ)
    policy = resolve_policy(
        ledger.get(config.main_package),
        override,
        pre_state_file=root / config.pre_state_file,
        main_package=config.main_package,
    )
    kind = f"prerelease '{policy.prerelease_id}'" if policy.is_prerelease else "release"
    source = " (override)" if override is not None else ""
    print(f"  {config.main_package} {policy.main_version}{source}: {kind}")

    # Phase 3: Cascade
    step("Bumping dependents")
    bumper = VersionBumper(index, policy, ledger)

    if override is not None:
        bumper.bump(config.main_package, policy.main_version, bump_dependents=True)

    for trigger, target in config.linked_packages:
        if trigger in ledger and target not in ledger:
            bumper.bump(target, bump_dependents=True)

    return build_result(policy, ledger, config)
