"""Main version policy: which version the main package gets, and whether the
run bumps dependents as a prerelease.

The release tool records its prerelease mode in a JSON state file
(``.changeset/pre.json`` by default) holding at least ``{"tag": "<id>"}``.
A prerelease main version is only accepted when that file exists and its tag
matches the version's prerelease identifier.
"""

from __future__ import annotations

import json
from pathlib import Path

from .models import VersionPolicy
from .versions import parse_version, prerelease_identifiers


class VersionPolicyError(RuntimeError):
    """The main version is missing or inconsistent with the release tool state."""


def read_prerelease_tag(pre_state_file: Path) -> object:
    """Read the prerelease tag from the release tool's state file.

    The tag is returned as recorded (None when the file has no tag);
    resolve_policy() rejects anything that isn't the prerelease identifier.

    Raises:
        VersionPolicyError: If the file is missing, unparseable, or not a
            JSON object.
    """
    try:
        state = json.loads(pre_state_file.read_text())
    except (OSError, ValueError) as exc:
        raise VersionPolicyError(
            "Main version is a prerelease but the release tool isn't in prerelease mode"
        ) from exc
    if not isinstance(state, dict):
        raise VersionPolicyError(
            "Main version is a prerelease but the release tool isn't in prerelease mode"
        )
    return state.get("tag")


def resolve_policy(
    detected_main_version: str | None,
    override_version: str | None = None,
    *,
    pre_state_file: Path,
    main_package: str = "main",
) -> VersionPolicy:
    """Resolve the main version and prerelease semantics for the run.

    Args:
        detected_main_version: Main package version found in the bumped set.
        override_version: Forced main version; wins over the detected one.
        pre_state_file: Path to the release tool's prerelease state file.
        main_package: Main package name, used in error messages.

    Raises:
        VersionPolicyError: If the main version is missing or invalid, or if
            a prerelease main version doesn't match the prerelease mode.
    """
    chosen = override_version if override_version is not None else detected_main_version
    version = parse_version(chosen)
    if version is None:
        raise VersionPolicyError(
            f"Main version ('{main_package}' package) is missing or invalid"
        )

    identifiers = prerelease_identifiers(version)
    if not identifiers:
        return VersionPolicy(main_version=str(version.replace(build=None)))

    tag = read_prerelease_tag(pre_state_file)

    prerelease_id = identifiers[0]
    # Numeric identifiers carry no tag
    if prerelease_id.isdigit():
        raise VersionPolicyError("Expected a string for prerelease identifier")

    if prerelease_id != tag:
        raise VersionPolicyError(
            f"Prerelease identifier of main version ('{prerelease_id}') doesn't "
            f"match tag of the release tool's prerelease mode ('{tag}')"
        )

    return VersionPolicy(
        main_version=str(version.replace(build=None)),
        is_prerelease=True,
        prerelease_id=prerelease_id,
    )
