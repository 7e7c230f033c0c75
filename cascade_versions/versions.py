"""Version parsing and bumping utilities.

Handles conversion between version strings and semver objects, and the two
increments a reconcile run applies to dependents: a patch bump for regular
releases and a prerelease bump while the release tool is in prerelease mode.
"""

from __future__ import annotations

import semver

from .models import VersionPolicy


def parse_version(version_str: str | None) -> semver.Version | None:
    """Parse a semantic version string, returning None if it isn't one.

    A single leading "v" is accepted ("v1.2.3" → 1.2.3). Unlike package
    manifests, incomplete versions such as "1.2" are rejected.
    """
    if not version_str:
        return None
    text = version_str.strip()
    if text.startswith("v"):
        text = text[1:]
    try:
        return semver.Version.parse(text)
    except ValueError:
        return None


def _parse_strict(version_str: str) -> semver.Version:
    version = parse_version(version_str)
    if version is None:
        raise ValueError(f"{version_str!r} is not a valid semantic version")
    return version


def prerelease_identifiers(version: semver.Version) -> list[str]:
    """Split the prerelease component into its dot-separated identifiers."""
    return version.prerelease.split(".") if version.prerelease else []


def bump_patch(version_str: str) -> str:
    """Increment the patch version and return as a string.

    A prerelease is promoted to its release instead of skipping it.

    Examples:
        "1.2.3" → "1.2.4"
        "1.0.0-alpha.3" → "1.0.0"
    """
    version = _parse_strict(version_str)
    if version.prerelease:
        return str(version.finalize_version())
    return str(version.bump_patch())


def bump_prerelease(version_str: str, identifier: str) -> str:
    """Increment to the next prerelease carrying ``identifier``.

    Examples:
        "1.0.0" → "1.0.1-alpha.0"
        "2.0.0-alpha.0" → "2.0.0-alpha.1"
        "2.0.0-alpha" → "2.0.0-alpha.0"
        "2.0.0-beta.3" → "2.0.0-alpha.0"
    """
    version = _parse_strict(version_str)
    if not version.prerelease:
        return str(version.bump_patch().replace(prerelease=f"{identifier}.0"))

    parts = prerelease_identifiers(version)
    # Increment the right-most numeric identifier, or start a counter
    for i in range(len(parts) - 1, -1, -1):
        if parts[i].isdigit():
            parts[i] = str(int(parts[i]) + 1)
            break
    else:
        parts.append("0")

    if parts[0] != identifier or len(parts) < 2 or not parts[1].isdigit():
        parts = [identifier, "0"]

    return str(version.replace(prerelease=".".join(parts), build=None))


def increment(version_str: str, policy: VersionPolicy) -> str:
    """Compute the next version of a dependent under the run's policy."""
    if policy.is_prerelease and policy.prerelease_id:
        return bump_prerelease(version_str, policy.prerelease_id)
    return bump_patch(version_str)
