"""CLI entry point for cascade-versions."""

from __future__ import annotations

import contextlib
import json
import sys
from pathlib import Path

import click
from packaging.utils import canonicalize_name

from cascade_versions.console import fatal, write_github_output
from cascade_versions.graph import (
    build_dependency_graph,
    build_dependents_map,
    find_dependents,
)
from cascade_versions.manifests import discover_workspace
from cascade_versions.pipeline import run_reconcile
from cascade_versions.policy import VersionPolicyError

root_option = click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root containing the root pyproject.toml.",
)


@click.group()
@click.version_option(package_name="cascade-versions")
def cli() -> None:
    """Cascade changeset version bumps through a uv workspace."""


@cli.command()
@root_option
@click.option(
    "--main-version",
    default=None,
    help="Force the main package version (overrides the configured env var).",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the JSON result here instead of printing it.",
)
@click.option(
    "--github-output",
    type=click.Path(dir_okay=False),
    envvar="GITHUB_OUTPUT",
    default=None,
    help="GitHub Actions step output file. (default: $GITHUB_OUTPUT)",
)
def reconcile(
    root: Path, main_version: str | None, output: Path | None, github_output: str | None
) -> None:
    """Reconcile bumped versions and cascade them to dependents.

    Without --output the JSON result is the only thing on stdout; progress
    goes to stderr so the result can be piped.
    """
    progress = sys.stderr if output is None else sys.stdout
    try:
        with contextlib.redirect_stdout(progress):
            result = run_reconcile(root.resolve(), main_version=main_version)
    except VersionPolicyError as exc:
        fatal(str(exc))

    payload = result.model_dump_json(indent=2)
    if output:
        output.write_text(payload + "\n")
        count = len(result.package_versions)
        click.echo(f"\n✓ Wrote {count} package versions to {output}")
    else:
        click.echo(payload)

    if github_output:
        write_github_output(github_output, "main_version", result.main_version)
        write_github_output(
            github_output, "is_prerelease", json.dumps(result.is_prerelease)
        )
        write_github_output(github_output, "prerelease_id", result.prerelease_id or "")
        write_github_output(
            github_output,
            "package_versions",
            json.dumps([pv.model_dump() for pv in result.package_versions]),
        )


@cli.command()
@root_option
@click.argument("name")
def dependents(root: Path, name: str) -> None:
    """List the transitive dependents of package NAME."""
    index = discover_workspace(root.resolve())
    name = canonicalize_name(name)
    if index.find_by_name(name) is None:
        raise click.ClickException(f"No workspace package named {name!r}.")

    graph = build_dependency_graph(index)
    found = find_dependents(name, build_dependents_map(graph, index))

    click.echo()
    if not found:
        click.echo(f"No packages depend on {name}.")
        return
    for dependent in found:
        click.echo(dependent)
