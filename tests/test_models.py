"""Tests for cascade_versions.models."""

from __future__ import annotations

import pytest

from cascade_versions.models import GraphNode, Package, ReconcileResult, VersionPolicy


class TestPackage:
    def test_create_with_required_fields(self) -> None:
        pkg = Package(name="foo", path="packages/foo")
        assert pkg.version is None
        assert pkg.private is False
        assert pkg.dependencies == []

    def test_is_frozen(self) -> None:
        pkg = Package(name="foo", version="1.0.0", path="packages/foo")
        with pytest.raises(ValueError):
            pkg.version = "2.0.0"  # type: ignore[misc]

    def test_copy_with_new_version(self) -> None:
        pkg = Package(name="foo", version="1.0.0", path="foo", dependencies=["bar"])
        updated = pkg.model_copy(update={"version": "1.0.1"})
        assert updated.version == "1.0.1"
        assert updated.dependencies == ["bar"]
        assert pkg.version == "1.0.0"


class TestGraphNode:
    def test_default_dependencies_not_shared(self) -> None:
        a, b = GraphNode(), GraphNode()
        a.dependencies.append("x")
        assert b.dependencies == []


class TestVersionPolicy:
    def test_release_defaults(self) -> None:
        policy = VersionPolicy(main_version="1.0.0")
        assert policy.is_prerelease is False
        assert policy.prerelease_id is None


class TestReconcileResult:
    def test_json_shape(self) -> None:
        result = ReconcileResult(main_version="1.0.0", is_prerelease=False)
        assert result.model_dump() == {
            "main_version": "1.0.0",
            "is_prerelease": False,
            "prerelease_id": None,
            "package_versions": [],
        }
