"""Dependency-aware version reconciliation for uv workspaces."""
