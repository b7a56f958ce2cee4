"""Shared fixtures for graph-redact tests."""

import pytest

from graph_redact import redactor, registry


@pytest.fixture
def default_registry(monkeypatch):
    """A throwaway copy of the process-wide registry, restored after the test."""
    clone = registry.default_registry.copy()
    monkeypatch.setattr(registry, "default_registry", clone)
    monkeypatch.setattr(redactor, "default_registry", clone)
    return clone
