"""
Pytest configuration and shared fixtures.

This module provides central pytest configuration, custom markers,
and shared fixtures for the extrautils test suite.
"""

import os
from collections.abc import Generator

import pytest

from extrautils.watch import MemorySink, Tracer

# =============================================================================
# Plugin Registration
# =============================================================================

pytest_plugins = [
    "tests.fixtures.logging",
]


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated, no external dependencies)"
    )
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line(
        "markers", "integration: Integration tests (may use filesystem, environment)"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove EXTRAUTILS_* variables so the host environment cannot leak in."""
    for key in list(os.environ):
        if key.startswith("EXTRAUTILS_"):
            monkeypatch.delenv(key)


@pytest.fixture
def sink() -> MemorySink:
    """Provide an in-memory sink collecting trace lines."""
    return MemorySink()


@pytest.fixture
def tracer(sink: MemorySink) -> Tracer:
    """Provide a tracer writing into the sink fixture."""
    return Tracer(sink=sink)


@pytest.fixture
def reset_default_tracer() -> Generator[None, None, None]:
    """Drop the process-wide tracer before and after the test."""
    from extrautils.watch import tracer as tracer_module

    tracer_module._default_tracer = None
    yield
    tracer_module._default_tracer = None


# =============================================================================
# Test Collection Hooks
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to add markers.

    Args:
        config: Pytest config object
        items: List of collected test items
    """
    # Add 'unit' marker to tests without other markers
    for item in items:
        if not any(mark.name == "integration" for mark in item.iter_markers()):
            item.add_marker(pytest.mark.unit)
