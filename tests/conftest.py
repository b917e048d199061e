"""Pytest configuration for primitive tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Float64 is the
    default so kernel results match the host-side Tuple exactly.
    """
    from src.python.config import BackendConfig, init_backend

    init_backend(BackendConfig(arch="cpu"))
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def all_kinds_samples():
    """One sample tuple of every kind, keyed by Kind."""
    from src.python.core.primitives import Kind, Tuple

    return {
        Kind.NONE: Tuple.new(1.5, -2.0, 0.25, 1.0),
        Kind.POINT: Tuple.new_point(3.0, -2.0, 5.0),
        Kind.VECTOR: Tuple.new_vector(-2.0, 3.0, 1.0),
        Kind.COLOR: Tuple.new_color(0.9, 0.6, 0.75),
    }
