"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules. Taichi is only
initialized for tests that request it, once per session.
"""

import numpy as np
import pytest


@pytest.fixture(scope="session")
def taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Tests using this
    fixture are skipped when Taichi is not installed.
    """
    ti = pytest.importorskip("taichi")
    ti.init(arch=ti.cpu, random_seed=42)
    return ti


@pytest.fixture
def rng():
    """A freshly seeded random generator for each test."""
    return np.random.default_rng(12345)


class FixedRandom:
    """Stand-in random source whose ``random()`` always returns one value."""

    def __init__(self, value):
        self.value = value

    def random(self, size=None):
        if size is None:
            return self.value
        return np.full(size, self.value)


@pytest.fixture
def fixed_random():
    """Factory for random sources returning a constant uniform draw."""
    return FixedRandom
