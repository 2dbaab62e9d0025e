"""Pytest configuration for path tracer tests.

Provides a seeded random generator so stochastic tests are repeatable.
"""

import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    """A freshly seeded generator for each test."""
    return np.random.default_rng(42)
