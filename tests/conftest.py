"""Shared fixtures for the cdsga test-suite."""

from __future__ import annotations

import numpy as np
import pytest

from cdsga.instance import Instance, as_matrix, default_instance


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def two_by_two() -> np.ndarray:
    """Two job types, two machines; both orders give makespan 4."""
    return as_matrix([[1, 1], [2, 1]])


@pytest.fixture
def three_by_three() -> np.ndarray:
    return as_matrix([[3, 2, 4], [1, 5, 2], [4, 1, 3]])


@pytest.fixture
def default_inst() -> Instance:
    return default_instance()
