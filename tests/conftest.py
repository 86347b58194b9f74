"""Pytest configuration and fixtures for forest ecosystem tests."""

import pytest

from forest_ecosim.ecosystem import Ecosystem
from forest_ecosim.rng import create_rng


class FixedRandom:
    """RandomSource stub: uniform() always returns `value`.

    random_int() returns the midpoint of its range, so movement from an
    interior cell always picks neighbour 4 of 8, i.e. one step east.
    """

    def __init__(self, value=0.5):
        self.value = value

    def uniform(self):
        return self.value

    def random_int(self, low, high):
        return (low + high) // 2


class MidpointRandom(FixedRandom):
    def __init__(self):
        super().__init__(0.5)


@pytest.fixture
def seeded_rng():
    """Provide a deterministic random source for tests."""
    return create_rng(42)


@pytest.fixture
def midpoint_rng():
    return MidpointRandom()


@pytest.fixture
def empty_ecosystem(midpoint_rng):
    """Unpopulated 5 × 10 ecosystem with strict index checks."""
    return Ecosystem(5, 10, midpoint_rng, strict=True)


@pytest.fixture
def seeded_forest(seeded_rng):
    """A default-density 20 × 20 forest, populated."""
    eco = Ecosystem(20, 20, seeded_rng, strict=True)
    eco.populate_forest()
    return eco


@pytest.fixture
def fixed_random():
    """Factory for FixedRandom stubs: fixed_random(0.1)."""
    return FixedRandom
