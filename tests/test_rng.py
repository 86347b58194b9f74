"""Tests for forest_ecosim.rng: seeded random source and checkpointing."""

import numpy as np
import pytest

from forest_ecosim.rng import (
    GeneratorSource,
    create_rng,
    restore_rng_state,
    rng_state_snapshot,
)


class TestCreateRng:
    def test_returns_generator_source(self):
        rng = create_rng(42)
        assert isinstance(rng, GeneratorSource)
        assert isinstance(rng.generator, np.random.Generator)

    def test_reproducibility(self):
        """Same seed produces identical sequences."""
        a = create_rng(42)
        b = create_rng(42)
        for _ in range(50):
            assert a.uniform() == b.uniform()
            assert a.random_int(0, 8) == b.random_int(0, 8)

    def test_different_seeds_differ(self):
        a, b = create_rng(42), create_rng(43)
        assert [a.uniform() for _ in range(10)] != [b.uniform() for _ in range(10)]

    def test_unseeded_works(self):
        rng = create_rng()
        assert 0.0 <= rng.uniform() < 1.0


class TestGeneratorSource:
    def test_uniform_range(self):
        rng = create_rng(1)
        vals = [rng.uniform() for _ in range(1000)]
        assert min(vals) >= 0.0
        assert max(vals) < 1.0
        assert all(isinstance(v, float) for v in vals)

    def test_random_int_half_open(self):
        rng = create_rng(2)
        vals = {rng.random_int(3, 6) for _ in range(500)}
        assert vals == {3, 4, 5}

    def test_random_int_single_value(self):
        rng = create_rng(3)
        assert rng.random_int(7, 8) == 7

    def test_random_int_returns_python_int(self):
        assert type(create_rng(4).random_int(0, 10)) is int

    @pytest.mark.parametrize("low,high", [(0, 0), (5, 2)])
    def test_random_int_empty_range_raises(self, low, high):
        with pytest.raises(ValueError):
            create_rng(5).random_int(low, high)


class TestRngCheckpoint:
    def test_snapshot_and_restore(self):
        """Restoring a snapshot replays the same draws."""
        rng = create_rng(42)
        rng.uniform()
        state = rng_state_snapshot(rng)
        expected = [rng.uniform() for _ in range(20)]

        restore_rng_state(rng, state)
        replay = [rng.uniform() for _ in range(20)]
        assert replay == expected

    def test_restore_into_other_source(self):
        a = create_rng(42)
        b = create_rng(99)
        restore_rng_state(b, rng_state_snapshot(a))
        assert a.random_int(0, 1000) == b.random_int(0, 1000)

    def test_restore_wrong_generator_raises(self):
        rng = create_rng(42)
        state = dict(rng_state_snapshot(rng))
        state['bit_generator'] = 'MT19937'
        with pytest.raises(ValueError, match="MT19937"):
            restore_rng_state(rng, state)
