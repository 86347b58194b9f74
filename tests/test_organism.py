"""Tests for forest_ecosim.organism: ageing, growth and maturation."""

import pytest

from forest_ecosim.catalog import UnknownStage
from forest_ecosim.organism import Organism
from forest_ecosim.types import SpeciesGroup


class TestCreate:
    def test_initial_state_from_stage(self):
        tree = Organism.create('tree', (2, 3))
        assert tree.stage == 'tree'
        assert tree.age == 12
        assert tree.radius == 11.0
        assert tree.position == (2, 3)
        assert tree.alive
        assert tree.species is SpeciesGroup.TREE

    def test_default_position_is_unplaced(self):
        assert Organism.create('bear').position == (-1, -1)

    def test_unknown_stage(self):
        with pytest.raises(UnknownStage):
            Organism.create('wolf')

    def test_unique_ids(self):
        a = Organism.create('bear')
        b = Organism.create('bear')
        assert a.uid != b.uid


class TestAdvance:
    def test_sapling_becomes_tree_at_12(self):
        sapling = Organism.create('sapling')
        for _ in range(11):
            assert sapling.advance_one_tick() is False
        assert sapling.stage == 'sapling'
        assert sapling.advance_one_tick() is True
        assert sapling.stage == 'tree'
        assert sapling.age == 12

    def test_sapling_becomes_elder_at_120(self):
        """Age keeps accumulating across the sapling → tree transition."""
        sapling = Organism.create('sapling')
        for _ in range(119):
            sapling.advance_one_tick()
        assert sapling.stage == 'tree'
        sapling.advance_one_tick()
        assert sapling.stage == 'elder'
        assert sapling.age == 120

    def test_seeded_tree_matures_after_108_ticks(self):
        tree = Organism.create('tree')
        changes = [tree.advance_one_tick() for _ in range(108)]
        assert changes.count(True) == 1
        assert changes[-1] is True
        assert tree.stage == 'elder'

    def test_elder_never_transitions(self):
        elder = Organism.create('elder')
        assert not any(elder.advance_one_tick() for _ in range(500))
        assert elder.stage == 'elder'
        assert elder.age == 620

    def test_movers_age_without_transition(self):
        jack = Organism.create('lumberjack')
        for _ in range(30):
            assert jack.advance_one_tick() is False
        assert jack.age == 50
        assert jack.radius == 6.0

    def test_sapling_radius_grows(self):
        sapling = Organism.create('sapling')
        sapling.advance_one_tick()
        assert sapling.radius == pytest.approx(2.75)
        sapling.advance_one_tick()
        assert sapling.radius == pytest.approx(3.5)

    def test_radius_never_exceeds_end(self):
        sapling = Organism.create('sapling')
        for _ in range(11):
            sapling.advance_one_tick()
        assert sapling.radius == pytest.approx(10.25)
        sapling.advance_one_tick()
        assert sapling.radius == pytest.approx(11.0)
        assert sapling.stage == 'tree'


class TestView:
    def test_view_matches_state(self):
        bear = Organism.create('bear', (4, 1))
        v = bear.view()
        assert (v.row, v.col) == (4, 1)
        assert v.stage == 'bear'
        assert v.species is SpeciesGroup.BEAR
        assert v.radius == 8.5
        assert v.color == (220, 180, 150, 0.8)
