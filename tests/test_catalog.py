"""Tests for forest_ecosim.catalog and the stage parameter types."""

import dataclasses

import pytest

from forest_ecosim.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_STAGES,
    GROUP_SEED_STAGE,
    SpeciesCatalog,
    UnknownStage,
    lookup,
)
from forest_ecosim.types import (
    Maturity,
    RadiusSpec,
    SpawnSpec,
    SpeciesGroup,
    StageParameters,
)


def _stage(name, group=SpeciesGroup.TREE, **kwargs):
    defaults = dict(
        maturity=Maturity(),
        radius=RadiusSpec(1.0, 1.0),
        spawn=SpawnSpec(),
        species=group,
        color=(0, 0, 0, 1.0),
    )
    defaults.update(kwargs)
    return StageParameters(name=name, **defaults)


# ── Stage table ──────────────────────────────────────────────────────

class TestDefaultStages:
    def test_five_stages(self):
        assert DEFAULT_CATALOG.names == ['sapling', 'tree', 'elder', 'lumberjack', 'bear']
        assert len(DEFAULT_CATALOG) == 5

    def test_sapling(self):
        s = lookup('sapling')
        assert s.maturity == Maturity(12, '', 'tree')
        assert s.radius == RadiusSpec(2.0, 11.0, 0.75)
        assert s.spawn.chance == 0.0
        assert s.lumber_score == 0
        assert s.start_age == 0
        assert s.species is SpeciesGroup.TREE

    def test_tree(self):
        t = lookup('tree')
        assert t.maturity == Maturity(120, 'sapling', 'elder')
        assert t.spawn == SpawnSpec(0.1, 'sapling')
        assert t.lumber_score == 1
        assert t.start_age == 12
        assert t.color == (140, 230, 40, 0.6)

    def test_elder_is_terminal(self):
        e = lookup('elder')
        assert e.maturity.is_terminal
        assert e.spawn == SpawnSpec(0.2, 'sapling')
        assert e.lumber_score == 2
        assert e.start_age == 120

    def test_movers(self):
        assert lookup('lumberjack').movement == 3
        assert lookup('lumberjack').start_age == 20
        assert lookup('bear').movement == 5
        assert lookup('bear').start_age == 5
        assert lookup('bear').radius.start == 8.5

    def test_only_tree_stages_are_lumber(self):
        lumber = {s.name for s in DEFAULT_CATALOG if s.is_lumber}
        assert lumber == {'tree', 'elder'}

    def test_only_tree_and_elder_spawn(self):
        assert {s.name for s in DEFAULT_CATALOG if s.can_spawn} == {'tree', 'elder'}

    def test_stage_records_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            lookup('tree').lumber_score = 5

    def test_seed_stages(self):
        for group in SpeciesGroup:
            assert lookup(GROUP_SEED_STAGE[group]).species is group

    def test_mpl_color_normalised(self):
        r, g, b, a = lookup('lumberjack').mpl_color
        assert r == pytest.approx(210 / 255)
        assert g == pytest.approx(45 / 255)
        assert a == 0.5


# ── Lookup ───────────────────────────────────────────────────────────

class TestLookup:
    def test_unknown_stage_raises(self):
        with pytest.raises(UnknownStage) as exc:
            lookup('wolf')
        assert exc.value.name == 'wolf'
        assert 'wolf' in str(exc.value)

    def test_unknown_stage_is_key_error(self):
        with pytest.raises(KeyError):
            DEFAULT_CATALOG.lookup('')

    def test_contains(self):
        assert 'bear' in DEFAULT_CATALOG
        assert 'wolf' not in DEFAULT_CATALOG

    def test_next_stage_chain(self):
        assert DEFAULT_CATALOG.next_stage('sapling').name == 'tree'
        assert DEFAULT_CATALOG.next_stage('tree').name == 'elder'
        assert DEFAULT_CATALOG.next_stage('elder') is None
        assert DEFAULT_CATALOG.next_stage('bear') is None

    def test_stages_in_group(self):
        names = [s.name for s in DEFAULT_CATALOG.stages_in(SpeciesGroup.TREE)]
        assert names == ['sapling', 'tree', 'elder']


# ── Validation ───────────────────────────────────────────────────────

class TestValidation:
    def test_default_table_valid(self):
        SpeciesCatalog(DEFAULT_STAGES).validate()

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            SpeciesCatalog([_stage('a'), _stage('a')])

    def test_dangling_next_rejected(self):
        with pytest.raises(ValueError, match="unknown stage 'b'"):
            SpeciesCatalog([_stage('a', maturity=Maturity(5, '', 'b'))])

    def test_dangling_child_rejected(self):
        with pytest.raises(ValueError, match="spawn.child"):
            SpeciesCatalog([_stage('a', spawn=SpawnSpec(0.5, 'seed'))])

    def test_cross_group_maturation_rejected(self):
        stages = [
            _stage('cub', SpeciesGroup.BEAR, maturity=Maturity(5, '', 'oak')),
            _stage('oak'),
        ]
        with pytest.raises(ValueError, match="different species group"):
            SpeciesCatalog(stages)

    def test_bad_spawn_chance_rejected(self):
        with pytest.raises(ValueError, match="spawn.chance"):
            SpeciesCatalog([_stage('a', spawn=SpawnSpec(1.5, 'a'))])

    def test_validate_can_be_skipped(self):
        catalog = SpeciesCatalog([_stage('a', maturity=Maturity(5, '', 'b'))],
                                 validate=False)
        assert 'a' in catalog
