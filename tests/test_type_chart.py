import itertools
import pytest
from tallgrass.core.types import ElementType
from tallgrass.battle.type_chart import (
    Effectiveness, effectiveness, dual_effectiveness, against, weak_to, resistant_to,
    immune_to, explain, battle_advice,
)


def test_chart_is_total_and_single_multipliers_closed():
    for atk, dfn in itertools.product(ElementType, repeat=2):
        assert effectiveness(atk, dfn).multiplier in {0, 0.5, 1, 2}


def test_dual_multipliers_closed():
    for atk, d1, d2 in itertools.product(ElementType, repeat=3):
        assert dual_effectiveness(atk, d1, d2).multiplier in {0, 0.25, 0.5, 1, 2, 4}


def test_electric_examples():
    eff = effectiveness('electric', 'water')
    assert eff.multiplier == 2 and eff.label is Effectiveness.SUPER and eff.is_critical
    eff = effectiveness('electric', 'electric')
    assert eff.multiplier == 0.5 and eff.label is Effectiveness.REDUCED and eff.is_weak
    eff = effectiveness('electric', 'ground')
    assert eff.multiplier == 0 and eff.label is Effectiveness.NONE and eff.is_immune
    assert dual_effectiveness('electric', 'water', 'flying').multiplier == 4


def test_unlisted_pair_defaults_to_normal():
    eff = effectiveness('normal', 'fire')
    assert eff.multiplier == 1 and eff.label is Effectiveness.NORMAL
    assert not (eff.is_critical or eff.is_weak or eff.is_immune)
    assert eff.message == ''


def test_single_type_dual_form_matches_single():
    assert dual_effectiveness('fire', 'grass').multiplier == effectiveness('fire', 'grass').multiplier
    assert against('fire', [ElementType.GRASS, ElementType.STEEL]).multiplier == 4
    assert against('fire', []).multiplier == 1


def test_quarter_and_immune_combinations():
    assert dual_effectiveness('fire', 'water', 'rock').multiplier == 0.25
    assert dual_effectiveness('ground', 'fire', 'flying').multiplier == 0


def test_derived_queries():
    assert ElementType.GROUND in weak_to('electric')
    assert ElementType.ELECTRIC in resistant_to('electric')
    assert immune_to('ghost') == [ElementType.NORMAL, ElementType.FIGHTING]
    assert immune_to('fire') == []
    for t in weak_to('water'):
        assert effectiveness(t, 'water').multiplier == 2


def test_explain_mentions_both_types():
    assert explain('electric', 'ground') == 'Electric moves have no effect on Ground types.'
    assert 'super effective' in explain('water', 'fire')
    assert 'not very effective' in explain('fire', 'water')
    assert 'normal damage' in explain('normal', 'water')


def test_battle_advice_splits_best_and_worst():
    advice = battle_advice(['electric', 'grass', 'normal', 'electric'], 'water')
    assert advice.best == [ElementType.ELECTRIC, ElementType.GRASS]
    assert advice.worst == []
    assert 'Electric' in advice.advice
    poor = battle_advice(['electric'], 'ground')
    assert poor.best == [] and poor.worst == [ElementType.ELECTRIC]


def test_battle_advice_names_neutral_picks_without_super_effective():
    advice = battle_advice(['electric', 'normal', 'fire'], 'ground')
    assert advice.best == []
    assert advice.worst == [ElementType.ELECTRIC]
    assert 'Normal, Fire' in advice.advice and 'safe choice' in advice.advice


def test_battle_advice_when_every_pick_is_poor():
    advice = battle_advice(['electric', 'electric'], 'ground')
    assert advice.worst == [ElementType.ELECTRIC]
    assert advice.advice == "No super effective moves available. Just fight normally!"
