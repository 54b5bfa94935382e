import random
from conftest import ScriptedRng, build_combatant, build_move
from tallgrass.battle.mechanics import (
    STATUS_BREAKDOWN, battle_message, compute_damage, damage_range, experience_gain,
    roll_critical, rolls_hit,
)
from tallgrass.battle.type_chart import Effectiveness, effectiveness


def _pair():
    attacker = build_combatant(attack=50)
    defender = build_combatant(cid="foe-1", defense=40)
    return attacker, defender


def test_damage_falls_in_documented_range():
    attacker, defender = _pair()
    move = build_move(power=40)
    rng = random.Random(12345)
    for _ in range(500):
        b = compute_damage(attacker, defender, move, rng)
        assert b.base_damage == 50
        if not b.is_critical:
            assert 42 <= b.final_damage <= 50
    assert damage_range(attacker, defender, move) == (42, 50)


def test_lowest_roll_without_critical():
    attacker, defender = _pair()
    b = compute_damage(attacker, defender, build_move(power=40), ScriptedRng(0.0, 0.99))
    assert b.random_factor == 0.85
    assert b.critical_multiplier == 1.0
    assert b.final_damage == 42
    assert '= 42' in b.formula


def test_critical_hit_multiplies_by_one_and_a_half():
    attacker, defender = _pair()
    b = compute_damage(attacker, defender, build_move(power=40), ScriptedRng(0.5, 0.0))
    assert b.is_critical
    assert b.final_damage == 69
    assert 'critical' in b.formula


def test_type_multiplier_applies_when_supplied():
    attacker, defender = _pair()
    move = build_move(category='electric', power=40)
    super_eff = compute_damage(attacker, defender, move, ScriptedRng(0.0, 0.5), effectiveness('electric', 'water'))
    assert super_eff.type_multiplier == 2
    assert super_eff.final_damage == 85
    immune = compute_damage(attacker, defender, move, ScriptedRng(0.0, 0.5), effectiveness('electric', 'ground'))
    assert immune.final_damage == 0


def test_status_move_deals_nothing():
    attacker, defender = _pair()
    move = build_move(power=0)
    assert compute_damage(attacker, defender, move, ScriptedRng(0.0)) == STATUS_BREAKDOWN
    assert damage_range(attacker, defender, move) == (0, 0)


def test_minimum_one_damage():
    attacker = build_combatant(attack=1)
    defender = build_combatant(cid="foe-1", defense=100)
    rng = random.Random(3)
    for _ in range(50):
        assert compute_damage(attacker, defender, build_move(power=1), rng).final_damage == 1


def test_critical_rate_converges():
    rng = random.Random(2024)
    trials = 10_000
    crits = sum(1 for _ in range(trials) if roll_critical(rng))
    assert abs(crits / trials - 1 / 16) <= 0.01


def test_accuracy_rate_converges():
    rng = random.Random(99)
    move = build_move(accuracy=80)
    trials = 2000
    hits = sum(1 for _ in range(trials) if rolls_hit(move, rng))
    assert abs(hits / trials * 100 - 80) <= 5


def test_accuracy_boundaries():
    move = build_move(accuracy=80)
    assert rolls_hit(move, ScriptedRng(0.79))
    assert not rolls_hit(move, ScriptedRng(0.81))
    assert rolls_hit(build_move(accuracy=100), ScriptedRng(0.999))


def test_battle_message_clauses():
    assert battle_message('Pikachu', 'Growl', 0) == 'Pikachu used Growl!'
    msg = battle_message('Pikachu', 'Thunder Shock', 12, True, Effectiveness.SUPER)
    assert msg == "Pikachu used Thunder Shock! It dealt 12 damage! A critical hit! It's super effective!"
    assert battle_message('Pikachu', 'Thunder Shock', 0, False, Effectiveness.NONE).endswith("doesn't affect the target...")


def test_experience_gain_scales_with_level_gap():
    assert experience_gain(10, 10) == 100
    assert experience_gain(10, 12) == 144
    assert experience_gain(20, 5) == 25
