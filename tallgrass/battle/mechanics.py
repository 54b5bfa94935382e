"""Damage, accuracy and critical-hit mechanics.

All randomness comes from an injected ``RandomSource`` (``random.Random``
qualifies), never from the module-level ``random`` functions.
"""
from __future__ import annotations
from dataclasses import dataclass
from math import floor
from typing import Optional, Protocol, Tuple

from .models import Combatant, Move
from .type_chart import Effectiveness, TypeEffectiveness, EFFECTIVENESS_MESSAGES

CRIT_CHANCE = 1 / 16
CRIT_MULTIPLIER = 1.5
RANDOM_FLOOR = 0.85
RANDOM_SPAN = 0.15


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class DamageBreakdown:
    base_damage: int
    random_factor: float
    critical_multiplier: float
    type_multiplier: float
    final_damage: int
    formula: str

    @property
    def is_critical(self) -> bool:
        return self.critical_multiplier > 1


STATUS_BREAKDOWN = DamageBreakdown(0, 0.0, 0.0, 0.0, 0, "status move, no damage")


def base_damage(attacker: Combatant, defender: Combatant, move: Move) -> int:
    return floor(attacker.attack * move.power / defender.defense)


def roll_critical(rng: RandomSource) -> bool:
    return rng.random() < CRIT_CHANCE


def rolls_hit(move: Move, rng: RandomSource) -> bool:
    return rng.random() * 100 <= move.accuracy


def compute_damage(attacker: Combatant, defender: Combatant, move: Move, rng: RandomSource,
                   type_effect: Optional[TypeEffectiveness] = None) -> DamageBreakdown:
    """Resolve one hit. ``type_effect`` of None means the chart is not in play."""
    if move.power == 0:
        return STATUS_BREAKDOWN
    base = base_damage(attacker, defender, move)
    random_factor = RANDOM_FLOOR + rng.random() * RANDOM_SPAN
    crit = roll_critical(rng)
    crit_mult = CRIT_MULTIPLIER if crit else 1.0
    type_mult = type_effect.multiplier if type_effect is not None else 1.0
    if type_mult == 0:
        final = 0
    else:
        final = max(1, floor(base * random_factor * crit_mult * type_mult))
    formula = f"({attacker.attack} x {move.power}) / {defender.defense} = {base} x {random_factor:.2f}"
    if crit:
        formula += f" x {CRIT_MULTIPLIER:g}(critical)"
    if type_mult != 1.0:
        formula += f" x {type_mult:g}(type)"
    formula += f" = {final}"
    return DamageBreakdown(base, random_factor, crit_mult, type_mult, final, formula)


def damage_range(attacker: Combatant, defender: Combatant, move: Move) -> Tuple[int, int]:
    if move.power == 0:
        return 0, 0
    base = base_damage(attacker, defender, move)
    return max(1, floor(base * RANDOM_FLOOR)), max(1, floor(base * 1.0))


def battle_message(attacker_name: str, move_name: str, damage: int, critical: bool = False,
                   label: Effectiveness = Effectiveness.NORMAL) -> str:
    msg = f"{attacker_name} used {move_name}!"
    if damage > 0:
        msg += f" It dealt {damage} damage!"
        if critical:
            msg += " A critical hit!"
        extra = EFFECTIVENESS_MESSAGES[label]
        if extra:
            msg += f" {extra}"
    elif label is Effectiveness.NONE:
        msg += f" {EFFECTIVENESS_MESSAGES[label]}"
    return msg


def experience_gain(winner_level: int, loser_level: int) -> int:
    base = loser_level * 10
    scale = max(0.5, 1 + (loser_level - winner_level) * 0.1)
    return floor(base * scale)


__all__ = [
    "RandomSource", "DamageBreakdown", "STATUS_BREAKDOWN", "CRIT_CHANCE", "CRIT_MULTIPLIER",
    "base_damage", "roll_critical", "rolls_hit", "compute_damage", "damage_range",
    "battle_message", "experience_gain",
]
