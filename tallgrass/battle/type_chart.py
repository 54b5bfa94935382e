"""Gen IV type chart (no Fairy) and derived effectiveness queries.

Every (attack, defense) pair is defined: the sparse table below lists the
non-neutral entries and ``_CHART`` is expanded to the full square at import.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from tallgrass.core.errors import TypeChartError
from tallgrass.core.types import ElementType, TypeLike, parse_type

_SPARSE: Dict[str, Dict[str, float]] = {
    "normal":  {"rock": 0.5, "ghost": 0.0, "steel": 0.5},
    "fire":    {"fire": 0.5, "water": 0.5, "grass": 2.0, "ice": 2.0, "bug": 2.0, "rock": 0.5, "dragon": 0.5, "steel": 2.0},
    "water":   {"fire": 2.0, "water": 0.5, "grass": 0.5, "ground": 2.0, "rock": 2.0, "dragon": 0.5},
    "grass":   {"fire": 0.5, "water": 2.0, "grass": 0.5, "poison": 0.5, "ground": 2.0, "flying": 0.5, "bug": 0.5, "rock": 2.0, "dragon": 0.5, "steel": 0.5},
    "electric":{"water": 2.0, "electric": 0.5, "grass": 0.5, "ground": 0.0, "flying": 2.0, "dragon": 0.5},
    "ice":     {"fire": 0.5, "water": 0.5, "ice": 0.5, "grass": 2.0, "ground": 2.0, "flying": 2.0, "dragon": 2.0, "steel": 0.5},
    "fighting":{"normal": 2.0, "ice": 2.0, "rock": 2.0, "dark": 2.0, "steel": 2.0, "poison": 0.5, "flying": 0.5, "psychic": 0.5, "bug": 0.5, "ghost": 0.0},
    "poison":  {"grass": 2.0, "poison": 0.5, "ground": 0.5, "rock": 0.5, "ghost": 0.5, "steel": 0.0},
    "ground":  {"fire": 2.0, "electric": 2.0, "poison": 2.0, "rock": 2.0, "steel": 2.0, "grass": 0.5, "bug": 0.5, "flying": 0.0},
    "flying":  {"grass": 2.0, "fighting": 2.0, "bug": 2.0, "electric": 0.5, "rock": 0.5, "steel": 0.5},
    "psychic": {"fighting": 2.0, "poison": 2.0, "psychic": 0.5, "steel": 0.5, "dark": 0.0},
    "bug":     {"grass": 2.0, "psychic": 2.0, "dark": 2.0, "fire": 0.5, "fighting": 0.5, "poison": 0.5, "flying": 0.5, "ghost": 0.5, "steel": 0.5},
    "rock":    {"fire": 2.0, "ice": 2.0, "flying": 2.0, "bug": 2.0, "fighting": 0.5, "ground": 0.5, "steel": 0.5},
    "ghost":   {"ghost": 2.0, "psychic": 2.0, "dark": 0.5, "steel": 0.5, "normal": 0.0},
    "dragon":  {"dragon": 2.0, "steel": 0.5},
    "dark":    {"ghost": 2.0, "psychic": 2.0, "fighting": 0.5, "dark": 0.5, "steel": 0.5},
    "steel":   {"ice": 2.0, "rock": 2.0, "fire": 0.5, "water": 0.5, "electric": 0.5, "steel": 0.5},
}

_CHART: Dict[ElementType, Dict[ElementType, float]] = {
    atk: {dfn: _SPARSE.get(atk.value, {}).get(dfn.value, 1.0) for dfn in ElementType}
    for atk in ElementType
}


class Effectiveness(str, Enum):
    NONE = "none"
    REDUCED = "reduced"
    NORMAL = "normal"
    SUPER = "super"


EFFECTIVENESS_MESSAGES: Dict[Effectiveness, str] = {
    Effectiveness.SUPER: "It's super effective!",
    Effectiveness.REDUCED: "It's not very effective...",
    Effectiveness.NONE: "It doesn't affect the target...",
    Effectiveness.NORMAL: "",
}


@dataclass(frozen=True)
class TypeEffectiveness:
    multiplier: float
    label: Effectiveness
    is_critical: bool
    is_weak: bool
    is_immune: bool

    @classmethod
    def from_multiplier(cls, multiplier: float) -> "TypeEffectiveness":
        if multiplier == 0:
            label = Effectiveness.NONE
        elif multiplier < 1:
            label = Effectiveness.REDUCED
        elif multiplier > 1:
            label = Effectiveness.SUPER
        else:
            label = Effectiveness.NORMAL
        return cls(
            multiplier=multiplier,
            label=label,
            is_critical=multiplier >= 2,
            is_weak=0 < multiplier < 1,
            is_immune=multiplier == 0,
        )

    @property
    def message(self) -> str:
        return EFFECTIVENESS_MESSAGES[self.label]


NEUTRAL = TypeEffectiveness.from_multiplier(1.0)


def _lookup(attack: ElementType, defense: ElementType) -> float:
    try:
        return _CHART[attack][defense]
    except KeyError:
        raise TypeChartError(getattr(attack, "value", str(attack)), getattr(defense, "value", str(defense))) from None


def effectiveness(attack: TypeLike, defense: TypeLike) -> TypeEffectiveness:
    return TypeEffectiveness.from_multiplier(_lookup(parse_type(attack), parse_type(defense)))


def dual_effectiveness(attack: TypeLike, defense1: TypeLike, defense2: Optional[TypeLike] = None) -> TypeEffectiveness:
    """Product of the two single-type multipliers; one type is the plain case."""
    atk = parse_type(attack)
    mult = _lookup(atk, parse_type(defense1))
    if defense2 is not None:
        d2 = parse_type(defense2)
        if d2 != parse_type(defense1):
            mult *= _lookup(atk, d2)
    return TypeEffectiveness.from_multiplier(mult)


def against(attack: TypeLike, defense_types: Sequence[TypeLike]) -> TypeEffectiveness:
    """Effectiveness against a combatant's 1 or 2 types."""
    if not defense_types:
        return NEUTRAL
    second = defense_types[1] if len(defense_types) > 1 else None
    return dual_effectiveness(attack, defense_types[0], second)


def weak_to(defense: TypeLike) -> List[ElementType]:
    d = parse_type(defense)
    return [a for a in ElementType if _lookup(a, d) > 1]


def resistant_to(defense: TypeLike) -> List[ElementType]:
    d = parse_type(defense)
    return [a for a in ElementType if 0 < _lookup(a, d) < 1]


def immune_to(defense: TypeLike) -> List[ElementType]:
    d = parse_type(defense)
    return [a for a in ElementType if _lookup(a, d) == 0]


def explain(attack: TypeLike, defense: TypeLike) -> str:
    atk, dfn = parse_type(attack), parse_type(defense)
    eff = effectiveness(atk, dfn)
    if eff.is_immune:
        return f"{atk.label} moves have no effect on {dfn.label} types."
    if eff.is_critical:
        return f"{atk.label} moves are super effective against {dfn.label} types ({eff.multiplier:g}x damage)."
    if eff.is_weak:
        return f"{atk.label} moves are not very effective against {dfn.label} types ({eff.multiplier:g}x damage)."
    return f"{atk.label} moves deal normal damage to {dfn.label} types."


@dataclass(frozen=True)
class BattleAdvice:
    best: List[ElementType]
    worst: List[ElementType]
    advice: str


def battle_advice(move_categories: Iterable[TypeLike], defense: TypeLike) -> BattleAdvice:
    """Sort the given attack categories into strong and poor picks vs one defense type."""
    dfn = parse_type(defense)
    best: List[ElementType] = []
    worst: List[ElementType] = []
    neutral: List[ElementType] = []
    seen = set()
    for raw in move_categories:
        atk = parse_type(raw)
        if atk in seen:
            continue
        seen.add(atk)
        mult = _lookup(atk, dfn)
        if mult > 1:
            best.append(atk)
        elif mult < 1:
            worst.append(atk)
        else:
            neutral.append(atk)
    if best:
        names = ", ".join(t.label for t in best)
        advice = f"Use {names} moves for super effective damage!"
    elif neutral:
        names = ", ".join(t.label for t in neutral)
        advice = f"No super effective moves. {names} moves deal normal damage and are a safe choice."
    else:
        advice = "No super effective moves available. Just fight normally!"
    return BattleAdvice(best=best, worst=worst, advice=advice)


__all__ = [
    "Effectiveness", "EFFECTIVENESS_MESSAGES", "TypeEffectiveness", "NEUTRAL",
    "effectiveness", "dual_effectiveness", "against", "weak_to", "resistant_to",
    "immune_to", "explain", "BattleAdvice", "battle_advice",
]
