"""Global type metadata: the closed category set, colors & abbreviations.

Provides:
  ElementType: the closed set of attack/defense categories (Gen IV, no Fairy)
  TYPE_COLORS_HEX: mapping type -> hex color string (#RRGGBB)
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  ABBREVIATION_TYPES: reverse mapping
  parse_type / type_abbreviation / format_types helpers
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Iterable, Union

from tallgrass.core.errors import ValidationError


class ElementType(str, Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"

    @property
    def label(self) -> str:
        return self.value.capitalize()


TYPE_COLORS_HEX: Dict[ElementType, str] = {
    ElementType.NORMAL: "#A8A77A",
    ElementType.FIRE: "#EE8130",
    ElementType.WATER: "#6390F0",
    ElementType.ELECTRIC: "#F7D02C",
    ElementType.GRASS: "#7AC74C",
    ElementType.ICE: "#96D9D6",
    ElementType.FIGHTING: "#C22E28",
    ElementType.POISON: "#A33EA1",
    ElementType.GROUND: "#E2BF65",
    ElementType.FLYING: "#A98FF3",
    ElementType.PSYCHIC: "#F95587",
    ElementType.BUG: "#A6B91A",
    ElementType.ROCK: "#B6A136",
    ElementType.GHOST: "#735797",
    ElementType.DRAGON: "#6F35FC",
    ElementType.DARK: "#705746",
    ElementType.STEEL: "#B7B7CE",
}

TYPE_ABBREVIATIONS: Dict[ElementType, str] = {
    ElementType.NORMAL: "NRM",
    ElementType.FIRE: "FIR",
    ElementType.WATER: "WTR",
    ElementType.GRASS: "GRS",
    ElementType.ELECTRIC: "ELE",
    ElementType.ICE: "ICE",
    ElementType.FIGHTING: "FGT",
    ElementType.POISON: "PSN",
    ElementType.GROUND: "GRN",
    ElementType.FLYING: "FLY",
    ElementType.PSYCHIC: "PSY",
    ElementType.BUG: "BUG",
    ElementType.ROCK: "RCK",
    ElementType.GHOST: "GHO",
    ElementType.DRAGON: "DRA",
    ElementType.DARK: "DRK",
    ElementType.STEEL: "STL",
}

ABBREVIATION_TYPES: Dict[str, ElementType] = {abbr: t for t, abbr in TYPE_ABBREVIATIONS.items()}

TypeLike = Union[ElementType, str]

def parse_type(value: TypeLike) -> ElementType:
    """Accept an enum member, a type name, or a 3-letter abbreviation."""
    if isinstance(value, ElementType):
        return value
    raw = str(value).strip()
    if raw.upper() in ABBREVIATION_TYPES:
        return ABBREVIATION_TYPES[raw.upper()]
    try:
        return ElementType(raw.lower())
    except ValueError:
        raise ValidationError(f"Unknown type category: {value!r}") from None

def type_abbreviation(type_name: TypeLike) -> str:
    return TYPE_ABBREVIATIONS[parse_type(type_name)]

def type_color(type_name: TypeLike) -> str:
    return TYPE_COLORS_HEX[parse_type(type_name)]

def format_types(types: Iterable[TypeLike]) -> str:
    return '/'.join(type_abbreviation(t) for t in types)

__all__ = [
    'ElementType','TYPE_COLORS_HEX','TYPE_ABBREVIATIONS','ABBREVIATION_TYPES',
    'parse_type','type_abbreviation','type_color','format_types',
]
