"""Battle records: combatants, moves and the closed enums around them.

Snapshots arrive as plain mappings (``from_snapshot``); parsing validates
ranges up front so nothing downstream has to re-check them.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from tallgrass.core.errors import ValidationError
from tallgrass.core.types import ElementType, parse_type

MAX_MOVES = 4
MAX_LEVEL = 100


class Side(str, Enum):
    SELF = "self"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.SELF else Side.SELF


class MoveClass(str, Enum):
    PHYSICAL = "physical"
    SPECIAL = "special"
    STATUS = "status"


class BattleKind(str, Enum):
    WILD = "wild"
    TRAINER = "trainer"


class Phase(str, Enum):
    COMMAND_SELECTION = "command-selection"
    RESOLVING = "resolving"
    ENDED = "ended"


class BattleStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class Winner(str, Enum):
    SELF = "self"
    OPPONENT = "opponent"
    DRAW = "draw"


class StatusCondition(str, Enum):
    NONE = "none"
    BURN = "burn"
    FREEZE = "freeze"
    PARALYSIS = "paralysis"
    POISON = "poison"
    SLEEP = "sleep"


E = TypeVar("E", bound=Enum)

def parse_enum(enum_cls: Type[E], value: Any, what: str = "") -> E:
    """``Enum(value)`` that reports unknown values as a ValidationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown {what or enum_cls.__name__}: {value!r}") from None


@dataclass
class Move:
    move_id: int
    name: str
    category: ElementType
    power: int = 0
    accuracy: int = 100
    max_pp: int = 0
    current_pp: int = 0
    move_class: MoveClass = MoveClass.PHYSICAL

    @property
    def is_status(self) -> bool:
        return self.power == 0

    @classmethod
    def from_snapshot(cls, raw: Mapping[str, Any]) -> "Move":
        try:
            move_id = int(raw["id"] if "id" in raw else raw["move_id"])
            name = str(raw["name"])
            power = int(raw.get("power", 0) or 0)
            accuracy = int(raw.get("accuracy", 100) if raw.get("accuracy") is not None else 100)
            max_pp = int(raw["max_pp"])
            current_pp = int(raw.get("current_pp", max_pp))
        except KeyError as e:
            raise ValidationError(f"Move snapshot missing field {e.args[0]!r}") from None
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Malformed move snapshot: {e}") from None
        category = parse_type(raw.get("category", raw.get("type", "")))
        move_class = parse_enum(MoveClass, raw.get("move_class", raw.get("classification", "physical")), "move class")
        move = cls(move_id, name, category, power, accuracy, max_pp, current_pp, move_class)
        move.validate()
        return move

    def validate(self):
        if not self.name:
            raise ValidationError("Move name must not be empty")
        if self.power < 0:
            raise ValidationError(f"{self.name}: power must be >= 0")
        if not 0 <= self.accuracy <= 100:
            raise ValidationError(f"{self.name}: accuracy must be within 0..100")
        if self.max_pp < 0 or not 0 <= self.current_pp <= self.max_pp:
            raise ValidationError(f"{self.name}: need 0 <= current_pp <= max_pp")

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["category"] = self.category.value
        d["move_class"] = self.move_class.value
        return d


@dataclass
class Combatant:
    combatant_id: str
    species_id: int
    name: str
    level: int
    current_hp: int
    max_hp: int
    attack: int
    defense: int
    types: Tuple[ElementType, ...]
    moves: List[Move] = field(default_factory=list)
    side: Side = Side.SELF
    status: StatusCondition = StatusCondition.NONE

    @property
    def hp_fraction(self) -> float:
        return self.current_hp / self.max_hp if self.max_hp > 0 else 0.0

    @property
    def is_fainted(self) -> bool:
        return self.current_hp <= 0

    def find_move(self, move_id: int) -> Optional[Move]:
        for m in self.moves:
            if m.move_id == move_id:
                return m
        return None

    def take_damage(self, amount: int) -> int:
        """Apply damage clamped at 0; returns the HP actually removed."""
        old = self.current_hp
        self.current_hp = max(0, self.current_hp - max(0, int(amount)))
        return old - self.current_hp

    @classmethod
    def from_snapshot(cls, raw: Mapping[str, Any], side: Optional[Side] = None) -> "Combatant":
        try:
            combatant_id = str(raw["id"] if "id" in raw else raw["combatant_id"])
            species_id = int(raw.get("species_id", 0))
            name = str(raw["name"])
            level = int(raw["level"])
            max_hp = int(raw["max_hp"])
            current_hp = int(raw.get("current_hp", raw.get("hp", max_hp)))
            attack = int(raw["attack"])
            defense = int(raw["defense"])
        except KeyError as e:
            raise ValidationError(f"Combatant snapshot missing field {e.args[0]!r}") from None
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Malformed combatant snapshot: {e}") from None
        raw_types = raw.get("types") or ["normal"]
        if isinstance(raw_types, str):
            raw_types = [raw_types]
        types = tuple(parse_type(t) for t in raw_types)
        moves = [m if isinstance(m, Move) else Move.from_snapshot(m) for m in raw.get("moves", [])]
        if side is None:
            side = parse_enum(Side, raw.get("side", "self"), "side")
        status = parse_enum(StatusCondition, raw.get("status") or "none", "status condition")
        c = cls(combatant_id, species_id, name, level, current_hp, max_hp, attack, defense,
                types, moves, side, status)
        c.validate()
        return c

    def validate(self):
        if not self.combatant_id:
            raise ValidationError("Combatant id must not be empty")
        if not 1 <= self.level <= MAX_LEVEL:
            raise ValidationError(f"{self.name}: level {self.level} out of range 1..{MAX_LEVEL}")
        if self.max_hp < 1 or not 0 <= self.current_hp <= self.max_hp:
            raise ValidationError(f"{self.name}: need 0 <= current_hp <= max_hp and max_hp >= 1")
        if self.attack < 1 or self.defense < 1:
            raise ValidationError(f"{self.name}: attack and defense must be >= 1")
        if not 1 <= len(self.types) <= 2 or len(set(self.types)) != len(self.types):
            raise ValidationError(f"{self.name}: a combatant has one or two distinct types")
        if len(self.moves) > MAX_MOVES:
            raise ValidationError(f"{self.name}: at most {MAX_MOVES} moves")
        ids = [m.move_id for m in self.moves]
        if len(set(ids)) != len(ids):
            raise ValidationError(f"{self.name}: duplicate move ids")
        for m in self.moves:
            m.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.combatant_id,
            "species_id": self.species_id,
            "name": self.name,
            "level": self.level,
            "current_hp": self.current_hp,
            "max_hp": self.max_hp,
            "attack": self.attack,
            "defense": self.defense,
            "types": [t.value for t in self.types],
            "moves": [m.to_dict() for m in self.moves],
            "side": self.side.value,
            "status": self.status.value,
        }


__all__ = [
    "Side", "MoveClass", "BattleKind", "Phase", "BattleStatus", "Winner",
    "StatusCondition", "Move", "Combatant", "parse_enum", "MAX_MOVES", "MAX_LEVEL",
]
