# Ensure project root is on sys.path for tests; shared battle fixtures below
import sys, pathlib
root = pathlib.Path(__file__).resolve().parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

import pytest

from tallgrass.core.types import ElementType
from tallgrass.battle.models import Combatant, Move, MoveClass, Side


class ScriptedRng:
    """Replays a fixed list of draws, then repeats the last one."""
    def __init__(self, *values: float):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        v = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return v


def build_move(move_id=1, name="Tackle", category="normal", power=40, accuracy=100,
               max_pp=35, current_pp=None, move_class=MoveClass.PHYSICAL) -> Move:
    return Move(move_id, name, ElementType(category), power, accuracy, max_pp,
                max_pp if current_pp is None else current_pp, move_class)


def build_combatant(cid="self-1", name="Turtwig", level=10, hp=50, max_hp=None, attack=50,
                    defense=40, types=("normal",), moves=None, side=Side.SELF) -> Combatant:
    return Combatant(cid, 1, name, level, hp, max_hp if max_hp is not None else hp, attack, defense,
                     tuple(ElementType(t) for t in types),
                     list(moves) if moves is not None else [build_move()], side)


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def make_move():
    return build_move


@pytest.fixture
def make_combatant():
    return build_combatant
