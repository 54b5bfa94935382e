"""Opponent decision making.

A ``BattleAI`` is built once per side with a difficulty tier and a
personality. Tiers differ in how they score moves; personality only decides
between moves that tie on the tier's own score.
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from tallgrass.core.logging import logger
from tallgrass.system.settings import SettingsData
from .mechanics import RandomSource
from .models import BattleKind, Combatant, Move
from . import pp
from .type_chart import against


class Difficulty(str, Enum):
    RANDOM = "random"
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    CHAMPION = "champion"


class Personality(str, Enum):
    AGGRESSIVE = "aggressive"
    DEFENSIVE = "defensive"
    CALCULATING = "calculating"
    BALANCED = "balanced"


class ActionKind(str, Enum):
    USE_MOVE = "use-move"
    FLEE = "flee"
    SWITCH = "switch"   # defined, never produced


# Confidence grows with tier sophistication
TIER_CONFIDENCE = {
    Difficulty.RANDOM: 0.5,
    Difficulty.NOVICE: 0.6,
    Difficulty.INTERMEDIATE: 0.7,
    Difficulty.ADVANCED: 0.8,
    Difficulty.CHAMPION: 0.9,
}

_EPS = 1e-9


@dataclass(frozen=True)
class AIActionDecision:
    kind: ActionKind
    move_id: Optional[int]
    confidence: float
    priority: float
    reasoning: str


@dataclass(frozen=True)
class SituationAnalysis:
    self_hp_fraction: float
    opponent_hp_fraction: float
    has_advantage: bool
    should_attack: bool
    should_defend: bool
    is_critical: bool


@dataclass(frozen=True)
class MoveEvaluation:
    move: Move
    damage_score: float
    type_score: float
    pp_score: float

    @property
    def total_score(self) -> float:
        return self.damage_score * 0.4 + self.type_score * 0.4 + self.pp_score * 0.2

    @property
    def is_recommended(self) -> bool:
        return self.total_score > 60


def analyze(self_c: Combatant, opponent: Combatant) -> SituationAnalysis:
    mine = self_c.hp_fraction
    theirs = opponent.hp_fraction
    return SituationAnalysis(
        self_hp_fraction=mine,
        opponent_hp_fraction=theirs,
        has_advantage=mine > theirs * 1.2,
        should_attack=mine > 0.7 and theirs < 0.5,
        should_defend=mine < 0.3,
        is_critical=mine < 0.2 or theirs < 0.2,
    )


def evaluate_move(move: Move, opponent: Combatant) -> MoveEvaluation:
    damage = min(100.0, move.power / 120 * 100)
    type_score = against(move.category, opponent.types).multiplier * 50
    pp_score = pp.status(move).pp_percentage * 100
    return MoveEvaluation(move, damage, type_score, pp_score)


def evaluate_moves(self_c: Combatant, opponent: Combatant) -> List[MoveEvaluation]:
    return [evaluate_move(m, opponent) for m in self_c.moves if m.current_pp > 0]


def _personality_key(personality: Personality) -> Optional[Callable[[MoveEvaluation], float]]:
    if personality is Personality.AGGRESSIVE:
        return lambda e: e.move.power
    if personality is Personality.DEFENSIVE:
        return lambda e: e.pp_score
    if personality is Personality.CALCULATING:
        return lambda e: e.move.accuracy
    return None


class BattleAI:
    def __init__(self, difficulty: Difficulty = Difficulty.INTERMEDIATE,
                 personality: Personality = Personality.BALANCED,
                 rng: Optional[RandomSource] = None,
                 settings: Optional[SettingsData] = None):
        self.difficulty = difficulty
        self.personality = personality
        self.rng = rng or random.Random()
        self.settings = settings or SettingsData()

    def decide_action(self, self_c: Combatant, opponent: Combatant,
                      kind: BattleKind = BattleKind.WILD) -> AIActionDecision:
        if pp.usable_count(self_c.moves) == 0:
            decision = AIActionDecision(ActionKind.FLEE, None, 1.0, 1.0, "out of usable moves")
        else:
            situation = analyze(self_c, opponent)
            handler = {
                Difficulty.RANDOM: self._random,
                Difficulty.NOVICE: self._novice,
                Difficulty.INTERMEDIATE: self._intermediate,
                Difficulty.ADVANCED: self._advanced,
                Difficulty.CHAMPION: self._champion,
            }[self.difficulty]
            decision = handler(self_c, opponent, situation, kind)
        logger.debug("AIDecision", combatant=self_c.combatant_id, tier=self.difficulty.value,
                     kind=decision.kind.value, move=decision.move_id, confidence=decision.confidence)
        return decision

    # ------------------------------------------------------------------
    # Selection helpers
    # ------------------------------------------------------------------
    def _pick(self, evaluations: Sequence[MoveEvaluation], score: Callable[[MoveEvaluation], float]) -> MoveEvaluation:
        """Highest score wins; ties go to personality, then to move order."""
        best = max(score(e) for e in evaluations)
        tied = [e for e in evaluations if score(e) >= best - _EPS]
        key = _personality_key(self.personality)
        if key is None or len(tied) == 1:
            return tied[0]
        top = max(key(e) for e in tied)
        return next(e for e in tied if key(e) >= top - _EPS)

    def _use(self, ev: MoveEvaluation, reasoning: str) -> AIActionDecision:
        conf = TIER_CONFIDENCE[self.difficulty]
        return AIActionDecision(ActionKind.USE_MOVE, ev.move.move_id, conf, conf, reasoning)

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------
    def _random(self, self_c, opponent, situation, kind) -> AIActionDecision:
        usable = [m for m in self_c.moves if m.current_pp > 0]
        idx = min(int(self.rng.random() * len(usable)), len(usable) - 1)
        move = usable[idx]
        return AIActionDecision(ActionKind.USE_MOVE, move.move_id, TIER_CONFIDENCE[Difficulty.RANDOM],
                                self.rng.random(), f"picked {move.name} at random")

    def _novice(self, self_c, opponent, situation, kind) -> AIActionDecision:
        if (kind is BattleKind.WILD and situation.self_hp_fraction < 0.1
                and self.rng.random() < self.settings.novice_flee_chance):
            return AIActionDecision(ActionKind.FLEE, None, 0.7, 0.9, "HP is dangerously low, fleeing")
        best = self._pick(evaluate_moves(self_c, opponent), lambda e: e.move.power)
        return self._use(best, f"chose the strongest move {best.move.name}")

    def _intermediate(self, self_c, opponent, situation, kind) -> AIActionDecision:
        if (kind is BattleKind.WILD and situation.is_critical and situation.self_hp_fraction < 0.15
                and self.rng.random() < self.settings.intermediate_flee_chance):
            return AIActionDecision(ActionKind.FLEE, None, 0.8, 0.9, "critical situation, fleeing")
        best = self._pick(evaluate_moves(self_c, opponent), lambda e: e.total_score)
        return self._use(best, f"chose {best.move.name} with the best overall score ({best.total_score:.1f})")

    def _advanced(self, self_c, opponent, situation, kind) -> AIActionDecision:
        evals = evaluate_moves(self_c, opponent)
        if situation.should_attack:
            best = self._pick(evals, lambda e: e.damage_score + e.type_score)
            why = "pressing the attack"
        elif situation.should_defend:
            best = self._pick(evals, lambda e: e.pp_score)
            why = "conserving PP"
        else:
            best = self._pick(evals, lambda e: e.total_score)
            why = "balanced play"
        return self._use(best, f"{why}: chose {best.move.name}")

    def _champion(self, self_c, opponent, situation, kind) -> AIActionDecision:
        def adjusted(e: MoveEvaluation) -> float:
            score = e.total_score
            if situation.is_critical:
                score += e.damage_score * 0.3
            if situation.should_attack:
                score += e.type_score * 0.2
            if e.pp_score > 80:
                score += 10
            return score

        best = self._pick(evaluate_moves(self_c, opponent), adjusted)
        return self._use(best, f"champion read: chose {best.move.name} ({adjusted(best):.1f})")


def simulate_decisions(self_c: Combatant, opponent: Combatant, turns: int = 10,
                       difficulty: Difficulty = Difficulty.INTERMEDIATE,
                       rng: Optional[RandomSource] = None,
                       kind: BattleKind = BattleKind.WILD,
                       personality: Personality = Personality.BALANCED) -> List[AIActionDecision]:
    """Repeat decisions on unchanged combatants, stopping at the first flee."""
    ai = BattleAI(difficulty, personality, rng)
    out: List[AIActionDecision] = []
    for _ in range(turns):
        decision = ai.decide_action(self_c, opponent, kind)
        out.append(decision)
        if decision.kind is ActionKind.FLEE:
            break
    return out


__all__ = [
    "Difficulty", "Personality", "ActionKind", "TIER_CONFIDENCE", "AIActionDecision",
    "SituationAnalysis", "MoveEvaluation", "analyze", "evaluate_move", "evaluate_moves",
    "BattleAI", "simulate_decisions",
]
