"""Discriminated results returned by the service operations."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from tallgrass.core.errors import BattleError, ErrorCategory, RejectReason, TallgrassError, error_for
from .ai import AIActionDecision
from .models import BattleKind, BattleStatus, Phase, Side, Winner
from .session import BattleStats, TurnLogEntry
from .type_chart import Effectiveness

T = TypeVar("T")


@dataclass(frozen=True)
class Rejection:
    reason: RejectReason
    detail: str

    @property
    def category(self) -> ErrorCategory:
        return self.reason.category

    @classmethod
    def from_error(cls, err: BattleError) -> "Rejection":
        return cls(err.reason, err.detail)


@dataclass(frozen=True)
class Result(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[Rejection] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: RejectReason, detail: str) -> "Result[T]":
        return cls(ok=False, error=Rejection(reason, detail))

    def unwrap(self) -> T:
        """Return the value or raise the exception matching the rejection."""
        if not self.ok:
            if self.error is None:
                raise TallgrassError("failed result carries no rejection")
            raise error_for(self.error.reason, self.error.detail)
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class StartOutcome:
    session_id: str
    kind: BattleKind
    phase: Phase
    turn: int
    entry: TurnLogEntry


@dataclass(frozen=True)
class UseMoveOutcome:
    session_id: str
    side: Side
    move_id: int
    move_name: str
    hit: bool
    damage: int
    critical: bool
    effectiveness: Effectiveness
    self_hp: int
    opponent_hp: int
    status: BattleStatus
    winner: Optional[Winner]
    message: str
    turn: int
    experience_gained: Optional[int] = None
    final_damage: int = 0


@dataclass(frozen=True)
class EndOutcome:
    session_id: str
    status: BattleStatus
    winner: Optional[Winner]
    reason: Optional[str]
    entry: TurnLogEntry


@dataclass(frozen=True)
class TurnOutcome:
    """What an AI-driven turn did: a move resolution or a forced end."""
    decision: AIActionDecision
    move: Optional[UseMoveOutcome] = None
    ended: Optional[EndOutcome] = None


@dataclass(frozen=True)
class StatusReport:
    session_id: str
    kind: BattleKind
    turn: int
    phase: Phase
    status: BattleStatus
    winner: Optional[Winner]
    next_actor: Side
    self_combatant: Dict[str, Any]
    opponent: Dict[str, Any]
    recent_log: Tuple[TurnLogEntry, ...]
    stats: BattleStats

    @property
    def self_hp(self) -> int:
        return self.self_combatant["current_hp"]

    @property
    def opponent_hp(self) -> int:
        return self.opponent["current_hp"]


__all__ = [
    "Rejection", "Result", "StartOutcome", "UseMoveOutcome", "EndOutcome",
    "TurnOutcome", "StatusReport",
]
