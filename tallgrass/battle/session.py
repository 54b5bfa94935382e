"""Battle session state: combatants, phase, turn counter and the turn log."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from .models import BattleKind, BattleStatus, Combatant, Phase, Side, Winner


@dataclass(frozen=True)
class TurnLogEntry:
    turn: int
    message: str
    side: Optional[Side] = None      # None for system entries (start, end)
    move_id: Optional[int] = None
    move_name: Optional[str] = None
    damage: int = 0
    critical: bool = False
    missed: bool = False


@dataclass
class BattleStats:
    """Running totals from the self side's point of view."""
    turns: int = 0
    damage_dealt: int = 0
    damage_received: int = 0
    moves_used: int = 0
    critical_hits: int = 0
    misses: int = 0

    def snapshot(self) -> "BattleStats":
        return BattleStats(**vars(self))


@dataclass
class BattleSession:
    session_id: str
    self_combatant: Combatant
    opponent: Combatant
    kind: BattleKind = BattleKind.WILD
    turn: int = 1
    phase: Phase = Phase.COMMAND_SELECTION
    status: BattleStatus = BattleStatus.ACTIVE
    winner: Optional[Winner] = None
    next_actor: Side = Side.SELF
    end_reason: Optional[str] = None
    log: List[TurnLogEntry] = field(default_factory=list)
    stats: BattleStats = field(default_factory=BattleStats)

    @property
    def is_active(self) -> bool:
        return self.status is BattleStatus.ACTIVE

    def combatant(self, side: Side) -> Combatant:
        return self.self_combatant if side is Side.SELF else self.opponent

    def find_combatant(self, combatant_id: str) -> Optional[Combatant]:
        for c in (self.self_combatant, self.opponent):
            if c.combatant_id == combatant_id:
                return c
        return None

    def append(self, entry: TurnLogEntry):
        self.log.append(entry)

    def recent(self, limit: int) -> List[TurnLogEntry]:
        return self.log[-limit:] if limit > 0 else []

    def end(self, winner: Optional[Winner] = None, reason: Optional[str] = None):
        self.phase = Phase.ENDED
        self.status = BattleStatus.ENDED
        self.winner = winner
        self.end_reason = reason


__all__ = ["TurnLogEntry", "BattleStats", "BattleSession"]
