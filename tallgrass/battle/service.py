"""Battle service: the operation surface callers use.

Sessions live in an in-memory registry keyed by id. Each session gets its
own ``random.Random`` so battles never share random state. Every operation
returns a :class:`Result`; typed errors raised inside the core are turned
into rejections here.
"""
from __future__ import annotations
import random
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from tallgrass.core.errors import BattleError, RejectReason, StateError, ValidationError
from tallgrass.core.logging import logger
from tallgrass.system.settings import Settings, SettingsData
from .ai import ActionKind, BattleAI, Difficulty, Personality
from .core import BattleCore
from .models import BattleKind, Combatant, Side, parse_enum
from .results import EndOutcome, Result, StartOutcome, StatusReport, TurnOutcome, UseMoveOutcome
from .session import BattleSession, TurnLogEntry

SnapshotLike = Union[Combatant, Mapping[str, Any]]


def default_id_factory() -> str:
    return f"battle-{uuid.uuid4()}"


@dataclass
class _Entry:
    session: BattleSession
    core: BattleCore
    ais: Dict[Side, BattleAI]


class BattleService:
    def __init__(self, settings: Optional[Union[Settings, SettingsData]] = None,
                 id_factory: Optional[Callable[[], str]] = None):
        if isinstance(settings, Settings):
            settings = settings.data
        self.settings: SettingsData = settings or SettingsData()
        self.id_factory = id_factory or default_id_factory
        self._sessions: Dict[str, _Entry] = {}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _get(self, session_id: str) -> _Entry:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise StateError(f"No battle with id {session_id!r}", RejectReason.SESSION_NOT_FOUND)
        return entry

    def _reject(self, op: str, err: BattleError) -> Result:
        logger.warn("BattleRejected", op=op, reason=err.reason.value, detail=err.detail)
        return Result.failure(err.reason, err.detail)

    @staticmethod
    def _combatant(snapshot: SnapshotLike, side: Side) -> Combatant:
        if isinstance(snapshot, Combatant):
            c = Combatant.from_snapshot(snapshot.to_dict(), side=side)
        else:
            c = Combatant.from_snapshot(snapshot, side=side)
        return c

    def session(self, session_id: str) -> Optional[BattleSession]:
        entry = self._sessions.get(session_id)
        return entry.session if entry else None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def start_battle(self, self_snapshot: SnapshotLike, opponent_snapshot: SnapshotLike,
                     kind: Union[BattleKind, str] = BattleKind.WILD, *,
                     seed: Optional[int] = None,
                     session_id: Optional[str] = None,
                     difficulty: Union[Difficulty, str, None] = None,
                     personality: Union[Personality, str, None] = None,
                     self_difficulty: Union[Difficulty, str, None] = None) -> Result[StartOutcome]:
        try:
            kind = parse_enum(BattleKind, kind, "battle kind")
            diff = parse_enum(Difficulty, difficulty or self.settings.default_difficulty, "difficulty")
            self_diff = parse_enum(Difficulty, self_difficulty or self.settings.default_difficulty, "difficulty")
            pers = parse_enum(Personality, personality or self.settings.default_personality, "personality")
            mine = self._combatant(self_snapshot, Side.SELF)
            theirs = self._combatant(opponent_snapshot, Side.OPPONENT)
            if mine.is_fainted or theirs.is_fainted:
                raise ValidationError("Both combatants must have HP left to start a battle")
            if mine.combatant_id == theirs.combatant_id:
                raise ValidationError("Combatant ids must differ")
            sid = session_id or self.id_factory()
            if sid in self._sessions:
                raise ValidationError(f"Battle id {sid!r} is already in use")
        except BattleError as err:
            return self._reject("start_battle", err)

        rng = random.Random(seed)
        session = BattleSession(sid, mine, theirs, kind)
        if kind is BattleKind.WILD:
            intro = f"A wild {theirs.name} appeared!"
        else:
            intro = f"{theirs.name} wants to battle!"
        entry = TurnLogEntry(session.turn, intro)
        session.append(entry)
        self._sessions[sid] = _Entry(
            session=session,
            core=BattleCore(rng, self.settings),
            ais={
                Side.OPPONENT: BattleAI(diff, pers, rng, self.settings),
                Side.SELF: BattleAI(self_diff, Personality.BALANCED, rng, self.settings),
            },
        )
        logger.info("BattleStart", battle_id=sid, kind=kind.value, player=mine.name, opponent=theirs.name)
        return Result.success(StartOutcome(sid, kind, session.phase, session.turn, entry))

    def use_move(self, session_id: str, combatant_id: str, move_id: int,
                 target_side: Union[Side, str] = Side.OPPONENT) -> Result[UseMoveOutcome]:
        try:
            target = parse_enum(Side, target_side, "target side")
            entry = self._get(session_id)
            outcome = entry.core.use_move(entry.session, combatant_id, move_id, target)
        except BattleError as err:
            return self._reject("use_move", err)
        return Result.success(outcome)

    def opponent_turn(self, session_id: str) -> Result[TurnOutcome]:
        return self.ai_turn(session_id, Side.OPPONENT)

    def ai_turn(self, session_id: str, side: Union[Side, str] = Side.OPPONENT) -> Result[TurnOutcome]:
        """Let the AI of ``side`` pick and resolve its action."""
        try:
            side = parse_enum(Side, side, "side")
            entry = self._get(session_id)
            session = entry.session
            if not session.is_active:
                raise StateError(f"Battle {session_id} has already ended", RejectReason.SESSION_ENDED)
            actor = session.combatant(side)
            decision = entry.ais[side].decide_action(actor, session.combatant(side.other), session.kind)
            if decision.kind is ActionKind.SWITCH:
                raise ValidationError("Switching combatants is not supported yet", RejectReason.NOT_SUPPORTED)
            if decision.kind is ActionKind.FLEE:
                ended = entry.core.forfeit(session, decision.reasoning, side=side)
                return Result.success(TurnOutcome(decision, ended=ended))
            if decision.move_id is None:
                raise ValidationError("AI chose to attack without picking a move")
            outcome = entry.core.use_move(session, actor.combatant_id, decision.move_id, side.other)
        except BattleError as err:
            return self._reject("ai_turn", err)
        return Result.success(TurnOutcome(decision, move=outcome))

    def switch(self, session_id: str, combatant_id: str) -> Result[None]:
        return self._reject("switch", ValidationError(
            "Switching combatants is not supported yet", RejectReason.NOT_SUPPORTED))

    def end_battle(self, session_id: str, reason: Optional[str] = None) -> Result[EndOutcome]:
        try:
            entry = self._get(session_id)
            outcome = entry.core.forfeit(entry.session, reason)
        except BattleError as err:
            return self._reject("end_battle", err)
        return Result.success(outcome)

    def query_status(self, session_id: str) -> Result[StatusReport]:
        try:
            entry = self._get(session_id)
        except BattleError as err:
            return self._reject("query_status", err)
        s = entry.session
        return Result.success(StatusReport(
            session_id=s.session_id,
            kind=s.kind,
            turn=s.turn,
            phase=s.phase,
            status=s.status,
            winner=s.winner,
            next_actor=s.next_actor,
            self_combatant=s.self_combatant.to_dict(),
            opponent=s.opponent.to_dict(),
            recent_log=tuple(s.recent(self.settings.recent_log_limit)),
            stats=s.stats.snapshot(),
        ))

    def discard(self, session_id: str) -> bool:
        """Drop an ended session from the registry."""
        entry = self._sessions.get(session_id)
        if entry is None or entry.session.is_active:
            return False
        del self._sessions[session_id]
        return True


__all__ = ["BattleService", "default_id_factory"]
