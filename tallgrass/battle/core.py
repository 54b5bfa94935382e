"""Turn state machine for a single 1v1 battle session.

``BattleCore`` validates a command completely before touching the session,
so a rejected command (raised as a :class:`BattleError`) leaves HP, PP, the
log and the turn counter exactly as they were.
"""
from __future__ import annotations
import random
from typing import Optional

from tallgrass.core.errors import NotFoundError, RejectReason, ResourceError, StateError, ValidationError
from tallgrass.core.logging import logger
from tallgrass.system.settings import SettingsData
from . import pp
from .mechanics import RandomSource, battle_message, compute_damage, experience_gain, rolls_hit
from .models import Combatant, Phase, Side, Winner
from .results import EndOutcome, UseMoveOutcome
from .session import BattleSession, TurnLogEntry
from .type_chart import Effectiveness, against


class BattleCore:
    def __init__(self, rng: Optional[RandomSource] = None, settings: Optional[SettingsData] = None):
        self.rng = rng or random.Random()
        self.settings = settings or SettingsData()

    # ------------------------------------------------------------------
    # End detection
    # ------------------------------------------------------------------
    @staticmethod
    def evaluate_winner(self_c: Combatant, opponent: Combatant) -> Optional[Winner]:
        if self_c.is_fainted and opponent.is_fainted:
            return Winner.DRAW
        if opponent.is_fainted:
            return Winner.SELF
        if self_c.is_fainted:
            return Winner.OPPONENT
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def _validate(self, session: BattleSession, actor_id: str, move_id: int, target: Side):
        if not session.is_active:
            raise StateError(f"Battle {session.session_id} has already ended", RejectReason.SESSION_ENDED)
        actor = session.find_combatant(actor_id)
        if actor is None:
            raise NotFoundError(f"No combatant {actor_id!r} in battle {session.session_id}",
                                RejectReason.COMBATANT_NOT_FOUND)
        if target is actor.side:
            raise ValidationError(f"{actor.name} cannot target its own side")
        move = actor.find_move(move_id)
        if move is None:
            raise NotFoundError(f"{actor.name} does not know move {move_id}", RejectReason.MOVE_NOT_FOUND)
        if move.current_pp <= 0:
            raise ResourceError(f"There's no PP left for {move.name}!", RejectReason.PP_EXHAUSTED)
        return actor, move

    def use_move(self, session: BattleSession, actor_id: str, move_id: int,
                 target: Side = Side.OPPONENT) -> UseMoveOutcome:
        actor, move = self._validate(session, actor_id, move_id, target)
        defender = session.combatant(target)
        session.phase = Phase.RESOLVING
        own_side = actor.side is Side.SELF

        if not rolls_hit(move, self.rng):
            pp.consume(move)
            message = f"{actor.name} used {move.name}! But it missed!"
            session.append(TurnLogEntry(session.turn, message, actor.side, move.move_id, move.name, missed=True))
            if own_side:
                session.stats.moves_used += 1
                session.stats.misses += 1
            return self._finish(session, actor, move, message, hit=False, damage=0, final_damage=0,
                                critical=False, label=Effectiveness.NORMAL)

        type_effect = against(move.category, defender.types) if self.settings.apply_type_effectiveness else None
        breakdown = compute_damage(actor, defender, move, self.rng, type_effect)
        dealt = defender.take_damage(breakdown.final_damage)
        pp.consume(move)
        label = type_effect.label if (type_effect is not None and move.power > 0) else Effectiveness.NORMAL
        message = battle_message(actor.name, move.name, dealt, breakdown.is_critical, label)
        session.append(TurnLogEntry(session.turn, message, actor.side, move.move_id, move.name,
                                    damage=dealt, critical=breakdown.is_critical))
        if own_side:
            session.stats.moves_used += 1
            session.stats.damage_dealt += dealt
            if breakdown.is_critical:
                session.stats.critical_hits += 1
        else:
            session.stats.damage_received += dealt
        logger.debug("DamageBreakdown", battle_id=session.session_id, formula=breakdown.formula)
        return self._finish(session, actor, move, message, hit=True, damage=dealt,
                            final_damage=breakdown.final_damage,
                            critical=breakdown.is_critical, label=label)

    def _finish(self, session: BattleSession, actor: Combatant, move, message: str, *,
                hit: bool, damage: int, final_damage: int, critical: bool,
                label: Effectiveness) -> UseMoveOutcome:
        resolved_turn = session.turn
        winner = self.evaluate_winner(session.self_combatant, session.opponent)
        exp = None
        if winner is not None:
            session.end(winner, "fainted")
            session.stats.turns = resolved_turn
            loser = session.opponent
            if winner is Winner.SELF:
                exp = experience_gain(session.self_combatant.level, loser.level)
            end_msg = {
                Winner.SELF: f"{session.opponent.name} fainted! {session.self_combatant.name} wins!",
                Winner.OPPONENT: f"{session.self_combatant.name} fainted! {session.opponent.name} wins!",
                Winner.DRAW: "Both combatants fainted! It's a draw!",
            }[winner]
            session.append(TurnLogEntry(resolved_turn, end_msg))
            logger.info("BattleEnd", battle_id=session.session_id, winner=winner.value, turns=resolved_turn)
        else:
            session.turn += 1
            session.stats.turns = resolved_turn
            session.phase = Phase.COMMAND_SELECTION
            session.next_actor = actor.side.other
        logger.debug("TurnResolved", battle_id=session.session_id, turn=resolved_turn, actor=actor.combatant_id,
                     move=move.name, hit=hit, damage=damage, critical=critical)
        return UseMoveOutcome(
            session_id=session.session_id,
            side=actor.side,
            move_id=move.move_id,
            move_name=move.name,
            hit=hit,
            damage=damage,
            critical=critical,
            effectiveness=label,
            self_hp=session.self_combatant.current_hp,
            opponent_hp=session.opponent.current_hp,
            status=session.status,
            winner=session.winner,
            message=message,
            turn=resolved_turn,
            experience_gained=exp,
            final_damage=final_damage,
        )

    def forfeit(self, session: BattleSession, reason: Optional[str] = None,
                side: Optional[Side] = None) -> EndOutcome:
        """Forced termination: the battle ends with no winner."""
        if not session.is_active:
            raise StateError(f"Battle {session.session_id} has already ended", RejectReason.SESSION_ENDED)
        if side is not None:
            who = session.combatant(side).name
            message = f"{who} fled! ({reason})" if reason else f"{who} fled!"
        else:
            message = f"The battle ended. ({reason})" if reason else "The battle ended."
        session.end(None, reason)
        session.stats.turns = session.turn
        entry = TurnLogEntry(session.turn, message, side)
        session.append(entry)
        logger.info("BattleEnd", battle_id=session.session_id, winner=None, reason=reason or "")
        return EndOutcome(session.session_id, session.status, None, reason, entry)


__all__ = ["BattleCore"]
