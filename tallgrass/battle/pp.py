"""PP tracking for moves.

``consume``/``restore`` mutate the move only on success; ``preview_item``
never mutates and the caller applies its plan through ``restore``.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .models import Move


@dataclass(frozen=True)
class ConsumeResult:
    success: bool
    remaining_pp: int
    was_last_use: bool
    message: str


@dataclass(frozen=True)
class RestoreResult:
    success: bool
    recovered_amount: int
    new_pp: int
    message: str


@dataclass(frozen=True)
class PPStatus:
    move_id: int
    current_pp: int
    max_pp: int
    pp_percentage: float
    is_usable: bool


class PPSeverity(str, Enum):
    EMPTY = "empty"
    CRITICAL = "critical"
    LOW = "low"
    OK = "ok"


class PPItem(str, Enum):
    PP_UP_SMALL = "pp-up-small"     # +10 to one move
    PP_RESTORE = "pp-restore"       # one move to full
    PP_MAX = "pp-max"               # every move to full


PP_UP_SMALL_AMOUNT = 10


@dataclass(frozen=True)
class ItemPreview:
    item: PPItem
    affected_move_ids: Tuple[int, ...]
    total_recovery: int
    message: str


def consume(move: Move, amount: int = 1) -> ConsumeResult:
    if move.current_pp <= 0:
        return ConsumeResult(False, 0, False, f"There's no PP left for {move.name}!")
    if amount < 0:
        return ConsumeResult(False, move.current_pp, False, "PP to consume must be 0 or more")
    remaining = max(0, move.current_pp - amount)
    last = move.current_pp == 1 and amount >= 1
    move.current_pp = remaining
    if last:
        msg = f"{move.name} used its last PP!"
    else:
        msg = f"{move.name} PP -{amount} ({remaining} left)"
    return ConsumeResult(True, remaining, last, msg)


def _plan_restore(move: Move, amount: int) -> RestoreResult:
    if amount < 0:
        return RestoreResult(False, 0, move.current_pp, "PP to restore must be 0 or more")
    if move.current_pp >= move.max_pp:
        return RestoreResult(False, 0, move.current_pp, f"{move.name}'s PP is already full")
    recovered = min(amount, move.max_pp - move.current_pp)
    new_pp = move.current_pp + recovered
    return RestoreResult(True, recovered, new_pp, f"{move.name} recovered {recovered} PP ({new_pp}/{move.max_pp})")


def restore(move: Move, amount: int) -> RestoreResult:
    res = _plan_restore(move, amount)
    if res.success:
        move.current_pp = res.new_pp
    return res


def full_restore(move: Move) -> RestoreResult:
    return restore(move, move.max_pp)


def status(move: Move) -> PPStatus:
    pct = move.current_pp / move.max_pp if move.max_pp > 0 else 0.0
    return PPStatus(move.move_id, move.current_pp, move.max_pp, pct, move.current_pp > 0)


def all_status(moves: Sequence[Move]) -> List[PPStatus]:
    return [status(m) for m in moves]


def severity(st: PPStatus) -> PPSeverity:
    if st.pp_percentage <= 0:
        return PPSeverity.EMPTY
    if st.pp_percentage <= 0.25:
        return PPSeverity.CRITICAL
    if st.pp_percentage <= 0.5:
        return PPSeverity.LOW
    return PPSeverity.OK


def warning(st: PPStatus) -> Optional[str]:
    sev = severity(st)
    if sev is PPSeverity.EMPTY:
        return "This move is out of PP and can't be used"
    if sev is PPSeverity.CRITICAL:
        return "This move is running low on PP"
    return None


def usable_count(moves: Sequence[Move]) -> int:
    return sum(1 for m in moves if m.current_pp > 0)


def has_exhausted_move(moves: Sequence[Move]) -> bool:
    return any(m.current_pp == 0 for m in moves)


def all_exhausted(moves: Sequence[Move]) -> bool:
    """Struggle condition: a non-empty move set with no PP anywhere."""
    return len(moves) > 0 and all(m.current_pp == 0 for m in moves)


def lowest_pp_move(moves: Sequence[Move]) -> Optional[Move]:
    lowest: Optional[Move] = None
    lowest_pct = 0.0
    for m in moves:
        pct = status(m).pp_percentage
        if lowest is None or pct < lowest_pct:
            lowest, lowest_pct = m, pct
    return lowest


def preview_item(moves: Sequence[Move], item: PPItem, target_move_id: Optional[int] = None) -> ItemPreview:
    if item is PPItem.PP_MAX:
        affected = [m for m in moves if m.current_pp < m.max_pp]
        total = sum(m.max_pp - m.current_pp for m in affected)
        msg = (f"All moves had their PP restored! ({total} PP total)" if total > 0
               else "Every move's PP is already full")
        return ItemPreview(item, tuple(m.move_id for m in affected), total, msg)
    target = next((m for m in moves if m.move_id == target_move_id), None) if target_move_id is not None else None
    if target is None:
        return ItemPreview(item, (), 0, "Choose a move to restore")
    amount = PP_UP_SMALL_AMOUNT if item is PPItem.PP_UP_SMALL else target.max_pp
    plan = _plan_restore(target, amount)
    return ItemPreview(item, (target.move_id,), plan.recovered_amount, plan.message)


__all__ = [
    "ConsumeResult", "RestoreResult", "PPStatus", "PPSeverity", "PPItem", "ItemPreview",
    "PP_UP_SMALL_AMOUNT", "consume", "restore", "full_restore", "status", "all_status",
    "severity", "warning", "usable_count", "has_exhausted_move", "all_exhausted",
    "lowest_pp_move", "preview_item",
]
