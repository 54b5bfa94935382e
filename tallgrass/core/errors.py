"""
Error classes and rejection kinds for the battle core.

Operations at the service boundary never let these escape; they are turned
into :class:`tallgrass.battle.results.Rejection` values. ``TypeChartError`` is
the exception: it marks a programming defect and is always raised.
"""
from __future__ import annotations
from enum import Enum


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    STATE = "state"
    RESOURCE = "resource"
    NOT_FOUND = "not_found"


class RejectReason(str, Enum):
    SESSION_NOT_FOUND = "session-not-found"
    SESSION_ENDED = "session-ended"
    MOVE_NOT_FOUND = "move-not-found"
    COMBATANT_NOT_FOUND = "combatant-not-found"
    PP_EXHAUSTED = "pp-exhausted"
    VALIDATION_FAILED = "validation-failed"
    NOT_SUPPORTED = "not-supported"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORY_BY_REASON[self]


_CATEGORY_BY_REASON = {
    RejectReason.SESSION_NOT_FOUND: ErrorCategory.STATE,
    RejectReason.SESSION_ENDED: ErrorCategory.STATE,
    RejectReason.MOVE_NOT_FOUND: ErrorCategory.NOT_FOUND,
    RejectReason.COMBATANT_NOT_FOUND: ErrorCategory.NOT_FOUND,
    RejectReason.PP_EXHAUSTED: ErrorCategory.RESOURCE,
    RejectReason.VALIDATION_FAILED: ErrorCategory.VALIDATION,
    RejectReason.NOT_SUPPORTED: ErrorCategory.VALIDATION,
}


class TallgrassError(Exception):
    """Base for internal errors."""


class BattleError(TallgrassError):
    """A recoverable, caller-facing failure with a typed reason."""
    default_reason = RejectReason.VALIDATION_FAILED

    def __init__(self, detail: str, reason: RejectReason | None = None):
        super().__init__(detail)
        self.detail = detail
        self.reason = reason or self.default_reason

    @property
    def category(self) -> ErrorCategory:
        return self.reason.category


class ValidationError(BattleError):
    default_reason = RejectReason.VALIDATION_FAILED


class StateError(BattleError):
    default_reason = RejectReason.SESSION_ENDED


class ResourceError(BattleError):
    default_reason = RejectReason.PP_EXHAUSTED


class NotFoundError(BattleError):
    default_reason = RejectReason.MOVE_NOT_FOUND


class TypeChartError(TallgrassError):
    def __init__(self, attack: str, defense: str):
        super().__init__(f"Type chart has no entry for {attack} -> {defense}")
        self.attack = attack
        self.defense = defense


def error_for(reason: RejectReason, detail: str) -> BattleError:
    """Build the exception class matching a rejection reason."""
    cls = {
        ErrorCategory.VALIDATION: ValidationError,
        ErrorCategory.STATE: StateError,
        ErrorCategory.RESOURCE: ResourceError,
        ErrorCategory.NOT_FOUND: NotFoundError,
    }[reason.category]
    return cls(detail, reason)


__all__ = [
    "ErrorCategory", "RejectReason", "TallgrassError", "BattleError",
    "ValidationError", "StateError", "ResourceError", "NotFoundError",
    "TypeChartError", "error_for",
]
