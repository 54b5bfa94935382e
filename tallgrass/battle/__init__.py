"""
Battle package: type chart, damage mechanics, PP tracking, opponent AI and
the turn state machine, exposed to callers through :class:`BattleService`.
"""
from .service import BattleService
from .results import Result, Rejection
__all__ = ["BattleService", "Result", "Rejection"]
