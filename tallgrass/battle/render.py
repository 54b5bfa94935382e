"""Rich rendering of battle status for the terminal.

Pure builders return rich renderables; ``print_status`` writes them to a
console (tests pass a recording ``Console``).
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED

from tallgrass.core.types import TYPE_COLORS_HEX, parse_type, type_abbreviation
from .models import BattleStatus, Winner
from .results import StatusReport, TurnOutcome
from .session import BattleStats, TurnLogEntry

console = Console()


def hp_color(cur: int, max_hp: int) -> str:
    ratio = cur / max_hp if max_hp > 0 else 0.0
    if ratio > 0.5:
        return "green"
    if ratio > 0.2:
        return "yellow"
    return "red"


def hp_bar(cur: int, max_hp: int, width: int = 24) -> Text:
    cur = max(0, min(cur, max_hp))
    if max_hp <= 0:
        max_hp = 1
    filled = max(0, min(width, int(round(cur / max_hp * width))))
    bar = Text("[")
    bar.append("█" * filled, style=hp_color(cur, max_hp))
    bar.append("░" * (width - filled), style="grey50")
    bar.append(f"] {cur}/{max_hp}")
    return bar


def type_badges(types: Iterable[Any]) -> Text:
    out = Text()
    for i, t in enumerate(types):
        if i:
            out.append(" ")
        et = parse_type(t)
        out.append(f" {type_abbreviation(et)} ", style=f"bold black on {TYPE_COLORS_HEX[et]}")
    return out


def combatant_panel(data: Dict[str, Any], title: str) -> Panel:
    head = Text(f"{data['name']}  Lv{data['level']}  ", style="bold")
    head.append_text(type_badges(data["types"]))
    moves = Table.grid(padding=(0, 2))
    for m in data["moves"]:
        style = "red" if m["current_pp"] <= 0 else ""
        moves.add_row(Text(m["name"], style=style), Text(f"PP {m['current_pp']}/{m['max_pp']}", style=style))
    return Panel(Group(head, hp_bar(data["current_hp"], data["max_hp"]), moves),
                 title=title, box=ROUNDED)


def log_table(entries: Iterable[TurnLogEntry]) -> Table:
    table = Table(box=ROUNDED, show_header=True, expand=True)
    table.add_column("Turn", justify="right", width=5)
    table.add_column("Message")
    for e in entries:
        style = "bold yellow" if e.critical else ("dim" if e.missed else "")
        table.add_row(str(e.turn), Text(e.message, style=style))
    return table


def stats_table(stats: BattleStats) -> Table:
    table = Table(box=ROUNDED, title="Battle statistics")
    table.add_column("Stat")
    table.add_column("Value", justify="right")
    for name, value in vars(stats).items():
        table.add_row(name.replace("_", " "), str(value))
    return table


def outcome_text(report: StatusReport) -> Text:
    if report.status is BattleStatus.ACTIVE:
        return Text(f"Turn {report.turn}: {report.next_actor.value} to act", style="cyan")
    if report.winner is Winner.DRAW:
        return Text("Result: draw", style="bold magenta")
    if report.winner is None:
        return Text("Result: battle ended with no winner", style="bold")
    return Text(f"Result: {report.winner.value} wins", style="bold green")


def status_view(report: StatusReport) -> Group:
    return Group(
        combatant_panel(report.opponent, "Opponent"),
        combatant_panel(report.self_combatant, "You"),
        log_table(report.recent_log),
        outcome_text(report),
    )


def print_status(report: StatusReport, out: Optional[Console] = None):
    (out or console).print(status_view(report))


def print_turn(turn: TurnOutcome, out: Optional[Console] = None):
    text = Text(f"[{turn.decision.kind.value} {turn.decision.confidence:.1f}] ", style="dim")
    if turn.move is not None:
        text.append(turn.move.message)
    elif turn.ended is not None:
        text.append(turn.ended.entry.message)
    (out or console).print(text)


__all__ = [
    "console", "hp_color", "hp_bar", "type_badges", "combatant_panel", "log_table",
    "stats_table", "outcome_text", "status_view", "print_status", "print_turn",
]
