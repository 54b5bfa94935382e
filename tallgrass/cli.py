"""
Tallgrass CLI - developer entry points for the battle core.

Usage:
    tallgrass simulate [--seed N] [--difficulty D] [--opponent-difficulty D] [--kind wild|trainer]
    tallgrass chart ATTACK DEFENSE [DEFENSE2]
"""
from __future__ import annotations
import argparse
import sys
from typing import Any, Dict, List, Optional

from rich.console import Console

from tallgrass.core.errors import ValidationError
from tallgrass.core.logging import logger
from tallgrass.system.settings import Settings
from tallgrass.battle.ai import Difficulty
from tallgrass.battle.models import BattleStatus, Side
from tallgrass.battle.render import print_status, print_turn, stats_table
from tallgrass.battle.service import BattleService
from tallgrass.battle.type_chart import dual_effectiveness, explain

SAMPLE_SELF: Dict[str, Any] = {
    "id": "pikachu-1", "species_id": 25, "name": "Pikachu", "level": 12,
    "max_hp": 35, "attack": 55, "defense": 40, "types": ["electric"],
    "moves": [
        {"id": 84, "name": "Thunder Shock", "category": "electric", "power": 40, "accuracy": 100, "max_pp": 30, "move_class": "special"},
        {"id": 98, "name": "Quick Attack", "category": "normal", "power": 40, "accuracy": 100, "max_pp": 30},
        {"id": 86, "name": "Thunder Wave", "category": "electric", "power": 0, "accuracy": 100, "max_pp": 20, "move_class": "status"},
        {"id": 21, "name": "Slam", "category": "normal", "power": 80, "accuracy": 75, "max_pp": 20},
    ],
}

SAMPLE_OPPONENT: Dict[str, Any] = {
    "id": "piplup-1", "species_id": 393, "name": "Piplup", "level": 11,
    "max_hp": 40, "attack": 51, "defense": 53, "types": ["water"],
    "moves": [
        {"id": 145, "name": "Bubble", "category": "water", "power": 20, "accuracy": 100, "max_pp": 30, "move_class": "special"},
        {"id": 64, "name": "Peck", "category": "flying", "power": 35, "accuracy": 100, "max_pp": 35},
        {"id": 45, "name": "Growl", "category": "normal", "power": 0, "accuracy": 100, "max_pp": 40, "move_class": "status"},
    ],
}

_DIFFICULTIES = [d.value for d in Difficulty]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tallgrass - creature battle core", prog="tallgrass")
    parser.add_argument("--settings", help="Path to a settings JSON file")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    sim = subparsers.add_parser("simulate", help="Run an AI vs AI sample battle")
    sim.add_argument("--seed", type=int, default=None, help="Seed for the battle's random source")
    sim.add_argument("--difficulty", choices=_DIFFICULTIES, default=None, help="Tier for your side")
    sim.add_argument("--opponent-difficulty", choices=_DIFFICULTIES, default=None, help="Tier for the opponent")
    sim.add_argument("--kind", choices=["wild", "trainer"], default="wild")

    chart = subparsers.add_parser("chart", help="Look up a type matchup")
    chart.add_argument("attack")
    chart.add_argument("defense")
    chart.add_argument("defense2", nargs="?", default=None)
    return parser


def cmd_simulate(args, settings: Settings, out: Console) -> int:
    service = BattleService(settings)
    started = service.start_battle(
        SAMPLE_SELF, SAMPLE_OPPONENT, args.kind, seed=args.seed,
        difficulty=args.opponent_difficulty, self_difficulty=args.difficulty,
    )
    if not started.ok:
        out.print(f"[red]Could not start battle: {started.error.detail}[/red]")
        return 1
    sid = started.value.session_id
    out.print(started.value.entry.message)
    side = Side.SELF
    for _ in range(settings.data.max_auto_turns):
        res = service.ai_turn(sid, side)
        if not res.ok:
            out.print(f"[red]{res.error.reason.value}: {res.error.detail}[/red]")
            return 1
        print_turn(res.value, out)
        report = service.query_status(sid).unwrap()
        if settings.data.debug:
            print_status(report, out)
        if report.status is BattleStatus.ENDED:
            break
        side = side.other
    else:
        service.end_battle(sid, "stalemate")
    final = service.query_status(sid).unwrap()
    print_status(final, out)
    out.print(stats_table(final.stats))
    return 0


def cmd_chart(args, out: Console) -> int:
    try:
        eff = dual_effectiveness(args.attack, args.defense, args.defense2)
    except ValidationError as e:
        out.print(f"[red]{e.detail}[/red]")
        return 2
    out.print(f"{args.attack} -> {args.defense}{'/' + args.defense2 if args.defense2 else ''}: "
              f"x{eff.multiplier:g} ({eff.label.value})")
    out.print(explain(args.attack, args.defense))
    if args.defense2:
        out.print(explain(args.attack, args.defense2))
    if eff.message:
        out.print(eff.message)
    return 0


def main(argv: Optional[List[str]] = None, out: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.load(args.settings) if args.settings else Settings.load()
    settings.apply_logging()
    out = out or Console()
    if args.command == "simulate":
        code = cmd_simulate(args, settings, out)
    elif args.command == "chart":
        code = cmd_chart(args, out)
    else:
        parser.print_help()
        code = 1
    logger.debug("CliDone", command=args.command, code=code)
    return code


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
