"""Command-line entry point for :mod:`league_roster`.

Prints the built-in league with generated rosters and can play one demo game.

Example
-------
python -m league_roster.cli --roster-size 5 --seed 7 --demo-game
"""

from __future__ import annotations

import argparse
import json
import random
from collections import Counter
from pathlib import Path
from typing import Sequence

from residency_scheduler.data import Game, GameType, Team
from residency_scheduler.io import team_to_record

from .at_bat import simulate_game
from .constants import DEFAULT_ROSTER_SIZE
from .teams import build_default_league


def _print_league(teams: Sequence[Team], *, show_players: bool) -> None:
    print(f"League: {len(teams)} teams")
    union_counts = Counter(t.union.value for t in teams)
    for union, n in sorted(union_counts.items()):
        print(f"- {union}: {n}")

    for team in teams:
        print(f"\nTeam {team.team_id}: {team.display_name}")
        print(f"  Union: {team.union.value}, Region: {team.region.value}")
        print(f"  Roster ({len(team.roster)} players, {len(team.star_players)} stars)")
        if not show_players:
            continue
        for p in team.roster:
            star = " (STAR)" if p.is_star else ""
            print(
                f"    - ID: {p.player_id}, {p.name}, Pos: {p.position}, Skill: {p.skill_rating:.1f}, "
                f"Salary: ${p.salary:,.0f}, Market Value: ${p.market_value:,.0f}{star}"
            )


def _play_demo_game(teams: Sequence[Team], rng: random.Random) -> None:
    away, home = teams[0], teams[1]
    game = Game(
        first_bat_id=away.team_id,
        second_bat_id=home.team_id,
        stadium_id=home.team_id,
        label="Demo G01",
        game_type=GameType.REGULAR_SEASON,
    )
    result = simulate_game(game, {t.team_id: t for t in teams}, rng)
    print(f"\nDemo game: {away.city} at {home.city}")
    print(f"Final: {away.city} {result.first_bat_runs} - {home.city} {result.second_bat_runs}")
    if result.winner_id is None:
        print("It's a tie!")
    else:
        winner = away if result.winner_id == away.team_id else home
        print(f"{winner.city} wins!")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="league_roster")
    parser.add_argument(
        "--roster-size",
        type=int,
        default=DEFAULT_ROSTER_SIZE,
        help=f"Players generated per team (default: {DEFAULT_ROSTER_SIZE})",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed for roster generation (default: 0)")
    parser.add_argument("--players", action="store_true", help="List every player, not just roster counts")
    parser.add_argument("--demo-game", action="store_true", help="Simulate one game between the first two teams")
    parser.add_argument(
        "--out-json",
        type=Path,
        default=None,
        help="Write the league (teams + rosters) as JSON, readable by residency-scheduler --teams-json",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    rng = random.Random(args.seed)
    teams = build_default_league(rng=rng, roster_size=args.roster_size)

    _print_league(teams, show_players=args.players)

    if args.demo_game:
        if args.roster_size < 1:
            print("\nDemo game needs --roster-size >= 1")
            return 1
        _play_demo_game(teams, rng)

    out_json: Path | None = args.out_json
    if out_json is not None:
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(json.dumps([team_to_record(t) for t in teams], indent=2), encoding="utf-8")
        print(f"\nWrote {len(teams)} teams to {out_json}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
