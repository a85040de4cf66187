"""Command-line entry point for :mod:`residency_scheduler`.

Example
-------
python -m residency_scheduler.cli --games-per-team 115 --seed 7 --out-json output/schedule.json
"""

from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import List, Mapping, Sequence

from league_roster.teams import build_default_league

from .data import SeasonSchedule, Team
from .export import dumps_schedule_pretty
from .io import load_teams_from_json
from .main import schedule_season
from .season import DEFAULT_SOLVER_TIME_LIMIT_SECONDS, AllocationStrategy, SeasonConfig


def _print_summary(*, schedule: SeasonSchedule, teams: Sequence[Team], show_games: bool) -> None:
    by_id: Mapping[int, Team] = {t.team_id: t for t in teams}

    print("\nSeason schedule")
    print(f"- Residency blocks: {len(schedule.blocks)} (apex: {len(schedule.apex_blocks)})")
    print(f"- Games: {sum(len(b.games) for b in schedule.blocks)}")
    print(f"- Target games per team: {schedule.games_per_team}")
    print(f"- Max deviation from target: {schedule.max_deviation}")
    if schedule.issues:
        print(f"- Issues: {len(schedule.issues)}")
        for issue in schedule.issues:
            print(f"  - {type(issue).__name__}: {issue}")

    for index, block in enumerate(schedule.blocks, start=1):
        kind = "APEX RESIDENCY" if block.is_apex else "Residency"
        visitors = ", ".join(v.city for v in block.visitors)
        print(
            f"\n{kind} #{index}: Host - {block.host.city}, Visitors - {visitors} "
            f"({block.start_label} to {block.end_label}), {len(block.games)} games"
        )
        if not show_games:
            continue
        for game in block.games:
            first = by_id[game.first_bat_id].city if game.first_bat_id in by_id else str(game.first_bat_id)
            second = by_id[game.second_bat_id].city if game.second_bat_id in by_id else str(game.second_bat_id)
            print(f"    - {game.label}: {first} at {second} (Designated Home: {second}, Type: {game.game_type.value})")

    print("\nGames per team:")
    for team_id in sorted(schedule.tally):
        name = by_id[team_id].city if team_id in by_id else str(team_id)
        print(f"  {name:20s} {schedule.tally[team_id]:>4d}  ({schedule.deviation(team_id):+d})")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="residency_scheduler")
    parser.add_argument(
        "--teams-json",
        type=Path,
        default=None,
        help="League file (list of team objects). Default: the built-in 18-team league",
    )
    parser.add_argument(
        "--roster-size",
        type=int,
        default=0,
        help="Players to generate per built-in team (default: 0, the scheduler does not need rosters)",
    )
    parser.add_argument("--games-per-team", type=int, default=115, help="Target games per team (default: 115)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: unseeded)")
    parser.add_argument("--season-index", type=int, default=0, help="Season number; rotates the apex host (default: 0)")
    parser.add_argument(
        "--apex-target",
        type=int,
        default=10,
        help="Minimum games in the apex residency (default: 10)",
    )
    parser.add_argument(
        "--allocation",
        type=str,
        choices=[s.value for s in AllocationStrategy],
        default=AllocationStrategy.BALANCED.value,
        help="Regular block allocation strategy (default: balanced)",
    )
    parser.add_argument(
        "--solver-time-limit",
        type=int,
        default=DEFAULT_SOLVER_TIME_LIMIT_SECONDS,
        help=(
            f"Seconds allowed for each CBC solve in balanced allocation (default: {DEFAULT_SOLVER_TIME_LIMIT_SECONDS}; "
            "0 = no limit)"
        ),
    )
    parser.add_argument(
        "--solver-gap",
        type=float,
        default=None,
        help="Relative MIP gap at which CBC may stop early (default: solve to optimality)",
    )
    parser.add_argument("--show-games", action="store_true", help="Print every game, not just block headers")
    parser.add_argument("--out-json", type=Path, default=None, help="Write the schedule as JSON to this path")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    teams: List[Team]
    if args.teams_json is not None:
        teams = load_teams_from_json(args.teams_json)
    else:
        teams = build_default_league(rng=random.Random(args.seed), roster_size=args.roster_size)

    config = SeasonConfig(
        apex_target_game_count=args.apex_target,
        season_index=args.season_index,
        allocation=AllocationStrategy(args.allocation),
        solver_time_limit_seconds=args.solver_time_limit if args.solver_time_limit > 0 else None,
        solver_gap_rel=args.solver_gap,
    )

    schedule = schedule_season(
        teams=teams,
        games_per_team=args.games_per_team,
        seed=args.seed,
        config=config,
        log_level=getattr(logging, args.log_level),
    )

    _print_summary(schedule=schedule, teams=teams, show_games=args.show_games)

    out_json: Path | None = args.out_json
    if out_json is not None:
        out_json.parent.mkdir(parents=True, exist_ok=True)
        out_json.write_text(dumps_schedule_pretty(schedule, teams), encoding="utf-8")
        print(f"\nWrote {len(schedule.blocks)} blocks to {out_json}")

    return 1 if schedule.is_empty else 0


if __name__ == "__main__":
    raise SystemExit(main())
