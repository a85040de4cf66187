from __future__ import annotations

import json
from pathlib import Path

from league_roster.teams import build_default_league
from residency_scheduler.export import dumps_schedule_pretty
from residency_scheduler.io import load_teams_from_json
from residency_scheduler.main import schedule_season
from residency_scheduler.season import AllocationStrategy, SeasonConfig


def main() -> None:
    repo_root = Path(__file__).resolve().parent
    data_dir = repo_root / "data"
    output_dir = repo_root / "output"
    output_dir.mkdir(parents=True, exist_ok=True)

    # Optional run settings.
    # season.json format:
    #   {"games_per_team": 115, "seed": 7, "season_index": 0, "allocation": "balanced"}
    settings_path = data_dir / "season.json"
    settings = {}
    if settings_path.exists():
        settings = json.loads(settings_path.read_text(encoding="utf-8-sig"))

    teams_path = data_dir / "teams.json"
    teams = load_teams_from_json(teams_path) if teams_path.exists() else build_default_league(roster_size=0)

    config = SeasonConfig(
        season_index=int(settings.get("season_index", 0)),
        allocation=AllocationStrategy(settings.get("allocation", AllocationStrategy.BALANCED.value)),
    )

    schedule = schedule_season(
        teams=teams,
        games_per_team=int(settings.get("games_per_team", 115)),
        seed=settings.get("seed", 7),
        config=config,
    )

    if schedule.is_empty:
        # Still emit something helpful.
        print(json.dumps({"blocks": 0, "issues": [str(e) for e in schedule.issues]}, indent=2))
        return

    out_path = output_dir / "schedule.json"
    out_path.write_text(dumps_schedule_pretty(schedule, teams), encoding="utf-8")
    print(f"Wrote {len(schedule.blocks)} blocks to {out_path} (max deviation {schedule.max_deviation})")


if __name__ == "__main__":
    main()
