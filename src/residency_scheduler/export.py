"""Export helpers.

Turns a :class:`~residency_scheduler.data.SeasonSchedule` into a JSON-ready
structure. Teams are written as ``{team_id, city}`` references; enum values are
written as their string values.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, Iterable, Mapping

from residency_scheduler.data import Game, SeasonSchedule, Team


def _team_ref(team: Team) -> Dict[str, Any]:
    return {"team_id": team.team_id, "city": team.city}


def _game_record(game: Game) -> Dict[str, Any]:
    record = asdict(game)
    record["game_type"] = game.game_type.value
    return record


def _teams_by_id(schedule: SeasonSchedule, teams: Iterable[Team]) -> Mapping[int, Team]:
    by_id: Dict[int, Team] = {t.team_id: t for t in teams}
    for block in schedule.blocks:
        by_id.setdefault(block.host.team_id, block.host)
        for visitor in block.visitors:
            by_id.setdefault(visitor.team_id, visitor)
    return by_id


def schedule_to_records(schedule: SeasonSchedule, teams: Iterable[Team] = ()) -> Dict[str, Any]:
    """Build a JSON-serialisable record of ``schedule``.

    ``teams`` is only used to name teams that never appear in a block.
    """

    by_id = _teams_by_id(schedule, teams)

    tally_rows = []
    for team_id in sorted(schedule.tally):
        team = by_id.get(team_id)
        tally_rows.append(
            {
                "team_id": team_id,
                "city": team.city if team is not None else "",
                "games": int(schedule.tally[team_id]),
                "deviation": schedule.deviation(team_id),
            }
        )

    blocks = []
    for index, block in enumerate(schedule.blocks, start=1):
        blocks.append(
            {
                "block_number": index,
                "is_apex": block.is_apex,
                "host": _team_ref(block.host),
                "visitors": [_team_ref(v) for v in block.visitors],
                "start_label": block.start_label,
                "end_label": block.end_label,
                "games": [_game_record(g) for g in block.games],
            }
        )

    return {
        "games_per_team": schedule.games_per_team,
        "max_deviation": schedule.max_deviation,
        "issues": [f"{type(e).__name__}: {e}" for e in schedule.issues],
        "tally": tally_rows,
        "blocks": blocks,
    }


def dumps_schedule_pretty(schedule: SeasonSchedule, teams: Iterable[Team] = ()) -> str:
    return json.dumps(schedule_to_records(schedule, teams), indent=2)
