"""I/O utilities for building the scheduler's domain objects.

This module owns file format knowledge (JSON) for league definitions and
constructs :class:`~residency_scheduler.data.Team` / ``Player`` objects from it.

Expected league file layout::

    [
      {
        "team_id": 1,
        "city": "Maine",
        "theme": "Lumberjack Spirit",
        "union": "Atlantic",
        "region": "Keystone",
        "roster": [
          {"player_id": 1, "name": "Babe Blue", "position": "P",
           "skill_rating": 95.0, "salary": 30000000, "market_value": 45000000,
           "is_star": true}
        ]
      }
    ]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping

from residency_scheduler.data import LeagueUnion, Player, Region, Team


def _normalise_enum_text(value: str) -> str:
    return value.strip().upper().replace(" ", "_").replace("-", "_")


def parse_union(value: str) -> LeagueUnion:
    """Parse a union name, case-insensitive ("Atlantic", "PACIFIC", ...)."""

    v = _normalise_enum_text(value)
    if v.endswith("_UNION"):
        v = v[: -len("_UNION")]
    try:
        return LeagueUnion(v)
    except ValueError as e:
        raise ValueError(f"Unknown union: {value!r}") from e


def parse_region(value: str) -> Region:
    """Parse a region name.

    Accepts case/space variants and the camel-case spellings used in older
    league files (e.g. ``GoldenPennant``, ``TheConfluence``).
    """

    raw = value.strip()
    # Split CamelCase words: "GoldenPennant" -> "Golden_Pennant"
    spaced = "".join(f"_{c}" if c.isupper() and i > 0 and raw[i - 1].islower() else c for i, c in enumerate(raw))
    v = _normalise_enum_text(spaced)
    if v.startswith("THE_"):
        v = v[len("THE_") :]
    try:
        return Region(v)
    except ValueError as e:
        raise ValueError(f"Unknown region: {value!r}") from e


def _player_from_record(record: Mapping[str, Any]) -> Player:
    return Player(
        player_id=int(record["player_id"]),
        name=str(record["name"]),
        position=str(record.get("position", "")),
        skill_rating=float(record["skill_rating"]),
        salary=float(record.get("salary", 0.0)),
        market_value=float(record.get("market_value", 0.0)),
        is_star=bool(record.get("is_star", False)),
    )


def team_from_record(record: Mapping[str, Any]) -> Team:
    try:
        return Team(
            team_id=int(record["team_id"]),
            city=str(record["city"]),
            theme=str(record.get("theme", "")),
            union=parse_union(str(record["union"])),
            region=parse_region(str(record["region"])),
            roster=tuple(_player_from_record(p) for p in record.get("roster") or []),
        )
    except KeyError as e:
        raise ValueError(f"Team record is missing field {e.args[0]!r}: {dict(record)!r}") from e


def load_teams_from_json(path: str | Path) -> List[Team]:
    """Load teams from a league JSON file (list of team objects).

    Raises
    ------
    ValueError
        If the file is not a JSON list, a record is malformed, or team ids repeat.
    """

    p = Path(path)
    raw = json.loads(p.read_text(encoding="utf-8-sig"))
    if not isinstance(raw, list):
        raise ValueError(f"{p}: expected a JSON list of teams")

    teams = [team_from_record(r) for r in raw]

    ids = [t.team_id for t in teams]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValueError(f"{p}: duplicate team ids {duplicates}")

    return teams


def team_to_record(team: Team) -> dict[str, Any]:
    """Inverse of :func:`team_from_record`."""

    return {
        "team_id": team.team_id,
        "city": team.city,
        "theme": team.theme,
        "union": team.union.value,
        "region": team.region.value,
        "roster": [
            {
                "player_id": p.player_id,
                "name": p.name,
                "position": p.position,
                "skill_rating": p.skill_rating,
                "salary": p.salary,
                "market_value": p.market_value,
                "is_star": p.is_star,
            }
            for p in team.roster
        ],
    }
