from __future__ import annotations

import json
from pathlib import Path

import pytest

from residency_scheduler.data import LeagueUnion, Player, Region, Team
from residency_scheduler.io import load_teams_from_json, parse_region, parse_union, team_from_record, team_to_record


def test_parse_union_accepts_case_and_suffix_variants() -> None:
    assert parse_union("Atlantic") is LeagueUnion.ATLANTIC
    assert parse_union(" pacific ") is LeagueUnion.PACIFIC
    assert parse_union("PACIFIC_UNION") is LeagueUnion.PACIFIC


def test_parse_union_raises_on_unknown_value() -> None:
    with pytest.raises(ValueError):
        parse_union("Central")


def test_parse_region_accepts_camel_case_and_spaces() -> None:
    assert parse_region("GoldenPennant") is Region.GOLDEN_PENNANT
    assert parse_region("TheConfluence") is Region.CONFLUENCE
    assert parse_region("cascade territory") is Region.CASCADE_TERRITORY
    assert parse_region("HEARTLAND_CORE") is Region.HEARTLAND_CORE


def test_parse_region_raises_on_unknown_value() -> None:
    with pytest.raises(ValueError):
        parse_region("Gulf Coast")


def test_team_from_record_raises_value_error_on_missing_field() -> None:
    with pytest.raises(ValueError):
        team_from_record({"team_id": 1, "city": "Maine", "union": "Atlantic"})


def test_team_record_round_trip_keeps_roster() -> None:
    team = Team(
        team_id=4,
        city="Pittsburgh",
        theme="Iron Will",
        union=LeagueUnion.ATLANTIC,
        region=Region.KEYSTONE,
        roster=(Player(player_id=7, name="Rusty Hart", position="SS", skill_rating=91.5, is_star=True),),
    )

    restored = team_from_record(json.loads(json.dumps(team_to_record(team))))

    assert restored == team
    assert restored.roster == team.roster


def test_load_teams_from_json_reads_a_list_of_teams(tmp_path: Path) -> None:
    path = tmp_path / "teams.json"
    path.write_text(
        json.dumps(
            [
                {"team_id": 1, "city": "Maine", "theme": "Lumberjack Spirit", "union": "Atlantic", "region": "Keystone"},
                {"team_id": 2, "city": "Seattle", "theme": "Rainier Resolve", "union": "Pacific", "region": "CascadeTerritory"},
            ]
        ),
        encoding="utf-8",
    )

    teams = load_teams_from_json(path)

    assert [t.team_id for t in teams] == [1, 2]
    assert teams[1].region is Region.CASCADE_TERRITORY
    assert teams[0].roster == ()


def test_load_teams_from_json_raises_when_not_a_list(tmp_path: Path) -> None:
    path = tmp_path / "teams.json"
    path.write_text(json.dumps({"team_id": 1}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_teams_from_json(path)


def test_load_teams_from_json_raises_on_duplicate_ids(tmp_path: Path) -> None:
    record = {"team_id": 1, "city": "Maine", "theme": "", "union": "Atlantic", "region": "Keystone"}
    path = tmp_path / "teams.json"
    path.write_text(json.dumps([record, record]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_teams_from_json(path)
