from __future__ import annotations

import json
from pathlib import Path

import pytest

from league_roster.cli import main as league_main
from residency_scheduler.cli import main as scheduler_main


def test_scheduler_cli_writes_schedule_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "out" / "schedule.json"

    code = scheduler_main(
        [
            "--games-per-team",
            "40",
            "--seed",
            "1",
            "--allocation",
            "legacy",
            "--log-level",
            "WARNING",
            "--out-json",
            str(out),
        ]
    )

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["games_per_team"] == 40
    assert len(payload["blocks"]) == 1 + 18 // 2
    printed = capsys.readouterr().out
    assert "Season schedule" in printed
    assert "APEX RESIDENCY #1" in printed


def test_scheduler_cli_reads_teams_json_and_reports_empty_schedule(tmp_path: Path) -> None:
    teams_path = tmp_path / "teams.json"
    teams_path.write_text(
        json.dumps(
            [
                {"team_id": 1, "city": "Maine", "theme": "", "union": "Atlantic", "region": "Keystone"},
                {"team_id": 2, "city": "Miami", "theme": "", "union": "Atlantic", "region": "Tidewater"},
            ]
        ),
        encoding="utf-8",
    )

    code = scheduler_main(["--teams-json", str(teams_path), "--seed", "0", "--log-level", "ERROR"])

    assert code == 1


def test_league_cli_writes_league_that_scheduler_can_read(tmp_path: Path) -> None:
    league_path = tmp_path / "league.json"

    assert league_main(["--roster-size", "3", "--seed", "5", "--demo-game", "--out-json", str(league_path)]) == 0

    records = json.loads(league_path.read_text(encoding="utf-8"))
    assert len(records) == 18
    assert all(len(r["roster"]) == 3 for r in records)

    code = scheduler_main(
        ["--teams-json", str(league_path), "--allocation", "legacy", "--seed", "2", "--log-level", "ERROR"]
    )
    assert code == 0


def test_scheduler_cli_balanced_run_honours_solver_time_limit(tmp_path: Path) -> None:
    out = tmp_path / "schedule.json"

    code = scheduler_main(
        ["--seed", "3", "--solver-time-limit", "5", "--solver-gap", "0.0", "--log-level", "ERROR", "--out-json", str(out)]
    )

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["games_per_team"] == 115
    assert payload["max_deviation"] <= 3
    assert payload["issues"] == []
