from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


def _format_deviation(value: int) -> str:
    return f"{value:+d}" if value else "0"


def _city_lookup(schedule: Mapping[str, Any]) -> Dict[int, str]:
    """team_id -> city, from the tally rows and every block's host/visitors."""

    names: Dict[int, str] = {}
    for row in schedule.get("tally") or []:
        try:
            names[int(row["team_id"])] = str(row.get("city") or "")
        except (KeyError, ValueError):
            continue
    for block in schedule.get("blocks") or []:
        for team in [block.get("host") or {}] + list(block.get("visitors") or []):
            if "team_id" in team and team.get("city"):
                names.setdefault(int(team["team_id"]), str(team["city"]))
    return names


def _team_name(names: Mapping[int, str], team_id: Any) -> str:
    try:
        key = int(team_id)
    except (TypeError, ValueError):
        return str(team_id)
    return names.get(key) or str(key)


def _tally_table(schedule: Mapping[str, Any]) -> str:
    lines = ["| Team | Games | Deviation |", "|---|---:|---:|"]
    for row in schedule.get("tally") or []:
        city = row.get("city") or str(row.get("team_id", ""))
        lines.append(f"| {city} | {int(row.get('games', 0))} | {_format_deviation(int(row.get('deviation', 0)))} |")
    return "\n".join(lines)


def _block_overview_table(schedule: Mapping[str, Any]) -> str:
    lines = ["| # | Host | Visitors | Days | Games | Apex |", "|---:|---|---|---|---:|:---:|"]
    for block in schedule.get("blocks") or []:
        host = (block.get("host") or {}).get("city", "")
        visitors = ", ".join(v.get("city", "") for v in block.get("visitors") or [])
        days = f"{block.get('start_label', '')} – {block.get('end_label', '')}"
        apex = "yes" if block.get("is_apex") else ""
        lines.append(
            f"| {block.get('block_number', '')} | {host} | {visitors} | {days} | {len(block.get('games') or [])} | {apex} |"
        )
    return "\n".join(lines)


def _block_games_table(block: Mapping[str, Any], names: Mapping[int, str]) -> str:
    lines = ["| Game | Bats first | Bats second (home) | Type |", "|---|---|---|---|"]
    for game in block.get("games") or []:
        lines.append(
            f"| {game.get('label', '')} | {_team_name(names, game.get('first_bat_id'))} "
            f"| {_team_name(names, game.get('second_bat_id'))} | {game.get('game_type', '')} |"
        )
    return "\n".join(lines)


def _verbose_block_sections(schedule: Mapping[str, Any], names: Mapping[int, str]) -> str:
    out: List[str] = ["# Block-by-block detail", ""]
    for block in schedule.get("blocks") or []:
        kind = "Apex residency" if block.get("is_apex") else "Residency"
        host = (block.get("host") or {}).get("city", "")
        out.append(f"## {kind} #{block.get('block_number', '')} at {host}")
        out.append("")
        out.append(_block_games_table(block, names))
        out.append("")
    return "\n".join(out)


def schedule_json_to_markdown(schedule: Mapping[str, Any], *, verbose: bool = True) -> str:
    names = _city_lookup(schedule)

    lines: List[str] = []
    lines.append("# Residency Season – Schedule Report")
    lines.append("")
    lines.append(f"- **Target games per team**: {schedule.get('games_per_team', '')}")
    lines.append(f"- **Max deviation from target**: {schedule.get('max_deviation', '')}")
    lines.append(f"- **Residency blocks**: {len(schedule.get('blocks') or [])}")
    issues = schedule.get("issues") or []
    if issues:
        lines.append(f"- **Issues**: {len(issues)}")
        for issue in issues:
            lines.append(f"  - {issue}")
    lines.append("")

    lines.append("## Games per team")
    lines.append("")
    lines.append(_tally_table(schedule))
    lines.append("")

    lines.append("## Blocks")
    lines.append("")
    lines.append(_block_overview_table(schedule))
    lines.append("")

    if verbose:
        lines.append(_verbose_block_sections(schedule, names))
        lines.append("")

    return "\n".join(lines) + "\n"


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Convert schedule.json to a markdown report")
    parser.add_argument("schedule_json", type=Path, help="Path to schedule.json")
    parser.add_argument("--out", type=Path, default=None, help="Optional output markdown path")
    parser.add_argument("--brief", action="store_true", help="Omit the per-block game tables")

    args = parser.parse_args(argv)

    schedule = json.loads(args.schedule_json.read_text(encoding="utf-8-sig"))
    md = schedule_json_to_markdown(schedule, verbose=not args.brief)

    if args.out is None:
        print(md)
    else:
        args.out.write_text(md, encoding="utf-8")


if __name__ == "__main__":
    main()
