"""Toy game simulator.

Each at-bat is a single threshold comparison: a uniform draw in [0, 100) below
the batter's skill rating is a hit worth 1-4 bases. Only a 4-base hit scores a
run. A game gives each side one at-bat per inning.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Mapping, Optional

from residency_scheduler.data import Game, Player, Team

from .constants import HOME_RUN_BASES, INNINGS_PER_GAME


@dataclass(frozen=True, slots=True)
class AtBatResult:
    batter_id: int
    hit: bool
    bases: int

    @property
    def runs(self) -> int:
        return 1 if self.bases == HOME_RUN_BASES else 0


@dataclass(frozen=True, slots=True)
class GameResult:
    game: Game
    first_bat_runs: int
    second_bat_runs: int
    at_bats: tuple[AtBatResult, ...]

    @property
    def winner_id(self) -> Optional[int]:
        """Winning team id, or ``None`` for a tie."""

        if self.first_bat_runs > self.second_bat_runs:
            return self.game.first_bat_id
        if self.second_bat_runs > self.first_bat_runs:
            return self.game.second_bat_id
        return None


def simulate_at_bat(batter: Player, rng: random.Random) -> AtBatResult:
    hit = rng.random() * 100.0 < batter.skill_rating
    bases = rng.randint(1, HOME_RUN_BASES) if hit else 0
    return AtBatResult(batter_id=batter.player_id, hit=hit, bases=bases)


def simulate_game(
    game: Game,
    teams_by_id: Mapping[int, Team],
    rng: random.Random,
    *,
    innings: int = INNINGS_PER_GAME,
) -> GameResult:
    """Play ``game`` with a random batter from each side's roster every half inning.

    Raises
    ------
    KeyError
        If a participant is missing from ``teams_by_id``.
    ValueError
        If a participant has an empty roster or ``innings < 1``.
    """

    if innings < 1:
        raise ValueError("innings must be >= 1")

    sides = []
    for team_id in game.participants:
        try:
            team = teams_by_id[team_id]
        except KeyError as e:
            raise KeyError(f"No team data for team {team_id} in game {game.label!r}") from e
        if not team.roster:
            raise ValueError(f"Team {team_id} has an empty roster")
        sides.append(team)

    runs = [0, 0]
    at_bats: List[AtBatResult] = []
    for _ in range(innings):
        for side_index, team in enumerate(sides):
            result = simulate_at_bat(rng.choice(team.roster), rng)
            at_bats.append(result)
            runs[side_index] += result.runs

    return GameResult(game=game, first_bat_runs=runs[0], second_bat_runs=runs[1], at_bats=tuple(at_bats))
