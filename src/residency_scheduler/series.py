"""Fixed-length game series between two teams.

Two batting-order rules are supported (see :class:`~residency_scheduler.data.SeriesMode`):

- ``HOST_SECOND``: the stadium team is the designated home team in every game.
- ``ALTERNATING``: a single coin flip decides who bats first in game 1, then
  the first-bat slot flips every game. For an odd-length series one side bats
  first ``ceil(L/2)`` times and the other ``floor(L/2)`` times.
"""

from __future__ import annotations

import random
from typing import List, Optional

from residency_scheduler.data import Game, GameType, SeriesMode, Team
from residency_scheduler.errors import InvalidSeriesError


def draw_first_bat(rng: random.Random) -> bool:
    """Coin flip: does the first-listed team bat first in game 1?"""

    return rng.randrange(2) == 0


def first_bat_for_game(index: int, *, first_team_bats_first: bool) -> bool:
    """Whether the first-listed team bats first in game ``index`` (0-based) of an alternating series."""

    return (index % 2 == 0) == first_team_bats_first


def generate_series(
    team_a: Team,
    team_b: Team,
    stadium_team: Team,
    length: int,
    mode: SeriesMode,
    game_type: GameType,
    *,
    rng: Optional[random.Random] = None,
    first_team_bats_first: Optional[bool] = None,
    label_prefix: str = "",
    first_game_number: int = 1,
) -> List[Game]:
    """Build ``length`` games between ``team_a`` and ``team_b`` at ``stadium_team``'s park.

    Parameters
    ----------
    mode:
        ``HOST_SECOND`` requires ``stadium_team`` to be one of the two
        participants; it bats second in every game.
        ``ALTERNATING`` draws the game-1 first-bat side from ``rng`` unless
        ``first_team_bats_first`` is given explicitly.
    game_type:
        Tag applied to every generated game.
    label_prefix, first_game_number:
        Games are labelled ``f"{label_prefix}G{n:02d}"`` with ``n`` counting up
        from ``first_game_number``.

    Raises
    ------
    InvalidSeriesError
        If ``length <= 0``, if both participants are the same team, if a
        HOST_SECOND stadium team is not a participant, or if an ALTERNATING
        series has neither an rng nor an explicit first-bat flag.
    """

    if length <= 0:
        raise InvalidSeriesError(f"Series length must be positive, got {length}")
    if team_a.team_id == team_b.team_id:
        raise InvalidSeriesError(f"Team {team_a.team_id} cannot play a series against itself")

    stadium_id = stadium_team.team_id

    if mode is SeriesMode.HOST_SECOND:
        if stadium_id == team_a.team_id:
            home, away = team_a, team_b
        elif stadium_id == team_b.team_id:
            home, away = team_b, team_a
        else:
            raise InvalidSeriesError(
                f"HOST_SECOND series needs the stadium team ({stadium_id}) to be a participant"
            )
        return [
            Game(
                first_bat_id=away.team_id,
                second_bat_id=home.team_id,
                stadium_id=stadium_id,
                label=f"{label_prefix}G{first_game_number + i:02d}",
                game_type=game_type,
            )
            for i in range(length)
        ]

    if first_team_bats_first is None:
        if rng is None:
            raise InvalidSeriesError("ALTERNATING series needs an rng or an explicit first-bat flag")
        first_team_bats_first = draw_first_bat(rng)

    games: List[Game] = []
    for i in range(length):
        if first_bat_for_game(i, first_team_bats_first=first_team_bats_first):
            first, second = team_a, team_b
        else:
            first, second = team_b, team_a
        games.append(
            Game(
                first_bat_id=first.team_id,
                second_bat_id=second.team_id,
                stadium_id=stadium_id,
                label=f"{label_prefix}G{first_game_number + i:02d}",
                game_type=game_type,
            )
        )
    return games
