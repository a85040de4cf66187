from __future__ import annotations

import random
from collections import Counter

import pytest

from residency_scheduler.data import GameType, LeagueUnion, Region, SeriesMode, Team
from residency_scheduler.errors import InvalidSeriesError
from residency_scheduler.series import draw_first_bat, first_bat_for_game, generate_series


def _team(team_id: int) -> Team:
    return Team(team_id=team_id, city=f"City{team_id}", theme="T", union=LeagueUnion.PACIFIC, region=Region.CASCADE_TERRITORY)


A, B, C = _team(1), _team(2), _team(3)


def test_host_second_series_puts_stadium_team_second_in_every_game() -> None:
    games = generate_series(A, B, A, 3, SeriesMode.HOST_SECOND, GameType.REGULAR_SEASON)

    assert len(games) == 3
    assert all(g.first_bat_id == B.team_id and g.second_bat_id == A.team_id for g in games)
    assert all(g.stadium_id == A.team_id for g in games)
    assert all(g.game_type is GameType.REGULAR_SEASON for g in games)


def test_host_second_series_works_when_stadium_team_is_listed_second() -> None:
    games = generate_series(B, A, A, 2, SeriesMode.HOST_SECOND, GameType.REGULAR_SEASON)

    assert [g.second_bat_id for g in games] == [A.team_id, A.team_id]


def test_host_second_series_raises_when_stadium_team_is_not_playing() -> None:
    with pytest.raises(InvalidSeriesError):
        generate_series(B, C, A, 3, SeriesMode.HOST_SECOND, GameType.REGULAR_SEASON)


def test_alternating_series_flips_first_bat_every_game() -> None:
    games = generate_series(
        B,
        C,
        A,
        5,
        SeriesMode.ALTERNATING,
        GameType.CROSSROADS,
        first_team_bats_first=True,
    )

    assert [g.first_bat_id for g in games] == [2, 3, 2, 3, 2]
    assert [g.second_bat_id for g in games] == [3, 2, 3, 2, 3]
    assert all(g.stadium_id == A.team_id for g in games)


def test_alternating_series_starting_with_second_team() -> None:
    games = generate_series(B, C, A, 4, SeriesMode.ALTERNATING, GameType.CROSSROADS, first_team_bats_first=False)

    assert [g.first_bat_id for g in games] == [3, 2, 3, 2]


def test_odd_alternating_series_splits_first_bat_three_two() -> None:
    games = generate_series(B, C, A, 5, SeriesMode.ALTERNATING, GameType.CROSSROADS, rng=random.Random(11))

    counts = Counter(g.first_bat_id for g in games)

    assert sorted(counts.values()) == [2, 3]
    for prev, nxt in zip(games, games[1:]):
        assert prev.first_bat_id != nxt.first_bat_id


def test_alternating_series_is_reproducible_for_a_seed() -> None:
    a = generate_series(B, C, A, 5, SeriesMode.ALTERNATING, GameType.CROSSROADS, rng=random.Random(3))
    b = generate_series(B, C, A, 5, SeriesMode.ALTERNATING, GameType.CROSSROADS, rng=random.Random(3))

    assert a == b


def test_alternating_series_needs_rng_or_flag() -> None:
    with pytest.raises(InvalidSeriesError):
        generate_series(B, C, A, 5, SeriesMode.ALTERNATING, GameType.CROSSROADS)


def test_series_raises_when_length_is_not_positive() -> None:
    with pytest.raises(InvalidSeriesError):
        generate_series(A, B, A, 0, SeriesMode.HOST_SECOND, GameType.REGULAR_SEASON)


def test_series_raises_when_team_plays_itself() -> None:
    with pytest.raises(InvalidSeriesError):
        generate_series(A, A, A, 3, SeriesMode.HOST_SECOND, GameType.REGULAR_SEASON)


def test_series_labels_use_prefix_and_running_number() -> None:
    games = generate_series(
        B,
        A,
        A,
        3,
        SeriesMode.HOST_SECOND,
        GameType.REGULAR_SEASON,
        label_prefix="Day 008 ",
        first_game_number=4,
    )

    assert [g.label for g in games] == ["Day 008 G04", "Day 008 G05", "Day 008 G06"]


def test_first_bat_for_game_alternates_from_the_flag() -> None:
    assert [first_bat_for_game(i, first_team_bats_first=True) for i in range(4)] == [True, False, True, False]
    assert [first_bat_for_game(i, first_team_bats_first=False) for i in range(4)] == [False, True, False, True]


def test_draw_first_bat_returns_both_sides_over_many_draws() -> None:
    rng = random.Random(0)
    draws = {draw_first_bat(rng) for _ in range(50)}

    assert draws == {True, False}
