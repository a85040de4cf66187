from __future__ import annotations

import random
from collections import Counter

import pytest

from league_roster.at_bat import AtBatResult, simulate_at_bat, simulate_game
from league_roster.constants import HOME_RUN_BASES, SALARY_FLOOR, STAR_SKILL_THRESHOLD
from league_roster.rosters import generate_roster, salary_for_skill
from league_roster.teams import LEAGUE_DEFINITION, build_default_league, teams_in_region, teams_in_union
from residency_scheduler.data import Game, GameType, LeagueUnion, Player, Region


def test_default_league_has_eighteen_teams_split_evenly_by_union() -> None:
    teams = build_default_league(roster_size=0)

    assert len(teams) == len(LEAGUE_DEFINITION) == 18
    assert [t.team_id for t in teams] == list(range(1, 19))
    assert Counter(t.union for t in teams) == {LeagueUnion.ATLANTIC: 9, LeagueUnion.PACIFIC: 9}
    assert teams[0].city == "Maine"


def test_league_filters_by_union_and_region() -> None:
    teams = build_default_league(roster_size=0)

    assert len(teams_in_union(teams, LeagueUnion.PACIFIC)) == 9
    assert [t.city for t in teams_in_region(teams, Region.CASCADE_TERRITORY)] == ["Seattle"]


def test_default_league_rosters_have_unique_player_ids() -> None:
    teams = build_default_league(roster_size=4)

    ids = [p.player_id for t in teams for p in t.roster]
    assert len(ids) == 18 * 4
    assert len(set(ids)) == len(ids)


def test_default_league_is_reproducible_without_an_rng() -> None:
    a = build_default_league(roster_size=3)
    b = build_default_league(roster_size=3)

    assert [t.roster for t in a] == [t.roster for t in b]


def test_build_default_league_raises_on_negative_roster_size() -> None:
    with pytest.raises(ValueError):
        build_default_league(roster_size=-1)


def test_generated_players_stay_within_ranges() -> None:
    roster = generate_roster(random.Random(3), size=200)

    for p in roster:
        assert 0.0 <= p.skill_rating <= 100.0
        assert p.salary >= SALARY_FLOOR
        assert p.market_value > 0
        assert p.is_star == (p.skill_rating >= STAR_SKILL_THRESHOLD)
    assert [p.player_id for p in roster] == list(range(1, 201))


def test_salary_grows_with_skill_above_the_floor() -> None:
    assert salary_for_skill(40.0) == SALARY_FLOOR
    assert salary_for_skill(80.0) > salary_for_skill(70.0)


def test_at_bat_runs_only_on_home_runs() -> None:
    assert AtBatResult(batter_id=1, hit=True, bases=HOME_RUN_BASES).runs == 1
    assert AtBatResult(batter_id=1, hit=True, bases=2).runs == 0
    assert AtBatResult(batter_id=1, hit=False, bases=0).runs == 0


def test_simulate_at_bat_respects_skill_extremes() -> None:
    rng = random.Random(0)
    never = Player(player_id=1, name="A", position="P", skill_rating=0.0)
    always = Player(player_id=2, name="B", position="C", skill_rating=100.0)

    assert not any(simulate_at_bat(never, rng).hit for _ in range(50))
    results = [simulate_at_bat(always, rng) for _ in range(50)]
    assert all(r.hit and 1 <= r.bases <= HOME_RUN_BASES for r in results)


def test_simulate_game_gives_each_side_one_at_bat_per_inning() -> None:
    teams = build_default_league(roster_size=5)
    game = Game(first_bat_id=1, second_bat_id=2, stadium_id=2, label="G01", game_type=GameType.REGULAR_SEASON)

    result = simulate_game(game, {t.team_id: t for t in teams}, random.Random(1))

    assert len(result.at_bats) == 18
    runs = sum(r.runs for r in result.at_bats)
    assert result.first_bat_runs + result.second_bat_runs == runs
    if result.first_bat_runs != result.second_bat_runs:
        assert result.winner_id in (1, 2)
    else:
        assert result.winner_id is None


def test_simulate_game_raises_on_empty_roster() -> None:
    teams = build_default_league(roster_size=0)
    game = Game(first_bat_id=1, second_bat_id=2, stadium_id=2, label="G01", game_type=GameType.REGULAR_SEASON)

    with pytest.raises(ValueError):
        simulate_game(game, {t.team_id: t for t in teams}, random.Random(1))
