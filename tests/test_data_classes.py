import pytest

from residency_scheduler.data import (
    Game,
    GameType,
    LeagueUnion,
    Player,
    Region,
    ResidencyBlock,
    SeasonSchedule,
    Team,
    count_games_by_team,
)
from residency_scheduler.errors import InsufficientTeamsError, InsufficientVisitorsError, SchedulingError


def _team(team_id: int) -> Team:
    return Team(
        team_id=team_id,
        city=f"City{team_id}",
        theme="Theme",
        union=LeagueUnion.ATLANTIC,
        region=Region.KEYSTONE,
    )


def _game(first: int, second: int, stadium: int, label: str = "G01") -> Game:
    return Game(
        first_bat_id=first,
        second_bat_id=second,
        stadium_id=stadium,
        label=label,
        game_type=GameType.REGULAR_SEASON,
    )


def test_region_union_mapping_covers_every_region() -> None:
    for region in Region.__members__.values():
        assert region.union in (LeagueUnion.ATLANTIC, LeagueUnion.PACIFIC)

    assert Region.CONFLUENCE.union is LeagueUnion.ATLANTIC
    assert Region.HEARTLAND_CORE.union is LeagueUnion.PACIFIC


def test_player_raises_when_player_id_is_not_positive() -> None:
    with pytest.raises(ValueError):
        Player(player_id=0, name="A", position="P", skill_rating=50.0)


def test_player_raises_when_skill_rating_is_out_of_range() -> None:
    with pytest.raises(ValueError):
        Player(player_id=1, name="A", position="P", skill_rating=100.5)


def test_player_raises_when_salary_is_negative() -> None:
    with pytest.raises(ValueError):
        Player(player_id=1, name="A", position="P", skill_rating=50.0, salary=-1.0)


def test_team_raises_when_region_is_in_the_other_union() -> None:
    with pytest.raises(ValueError):
        Team(team_id=1, city="X", theme="Y", union=LeagueUnion.PACIFIC, region=Region.KEYSTONE)


def test_team_raises_when_team_id_is_not_positive() -> None:
    with pytest.raises(ValueError):
        Team(team_id=0, city="X", theme="Y", union=LeagueUnion.ATLANTIC, region=Region.KEYSTONE)


def test_team_roster_is_stored_as_tuple_and_ignored_for_equality() -> None:
    star = Player(player_id=1, name="Babe Blue", position="P", skill_rating=95.0, is_star=True)
    regular = Player(player_id=2, name="Paul Bunyan", position="C", skill_rating=60.0)

    with_roster = Team(
        team_id=1,
        city="Maine",
        theme="Lumberjack Spirit",
        union=LeagueUnion.ATLANTIC,
        region=Region.KEYSTONE,
        roster=[star, regular],  # type: ignore[arg-type]
    )
    without_roster = Team(
        team_id=1, city="Maine", theme="Lumberjack Spirit", union=LeagueUnion.ATLANTIC, region=Region.KEYSTONE
    )

    assert isinstance(with_roster.roster, tuple)
    assert with_roster.star_players == (star,)
    assert with_roster == without_roster
    assert with_roster.display_name == "Maine (Lumberjack Spirit)"


def test_game_raises_when_a_team_plays_itself() -> None:
    with pytest.raises(ValueError):
        _game(1, 1, 1)


def test_game_home_team_is_the_second_batter() -> None:
    g = _game(2, 1, 1)
    assert g.home_team_id == 1
    assert g.participants == (2, 1)
    assert g.involves(2) and g.involves(1) and not g.involves(3)


def test_residency_block_raises_when_fewer_than_two_visitors() -> None:
    with pytest.raises(InsufficientVisitorsError):
        ResidencyBlock(host=_team(1), visitors=(_team(2),), start_label="Day 001", end_label="Day 007")


def test_residency_block_raises_when_host_is_a_visitor() -> None:
    with pytest.raises(InsufficientVisitorsError):
        ResidencyBlock(host=_team(1), visitors=(_team(1), _team(2)), start_label="Day 001", end_label="Day 007")


def test_residency_block_raises_when_visitors_repeat() -> None:
    with pytest.raises(InsufficientVisitorsError):
        ResidencyBlock(host=_team(1), visitors=(_team(2), _team(2)), start_label="Day 001", end_label="Day 007")


def test_residency_block_raises_when_game_is_played_away_from_host() -> None:
    with pytest.raises(ValueError):
        ResidencyBlock(
            host=_team(1),
            visitors=(_team(2), _team(3)),
            start_label="Day 001",
            end_label="Day 007",
            games=(_game(2, 3, 2),),
        )


def test_residency_block_raises_when_host_bats_first() -> None:
    with pytest.raises(ValueError):
        ResidencyBlock(
            host=_team(1),
            visitors=(_team(2), _team(3)),
            start_label="Day 001",
            end_label="Day 007",
            games=(_game(1, 2, 1),),
        )


def test_residency_block_splits_host_and_crossroads_games() -> None:
    block = ResidencyBlock(
        host=_team(1),
        visitors=(_team(2), _team(3)),
        start_label="Day 001",
        end_label="Day 007",
        games=(_game(2, 1, 1, "G01"), _game(3, 1, 1, "G02"), _game(2, 3, 1, "G03"), _game(3, 2, 1, "G04")),
    )

    assert block.team_ids == (1, 2, 3)
    assert len(block.host_games) == 2
    assert len(block.crossroads_games) == 2
    assert block.games_for(1) == 2
    assert block.games_for(2) == 3
    assert block.games_for(4) == 0


def test_scheduling_errors_are_value_errors() -> None:
    assert issubclass(SchedulingError, ValueError)
    assert issubclass(InsufficientTeamsError, SchedulingError)


def test_count_games_by_team_includes_listed_teams_without_games() -> None:
    block = ResidencyBlock(
        host=_team(1),
        visitors=(_team(2), _team(3)),
        start_label="Day 001",
        end_label="Day 007",
        games=(_game(2, 1, 1), _game(2, 3, 1, "G02")),
    )

    tally = count_games_by_team([block], team_ids=[1, 2, 3, 4])

    assert tally == {1: 1, 2: 2, 3: 1, 4: 0}


def test_season_schedule_deviation_and_tolerance() -> None:
    schedule = SeasonSchedule(blocks=(), tally={1: 112, 2: 118, 3: 115}, games_per_team=115)

    assert schedule.deviation(1) == -3
    assert schedule.deviation(2) == 3
    assert schedule.deviation(99) == -115
    assert schedule.max_deviation == 3
    assert schedule.within_tolerance(3)
    assert not schedule.within_tolerance(2)


def test_empty_season_schedule_carries_issues() -> None:
    err = InsufficientTeamsError("too few")
    schedule = SeasonSchedule.empty(115, err)

    assert schedule.is_empty
    assert schedule.issues == (err,)
    assert schedule.max_deviation == 0
    assert list(schedule.all_games()) == []
