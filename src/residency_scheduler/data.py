"""Domain data model for the residency season scheduler.

This module is intentionally *pure*: it defines the core enums and dataclasses
used throughout the project, with no dependency on file formats or on how the
schedule is generated.

Teams and players are supplied by an external collaborator (see
:mod:`league_roster`) and are never mutated here. Games and residency blocks are
created by the builders in :mod:`residency_scheduler.series`,
:mod:`residency_scheduler.blocks` and :mod:`residency_scheduler.apex`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Mapping, Sequence, Tuple

from residency_scheduler.errors import InsufficientVisitorsError, SchedulingError


class LeagueUnion(str, Enum):
    """The two top-level league divisions."""

    ATLANTIC = "ATLANTIC"
    PACIFIC = "PACIFIC"


class Region(str, Enum):
    """Sub-groupings of teams within a union."""

    # Atlantic
    KEYSTONE = "KEYSTONE"
    TIDEWATER = "TIDEWATER"
    CONFLUENCE = "CONFLUENCE"

    # Pacific
    GOLDEN_PENNANT = "GOLDEN_PENNANT"
    CASCADE_TERRITORY = "CASCADE_TERRITORY"
    SUNSTONE_DIVISION = "SUNSTONE_DIVISION"
    HEARTLAND_CORE = "HEARTLAND_CORE"

    @property
    def union(self) -> LeagueUnion:
        return REGION_UNION[self]


REGION_UNION: Mapping[Region, LeagueUnion] = {
    Region.KEYSTONE: LeagueUnion.ATLANTIC,
    Region.TIDEWATER: LeagueUnion.ATLANTIC,
    Region.CONFLUENCE: LeagueUnion.ATLANTIC,
    Region.GOLDEN_PENNANT: LeagueUnion.PACIFIC,
    Region.CASCADE_TERRITORY: LeagueUnion.PACIFIC,
    Region.SUNSTONE_DIVISION: LeagueUnion.PACIFIC,
    Region.HEARTLAND_CORE: LeagueUnion.PACIFIC,
}


class GameType(str, Enum):
    REGULAR_SEASON = "REGULAR_SEASON"
    CROSSROADS = "CROSSROADS"
    APEX_RESIDENCY = "APEX_RESIDENCY"
    PLAYOFF = "PLAYOFF"
    ALL_STAR = "ALL_STAR"


class SeriesMode(str, Enum):
    """Batting-order rule applied across a series."""

    # The stadium team always bats second.
    HOST_SECOND = "HOST_SECOND"
    # First-bat slot flips every game from a random starting side.
    ALTERNATING = "ALTERNATING"


@dataclass(frozen=True, slots=True)
class Player:
    """A rostered player. Pure data; the scheduler never looks inside."""

    player_id: int
    name: str
    position: str
    skill_rating: float
    salary: float = 0.0
    market_value: float = 0.0
    is_star: bool = False

    def __post_init__(self) -> None:
        if self.player_id <= 0:
            raise ValueError("Player.player_id must be a positive integer")
        if not 0.0 <= self.skill_rating <= 100.0:
            raise ValueError("Player.skill_rating must be within [0, 100]")
        if self.salary < 0:
            raise ValueError("Player.salary must be >= 0")
        if self.market_value < 0:
            raise ValueError("Player.market_value must be >= 0")


@dataclass(frozen=True, slots=True)
class Team:
    """A member club of the league."""

    team_id: int
    city: str
    theme: str
    union: LeagueUnion
    region: Region
    roster: Tuple[Player, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if self.team_id <= 0:
            raise ValueError("Team.team_id must be a positive integer")
        if self.region.union is not self.union:
            raise ValueError(
                f"Team {self.team_id}: region {self.region.value} does not belong to union {self.union.value}"
            )
        # Accept any sequence from callers but store an immutable tuple.
        object.__setattr__(self, "roster", tuple(self.roster))

    @property
    def display_name(self) -> str:
        return f"{self.city} ({self.theme})"

    @property
    def star_players(self) -> Tuple[Player, ...]:
        return tuple(p for p in self.roster if p.is_star)


@dataclass(frozen=True, slots=True)
class Game:
    """A single scheduled game.

    Teams are referenced by identifier. ``second_bat_id`` is the designated
    home team for batting purposes, which is independent of ``stadium_id``
    (the residency host whose ballpark is used).
    """

    first_bat_id: int
    second_bat_id: int
    stadium_id: int
    label: str
    game_type: GameType

    def __post_init__(self) -> None:
        if self.first_bat_id == self.second_bat_id:
            raise ValueError(f"Game {self.label!r}: a team cannot play itself")

    @property
    def home_team_id(self) -> int:
        return self.second_bat_id

    @property
    def participants(self) -> Tuple[int, int]:
        return (self.first_bat_id, self.second_bat_id)

    def involves(self, team_id: int) -> bool:
        return team_id == self.first_bat_id or team_id == self.second_bat_id


@dataclass(frozen=True, slots=True)
class ResidencyBlock:
    """One host team receiving two or more visiting residents for a period."""

    host: Team
    visitors: Tuple[Team, ...]
    start_label: str
    end_label: str
    games: Tuple[Game, ...] = ()
    is_apex: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "visitors", tuple(self.visitors))
        object.__setattr__(self, "games", tuple(self.games))

        validate_visitors(self.host, self.visitors)

        host_id = self.host.team_id
        for game in self.games:
            if game.stadium_id != host_id:
                raise ValueError(
                    f"Game {game.label!r} is played at team {game.stadium_id}, not at block host {host_id}"
                )
            if game.involves(host_id) and game.second_bat_id != host_id:
                raise ValueError(f"Game {game.label!r}: the host must bat second against a visitor")

    @property
    def team_ids(self) -> Tuple[int, ...]:
        return (self.host.team_id,) + tuple(v.team_id for v in self.visitors)

    @property
    def host_games(self) -> Tuple[Game, ...]:
        return tuple(g for g in self.games if g.involves(self.host.team_id))

    @property
    def crossroads_games(self) -> Tuple[Game, ...]:
        """Games between two visiting residents."""

        return tuple(g for g in self.games if not g.involves(self.host.team_id))

    def games_for(self, team_id: int) -> int:
        return sum(1 for g in self.games if g.involves(team_id))


@dataclass(frozen=True, slots=True)
class SeasonSchedule:
    """Ordered residency blocks for a season plus the derived per-team tally.

    ``issues`` holds the recoverable errors the orchestrator caught while
    building the season (skipped hosts, or the reason the schedule is empty).
    """

    blocks: Tuple[ResidencyBlock, ...]
    tally: Mapping[int, int]
    games_per_team: int
    issues: Tuple[SchedulingError, ...] = field(default=(), compare=False)

    @classmethod
    def empty(cls, games_per_team: int, *issues: SchedulingError) -> "SeasonSchedule":
        return cls(blocks=(), tally={}, games_per_team=games_per_team, issues=tuple(issues))

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    @property
    def apex_blocks(self) -> Tuple[ResidencyBlock, ...]:
        return tuple(b for b in self.blocks if b.is_apex)

    @property
    def regular_blocks(self) -> Tuple[ResidencyBlock, ...]:
        return tuple(b for b in self.blocks if not b.is_apex)

    def all_games(self) -> Iterator[Game]:
        for block in self.blocks:
            yield from block.games

    def deviation(self, team_id: int) -> int:
        """Signed difference between a team's tally and the target."""

        return int(self.tally.get(team_id, 0)) - self.games_per_team

    @property
    def max_deviation(self) -> int:
        if not self.tally:
            return 0
        return max(abs(self.deviation(t)) for t in self.tally)

    def within_tolerance(self, tolerance: int) -> bool:
        return self.max_deviation <= tolerance


def validate_visitors(host: Team, visitors: Sequence[Team]) -> None:
    """Raise :class:`InsufficientVisitorsError` unless visitors are >= 2, distinct and exclude the host."""

    ids = [v.team_id for v in visitors]
    if len(ids) < 2:
        raise InsufficientVisitorsError(f"Host {host.team_id} needs at least 2 visitors, got {len(ids)}")
    if host.team_id in ids:
        raise InsufficientVisitorsError(f"Host {host.team_id} cannot also be one of its own visitors")
    if len(set(ids)) != len(ids):
        raise InsufficientVisitorsError(f"Host {host.team_id} has duplicate visitors: {ids}")


def count_games_by_team(blocks: Sequence[ResidencyBlock], team_ids: Sequence[int] = ()) -> Dict[int, int]:
    """Count, per team, the games in which it appears in either batting slot.

    Teams listed in ``team_ids`` are always present in the result (with 0 if
    they never play).
    """

    tally: Dict[int, int] = {t: 0 for t in team_ids}
    for block in blocks:
        for game in block.games:
            for team_id in game.participants:
                tally[team_id] = tally.get(team_id, 0) + 1
    return tally
