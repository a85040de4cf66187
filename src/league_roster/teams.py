"""The built-in 18-team league.

Nine Atlantic and nine Pacific clubs, identified by city and fan theme (the
league has no official club names yet). Team ids are assigned 1..18 in the
order below, which is also the stable order the season scheduler iterates in.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple

from residency_scheduler.data import LeagueUnion, Region, Team

from .constants import DEFAULT_ROSTER_SIZE
from .rosters import generate_roster

# (city, theme, region); union follows from region.
LEAGUE_DEFINITION: Tuple[Tuple[str, str, Region], ...] = (
    ("Maine", "Lumberjack Spirit", Region.KEYSTONE),
    ("New York", "Metropolitan Pulse", Region.KEYSTONE),
    ("Philadelphia", "Founder's Legacy", Region.KEYSTONE),
    ("Pittsburgh", "Iron Will", Region.KEYSTONE),
    ("Atlanta", "Peach Power", Region.TIDEWATER),
    ("Miami", "Manatee Calm", Region.TIDEWATER),
    ("Charlotte", "Aviator's Edge", Region.TIDEWATER),
    ("Cleveland", "Guardian Might", Region.CONFLUENCE),
    ("Detroit", "Automaker Drive", Region.CONFLUENCE),
    ("Los Angeles", "Star Power", Region.GOLDEN_PENNANT),
    ("San Diego", "Surf Spirit", Region.GOLDEN_PENNANT),
    ("San Francisco", "Seal Strength", Region.GOLDEN_PENNANT),
    ("Seattle", "Rainier Resolve", Region.CASCADE_TERRITORY),
    ("Austin", "Armadillo Resilience", Region.SUNSTONE_DIVISION),
    ("Dallas", "Lonestar Pride", Region.SUNSTONE_DIVISION),
    ("Denver", "Summit Aspirations", Region.SUNSTONE_DIVISION),
    ("St. Louis", "Archer Accuracy", Region.HEARTLAND_CORE),
    ("Kansas City", "Monarch Nobility", Region.HEARTLAND_CORE),
)


def build_default_league(
    *,
    rng: Optional[random.Random] = None,
    roster_size: int = DEFAULT_ROSTER_SIZE,
) -> List[Team]:
    """Create the 18 league teams.

    Rosters are generated only when ``roster_size > 0``; player ids are unique
    across the league. Without an ``rng`` a fixed-seed generator is used so the
    league is the same on every call.
    """

    if roster_size < 0:
        raise ValueError("roster_size must be >= 0")

    rng = rng if rng is not None else random.Random(0)

    teams: List[Team] = []
    next_player_id = 1
    for team_id, (city, theme, region) in enumerate(LEAGUE_DEFINITION, start=1):
        roster = ()
        if roster_size > 0:
            roster = tuple(generate_roster(rng, size=roster_size, first_player_id=next_player_id))
            next_player_id += roster_size
        teams.append(Team(team_id=team_id, city=city, theme=theme, union=region.union, region=region, roster=roster))
    return teams


def teams_in_union(teams: Sequence[Team], union: LeagueUnion) -> List[Team]:
    return [t for t in teams if t.union is union]


def teams_in_region(teams: Sequence[Team], region: Region) -> List[Team]:
    return [t for t in teams if t.region is region]
