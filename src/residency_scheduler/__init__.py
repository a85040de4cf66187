"""Residency season scheduler.

Assigns league teams to host/visitor residency blocks, generates the games in
each block (including alternating first-bat "crossroads" series between
visitors), builds an apex residency, and converges every team's game count
toward a season target.
"""

from .apex import build_apex_residency_block
from .blocks import BlockRules, ScheduleCursor, build_residency_block
from .data import (
    Game,
    GameType,
    LeagueUnion,
    Player,
    Region,
    ResidencyBlock,
    SeasonSchedule,
    SeriesMode,
    Team,
)
from .errors import (
    InsufficientTeamsError,
    InsufficientVisitorsError,
    InvalidSeriesError,
    QuotaPlanningError,
    SchedulingError,
)
from .formulation import QuotaPlan, assign_block_visitors, plan_residency_quotas
from .season import (
    AllocationStrategy,
    SeasonConfig,
    first_team_apex_host,
    generate_season_schedule,
    rotating_apex_host,
)
from .series import generate_series

__all__ = [
    "Game",
    "GameType",
    "LeagueUnion",
    "Player",
    "Region",
    "ResidencyBlock",
    "SeasonSchedule",
    "SeriesMode",
    "Team",
    "SchedulingError",
    "InsufficientTeamsError",
    "InsufficientVisitorsError",
    "InvalidSeriesError",
    "QuotaPlanningError",
    "generate_series",
    "BlockRules",
    "ScheduleCursor",
    "build_residency_block",
    "build_apex_residency_block",
    "QuotaPlan",
    "plan_residency_quotas",
    "assign_block_visitors",
    "AllocationStrategy",
    "SeasonConfig",
    "first_team_apex_host",
    "rotating_apex_host",
    "generate_season_schedule",
]
