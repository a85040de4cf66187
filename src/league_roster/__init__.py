"""League setup collaborators for :mod:`residency_scheduler`.

This package is intentionally separate from the scheduling core. It supplies
the built-in league (teams and generated rosters) and a toy at-bat/game
simulator; the scheduler only ever consumes the resulting
:class:`~residency_scheduler.data.Team` values.
"""

from .at_bat import AtBatResult, GameResult, simulate_at_bat, simulate_game
from .rosters import generate_player, generate_roster
from .teams import LEAGUE_DEFINITION, build_default_league, teams_in_region, teams_in_union

__all__ = [
    "LEAGUE_DEFINITION",
    "build_default_league",
    "teams_in_region",
    "teams_in_union",
    "generate_player",
    "generate_roster",
    "AtBatResult",
    "GameResult",
    "simulate_at_bat",
    "simulate_game",
]
