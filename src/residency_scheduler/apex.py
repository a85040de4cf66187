"""Apex residency construction.

An apex residency is an enlarged block with relaxed rules: up to four
visitors drawn at random, short host series, 3-game alternating series between
every pair of visitors, and single padding games until a target game count is
reached. Every game in the block is tagged ``APEX_RESIDENCY``.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from residency_scheduler.blocks import ScheduleCursor
from residency_scheduler.data import Game, GameType, ResidencyBlock, SeriesMode, Team
from residency_scheduler.errors import InsufficientVisitorsError, InvalidSeriesError
from residency_scheduler.series import generate_series

logger = logging.getLogger(__name__)


APEX_MAX_VISITORS: int = 4
APEX_HOST_GAMES_CAP: int = 2
APEX_CROSSROADS_SERIES_LENGTH: int = 3
APEX_BLOCK_DAYS: int = 10
DEFAULT_APEX_TARGET_GAME_COUNT: int = 10


@dataclass(frozen=True, slots=True)
class ApexRules:
    max_visitors: int = APEX_MAX_VISITORS
    host_games_cap: int = APEX_HOST_GAMES_CAP
    crossroads_series_length: int = APEX_CROSSROADS_SERIES_LENGTH
    duration_days: int = APEX_BLOCK_DAYS

    def __post_init__(self) -> None:
        if self.max_visitors < 2:
            raise ValueError("ApexRules.max_visitors must be >= 2")
        if self.host_games_cap < 0:
            raise ValueError("ApexRules.host_games_cap must be >= 0")
        if self.crossroads_series_length < 1:
            raise ValueError("ApexRules.crossroads_series_length must be >= 1")
        if self.duration_days < 1:
            raise ValueError("ApexRules.duration_days must be >= 1")


def select_apex_visitors(
    host: Team,
    candidate_pool: Sequence[Team],
    *,
    rng: random.Random,
    max_visitors: int = APEX_MAX_VISITORS,
) -> List[Team]:
    """Shuffle the pool (minus the host and duplicates) and take up to ``max_visitors``."""

    unique: Dict[int, Team] = {}
    for team in candidate_pool:
        if team.team_id != host.team_id:
            unique.setdefault(team.team_id, team)

    pool = list(unique.values())
    rng.shuffle(pool)
    visitors = pool[:max_visitors]

    if len(visitors) < 2:
        raise InsufficientVisitorsError(
            f"Apex host {host.team_id} has {len(visitors)} eligible visitor(s); at least 2 are required"
        )
    return visitors


def build_apex_residency_block(
    host: Team,
    candidate_pool: Sequence[Team],
    target_game_count: int = DEFAULT_APEX_TARGET_GAME_COUNT,
    *,
    rng: random.Random,
    cursor: Optional[ScheduleCursor] = None,
    rules: ApexRules = ApexRules(),
) -> ResidencyBlock:
    """Build the apex residency hosted by ``host``.

    The block always holds at least ``target_game_count`` games: if the host
    series and visitor pair series fall short, single games between the first
    two visitors are appended (the visitor with the larger id bats second).

    Raises
    ------
    InvalidSeriesError
        If ``target_game_count < 1``.
    InsufficientVisitorsError
        If fewer than two distinct non-host teams are in ``candidate_pool``.
    """

    if target_game_count < 1:
        raise InvalidSeriesError(f"Apex target game count must be positive, got {target_game_count}")

    visitors = select_apex_visitors(host, candidate_pool, rng=rng, max_visitors=rules.max_visitors)

    cursor = cursor if cursor is not None else ScheduleCursor()
    start_label, end_label = cursor.reserve(rules.duration_days)
    prefix = f"{start_label} "

    games: List[Game] = []

    host_games_per_visitor = min(rules.host_games_cap, target_game_count // len(visitors))
    if host_games_per_visitor > 0:
        for visitor in visitors:
            games.extend(
                generate_series(
                    visitor,
                    host,
                    host,
                    host_games_per_visitor,
                    SeriesMode.HOST_SECOND,
                    GameType.APEX_RESIDENCY,
                    label_prefix=prefix,
                    first_game_number=len(games) + 1,
                )
            )

    for visitor_a, visitor_b in itertools.combinations(visitors, 2):
        games.extend(
            generate_series(
                visitor_a,
                visitor_b,
                host,
                rules.crossroads_series_length,
                SeriesMode.ALTERNATING,
                GameType.APEX_RESIDENCY,
                rng=rng,
                label_prefix=prefix,
                first_game_number=len(games) + 1,
            )
        )

    first, second = visitors[0], visitors[1]
    home, away = (first, second) if first.team_id > second.team_id else (second, first)
    while len(games) < target_game_count:
        games.append(
            Game(
                first_bat_id=away.team_id,
                second_bat_id=home.team_id,
                stadium_id=host.team_id,
                label=f"{prefix}G{len(games) + 1:02d}",
                game_type=GameType.APEX_RESIDENCY,
            )
        )

    logger.debug(
        "Apex residency at %s (%s..%s): visitors=%s games=%d target=%d",
        host.city,
        start_label,
        end_label,
        [v.city for v in visitors],
        len(games),
        target_game_count,
    )

    return ResidencyBlock(
        host=host,
        visitors=tuple(visitors),
        start_label=start_label,
        end_label=end_label,
        games=tuple(games),
        is_apex=True,
    )
