"""Season orchestration.

Builds a whole season as an ordered sequence of residency blocks:

1. one apex residency, hosted by the team an :data:`ApexHostPolicy` picks;
2. regular residency blocks, allocated by one of two strategies:

   - ``BALANCED``: solve hosting/visiting quotas against the tally left by the
     apex block (:func:`residency_scheduler.formulation.plan_residency_quotas`),
     then assign exactly two visitors to every hosted block so that each team
     meets its visiting quota
     (:func:`residency_scheduler.formulation.assign_block_visitors`);
   - ``LEGACY``: one block per host in list order with two random visitors,
     stopping at ``len(teams) // 2`` blocks. The tally is informational only.

The whole computation is a pure function of (teams, target, seed, config): the
only randomness comes from one :class:`random.Random` owned by the call.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, MutableSequence, Optional, Sequence

from residency_scheduler.apex import DEFAULT_APEX_TARGET_GAME_COUNT, ApexRules, build_apex_residency_block
from residency_scheduler.blocks import BlockRules, ScheduleCursor, build_residency_block
from residency_scheduler.data import ResidencyBlock, SeasonSchedule, Team, count_games_by_team
from residency_scheduler.errors import (
    InsufficientTeamsError,
    InsufficientVisitorsError,
    QuotaPlanningError,
    SchedulingError,
)
from residency_scheduler.formulation import QuotaPlan, assign_block_visitors, plan_residency_quotas

logger = logging.getLogger(__name__)


MIN_TEAMS: int = 3
VISITORS_PER_REGULAR_BLOCK: int = 2
DEFAULT_SOLVER_TIME_LIMIT_SECONDS: int = 10

ApexHostPolicy = Callable[[Sequence[Team], int], Team]


def first_team_apex_host(teams: Sequence[Team], season_index: int) -> Team:
    """Always the first listed team."""

    _ = season_index
    return teams[0]


def rotating_apex_host(teams: Sequence[Team], season_index: int) -> Team:
    """Rotate through the teams, one per season."""

    return teams[season_index % len(teams)]


class AllocationStrategy(str, Enum):
    BALANCED = "balanced"
    LEGACY = "legacy"


@dataclass(frozen=True, slots=True)
class SeasonConfig:
    """Knobs for a season run. Defaults reproduce the league's standard format."""

    apex_target_game_count: int = DEFAULT_APEX_TARGET_GAME_COUNT
    season_index: int = 0
    allocation: AllocationStrategy = AllocationStrategy.BALANCED
    block_rules: BlockRules = BlockRules()
    apex_rules: ApexRules = ApexRules()

    # Applies to each CBC solve; None lets CBC run until it proves optimality.
    solver_time_limit_seconds: int | None = DEFAULT_SOLVER_TIME_LIMIT_SECONDS
    solver_gap_rel: float | None = None
    enable_solver_output: bool = False

    def __post_init__(self) -> None:
        if self.apex_target_game_count < 1:
            raise ValueError("SeasonConfig.apex_target_game_count must be >= 1")
        if self.season_index < 0:
            raise ValueError("SeasonConfig.season_index must be >= 0")
        if self.solver_time_limit_seconds is not None and self.solver_time_limit_seconds < 1:
            raise ValueError("SeasonConfig.solver_time_limit_seconds must be >= 1")
        if self.solver_gap_rel is not None and not 0.0 <= self.solver_gap_rel < 1.0:
            raise ValueError("SeasonConfig.solver_gap_rel must be within [0, 1)")


def _unique_teams(teams: Sequence[Team]) -> List[Team]:
    """Drop repeated team ids, keeping the first occurrence and the input order."""

    seen: set[int] = set()
    unique: List[Team] = []
    for team in teams:
        if team.team_id not in seen:
            seen.add(team.team_id)
            unique.append(team)
    return unique


def _record(issues: MutableSequence[SchedulingError], error: SchedulingError) -> None:
    logger.warning("Skipping: %s", error)
    issues.append(error)


def generate_season_schedule(
    all_teams: Sequence[Team],
    games_per_team: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    config: Optional[SeasonConfig] = None,
    apex_host_policy: ApexHostPolicy = rotating_apex_host,
) -> SeasonSchedule:
    """Generate the season's residency blocks.

    Parameters
    ----------
    all_teams:
        League teams in a stable order. Repeated ids are ignored.
    games_per_team:
        Target tally for every team.
    seed, rng:
        Randomness source. An injected ``rng`` wins; otherwise a fresh
        ``random.Random(seed)`` is created for this call.

    Returns
    -------
    SeasonSchedule
        Apex block first, then regular blocks in generation order. With fewer
        than three teams the schedule is empty and ``issues`` holds the
        :class:`InsufficientTeamsError`; this function does not raise it.
    """

    config = config if config is not None else SeasonConfig()
    rng = rng if rng is not None else random.Random(seed)

    teams = _unique_teams(all_teams)
    if len(teams) < MIN_TEAMS:
        error = InsufficientTeamsError(
            f"Need at least {MIN_TEAMS} teams for a residency (1 host + 2 visitors), got {len(teams)}"
        )
        logger.warning("%s; returning an empty schedule", error)
        return SeasonSchedule.empty(games_per_team, error)

    team_ids = [t.team_id for t in teams]
    cursor = ScheduleCursor()
    issues: List[SchedulingError] = []
    blocks: List[ResidencyBlock] = []

    apex_host = apex_host_policy(teams, config.season_index)
    logger.info("Apex residency host: %s (season_index=%d)", apex_host.city, config.season_index)
    try:
        blocks.append(
            build_apex_residency_block(
                apex_host,
                teams,
                config.apex_target_game_count,
                rng=rng,
                cursor=cursor,
                rules=config.apex_rules,
            )
        )
    except SchedulingError as e:
        _record(issues, e)

    if config.allocation is AllocationStrategy.BALANCED:
        try:
            blocks.extend(
                _allocate_balanced(
                    teams,
                    base_tally=count_games_by_team(blocks, team_ids),
                    games_per_team=games_per_team,
                    rng=rng,
                    cursor=cursor,
                    config=config,
                )
            )
        except QuotaPlanningError as e:
            _record(issues, e)
            logger.warning("Falling back to legacy allocation")
            blocks.extend(_allocate_legacy(teams, apex_host, rng=rng, cursor=cursor, config=config, issues=issues))
    else:
        blocks.extend(_allocate_legacy(teams, apex_host, rng=rng, cursor=cursor, config=config, issues=issues))

    tally = count_games_by_team(blocks, team_ids)
    schedule = SeasonSchedule(
        blocks=tuple(blocks),
        tally=tally,
        games_per_team=games_per_team,
        issues=tuple(issues),
    )
    logger.info(
        "Season schedule: blocks=%d games=%d target=%d max_deviation=%d issues=%d",
        len(schedule.blocks),
        sum(len(b.games) for b in schedule.blocks),
        games_per_team,
        schedule.max_deviation,
        len(issues),
    )
    return schedule


# ============================================================================
# Legacy allocation
# ============================================================================


def _allocate_legacy(
    teams: Sequence[Team],
    apex_host: Team,
    *,
    rng: random.Random,
    cursor: ScheduleCursor,
    config: SeasonConfig,
    issues: MutableSequence[SchedulingError],
) -> List[ResidencyBlock]:
    """One block per host in list order (apex host excluded), stop at ``len(teams) // 2``."""

    block_limit = len(teams) // 2
    blocks: List[ResidencyBlock] = []

    for host in teams:
        if len(blocks) >= block_limit:
            break
        if host.team_id == apex_host.team_id:
            continue

        candidates = [t for t in teams if t.team_id != host.team_id]
        if len(candidates) < VISITORS_PER_REGULAR_BLOCK:
            _record(
                issues,
                InsufficientVisitorsError(f"Host {host.team_id} has only {len(candidates)} candidate visitor(s)"),
            )
            continue

        visitors = rng.sample(candidates, VISITORS_PER_REGULAR_BLOCK)
        try:
            blocks.append(build_residency_block(host, visitors, rng=rng, cursor=cursor, rules=config.block_rules))
        except SchedulingError as e:
            _record(issues, e)

    return blocks


# ============================================================================
# Balanced allocation
# ============================================================================


def _interleave_hosts(teams: Sequence[Team], hosting: Mapping[int, int]) -> List[Team]:
    """Host order: round r lists every team with more than r blocks to host, in team order."""

    rounds = max(hosting.values(), default=0)
    return [t for r in range(rounds) for t in teams if hosting.get(t.team_id, 0) > r]


def _allocate_balanced(
    teams: Sequence[Team],
    *,
    base_tally: Mapping[int, int],
    games_per_team: int,
    rng: random.Random,
    cursor: ScheduleCursor,
    config: SeasonConfig,
) -> List[ResidencyBlock]:
    """Solve quotas, assign visitors to the interleaved host order, then build the blocks."""

    rules = config.block_rules
    plan: QuotaPlan = plan_residency_quotas(
        [t.team_id for t in teams],
        base_tally,
        games_per_team,
        host_games=rules.host_games(VISITORS_PER_REGULAR_BLOCK),
        visitor_games=rules.visitor_games(VISITORS_PER_REGULAR_BLOCK),
        visitors_per_block=VISITORS_PER_REGULAR_BLOCK,
        time_limit_seconds=config.solver_time_limit_seconds,
        gap_rel=config.solver_gap_rel,
        enable_solver_output=config.enable_solver_output,
    )

    hosts = _interleave_hosts(teams, plan.hosting)
    # Random costs pick one of the many valid assignments.
    weights = {(b, t.team_id): rng.random() for b in range(len(hosts)) for t in teams}
    assignment = assign_block_visitors(
        [h.team_id for h in hosts],
        {t.team_id: plan.visiting.get(t.team_id, 0) for t in teams},
        visitors_per_block=VISITORS_PER_REGULAR_BLOCK,
        weights=weights,
        time_limit_seconds=config.solver_time_limit_seconds,
        enable_solver_output=config.enable_solver_output,
    )

    by_id: Dict[int, Team] = {t.team_id: t for t in teams}
    tally: Dict[int, int] = {t.team_id: int(base_tally.get(t.team_id, 0)) for t in teams}

    blocks: List[ResidencyBlock] = []
    for host, visitor_ids in zip(hosts, assignment):
        visitors = [by_id[v] for v in visitor_ids]
        rng.shuffle(visitors)
        block = build_residency_block(host, visitors, rng=rng, cursor=cursor, rules=rules)
        for team_id in block.team_ids:
            tally[team_id] += block.games_for(team_id)
        blocks.append(block)

    logger.info(
        "Balanced allocation: blocks=%d projected_max_deviation=%d realised_max_deviation=%d",
        len(blocks),
        plan.max_deviation,
        max((abs(v - games_per_team) for v in tally.values()), default=0),
    )
    return blocks
