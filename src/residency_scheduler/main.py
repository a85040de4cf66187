from __future__ import annotations

import dataclasses
import logging
import os
from typing import Optional, Sequence

from residency_scheduler.data import SeasonSchedule, Team
from residency_scheduler.season import ApexHostPolicy, SeasonConfig, generate_season_schedule, rotating_apex_host


def configure_logging(*, level: int = logging.INFO) -> None:
    """Configure a simple root logger that writes to stdout.

    This is safe to call multiple times.
    """

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
    else:
        root.setLevel(level)


logger = logging.getLogger(__name__)


def schedule_season(
    *,
    teams: Sequence[Team],
    games_per_team: int,
    seed: Optional[int] = None,
    config: Optional[SeasonConfig] = None,
    apex_host_policy: ApexHostPolicy = rotating_apex_host,
    log_level: int | None = logging.INFO,
) -> SeasonSchedule:
    """Top-level entrypoint: log the run configuration and generate the season.

    Setting ``RESIDENCY_SOLVER_OUTPUT`` in the environment turns on the quota
    solver's own output regardless of ``config``.
    """

    if log_level is not None:
        configure_logging(level=log_level)

    config = config if config is not None else SeasonConfig()
    if os.environ.get("RESIDENCY_SOLVER_OUTPUT") and not config.enable_solver_output:
        config = dataclasses.replace(config, enable_solver_output=True)

    logger.info("Scheduling season for %d teams: games_per_team=%d seed=%s", len(teams), games_per_team, seed)
    logger.info(
        "Allocation=%s apex_target=%d season_index=%d block_rules=%s solver_time_limit=%s solver_gap=%s",
        config.allocation.value,
        config.apex_target_game_count,
        config.season_index,
        config.block_rules,
        config.solver_time_limit_seconds,
        config.solver_gap_rel,
    )

    schedule = generate_season_schedule(
        teams,
        games_per_team,
        seed=seed,
        config=config,
        apex_host_policy=apex_host_policy,
    )

    if schedule.is_empty:
        logger.warning("No residency blocks were generated")
    for issue in schedule.issues:
        logger.info("Recorded issue: %s: %s", type(issue).__name__, issue)

    return schedule
