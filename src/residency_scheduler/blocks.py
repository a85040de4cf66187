"""Regular residency block construction.

A regular block is one host plus (at least) two visiting residents:

- each visitor plays a short series against the host, host batting second;
- every pair of visitors plays a "crossroads" series at the host's park using
  the alternating first-bat rule.

With the default lengths (3-game host series, 5-game crossroads series) a
two-visitor block has 3 + 3 + 5 = 11 games.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from residency_scheduler.data import Game, GameType, ResidencyBlock, SeriesMode, Team, validate_visitors
from residency_scheduler.series import generate_series

logger = logging.getLogger(__name__)


HOST_SERIES_LENGTH: int = 3
# Odd on purpose: the alternating rule then splits first-bat 3-2 instead of tying.
CROSSROADS_SERIES_LENGTH: int = 5
REGULAR_BLOCK_DAYS: int = 7


@dataclass(frozen=True, slots=True)
class BlockRules:
    """Series lengths and duration used for regular residency blocks."""

    host_series_length: int = HOST_SERIES_LENGTH
    crossroads_series_length: int = CROSSROADS_SERIES_LENGTH
    duration_days: int = REGULAR_BLOCK_DAYS

    def __post_init__(self) -> None:
        if self.host_series_length < 1:
            raise ValueError("BlockRules.host_series_length must be >= 1")
        if self.crossroads_series_length < 1:
            raise ValueError("BlockRules.crossroads_series_length must be >= 1")
        if self.duration_days < 1:
            raise ValueError("BlockRules.duration_days must be >= 1")

    def host_games(self, visitor_count: int = 2) -> int:
        """Games the host plays in a block with ``visitor_count`` visitors."""

        return self.host_series_length * visitor_count

    def visitor_games(self, visitor_count: int = 2) -> int:
        """Games each visitor plays in a block with ``visitor_count`` visitors."""

        return self.host_series_length + self.crossroads_series_length * (visitor_count - 1)


@dataclass(slots=True)
class ScheduleCursor:
    """Running day counter used to label blocks.

    No calendar arithmetic: days are plain ordinals starting at 1.
    """

    day: int = 1

    def __post_init__(self) -> None:
        if self.day < 1:
            raise ValueError("ScheduleCursor.day must be >= 1")

    @staticmethod
    def label(day: int) -> str:
        return f"Day {day:03d}"

    def reserve(self, duration_days: int) -> Tuple[str, str]:
        """Claim the next ``duration_days`` days; return their (start, end) labels."""

        if duration_days < 1:
            raise ValueError("duration_days must be >= 1")
        start = self.day
        end = start + duration_days - 1
        self.day = end + 1
        return self.label(start), self.label(end)


def build_residency_block(
    host: Team,
    visitors: Sequence[Team],
    *,
    rng: random.Random,
    cursor: Optional[ScheduleCursor] = None,
    rules: BlockRules = BlockRules(),
) -> ResidencyBlock:
    """Build one regular residency block.

    Raises
    ------
    InsufficientVisitorsError
        If there are fewer than two visitors, a duplicate visitor, or the host
        appears among its own visitors.
    """

    visitors = tuple(visitors)
    validate_visitors(host, visitors)

    cursor = cursor if cursor is not None else ScheduleCursor()
    start_label, end_label = cursor.reserve(rules.duration_days)
    prefix = f"{start_label} "

    games: List[Game] = []
    for visitor in visitors:
        games.extend(
            generate_series(
                visitor,
                host,
                host,
                rules.host_series_length,
                SeriesMode.HOST_SECOND,
                GameType.REGULAR_SEASON,
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
                GameType.CROSSROADS,
                rng=rng,
                label_prefix=prefix,
                first_game_number=len(games) + 1,
            )
        )

    logger.debug(
        "Residency block at %s (%s..%s): visitors=%s games=%d",
        host.city,
        start_label,
        end_label,
        [v.city for v in visitors],
        len(games),
    )

    return ResidencyBlock(
        host=host,
        visitors=visitors,
        start_label=start_label,
        end_label=end_label,
        games=tuple(games),
    )
