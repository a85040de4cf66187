"""Project-wide constants for :mod:`league_roster`.

Keeps literal values and default assumptions for roster generation and the
toy game simulator in one place.
"""

from __future__ import annotations

DEFAULT_ROSTER_SIZE: int = 26

POSITIONS: tuple[str, ...] = ("P", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH")
# Pitchers are sampled more often than any single field position.
POSITION_WEIGHTS: tuple[float, ...] = (13, 2, 1.5, 1.5, 1.5, 1.5, 1.5, 1.5, 1.5, 1)

SKILL_MEAN: float = 70.0
SKILL_SD: float = 12.0
SKILL_MIN: float = 0.0
SKILL_MAX: float = 100.0

# Salaries scale with skill above a floor (dollars).
SALARY_FLOOR: float = 700_000.0
SALARY_PER_SKILL_POINT_ABOVE_FLOOR: float = 600_000.0
SALARY_SKILL_FLOOR: float = 60.0

# Market value is salary times a noisy multiplier.
MARKET_VALUE_MULTIPLIER_RANGE: tuple[float, float] = (0.9, 1.6)

STAR_SKILL_THRESHOLD: float = 90.0

INNINGS_PER_GAME: int = 9
HOME_RUN_BASES: int = 4
