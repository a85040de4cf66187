"""Random roster generation.

Players are sampled independently: a weighted position, a normally
distributed skill rating clipped to [0, 100], a salary that grows with skill
above a floor, a market value around the salary, and a star flag for the top
of the skill range.
"""

from __future__ import annotations

import random
from typing import List

from residency_scheduler.data import Player

from .constants import (
    MARKET_VALUE_MULTIPLIER_RANGE,
    POSITION_WEIGHTS,
    POSITIONS,
    SALARY_FLOOR,
    SALARY_PER_SKILL_POINT_ABOVE_FLOOR,
    SALARY_SKILL_FLOOR,
    SKILL_MAX,
    SKILL_MEAN,
    SKILL_MIN,
    SKILL_SD,
    STAR_SKILL_THRESHOLD,
)

_FIRST_NAMES = (
    "Babe", "Paul", "Sawyer", "Hollis", "Rusty", "Eli", "Mateo", "Cal", "Dante", "Wes",
    "Jonah", "Tobias", "Reggie", "Luis", "Abe", "Kenji", "Otis", "Marco", "Silas", "Gus",
)
_LAST_NAMES = (
    "Blue", "Bunyan", "McTree", "Striker", "Lefty", "Hart", "Alvarez", "Ridge", "Calloway", "Finch",
    "Moreno", "Sato", "Whitlock", "Barrow", "Kessler", "Duval", "Pryor", "Lindqvist", "Oduya", "Vance",
)


def _clip(val: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, val))


def sample_skill(rng: random.Random) -> float:
    return round(_clip(rng.gauss(SKILL_MEAN, SKILL_SD), SKILL_MIN, SKILL_MAX), 1)


def salary_for_skill(skill: float) -> float:
    return SALARY_FLOOR + max(0.0, skill - SALARY_SKILL_FLOOR) * SALARY_PER_SKILL_POINT_ABOVE_FLOOR


def generate_name(rng: random.Random) -> str:
    return f"{rng.choice(_FIRST_NAMES)} {rng.choice(_LAST_NAMES)}"


def generate_player(rng: random.Random, player_id: int) -> Player:
    skill = sample_skill(rng)
    salary = salary_for_skill(skill)
    lo, hi = MARKET_VALUE_MULTIPLIER_RANGE
    return Player(
        player_id=player_id,
        name=generate_name(rng),
        position=rng.choices(POSITIONS, weights=POSITION_WEIGHTS, k=1)[0],
        skill_rating=skill,
        salary=round(salary, 2),
        market_value=round(salary * rng.uniform(lo, hi), 2),
        is_star=skill >= STAR_SKILL_THRESHOLD,
    )


def generate_roster(rng: random.Random, *, size: int, first_player_id: int = 1) -> List[Player]:
    """Generate ``size`` players with consecutive ids starting at ``first_player_id``."""

    if size < 0:
        raise ValueError("size must be >= 0")
    if first_player_id < 1:
        raise ValueError("first_player_id must be >= 1")
    return [generate_player(rng, first_player_id + i) for i in range(size)]
