import math
import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

MIN_WEIGHT = 0.3


def position_weight(position: int) -> float:
    """Exponent applied to uniform draws at a phase position.

    Drops by 0.1 per position and bottoms out at 0.3 from position 8.
    """
    return max(MIN_WEIGHT, 1 - 0.1 * (position - 1))


def weighted_random(
    low: int, high: int, position: int, rng: random.Random
) -> int:
    """Draw an integer in the inclusive range [low, high].

    The uniform draw is raised to ``position_weight(position)`` before
    scaling, so the shape of the distribution shifts with position.
    Raises ValueError when the range is malformed (low > high).
    """
    if low > high:
        raise ValueError(
            f"range is malformed: low ({low}) must be <= high ({high})"
        )
    if low == high:
        return low
    span = high - low + 1
    draw = rng.random() ** position_weight(position)
    return low + math.floor(draw * span)


def pick(items: Sequence[T], rng: random.Random) -> T:
    if not items:
        raise ValueError("items must contain at least one item")
    return items[math.floor(rng.random() * len(items))]


def chance(probability: float, rng: random.Random) -> bool:
    return rng.random() < probability
