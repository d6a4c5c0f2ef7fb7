"""Seeded RNG for reproducible phase sets.

A ``SeededRandom`` is built from an opaque seed string (a set id or a
reroll token). Identical seed -> identical draw sequence -> identical
phases. It is a ``random.Random`` subclass so the samplers can take
either a seeded or an unseeded generator, but it never touches the
module-level ``random`` state.
"""

import random

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def seed_accumulator(seed: str) -> int:
    """Sum of the seed's character codes."""
    return sum(ord(ch) for ch in seed)


class SeededRandom(random.Random):
    """Linear congruential draws keyed by a seed string.

    Only ``random()`` is driven by the recurrence; the phase samplers
    draw exclusively through it.
    """

    def __init__(self, seed: str) -> None:
        self._accumulator = 0
        super().__init__(seed)

    def seed(self, a=None, version: int = 2) -> None:  # noqa: ARG002
        if not isinstance(a, str):
            raise ValueError(
                f"SeededRandom requires a string seed, got {type(a).__name__}"
            )
        self.seed_string = a
        self._accumulator = seed_accumulator(a)

    def random(self) -> float:
        self._accumulator = (
            self._accumulator * LCG_MULTIPLIER + LCG_INCREMENT
        ) % LCG_MODULUS
        return self._accumulator / LCG_MODULUS

    def getstate(self) -> tuple[str, int]:
        return (self.seed_string, self._accumulator)

    def setstate(self, state: tuple[str, int]) -> None:
        self.seed_string, self._accumulator = state
