"""
Random Byte Sources
===================

CXNN masks a random byte with NN. The interpreter takes its random bytes
from an injected RandomSource so tests can script exact values; the
default is a seeded generator, making runs reproducible.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import random
from typing import Iterable, Protocol

DEFAULT_SEED = 7


class RandomSource(Protocol):
    """Anything that can produce a byte (0-255) on demand."""

    def random_byte(self) -> int:
        """Return the next random byte."""
        ...


class SeededRandom:
    """
    Pseudo-random bytes from Python's Mersenne Twister.

    Two instances built with the same seed produce the same sequence.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self.seed = seed
        self._random = random.Random(seed)

    def random_byte(self) -> int:
        return self._random.getrandbits(8)

    def reseed(self, seed: int) -> None:
        """Restart the sequence from a new seed."""
        self.seed = seed
        self._random.seed(seed)


class ScriptedRandom:
    """
    Replays a fixed sequence of bytes, cycling when exhausted.

    Example:
        >>> rng = ScriptedRandom([0xAB, 0x01])
        >>> [rng.random_byte() for _ in range(3)]
        [171, 1, 171]
    """

    def __init__(self, values: Iterable[int]):
        self._values = [v & 0xFF for v in values]
        if not self._values:
            raise ValueError("ScriptedRandom needs at least one value")
        self._index = 0

    def random_byte(self) -> int:
        value = self._values[self._index]
        self._index = (self._index + 1) % len(self._values)
        return value
