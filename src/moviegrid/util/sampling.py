from __future__ import annotations

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class Sampler:
    """Uniform sampling over a private ``random.Random``.

    Pass ``seed`` to make draws reproducible; ``None`` seeds from the OS.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        """Pick ``k`` items without replacement; short pools return every item."""
        if k < 0:
            raise ValueError("k must be >= 0")
        return self._rng.sample(list(items), min(k, len(items)))

    def shuffled(self, items: Sequence[T]) -> list[T]:
        result = list(items)
        self._rng.shuffle(result)
        return result
