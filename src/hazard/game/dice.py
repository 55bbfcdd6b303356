from __future__ import annotations

from typing import List

import numpy as np

from hazard.config import DIE_FACES


class Dice:
    """Single source of randomness for territory shuffling and combat."""

    def __init__(self, seed: int | None = None, rng: np.random.Generator | None = None):
        self.rng = rng or np.random.default_rng(seed)

    def roll(self, count: int) -> List[int]:
        if count < 0:
            raise ValueError(f"Cannot roll {count} dice.")
        return [int(value) for value in self.rng.integers(1, DIE_FACES + 1, size=count)]

    def permutation(self, size: int) -> List[int]:
        return [int(value) for value in self.rng.permutation(size)]
