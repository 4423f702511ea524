"""
Seeded random source for the trial scheduler.
"""

from typing import Optional

import numpy as np


class RandomState:
    """
    Supplies bounded random integers, backed by a numpy Generator.

    Attributes:
        seed: Seed the generator was created with (None for OS entropy)
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def randrange(self, low: int, high: int) -> int:
        """
        Draw an integer uniformly from [low, high).

        Args:
            low: Inclusive lower bound
            high: Exclusive upper bound

        Returns:
            Random integer
        """
        if high <= low:
            raise ValueError(f"Empty range for randrange({low}, {high})")
        return int(self._rng.integers(low, high))

    def __repr__(self) -> str:
        return f"RandomState(seed={self.seed})"
