from __future__ import annotations
import random
from typing import Callable, Optional

from .machine import Machine

Uniform = Callable[[], float]  # returns a float in [0, 1)


class Shuffler:
    """Fisher-Yates over the whole pool, empty slots included."""

    def __init__(self, source: Optional[Uniform] = None, seed: int | None = None):
        if source is None:
            # seed=None reseeds from OS entropy / system time
            source = random.Random(seed).random
        self._uniform = source

    def shuffle(self, machine: Machine) -> None:
        pool = machine.pool
        for i in range(len(pool) - 1, 0, -1):
            j = int((i + 1) * self._uniform())
            pool[i], pool[j] = pool[j], pool[i]
