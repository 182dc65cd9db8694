"""The drum: a fixed-width pool of numbered balls and empty slots."""

from __future__ import annotations
from typing import List, Optional

from .errors import ResourceExhaustion
from .rules import Color, DrumRules

EMPTY = 0  # slot holds no ball (padding, or the ball was already drawn)


class Machine:
    """One drum.

    ``pool`` always has ``size`` slots. Balls ``1..count`` sit in it exactly
    once until drawn; every other slot is ``EMPTY``. The shuffler and the
    picker mutate ``pool`` in place; nothing else should.
    """

    def __init__(
        self,
        size: int,
        count: int,
        sample: int,
        bonus: int = 0,
        color: Optional[Color] = None,
    ) -> None:
        DrumRules(size, count, sample, bonus, color).validate()
        self.size = size
        self.count = count
        self.sample = sample
        self.bonus = bonus
        self.color = color
        try:
            self.pool: List[int] = [EMPTY] * size
        except MemoryError as exc:
            raise ResourceExhaustion(f"Cannot allocate a drum of {size} slots") from exc
        self.reset()

    @classmethod
    def from_rules(cls, rules: DrumRules) -> "Machine":
        return cls(rules.size, rules.count, rules.sample, rules.bonus, rules.color)

    def reset(self) -> None:
        """Put balls 1..count back in ascending slot order, padding empty."""
        for i in range(self.size):
            self.pool[i] = i + 1 if i < self.count else EMPTY

    @property
    def remaining(self) -> int:
        """Number of balls still in the drum."""
        return sum(1 for v in self.pool if v != EMPTY)

    def balls(self) -> List[int]:
        return [v for v in self.pool if v != EMPTY]

    def __repr__(self) -> str:
        return (
            f"Machine(size={self.size}, count={self.count}, sample={self.sample}, "
            f"bonus={self.bonus}, remaining={self.remaining})"
        )

