from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict

from .sorting import order_bonus, sort_main


class Ticket(BaseModel):
    """Winning numbers of one finished playthrough."""

    model_config = ConfigDict(frozen=True)

    variant: str
    main: List[int]
    bonus: List[int]

    def format(self) -> str:
        text = " ".join(f"{n:02d}" for n in self.main)
        if self.bonus:
            text += " | " + " ".join(f"{n:02d}" for n in self.bonus)
        return text


class DrawResult:
    """Numbers collected while the drums spin, in draw order."""

    def __init__(self, sample: int, bonus: int) -> None:
        self.sample = sample
        self.bonus_count = bonus
        self.main: List[int] = []
        self.bonus: List[int] = []

    @property
    def complete(self) -> bool:
        return len(self.main) == self.sample and len(self.bonus) == self.bonus_count

    @property
    def drawing_main(self) -> bool:
        return len(self.main) < self.sample

    def record(self, value: int) -> None:
        """Append to main numbers until the sample is full, then to bonus."""
        if self.drawing_main:
            self.main.append(value)
        elif len(self.bonus) < self.bonus_count:
            self.bonus.append(value)
        else:
            raise ValueError("All numbers have already been drawn")

    def freeze(self, variant: str) -> Ticket:
        if not self.complete:
            raise ValueError("Draw is not complete")
        return Ticket(variant=variant, main=sort_main(self.main), bonus=order_bonus(self.bonus))
