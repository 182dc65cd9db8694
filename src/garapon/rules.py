from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import ConfigurationError
from .sorting import SORT_MAX


class Color(str, Enum):
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"


class Family(str, Enum):
    JAPANESE = "japanese"   # one drum, main + bonus ("omake")
    DUAL = "dual"           # main drum + secondary drum


@dataclass(frozen=True)
class DrumRules:
    size: int                       # slots in the drum, padding included
    count: int                      # balls numbered 1..count
    sample: int                     # balls drawn as main/secondary numbers
    bonus: int = 0                  # extra balls drawn after the sample
    color: Optional[Color] = None   # None means one colour per ball
    columns: int = 9                # grid width when the drum is rendered

    def validate(self) -> None:
        """Check size >= count >= sample >= bonus >= 0."""
        if min(self.size, self.count, self.sample, self.bonus) < 0:
            raise ConfigurationError(f"Negative drum parameter in {self}")
        if not (self.size >= self.count >= self.sample >= self.bonus):
            raise ConfigurationError(
                f"Drum must satisfy size >= count >= sample >= bonus, got "
                f"{self.size}/{self.count}/{self.sample}/{self.bonus}"
            )
        if self.columns < 1:
            raise ConfigurationError("Drum needs at least one column")


@dataclass(frozen=True)
class GameRules:
    title: str
    family: Family
    drums: Tuple[DrumRules, ...]
    spin_together: bool = False     # DUAL: shuffle both drums on every frame

    @property
    def main(self) -> DrumRules:
        return self.drums[0]

    @property
    def secondary(self) -> DrumRules:
        """Drum supplying bonus/secondary numbers (the main drum for loto)."""
        return self.drums[-1]

    @property
    def total_draws(self) -> int:
        if self.family is Family.JAPANESE:
            return self.main.sample + self.main.bonus
        return sum(d.sample for d in self.drums)

    def with_extra_balls(self, extra: int) -> "GameRules":
        """Add `extra` balls to every drum, like the 'bonnou' build switch."""
        if extra < 0:
            raise ConfigurationError("extra balls must be >= 0")
        if extra == 0:
            return self
        drums = tuple(replace(d, count=d.count + extra) for d in self.drums)
        rules = replace(self, drums=drums)
        rules.validate()
        return rules

    def validate(self) -> None:
        """Drum ordering, numbers within the sortable range, enough balls to draw."""
        if not self.drums:
            raise ConfigurationError(f"{self.title} has no drum")
        if self.family is Family.DUAL and len(self.drums) != 2:
            raise ConfigurationError(f"{self.title} needs exactly two drums")
        for d in self.drums:
            d.validate()
            if d.count > SORT_MAX:
                raise ConfigurationError(
                    f"{self.title} numbers its balls up to {d.count}, above {SORT_MAX}"
                )
        # a session must be able to finish its draws without emptying a drum
        if self.family is Family.JAPANESE:
            needed = [(self.main, self.main.sample + self.main.bonus)]
        else:
            needed = [(d, d.sample) for d in self.drums]
        for d, draws in needed:
            if d.count < draws:
                raise ConfigurationError(
                    f"{self.title} draws {draws} balls from a drum of {d.count}"
                )


class Variant(Enum):
    MINI_LOTO = "mini garapon"
    LOTO_SIX = "garapon six"
    LOTO_SEVEN = "garapon seven"
    POWERBALL = "power garapon"
    MEGA_MILLIONS = "mega garapon"
    EUROSTYLE = "super garapon"
    HELP = "garapon help"
    QUIT = "garapon quit"

    @property
    def label(self) -> str:
        return self.value

    @property
    def rules(self) -> Optional[GameRules]:
        """Constant rules for playable variants, None for HELP/QUIT."""
        return VARIANT_RULES.get(self)

    @property
    def playable(self) -> bool:
        return self in VARIANT_RULES


JA_SIZE = 70
US_SIZE = 108
EU_SIZE = 108
STARS_SIZE = 54

VARIANT_RULES: Dict[Variant, GameRules] = {
    Variant.MINI_LOTO: GameRules(
        "mini garapon", Family.JAPANESE,
        (DrumRules(JA_SIZE, 28, 5, 1, None, columns=7),),
    ),
    Variant.LOTO_SIX: GameRules(
        "garapon six", Family.JAPANESE,
        (DrumRules(JA_SIZE, 40, 6, 1, None, columns=7),),
    ),
    Variant.LOTO_SEVEN: GameRules(
        "garapon seven", Family.JAPANESE,
        (DrumRules(JA_SIZE, 34, 7, 2, None, columns=7),),
    ),
    Variant.POWERBALL: GameRules(
        "power garapon", Family.DUAL,
        (DrumRules(US_SIZE, 66, 5, 0, Color.BLUE),
         DrumRules(US_SIZE, 23, 1, 0, Color.RED)),
        spin_together=True,
    ),
    Variant.MEGA_MILLIONS: GameRules(
        "mega garapon", Family.DUAL,
        (DrumRules(US_SIZE, 67, 5, 0, Color.CYAN),
         DrumRules(US_SIZE, 22, 1, 0, Color.YELLOW)),
        spin_together=True,
    ),
    Variant.EUROSTYLE: GameRules(
        "super garapon", Family.DUAL,
        (DrumRules(EU_SIZE, 47, 5, 0, Color.RED),
         DrumRules(STARS_SIZE, 9, 2, 0, Color.YELLOW, columns=6)),
    ),
}
