"""Top level of the game: the variant menu and the playthrough loop."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, List, Optional, Sequence

from .config import Settings
from .display import Display, Palette, Panel, base_panels, menu_panel
from .keyboard import Key
from .picker import Clock, Keyboard, TimedPicker
from .result import Ticket
from .rules import Variant
from .session import GameSession, Outcome
from .shuffle import Shuffler

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Pick a game with up/down (or k/j) and <Enter>.",
    "<Enter> starts the drum and stops it again;",
    "the moment you stop it picks the ball.",
    "'r' plays the same game again, 'q' quits.",
    "",
    "'q' to exit, any other key for the menu",
)


class Menu:
    MARK = " * "

    def __init__(self, display: Display, keyboard: Keyboard,
                 choices: Sequence[Variant] = tuple(Variant)) -> None:
        self.display = display
        self.keyboard = keyboard
        self.choices = list(choices)

    def _render(self, current: int) -> None:
        for i, choice in enumerate(self.choices):
            mark = self.MARK if i == current else " " * len(self.MARK)
            self.display.draw_message("menu", mark + choice.label, align="left", row=i + 1)
        self.display.flush()

    def choose(self) -> Variant:
        """Return the highlighted variant on <Enter>; 'q' means QUIT."""
        current = 0
        with self.display.open_panels([menu_panel(len(self.choices))]):
            while True:
                self._render(current)
                key = self.keyboard.poll(None)
                if key is Key.UP:
                    current = max(0, current - 1)
                elif key is Key.DOWN:
                    current = min(len(self.choices) - 1, current + 1)
                elif key is Key.ENTER:
                    return self.choices[current]
                elif key is Key.QUIT:
                    return Variant.QUIT


class Garapon:
    def __init__(
        self,
        display: Display,
        keyboard: Keyboard,
        settings: Optional[Settings] = None,
        *,
        palette: Optional[Palette] = None,
        clock: Optional[Clock] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.display = display
        self.keyboard = keyboard
        self.palette = palette or Palette.pick(random.Random(self.settings.seed))
        self.picker = TimedPicker(
            Shuffler(seed=self.settings.seed),
            keyboard,
            clock,
            patience=self.settings.patience,
            frame_delay=self.settings.frame_delay,
        )
        self.menu = Menu(display, keyboard)
        self.tickets: List[Ticket] = []
        self._sleep = sleep

    def _title(self, text: str) -> None:
        self.display.clear("title")
        self.display.draw_message("title", text)
        self.display.flush()

    def run(self, variant: Optional[Variant] = None) -> None:
        """Menu loop; returns when the operator quits from the top level."""
        with self.display.open_panels(base_panels(self.display.width, self.display.height)):
            while True:
                self._title("garapon")
                self.display.clear("status")
                choice = variant or self.menu.choose()
                variant = None
                logger.debug("menu choice: %s", choice.name)
                if choice is Variant.QUIT:
                    return
                if choice is Variant.HELP:
                    if not self.help():
                        return
                    continue
                self._title(choice.label)
                self.play(choice)

    def play(self, variant: Variant) -> None:
        """Replay `variant` for as long as the operator asks for a retry."""
        while True:
            session = GameSession(
                variant, self.display, self.keyboard, self.picker,
                self.palette, self.settings, sleep=self._sleep,
            )
            outcome = session.run()
            if session.ticket is not None:
                self.tickets.append(session.ticket)
            if outcome is Outcome.QUIT:
                return

    def help(self) -> bool:
        """Show the key bindings; False when the operator asks to exit."""
        width = max(len(line) for line in HELP_TEXT) + 4
        panel = Panel("help", len(HELP_TEXT) + 2, width, 3,
                      max(0, (self.display.width - width) // 2), boxed=False)
        with self.display.open_panels([panel]):
            for row, line in enumerate(HELP_TEXT, start=1):
                self.display.draw_message("help", line, row=row)
            self.display.flush()
            return self.keyboard.poll(None) is not Key.QUIT
