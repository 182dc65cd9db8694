"""One playthrough of a lottery variant.

    MENU_SELECT -> MACHINE_SETUP -> DRAWING -> PRESENTING -> RETRY | TERMINATED

Every wait point accepts 'q'. Quitting unwinds through the panel context
manager, so the windows of a playthrough are released exactly once however
it ends.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from .config import Settings
from .display import Display, Palette, layout_for
from .errors import OperatorCancel
from .keyboard import Key
from .machine import Machine
from .picker import Keyboard, TimedPicker
from .result import DrawResult, Ticket
from .rules import Family, Variant

logger = logging.getLogger(__name__)

PRESS_ENTER = "Press <Enter> key"
RETRY_OR_EXIT = "'r' to retry, 'q' to exit"


class State(Enum):
    MENU_SELECT = "menu_select"
    MACHINE_SETUP = "machine_setup"
    DRAWING = "drawing"
    PRESENTING = "presenting"
    RETRY = "retry"
    TERMINATED = "terminated"


class Outcome(Enum):
    RETRY = "retry"
    QUIT = "quit"


def num_mid(width: int, n: int) -> int:
    """Left column that centres `n` two-digit numbers in `width`."""
    return (width - n * 3 + 1) // 2


def nap_frames(count: int) -> List[str]:
    """Frames of the closing 'nowsleeping zzz...' animation."""
    buf = [" "] * 6
    visible = True
    frames = []
    for i in range(count):
        pos = i % 6
        buf[pos] = ("z" if pos < 3 else ".") if visible else " "
        frames.append("nowsleeping " + "".join(buf))
        if pos == 5:
            visible = not visible
    return frames


class GameSession:
    def __init__(
        self,
        variant: Variant,
        display: Display,
        keyboard: Keyboard,
        picker: TimedPicker,
        palette: Palette,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        rules = variant.rules
        if rules is None:
            raise ValueError(f"{variant.label!r} is not a playable variant")
        self.settings = settings or Settings()
        self.variant = variant
        self.rules = rules.with_extra_balls(self.settings.extra_balls)
        self.rules.validate()
        self.display = display
        self.keyboard = keyboard
        self.picker = picker
        self.palette = palette
        self._sleep = sleep
        self.state = State.MENU_SELECT
        self.machines: List[Machine] = []
        self._panels: List[str] = []
        self.result: Optional[DrawResult] = None
        self.ticket: Optional[Ticket] = None

    # --- state machine ---

    def _enter(self, state: State) -> None:
        logger.debug("%s: %s -> %s", self.rules.title, self.state.value, state.value)
        self.state = state

    def run(self) -> Outcome:
        """Play once; return RETRY to replay the variant or QUIT."""
        self.ticket = None
        self.machines = [Machine.from_rules(d) for d in self.rules.drums]
        self._enter(State.MACHINE_SETUP)
        layout = layout_for(self.rules, self.display.width, self.display.height)
        self._panels = [p.name for p in layout]
        try:
            with self.display.open_panels(layout):
                self._setup()
                self._enter(State.DRAWING)
                self._draw()
                self._enter(State.PRESENTING)
                outcome = self._present()
        except OperatorCancel:
            logger.info("%s: operator quit during %s", self.rules.title, self.state.value)
            self.ticket = None
            outcome = Outcome.QUIT
        finally:
            self.machines = []
        self._enter(State.RETRY if outcome is Outcome.RETRY else State.TERMINATED)
        return outcome

    def _wait(self, *accepted: Key) -> Key:
        """Block until one of `accepted` is pressed; 'q' cancels."""
        while True:
            key = self.keyboard.poll(None)
            if key is Key.QUIT:
                raise OperatorCancel()
            if key in accepted:
                return key

    def _status(self, text: str) -> None:
        self.display.draw_message("status", text)
        self.display.flush()

    # --- drawing ---

    @property
    def _drum_panels(self) -> List[str]:
        if self.rules.family is Family.JAPANESE:
            return ["drum"]
        return ["left", "right"]

    def _render_drums(self) -> None:
        for name, machine, drum in zip(self._drum_panels, self.machines, self.rules.drums):
            self.display.draw_number_grid(name, self.palette.drum(machine), drum.columns)
        self.display.flush()

    def _setup(self) -> None:
        self._render_drums()
        self._status(PRESS_ENTER)
        self._wait(Key.ENTER)
        if self.rules.family is Family.JAPANESE:
            self.display.clear("status")

    def _draw(self) -> None:
        if self.rules.family is Family.JAPANESE:
            self._draw_japanese()
        else:
            self._draw_dual()
        logger.info("%s: drew main=%s bonus=%s", self.rules.title,
                    self.result.main, self.result.bonus)

    def _draw_japanese(self) -> None:
        machine = self.machines[0]
        self.result = result = DrawResult(machine.sample, machine.bonus)
        for _ in range(self.rules.total_draws):
            self._status(PRESS_ENTER)
            value = self.picker.pick(machine, render=self._render_drums)
            self.display.clear("status")
            main = result.drawing_main
            result.record(value)
            if main:
                tray, col = "main_tray", 2 + 3 * (len(result.main) - 1)
            else:
                tray, col = "bonus_tray", 2 + 3 * (len(result.bonus) - 1)
            self.display.draw_number_grid(tray, self.palette.cells([value]), 1, col=col)
            self._render_drums()

    def _draw_dual(self) -> None:
        left, right = self.machines
        self.result = result = DrawResult(left.sample, right.sample)
        for i in range(self.rules.total_draws):
            self._status(PRESS_ENTER)
            target = left if result.drawing_main else right
            spinning = self.machines if self.rules.spin_together else [target]
            value = self.picker.pick(target, spinning=spinning, render=self._render_drums)
            result.record(value)
            self.display.draw_number_grid(
                "tray", self.palette.cells([value], target.color), 1, col=2 + 3 * i
            )
            self._render_drums()

    # --- presenting ---

    def _nap(self) -> None:
        self.display.clear("status")
        self.display.flush()
        self._sleep(1.0)
        self._status("nowsleeping")
        self._sleep(0.5)
        for frame in nap_frames(self.settings.nap_frames):
            self._status(frame)
            self._sleep(self.settings.nap_delay)
        self.display.clear("status")
        self.display.flush()

    def _present(self) -> Outcome:
        self._nap()
        for name in self._panels:
            self.display.clear(name)
        self.ticket = self.result.freeze(self.rules.title)
        if self.rules.family is Family.JAPANESE:
            self._show_japanese(self.ticket)
        else:
            self._show_dual(self.ticket)
        self.display.flush()
        logger.info("%s: winning numbers %s", self.rules.title, self.ticket.format())

        self._status(RETRY_OR_EXIT)
        self._wait(Key.RETRY)
        return Outcome.RETRY

    def _show_japanese(self, ticket: Ticket) -> None:
        width = self.rules.main.columns * 3 + 3
        heading = self.palette.heading
        self.display.draw_message("drum", "winning numbers", row=1, color=heading)
        self.display.draw_message("drum", "omake", row=5, color=heading)
        self.display.draw_number_grid(
            "drum", self.palette.cells(ticket.main), len(ticket.main),
            row=3, col=num_mid(width, len(ticket.main)),
        )
        if ticket.bonus:
            self.display.draw_number_grid(
                "drum", self.palette.cells(ticket.bonus), len(ticket.bonus),
                row=7, col=num_mid(width, len(ticket.bonus)),
            )

    def _show_dual(self, ticket: Ticket) -> None:
        left, right = self.rules.drums
        self.display.draw_message("summary", "winning numbers", row=1, color=self.palette.heading)
        cells = self.palette.cells(ticket.main, left.color) + self.palette.cells(ticket.bonus, right.color)
        self.display.draw_number_grid("summary", cells, len(cells), row=3, col=2)
