"""Terminal output: colours, panel geometry, and the curses sink.

The drum engine only ever *writes* to a display. Apart from reading the
terminal size to centre things, nothing here feeds back into a draw.
"""

from __future__ import annotations

import curses
import logging
import math
import random
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

from .errors import ResourceExhaustion
from .machine import EMPTY, Machine
from .rules import Color, Family, GameRules

logger = logging.getLogger(__name__)

Cell = Tuple[int, Optional[Color]]  # (value, colour); None colour is the blank tag

# One of these rotations is picked per process for per-ball colouring.
ROTATIONS: Tuple[Tuple[Color, ...], ...] = tuple(
    tuple(Color[name] for name in row.split())
    for row in (
        "RED YELLOW WHITE GREEN CYAN BLUE MAGENTA",
        "YELLOW WHITE GREEN CYAN BLUE MAGENTA RED",
        "WHITE GREEN CYAN BLUE MAGENTA RED YELLOW",
        "GREEN CYAN BLUE MAGENTA RED YELLOW WHITE",
        "CYAN BLUE MAGENTA RED YELLOW WHITE GREEN",
        "MAGENTA BLUE CYAN GREEN WHITE YELLOW RED",
        "BLUE CYAN GREEN WHITE YELLOW RED MAGENTA",
        "CYAN GREEN WHITE YELLOW RED MAGENTA BLUE",
        "GREEN WHITE YELLOW RED MAGENTA BLUE CYAN",
        "WHITE YELLOW RED MAGENTA BLUE CYAN GREEN",
    )
)


@dataclass(frozen=True)
class Palette:
    """Colour assignment, chosen once per process and passed around."""

    cycle: Tuple[Color, ...] = ROTATIONS[0]
    heading: Color = Color.WHITE

    @classmethod
    def pick(cls, rng: Optional[random.Random] = None) -> "Palette":
        rng = rng or random.Random()
        return cls(cycle=ROTATIONS[rng.randrange(len(ROTATIONS))])

    def ball(self, value: int, drum_color: Optional[Color] = None) -> Optional[Color]:
        """Tag for one ball: the drum's colour, or the per-ball cycle."""
        if value == EMPTY:
            return None
        if drum_color is not None:
            return drum_color
        return self.cycle[value % len(self.cycle)]

    def cells(self, values: Sequence[int], drum_color: Optional[Color] = None) -> List[Cell]:
        return [(v, self.ball(v, drum_color)) for v in values]

    def drum(self, machine: Machine) -> List[Cell]:
        return self.cells(machine.pool, machine.color)


# --- panel geometry ---

@dataclass(frozen=True)
class Panel:
    name: str
    height: int
    width: int
    top: int
    left: int
    boxed: bool = True


def grid_size(slots: int, columns: int) -> Tuple[int, int]:
    """(height, width) of a boxed window showing `slots` numbers."""
    rows = math.ceil(slots / columns)
    return rows + 2, columns * 3 + 3


def base_panels(cols: int, lines: int) -> List[Panel]:
    return [
        Panel("title", 1, cols, 0, 0, boxed=False),
        Panel("status", 1, cols, lines - 2, 0, boxed=False),
    ]


def menu_panel(rows: int) -> Panel:
    return Panel("menu", rows + 2, 20, 2, 0, boxed=False)


def layout_for(rules: GameRules, cols: int, lines: int) -> List[Panel]:
    """Windows for one playthrough of `rules` on a cols x lines screen."""
    if rules.family is Family.JAPANESE:
        d = rules.main
        h, w = grid_size(d.size, d.columns)
        left = (cols - w) // 2
        return [
            Panel("drum", h, w, 3, left),
            Panel("main_tray", 3, w, 3 + h, left),
            Panel("bonus_tray", 3, w, 6 + h, left),
        ]

    lh, lw = grid_size(rules.drums[0].size, rules.drums[0].columns)
    rh, rw = grid_size(rules.drums[1].size, rules.drums[1].columns)
    tray_w = rules.total_draws * 3 + 3
    tray_left = (cols - tray_w) // 2
    return [
        Panel("left", lh, lw, 3, cols // 2 - lw - 1),
        Panel("right", rh, rw, 3 + (lh - rh + 1) // 2, cols // 2 + 1),
        Panel("tray", 3, tray_w, 4 + max(lh, rh), tray_left),
        Panel("summary", 9, tray_w, 3, tray_left, boxed=False),
    ]


class Display(Protocol):
    width: int
    height: int

    def open_panels(self, panels: Sequence[Panel]): ...
    def draw_number_grid(self, panel: str, cells: Sequence[Cell], columns: int,
                         row: int = 1, col: int = 2) -> None: ...
    def draw_message(self, panel: str, text: str, align: str = "center",
                     row: int = 0, color: Optional[Color] = None) -> None: ...
    def clear(self, panel: Optional[str] = None) -> None: ...
    def flush(self) -> None: ...


# --- curses implementation ---

_CURSES_COLORS = {
    Color.BLACK: curses.COLOR_BLACK,
    Color.RED: curses.COLOR_RED,
    Color.GREEN: curses.COLOR_GREEN,
    Color.YELLOW: curses.COLOR_YELLOW,
    Color.BLUE: curses.COLOR_BLUE,
    Color.MAGENTA: curses.COLOR_MAGENTA,
    Color.CYAN: curses.COLOR_CYAN,
    Color.WHITE: curses.COLOR_WHITE,
}
_BLANK_PAIR = 10


class CursesDisplay:
    """Display backed by curses windows, one per Panel."""

    def __init__(self, stdscr) -> None:
        self._stdscr = stdscr
        self._windows: Dict[str, object] = {}
        self._boxed: set = set()
        self._pairs: Dict[Optional[Color], int] = {}
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # terminal cannot hide the cursor
        self._setup_colors()
        # first refresh of stdscr clears the screen; do it before any panel exists
        stdscr.refresh()

    def _setup_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        for i, color in enumerate(Color, start=1):
            curses.init_pair(i, _CURSES_COLORS[color], curses.COLOR_BLACK)
            self._pairs[color] = curses.color_pair(i)
        curses.init_pair(_BLANK_PAIR, curses.COLOR_BLACK, curses.COLOR_BLACK)
        self._pairs[None] = curses.color_pair(_BLANK_PAIR)

    @property
    def width(self) -> int:
        return curses.COLS

    @property
    def height(self) -> int:
        return curses.LINES

    def _attr(self, color: Optional[Color]) -> int:
        return self._pairs.get(color, curses.A_NORMAL)

    @contextmanager
    def open_panels(self, panels: Sequence[Panel]) -> Iterator[None]:
        """Create the windows, and erase and delete them on any exit."""
        opened: List[str] = []
        try:
            for p in panels:
                try:
                    win = curses.newwin(p.height, p.width, max(0, p.top), max(0, p.left))
                except curses.error as exc:
                    raise ResourceExhaustion(
                        f"Terminal too small for the {p.name!r} window "
                        f"({p.width}x{p.height} at {p.left},{p.top})"
                    ) from exc
                if p.boxed:
                    win.box()
                    self._boxed.add(p.name)
                win.noutrefresh()
                self._windows[p.name] = win
                opened.append(p.name)
            curses.doupdate()
            yield
        finally:
            for name in reversed(opened):
                self._boxed.discard(name)
                win = self._windows.pop(name)
                win.erase()
                win.refresh()
            logger.debug("released panels %s", opened)

    def _win(self, panel: str):
        try:
            return self._windows[panel]
        except KeyError:
            raise KeyError(f"Panel {panel!r} is not open") from None

    def draw_number_grid(self, panel: str, cells: Sequence[Cell], columns: int,
                         row: int = 1, col: int = 2) -> None:
        win = self._win(panel)
        for i, (value, color) in enumerate(cells):
            y = row + i // columns
            x = col + (i % columns) * 3
            try:
                win.addstr(y, x, f"{value:02d}", self._attr(color))
            except curses.error:
                pass  # writing the bottom-right cell moves the cursor off-window
        win.noutrefresh()

    def draw_message(self, panel: str, text: str, align: str = "center",
                     row: int = 0, color: Optional[Color] = None) -> None:
        win = self._win(panel)
        _, width = win.getmaxyx()
        text = text[: max(0, width - 1)]
        x = (width - len(text)) // 2 if align == "center" else 0
        try:
            win.move(row, 0)
            if panel not in self._boxed:
                win.clrtoeol()
            attr = curses.A_NORMAL if color is None else self._attr(color)
            win.addstr(row, x, text, attr)
        except curses.error:
            pass  # clipped at the window edge
        win.noutrefresh()

    def clear(self, panel: Optional[str] = None) -> None:
        names = [panel] if panel else list(self._windows)
        for name in names:
            win = self._win(name)
            win.erase()
            self._boxed.discard(name)
            win.noutrefresh()

    def flush(self) -> None:
        curses.doupdate()
