from __future__ import annotations
import curses
from enum import Enum
from typing import Optional


class Key(Enum):
    UP = "up"
    DOWN = "down"
    ENTER = "enter"     # confirm / stop the drum
    QUIT = "q"
    RETRY = "r"
    OTHER = "other"


_KEYMAP = {
    curses.KEY_UP: Key.UP,
    ord("k"): Key.UP,
    curses.KEY_DOWN: Key.DOWN,
    ord("j"): Key.DOWN,
    curses.KEY_ENTER: Key.ENTER,
    10: Key.ENTER,
    13: Key.ENTER,
    ord("q"): Key.QUIT,
    ord("r"): Key.RETRY,
}


def translate(ch: int) -> Optional[Key]:
    """Map a curses key code to a Key; -1 (no key) maps to None."""
    if ch < 0:
        return None
    return _KEYMAP.get(ch, Key.OTHER)


class CursesKeyboard:
    """Reads keys from a curses window.

    ``poll(None)`` blocks until a key arrives; ``poll(seconds)`` gives up
    after that long and returns None. This is the game's only suspension
    point besides animation naps.
    """

    def __init__(self, window) -> None:
        self._win = window
        self._win.keypad(True)

    def poll(self, timeout: Optional[float] = None) -> Optional[Key]:
        self._win.timeout(-1 if timeout is None else max(0, int(timeout * 1000)))
        return translate(self._win.getch())
