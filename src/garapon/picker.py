"""Timing-based ball selection.

A pick spins the drum until the operator presses <Enter> (or patience runs
out), then turns the elapsed time into a slot index:

    delta = sub-second nanoseconds of (T1 - T0), borrowing one second
    slot  = delta % drum size

Empty slots are rejected and the clock is read again until a ball is hit.
Only the sub-second part of the two readings is compared, so a pick that
straddles a second boundary yields a smaller delta than the true elapsed
time. That is the behaviour the game has always had; it is kept as is.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol, Sequence

from .errors import EnvironmentFault, OperatorCancel
from .keyboard import Key
from .machine import EMPTY, Machine
from .shuffle import Shuffler

logger = logging.getLogger(__name__)

NSEC_PER_SEC = 1_000_000_000


class Clock(Protocol):
    def now(self) -> int:
        """Wall-clock time in nanoseconds."""


class Keyboard(Protocol):
    def poll(self, timeout: Optional[float] = None) -> Optional[Key]: ...


class SystemClock:
    """Real-time clock with nanosecond resolution."""

    def now(self) -> int:
        try:
            if hasattr(time, "clock_gettime_ns") and hasattr(time, "CLOCK_REALTIME"):
                return time.clock_gettime_ns(time.CLOCK_REALTIME)
            return time.time_ns()
        except OSError as exc:
            raise EnvironmentFault(f"Cannot read the system clock: {exc}") from exc


def diff_nsec(before: int, after: int) -> int:
    """Sub-second difference of two nanosecond timestamps.

    Whole seconds are discarded; if the nanosecond field of `after` is
    smaller than that of `before`, one second is borrowed.
    """
    delta = after % NSEC_PER_SEC - before % NSEC_PER_SEC
    if delta < 0:
        delta += NSEC_PER_SEC
    return delta


class TimedPicker:
    def __init__(
        self,
        shuffler: Shuffler,
        keyboard: Keyboard,
        clock: Optional[Clock] = None,
        *,
        patience: int = 108,
        frame_delay: float = 0.03,
    ) -> None:
        self._shuffler = shuffler
        self._keyboard = keyboard
        self._clock = clock or SystemClock()
        self.patience = patience
        self.frame_delay = frame_delay

    def spin(self, spinning: Sequence[Machine], render: Callable[[], None]) -> int:
        """Animate until <Enter> or patience is used up; return frames shown.

        Raises OperatorCancel on 'q'.
        """
        frames = 0
        for _ in range(self.patience):
            for m in spinning:
                self._shuffler.shuffle(m)
            render()
            frames += 1
            key = self._keyboard.poll(self.frame_delay)
            if key is Key.ENTER:
                break
            if key is Key.QUIT:
                raise OperatorCancel()
        return frames

    def extract(self, machine: Machine, started: int) -> int:
        """Return the slot chosen by the time elapsed since `started`."""
        if machine.remaining == 0:
            raise ValueError("No balls left in the drum")
        rejected = 0
        while True:
            delta = diff_nsec(started, self._clock.now())
            slot = delta % machine.size
            if machine.pool[slot] != EMPTY:
                logger.debug("slot %d hit after %d rejections (delta=%d ns)",
                             slot, rejected, delta)
                return slot
            rejected += 1

    def pick(
        self,
        machine: Machine,
        spinning: Optional[Sequence[Machine]] = None,
        render: Optional[Callable[[], None]] = None,
    ) -> int:
        """Spin, stop, and take one ball out of `machine`.

        `spinning` lists the drums shuffled on every frame (default: just
        `machine`); `render` repaints them.
        """
        if machine.remaining == 0:
            raise ValueError("No balls left in the drum")
        started = self._clock.now()
        self.spin(spinning if spinning is not None else [machine], render or (lambda: None))
        slot = self.extract(machine, started)
        value = machine.pool[slot]
        machine.pool[slot] = EMPTY
        logger.debug("drew %02d from slot %d", value, slot)
        return value
