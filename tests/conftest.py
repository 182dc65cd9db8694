from __future__ import annotations
from collections import Counter
from contextlib import contextmanager

import pytest


class FakeDisplay:
    """Records what would have been painted, panel by panel."""

    def __init__(self, width: int = 80, height: int = 24):
        self.width = width
        self.height = height
        self.open = set()
        self.opened = Counter()
        self.released = Counter()
        self.grids = []      # (panel, cells, columns, row, col)
        self.messages = []   # (panel, text, row)
        self.flushes = 0

    @contextmanager
    def open_panels(self, panels):
        names = [p.name for p in panels]
        for name in names:
            assert name not in self.open, f"{name} opened twice"
            self.open.add(name)
            self.opened[name] += 1
        try:
            yield
        finally:
            for name in names:
                self.open.discard(name)
                self.released[name] += 1

    def _check(self, panel):
        # the app keeps title/status open; sessions tested alone borrow them
        assert panel in self.open or panel in ("title", "status"), f"{panel} is not open"

    def draw_number_grid(self, panel, cells, columns, row=1, col=2):
        self._check(panel)
        self.grids.append((panel, list(cells), columns, row, col))

    def draw_message(self, panel, text, align="center", row=0, color=None):
        self._check(panel)
        self.messages.append((panel, text, row))

    def clear(self, panel=None):
        if panel is not None:
            self._check(panel)

    def flush(self):
        self.flushes += 1

    def texts(self, panel):
        return [text for p, text, _ in self.messages if p == panel]


class FakeKeyboard:
    """Replays scripted keys; timed polls on an empty script time out."""

    def __init__(self, keys=()):
        self.keys = list(keys)
        self.polls = 0

    def push(self, *keys):
        self.keys.extend(keys)

    def poll(self, timeout=None):
        self.polls += 1
        if self.keys:
            return self.keys.pop(0)
        if timeout is None:
            raise AssertionError("blocking poll with no scripted key left")
        return None


class FakeClock:
    """Nanosecond clock advancing by `step` on every read."""

    def __init__(self, start: int = 0, step: int = 7_919):
        self.t = start
        self.step = step
        self.reads = 0

    def now(self) -> int:
        self.reads += 1
        value = self.t
        self.t += self.step
        return value


class ScriptedClock:
    """Returns the given timestamps in order."""

    def __init__(self, *values: int):
        self.values = list(values)

    def now(self) -> int:
        return self.values.pop(0)


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def keyboard():
    return FakeKeyboard()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def no_sleep():
    return lambda seconds: None



@pytest.fixture
def scripted_clock():
    return ScriptedClock
