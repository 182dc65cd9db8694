import pytest

from garapon.errors import EnvironmentFault, OperatorCancel
from garapon.keyboard import Key
from garapon.machine import EMPTY, Machine
from garapon.picker import NSEC_PER_SEC, SystemClock, TimedPicker, diff_nsec
from garapon.shuffle import Shuffler


def _picker(keyboard, clock, patience=5):
    return TimedPicker(Shuffler(seed=1), keyboard, clock, patience=patience, frame_delay=0)


def test_diff_nsec_plain_difference():
    assert diff_nsec(100, 250) == 150


def test_diff_nsec_borrows_a_second():
    before = 5 * NSEC_PER_SEC + 900_000_000
    after = 6 * NSEC_PER_SEC + 100_000_000
    assert diff_nsec(before, after) == 200_000_000


def test_diff_nsec_discards_whole_seconds():
    # 2.5 s elapsed, only the 0.5 s survives
    before = 10 * NSEC_PER_SEC
    after = 12 * NSEC_PER_SEC + 500_000_000
    assert diff_nsec(before, after) == 500_000_000
    assert diff_nsec(before, before + 3 * NSEC_PER_SEC) == 0


def test_extract_skips_empty_slots(keyboard, scripted_clock):
    m = Machine(10, 3, 1)       # balls in slots 0..2
    # deltas 7 and 4 land on padding, 12 % 10 == 2 is a ball
    picker = _picker(keyboard, scripted_clock(7, 4, 12))
    assert picker.extract(m, started=0) == 2


def test_extract_uses_sub_second_delta(keyboard, scripted_clock):
    m = Machine(10, 10, 1)
    started = 3 * NSEC_PER_SEC + 999_999_998
    picker = _picker(keyboard, scripted_clock(4 * NSEC_PER_SEC + 1))
    # delta = 1 - 999_999_998 + 1e9 = 3
    assert picker.extract(m, started) == 3


def test_pick_takes_the_ball_out(keyboard, clock):
    keyboard.push(Key.ENTER)
    m = Machine(70, 28, 5, 1)
    picker = _picker(keyboard, clock)
    value = picker.pick(m)
    assert 1 <= value <= 28
    assert value not in m.pool
    assert m.remaining == 27


def test_no_value_is_drawn_twice(keyboard, clock):
    m = Machine(70, 28, 5, 1)
    picker = _picker(keyboard, clock, patience=2)
    drawn = [picker.pick(m) for _ in range(28)]
    assert sorted(drawn) == list(range(1, 29))
    assert m.remaining == 0
    with pytest.raises(ValueError):
        picker.pick(m)


def test_spin_stops_on_enter_and_renders_each_frame(keyboard, clock):
    keyboard.push(None, Key.OTHER, Key.ENTER, None)
    frames = []
    picker = _picker(keyboard, clock, patience=10)
    shown = picker.spin([Machine(10, 5, 1)], lambda: frames.append(1))
    assert shown == 3
    assert len(frames) == 3


def test_spin_gives_up_after_patience(keyboard, clock):
    picker = _picker(keyboard, clock, patience=4)
    assert picker.spin([Machine(10, 5, 1)], lambda: None) == 4
    assert keyboard.polls == 4


def test_spin_shuffles_every_spinning_drum(keyboard, clock):
    keyboard.push(Key.ENTER)
    left, right = Machine(108, 66, 5), Machine(108, 23, 1)
    picker = _picker(keyboard, clock)
    picker.pick(left, spinning=[left, right])
    assert right.pool != Machine(108, 23, 1).pool
    assert sorted(right.balls()) == list(range(1, 24))


def test_quit_while_spinning_cancels(keyboard, clock):
    keyboard.push(None, Key.QUIT)
    m = Machine(70, 28, 5, 1)
    with pytest.raises(OperatorCancel):
        _picker(keyboard, clock).pick(m)
    assert m.remaining == 28


def test_system_clock_reads_nanoseconds():
    a = SystemClock().now()
    b = SystemClock().now()
    assert isinstance(a, int)
    assert b >= a - NSEC_PER_SEC


def test_clock_failure_is_an_environment_fault(monkeypatch):
    import time

    def broken(*args):
        raise OSError("no clock")

    monkeypatch.setattr(time, "clock_gettime_ns", broken, raising=False)
    monkeypatch.setattr(time, "time_ns", broken)
    with pytest.raises(EnvironmentFault):
        SystemClock().now()
