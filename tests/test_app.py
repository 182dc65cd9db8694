import pytest

from garapon.app import Garapon, Menu
from garapon.config import Settings
from garapon.display import Palette
from garapon.keyboard import Key
from garapon.rules import Variant

PLAY_MINI = [Key.ENTER] + [Key.ENTER] * 6   # begin + six stops


@pytest.fixture
def game(display, keyboard, clock, no_sleep):
    settings = Settings(patience=3, frame_delay=0, nap_frames=1, nap_delay=0, seed=5)
    return Garapon(display, keyboard, settings, palette=Palette(), clock=clock, sleep=no_sleep)


def test_menu_moves_and_selects(display, keyboard):
    keyboard.push(Key.UP, Key.DOWN, Key.DOWN, Key.UP, Key.DOWN, Key.ENTER)
    assert Menu(display, keyboard).choose() is Variant.LOTO_SEVEN
    assert display.released["menu"] == 1


def test_menu_stops_at_the_last_item(display, keyboard):
    keyboard.push(*[Key.DOWN] * 20, Key.ENTER)
    assert Menu(display, keyboard).choose() is Variant.QUIT


def test_menu_q_quits(display, keyboard):
    keyboard.push(Key.DOWN, Key.QUIT)
    assert Menu(display, keyboard).choose() is Variant.QUIT


def test_menu_marks_current_item(display, keyboard):
    keyboard.push(Key.DOWN, Key.ENTER)
    Menu(display, keyboard).choose()
    assert " * garapon six" in display.texts("menu")


def test_retry_replays_the_same_variant(game, display, keyboard):
    keyboard.push(Key.ENTER)                       # menu: mini garapon
    keyboard.push(*PLAY_MINI, Key.RETRY)
    keyboard.push(*PLAY_MINI, Key.QUIT)            # back to the menu
    keyboard.push(Key.QUIT)                        # leave the game
    game.run()
    # the second draw ended on q, so only the retried one is reported
    assert len(game.tickets) == 1
    assert game.tickets[0].variant == "mini garapon"
    assert display.opened["drum"] == display.released["drum"] == 2
    assert display.opened["menu"] == 2
    assert display.released["title"] == display.released["status"] == 1
    assert "mini garapon" in display.texts("title")


def test_quit_mid_draw_returns_to_menu(game, display, keyboard):
    keyboard.push(Key.DOWN, Key.DOWN, Key.DOWN, Key.ENTER)   # power garapon
    keyboard.push(Key.ENTER, Key.ENTER, Key.QUIT)            # quit on the second ball
    keyboard.push(Key.QUIT)
    game.run()
    assert game.tickets == []
    assert display.released["left"] == 1
    assert display.opened["menu"] == 2


def test_start_variant_skips_the_menu(game, display, keyboard):
    keyboard.push(Key.ENTER, *[Key.ENTER] * 6, Key.RETRY)
    keyboard.push(Key.QUIT, Key.QUIT)             # leave the replay at setup, then the menu
    game.run(Variant.MEGA_MILLIONS)
    assert [t.variant for t in game.tickets] == ["mega garapon"]
    assert display.opened["menu"] == 1


def test_help_then_back_to_menu(game, display, keyboard):
    keyboard.push(*[Key.DOWN] * 6, Key.ENTER, Key.OTHER, Key.QUIT)
    game.run()
    assert display.released["help"] == 1
    assert any("'q' to exit" in text for text in display.texts("help"))
    assert display.opened["menu"] == 2


def test_q_on_help_leaves_the_game(game, display, keyboard):
    keyboard.push(*[Key.DOWN] * 6, Key.ENTER, Key.QUIT)
    game.run()
    assert display.opened["menu"] == 1
    assert not display.open
