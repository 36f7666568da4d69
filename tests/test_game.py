import curses

import pytest

from termsnake import game
from termsnake.game import (
    Controller,
    DimensionError,
    InfoView,
    SnakeView,
    format_score,
    format_speed,
    format_time,
    parse_dimensions,
    validate_dimensions,
)
from termsnake.model import Direction, Snake, State

BLOCK = 1001
TTEE = 1002
VLINE = 1003
BTEE = 1004


class FakeWindow:
    def __init__(self, nlines, ncols, begin_y=0, begin_x=0, keys=()):
        self.size = (nlines, ncols)
        self.origin = (begin_y, begin_x)
        self.keys = list(keys)
        self.cells = {}
        self.text = []
        self.children = []
        self.delay = None

    def derwin(self, nlines, ncols, begin_y, begin_x):
        child = FakeWindow(nlines, ncols, begin_y, begin_x)
        self.children.append(child)
        return child

    def getmaxyx(self):
        return self.size

    def addch(self, y, x, ch, *attrs):
        self.cells[(y, x)] = ch

    def addstr(self, *args):
        self.text.append(next(a for a in args if isinstance(a, str)))

    def getch(self):
        return self.keys.pop(0) if self.keys else curses.KEY_F1

    def timeout(self, delay):
        self.delay = delay

    def clear(self):
        self.cells.clear()
        self.text.clear()

    def attron(self, attr):
        pass

    def attroff(self, attr):
        pass

    def box(self, *args):
        pass

    def refresh(self):
        pass


@pytest.fixture
def fake_curses(monkeypatch):
    monkeypatch.setattr(curses, "newwin", lambda n, c, y, x: FakeWindow(n, c, y, x))
    monkeypatch.setattr(curses, "color_pair", lambda n: 0)
    monkeypatch.setattr(curses, "napms", lambda ms: None)
    monkeypatch.setattr(curses, "ACS_BLOCK", BLOCK, raising=False)
    monkeypatch.setattr(curses, "ACS_TTEE", TTEE, raising=False)
    monkeypatch.setattr(curses, "ACS_VLINE", VLINE, raising=False)
    monkeypatch.setattr(curses, "ACS_BTEE", BTEE, raising=False)


def make_controller(keys=(), nlines=10, ncols=16):
    stdscr = FakeWindow(40, 80, keys=keys)
    return Controller(stdscr, nlines, ncols, 4, 8)


# --- argument parsing ---------------------------------------------------


def test_no_arguments_gives_default_square():
    assert parse_dimensions([], 50, 100) == (game.DEFAULT_LENGTH, game.DEFAULT_LENGTH)


def test_three_arguments_fall_back_to_default():
    assert parse_dimensions(["1", "2", "3"], 50, 100) == (
        game.DEFAULT_LENGTH,
        game.DEFAULT_LENGTH,
    )


def test_single_number_gives_square_board():
    assert parse_dimensions(["20"], 50, 100) == (20, 20)


def test_two_numbers_give_rows_and_columns():
    assert parse_dimensions(["12", "31"], 50, 100) == (12, 31)


@pytest.mark.parametrize("word", ["MAX", "max"])
def test_max_fills_the_terminal(word):
    assert parse_dimensions([word], 45, 102) == (20, 50)


@pytest.mark.parametrize("word", ["MAX", "max"])
def test_max_board_always_validates(word):
    for lines, cols in [(45, 102), (60, 200), (40, 70)]:
        nlines, ncols = parse_dimensions([word], lines, cols)
        assert validate_dimensions(nlines, ncols, lines, cols) == (nlines, ncols)


def test_hex_and_octal_numbers_are_accepted():
    assert parse_dimensions(["0x10", "010"], 50, 100) == (16, 8)


def test_trailing_garbage_is_ignored():
    assert parse_dimensions(["18rows", "20cols"], 50, 100) == (18, 20)


def test_non_numeric_argument_is_rejected_by_validation():
    nlines, ncols = parse_dimensions(["abc"], 50, 100)
    with pytest.raises(DimensionError):
        validate_dimensions(nlines, ncols, 50, 100)


# --- dimension checks ---------------------------------------------------


def test_valid_dimensions_are_returned():
    assert validate_dimensions(15, 15, 40, 40) == (15, 15)


@pytest.mark.parametrize(
    "nlines, ncols, lines, cols",
    [
        (0, 15, 50, 100),
        (15, 0, 50, 100),
        (-4, 15, 50, 100),
        (3, 15, 50, 100),
        (15, 14, 50, 100),
        (30, 15, 50, 100),
        (15, 60, 50, 100),
    ],
)
def test_invalid_dimensions_raise(nlines, ncols, lines, cols):
    with pytest.raises(DimensionError):
        validate_dimensions(nlines, ncols, lines, cols)


# --- formatting ---------------------------------------------------------


def test_score_is_right_aligned():
    assert format_score(5, 225) == "Score:   5 / 225"


def test_score_width_does_not_change_with_score():
    widths = {len(format_score(score, 225)) for score in range(226)}
    assert len(widths) == 1


def test_score_ends_with_maximum():
    assert format_score(7, 300).endswith("/ 300")


def test_speed_format():
    assert format_speed(1.0) == "Speed: x1.00d"


@pytest.mark.parametrize("speed", [0.3, 1.5, 2.25, 10.0])
def test_speed_round_trip(speed):
    text = format_speed(speed)
    assert text.startswith("Speed: x")
    assert float(text[len("Speed: x") : -1]) == pytest.approx(round(speed, 2))


@pytest.mark.parametrize("seconds", [0, 9, 60, 61, 599, 3599])
def test_time_round_trip(seconds):
    text = format_time(seconds)
    minutes, secs = text.split(":")
    assert len(minutes) == 2 and len(secs) == 2
    assert int(minutes) * 60 + int(secs) == seconds


# --- views --------------------------------------------------------------


def test_snake_view_draws_four_cells_per_segment_and_food(fake_curses):
    view = SnakeView(20, 32, 4, 8)
    snake = Snake(10, 16)
    view.redraw(snake)
    assert len(view.win.cells) == 4 * (len(snake) + 1)
    assert set(view.win.cells.values()) == {BLOCK}


def test_snake_view_window_size(fake_curses):
    view = SnakeView(20, 32, 4, 8)
    assert view.win.getmaxyx() == (20, 32)
    assert view.border.getmaxyx() == (22, 34)


def test_info_view_draws_three_separators(fake_curses):
    info = InfoView(16, 1, 0)
    values = list(info.border.cells.values())
    assert values.count(TTEE) == 3
    assert values.count(VLINE) == 3
    assert values.count(BTEE) == 3


def test_info_view_update_writes_each_field(fake_curses):
    info = InfoView(16, 1, 0)
    info.update(3, 225, 1.5, 2, 75)
    assert info.score_win.text[-1] == format_score(3, 225)
    assert info.speed_win.text[-1] == format_speed(1.5)
    assert info.continues_win.text == ["Continues: 2"]
    assert info.time_win.text[-1] == format_time(75)


# --- controller ---------------------------------------------------------


def test_controller_redraw_shows_model(fake_curses):
    controller = make_controller()
    controller.redraw()
    assert len(controller.view.win.cells) == 4 * (len(controller.model) + 1)
    assert controller.info.score_win.text[-1] == format_score(
        len(controller.model), controller.max_score
    )


def test_run_moves_snake_in_pressed_direction(fake_curses):
    controller = make_controller(keys=[curses.KEY_RIGHT])
    start = controller.model.head
    controller.run()
    assert controller.model.direction is Direction.RIGHT
    assert controller.model.state is State.ACTIVE
    assert controller.model.head == Direction.RIGHT.step(start)


def test_faster_key_divides_delay(fake_curses):
    controller = make_controller(keys=[ord("f")])
    controller.run()
    assert controller.delay_ms == pytest.approx(game.INIT_DELAY_MS / 1.5)


def test_slower_key_multiplies_delay(fake_curses):
    controller = make_controller(keys=[ord("s"), ord("s")])
    controller.run()
    assert controller.delay_ms == pytest.approx(game.INIT_DELAY_MS * 1.5 * 1.5)


def test_idle_game_pauses_timer(fake_curses):
    controller = make_controller(keys=[ord("x")])
    controller.run()
    assert controller.timer.paused
    assert controller.model.state is State.IDLE


def test_running_into_wall_ends_game(fake_curses):
    controller = make_controller(keys=[curses.KEY_RIGHT] * 30)
    controller.run()
    assert controller.model.state is State.LOSE
    assert controller.high_score == len(controller.model)


def test_end_loop_continue_after_loss(fake_curses):
    controller = make_controller(keys=[ord("c")])
    controller.timer.start()
    controller.model.state = State.LOSE
    assert controller.end_loop() is True
    assert controller.continues == 1
    assert controller.model.state is State.IDLE
    assert controller.timer.paused
    end_window = controller.view.win.children[-1].children[-1]
    assert "    YOU LOSE!\n" in end_window.text
    assert " <c to continue>\n" in end_window.text


def test_end_loop_restart_resets_game(fake_curses):
    controller = make_controller(keys=[ord("r")])
    controller.timer.start()
    controller.continues = 4
    controller.delay_ms = 10.0
    old_model = controller.model
    controller.model.state = State.LOSE
    assert controller.end_loop() is True
    assert controller.model is not old_model
    assert controller.model.state is State.IDLE
    assert controller.continues == 0
    assert controller.delay_ms == game.INIT_DELAY_MS
    assert not controller.timer.paused


def test_end_loop_after_win_ignores_continue(fake_curses):
    controller = make_controller(keys=[ord("c")])
    controller.timer.start()
    controller.model.state = State.WIN
    assert controller.end_loop() is False
    assert controller.continues == 0
    end_border = controller.view.win.children[-1]
    assert end_border.getmaxyx() == (game.END_NLINES - 1, game.END_NCOLS)
    assert "     YOU WIN!\n" in end_border.children[-1].text


def test_end_loop_quit(fake_curses):
    controller = make_controller(keys=[curses.KEY_F1])
    controller.model.state = State.LOSE
    assert controller.end_loop() is False


def test_end_loop_requires_finished_game(fake_curses):
    controller = make_controller()
    with pytest.raises(game.SnakeError):
        controller.end_loop()


def test_high_score_keeps_best(fake_curses):
    controller = make_controller(keys=[ord("c")])
    controller.high_score = 500
    controller.model.state = State.LOSE
    controller.end_loop()
    assert controller.high_score == 500


def test_help_loop_returns_on_h(fake_curses):
    controller = make_controller(keys=[ord("q"), ord("h")])
    controller.timer.start()
    assert controller.help_loop() is True
    assert controller.timer.paused
    help_window = controller.view.win.children[-1].children[-1]
    assert "           HELP\n" in help_window.text


def test_help_loop_quit(fake_curses):
    controller = make_controller(keys=[curses.KEY_F1])
    assert controller.help_loop() is False


def test_help_key_during_run_then_quit(fake_curses):
    controller = make_controller(keys=[ord("h"), curses.KEY_F1])
    controller.run()
    assert controller.timer.paused
    assert controller.stdscr.keys == []