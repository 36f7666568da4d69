"""Terminal front end: curses views, the game loop and the command entry point."""

from __future__ import annotations

import curses
import locale
import math
import re
import sys
from contextlib import suppress
from typing import Sequence

from .model import Direction, Snake, SnakeError, State
from .timer import Timer

PAIR_SNAKE = 1
PAIR_FOOD = 2
PAIR_BORDER = 3

INIT_DELAY_MS = 100
DEFAULT_LENGTH = 15

END_NLINES = 6
END_NCOLS = 19
HELP_NLINES = 8
HELP_NCOLS = 30

SCORE_CONST_NCOLS = 10
SPEED_NCOLS = 8 + 4
CONTINUES_NCOLS = 11 + 2
TIME_NCOLS = 2 * 2 + 1

_SEGMENT_GAP = 3
_SPEED_FACTOR = 1.5
_INFO_NLINES = 1

_ARROWS = {
    curses.KEY_LEFT: Direction.LEFT,
    curses.KEY_RIGHT: Direction.RIGHT,
    curses.KEY_UP: Direction.UP,
    curses.KEY_DOWN: Direction.DOWN,
}

_LEADING_INT = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


class DimensionError(ValueError):
    """Raised when the requested board does not fit or is too small."""


class _NoColorSupport(Exception):
    pass


def _parse_int(text: str) -> int:
    """Read a leading integer in decimal, octal or hex; 0 if there is none."""
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    sign, digits = match.groups()
    if digits[:2] in ("0x", "0X"):
        value = int(digits[2:], 16)
    elif digits.startswith("0") and len(digits) > 1:
        value = int(digits[1:], 8)
    else:
        value = int(digits, 10)
    return -value if sign == "-" else value


def parse_dimensions(args: Sequence[str], lines: int, cols: int) -> tuple[int, int]:
    """Turn command-line arguments into a board size of (rows, columns).

    One argument gives a square board, or the largest board that fits the
    terminal when it is ``MAX`` or ``max``; two give rows and columns.
    """
    if len(args) == 1:
        if args[0] in ("MAX", "max"):
            return (lines - 2 - 3) // 2, (cols - 2) // 2
        size = _parse_int(args[0])
        return size, size
    if len(args) == 2:
        return _parse_int(args[0]), _parse_int(args[1])
    return DEFAULT_LENGTH, DEFAULT_LENGTH


def validate_dimensions(
    nlines: int, ncols: int, lines: int, cols: int
) -> tuple[int, int]:
    """Check the board fits a ``lines`` by ``cols`` terminal; return it unchanged."""
    fits = nlines * 2 + 2 + 3 <= lines and ncols * 2 + 2 <= cols
    roomy = (
        nlines * 2 >= max(END_NLINES, HELP_NLINES)
        and ncols * 2 >= max(END_NCOLS, HELP_NCOLS)
    )
    if not (fits and roomy and nlines > 0 and ncols > 0):
        raise DimensionError("invalid dimensions")
    return nlines, ncols


def format_score(score: int, max_score: int) -> str:
    """Render the score right-aligned to the width of the maximum score."""
    width = int(math.log10(max_score)) + 1
    return f"Score: {score:{width}d} / {max_score}"


def format_speed(speed: float) -> str:
    return f"Speed: x{speed:.2f}d"


def format_time(seconds: int) -> str:
    """Render seconds as MM:SS."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def _put(win, y: int, x: int, ch: int) -> None:
    with suppress(curses.error):
        win.addch(y, x, ch)


def _write(win, *args) -> None:
    with suppress(curses.error):
        win.addstr(*args)


def _add_block(win, y: int, x: int, ch: int) -> None:
    """Draw one board cell as a two-by-two block of screen cells."""
    for dy in (0, 1):
        for dx in (0, 1):
            _put(win, y * 2 + dy, x * 2 + dx, ch)


def _framed(border) -> None:
    border.attron(curses.color_pair(PAIR_BORDER))
    border.box()
    border.attroff(curses.color_pair(PAIR_BORDER))


class SnakeView:
    """The bordered playing field."""

    def __init__(self, nlines: int, ncols: int, begin_y: int, begin_x: int) -> None:
        self.border = curses.newwin(nlines + 2, ncols + 2, begin_y - 1, begin_x - 1)
        self.win = self.border.derwin(nlines, ncols, 1, 1)
        _framed(self.border)
        self.border.refresh()

    def redraw(self, snake: Snake) -> None:
        """Draw the body and, unless the board is full, the food."""
        self.win.clear()
        self.win.attron(curses.color_pair(PAIR_SNAKE))
        for pos in snake:
            _add_block(self.win, pos.y, pos.x, curses.ACS_BLOCK)
        self.win.attroff(curses.color_pair(PAIR_SNAKE))

        if snake.food not in snake:
            self.win.attron(curses.color_pair(PAIR_FOOD))
            _add_block(self.win, snake.food.y, snake.food.x, curses.ACS_BLOCK)
            self.win.attroff(curses.color_pair(PAIR_FOOD))

        self.win.refresh()


class InfoView:
    """The status bar: score, speed, continues and play time."""

    def __init__(self, score_ncols: int, begin_y: int, begin_x: int) -> None:
        nlines = _INFO_NLINES
        widths = (score_ncols, SPEED_NCOLS, CONTINUES_NCOLS, TIME_NCOLS)
        ncols = sum(widths) + _SEGMENT_GAP * 3 + 2

        self.border = curses.newwin(nlines + 2, ncols + 2, begin_y - 1, begin_x - 1)
        self.win = self.border.derwin(nlines, ncols, 1, 1)

        separators = [
            1 + _SEGMENT_GAP * (i + 1) + sum(widths[: i + 1]) for i in range(3)
        ]
        self.score_win = self.win.derwin(nlines, score_ncols, 0, 1)
        self.speed_win = self.win.derwin(nlines, SPEED_NCOLS, 0, separators[0])
        self.continues_win = self.win.derwin(
            nlines, CONTINUES_NCOLS, 0, separators[1]
        )
        self.time_win = self.win.derwin(nlines, TIME_NCOLS, 0, separators[2])

        self.border.attron(curses.color_pair(PAIR_BORDER))
        self.border.box()
        for column in separators:
            _put(self.border, 0, column - 1, curses.ACS_TTEE)
            _put(self.border, 1, column - 1, curses.ACS_VLINE)
            _put(self.border, 2, column - 1, curses.ACS_BTEE)
        self.border.attroff(curses.color_pair(PAIR_BORDER))
        self.border.refresh()

    def update(
        self, score: int, max_score: int, speed: float, continues: int, seconds: int
    ) -> None:
        _write(self.score_win, 0, 0, format_score(score, max_score))
        _write(self.speed_win, 0, 0, format_speed(speed))
        self.continues_win.clear()
        _write(self.continues_win, 0, 0, f"Continues: {continues}")
        _write(self.time_win, 0, 0, format_time(seconds))
        self.win.refresh()


class Controller:
    """Runs the game: reads keys, advances the snake and draws the views."""

    def __init__(
        self, stdscr, nlines: int, ncols: int, begin_y: int, begin_x: int
    ) -> None:
        self.stdscr = stdscr
        self.model = Snake(nlines, ncols)
        self.view = SnakeView(nlines * 2, ncols * 2, begin_y, begin_x)
        self.max_score = self.model.max_score

        score_ncols = (int(math.log10(self.max_score)) + 1) * 2 + SCORE_CONST_NCOLS
        info_ncols = (
            score_ncols
            + SPEED_NCOLS
            + CONTINUES_NCOLS
            + TIME_NCOLS
            + _SEGMENT_GAP * 3
            + 2 * 2
        )
        screen_cols = stdscr.getmaxyx()[1]
        self.info = InfoView(score_ncols, begin_y - 3, screen_cols - info_ncols)

        self.delay_ms = float(INIT_DELAY_MS)
        self.continues = 0
        self.timer = Timer()
        self.high_score = 0

    def _pause_timer(self) -> None:
        if self.timer.started and not self.timer.paused:
            self.timer.pause()

    def redraw(self) -> None:
        self.view.redraw(self.model)
        self.info.update(
            len(self.model),
            self.max_score,
            INIT_DELAY_MS / self.delay_ms,
            self.continues,
            self.timer.elapsed(),
        )

    def _overlay(self, nlines: int, ncols: int):
        maxy, maxx = self.view.win.getmaxyx()
        border = self.view.win.derwin(
            nlines, ncols, (maxy - nlines) // 2, (maxx - ncols) // 2
        )
        return border, border.derwin(nlines - 2, ncols - 2, 1, 1)

    def end_loop(self) -> bool:
        """Show the win or lose screen; return False if the player quits."""
        state = self.model.state
        if state not in (State.WIN, State.LOSE):
            raise SnakeError("invalid end state")

        nlines = END_NLINES - 1 if state is State.WIN else END_NLINES
        border, win = self._overlay(nlines, END_NCOLS)

        self._pause_timer()
        self.high_score = max(self.high_score, len(self.model))

        if state is State.LOSE:
            _write(win, "    YOU LOSE!\n")
            _write(win, f" High Score: {self.high_score}\n")
            _write(win, " <c to continue>\n")
        else:
            _write(win, "     YOU WIN!\n")
            _write(win, f" High Score: {self.high_score}\n")
        _write(win, " <r to restart>\n")
        border.box()
        border.refresh()

        self.stdscr.timeout(-1)
        try:
            while (ch := self.stdscr.getch()) != curses.KEY_F1:
                if ch == ord("r"):
                    self.model = Snake(self.model.nlines, self.model.ncols)
                    self.delay_ms = float(INIT_DELAY_MS)
                    self.continues = 0
                    if self.timer.started:
                        self.timer.restart()
                    return True
                if ch == ord("c") and self.model.state is State.LOSE:
                    self.continues += 1
                    self.model.state = State.IDLE
                    return True
            return False
        finally:
            self.stdscr.timeout(0)

    def help_loop(self) -> bool:
        """Show the help screen and pause; return False if the player quits."""
        border, win = self._overlay(HELP_NLINES, HELP_NCOLS)
        self._pause_timer()

        _write(win, "           HELP\n")
        _write(win, " <space to flip direction>\n")
        _write(win, " <f to increase speed>\n")
        _write(win, " <s to decrease speed>\n")
        _write(win, " <h to show help / pause>\n")
        _write(win, " <F1 to quit>\n")
        border.box()
        border.refresh()

        self.stdscr.timeout(-1)
        try:
            while (ch := self.stdscr.getch()) != curses.KEY_F1:
                if ch == ord("h"):
                    self.redraw()
                    return True
            return False
        finally:
            self.stdscr.timeout(0)

    def _handle_key(self, ch: int) -> bool:
        if ch in _ARROWS:
            self.model.set_direction(_ARROWS[ch])
        elif ch == ord(" "):
            self.model.flip()
        elif ch == ord("f"):
            self.delay_ms /= _SPEED_FACTOR
        elif ch == ord("s"):
            self.delay_ms *= _SPEED_FACTOR
        elif ch == ord("h"):
            return self.help_loop()
        return True

    def run(self) -> None:
        """Play until the player presses F1."""
        self.timer.start()
        self.redraw()
        self.stdscr.timeout(0)
        while (ch := self.stdscr.getch()) != curses.KEY_F1:
            if not self._handle_key(ch):
                return
            if self.model.state is State.ACTIVE:
                if self.timer.paused:
                    self.timer.unpause()
                self.model.update()
                self.redraw()
            else:
                self._pause_timer()

            if self.model.state in (State.WIN, State.LOSE):
                if not self.end_loop():
                    return
                self.redraw()

            curses.napms(int(self.delay_ms))


def _play(stdscr, args: Sequence[str]) -> None:
    with suppress(curses.error):
        curses.curs_set(0)
    if not curses.has_colors():
        raise _NoColorSupport
    curses.use_default_colors()
    curses.init_pair(PAIR_SNAKE, curses.COLOR_GREEN, -1)
    curses.init_pair(PAIR_FOOD, curses.COLOR_RED, -1)
    curses.init_pair(PAIR_BORDER, curses.COLOR_WHITE, -1)
    stdscr.refresh()

    lines, cols = stdscr.getmaxyx()
    nlines, ncols = validate_dimensions(
        *parse_dimensions(args, lines, cols), lines, cols
    )
    Controller(stdscr, nlines, ncols, 4, (cols - ncols * 2) // 2).run()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game in the terminal; return the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    locale.setlocale(locale.LC_ALL, "")
    try:
        curses.wrapper(_play, args)
    except _NoColorSupport:
        print("Your terminal does not support color")
        return 1
    except DimensionError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())