"""Game state for snake: the body, its heading, the food and the outcome."""

from __future__ import annotations

import random
from collections import deque
from enum import Enum
from typing import Iterator, NamedTuple


class Pose(NamedTuple):
    """A cell on the board, row first."""

    y: int
    x: int


class Direction(Enum):
    """A heading, valued by its (dy, dx) step."""

    LEFT = (0, -1)
    RIGHT = (0, 1)
    UP = (-1, 0)
    DOWN = (1, 0)

    def opposite(self) -> Direction:
        """Return the reverse heading."""
        dy, dx = self.value
        return Direction((-dy, -dx))

    def step(self, pos: Pose) -> Pose:
        """Return the cell one step from ``pos`` in this direction."""
        dy, dx = self.value
        return Pose(pos.y + dy, pos.x + dx)


class State(Enum):
    IDLE = "idle"
    LOSE = "lose"
    WIN = "win"
    ACTIVE = "active"


class SnakeError(RuntimeError):
    """Raised when the snake model is used in a way its state forbids."""


class Snake:
    """A snake on an ``nlines`` by ``ncols`` board.

    The body runs from front to back. Normally the front is the moving end;
    after a flip the back becomes the moving end, and so on alternately.
    """

    def __init__(
        self, nlines: int, ncols: int, rng: random.Random | None = None
    ) -> None:
        self.nlines = nlines
        self.ncols = ncols
        self.direction: Direction | None = None
        self.state = State.IDLE
        self.flipped = False
        self._rng = rng if rng is not None else random.Random()
        self._body: deque[Pose] = deque([Pose(nlines // 2, ncols // 2)])
        self.food = self.place_food()

    def __len__(self) -> int:
        return len(self._body)

    def __iter__(self) -> Iterator[Pose]:
        return iter(self._body)

    def __contains__(self, pos: object) -> bool:
        return pos in self._body

    @property
    def max_score(self) -> int:
        """The length at which the board is full."""
        return self.nlines * self.ncols

    @property
    def head(self) -> Pose:
        """The moving end of the body."""
        return self._body[-1] if self.flipped else self._body[0]

    def place_food(self) -> Pose:
        """Put the food on a uniformly chosen free cell and return it."""
        taken = set(self._body)
        free = [
            Pose(y, x)
            for y in range(self.nlines)
            for x in range(self.ncols)
            if Pose(y, x) not in taken
        ]
        if not free:
            raise SnakeError("no free cell for food")
        self.food = free[self._rng.randrange(len(free))]
        return self.food

    def out_of_bounds(self, pos: Pose) -> bool:
        return not (0 <= pos.y < self.nlines and 0 <= pos.x < self.ncols)

    def set_direction(self, direction: Direction) -> None:
        """Turn, unless the turn would reverse onto the body; always activates."""
        if self.direction is None or direction is not self.direction.opposite():
            self.direction = direction
        self.state = State.ACTIVE

    def flip(self) -> None:
        """Swap the moving end and head away from the rest of the body."""
        if self.direction is None:
            return
        if len(self._body) == 1:
            self.direction = self.direction.opposite()
        else:
            if self.flipped:
                last, second_last = self._body[0], self._body[1]
            else:
                last, second_last = self._body[-1], self._body[-2]
            away = (last.y - second_last.y, last.x - second_last.x)
            try:
                self.direction = Direction(away)
            except ValueError:
                pass
        self.flipped = not self.flipped
        self.state = State.ACTIVE

    def update(self) -> None:
        """Advance one step, growing on food and ending on a collision."""
        if self.state is not State.ACTIVE:
            raise SnakeError("not active")
        if self.direction is None:
            raise SnakeError("null direction")

        next_pos = self.direction.step(self.head)
        if self.out_of_bounds(next_pos) or next_pos in self._body:
            self.state = State.LOSE
            return

        if self.flipped:
            self._body.append(next_pos)
        else:
            self._body.appendleft(next_pos)

        if next_pos == self.food:
            if len(self._body) == self.max_score:
                self.state = State.WIN
            else:
                self.place_food()
        elif self.flipped:
            self._body.popleft()
        else:
            self._body.pop()