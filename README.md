# termsnake

A snake game for the terminal, drawn with curses. Each board cell is two
characters wide and two lines tall. A status bar above the board shows the
score, the speed, the number of continues and the elapsed play time.

## Running

```
termsnake            # 15 x 15 board
termsnake 20 30      # 20 rows, 30 columns
termsnake 20         # 20 x 20 board
termsnake max        # as large as the terminal allows (also MAX)
```

Sizes may be written in decimal, octal (leading `0`) or hexadecimal
(leading `0x`). More than two arguments are ignored and the default
15 x 15 board is used.

The board must fit the terminal (rows x 2 + 5 lines, columns x 2 + 2
columns) and be large enough for the help and end screens: at least 4 rows
and 15 columns. Otherwise `termsnake` prints `invalid dimensions` to
standard error and exits with status 1. A terminal without colour support
makes it print `Your terminal does not support color` and exit with
status 1.

## Controls

| Key          | Action                                        |
|--------------|-----------------------------------------------|
| Arrow keys   | Change direction (no reversing onto the body) |
| Space        | Flip: the other end of the snake leads        |
| `f`          | Increase speed (step delay divided by 1.5)    |
| `s`          | Decrease speed (step delay multiplied by 1.5) |
| `h`          | Show help and pause; `h` again to return      |
| F1           | Quit                                          |

The snake stays still until the first arrow key is pressed. Running into a
wall or into itself loses: press `c` to continue from where the snake
stopped (the continue counter goes up, and an arrow key sets it moving
again) or `r` to start a new game. Filling the whole board wins; then `r`
starts a new game. The timer is paused while the help or end screen is
shown or the snake is waiting for a direction.

## Using the game logic

`termsnake.model` works without a terminal:

```python
import random
from termsnake.model import Snake, Direction, State

snake = Snake(10, 10, random.Random(1))
snake.set_direction(Direction.RIGHT)
snake.update()
print(len(snake), snake.state is State.ACTIVE, snake.food)
```

`Snake` supports `len()`, iteration over its body cells (`Pose(y, x)`)
and `in`. It also offers `flip()`, `place_food()`, `out_of_bounds(pos)`
and the `max_score` property. `update()` raises `SnakeError` when the
snake is not active.

`termsnake.timer.Timer` is a pausable elapsed-time counter. It takes any
clock function returning a number (whole seconds from `time.time()` by
default), which makes it easy to drive in tests. `start`, `restart`,
`pause` and `unpause` raise `TimerError` when called out of order, and
`elapsed()` returns the time played.

`termsnake.game` holds the curses views, the `Controller` game loop, the
`main(argv=None)` entry point and the pure helpers `parse_dimensions`,
`validate_dimensions`, `format_score`, `format_speed` and `format_time`.

## Limitations

The high score lasts only for the current session; nothing is saved to
disk. The game needs the standard `curses` module, so it does not run
where Python ships without it.

## Development

```
pip install -e .[test]
pytest
```