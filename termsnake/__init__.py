"""A terminal snake game: board model, pausable timer and curses front end."""

__version__ = "0.1.0"
__all__ = ["game", "model", "timer"]