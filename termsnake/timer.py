"""A wall-clock game timer with whole-second resolution that can be paused."""

from __future__ import annotations

import time
from typing import Callable


class TimerError(RuntimeError):
    """Raised when the timer is asked to do something its state forbids."""


def _whole_seconds() -> int:
    return int(time.time())


class Timer:
    """Tracks elapsed play time, excluding the most recent pause."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock if clock is not None else _whole_seconds
        self._start_time = 0
        self._pause_time = 0
        self._unpause_time = 0
        self._started = False
        self._paused = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def paused(self) -> bool:
        """Whether the timer is currently paused."""
        return self._paused

    def start(self) -> None:
        """Start the timer; it may only be started once."""
        if self._started:
            raise TimerError("bad timer start: already started")
        self._start_time = self._clock()
        self._started = True

    def restart(self) -> None:
        """Reset a started timer to zero and leave it running."""
        if not self._started:
            raise TimerError("bad timer restart: not started")
        self._start_time = self._clock()
        self._paused = False
        self._pause_time = 0
        self._unpause_time = 0

    def pause(self) -> None:
        """Pause a running timer."""
        if not self._started:
            raise TimerError("bad timer pause: not started")
        if self._paused:
            raise TimerError("bad timer pause: already paused")
        self._paused = True
        self._pause_time = self._clock()

    def unpause(self) -> None:
        """Resume a paused timer."""
        if not self._started:
            raise TimerError("bad timer unpause: not started")
        if not self._paused:
            raise TimerError("bad timer unpause: already unpaused")
        self._paused = False
        self._unpause_time = self._clock()

    def elapsed(self) -> int:
        """Return the elapsed time in clock units (seconds by default)."""
        if not self._started:
            return 0
        if self._paused:
            return self._pause_time - self._start_time
        return (
            self._clock()
            - self._start_time
            - (self._unpause_time - self._pause_time)
        )