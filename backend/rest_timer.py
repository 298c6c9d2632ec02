"""Cancellable one-second countdown used between sets."""

from __future__ import annotations

from typing import Callable


class RestTimer:
    """Drive ``on_tick`` once per ``interval`` seconds while running.

    ``clock`` must provide ``schedule_interval(callback, interval)`` returning
    an event with a ``cancel()`` method, which is the interface of
    :data:`kivy.clock.Clock`.  Kivy's clock is used when none is given.

    ``on_tick`` returns ``True`` while the countdown should continue.  Once
    it returns ``False`` the scheduled event is cancelled, so at most one
    event is ever live for a timer.
    """

    def __init__(self, on_tick: Callable[[], bool], clock=None, interval: float = 1.0):
        if clock is None:
            from kivy.clock import Clock

            clock = Clock
        self.clock = clock
        self.interval = interval
        self._on_tick = on_tick
        self._event = None

    @property
    def running(self) -> bool:
        return self._event is not None

    def start(self) -> None:
        """(Re)start the countdown, replacing any running event."""

        self.cancel()
        self._event = self.clock.schedule_interval(self._tick, self.interval)

    def cancel(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None

    def _tick(self, dt):
        if self._on_tick():
            return True
        self.cancel()
        return False
