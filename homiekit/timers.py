"""Millisecond timers: a plain interval timer, a backoff timer and an uptime counter."""

from __future__ import annotations

import random
import time
from collections.abc import Callable

_UINT32_MASK = 0xFFFFFFFF
_START = time.monotonic()

Clock = Callable[[], int]


def _millis() -> int:
    """Milliseconds since start-up, wrapping like a 32-bit counter."""
    return int((time.monotonic() - _START) * 1000) & _UINT32_MASK


class Timer:
    """Fires once ``interval`` milliseconds have passed since the last tick."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or _millis
        self._initial_time = 0
        self._interval = 0
        self._tick_at_beginning = False
        self._active = True

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def active(self) -> bool:
        return self._active

    def set_interval(self, interval: int, tick_at_beginning: bool = True) -> None:
        """Set the interval; with ``tick_at_beginning`` the timer fires at once."""
        self._interval = interval & _UINT32_MASK
        self._tick_at_beginning = tick_at_beginning
        self.reset()

    def check(self) -> bool:
        """Return whether the timer is due."""
        if not self._active:
            return False
        if self._tick_at_beginning and self._initial_time == 0:
            return True
        return (self._clock() - self._initial_time) & _UINT32_MASK >= self._interval

    def reset(self) -> None:
        if self._tick_at_beginning:
            self._initial_time = 0
        else:
            self.tick()

    def tick(self) -> None:
        """Restart the interval from now."""
        self._initial_time = self._clock()

    def activate(self) -> None:
        self._active = True

    def deactivate(self) -> None:
        self._active = False
        self.reset()


class ExponentialBackoffTimer:
    """Timer whose interval grows with the square of the retry count, with jitter."""

    def __init__(
        self,
        initial_interval: int,
        max_backoff: int,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._timer = Timer(clock)
        self._initial_interval = initial_interval
        self._max_backoff = max_backoff
        self._retry_count = 0
        self._rng = rng or random.Random()
        self._timer.deactivate()

    @property
    def active(self) -> bool:
        return self._timer.active

    @property
    def retry_count(self) -> int:
        return self._retry_count

    def check(self) -> bool:
        """Return whether a retry is due, and schedule the next one if so."""
        if not self._timer.check():
            return False
        if self._retry_count != self._max_backoff:
            self._retry_count += 1
        fixed_delay = self._retry_count**2 * self._initial_interval
        random_difference = self._rng.randrange(fixed_delay // 10 + 1)
        self._timer.set_interval(fixed_delay - random_difference, False)
        return True

    def activate(self) -> None:
        """Start the backoff from the initial interval unless already running."""
        if self._timer.active:
            return
        self._timer.set_interval(self._initial_interval, False)
        self._timer.activate()
        self._retry_count = 1

    def deactivate(self) -> None:
        self._timer.deactivate()


class Uptime:
    """Accumulates elapsed milliseconds across wraps of the 32-bit clock."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or _millis
        self._milliseconds = 0
        self._last_tick = 0

    def update(self) -> None:
        now = self._clock()
        self._milliseconds += (now - self._last_tick) & _UINT32_MASK
        self._last_tick = now

    @property
    def milliseconds(self) -> int:
        return self._milliseconds

    @property
    def seconds(self) -> int:
        return self._milliseconds // 1000