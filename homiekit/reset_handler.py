"""Reset into configuration mode when the reset pin is held."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from .events import BootMode, HomieEventType

PinReader = Callable[[], int]
Clock = Callable[[], int]


def _millis() -> int:
    return int(time.monotonic() * 1000)


class Debouncer:
    """Reports a pin level only once it has been stable for ``interval`` ms."""

    def __init__(self, read_pin: PinReader, interval: int, clock: Clock | None = None) -> None:
        self._read_pin = read_pin
        self._interval = interval
        self._clock = clock or _millis
        self._state = read_pin()
        self._unstable = self._state
        self._last_change = self._clock()

    def update(self) -> bool:
        """Sample the pin; return whether the debounced level changed."""
        reading = self._read_pin()
        now = self._clock()
        if reading != self._unstable:
            self._unstable = reading
            self._last_change = now
            return False
        if now - self._last_change >= self._interval and reading != self._state:
            self._state = reading
            return True
        return False

    def read(self) -> int:
        return self._state


class ResetHandler:
    """Watches the reset pin and reboots into configuration mode once idle."""

    def __init__(
        self,
        interface: Any,
        read_pin: PinReader,
        restart: Callable[[], None],
        clock: Clock | None = None,
    ) -> None:
        self._interface = interface
        self._restart = restart
        self._sent_reset = False
        self._debouncer = Debouncer(read_pin, interface.reset.trigger_time, clock)

    @property
    def sent_reset(self) -> bool:
        return self._sent_reset

    def tick(self) -> None:
        """Sample the reset pin and flag a reset when it holds the trigger level."""
        interface = self._interface
        reset = interface.reset
        if reset.reset_flag or not reset.enabled:
            return
        self._debouncer.update()
        if self._debouncer.read() == reset.trigger_state:
            interface.logger.line("Flagged for reset by pin")
            interface.disable = True
            reset.reset_flag = True

    def handle_reset(self) -> bool:
        """Erase the configuration and restart once flagged and idle."""
        interface = self._interface
        reset = interface.reset
        if not reset.reset_flag or self._sent_reset or not reset.idle:
            return False
        log = interface.logger.line
        log("Device is idle")

        interface.config.erase()
        log("Configuration erased")

        interface.config.set_boot_mode_on_next_boot(BootMode.CONFIGURATION)

        log("Triggering ABOUT_TO_RESET event...")
        interface.event.type = HomieEventType.ABOUT_TO_RESET
        interface.event_handler(interface.event)

        log("↻ Rebooting into config mode...")
        self._restart()
        self._sent_reset = True
        return True