"""Shared runtime state of the framework: user options, handlers and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .events import (
    BootMode,
    BroadcastHandler,
    EventHandler,
    GlobalInputHandler,
    HomieEvent,
    OperationFunction,
)
from .logger import Logger
from .sending import SendingPromise


@dataclass
class ConfigurationAP:
    secured: bool = False
    password: str = ""


@dataclass
class Firmware:
    name: str = ""
    version: str = ""


@dataclass
class LedSettings:
    enabled: bool = False
    pin: int = 0
    on: int = 0


@dataclass
class CacheUsage:
    do_cache: bool = False
    use_cache: bool = False


@dataclass
class ResetSettings:
    enabled: bool = False
    idle: bool = False
    trigger_pin: int = 0
    trigger_state: int = 0
    trigger_time: int = 0
    reset_flag: bool = False


@dataclass
class InterfaceData:
    """User options, callbacks and the services used at runtime."""

    brand: str = ""
    boot_mode: BootMode = BootMode.UNDEFINED
    configuration_ap: ConfigurationAP = field(default_factory=ConfigurationAP)
    firmware: Firmware = field(default_factory=Firmware)
    led: LedSettings = field(default_factory=LedSettings)
    cache: CacheUsage = field(default_factory=CacheUsage)
    reset: ResetSettings = field(default_factory=ResetSettings)
    disable: bool = False
    flagged_for_sleep: bool = False

    global_input_handler: GlobalInputHandler = lambda node, homie_range, prop, value: False
    broadcast_handler: BroadcastHandler = lambda level, value: False
    setup_function: OperationFunction = lambda: None
    loop_function: OperationFunction = lambda: None
    event_handler: EventHandler = lambda event: None

    event: HomieEvent = field(default_factory=HomieEvent)
    ready: bool = False
    logger: Logger = field(default_factory=Logger)
    config: Any = None
    mqtt_client: Any = None
    sending_promise: SendingPromise | None = None

    def __post_init__(self) -> None:
        if self.sending_promise is None:
            self.sending_promise = SendingPromise(self)


_interface = InterfaceData()


def get_interface() -> InterfaceData:
    """Return the process-wide interface data."""
    return _interface