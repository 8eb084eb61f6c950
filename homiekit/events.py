"""Boot modes, events, node ranges and the callback signatures of the framework."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from ipaddress import IPv4Address
from typing import Any


class BootMode(IntEnum):
    """Mode the device boots into."""

    UNDEFINED = 0
    STANDALONE = 1
    CONFIGURATION = 2
    NORMAL = 3


class HomieEventType(IntEnum):
    """Kinds of event reported to the event handler."""

    STANDALONE_MODE = 1
    CONFIGURATION_MODE = 2
    NORMAL_MODE = 3
    OTA_STARTED = 4
    OTA_PROGRESS = 5
    OTA_SUCCESSFUL = 6
    OTA_FAILED = 7
    ABOUT_TO_RESET = 8
    WIFI_CONNECTED = 9
    WIFI_DISCONNECTED = 10
    MQTT_READY = 11
    MQTT_DISCONNECTED = 12
    MQTT_PACKET_ACKNOWLEDGED = 13
    READY_TO_SLEEP = 14
    SENDING_STATISTICS = 15


_UNSET_ADDRESS = IPv4Address(0)


@dataclass
class HomieEvent:
    """An event and the details that belong to its type."""

    type: HomieEventType | None = None
    ip: IPv4Address = field(default=_UNSET_ADDRESS)
    mask: IPv4Address = field(default=_UNSET_ADDRESS)
    gateway: IPv4Address = field(default=_UNSET_ADDRESS)
    wifi_reason: int = 0
    mqtt_reason: int = 0
    packet_id: int = 0
    size_done: int = 0
    size_total: int = 0


@dataclass(frozen=True)
class HomieRange:
    """Index of a node instance when the node is a range."""

    is_range: bool = False
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 0xFFFF:
            raise ValueError(f"range index {self.index} is outside 0..65535")


OperationFunction = Callable[[], None]
GlobalInputHandler = Callable[[Any, HomieRange, str, str], bool]
NodeInputHandler = Callable[[HomieRange, str, str], bool]
PropertyInputHandler = Callable[[HomieRange, str], bool]
EventHandler = Callable[[HomieEvent], None]
BroadcastHandler = Callable[[str, str], bool]