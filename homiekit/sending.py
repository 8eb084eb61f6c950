"""Builder for publishing a node property value over MQTT."""

from __future__ import annotations

from typing import Any

from .events import HomieRange


class SendingPromise:
    """Collects node, property and options, then publishes a value."""

    def __init__(self, interface: Any) -> None:
        self._interface = interface
        self._node: Any = None
        self._property_id: str | None = None
        self._qos = 0
        self._retained = False
        self._overwrite_setter = False
        self._range = HomieRange()

    @property
    def node(self) -> Any:
        return self._node

    @property
    def property_id(self) -> str | None:
        return self._property_id

    @property
    def qos(self) -> int:
        return self._qos

    @property
    def retained(self) -> bool:
        return self._retained

    @property
    def overwrites_setter(self) -> bool:
        return self._overwrite_setter

    @property
    def range(self) -> HomieRange:
        return self._range

    def set_qos(self, qos: int) -> SendingPromise:
        self._qos = qos
        return self

    def set_retained(self, retained: bool = True) -> SendingPromise:
        self._retained = retained
        return self

    def overwrite_setter(self, overwrite: bool = True) -> SendingPromise:
        """Also publish the value retained to the property's ``/set`` topic."""
        self._overwrite_setter = overwrite
        return self

    def set_range(self, range_or_index: HomieRange | int) -> SendingPromise:
        """Target one node instance, given as a range or an index."""
        if isinstance(range_or_index, HomieRange):
            self._range = range_or_index
        else:
            self._range = HomieRange(is_range=True, index=int(range_or_index))
        return self

    def set_node(self, node: Any) -> SendingPromise:
        self._node = node
        return self

    def set_property(self, prop: str) -> SendingPromise:
        self._property_id = prop
        return self

    def send(self, value: Any) -> int:
        """Publish ``value`` and return the packet id of the publication."""
        interface = self._interface
        if not interface.ready:
            interface.logger.line("✖ setNodeProperty(): impossible now")
            raise RuntimeError("setNodeProperty(): impossible now")
        if self._node is None or self._property_id is None:
            raise RuntimeError("no node or property selected")

        stored = interface.config.config_struct
        topic = f"{stored.mqtt.base_topic}{stored.device_id}/{self._node.id}"
        if self._range.is_range:
            topic += f"_{self._range.index}"
            # The promise is shared, so a range applies to one send only.
            self._range = HomieRange()
        topic += f"/{self._property_id}"

        payload = str(value)
        client = interface.mqtt_client
        packet_id = client.publish(topic, self._qos, self._retained, payload)
        if self._overwrite_setter:
            client.publish(f"{topic}/set", 1, True, payload)
        return packet_id