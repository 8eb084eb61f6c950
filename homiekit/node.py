"""Nodes of a device and the properties they advertise."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .constants import MAX_NODE_ID_LENGTH, MAX_NODE_TYPE_LENGTH
from .events import HomieRange, NodeInputHandler, PropertyInputHandler
from .helpers import abort
from .interface import InterfaceData, get_interface
from .sending import SendingPromise


class Property:
    """An advertised property of a node."""

    def __init__(self, property_id: str) -> None:
        self.id = property_id
        self.name = ""
        self.unit = ""
        self.datatype = ""
        self.format = ""
        self.retained = True
        self.is_settable = False
        self.input_handler: PropertyInputHandler = lambda homie_range, value: False

    def settable(self, input_handler: PropertyInputHandler | None = None) -> None:
        self.is_settable = True
        self.input_handler = input_handler or (lambda homie_range, value: False)

    def set_name(self, name: str) -> None:
        self.name = name

    def set_unit(self, unit: str) -> None:
        self.unit = unit

    def set_datatype(self, datatype: str) -> None:
        self.datatype = datatype

    def set_format(self, fmt: str) -> None:
        self.format = fmt

    def set_retained(self, retained: bool = True) -> None:
        self.retained = retained


class PropertyInterface:
    """Chainable configuration of the most recently advertised property."""

    def __init__(self) -> None:
        self._property: Property | None = None

    def _bind(self, prop: Property) -> PropertyInterface:
        self._property = prop
        return self

    def _target(self) -> Property:
        if self._property is None:
            raise RuntimeError("no property has been advertised")
        return self._property

    def settable(self, input_handler: PropertyInputHandler | None = None) -> PropertyInterface:
        self._target().settable(input_handler)
        return self

    def set_name(self, name: str) -> PropertyInterface:
        self._target().set_name(name)
        return self

    def set_unit(self, unit: str) -> PropertyInterface:
        self._target().set_unit(unit)
        return self

    def set_datatype(self, datatype: str) -> PropertyInterface:
        self._target().set_datatype(datatype)
        return self

    def set_format(self, fmt: str) -> PropertyInterface:
        self._target().set_format(fmt)
        return self

    def set_retained(self, retained: bool = True) -> PropertyInterface:
        self._target().set_retained(retained)
        return self


class NodeRegistry:
    """Ordered collection of the device's nodes."""

    def __init__(self) -> None:
        self._nodes: list[HomieNode] = []

    def register(self, node: HomieNode) -> None:
        self._nodes.append(node)

    def find(self, node_id: str) -> HomieNode | None:
        return next((node for node in self._nodes if node.id == node_id), None)

    def clear(self) -> None:
        self._nodes.clear()

    def __iter__(self) -> Iterator[HomieNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)


node_registry = NodeRegistry()

Hook = Callable[[], None]


class HomieNode:
    """A node of the device.

    Lifecycle hooks may be given as callables or provided by overriding
    ``setup``, ``loop`` and ``on_ready_to_operate`` in a subclass.
    """

    def __init__(
        self,
        node_id: str,
        name: str,
        node_type: str,
        is_range: bool = False,
        lower: int = 0,
        upper: int = 0,
        input_handler: NodeInputHandler | None = None,
        *,
        interface: InterfaceData | None = None,
        registry: NodeRegistry | None = None,
        setup_hook: Hook | None = None,
        loop_hook: Hook | None = None,
        ready_hook: Hook | None = None,
    ) -> None:
        if len(node_id) + 1 > MAX_NODE_ID_LENGTH or len(node_type) + 1 > MAX_NODE_TYPE_LENGTH:
            abort("✖ HomieNode(): either the id or type string is too long")
        self.id = node_id
        self.name = name
        self.type = node_type
        self.is_range = is_range
        self.lower = lower
        self.upper = upper
        self.run_loop_disconnected = False
        self._properties: list[Property] = []
        self._input_handler: NodeInputHandler = input_handler or (
            lambda homie_range, prop, value: False
        )
        self._setup_hook = setup_hook
        self._loop_hook = loop_hook
        self._ready_hook = ready_hook
        self._property_interface = PropertyInterface()
        self._interface = interface if interface is not None else get_interface()
        (node_registry if registry is None else registry).register(self)

    @property
    def properties(self) -> tuple[Property, ...]:
        return tuple(self._properties)

    def advertise(self, property_id: str) -> PropertyInterface:
        """Add a property and return the interface that configures it."""
        prop = Property(property_id)
        self._properties.append(prop)
        return self._property_interface._bind(prop)

    def set_property(self, property_id: str) -> SendingPromise:
        """Start sending a value of ``property_id`` with QoS 1."""
        promise = self._interface.sending_promise
        promise.set_node(self).set_property(property_id).set_qos(1)
        prop = self.get_property(property_id)
        if prop is not None and prop.retained:
            promise.set_retained(True)
        return promise

    def get_property(self, property_id: str) -> Property | None:
        return next((prop for prop in self._properties if prop.id == property_id), None)

    def handle_input(self, homie_range: HomieRange, property_id: str, value: str) -> bool:
        """Handle a value received for a property; return whether it was accepted."""
        return bool(self._input_handler(homie_range, property_id, value))

    def set_run_loop_disconnected(self, run_loop_disconnected: bool) -> None:
        self.run_loop_disconnected = run_loop_disconnected

    def setup(self) -> None:
        """Called once when the device starts."""
        if self._setup_hook is not None:
            self._setup_hook()

    def loop(self) -> None:
        """Called on every iteration of the main loop."""
        if self._loop_hook is not None:
            self._loop_hook()

    def on_ready_to_operate(self) -> None:
        """Called once the device is connected and ready."""
        if self._ready_hook is not None:
            self._ready_hook()

    def __repr__(self) -> str:
        return f"HomieNode(id={self.id!r}, type={self.type!r})"


__all__ = [
    "HomieNode",
    "NodeRegistry",
    "Property",
    "PropertyInterface",
    "node_registry",
]