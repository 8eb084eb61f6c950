from types import SimpleNamespace

import pytest

from homiekit.config import ConfigStruct, MqttConfig
from homiekit.events import HomieRange
from homiekit.sending import SendingPromise


class FakeClient:
    def __init__(self):
        self.published = []

    def publish(self, topic, qos, retain, payload):
        self.published.append((topic, qos, retain, payload))
        return len(self.published)


class FakeLogger:
    def __init__(self):
        self.lines = []

    def line(self, *args):
        self.lines.append("".join(str(arg) for arg in args))


BASE = "homie/"
DEVICE = "device"


def make_interface(ready=True):
    stored = ConfigStruct(device_id=DEVICE, mqtt=MqttConfig(base_topic=BASE))
    return SimpleNamespace(
        ready=ready,
        config=SimpleNamespace(config_struct=stored),
        mqtt_client=FakeClient(),
        logger=FakeLogger(),
    )


def make_promise(interface):
    return SendingPromise(interface).set_node(SimpleNamespace(id="light")).set_property("on")


def test_send_publishes_to_property_topic():
    interface = make_interface()
    packet = make_promise(interface).set_qos(1).set_retained(True).send("true")
    assert packet == 1
    assert interface.mqtt_client.published == [(BASE + DEVICE + "/light/on", 1, True, "true")]


def test_defaults():
    promise = SendingPromise(make_interface())
    assert promise.qos == 0
    assert promise.retained is False
    assert promise.overwrites_setter is False
    assert promise.range == HomieRange()


def test_range_goes_into_topic_and_is_cleared():
    interface = make_interface()
    promise = make_promise(interface).set_range(3)
    assert promise.range == HomieRange(is_range=True, index=3)
    promise.send("x")
    promise.send("y")
    topics = [entry[0] for entry in interface.mqtt_client.published]
    assert topics == [BASE + DEVICE + "/light_3/on", BASE + DEVICE + "/light/on"]
    assert promise.range.is_range is False


def test_set_range_accepts_range_object():
    promise = SendingPromise(make_interface()).set_range(HomieRange(True, 7))
    assert promise.range.index == 7


def test_overwrite_setter_publishes_set_topic():
    interface = make_interface()
    make_promise(interface).overwrite_setter(True).send("42")
    topic = BASE + DEVICE + "/light/on"
    assert interface.mqtt_client.published == [
        (topic, 0, False, "42"),
        (topic + "/set", 1, True, "42"),
    ]


def test_send_when_not_ready_raises_and_logs():
    interface = make_interface(ready=False)
    with pytest.raises(RuntimeError):
        make_promise(interface).send("1")
    assert interface.mqtt_client.published == []
    assert interface.logger.lines == ["✖ setNodeProperty(): impossible now"]


def test_send_without_node_raises():
    with pytest.raises(RuntimeError):
        SendingPromise(make_interface()).send("1")