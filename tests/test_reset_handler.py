import io

from homiekit.config import Config
from homiekit.events import BootMode, HomieEventType
from homiekit.interface import InterfaceData, ResetSettings
from homiekit.logger import Logger
from homiekit.reset_handler import Debouncer, ResetHandler

TRIGGER_TIME = 50


class Pin:
    def __init__(self, level=1):
        self.level = level

    def __call__(self):
        return self.level


class Clock:
    def __init__(self):
        self.now = 0

    def __call__(self):
        return self.now


def test_debouncer_waits_for_stable_level():
    pin, clock = Pin(1), Clock()
    debouncer = Debouncer(pin, TRIGGER_TIME, clock)
    assert debouncer.read() == 1
    pin.level = 0
    assert debouncer.update() is False
    clock.now = TRIGGER_TIME - 1
    assert debouncer.update() is False
    assert debouncer.read() == 1
    clock.now = TRIGGER_TIME
    assert debouncer.update() is True
    assert debouncer.read() == 0


def test_debouncer_ignores_bounce():
    pin, clock = Pin(1), Clock()
    debouncer = Debouncer(pin, TRIGGER_TIME, clock)
    pin.level = 0
    debouncer.update()
    clock.now = TRIGGER_TIME - 10
    pin.level = 1
    debouncer.update()
    clock.now = TRIGGER_TIME * 3
    debouncer.update()
    assert debouncer.read() == 1


def make_setup(tmp_path, enabled=True):
    output = io.StringIO()
    logger = Logger(output)
    interface = InterfaceData(
        reset=ResetSettings(enabled=enabled, trigger_state=0, trigger_time=TRIGGER_TIME),
        logger=logger,
        config=Config(tmp_path, settings=[], logger=Logger(io.StringIO())),
    )
    events = []
    interface.event_handler = lambda event: events.append(event.type)
    restarts = []
    pin, clock = Pin(1), Clock()
    handler = ResetHandler(interface, pin, lambda: restarts.append(True), clock)
    return interface, handler, pin, clock, events, restarts, output


def flag(handler, pin, clock):
    pin.level = 0
    handler.tick()
    clock.now = TRIGGER_TIME
    handler.tick()


def test_tick_flags_reset_after_hold(tmp_path):
    interface, handler, pin, clock, *_, output = make_setup(tmp_path)
    handler.tick()
    assert interface.reset.reset_flag is False
    flag(handler, pin, clock)
    assert interface.reset.reset_flag is True
    assert interface.disable is True
    assert "Flagged for reset by pin" in output.getvalue()


def test_tick_does_nothing_when_disabled(tmp_path):
    interface, handler, pin, clock, *_ = make_setup(tmp_path, enabled=False)
    flag(handler, pin, clock)
    assert interface.reset.reset_flag is False
    assert interface.disable is False


def test_handle_reset_waits_until_idle(tmp_path):
    interface, handler, pin, clock, events, restarts, _ = make_setup(tmp_path)
    flag(handler, pin, clock)
    assert handler.handle_reset() is False
    assert restarts == []
    assert events == []


def test_handle_reset_erases_and_restarts_once(tmp_path):
    interface, handler, pin, clock, events, restarts, output = make_setup(tmp_path)
    interface.config.write({"name": "device"})
    flag(handler, pin, clock)
    interface.reset.idle = True

    assert handler.handle_reset() is True
    assert not interface.config.config_path.exists()
    assert interface.config.get_boot_mode_on_next_boot() is BootMode.CONFIGURATION
    assert events == [HomieEventType.ABOUT_TO_RESET]
    assert restarts == [True]
    assert handler.sent_reset is True
    assert "Configuration erased" in output.getvalue()

    assert handler.handle_reset() is False
    assert restarts == [True]


def test_handle_reset_without_flag(tmp_path):
    interface, handler, *_rest = make_setup(tmp_path)
    interface.reset.idle = True
    assert handler.handle_reset() is False
    assert handler.sent_reset is False