import io
import json

import pytest

from homiekit.config import Config, patch_json_object
from homiekit.events import BootMode
from homiekit.logger import Logger
from homiekit.settings import HomieSetting, SettingsRegistry
from homiekit.validation import ConfigValidationError


def _minimal():
    return {
        "name": "Kitchen light",
        "wifi": {"ssid": "testnet", "password": "password"},
        "mqtt": {"host": "broker.example.com"},
    }


@pytest.fixture
def registry():
    return SettingsRegistry()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def config(tmp_path, registry, output):
    return Config(
        tmp_path, settings=registry, logger=Logger(output), hardware_device_id="a0b1c2d3e4f5"
    )


def test_load_applies_defaults(config):
    config.write(_minimal())
    loaded = config.load()
    assert config.valid
    assert loaded.name == "Kitchen light"
    assert loaded.wifi.ssid == "testnet"
    assert loaded.mqtt.server.host == "broker.example.com"
    assert loaded.mqtt.server.port == 1883
    assert loaded.mqtt.base_topic == "homie/"
    assert loaded.device_stats_interval == 60
    assert loaded.device_id == "a0b1c2d3e4f5"
    assert loaded.ota.enabled is False


def test_load_reads_explicit_values(config):
    document = _minimal()
    document["device_id"] = "kitchen"
    document["mqtt"].update({"port": 8883, "auth": True, "username": "user", "password": "password"})
    document["ota"] = {"enabled": True}
    config.write(document)
    loaded = config.load()
    assert loaded.device_id == "kitchen"
    assert loaded.mqtt.server.port == 8883
    assert loaded.mqtt.auth is True
    assert loaded.mqtt.username == "user"
    assert loaded.ota.enabled is True


def test_load_missing_file(config, output):
    with pytest.raises(FileNotFoundError):
        config.load()
    assert not config.valid
    assert "/homie/config.json doesn't exist" in output.getvalue()


def test_load_invalid_json(config, output):
    config.config_path.parent.mkdir(parents=True, exist_ok=True)
    config.config_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        config.load()
    assert "Invalid JSON in the config file" in output.getvalue()


def test_load_too_big(config, output):
    document = _minimal()
    document["filler"] = "x" * 1000
    config.write(document)
    with pytest.raises(ConfigValidationError):
        config.load()
    assert "Config file too big" in output.getvalue()


def test_load_invalid_config_reports_reason(config, output):
    document = _minimal()
    document["wifi"] = "nope"
    config.write(document)
    with pytest.raises(ConfigValidationError) as info:
        config.load()
    assert info.value.reason == "wifi is not an object"
    assert "reason: wifi is not an object" in output.getvalue()
    assert not config.valid


def test_load_sets_custom_settings(config, registry):
    interval = HomieSetting("interval", "poll interval", int, registry=registry)
    label = HomieSetting("label", "label", str, registry=registry).set_default_value("none")
    document = _minimal()
    document["settings"] = {"interval": 30}
    config.write(document)
    config.load()
    assert interval.get() == 30
    assert interval.was_provided()
    assert label.get() == "none"
    assert not label.was_provided()


def test_load_parses_fingerprint(config):
    document = _minimal()
    document["mqtt"].update({"ssl": True, "ssl_fingerprint": "00ff" * 10})
    config.write(document)
    server = config.load().mqtt.server
    assert server.ssl_enabled
    assert server.has_fingerprint
    assert server.fingerprint == bytes([0x00, 0xFF] * 10)


def test_safe_config_file_drops_credentials(config):
    document = _minimal()
    document["mqtt"].update({"auth": True, "username": "user", "password": "password"})
    config.write(document)
    safe = json.loads(config.get_safe_config_file())
    assert "password" not in safe["wifi"]
    assert "username" not in safe["mqtt"]
    assert "password" not in safe["mqtt"]
    assert safe["wifi"]["ssid"] == "testnet"
    assert safe["name"] == "Kitchen light"


def test_write_round_trip(config):
    document = _minimal()
    config.write(document)
    assert json.loads(config.config_path.read_text(encoding="utf-8")) == document


def test_erase_removes_files(config):
    config.write(_minimal())
    config.set_boot_mode_on_next_boot(BootMode.CONFIGURATION)
    config.erase()
    assert not config.config_path.exists()
    assert not config.boot_mode_path.exists()


def test_boot_mode_round_trip(config, output):
    assert config.get_boot_mode_on_next_boot() is BootMode.UNDEFINED
    config.set_boot_mode_on_next_boot(BootMode.CONFIGURATION)
    assert config.boot_mode_path.read_text(encoding="utf-8") == "#2"
    assert config.get_boot_mode_on_next_boot() is BootMode.CONFIGURATION
    assert "Setting next boot mode to 2" in output.getvalue()
    config.set_boot_mode_on_next_boot(BootMode.UNDEFINED)
    assert not config.boot_mode_path.exists()
    assert config.get_boot_mode_on_next_boot() is BootMode.UNDEFINED


def test_patch_merges_and_reloads(config):
    document = _minimal()
    document["wifi"]["dns1"] = "192.168.1.1"
    config.write(document)
    loaded = config.patch('{"name": "Hallway", "wifi": {"dns1": null}, "mqtt": {"port": 1884}}')
    assert loaded.name == "Hallway"
    assert loaded.mqtt.server.port == 1884
    assert loaded.wifi.ssid == "testnet"
    stored = json.loads(config.config_path.read_text(encoding="utf-8"))
    assert "dns1" not in stored["wifi"]
    assert stored["mqtt"]["host"] == "broker.example.com"


def test_patch_rejects_invalid_json(config, output):
    config.write(_minimal())
    with pytest.raises(ConfigValidationError):
        config.patch("[1, 2]")
    assert "Invalid or too big JSON" in output.getvalue()


def test_patch_rejects_invalid_result_and_keeps_file(config):
    config.write(_minimal())
    with pytest.raises(ConfigValidationError) as info:
        config.patch('{"name": ""}')
    assert info.value.reason == "name is empty"
    stored = json.loads(config.config_path.read_text(encoding="utf-8"))
    assert stored == _minimal()


def test_patch_without_config_file(config):
    with pytest.raises(FileNotFoundError):
        config.patch('{"name": "x"}')


def test_patch_json_object():
    target = {"a": 1, "b": {"c": 2, "d": 3}, "e": 4}
    patch_json_object(target, {"b": {"c": 5, "d": None}, "e": None, "f": {"g": 6}})
    assert target == {"a": 1, "b": {"c": 5}, "f": {"g": 6}}


def test_log_hides_secrets(config, registry, output):
    HomieSetting("enabled", "switch", bool, registry=registry).set_default_value(True)
    document = _minimal()
    document["mqtt"].update({"auth": True, "username": "user", "password": "password"})
    config.write(document)
    loaded = config.load()
    assert loaded.mqtt.username == "user"
    assert loaded.mqtt.auth is True
    config.log()
    text = output.getvalue()
    assert "  • Name: Kitchen light\n" in text
    assert "    ◦ Username: user\n" in text
    assert "    ◦ Password not shown\n" in text
    assert "    ◦ enabled: 1 (default)\n" in text
    assert '"password"' not in text
    assert "    ◦ Auth? yes\n" in text