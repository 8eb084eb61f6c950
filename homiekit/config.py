"""Device configuration stored as JSON on a filesystem, and its parsed form."""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import (
    CONFIG_FILE_PATH,
    CONFIG_NEXT_BOOT_MODE_FILE_PATH,
    DEFAULT_MQTT_BASE_TOPIC,
    DEFAULT_MQTT_PORT,
    MAX_DEVICE_ID_LENGTH,
    MAX_FINGERPRINT_SIZE,
    MAX_FRIENDLY_NAME_LENGTH,
    MAX_HOSTNAME_LENGTH,
    MAX_IP_STRING_LENGTH,
    MAX_JSON_CONFIG_FILE_SIZE,
    MAX_MAC_STRING_LENGTH,
    MAX_MQTT_BASE_TOPIC_LENGTH,
    MAX_MQTT_CREDS_LENGTH,
    MAX_WIFI_PASSWORD_LENGTH,
    MAX_WIFI_SSID_LENGTH,
    STATS_SEND_INTERVAL_SEC,
)
from .events import BootMode
from .helpers import bytes_to_hex_string, hex_string_to_bytes
from .logger import Logger
from .settings import HomieSetting, SettingType, settings_registry
from .validation import ConfigValidationError, validate_config

_BSSID_LENGTH = MAX_MAC_STRING_LENGTH + 6
_INTEGER_PATTERN = re.compile(r"-?\d+")


def _fit(text: str, size: int) -> str:
    """Truncate ``text`` so that it and a terminating byte fit in ``size`` bytes."""
    encoded = text.encode("utf-8")
    if len(encoded) < size:
        return text
    return encoded[: size - 1].decode("utf-8", errors="ignore")


def _pick(obj: Any, key: str, default: Any, kind: type) -> Any:
    """Return ``obj[key]`` when it has type ``kind``, otherwise ``default``."""
    value = obj.get(key) if isinstance(obj, Mapping) else None
    if kind is int and isinstance(value, bool):
        return default
    return value if isinstance(value, kind) else default


def _dump(document: Any) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


@dataclass
class WifiConfig:
    ssid: str = ""
    password: str = ""
    bssid: str = ""
    channel: int = 0
    ip: str = ""
    mask: str = ""
    gw: str = ""
    dns1: str = ""
    dns2: str = ""


@dataclass
class ConnectionCache:
    bssid: str = ""
    channel: int = 0
    ip: str = ""
    mask: str = ""
    gw: str = ""
    dns1: str = ""


@dataclass
class MqttServer:
    host: str = ""
    port: int = 0
    ssl_enabled: bool = False
    has_fingerprint: bool = False
    fingerprint: bytes = bytes(MAX_FINGERPRINT_SIZE)


@dataclass
class MqttConfig:
    server: MqttServer = field(default_factory=MqttServer)
    base_topic: str = ""
    auth: bool = False
    username: str = ""
    password: str = ""


@dataclass
class OtaConfig:
    enabled: bool = False


@dataclass
class ConfigStruct:
    """Parsed configuration of the device."""

    name: str = ""
    device_id: str = ""
    device_stats_interval: int = 0
    wifi: WifiConfig = field(default_factory=WifiConfig)
    connectioncache: ConnectionCache = field(default_factory=ConnectionCache)
    mqtt: MqttConfig = field(default_factory=MqttConfig)
    ota: OtaConfig = field(default_factory=OtaConfig)


def patch_json_object(target: dict, patch: Mapping) -> None:
    """Merge ``patch`` into ``target``: objects merge, nulls delete, others replace."""
    for key, patch_value in patch.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(patch_value, Mapping):
            patch_json_object(current, patch_value)
        elif patch_value is None:
            target.pop(key, None)
        else:
            target[key] = copy.deepcopy(patch_value)


def _convert_setting(setting_type: SettingType, value: Any) -> Any:
    if setting_type is SettingType.BOOL:
        return bool(value)
    if setting_type is SettingType.LONG:
        return int(value)
    if setting_type is SettingType.DOUBLE:
        return float(value)
    return value if isinstance(value, str) else None


def _format_setting(setting: HomieSetting) -> str:
    value = setting.get()
    if setting.type is SettingType.BOOL:
        return str(int(bool(value)))
    if setting.type is SettingType.DOUBLE:
        return f"{value:.2f}"
    if setting.type is SettingType.STRING:
        return "" if value is None else value
    return str(value)


class Config:
    """Configuration file, boot-mode file and the parsed configuration.

    Files live below ``root``, which stands in for the device filesystem.
    """

    def __init__(
        self,
        root: str | Path,
        settings: Iterable[HomieSetting] | None = None,
        logger: Logger | None = None,
        hardware_device_id: str = "",
    ) -> None:
        self._root = Path(root)
        self._settings = settings_registry if settings is None else settings
        self._logger = logger if logger is not None else Logger()
        self.hardware_device_id = hardware_device_id
        self._config_struct = ConfigStruct()
        self._began = False
        self._valid = False

    @property
    def config_struct(self) -> ConfigStruct:
        return self._config_struct

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def config_path(self) -> Path:
        return self._root / CONFIG_FILE_PATH.lstrip("/")

    @property
    def boot_mode_path(self) -> Path:
        return self._root / CONFIG_NEXT_BOOT_MODE_FILE_PATH.lstrip("/")

    def _begin(self) -> None:
        if self._began:
            return
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            self._logger.line("✖ Cannot mount filesystem")
            raise
        self._began = True

    def _read_config_text(self) -> bytes:
        try:
            return self.config_path.read_bytes()
        except OSError:
            self._logger.line("✖ Cannot open config file")
            raise

    def load(self) -> ConfigStruct:
        """Read, validate and apply the configuration file."""
        self._begin()
        self._valid = False

        if not self.config_path.exists():
            self._logger.line("✖ ", CONFIG_FILE_PATH, " doesn't exist")
            raise FileNotFoundError(f"{CONFIG_FILE_PATH} doesn't exist")

        raw = self._read_config_text()
        if len(raw) >= MAX_JSON_CONFIG_FILE_SIZE:
            self._logger.line("✖ Config file too big")
            raise ConfigValidationError("config file too big")

        try:
            parsed = json.loads(raw.decode("utf-8"))
        except ValueError:
            parsed = None
        if not isinstance(parsed, dict):
            self._logger.line("✖ Invalid JSON in the config file")
            raise ConfigValidationError("invalid JSON in the config file")

        try:
            validate_config(parsed, self._settings)
        except ConfigValidationError as error:
            self._logger.line("✖ Config file is not valid, reason: ", error.reason)
            raise

        self._config_struct = self._build_struct(parsed)
        self._apply_settings(parsed.get("settings"))
        self._valid = True
        return self._config_struct

    def _build_struct(self, parsed: dict) -> ConfigStruct:
        wifi = parsed.get("wifi")
        cache = parsed.get("connectioncache")
        mqtt = parsed.get("mqtt")

        wifi_password = _pick(wifi, "password", None, str)
        password = (
            _fit(wifi_password, MAX_WIFI_PASSWORD_LENGTH)
            if wifi_password is not None
            else self._config_struct.wifi.password
        )

        fingerprint_text = _pick(mqtt, "ssl_fingerprint", "", str)
        server = MqttServer(
            host=_fit(mqtt["host"], MAX_HOSTNAME_LENGTH),
            port=_pick(mqtt, "port", DEFAULT_MQTT_PORT, int),
            ssl_enabled=_pick(mqtt, "ssl", False, bool),
        )
        if fingerprint_text != "":
            server.has_fingerprint = True
            server.fingerprint = hex_string_to_bytes(fingerprint_text, MAX_FINGERPRINT_SIZE)

        return ConfigStruct(
            name=_fit(parsed["name"], MAX_FRIENDLY_NAME_LENGTH),
            device_id=_fit(
                _pick(parsed, "device_id", self.hardware_device_id, str),
                MAX_DEVICE_ID_LENGTH,
            ),
            device_stats_interval=_pick(
                parsed, "device_stats_interval", STATS_SEND_INTERVAL_SEC, int
            ),
            wifi=WifiConfig(
                ssid=_fit(wifi["ssid"], MAX_WIFI_SSID_LENGTH),
                password=password,
                bssid=_fit(_pick(wifi, "bssid", "", str), _BSSID_LENGTH),
                channel=_pick(wifi, "channel", 0, int),
                ip=_fit(_pick(wifi, "ip", "", str), MAX_IP_STRING_LENGTH),
                mask=_fit(_pick(wifi, "mask", "", str), MAX_IP_STRING_LENGTH),
                gw=_fit(_pick(wifi, "gw", "", str), MAX_IP_STRING_LENGTH),
                dns1=_fit(_pick(wifi, "dns1", "", str), MAX_IP_STRING_LENGTH),
                dns2=_fit(_pick(wifi, "dns2", "", str), MAX_IP_STRING_LENGTH),
            ),
            connectioncache=ConnectionCache(
                bssid=_fit(_pick(cache, "bssid", "", str), _BSSID_LENGTH),
                channel=_pick(cache, "channel", 0, int),
                ip=_fit(_pick(cache, "ip", "", str), MAX_IP_STRING_LENGTH),
                mask=_fit(_pick(cache, "mask", "", str), MAX_IP_STRING_LENGTH),
                gw=_fit(_pick(cache, "gw", "", str), MAX_IP_STRING_LENGTH),
                dns1=_fit(_pick(cache, "dns1", "", str), MAX_IP_STRING_LENGTH),
            ),
            mqtt=MqttConfig(
                server=server,
                base_topic=_fit(
                    _pick(mqtt, "base_topic", DEFAULT_MQTT_BASE_TOPIC, str),
                    MAX_MQTT_BASE_TOPIC_LENGTH,
                ),
                auth=_pick(mqtt, "auth", False, bool),
                username=_fit(_pick(mqtt, "username", "", str), MAX_MQTT_CREDS_LENGTH),
                password=_fit(_pick(mqtt, "password", "", str), MAX_MQTT_CREDS_LENGTH),
            ),
            ota=OtaConfig(enabled=_pick(parsed.get("ota"), "enabled", False, bool)),
        )

    def _apply_settings(self, section: Any) -> None:
        values = section if isinstance(section, Mapping) else {}
        for setting in self._settings:
            value = values.get(setting.name)
            if value is not None:
                setting.set(_convert_setting(setting.type, value))

    def get_safe_config_file(self) -> str:
        """Return the stored configuration as JSON without its credentials."""
        document = json.loads(self._read_config_text().decode("utf-8"))
        if isinstance(document, dict):
            wifi = document.get("wifi")
            if isinstance(wifi, dict):
                wifi.pop("password", None)
            mqtt = document.get("mqtt")
            if isinstance(mqtt, dict):
                mqtt.pop("username", None)
                mqtt.pop("password", None)
        return _dump(document)

    def erase(self) -> None:
        """Remove the configuration and the next-boot-mode files."""
        self._begin()
        self.config_path.unlink(missing_ok=True)
        self.boot_mode_path.unlink(missing_ok=True)

    def set_boot_mode_on_next_boot(self, boot_mode: BootMode) -> None:
        """Record the mode for the next boot; UNDEFINED clears it."""
        self._begin()
        if boot_mode == BootMode.UNDEFINED:
            self.boot_mode_path.unlink(missing_ok=True)
            return
        try:
            self.boot_mode_path.write_text(f"#{int(boot_mode)}", encoding="utf-8")
        except OSError:
            self._logger.line("✖ Cannot open NEXTMODE file")
            raise
        self._logger.write(f"Setting next boot mode to {int(boot_mode)}\n")

    def get_boot_mode_on_next_boot(self) -> BootMode:
        """Return the recorded next boot mode, or UNDEFINED when there is none."""
        self._begin()
        try:
            text = self.boot_mode_path.read_text(encoding="utf-8")
        except OSError:
            return BootMode.UNDEFINED
        match = _INTEGER_PATTERN.search(text)
        value = int(match.group()) if match else 0
        try:
            return BootMode(value)
        except ValueError:
            return BootMode.UNDEFINED

    def write(self, config: Mapping) -> None:
        """Replace the configuration file with ``config``."""
        self._begin()
        self.config_path.unlink(missing_ok=True)
        try:
            self.config_path.write_text(_dump(config), encoding="utf-8")
        except OSError:
            self._logger.line("✖ Cannot open config file")
            raise

    def patch(self, patch: str) -> ConfigStruct:
        """Merge a JSON patch into the stored configuration, save and reload it."""
        self._begin()
        try:
            patch_object = json.loads(patch)
        except ValueError:
            patch_object = None
        if not isinstance(patch_object, dict):
            self._logger.line("✖ Invalid or too big JSON")
            raise ConfigValidationError("invalid or too big JSON")

        if not self.config_path.exists():
            self._logger.line("✖ Cannot open config file")
            raise FileNotFoundError(f"{CONFIG_FILE_PATH} doesn't exist")
        try:
            config_object = json.loads(self._read_config_text().decode("utf-8"))
        except ValueError:
            config_object = None
        if not isinstance(config_object, dict):
            config_object = {}

        patch_json_object(config_object, patch_object)

        try:
            validate_config(config_object, self._settings)
        except ConfigValidationError as error:
            self._logger.line("✖ Config file is not valid, reason: ", error.reason)
            raise

        self.write(config_object)
        return self.load()

    def log(self) -> None:
        """Print the loaded configuration, with secrets left out."""
        log = self._logger.line
        data = self._config_struct
        log("{} Stored configuration")
        log("  • Hardware device ID: ", self.hardware_device_id)
        log("  • Device ID: ", data.device_id)
        log("  • Name: ", data.name)
        log("  • Device Stats Interval: ", data.device_stats_interval, " sec")

        log("  • Wi-Fi: ")
        log("    ◦ SSID: ", data.wifi.ssid)
        log("    ◦ Password not shown")
        if data.wifi.ip != "":
            log("    ◦ IP: ", data.wifi.ip)
            log("    ◦ Mask: ", data.wifi.mask)
            log("    ◦ Gateway: ", data.wifi.gw)

        server = data.mqtt.server
        log("  • MQTT: ")
        log("    ◦ Host: ", server.host)
        log("    ◦ Port: ", server.port)
        log("    ◦ SSL enabled: ", "true" if server.ssl_enabled else "false")
        if server.ssl_enabled and server.has_fingerprint:
            log("    ◦ Fingerprint: ", bytes_to_hex_string(server.fingerprint))
        log("    ◦ Base topic: ", data.mqtt.base_topic)
        log("    ◦ Auth? ", "yes" if data.mqtt.auth else "no")
        if data.mqtt.auth:
            log("    ◦ Username: ", data.mqtt.username)
            log("    ◦ Password not shown")

        log("  • OTA: ")
        log("    ◦ Enabled? ", "yes" if data.ota.enabled else "no")

        settings = list(self._settings)
        if settings:
            log("  • Custom settings: ")
            for setting in settings:
                origin = "set" if setting.was_provided() else "default"
                log(f"    ◦ {setting.name}: {_format_setting(setting)} ({origin})")