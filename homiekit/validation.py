"""Checks that a parsed device configuration is complete and well formed."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .constants import (
    MAX_CONFIG_SETTING_SIZE,
    MAX_DEVICE_ID_LENGTH,
    MAX_FINGERPRINT_SIZE,
    MAX_FRIENDLY_NAME_LENGTH,
    MAX_HOSTNAME_LENGTH,
    MAX_IP_STRING_LENGTH,
    MAX_MQTT_BASE_TOPIC_LENGTH,
    MAX_MQTT_CREDS_LENGTH,
    MAX_WIFI_PASSWORD_LENGTH,
    MAX_WIFI_SSID_LENGTH,
)
from .helpers import validate_ip, validate_mac_address
from .settings import HomieSetting, SettingType, settings_registry

_LONG_MIN = -(2**31)
_LONG_MAX = 2**31 - 1


class ConfigValidationError(ValueError):
    """Raised when a configuration is rejected; ``reason`` says why."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _member(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, Mapping) else None


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_uint16(value: Any) -> bool:
    return _is_integer(value) and 0 <= value <= 0xFFFF


def _is_long(value: Any) -> bool:
    return _is_integer(value) and _LONG_MIN <= value <= _LONG_MAX


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _check_text(value: Any, field: str, limit: int) -> str:
    """Require a string whose byte length plus a terminator fits ``limit``."""
    if not isinstance(value, str):
        raise ConfigValidationError(f"{field} is not a string")
    if _byte_length(value) + 1 > limit:
        raise ConfigValidationError(f"{field} is too long")
    return value


def _check_address(value: Any, field: str, what: str) -> None:
    text = _check_text(value, field, MAX_IP_STRING_LENGTH)
    if not validate_ip(text):
        raise ConfigValidationError(f"{field} is not valid {what}")


def _all_or_none(*values: Any) -> bool:
    any_null = any(value is None for value in values)
    all_null = all(value is None for value in values)
    return any_null == all_null


def _validate_root(config: Any) -> None:
    name = _check_text(_member(config, "name"), "name", MAX_FRIENDLY_NAME_LENGTH)
    if name == "":
        raise ConfigValidationError("name is empty")

    device_id = _member(config, "device_id")
    if device_id is not None:
        _check_text(device_id, "device_id", MAX_DEVICE_ID_LENGTH)

    interval = _member(config, "device_stats_interval")
    if interval is not None and not _is_uint16(interval):
        raise ConfigValidationError("device_stats_interval is not an integer")


def _validate_wifi(config: Any) -> None:
    wifi = _member(config, "wifi")
    if not isinstance(wifi, Mapping):
        raise ConfigValidationError("wifi is not an object")

    ssid = _check_text(wifi.get("ssid"), "wifi.ssid", MAX_WIFI_SSID_LENGTH)
    if ssid == "":
        raise ConfigValidationError("wifi.ssid is empty")

    if wifi.get("password") is not None:
        _check_text(wifi["password"], "wifi.password", MAX_WIFI_PASSWORD_LENGTH)

    bssid, channel = wifi.get("bssid"), wifi.get("channel")
    if not _all_or_none(bssid, channel):
        raise ConfigValidationError("wifi.channel_bssid channel and BSSID is required")
    if bssid is not None:
        if not isinstance(bssid, str):
            raise ConfigValidationError("wifi.bssid is not a string")
        if not validate_mac_address(bssid):
            raise ConfigValidationError("wifi.bssid is not valid mac")
        if not _is_uint16(channel):
            raise ConfigValidationError("wifi.channel is not an integer")

    ip, mask, gw = wifi.get("ip"), wifi.get("mask"), wifi.get("gw")
    if not _all_or_none(ip, mask, gw):
        raise ConfigValidationError("wifi.staticip ip, gw and mask is required")
    if ip is not None:
        _check_address(ip, "wifi.ip", "ip address")
        _check_address(mask, "wifi.mask", "mask")
        _check_address(gw, "wifi.gw", "gateway address")

    dns1, dns2 = wifi.get("dns1"), wifi.get("dns2")
    if dns1 is not None:
        _check_address(dns1, "wifi.dns1", "dns address")
    if dns2 is not None:
        _check_address(dns2, "wifi.dns2", "dns address")
        if dns1 is None:
            raise ConfigValidationError("wifi.dns2 no dns1 defined")


def _validate_cache(config: Any) -> None:
    cache = _member(config, "connectioncache")
    if cache is None:
        return
    if not isinstance(cache, Mapping):
        raise ConfigValidationError("connectioncache is not an object")

    bssid, channel = cache.get("bssid"), cache.get("channel")
    if not _all_or_none(bssid, channel):
        raise ConfigValidationError(
            "connectioncache.channel_bssid channel and BSSID is required"
        )
    if not isinstance(bssid, str):
        raise ConfigValidationError("connectioncache.bssid is not a string")
    if not validate_mac_address(bssid):
        raise ConfigValidationError("connectioncache.bssid is not valid mac")
    if not _is_uint16(channel):
        raise ConfigValidationError("connectioncache.channel is not an integer")

    ip, mask, gw = cache.get("ip"), cache.get("mask"), cache.get("gw")
    if not _all_or_none(ip, mask, gw):
        raise ConfigValidationError(
            "connectioncache.staticip ip, gw and mask is required"
        )
    _check_address(ip, "connectioncache.ip", "ip address")
    _check_address(mask, "connectioncache.mask", "mask")
    _check_address(gw, "connectioncache.gw", "gateway address")
    _check_address(cache.get("dns1"), "connectioncache.dns1", "dns address")


def _validate_mqtt(config: Any) -> None:
    mqtt = _member(config, "mqtt")
    if not isinstance(mqtt, Mapping):
        raise ConfigValidationError("mqtt is not an object")

    host = _check_text(mqtt.get("host"), "mqtt.host", MAX_HOSTNAME_LENGTH)
    if host == "":
        raise ConfigValidationError("mqtt.host is empty")

    port = mqtt.get("port")
    if port is not None and not _is_uint16(port):
        raise ConfigValidationError("mqtt.port is not an integer")

    ssl = mqtt.get("ssl")
    if ssl is not None and not isinstance(ssl, bool):
        raise ConfigValidationError("mqtt.ssl is not a bool")

    fingerprint = mqtt.get("ssl_fingerprint")
    if fingerprint is not None:
        if not isinstance(fingerprint, str):
            raise ConfigValidationError("mqtt.ssl_fingerprint is not a string")
        if _byte_length(fingerprint) > MAX_FINGERPRINT_SIZE * 2:
            raise ConfigValidationError("mqtt.ssl_fingerprint is too long")

    base_topic = mqtt.get("base_topic")
    if base_topic is not None:
        _check_text(base_topic, "mqtt.base_topic", MAX_MQTT_BASE_TOPIC_LENGTH)

    auth = mqtt.get("auth")
    if auth is not None:
        if not isinstance(auth, bool):
            raise ConfigValidationError("mqtt.auth is not a boolean")
        if auth:
            _check_text(mqtt.get("username"), "mqtt.username", MAX_MQTT_CREDS_LENGTH)
            _check_text(mqtt.get("password"), "mqtt.password", MAX_MQTT_CREDS_LENGTH)


def _validate_ota(config: Any) -> None:
    ota = _member(config, "ota")
    if ota is None:
        return
    if not isinstance(ota, Mapping):
        raise ConfigValidationError("ota is not an object")
    enabled = ota.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        raise ConfigValidationError("ota.enabled is not a boolean")


def _coerce_setting_value(setting_type: SettingType, value: Any) -> tuple[bool, Any]:
    """Return whether ``value`` suits ``setting_type`` and the value to validate."""
    if setting_type is SettingType.BOOL:
        return isinstance(value, bool), value
    if setting_type is SettingType.LONG:
        return _is_long(value), value
    if setting_type is SettingType.DOUBLE:
        return (True, float(value)) if _is_number(value) else (False, value)
    return isinstance(value, str), value


def _validate_settings(config: Any, settings: Iterable[HomieSetting]) -> None:
    section = _member(config, "settings")
    values = section if isinstance(section, Mapping) else {}

    if len(values) > MAX_CONFIG_SETTING_SIZE:
        raise ConfigValidationError(
            "settings contains more elements than the set limit"
        )

    for setting in settings:
        value = values.get(setting.name)
        if value is None:
            if setting.required:
                raise ConfigValidationError(f"{setting.name} setting is missing")
            continue
        suits, candidate = _coerce_setting_value(setting.type, value)
        if not suits:
            raise ConfigValidationError(
                f"{setting.name} setting is not a {setting.type_name}"
            )
        if not setting.validate(candidate):
            raise ConfigValidationError(
                f"{setting.name} setting does not pass the validator function"
            )


def validate_config(
    config: Any, settings: Iterable[HomieSetting] | None = None
) -> None:
    """Raise ConfigValidationError with the first problem found in ``config``.

    ``settings`` are the declared custom settings to check; by default the
    global settings registry.
    """
    _validate_root(config)
    _validate_wifi(config)
    _validate_cache(config)
    _validate_mqtt(config)
    _validate_ota(config)
    _validate_settings(config, settings_registry if settings is None else settings)