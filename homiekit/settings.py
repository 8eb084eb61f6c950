"""User-declared custom settings read from the device configuration."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from enum import Enum
from typing import Any


class SettingType(Enum):
    """Value type of a setting; the value is the name shown to users."""

    BOOL = "bool"
    LONG = "long"
    DOUBLE = "double"
    STRING = "string"


_PYTHON_TYPES = {
    bool: SettingType.BOOL,
    int: SettingType.LONG,
    float: SettingType.DOUBLE,
    str: SettingType.STRING,
}

_INITIAL_VALUES = {
    SettingType.BOOL: False,
    SettingType.LONG: 0,
    SettingType.DOUBLE: 0.0,
    SettingType.STRING: None,
}


class SettingsRegistry:
    """Ordered collection of declared settings."""

    def __init__(self) -> None:
        self._settings: list[HomieSetting] = []

    def register(self, setting: HomieSetting) -> None:
        self._settings.append(setting)

    def clear(self) -> None:
        self._settings.clear()

    def __iter__(self) -> Iterator[HomieSetting]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)


settings_registry = SettingsRegistry()


class HomieSetting:
    """A named setting, required until it is given a default value."""

    def __init__(
        self,
        name: str,
        description: str,
        setting_type: SettingType | type,
        registry: SettingsRegistry | None = None,
    ) -> None:
        if isinstance(setting_type, SettingType):
            self.type = setting_type
        elif setting_type in _PYTHON_TYPES:
            self.type = _PYTHON_TYPES[setting_type]
        else:
            raise TypeError(f"unsupported setting type: {setting_type!r}")
        self.name = name
        self.description = description
        self.required = True
        self._provided = False
        self._value: Any = _INITIAL_VALUES[self.type]
        self._validator: Callable[[Any], bool] = lambda candidate: True
        (settings_registry if registry is None else registry).register(self)

    @property
    def type_name(self) -> str:
        return self.type.value

    def get(self) -> Any:
        return self._value

    def was_provided(self) -> bool:
        return self._provided

    def set_default_value(self, default_value: Any) -> HomieSetting:
        """Give the setting a default, which makes it optional."""
        self._value = default_value
        self.required = False
        return self

    def set_validator(self, validator: Callable[[Any], bool]) -> HomieSetting:
        self._validator = validator
        return self

    def validate(self, candidate: Any) -> bool:
        return bool(self._validator(candidate))

    def set(self, value: Any) -> None:
        """Store a configured value."""
        self._value = value
        if self.type is SettingType.STRING:
            # String settings are marked optional rather than provided.
            self.required = False
        else:
            self._provided = True