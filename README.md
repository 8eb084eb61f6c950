# homiekit

Building blocks for devices that follow the Homie MQTT convention: loading,
validating and patching the device's JSON configuration, typed custom
settings, nodes and their advertised properties, topic building for
publishing property values, millisecond timers and a reset-pin handler.

The package has no dependencies beyond the standard library.

## Installation

    pip install homiekit

## Modules

- `homiekit.config`: `Config` keeps the configuration file
  (`homie/config.json`) and the next-boot-mode file (`homie/NEXTMODE`) below
  a root directory. `load()` reads, validates and returns a `ConfigStruct`;
  `patch(json_text)` merges a JSON patch into the stored file (objects merge,
  `null` deletes a key, other values replace), validates, writes and reloads;
  `write(mapping)`, `erase()`, `get_safe_config_file()` (the stored JSON with
  Wi-Fi password and MQTT credentials removed), `set_boot_mode_on_next_boot()`,
  `get_boot_mode_on_next_boot()` and `log()`. `patch_json_object(target, patch)`
  is the merge on its own.
- `homiekit.validation`: `validate_config(config, settings=None)` raises
  `ConfigValidationError` (with a `reason` attribute) for the first problem
  found in a configuration document.
- `homiekit.settings`: `HomieSetting` declares a named setting of a
  `SettingType` (`BOOL`, `LONG`, `DOUBLE`, `STRING`, or the Python types
  `bool`, `int`, `float`, `str`). A setting is required until
  `set_default_value()` is called; `set_validator()` adds a check. Settings
  register themselves in a `SettingsRegistry` (the module-level
  `settings_registry` unless one is passed).
- `homiekit.node`: `HomieNode`, `Property`, `PropertyInterface` and
  `NodeRegistry`. `advertise()` adds a property and returns a chainable
  `PropertyInterface`; `set_property()` returns the shared `SendingPromise`
  with QoS 1, retained when the property is retained.
- `homiekit.sending`: `SendingPromise` builds the topic
  `<base_topic><device_id>/<node>[_<index>]/<property>` and publishes through
  the interface's MQTT client; `overwrite_setter()` also publishes to the
  `/set` topic.
- `homiekit.interface`: `InterfaceData` holds user options, callbacks, the
  logger, the config, the MQTT client and the sending promise;
  `get_interface()` returns the process-wide instance.
- `homiekit.timers`: `Timer`, `ExponentialBackoffTimer` and `Uptime`, each
  accepting an optional millisecond clock.
- `homiekit.reset_handler`: `Debouncer` and `ResetHandler`, which flags a reset
  when the pin holds the trigger level and, once the device is idle, erases
  the configuration, sets the next boot mode to configuration, fires
  `ABOUT_TO_RESET` and calls the given restart function.
- `homiekit.helpers`: `validate_ip`, `validate_mac_address`, `validate_md5`,
  `rssi_to_percentage`, `string_to_bytes`, `ip_to_string`,
  `hex_string_to_bytes`, `bytes_to_hex_string`, and `abort`, which raises
  `HomieAbort`.
- `homiekit.device_id`: `format_device_id(mac)` and `generate_device_id()`.
- `homiekit.events`: `BootMode`, `HomieEventType`, `HomieEvent`, `HomieRange`.
- `homiekit.logger`: `Logger`, writing to any text stream unless disabled.
- `homiekit.constants`: defaults, file paths and length limits.

## Validating a configuration

    from homiekit.settings import HomieSetting, SettingType, SettingsRegistry
    from homiekit.validation import validate_config, ConfigValidationError

    registry = SettingsRegistry()
    interval = HomieSetting(
        "interval", "Publish interval in seconds", SettingType.LONG, registry=registry
    )
    interval.set_default_value(60)

    config = {
        "name": "Kitchen sensor",
        "wifi": {"ssid": "home-network"},
        "mqtt": {"host": "broker.example.com"},
    }

    try:
        validate_config(config, registry)
    except ConfigValidationError as error:
        print("invalid configuration:", error.reason)

## Loading from disk

    from homiekit.config import Config

    config = Config("/var/lib/mydevice", settings=registry)
    config.write(config_document)
    stored = config.load()          # ConfigStruct
    print(stored.mqtt.server.port)  # 1883 unless set
    config.patch('{"mqtt": {"port": 8883}}')

`load()` raises `FileNotFoundError` when there is no configuration file and
`ConfigValidationError` when it is too big, not a JSON object or not valid.

## Publishing a property

    from homiekit.interface import InterfaceData
    from homiekit.node import HomieNode, NodeRegistry

    interface = InterfaceData(config=config, mqtt_client=client, ready=True)
    node = HomieNode("temperature", "Temperature", "sensor",
                     interface=interface, registry=NodeRegistry())
    node.advertise("degrees").set_name("Degrees").set_unit("°C").set_datatype("float")
    packet_id = node.set_property("degrees").send(21.5)

`client` is any object with `publish(topic, qos, retained, payload)`
returning a packet id. `send()` raises `RuntimeError` while the interface is
not ready.

## What this package does not do

It opens no network connections: there is no MQTT client, no Wi-Fi handling,
no configuration access point or web server, and no boot sequence that ties
the pieces together. The caller supplies the MQTT client, the pin reader, the
restart function and the main loop, and drives the timers and handlers.

## Tests

    pytest