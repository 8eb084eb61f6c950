"""Fixed values: versions, defaults, file paths, length limits and canned responses."""

from ipaddress import IPv4Address

HOMIE_CONFIG = True

HOMIE_VERSION = "3.0.1"
HOMIE_ESP8266_VERSION = "3.0.0"

ACCESS_POINT_IP = IPv4Address("192.168.123.1")

DEFAULT_MQTT_PORT = 1883
DEFAULT_MQTT_BASE_TOPIC = "homie/"

LOW = 0
HIGH = 1

DEFAULT_RESET_PIN = 0
DEFAULT_RESET_STATE = LOW
DEFAULT_RESET_TIME = 5 * 1000

DEFAULT_BRAND = "Homie"

CONFIG_SCAN_INTERVAL = 20 * 1000
STATS_SEND_INTERVAL_SEC = 1 * 60
MQTT_RECONNECT_INITIAL_INTERVAL = 1000
MQTT_RECONNECT_MAX_BACKOFF = 6

LED_WIFI_DELAY = 1.0
LED_MQTT_DELAY = 0.2

CONFIG_UI_BUNDLE_PATH = "/homie/ui_bundle.gz"
CONFIG_NEXT_BOOT_MODE_FILE_PATH = "/homie/NEXTMODE"
CONFIG_FILE_PATH = "/homie/config.json"

# Limits. Lengths ending in "+ 1" count a terminating byte, so the longest
# accepted text is one character shorter than the limit.
MAX_JSON_CONFIG_FILE_SIZE = 1000
MAX_CONFIG_SETTING_SIZE = 10

MAX_MAC_LENGTH = 6
MAX_MAC_STRING_LENGTH = (MAX_MAC_LENGTH * 2) + 1

MAX_WIFI_SSID_LENGTH = 32 + 1
MAX_WIFI_PASSWORD_LENGTH = 64 + 1
MAX_HOSTNAME_LENGTH = 255 + 1
MAX_FINGERPRINT_SIZE = 20
MAX_FINGERPRINT_STRING_LENGTH = (MAX_FINGERPRINT_SIZE * 2) + 1

MAX_MQTT_CREDS_LENGTH = 32 + 1
MAX_MQTT_BASE_TOPIC_LENGTH = 48 + 1
MAX_MQTT_TOPIC_LENGTH = 128 + 1

MAX_FRIENDLY_NAME_LENGTH = 64 + 1
MAX_DEVICE_ID_LENGTH = 32 + 1

MAX_BRAND_LENGTH = MAX_WIFI_SSID_LENGTH - 10 - 1
MAX_FIRMWARE_NAME_LENGTH = 32 + 1
MAX_FIRMWARE_VERSION_LENGTH = 16 + 1

MAX_NODE_ID_LENGTH = 24 + 1
MAX_NODE_TYPE_LENGTH = 24 + 1
MAX_NODE_PROPERTY_LENGTH = 24 + 1

MAX_IP_STRING_LENGTH = 16 + 1

# Responses of the configuration API.
CONFIG_APPLICATION_JSON = "application/json"
CONFIG_JSON_SUCCESS = '{"success":true}'
CONFIG_JSON_FAILURE_BEGINNING = '{"success":false,"error":"'
CONFIG_JSON_FAILURE_END = '"}'