"""Small parsing, formatting and validation helpers."""

from __future__ import annotations

import string
from collections.abc import Iterable
from ipaddress import IPv4Address

from .constants import MAX_IP_STRING_LENGTH, MAX_MAC_LENGTH

_UINT32_MAX = 0xFFFFFFFF
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_HEX_DIGITS = frozenset(string.hexdigits)


class HomieAbort(RuntimeError):
    """Raised when the framework hits an unrecoverable usage error."""


def abort(message: str) -> None:
    """Stop with an unrecoverable error carrying ``message``."""
    raise HomieAbort(message)


def rssi_to_percentage(rssi: int) -> int:
    """Map a Wi-Fi RSSI in dBm to a signal quality of 0 to 100."""
    if rssi <= -100:
        return 0
    if rssi >= -50:
        return 100
    return 2 * (rssi + 100)


def _digit_value(char: str) -> int:
    if len(char) != 1:
        return -1
    return _DIGITS.find(char.lower())


def _parse_unsigned(text: str, base: int) -> int:
    """Parse a leading unsigned number the way strtoul does; 0 when none."""
    rest = text.lstrip(" \t\n\r\f\v")
    negative = False
    if rest.startswith(("+", "-")):
        negative = rest[0] == "-"
        rest = rest[1:]
    if base in (0, 16) and rest[:2].lower() == "0x" and _digit_value(rest[2:3]) in range(16):
        rest = rest[2:]
        base = 16
    elif base == 0:
        base = 8 if rest.startswith("0") else 10

    value = 0
    for char in rest:
        digit = _digit_value(char)
        if not 0 <= digit < base:
            break
        value = value * base + digit
    if value > _UINT32_MAX:
        return _UINT32_MAX
    return (-value) & _UINT32_MAX if negative else value


def string_to_bytes(text: str, sep: str, max_bytes: int, base: int) -> bytes:
    """Split ``text`` on ``sep`` and parse up to ``max_bytes`` numbers in ``base``."""
    values = []
    rest = text
    for _ in range(max_bytes):
        values.append(_parse_unsigned(rest, base) & 0xFF)
        position = rest.find(sep)
        if position < 0:
            break
        rest = rest[position + len(sep):]
    return bytes(values)


def validate_ip(ip: str) -> bool:
    """Return whether ``ip`` is a dotted-quad IPv4 address."""
    parts = ip.split(".")
    if len(parts) != 4:
        return False
    return all(part.isascii() and part.isdigit() and int(part) <= 255 for part in parts)


def validate_mac_address(mac: str) -> bool:
    """Return whether ``mac`` is six hex pairs separated by ':' or '-'."""
    hex_count = 0
    separators = 0
    for char in mac:
        if char in _HEX_DIGITS:
            hex_count += 1
        elif char in ":-":
            if hex_count == 0 or hex_count // 2 - 1 != separators:
                break
            separators += 1
        else:
            separators = -1
    return hex_count == MAX_MAC_LENGTH * 2 and separators == 5


def validate_md5(md5: str) -> bool:
    """Return whether ``md5`` is 32 hexadecimal characters."""
    return len(md5) == 32 and all(char in _HEX_DIGITS for char in md5)


def ip_to_string(ip: IPv4Address | Iterable[int]) -> str:
    """Format four address octets as dotted-quad text."""
    octets = ip.packed if isinstance(ip, IPv4Address) else bytes(ip)
    if len(octets) != 4:
        raise ValueError("an IPv4 address has exactly four octets")
    return ".".join(str(octet) for octet in octets)[: MAX_IP_STRING_LENGTH - 1]


def hex_string_to_bytes(hex_str: str, size: int) -> bytes:
    """Decode ``size`` bytes from pairs of hex digits; bad pairs decode to 0."""
    return bytes(
        _parse_unsigned(hex_str[index * 2: index * 2 + 2], 16) & 0xFF
        for index in range(size)
    )


def bytes_to_hex_string(data: bytes) -> str:
    """Encode ``data`` as lower-case hexadecimal text."""
    return bytes(data).hex()