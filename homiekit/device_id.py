"""Device identifier derived from the network hardware address."""

from __future__ import annotations

import uuid

from .constants import MAX_MAC_LENGTH, MAX_MAC_STRING_LENGTH


def format_device_id(mac: bytes) -> str:
    """Format a six-byte hardware address as twelve lower-case hex digits."""
    octets = bytes(mac)
    if len(octets) != MAX_MAC_LENGTH:
        raise ValueError(f"a hardware address has exactly {MAX_MAC_LENGTH} bytes")
    return octets.hex()[: MAX_MAC_STRING_LENGTH - 1]


def generate_device_id() -> str:
    """Return the device identifier of this machine's hardware address."""
    return format_device_id(uuid.getnode().to_bytes(MAX_MAC_LENGTH, "big"))