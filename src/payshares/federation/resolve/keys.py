"""Account ID (ed25519 public key StrKey) format validation."""

import base64
import binascii
from typing import Optional

ACCOUNT_ID_VERSION_BYTE = 6 << 3  # "G"
ACCOUNT_ID_LENGTH = 56
ED25519_KEY_LENGTH = 32


def crc16_xmodem(data: bytes) -> int:
    crc = 0x0000
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def decode_account_id(value: str) -> Optional[bytes]:
    """Decode an account ID into its 32 raw key bytes.

    Args:
        value: StrKey encoded ed25519 public key (ex. ``GB5X...``)

    Returns:
        Raw public key bytes, None if the value is not a valid account ID
    """
    if not isinstance(value, str) or len(value) != ACCOUNT_ID_LENGTH:
        return None

    try:
        decoded = base64.b32decode(value.encode("ascii"), casefold=False)
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return None

    if len(decoded) != 1 + ED25519_KEY_LENGTH + 2:
        return None

    version, payload, checksum = decoded[0], decoded[1:-2], decoded[-2:]
    if version != ACCOUNT_ID_VERSION_BYTE:
        return None

    if crc16_xmodem(decoded[:-2]) != int.from_bytes(checksum, "little"):
        return None

    return payload


def is_valid_account_id(value: str) -> bool:
    return decode_account_id(value) is not None
