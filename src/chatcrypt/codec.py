"""
Text, byte and hex conversions shared by the AES and RSA engines.

Hex is the wire representation: lowercase, two digits per byte, no
separators.
"""

import re

from .errors import DecodingError, InvalidHexError

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def string_to_bytes(text: str) -> bytes:
    """
    Encode text as UTF-8.

    Args:
        text: Input string

    Returns:
        UTF-8 bytes
    """
    if not isinstance(text, str):
        raise TypeError(f"Input must be a string, got {type(text).__name__}")
    return text.encode("utf-8")


def bytes_to_string(data: bytes) -> str:
    """
    Decode UTF-8 bytes to text.

    Raises:
        DecodingError: If data is not valid UTF-8
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Input must be bytes, got {type(data).__name__}")
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingError(f"Invalid UTF-8 data: {e}") from e


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hex string.

    Args:
        data: bytes

    Returns:
        Lowercase hex string
    """
    return bytes(data).hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string, upper or lower case

    Returns:
        bytes

    Raises:
        InvalidHexError: On non-hex characters or odd length
    """
    if not isinstance(hex_str, str):
        raise TypeError(f"Input must be a string, got {type(hex_str).__name__}")
    if not _HEX_RE.fullmatch(hex_str):
        raise InvalidHexError("Invalid hex characters")
    if len(hex_str) % 2 != 0:
        raise InvalidHexError(
            f"Hex string must have an even number of characters, got {len(hex_str)}"
        )
    return bytes.fromhex(hex_str)


def int_to_bytes(value: int) -> bytes:
    """Big-endian bytes of a non-negative integer at minimal width (0 -> b"\\x00")."""
    if value < 0:
        raise ValueError(f"Value must be non-negative, got {value}")
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def bytes_to_int(data: bytes) -> int:
    """Interpret bytes as a big-endian unsigned integer."""
    return int.from_bytes(data, "big")
