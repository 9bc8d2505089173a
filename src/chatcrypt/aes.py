"""
AES-128 text encryption for chat payloads.

Messages are UTF-8 encoded, padded to a whole number of blocks and every
16-byte block is enciphered on its own with the same key schedule (no IV,
no chaining). Ciphertext travels as lowercase hex.
"""

from __future__ import annotations

import string

from .aes_core import BLOCK_SIZE, KEY_SIZE, decrypt_block, encrypt_block, key_expansion
from .codec import bytes_to_hex, bytes_to_string, hex_to_bytes, string_to_bytes
from .config import DEFAULT_CONFIG, CryptoConfig
from .errors import (
    EmptyInputError,
    InvalidCiphertextLengthError,
    InvalidKeyLengthError,
    PaddingError,
)
from .randomness import RandomSource

KEY_ALPHABET = string.ascii_letters + string.digits


def _key_bytes(key: str | bytes) -> bytes:
    """Return the key as bytes, rejecting anything but 16 bytes."""
    if isinstance(key, str):
        key = string_to_bytes(key)
    elif isinstance(key, (bytes, bytearray)):
        key = bytes(key)
    else:
        raise TypeError(f"Key must be str or bytes, got {type(key).__name__}")
    if len(key) != KEY_SIZE:
        raise InvalidKeyLengthError(len(key), KEY_SIZE)
    return key


def pad(data: bytes) -> bytes:
    """
    Add PKCS#7 padding.

    Always appends 1..16 bytes; input that is already block-aligned gets a
    full extra block of 0x10.
    """
    pad_len = BLOCK_SIZE - (len(data) % BLOCK_SIZE)
    return bytes(data) + bytes([pad_len]) * pad_len


def unpad(data: bytes) -> bytes:
    """
    Remove PKCS#7 padding.

    Raises:
        PaddingError: If the pad length byte is 0 or > 16, or the padding
            bytes are inconsistent
    """
    if not data:
        raise PaddingError("Invalid padding: no data")
    pad_len = data[-1]
    if pad_len == 0 or pad_len > BLOCK_SIZE:
        raise PaddingError(f"Invalid padding length: {pad_len}", pad_value=pad_len)
    if pad_len > len(data):
        raise PaddingError(
            f"Invalid padding length: {pad_len} exceeds data length {len(data)}",
            pad_value=pad_len,
        )
    if any(b != pad_len for b in data[-pad_len:]):
        raise PaddingError("Invalid padding values", pad_value=pad_len)
    return data[:-pad_len]


def encrypt_aes(plaintext: str, key: str | bytes) -> str:
    """
    Encrypt text under a 16-byte key.

    Args:
        plaintext: Non-empty text to encrypt
        key: 16-character ASCII string or 16 bytes

    Returns:
        Lowercase hex ciphertext, a multiple of 32 characters
    """
    key_bytes = _key_bytes(key)
    if not plaintext:
        raise EmptyInputError("Plaintext must not be empty")

    data = pad(string_to_bytes(plaintext))
    round_keys = key_expansion(key_bytes)

    blocks = [
        encrypt_block(data[i:i + BLOCK_SIZE], round_keys)
        for i in range(0, len(data), BLOCK_SIZE)
    ]
    return bytes_to_hex(b"".join(blocks))


def decrypt_aes(ciphertext: str, key: str | bytes) -> str:
    """
    Decrypt hex ciphertext produced by encrypt_aes().

    Raises:
        InvalidKeyLengthError: Key is not 16 bytes
        InvalidHexError: Ciphertext is not valid hex
        InvalidCiphertextLengthError: Not a whole number of blocks
        PaddingError: Padding is corrupted (usually a wrong key)
        DecodingError: Recovered bytes are not UTF-8
    """
    key_bytes = _key_bytes(key)
    if not ciphertext:
        raise EmptyInputError("Ciphertext must not be empty")

    data = hex_to_bytes(ciphertext)
    if len(data) % BLOCK_SIZE != 0:
        raise InvalidCiphertextLengthError(len(data), BLOCK_SIZE)

    round_keys = key_expansion(key_bytes)
    blocks = [
        decrypt_block(data[i:i + BLOCK_SIZE], round_keys)
        for i in range(0, len(data), BLOCK_SIZE)
    ]
    return bytes_to_string(unpad(b"".join(blocks)))


def generate_aes_key(length: int = KEY_SIZE, rng: RandomSource | None = None) -> str:
    """Random alphanumeric key, [A-Za-z0-9], drawn from a secure source."""
    rng = rng or RandomSource()
    return "".join(rng.choice(KEY_ALPHABET, category="symmetric_keys") for _ in range(length))


def generate_hash(
    length: int | None = None,
    rng: RandomSource | None = None,
    config: CryptoConfig | None = None,
) -> str:
    """Random alphanumeric identifier tagging a generated key pair.

    length defaults to config.hash_length (32).
    """
    config = config or DEFAULT_CONFIG
    length = config.hash_length if length is None else length
    rng = rng or RandomSource()
    return "".join(rng.choice(KEY_ALPHABET, category="other") for _ in range(length))
