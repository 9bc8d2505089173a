"""
Session-key exchange for chats.

A chat session uses one random AES key. The key is wrapped (RSA-encrypted)
once for each participant's public key so both sides can recover it with
their own private key. Storing and routing the wrapped copies is the
caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass

from .aes import generate_aes_key
from .codec import bytes_to_hex, hex_to_bytes
from .config import DEFAULT_CONFIG, CryptoConfig
from .errors import InvalidChunkError, InvalidKeyLengthError
from .randomness import RandomSource
from .rsa import (
    RSAPrivateKey,
    RSAPublicKey,
    decrypt_with_private_key,
    encrypt_with_public_key,
)


@dataclass(frozen=True)
class WrappedSessionKey:
    """Session key wrapped for both chat participants."""

    sender_chunks: list[bytes]
    receiver_chunks: list[bytes]

    def to_dict(self) -> dict[str, list[str]]:
        """Hex form for storage or transport."""
        return {
            "sender": chunks_to_hex(self.sender_chunks),
            "receiver": chunks_to_hex(self.receiver_chunks),
        }


def new_session_key(
    config: CryptoConfig | None = None,
    rng: RandomSource | None = None,
) -> str:
    """Fresh random AES session key ([A-Za-z0-9], 16 characters)."""
    config = config or DEFAULT_CONFIG
    return generate_aes_key(config.session_key_length, rng)


def wrap_session_key(
    session_key: str,
    public_key: RSAPublicKey | str,
    config: CryptoConfig | None = None,
) -> list[bytes]:
    """Encrypt a session key with one participant's public key."""
    config = config or DEFAULT_CONFIG
    _check_session_key(session_key, config)
    return encrypt_with_public_key(session_key, public_key, config)


def unwrap_session_key(
    chunks: list[bytes],
    private_key: RSAPrivateKey | str,
    config: CryptoConfig | None = None,
) -> str:
    """
    Recover a session key with the holder's private key.

    Raises:
        InvalidKeyLengthError: The recovered key is not a valid AES key,
            which usually means the wrong private key was used
    """
    config = config or DEFAULT_CONFIG
    session_key = decrypt_with_private_key(chunks, private_key)
    _check_session_key(session_key, config)
    return session_key


def wrap_for_participants(
    session_key: str,
    sender_public_key: RSAPublicKey | str,
    receiver_public_key: RSAPublicKey | str,
    config: CryptoConfig | None = None,
) -> WrappedSessionKey:
    """Wrap one session key for both the sender and the receiver."""
    return WrappedSessionKey(
        sender_chunks=wrap_session_key(session_key, sender_public_key, config),
        receiver_chunks=wrap_session_key(session_key, receiver_public_key, config),
    )


def chunks_to_hex(chunks: list[bytes]) -> list[str]:
    """Encode RSA ciphertext chunks as hex strings, order preserved."""
    return [bytes_to_hex(chunk) for chunk in chunks]


def chunks_from_hex(hex_chunks: list[str]) -> list[bytes]:
    """Decode hex strings back into RSA ciphertext chunks."""
    chunks = [hex_to_bytes(h) for h in hex_chunks]
    for index, chunk in enumerate(chunks):
        if not chunk:
            raise InvalidChunkError(f"Invalid ciphertext chunk {index}: empty buffer")
    return chunks


def _check_session_key(session_key: str, config: CryptoConfig) -> None:
    if not isinstance(session_key, str):
        raise TypeError(f"Session key must be a string, got {type(session_key).__name__}")
    length = len(session_key.encode("utf-8"))
    if length != config.session_key_length:
        raise InvalidKeyLengthError(length, config.session_key_length)
