"""Tests for chat session-key exchange."""

import pytest

from chatcrypt.aes import decrypt_aes, encrypt_aes
from chatcrypt.errors import (
    ChatCryptError,
    InvalidChunkError,
    InvalidHexError,
    InvalidKeyLengthError,
    KeyGenerationError,
)
from chatcrypt.randomness import RandomSource
from chatcrypt.rsa import RSAKeyPair, generate_rsa_key_pair
from chatcrypt.session import (
    chunks_from_hex,
    chunks_to_hex,
    new_session_key,
    unwrap_session_key,
    wrap_for_participants,
    wrap_session_key,
)


def _generate(bits: int) -> RSAKeyPair:
    while True:
        try:
            return generate_rsa_key_pair(bits)
        except KeyGenerationError:
            continue


@pytest.fixture(scope="module")
def alice() -> RSAKeyPair:
    return _generate(512)


@pytest.fixture(scope="module")
def bob() -> RSAKeyPair:
    return _generate(512)


class TestSessionKey:
    """Tests for session key creation and wrapping."""

    def test_new_session_key(self) -> None:
        rng = RandomSource()
        key = new_session_key(rng=rng)
        assert len(key) == 16
        assert key.isalnum()
        assert rng.draws_breakdown["symmetric_keys"] == 16

    def test_wrap_unwrap(self, alice: RSAKeyPair) -> None:
        key = new_session_key()
        chunks = wrap_session_key(key, alice.public_key)
        assert len(chunks) == 1
        assert unwrap_session_key(chunks, alice.private_key) == key

    def test_string_keys(self, alice: RSAKeyPair) -> None:
        key = new_session_key()
        chunks = wrap_session_key(key, alice.public_key.to_string())
        assert unwrap_session_key(chunks, alice.private_key.to_string()) == key

    def test_wrap_rejects_bad_session_key(self, alice: RSAKeyPair) -> None:
        with pytest.raises(InvalidKeyLengthError):
            wrap_session_key("short", alice.public_key)

    def test_unwrap_with_wrong_key_fails(self, alice: RSAKeyPair, bob: RSAKeyPair) -> None:
        chunks = wrap_session_key(new_session_key(), alice.public_key)
        with pytest.raises(ChatCryptError):
            unwrap_session_key(chunks, bob.private_key)


class TestParticipants:
    """Tests for wrapping a key for both sides of a chat."""

    def test_both_sides_recover_key(self, alice: RSAKeyPair, bob: RSAKeyPair) -> None:
        key = new_session_key()
        wrapped = wrap_for_participants(key, alice.public_key, bob.public_key)

        assert unwrap_session_key(wrapped.sender_chunks, alice.private_key) == key
        assert unwrap_session_key(wrapped.receiver_chunks, bob.private_key) == key
        assert wrapped.sender_chunks != wrapped.receiver_chunks

    def test_end_to_end_message(self, alice: RSAKeyPair, bob: RSAKeyPair) -> None:
        key = new_session_key()
        wrapped = wrap_for_participants(key, alice.public_key, bob.public_key)
        ciphertext = encrypt_aes("see you at noon", key)

        # Bob only has his private key and the stored hex copy
        stored = wrapped.to_dict()["receiver"]
        bob_key = unwrap_session_key(chunks_from_hex(stored), bob.private_key)
        assert decrypt_aes(ciphertext, bob_key) == "see you at noon"


class TestChunkTransport:
    """Tests for hex transport of RSA chunks."""

    def test_roundtrip(self) -> None:
        chunks = [b"\x01\x02", b"\xff", b"abc"]
        assert chunks_to_hex(chunks) == ["0102", "ff", "616263"]
        assert chunks_from_hex(chunks_to_hex(chunks)) == chunks

    def test_empty_chunk_rejected(self) -> None:
        with pytest.raises(InvalidChunkError):
            chunks_from_hex(["0102", ""])

    def test_bad_hex_rejected(self) -> None:
        with pytest.raises(InvalidHexError):
            chunks_from_hex(["xyz"])
