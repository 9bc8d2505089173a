"""Tests for AES-128 text encryption, padding and key generation."""

import random
import string

import pytest

from chatcrypt.aes import (
    decrypt_aes,
    encrypt_aes,
    generate_aes_key,
    generate_hash,
    pad,
    unpad,
)
from chatcrypt.aes_core import aes128_encrypt_block
from chatcrypt.codec import bytes_to_hex
from chatcrypt.config import CryptoConfig
from chatcrypt.errors import (
    ChatCryptError,
    DecodingError,
    EmptyInputError,
    InvalidCiphertextLengthError,
    InvalidHexError,
    InvalidKeyLengthError,
    PaddingError,
)
from chatcrypt.randomness import RandomSource
from chatcrypt.reference import golden_encrypt

KEY = "0123456789abcdef"


def _encrypt_raw_block(block: bytes, key: str = KEY) -> str:
    """Encrypt one block with no padding, as hex."""
    return bytes_to_hex(aes128_encrypt_block(key.encode(), block))


class TestPadding:
    """Tests for PKCS#7 padding."""

    @pytest.mark.parametrize("length", range(0, 33))
    def test_pad_length(self, length: int) -> None:
        padded = pad(bytes(length))
        pad_len = 16 - (length % 16)
        assert len(padded) == length + pad_len
        assert len(padded) % 16 == 0
        assert padded[-pad_len:] == bytes([pad_len]) * pad_len

    def test_aligned_input_gets_full_block(self) -> None:
        padded = pad(b"A" * 16)
        assert len(padded) == 32
        assert padded[16:] == b"\x10" * 16

    def test_unpad(self) -> None:
        assert unpad(b"hello" + b"\x0b" * 11) == b"hello"
        assert unpad(b"\x10" * 16) == b""

    def test_zero_pad_byte(self) -> None:
        with pytest.raises(PaddingError, match="length") as exc_info:
            unpad(bytes(16))
        assert exc_info.value.pad_value == 0

    def test_pad_byte_above_block_size(self) -> None:
        with pytest.raises(PaddingError) as exc_info:
            unpad(bytes(15) + b"\x11")
        assert exc_info.value.pad_value == 17

    def test_inconsistent_pad_bytes(self) -> None:
        with pytest.raises(PaddingError, match="values"):
            unpad(b"A" * 12 + b"\x04\x04\x05\x04")


class TestEncryptDecrypt:
    """Tests for encrypt_aes / decrypt_aes."""

    def test_roundtrip(self) -> None:
        plaintext = "Hello, World! This is a test of AES encryption."
        ciphertext = encrypt_aes(plaintext, KEY)
        assert decrypt_aes(ciphertext, KEY) == plaintext

    def test_roundtrip_unicode(self) -> None:
        plaintext = "héllo wörld, 你好 🔐"
        assert decrypt_aes(encrypt_aes(plaintext, KEY), KEY) == plaintext

    @pytest.mark.parametrize("seed", range(10))
    def test_roundtrip_random(self, seed: int) -> None:
        rng = random.Random(seed)
        key = "".join(rng.choice(string.ascii_letters) for _ in range(16))
        plaintext = "".join(rng.choice(string.printable) for _ in range(rng.randint(1, 100)))
        assert decrypt_aes(encrypt_aes(plaintext, key), key) == plaintext

    def test_bytes_key(self) -> None:
        key = bytes(range(16))
        assert decrypt_aes(encrypt_aes("payload", key), key) == "payload"

    def test_ciphertext_format(self) -> None:
        ciphertext = encrypt_aes("short", KEY)
        assert len(ciphertext) == 32
        assert ciphertext == ciphertext.lower()
        assert all(c in "0123456789abcdef" for c in ciphertext)

    def test_aligned_plaintext_adds_block(self) -> None:
        assert len(encrypt_aes("a" * 16, KEY)) == 64
        assert len(encrypt_aes("a" * 15, KEY)) == 32

    def test_blocks_are_independent(self) -> None:
        # No chaining: equal plaintext blocks give equal ciphertext blocks
        ciphertext = encrypt_aes("A" * 32, KEY)
        assert ciphertext[:32] == ciphertext[32:64]

    def test_matches_library_per_block(self) -> None:
        ciphertext = encrypt_aes("exactly sixteen!", KEY)
        expected = golden_encrypt(KEY.encode(), b"exactly sixteen!")
        assert ciphertext[:32] == expected.hex()
        assert ciphertext[32:] == golden_encrypt(KEY.encode(), b"\x10" * 16).hex()

    def test_uppercase_hex_accepted(self) -> None:
        ciphertext = encrypt_aes("case", KEY)
        assert decrypt_aes(ciphertext.upper(), KEY) == "case"

    def test_wrong_key_never_returns_plaintext(self) -> None:
        ciphertext = encrypt_aes("secret message", KEY)
        for other in ("fedcba9876543210", "0123456789abcdeF", "A" * 16):
            try:
                assert decrypt_aes(ciphertext, other) != "secret message"
            except ChatCryptError:
                pass


class TestErrors:
    """Tests for distinct failure modes."""

    @pytest.mark.parametrize("key", ["", "short", "0123456789abcdef0", "é" * 8 + "a"])
    def test_encrypt_wrong_key_length(self, key: str) -> None:
        with pytest.raises(InvalidKeyLengthError, match="Key must be 16 bytes"):
            encrypt_aes("text", key)

    def test_decrypt_wrong_key_length(self) -> None:
        with pytest.raises(InvalidKeyLengthError):
            decrypt_aes("00" * 16, "tooshort")

    def test_multibyte_key_counts_bytes(self) -> None:
        # 8 two-byte characters are 16 bytes
        key = "é" * 8
        assert decrypt_aes(encrypt_aes("ok", key), key) == "ok"

    def test_empty_plaintext(self) -> None:
        with pytest.raises(EmptyInputError):
            encrypt_aes("", KEY)

    def test_empty_ciphertext(self) -> None:
        with pytest.raises(EmptyInputError):
            decrypt_aes("", KEY)

    def test_invalid_hex(self) -> None:
        with pytest.raises(InvalidHexError):
            decrypt_aes("zz" * 16, KEY)

    def test_odd_hex_length(self) -> None:
        with pytest.raises(InvalidHexError):
            decrypt_aes("0" * 33, KEY)

    def test_not_block_multiple(self) -> None:
        with pytest.raises(InvalidCiphertextLengthError) as exc_info:
            decrypt_aes("00" * 15, KEY)
        assert exc_info.value.length == 15

    def test_validation_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            decrypt_aes("00" * 17, KEY)

    def test_decrypted_zero_pad_byte(self) -> None:
        with pytest.raises(PaddingError) as exc_info:
            decrypt_aes(_encrypt_raw_block(bytes(16)), KEY)
        assert exc_info.value.pad_value == 0

    def test_decrypted_pad_byte_too_large(self) -> None:
        with pytest.raises(PaddingError) as exc_info:
            decrypt_aes(_encrypt_raw_block(b"A" * 15 + b"\x11"), KEY)
        assert exc_info.value.pad_value == 17

    def test_decrypted_inconsistent_padding(self) -> None:
        with pytest.raises(PaddingError):
            decrypt_aes(_encrypt_raw_block(b"A" * 12 + b"\x03\x01\x03\x03"), KEY)

    def test_padding_error_is_not_validation_error(self) -> None:
        with pytest.raises(PaddingError) as exc_info:
            decrypt_aes(_encrypt_raw_block(bytes(16)), KEY)
        assert not isinstance(exc_info.value, ValueError)

    def test_invalid_utf8_after_unpad(self) -> None:
        with pytest.raises(DecodingError):
            decrypt_aes(_encrypt_raw_block(b"\xff" + b"\x0f" * 15), KEY)

    def test_corrupted_last_block(self) -> None:
        ciphertext = encrypt_aes("some chat message", KEY)
        flipped = ciphertext[:-2] + f"{int(ciphertext[-2:], 16) ^ 0x01:02x}"
        try:
            result = decrypt_aes(flipped, KEY)
        except ChatCryptError:
            return
        assert result != "some chat message"


class TestKeyGeneration:
    """Tests for random AES keys and identifiers."""

    def test_aes_key_alphabet_and_length(self) -> None:
        key = generate_aes_key()
        assert len(key) == 16
        assert all(c in string.ascii_letters + string.digits for c in key)

    def test_aes_keys_differ(self) -> None:
        assert len({generate_aes_key() for _ in range(20)}) == 20

    def test_generated_key_encrypts(self) -> None:
        key = generate_aes_key()
        assert decrypt_aes(encrypt_aes("hi", key), key) == "hi"

    def test_key_draws_are_accounted(self) -> None:
        rng = RandomSource()
        generate_aes_key(rng=rng)
        assert rng.draws_breakdown["symmetric_keys"] == 16

    def test_hash_length(self) -> None:
        value = generate_hash()
        assert len(value) == 32
        assert value.isalnum()

    def test_hash_length_from_config(self) -> None:
        assert len(generate_hash(config=CryptoConfig(hash_length=12))) == 12
        assert len(generate_hash(8, config=CryptoConfig(hash_length=12))) == 8
