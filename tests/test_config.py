"""Tests for configuration and the random source."""

import pytest

from chatcrypt.config import DEFAULT_CONFIG, CryptoConfig
from chatcrypt.randomness import RandomSource


class TestCryptoConfig:
    """Tests for CryptoConfig."""

    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.session_key_length == 16
        assert DEFAULT_CONFIG.hash_length == 32
        assert DEFAULT_CONFIG.rsa_key_bits == 2048
        assert DEFAULT_CONFIG.rsa_public_exponent == 65537
        assert DEFAULT_CONFIG.miller_rabin_rounds == 128
        assert DEFAULT_CONFIG.rsa_chunk_size == 245
        assert DEFAULT_CONFIG.rsa_max_chunks == 1000

    def test_max_plaintext_bytes(self) -> None:
        assert DEFAULT_CONFIG.max_plaintext_bytes == 245_000
        assert CryptoConfig(rsa_chunk_size=10, rsa_max_chunks=3).max_plaintext_bytes == 30

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"rsa_key_bits": 1023}, "rsa_key_bits"),
            ({"rsa_key_bits": 32}, "rsa_key_bits"),
            ({"rsa_public_exponent": 4}, "rsa_public_exponent"),
            ({"rsa_public_exponent": 1}, "rsa_public_exponent"),
            ({"miller_rabin_rounds": 0}, "miller_rabin_rounds"),
            ({"rsa_chunk_size": 0}, "rsa_chunk_size"),
            ({"rsa_max_chunks": 0}, "rsa_max_chunks"),
            ({"session_key_length": 24}, "session_key_length"),
            ({"hash_length": 0}, "hash_length"),
        ],
    )
    def test_invalid(self, kwargs: dict, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            CryptoConfig(**kwargs)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.rsa_key_bits = 1024  # type: ignore[misc]


class TestRandomSource:
    """Tests for the accounting random source."""

    def test_bytes_and_bits(self) -> None:
        rng = RandomSource()
        assert len(rng.get_bytes(16, "symmetric_keys")) == 16
        assert rng.get_bits(8, "witnesses") < 256
        assert rng.bits_breakdown["symmetric_keys"] == 128
        assert rng.bits_breakdown["witnesses"] == 8
        assert rng.total_bits == 136

    def test_unknown_category_goes_to_other(self) -> None:
        rng = RandomSource()
        rng.get_bytes(2, "nonsense")
        assert rng.bits_breakdown["other"] == 16

    def test_randint_bounds(self) -> None:
        rng = RandomSource()
        values = {rng.randint(2, 4) for _ in range(200)}
        assert values <= {2, 3, 4}
        assert rng.draws_breakdown["other"] == 200

    def test_choice(self) -> None:
        rng = RandomSource()
        assert rng.choice("abc") in "abc"
        with pytest.raises(ValueError):
            rng.choice("")

    def test_invalid_ranges(self) -> None:
        rng = RandomSource()
        with pytest.raises(ValueError):
            rng.randbelow(0)
        with pytest.raises(ValueError):
            rng.randint(5, 4)
        with pytest.raises(ValueError):
            rng.get_bits(0)

    def test_reset(self) -> None:
        rng = RandomSource()
        rng.get_bytes(4)
        rng.reset()
        assert rng.total_bits == 0
        assert rng.get_summary()["draws_breakdown"]["other"] == 0
