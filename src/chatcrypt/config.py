"""Configuration for the chatcrypt engines."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CryptoConfig:
    """Parameters for RSA, session keys and random identifiers.

    AES-128 sizes are fixed and live in aes_core as KEY_SIZE and BLOCK_SIZE.
    """

    # RSA key generation
    rsa_key_bits: int = 2048
    rsa_public_exponent: int = 65537
    miller_rabin_rounds: int = 128

    # RSA message chunking (fixed margin below 256 bytes for a 2048-bit modulus)
    rsa_chunk_size: int = 245
    rsa_max_chunks: int = 1000

    # Random identifiers
    session_key_length: int = 16
    hash_length: int = 32

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.rsa_key_bits < 64 or self.rsa_key_bits % 2:
            raise ValueError(f"rsa_key_bits must be even and >= 64, got {self.rsa_key_bits}")
        if self.rsa_public_exponent < 3 or self.rsa_public_exponent % 2 == 0:
            raise ValueError(
                f"rsa_public_exponent must be odd and >= 3, got {self.rsa_public_exponent}"
            )
        if self.miller_rabin_rounds < 1:
            raise ValueError(
                f"miller_rabin_rounds must be positive, got {self.miller_rabin_rounds}"
            )
        if self.rsa_chunk_size < 1:
            raise ValueError(f"rsa_chunk_size must be positive, got {self.rsa_chunk_size}")
        if self.rsa_max_chunks < 1:
            raise ValueError(f"rsa_max_chunks must be positive, got {self.rsa_max_chunks}")
        if self.session_key_length != 16:
            raise ValueError(
                f"session_key_length must be 16 (AES-128), got {self.session_key_length}"
            )
        if self.hash_length < 1:
            raise ValueError(f"hash_length must be positive, got {self.hash_length}")

    @property
    def max_plaintext_bytes(self) -> int:
        """Largest UTF-8 plaintext accepted by RSA encryption."""
        return self.rsa_chunk_size * self.rsa_max_chunks


DEFAULT_CONFIG = CryptoConfig()
