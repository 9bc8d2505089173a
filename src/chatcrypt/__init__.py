"""AES-128 and textbook RSA engines for end-to-end encrypted chat."""

__version__ = "0.1.0"

from .aes import decrypt_aes, encrypt_aes, generate_aes_key, generate_hash
from .aes_core import aes128_decrypt_block, aes128_encrypt_block, key_expansion
from .config import DEFAULT_CONFIG, CryptoConfig
from .errors import (
    ChatCryptError,
    DecodingError,
    InputValidationError,
    KeyGenerationError,
    PaddingError,
)
from .randomness import RandomSource
from .rsa import (
    RSAKeyPair,
    RSAPrivateKey,
    RSAPublicKey,
    decrypt_rsa,
    encrypt_rsa,
    generate_rsa_key_pair,
    is_probable_prime,
)
from .session import unwrap_session_key, wrap_for_participants, wrap_session_key

__all__ = [
    "encrypt_aes",
    "decrypt_aes",
    "generate_aes_key",
    "generate_hash",
    "aes128_encrypt_block",
    "aes128_decrypt_block",
    "key_expansion",
    "CryptoConfig",
    "DEFAULT_CONFIG",
    "ChatCryptError",
    "InputValidationError",
    "PaddingError",
    "DecodingError",
    "KeyGenerationError",
    "RandomSource",
    "RSAKeyPair",
    "RSAPublicKey",
    "RSAPrivateKey",
    "generate_rsa_key_pair",
    "is_probable_prime",
    "encrypt_rsa",
    "decrypt_rsa",
    "wrap_session_key",
    "unwrap_session_key",
    "wrap_for_participants",
]
