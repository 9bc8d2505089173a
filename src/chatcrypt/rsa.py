"""
Textbook RSA: probabilistic prime generation, key pairs and chunked
encryption of UTF-8 text.

There is no OAEP/PKCS#1 padding; each chunk is raised to the key exponent
directly. Primality comes from Miller-Rabin with 128 random witnesses, so a
composite could in principle be accepted. At that round count the chance
is below 4^-128 and is accepted rather than treated as a bug.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .codec import bytes_to_int, bytes_to_string, int_to_bytes, string_to_bytes
from .config import DEFAULT_CONFIG, CryptoConfig
from .errors import (
    EmptyInputError,
    InputValidationError,
    InvalidChunkError,
    InvalidKeyFormatError,
    KeyGenerationError,
    MessageTooLongError,
)
from .randomness import RandomSource

_KEY_STRING_RE = re.compile(r"([0-9a-fA-F]+):([0-9a-fA-F]+)")


# ------------------------------------------------------------------
# Keys
# ------------------------------------------------------------------

def _parse_key_string(value: str) -> tuple[int, int]:
    if not isinstance(value, str):
        raise InvalidKeyFormatError(f"Key must be a string, got {type(value).__name__}")
    match = _KEY_STRING_RE.fullmatch(value.strip())
    if match is None:
        raise InvalidKeyFormatError("Key must have the form '<hex>:<hex>'")
    return int(match.group(1), 16), int(match.group(2), 16)


@dataclass(frozen=True)
class RSAPublicKey:
    """Public half: modulus and public exponent."""

    n: int
    e: int = 65537

    def to_string(self) -> str:
        """Colon-joined lowercase hex, "<n>:<e>"."""
        return f"{self.n:x}:{self.e:x}"

    @classmethod
    def from_string(cls, value: str) -> RSAPublicKey:
        n, e = _parse_key_string(value)
        return cls(n=n, e=e)


@dataclass(frozen=True)
class RSAPrivateKey:
    """Private half: modulus and private exponent."""

    n: int
    d: int = field(repr=False)

    def to_string(self) -> str:
        """Colon-joined lowercase hex, "<n>:<d>"."""
        return f"{self.n:x}:{self.d:x}"

    @classmethod
    def from_string(cls, value: str) -> RSAPrivateKey:
        n, d = _parse_key_string(value)
        return cls(n=n, d=d)


@dataclass(frozen=True)
class RSAKeyPair:
    """A generated key pair. The primes are kept for verification only."""

    public_key: RSAPublicKey
    private_key: RSAPrivateKey
    p: int = field(repr=False, default=0)
    q: int = field(repr=False, default=0)

    @property
    def n(self) -> int:
        return self.public_key.n

    @property
    def e(self) -> int:
        return self.public_key.e

    @property
    def d(self) -> int:
        return self.private_key.d

    @property
    def bits(self) -> int:
        """Bit length of the modulus."""
        return self.n.bit_length()


# ------------------------------------------------------------------
# Number theory
# ------------------------------------------------------------------

def mod_exp(base: int, exp: int, mod: int) -> int:
    """
    Modular exponentiation by square-and-multiply.

    Args:
        base: Base, any integer
        exp: Non-negative exponent
        mod: Positive modulus

    Returns:
        base**exp % mod
    """
    if mod <= 0:
        raise ValueError(f"Modulus must be positive, got {mod}")
    if exp < 0:
        raise ValueError(f"Exponent must be non-negative, got {exp}")

    result = 1 % mod
    base %= mod
    while exp > 0:
        if exp & 1:
            result = (result * base) % mod
        exp >>= 1
        base = (base * base) % mod
    return result


def gcd(a: int, b: int) -> int:
    """Greatest common divisor (Euclid)."""
    while b != 0:
        a, b = b, a % b
    return abs(a)


def mod_inverse(a: int, m: int) -> int:
    """
    Inverse of a modulo m via the extended Euclidean algorithm.

    Returns:
        x in [0, m) with a*x = 1 (mod m)

    Raises:
        ValueError: If a and m are not coprime
    """
    if m <= 1:
        raise ValueError(f"Modulus must be > 1, got {m}")

    old_r, r = a % m, m
    old_x, x = 1, 0
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_x, x = x, old_x - q * x

    if old_r != 1:
        raise ValueError(f"{a} has no inverse modulo {m}")
    return old_x % m


def is_probable_prime(
    n: int,
    rounds: int = 128,
    rng: RandomSource | None = None,
) -> bool:
    """
    Miller-Rabin probabilistic primality test.

    Writes n - 1 = 2^s * d with d odd and checks `rounds` random witnesses
    drawn from [2, n - 2]. Returns False as soon as one witness proves n
    composite.

    Args:
        n: Candidate
        rounds: Number of independent witnesses
        rng: Random source for witnesses

    Returns:
        True if n is probably prime
    """
    if n in (2, 3):
        return True
    if n < 2 or n % 2 == 0:
        return False

    rng = rng or RandomSource()

    s = 0
    d = n - 1
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(rounds):
        a = rng.randint(2, n - 2, category="witnesses")
        x = mod_exp(a, d, n)
        if x == 1 or x == n - 1:
            continue

        for _ in range(s - 1):
            x = mod_exp(x, 2, n)
            if x == n - 1:
                break
        else:
            return False

    return True


def generate_large_prime(
    bits: int,
    rng: RandomSource | None = None,
    rounds: int = 128,
) -> int:
    """
    Draw random odd `bits`-bit integers until one is a probable prime.

    The top bit is forced so the result has exactly `bits` bits.
    """
    if bits < 2:
        raise ValueError(f"Prime size must be at least 2 bits, got {bits}")

    rng = rng or RandomSource()
    top = 1 << (bits - 1)
    while True:
        candidate = rng.get_bits(bits, category="prime_candidates") | top | 1
        if is_probable_prime(candidate, rounds, rng):
            return candidate


def generate_rsa_key_pair(
    bits: int | None = None,
    config: CryptoConfig | None = None,
    rng: RandomSource | None = None,
) -> RSAKeyPair:
    """
    Generate an RSA key pair.

    p and q are independent probable primes of bits/2 bits each. There is
    no retry when e shares a factor with phi(n); the caller generates again.

    Args:
        bits: Modulus size, defaults to config.rsa_key_bits (2048)
        config: Parameters, defaults to DEFAULT_CONFIG
        rng: Random source, shared by the prime searches

    Returns:
        RSAKeyPair

    Raises:
        KeyGenerationError: If gcd(e, phi(n)) != 1
    """
    config = config or DEFAULT_CONFIG
    bits = config.rsa_key_bits if bits is None else bits
    if bits < 16 or bits % 2:
        raise ValueError(f"Key size must be even and >= 16 bits, got {bits}")

    rng = rng or RandomSource()
    e = config.rsa_public_exponent
    rounds = config.miller_rabin_rounds

    p = generate_large_prime(bits // 2, rng, rounds)
    q = generate_large_prime(bits // 2, rng, rounds)
    n = p * q
    phi = (p - 1) * (q - 1)

    if gcd(e, phi) != 1:
        raise KeyGenerationError("e and phi(n) are not coprime, generate a new key pair")

    d = mod_inverse(e, phi)

    return RSAKeyPair(
        public_key=RSAPublicKey(n=n, e=e),
        private_key=RSAPrivateKey(n=n, d=d),
        p=p,
        q=q,
    )


# ------------------------------------------------------------------
# Chunked encryption
# ------------------------------------------------------------------

def split_chunks(data: bytes, chunk_size: int) -> list[bytes]:
    """
    Split UTF-8 bytes into chunks of at most chunk_size bytes.

    A cut never falls inside a multi-byte character, so every chunk decodes
    on its own.
    """
    chunks = []
    start = 0
    while start < len(data):
        end = min(start + chunk_size, len(data))
        if end < len(data):
            # back off over continuation bytes (10xxxxxx)
            cut = end
            while cut > start and (data[cut] & 0xC0) == 0x80:
                cut -= 1
            if cut > start:
                end = cut
        chunks.append(data[start:end])
        start = end
    return chunks


def encrypt_rsa(
    plaintext: str,
    n: int,
    e: int,
    config: CryptoConfig | None = None,
) -> list[bytes]:
    """
    Encrypt text with a public key, one RSA operation per chunk.

    Each chunk of at most 245 UTF-8 bytes is read as a big-endian integer m
    and becomes m^e mod n, serialized at minimal width.
    Only the byte length is limited. Cuts on character boundaries can
    yield a few more chunks than rsa_max_chunks for multi-byte text.

    Raises:
        EmptyInputError: Plaintext is empty
        MessageTooLongError: More than 245,000 UTF-8 bytes
    """
    config = config or DEFAULT_CONFIG
    if not plaintext:
        raise EmptyInputError("Plaintext must not be empty")

    data = string_to_bytes(plaintext)
    if len(data) > config.max_plaintext_bytes:
        raise MessageTooLongError(len(data), config.max_plaintext_bytes)

    encrypted = []
    for chunk in split_chunks(data, config.rsa_chunk_size):
        m = bytes_to_int(chunk)
        if m >= n:
            raise InputValidationError(
                f"Chunk of {len(chunk)} bytes does not fit a {n.bit_length()}-bit modulus"
            )
        encrypted.append(int_to_bytes(mod_exp(m, e, n)))
    return encrypted


def decrypt_rsa(chunks: list[bytes], n: int, d: int) -> str:
    """
    Decrypt chunks produced by encrypt_rsa(), in order.

    Raises:
        InvalidChunkError: A chunk is empty or not bytes
        DecodingError: A decrypted chunk is not valid UTF-8
    """
    parts = []
    for index, chunk in enumerate(chunks):
        if not isinstance(chunk, (bytes, bytearray)):
            raise InvalidChunkError(
                f"Invalid ciphertext chunk {index}: expected bytes, got {type(chunk).__name__}"
            )
        if len(chunk) == 0:
            raise InvalidChunkError(f"Invalid ciphertext chunk {index}: empty buffer")
        m = mod_exp(bytes_to_int(chunk), d, n)
        parts.append(bytes_to_string(int_to_bytes(m)))
    return "".join(parts)


def encrypt_with_public_key(
    plaintext: str,
    public_key: RSAPublicKey | str,
    config: CryptoConfig | None = None,
) -> list[bytes]:
    """encrypt_rsa() taking a key object or its "<n>:<e>" string."""
    if isinstance(public_key, str):
        public_key = RSAPublicKey.from_string(public_key)
    return encrypt_rsa(plaintext, public_key.n, public_key.e, config)


def decrypt_with_private_key(
    chunks: list[bytes],
    private_key: RSAPrivateKey | str,
) -> str:
    """decrypt_rsa() taking a key object or its "<n>:<d>" string."""
    if isinstance(private_key, str):
        private_key = RSAPrivateKey.from_string(private_key)
    return decrypt_rsa(chunks, private_key.n, private_key.d)
