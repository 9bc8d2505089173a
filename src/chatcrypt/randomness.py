"""Secure random source with usage accounting."""

from __future__ import annotations

import secrets
from typing import Any, Sequence

CATEGORIES = ("prime_candidates", "witnesses", "symmetric_keys", "other")


class RandomSource:
    """Cryptographically secure random source that tracks usage.

    Every draw goes through the `secrets` module. Bits are counted per
    category so callers can report how much randomness key generation
    consumed (e.g. how many prime candidates were tried).
    """

    def __init__(self) -> None:
        self._bits_used: dict[str, int] = {}
        self._draws: dict[str, int] = {}
        self.reset()

    def reset(self) -> None:
        """Reset usage counters."""
        self._bits_used = {k: 0 for k in CATEGORIES}
        self._draws = {k: 0 for k in CATEGORIES}

    def _account(self, category: str, bits: int) -> None:
        if category not in self._bits_used:
            category = "other"
        self._bits_used[category] += bits
        self._draws[category] += 1

    @property
    def total_bits(self) -> int:
        """Total random bits used."""
        return sum(self._bits_used.values())

    @property
    def bits_breakdown(self) -> dict[str, int]:
        """Get bits breakdown by category."""
        return self._bits_used.copy()

    @property
    def draws_breakdown(self) -> dict[str, int]:
        """Get number of draws by category."""
        return self._draws.copy()

    def get_bytes(self, count: int, category: str = "other") -> bytes:
        """Get `count` random bytes."""
        self._account(category, count * 8)
        return secrets.token_bytes(count)

    def get_bits(self, count: int, category: str = "other") -> int:
        """Get a random integer with `count` bits (top bit not forced)."""
        if count <= 0:
            raise ValueError(f"Bit count must be positive, got {count}")
        self._account(category, count)
        return secrets.randbits(count)

    def randbelow(self, upper: int, category: str = "other") -> int:
        """Uniform integer in [0, upper)."""
        if upper <= 0:
            raise ValueError(f"Upper bound must be positive, got {upper}")
        self._account(category, upper.bit_length())
        return secrets.randbelow(upper)

    def randint(self, low: int, high: int, category: str = "other") -> int:
        """Uniform integer in [low, high], both inclusive."""
        if high < low:
            raise ValueError(f"Empty range [{low}, {high}]")
        return low + self.randbelow(high - low + 1, category)

    def choice(self, seq: Sequence[Any], category: str = "other") -> Any:
        """Uniformly chosen element of a non-empty sequence."""
        if not seq:
            raise ValueError("Cannot choose from an empty sequence")
        return seq[self.randbelow(len(seq), category)]

    def get_summary(self) -> dict[str, Any]:
        """Get summary of randomness usage."""
        return {
            "total_bits": self.total_bits,
            "bits_breakdown": self.bits_breakdown,
            "draws_breakdown": self.draws_breakdown,
        }
