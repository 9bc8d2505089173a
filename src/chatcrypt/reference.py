"""PyCryptodome single-block AES-128, used to cross-check aes_core."""

from Crypto.Cipher import AES

from .aes_core import BLOCK_SIZE, KEY_SIZE


def _ecb(key: bytes, block: bytes):
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Block must be {BLOCK_SIZE} bytes, got {len(block)}")
    return AES.new(key, AES.MODE_ECB)


def golden_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt one block with the library cipher."""
    return _ecb(key, plaintext).encrypt(plaintext)


def golden_decrypt(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt one block with the library cipher."""
    return _ecb(key, ciphertext).decrypt(ciphertext)


def check_block(key: bytes, plaintext: bytes, ciphertext: bytes) -> tuple[bool, str]:
    """
    Compare a (plaintext, ciphertext) pair from aes_core with the library.

    Both directions are checked. Returns (ok, detail); detail is empty
    when ok.
    """
    expected = golden_encrypt(key, plaintext)
    if ciphertext != expected:
        return False, f"encrypt: expected {expected.hex()}, got {ciphertext.hex()}"
    if golden_decrypt(key, ciphertext) != plaintext:
        return False, f"decrypt: library does not recover {plaintext.hex()}"
    return True, ""


# (key, plaintext, ciphertext): FIPS-197 C.1 and Appendix B, then NIST AESAVS
_VECTORS_HEX = (
    ("000102030405060708090a0b0c0d0e0f", "00112233445566778899aabbccddeeff",
     "69c4e0d86a7b0430d8cdb78070b4c55a"),
    ("2b7e151628aed2a6abf7158809cf4f3c", "3243f6a8885a308d313198a2e0370734",
     "3925841d02dc09fbdc118597196a0b32"),
    ("00000000000000000000000000000000", "00000000000000000000000000000000",
     "66e94bd4ef8a2c3b884cfa59ca342b2e"),
    ("00000000000000000000000000000000", "f34481ec3cc627bacd5dc3fb08f273e6",
     "0336763e966d92595a567cc9ce537f5e"),
    ("ffffffffffffffffffffffffffffffff", "ffffffffffffffffffffffffffffffff",
     "bcbf217cb280cf30b2517052193ab979"),
)

FIPS_197_TEST_VECTORS = [
    {
        "key": bytes.fromhex(key),
        "plaintext": bytes.fromhex(pt),
        "ciphertext": bytes.fromhex(ct),
    }
    for key, pt, ct in _VECTORS_HEX
]
