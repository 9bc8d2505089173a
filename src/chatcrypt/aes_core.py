"""
AES-128 block transform: lookup tables, round operations and key schedule.

All operations take a 4x4 state (see utils.py for the byte layout) and
return a new state; nothing is modified in place and no module state is
mutated, so every function is reentrant.

Round structure for one block:
- Round 0:    AddRoundKey
- Rounds 1-9: SubBytes, ShiftRows, MixColumns, AddRoundKey
- Round 10:   SubBytes, ShiftRows, AddRoundKey (no MixColumns)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .utils import State, bytes_to_state, state_to_bytes, copy_state, xor_states

if TYPE_CHECKING:
    from .trace import TraceRecorder


BLOCK_SIZE = 16
KEY_SIZE = 16
NUM_ROUNDS = 10

# AES S-box lookup table
SBOX = bytes([
    0x63, 0x7c, 0x77, 0x7b, 0xf2, 0x6b, 0x6f, 0xc5, 0x30, 0x01, 0x67, 0x2b, 0xfe, 0xd7, 0xab, 0x76,
    0xca, 0x82, 0xc9, 0x7d, 0xfa, 0x59, 0x47, 0xf0, 0xad, 0xd4, 0xa2, 0xaf, 0x9c, 0xa4, 0x72, 0xc0,
    0xb7, 0xfd, 0x93, 0x26, 0x36, 0x3f, 0xf7, 0xcc, 0x34, 0xa5, 0xe5, 0xf1, 0x71, 0xd8, 0x31, 0x15,
    0x04, 0xc7, 0x23, 0xc3, 0x18, 0x96, 0x05, 0x9a, 0x07, 0x12, 0x80, 0xe2, 0xeb, 0x27, 0xb2, 0x75,
    0x09, 0x83, 0x2c, 0x1a, 0x1b, 0x6e, 0x5a, 0xa0, 0x52, 0x3b, 0xd6, 0xb3, 0x29, 0xe3, 0x2f, 0x84,
    0x53, 0xd1, 0x00, 0xed, 0x20, 0xfc, 0xb1, 0x5b, 0x6a, 0xcb, 0xbe, 0x39, 0x4a, 0x4c, 0x58, 0xcf,
    0xd0, 0xef, 0xaa, 0xfb, 0x43, 0x4d, 0x33, 0x85, 0x45, 0xf9, 0x02, 0x7f, 0x50, 0x3c, 0x9f, 0xa8,
    0x51, 0xa3, 0x40, 0x8f, 0x92, 0x9d, 0x38, 0xf5, 0xbc, 0xb6, 0xda, 0x21, 0x10, 0xff, 0xf3, 0xd2,
    0xcd, 0x0c, 0x13, 0xec, 0x5f, 0x97, 0x44, 0x17, 0xc4, 0xa7, 0x7e, 0x3d, 0x64, 0x5d, 0x19, 0x73,
    0x60, 0x81, 0x4f, 0xdc, 0x22, 0x2a, 0x90, 0x88, 0x46, 0xee, 0xb8, 0x14, 0xde, 0x5e, 0x0b, 0xdb,
    0xe0, 0x32, 0x3a, 0x0a, 0x49, 0x06, 0x24, 0x5c, 0xc2, 0xd3, 0xac, 0x62, 0x91, 0x95, 0xe4, 0x79,
    0xe7, 0xc8, 0x37, 0x6d, 0x8d, 0xd5, 0x4e, 0xa9, 0x6c, 0x56, 0xf4, 0xea, 0x65, 0x7a, 0xae, 0x08,
    0xba, 0x78, 0x25, 0x2e, 0x1c, 0xa6, 0xb4, 0xc6, 0xe8, 0xdd, 0x74, 0x1f, 0x4b, 0xbd, 0x8b, 0x8a,
    0x70, 0x3e, 0xb5, 0x66, 0x48, 0x03, 0xf6, 0x0e, 0x61, 0x35, 0x57, 0xb9, 0x86, 0xc1, 0x1d, 0x9e,
    0xe1, 0xf8, 0x98, 0x11, 0x69, 0xd9, 0x8e, 0x94, 0x9b, 0x1e, 0x87, 0xe9, 0xce, 0x55, 0x28, 0xdf,
    0x8c, 0xa1, 0x89, 0x0d, 0xbf, 0xe6, 0x42, 0x68, 0x41, 0x99, 0x2d, 0x0f, 0xb0, 0x54, 0xbb, 0x16,
])

# Inverse S-box: INV_SBOX[SBOX[x]] == x
INV_SBOX = bytes([
    0x52, 0x09, 0x6a, 0xd5, 0x30, 0x36, 0xa5, 0x38, 0xbf, 0x40, 0xa3, 0x9e, 0x81, 0xf3, 0xd7, 0xfb,
    0x7c, 0xe3, 0x39, 0x82, 0x9b, 0x2f, 0xff, 0x87, 0x34, 0x8e, 0x43, 0x44, 0xc4, 0xde, 0xe9, 0xcb,
    0x54, 0x7b, 0x94, 0x32, 0xa6, 0xc2, 0x23, 0x3d, 0xee, 0x4c, 0x95, 0x0b, 0x42, 0xfa, 0xc3, 0x4e,
    0x08, 0x2e, 0xa1, 0x66, 0x28, 0xd9, 0x24, 0xb2, 0x76, 0x5b, 0xa2, 0x49, 0x6d, 0x8b, 0xd1, 0x25,
    0x72, 0xf8, 0xf6, 0x64, 0x86, 0x68, 0x98, 0x16, 0xd4, 0xa4, 0x5c, 0xcc, 0x5d, 0x65, 0xb6, 0x92,
    0x6c, 0x70, 0x48, 0x50, 0xfd, 0xed, 0xb9, 0xda, 0x5e, 0x15, 0x46, 0x57, 0xa7, 0x8d, 0x9d, 0x84,
    0x90, 0xd8, 0xab, 0x00, 0x8c, 0xbc, 0xd3, 0x0a, 0xf7, 0xe4, 0x58, 0x05, 0xb8, 0xb3, 0x45, 0x06,
    0xd0, 0x2c, 0x1e, 0x8f, 0xca, 0x3f, 0x0f, 0x02, 0xc1, 0xaf, 0xbd, 0x03, 0x01, 0x13, 0x8a, 0x6b,
    0x3a, 0x91, 0x11, 0x41, 0x4f, 0x67, 0xdc, 0xea, 0x97, 0xf2, 0xcf, 0xce, 0xf0, 0xb4, 0xe6, 0x73,
    0x96, 0xac, 0x74, 0x22, 0xe7, 0xad, 0x35, 0x85, 0xe2, 0xf9, 0x37, 0xe8, 0x1c, 0x75, 0xdf, 0x6e,
    0x47, 0xf1, 0x1a, 0x71, 0x1d, 0x29, 0xc5, 0x89, 0x6f, 0xb7, 0x62, 0x0e, 0xaa, 0x18, 0xbe, 0x1b,
    0xfc, 0x56, 0x3e, 0x4b, 0xc6, 0xd2, 0x79, 0x20, 0x9a, 0xdb, 0xc0, 0xfe, 0x78, 0xcd, 0x5a, 0xf4,
    0x1f, 0xdd, 0xa8, 0x33, 0x88, 0x07, 0xc7, 0x31, 0xb1, 0x12, 0x10, 0x59, 0x27, 0x80, 0xec, 0x5f,
    0x60, 0x51, 0x7f, 0xa9, 0x19, 0xb5, 0x4a, 0x0d, 0x2d, 0xe5, 0x7a, 0x9f, 0x93, 0xc9, 0x9c, 0xef,
    0xa0, 0xe0, 0x3b, 0x4d, 0xae, 0x2a, 0xf5, 0xb0, 0xc8, 0xeb, 0xbb, 0x3c, 0x83, 0x53, 0x99, 0x61,
    0x17, 0x2b, 0x04, 0x7e, 0xba, 0x77, 0xd6, 0x26, 0xe1, 0x69, 0x14, 0x63, 0x55, 0x21, 0x0c, 0x7d,
])

# Round constants: x^(r-1) in GF(2^8)
RCON = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1b, 0x36)

# MixColumns matrix and its inverse, row by row
MIX_MATRIX = (
    (0x02, 0x03, 0x01, 0x01),
    (0x01, 0x02, 0x03, 0x01),
    (0x01, 0x01, 0x02, 0x03),
    (0x03, 0x01, 0x01, 0x02),
)
INV_MIX_MATRIX = (
    (0x0e, 0x0b, 0x0d, 0x09),
    (0x09, 0x0e, 0x0b, 0x0d),
    (0x0d, 0x09, 0x0e, 0x0b),
    (0x0b, 0x0d, 0x09, 0x0e),
)


# ------------------------------------------------------------------
# GF(2^8) arithmetic, reduction polynomial x^8 + x^4 + x^3 + x + 1
# ------------------------------------------------------------------

def xtime(a: int) -> int:
    """Multiply by x in GF(2^8)."""
    return ((a << 1) ^ 0x1b) & 0xff if a & 0x80 else (a << 1) & 0xff


def gf_mult(a: int, b: int) -> int:
    """Multiply two bytes in GF(2^8) (shift-and-add)."""
    result = 0
    for _ in range(8):
        if b & 1:
            result ^= a
        a = xtime(a)
        b >>= 1
    return result


# ------------------------------------------------------------------
# Round operations
# ------------------------------------------------------------------

def sub_bytes(state: State) -> State:
    """Apply the S-box to each byte."""
    return [[SBOX[b] for b in row] for row in state]


def inv_sub_bytes(state: State) -> State:
    """Apply the inverse S-box to each byte."""
    return [[INV_SBOX[b] for b in row] for row in state]


def shift_rows(state: State) -> State:
    """Rotate row i left by i positions (row 0 unchanged)."""
    return [row[i:] + row[:i] for i, row in enumerate(state)]


def inv_shift_rows(state: State) -> State:
    """Rotate row i right by i positions."""
    return [row[4 - i:] + row[:4 - i] for i, row in enumerate(state)]


def _mix(state: State, matrix: tuple[tuple[int, ...], ...]) -> State:
    result = [[0] * 4 for _ in range(4)]
    for col in range(4):
        column = [state[row][col] for row in range(4)]
        for row in range(4):
            value = 0
            for k in range(4):
                value ^= gf_mult(matrix[row][k], column[k])
            result[row][col] = value
    return result


def mix_columns(state: State) -> State:
    """Multiply each column by the MixColumns matrix."""
    return _mix(state, MIX_MATRIX)


def inv_mix_columns(state: State) -> State:
    """Multiply each column by the inverse MixColumns matrix."""
    return _mix(state, INV_MIX_MATRIX)


def add_round_key(state: State, round_key: State) -> State:
    """XOR state with round key."""
    return xor_states(state, round_key)


# ------------------------------------------------------------------
# Key schedule
# ------------------------------------------------------------------

def key_expansion(key: bytes) -> list[State]:
    """
    Expand a 16-byte key into 11 round keys.

    Round 0 is the key itself. Each following round key is built from the
    previous one: its last column is rotated, substituted and XORed with
    RCON to form a temporary column, then every column is the XOR of the
    column to its left (temp for column 0) and the same column one round
    earlier.

    Args:
        key: 16-byte AES key

    Returns:
        List of 11 round-key states
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")

    round_keys = [bytes_to_state(key)]

    for r in range(1, NUM_ROUNDS + 1):
        prev = round_keys[r - 1]

        # RotWord + SubWord + Rcon on the last column
        temp = [prev[row][3] for row in range(4)]
        temp = temp[1:] + temp[:1]
        temp = [SBOX[b] for b in temp]
        temp[0] ^= RCON[r - 1]

        new = [[0] * 4 for _ in range(4)]
        for col in range(4):
            for row in range(4):
                left = temp[row] if col == 0 else new[row][col - 1]
                new[row][col] = prev[row][col] ^ left
        round_keys.append(new)

    return round_keys


# ------------------------------------------------------------------
# Single-block transforms
# ------------------------------------------------------------------

def encrypt_block(
    block: bytes,
    round_keys: list[State],
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Encrypt one 16-byte block with a precomputed key schedule.

    Args:
        block: 16-byte plaintext block
        round_keys: Output of key_expansion()
        tracer: Optional trace recorder, receives one entry per operation

    Returns:
        16-byte ciphertext block
    """
    state = bytes_to_state(block)
    _trace(tracer, 0, "Input", state)

    state = add_round_key(state, round_keys[0])
    _trace(tracer, 0, "AddRoundKey", state, round_keys[0])

    for round_num in range(1, NUM_ROUNDS + 1):
        state = sub_bytes(state)
        _trace(tracer, round_num, "SubBytes", state)

        state = shift_rows(state)
        _trace(tracer, round_num, "ShiftRows", state)

        if round_num != NUM_ROUNDS:
            state = mix_columns(state)
            _trace(tracer, round_num, "MixColumns", state)

        state = add_round_key(state, round_keys[round_num])
        _trace(tracer, round_num, "AddRoundKey", state, round_keys[round_num])

    return state_to_bytes(state)


def decrypt_block(
    block: bytes,
    round_keys: list[State],
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Decrypt one 16-byte block with a precomputed key schedule.

    Applies the inverse operations in reverse order, starting from the
    round 10 key.
    """
    state = bytes_to_state(block)
    _trace(tracer, NUM_ROUNDS, "Input", state)

    state = add_round_key(state, round_keys[NUM_ROUNDS])
    _trace(tracer, NUM_ROUNDS, "AddRoundKey", state, round_keys[NUM_ROUNDS])
    state = inv_shift_rows(state)
    _trace(tracer, NUM_ROUNDS, "InvShiftRows", state)
    state = inv_sub_bytes(state)
    _trace(tracer, NUM_ROUNDS, "InvSubBytes", state)

    for round_num in range(NUM_ROUNDS - 1, 0, -1):
        state = add_round_key(state, round_keys[round_num])
        _trace(tracer, round_num, "AddRoundKey", state, round_keys[round_num])

        state = inv_mix_columns(state)
        _trace(tracer, round_num, "InvMixColumns", state)

        state = inv_shift_rows(state)
        _trace(tracer, round_num, "InvShiftRows", state)

        state = inv_sub_bytes(state)
        _trace(tracer, round_num, "InvSubBytes", state)

    state = add_round_key(state, round_keys[0])
    _trace(tracer, 0, "AddRoundKey", state, round_keys[0])

    return state_to_bytes(state)


def aes128_encrypt_block(
    key: bytes,
    plaintext: bytes,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Encrypt a single block with no padding (raw AES-128).

    Args:
        key: 16-byte AES key
        plaintext: 16-byte plaintext block
        tracer: Optional trace recorder

    Returns:
        16-byte ciphertext
    """
    if len(plaintext) != BLOCK_SIZE:
        raise ValueError(f"Plaintext must be {BLOCK_SIZE} bytes, got {len(plaintext)}")
    return encrypt_block(plaintext, key_expansion(key), tracer)


def aes128_decrypt_block(
    key: bytes,
    ciphertext: bytes,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """Decrypt a single block with no padding (raw AES-128)."""
    if len(ciphertext) != BLOCK_SIZE:
        raise ValueError(f"Ciphertext must be {BLOCK_SIZE} bytes, got {len(ciphertext)}")
    return decrypt_block(ciphertext, key_expansion(key), tracer)


def _trace(
    tracer: TraceRecorder | None,
    round_num: int,
    operation: str,
    state: State,
    round_key: State | None = None,
) -> None:
    if tracer is None:
        return
    if round_key is None:
        tracer.record(round=round_num, operation=operation, state=copy_state(state))
    else:
        tracer.record(
            round=round_num,
            operation=operation,
            state=copy_state(state),
            round_key=copy_state(round_key),
        )
