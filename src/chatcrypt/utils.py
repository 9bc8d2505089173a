"""
State helpers for the AES block transform.

AES state is a 4x4 grid of bytes, state[row][col]. Bytes of a block fill
the grid column by column (FIPS-197 section 3.4):

  byte[0]  -> state[0][0]
  byte[1]  -> state[1][0]
  byte[2]  -> state[2][0]
  byte[3]  -> state[3][0]
  byte[4]  -> state[0][1]
  ...
  byte[15] -> state[3][3]
"""

from .codec import bytes_to_hex

State = list[list[int]]


def bytes_to_state(data: bytes) -> State:
    """
    Convert 16 bytes to a 4x4 state.

    Args:
        data: 16 bytes of input

    Returns:
        4x4 list of integers (0-255)
    """
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")

    state = [[0 for _ in range(4)] for _ in range(4)]
    for col in range(4):
        for row in range(4):
            state[row][col] = data[col * 4 + row]
    return state


def state_to_bytes(state: State) -> bytes:
    """Convert a 4x4 state back to 16 bytes."""
    result = []
    for col in range(4):
        for row in range(4):
            result.append(state[row][col])
    return bytes(result)


def state_to_hex(state: State) -> str:
    """Convert state to hex string (via bytes)."""
    return bytes_to_hex(state_to_bytes(state))


def format_state_grid(state: State) -> str:
    """
    Format state as a readable 4x4 grid.

    Returns multi-line string like:
      2b 28 ab 09
      7e ae f7 cf
      15 d2 15 4f
      16 a6 88 3c
    """
    lines = []
    for row in range(4):
        row_hex = [f"{state[row][col]:02x}" for col in range(4)]
        lines.append("  " + " ".join(row_hex))
    return "\n".join(lines)


def xor_states(a: State, b: State) -> State:
    """XOR two 4x4 states element-wise."""
    return [[a[row][col] ^ b[row][col] for col in range(4)] for row in range(4)]


def copy_state(state: State) -> State:
    """Deep copy a 4x4 state."""
    return [row[:] for row in state]
