"""
Trace recording and pretty printing for the AES block transform.

TraceRecorder collects one entry per round operation. Entries can be
echoed to stdout as compact lines (verbose) and/or written as JSON Lines
to a file.
"""

import json
from typing import Any, TextIO

from .utils import State, format_state_grid, state_to_hex


class TraceRecorder:
    """
    Records and outputs traces of AES execution.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Compact verbose stdout  (when verbose is set)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """Record a trace entry."""
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = {
            key: state_to_hex(value) if key in ("state", "round_key") else value
            for key, value in record.items()
        }
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _print_verbose(self, record: dict[str, Any]) -> None:
        round_num = record.get("round", "?")
        operation = record.get("operation", "unknown")

        line = f"R{round_num:>2}  {operation:14s} STATE:{state_to_hex(record['state'])}"
        if "round_key" in record:
            line += f"  KEY:{state_to_hex(record['round_key'])}"
        print(line)

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def states_after(self, operation: str) -> list[State]:
        """States recorded right after every occurrence of `operation`."""
        return [r["state"] for r in self._records if r.get("operation") == operation]

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_state(label: str, state: State) -> None:
    """Print a labelled state as a 4x4 grid."""
    print(f"{label}:")
    print(format_state_grid(state))


def print_result(ciphertext_hex: str, passed: bool | None = None) -> None:
    """Print final encryption result."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"Ciphertext: {ciphertext_hex}")

    if passed is not None:
        status = "PASS" if passed else "FAIL"
        marker = "[OK]" if passed else "[ERROR]"
        print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
