"""Command-line interface for the chatcrypt engines."""

from __future__ import annotations

import random
import secrets
import sys
from pathlib import Path

import click
from tabulate import tabulate

from . import __version__
from .aes import decrypt_aes, encrypt_aes, generate_aes_key
from .aes_core import aes128_decrypt_block, aes128_encrypt_block
from .codec import bytes_to_hex, hex_to_bytes
from .config import CryptoConfig
from .errors import ChatCryptError
from .randomness import RandomSource
from .reference import FIPS_197_TEST_VECTORS, check_block
from .rsa import decrypt_with_private_key, encrypt_with_public_key, generate_rsa_key_pair
from .session import chunks_from_hex, chunks_to_hex
from .trace import TraceRecorder, print_header, print_result, print_state

DEFAULT_KEY_HEX = "000102030405060708090a0b0c0d0e0f"
DEFAULT_PT_HEX = "00112233445566778899aabbccddeeff"


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="chatcrypt")
def main() -> None:
    """AES-128 and textbook RSA for end-to-end encrypted chat.

    Encrypt chat payloads with AES and exchange session keys with RSA.
    """
    pass


@main.command(name="aes-key")
@click.option("--length", type=int, default=16, help="Key length in characters (default: 16)")
def aes_key_cmd(length: int) -> None:
    """Print a random alphanumeric AES key."""
    click.echo(generate_aes_key(length))


@main.command()
@click.option("--key", "-k", required=True, help="16-character AES key")
@click.argument("plaintext")
def encrypt(key: str, plaintext: str) -> None:
    """Encrypt PLAINTEXT with AES-128 and print the hex ciphertext."""
    try:
        click.echo(encrypt_aes(plaintext, key))
    except ChatCryptError as e:
        _fail(e)


@main.command()
@click.option("--key", "-k", required=True, help="16-character AES key")
@click.argument("ciphertext")
def decrypt(key: str, ciphertext: str) -> None:
    """Decrypt hex CIPHERTEXT with AES-128 and print the text."""
    try:
        click.echo(decrypt_aes(ciphertext, key))
    except ChatCryptError as e:
        _fail(e)


@main.command()
@click.option(
    "--bits",
    type=int,
    default=2048,
    help="Modulus size in bits (default: 2048)",
)
@click.option(
    "--out-public",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the public key (<n>:<e>) to this file",
)
@click.option(
    "--out-private",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the private key (<n>:<d>) to this file",
)
def keygen(bits: int, out_public: str | None, out_private: str | None) -> None:
    """Generate an RSA key pair."""
    try:
        config = CryptoConfig(rsa_key_bits=bits)
    except ValueError as e:
        _fail(e)

    rng = RandomSource()
    try:
        pair = generate_rsa_key_pair(config=config, rng=rng)
    except ChatCryptError as e:
        _fail(e)

    public_str = pair.public_key.to_string()
    private_str = pair.private_key.to_string()

    if out_public:
        Path(out_public).write_text(public_str + "\n")
        click.echo(f"Public key:  {out_public}")
    else:
        click.echo(f"Public key:  {public_str}")

    if out_private:
        Path(out_private).write_text(private_str + "\n")
        click.echo(f"Private key: {out_private}")
    else:
        click.echo(f"Private key: {private_str}")

    draws = rng.draws_breakdown
    click.echo(f"Modulus bits: {pair.bits}")
    click.echo(f"Prime candidates tried: {draws['prime_candidates']}")
    click.echo(f"Miller-Rabin witnesses: {draws['witnesses']}")


def _read_key(value: str) -> str:
    """Key given inline, or @path to read it from a file."""
    if value.startswith("@"):
        return Path(value[1:]).read_text().strip()
    return value


@main.command(name="rsa-encrypt")
@click.option("--public", "public_key", required=True, help="Public key <n>:<e> or @FILE")
@click.argument("plaintext")
def rsa_encrypt(public_key: str, plaintext: str) -> None:
    """Encrypt PLAINTEXT with RSA; prints one hex chunk per line."""
    try:
        chunks = encrypt_with_public_key(plaintext, _read_key(public_key))
    except (ChatCryptError, OSError) as e:
        _fail(e)
    for chunk in chunks_to_hex(chunks):
        click.echo(chunk)


@main.command(name="rsa-decrypt")
@click.option("--private", "private_key", required=True, help="Private key <n>:<d> or @FILE")
@click.argument("chunks", nargs=-1, required=True)
def rsa_decrypt(private_key: str, chunks: tuple[str, ...]) -> None:
    """Decrypt hex CHUNKS (in order) with RSA and print the text."""
    try:
        click.echo(decrypt_with_private_key(chunks_from_hex(list(chunks)), _read_key(private_key)))
    except (ChatCryptError, OSError) as e:
        _fail(e)


@main.command()
@click.option(
    "--n",
    "num_tests",
    type=int,
    default=100,
    help="Number of random test vectors (default: 100)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random test inputs",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show detailed output",
)
def validate(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Validate the block cipher against FIPS-197 and PyCryptodome."""
    if seed is not None:
        rnd = random.Random(seed)
        random_bytes = lambda n: bytes(rnd.randint(0, 255) for _ in range(n))
    else:
        random_bytes = secrets.token_bytes

    rows = []

    # FIPS-197 tests
    fips_passed = 0
    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        ct = aes128_encrypt_block(vec["key"], vec["plaintext"])
        pt = aes128_decrypt_block(vec["key"], vec["ciphertext"])
        ok = ct == vec["ciphertext"] and pt == vec["plaintext"]
        if ok:
            fips_passed += 1
        elif verbose:
            click.echo(f"  FIPS test {i+1}: FAIL - got {bytes_to_hex(ct)}")
    rows.append(["FIPS-197 KAT", fips_passed, len(FIPS_197_TEST_VECTORS)])

    # Random tests against the library
    random_passed = 0
    for i in range(num_tests):
        key = random_bytes(16)
        pt = random_bytes(16)
        ct = aes128_encrypt_block(key, pt)
        ok, detail = check_block(key, pt, ct)
        ok = ok and aes128_decrypt_block(key, ct) == pt
        if ok:
            random_passed += 1
        elif verbose:
            click.echo(f"  Random test {i+1}: FAIL - {detail or 'decrypt mismatch'}")
    rows.append(["Random vs PyCryptodome", random_passed, num_tests])

    click.echo(tabulate(rows, headers=["Suite", "Passed", "Total"], tablefmt="simple"))

    total_passed = fips_passed + random_passed
    total_tests = len(FIPS_197_TEST_VECTORS) + num_tests
    click.echo("")
    if total_passed == total_tests:
        click.echo(f"VALIDATION PASSED: All {total_tests} tests passed")
        sys.exit(0)
    click.echo(f"VALIDATION FAILED: {total_tests - total_passed} failures")
    sys.exit(1)


@main.command()
@click.option("--key", "key_hex", default=DEFAULT_KEY_HEX, help="Key as 32 hex chars (default: FIPS-197)")
@click.option("--pt", "pt_hex", default=DEFAULT_PT_HEX, help="Block as 32 hex chars (default: FIPS-197)")
@click.option("--verbose", is_flag=True, help="Print the state after every operation")
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False), default=None,
              help="Write a JSON Lines trace to FILE")
def trace(key_hex: str, pt_hex: str, verbose: bool, trace_path: str | None) -> None:
    """Walk one block through all AES-128 rounds."""
    try:
        key = hex_to_bytes(key_hex)
        plaintext = hex_to_bytes(pt_hex)
    except ChatCryptError as e:
        _fail(e)
    if len(key) != 16 or len(plaintext) != 16:
        _fail(ValueError("Key and block must be 32 hex chars (16 bytes)"))

    print_header("AES-128 single block")
    click.echo(f"Key:       {bytes_to_hex(key)}")
    click.echo(f"Plaintext: {bytes_to_hex(plaintext)}")

    trace_file = open(trace_path, "w") if trace_path else None
    try:
        tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
        ciphertext = aes128_encrypt_block(key, plaintext, tracer)
    finally:
        if trace_file:
            trace_file.close()

    round_keys = [r["round_key"] for r in tracer.get_records() if "round_key" in r]
    print_state("Round 0 key", round_keys[0])
    print_state("Round 10 key", round_keys[-1])

    passed, _ = check_block(key, plaintext, ciphertext)
    print_result(bytes_to_hex(ciphertext), passed)
    if not passed:
        sys.exit(1)


if __name__ == "__main__":
    main()
