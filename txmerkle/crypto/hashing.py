"""
Crypto - Hashing Utilities
Pluggable 256-bit hash functions and hex helpers for Merkle commitments.

This module provides:
- Keccak-256 (Ethereum flavour, the default) and SHA-256 over raw bytes
- A small registry so the algorithm can be chosen by name from config
- Parent hashing over the concatenation of two child hashes
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- The algorithm must stay fixed for a deployment: every issued proof is
  bound to it
"""
from __future__ import annotations

import hashlib
from typing import Callable

from eth_utils import keccak

from txmerkle.schemas.errors import ConfigurationException


HashFunction = Callable[[bytes], bytes]

DEFAULT_HASH_ALGORITHM = "keccak256"

# Digest size of every registered algorithm, in bytes
HASH_SIZE = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Ethereum Keccak-256 hash of raw bytes.

    This is the pre-standard Keccak used by Solidity's ``keccak256``,
    not NIST SHA3-256.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return hashlib.sha256(data).digest()


_HASH_FUNCTIONS: dict[str, HashFunction] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def available_algorithms() -> list[str]:
    """Names accepted by get_hash_function()."""
    return sorted(_HASH_FUNCTIONS)


def get_hash_function(name: str | None = None) -> HashFunction:
    """
    Resolve a hash algorithm name to its function.

    Args:
        name: Algorithm name ("keccak256" or "sha256"), case-insensitive.
              None selects the default (keccak256).

    Returns:
        The hash function

    Raises:
        ConfigurationException: If the name is not a registered algorithm
    """
    key = (name or DEFAULT_HASH_ALGORITHM).strip().lower()
    try:
        return _HASH_FUNCTIONS[key]
    except KeyError:
        raise ConfigurationException(
            f"Unknown hash algorithm: {name!r} (expected one of {available_algorithms()})",
            setting="hash_algorithm",
        ) from None


def algorithm_name(hash_fn: HashFunction) -> str:
    """
    Reverse lookup of a registered hash function's name.

    Injected functions that are not in the registry report their
    ``__name__`` (or "custom").
    """
    for name, fn in _HASH_FUNCTIONS.items():
        if fn is hash_fn:
            return name
    return getattr(hash_fn, "__name__", "custom")


def hash_concat(left: bytes, right: bytes, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is the Merkle parent rule: parent = H(left || right).
    Order matters; hash_concat(a, b) != hash_concat(b, a).

    Args:
        left: Left child hash
        right: Right child hash
        hash_fn: Hash function to apply

    Returns:
        Digest of the concatenation
    """
    return hash_fn(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "HashFunction",
    "DEFAULT_HASH_ALGORITHM",
    "HASH_SIZE",
    "keccak256",
    "sha256",
    "available_algorithms",
    "get_hash_function",
    "algorithm_name",
    "hash_concat",
    "to_hex",
    "from_hex",
]
