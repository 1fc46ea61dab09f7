"""
Common test fixtures shared by all modules.

Provides:
- The four reference transactions and other record sets
- A readable identity "hash" for structural assertions
- An independent reference implementation of root computation
"""

from typing import Callable

from eth_utils import keccak


TRANSACTIONS: list[str] = [
    "TX1: Maria => Alice",
    "TX2: Alice => Shara",
    "TX3: Alice => Elisabeth",
    "TX4: Elisabeth => Jovana",
]


def make_transactions(count: int = 4) -> list[str]:
    """
    Create an ordered list of transaction records.

    The first four are the reference transactions; further ones are
    generated in the same format.
    """
    records = list(TRANSACTIONS[:count])
    for i in range(len(records), count):
        records.append(f"TX{i + 1}: Sender{i} => Receiver{i}")
    return records


def make_letters(count: int) -> list[str]:
    """Single-letter records "a", "b", ... for use with identity_hash."""
    return [chr(ord("a") + i) for i in range(count)]


def identity_hash(data: bytes) -> bytes:
    """
    Stub hash that returns its input.

    With it a leaf is the record itself and a parent is the concatenation
    of its children, so tree shapes can be read off directly.
    """
    return bytes(data)


def reference_root(
    records: list[str],
    hash_fn: Callable[[bytes], bytes] = keccak,
    duplicate_odd: bool = True,
) -> bytes:
    """
    Root computed level by level with plain lists, independent of txmerkle.
    """
    level = [hash_fn(r.encode("utf-8")) for r in records]
    while len(level) > 1:
        if len(level) % 2 == 1:
            if duplicate_odd:
                level.append(level[-1])
            else:
                level = level[:-1]
        level = [hash_fn(level[i] + level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]
