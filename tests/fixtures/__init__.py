"""
Test fixtures package for txmerkle tests.

Usage:
    from fixtures import TRANSACTIONS, identity_hash, reference_root

    def test_something():
        tree = build(TRANSACTIONS)
        assert tree.root == reference_root(TRANSACTIONS)
"""

from .common import (
    TRANSACTIONS,
    make_transactions,
    make_letters,
    identity_hash,
    reference_root,
)

__all__ = [
    "TRANSACTIONS",
    "make_transactions",
    "make_letters",
    "identity_hash",
    "reference_root",
]
