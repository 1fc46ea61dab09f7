"""
txmerkle - Merkle tree construction and membership-proof verification.

Builds a binary hash tree over an ordered list of records and checks
whether a record sits at a given position under a given root.

Usage:
    from txmerkle import build, hash_at, extract_proof, verify

    tree = build(["TX1: Maria => Alice", "TX2: Alice => Shara"])
    proof = extract_proof(tree, 1)
    verify("TX2: Alice => Shara", 1, tree.root, proof.siblings)
"""

from txmerkle.merkle import (
    OddLevelPolicy,
    HashArray,
    MerkleProof,
    TreeBuilder,
    ProofVerifier,
    build,
    hash_at,
    extract_proof,
    verify,
    verify_proof,
)
from txmerkle.crypto import encode_packed, hash_record
from txmerkle.schemas import (
    TxMerkleException,
    InvalidInputError,
    IndexOutOfRangeError,
    ConfigurationException,
)

__version__ = "0.1.0"

__all__ = [
    "OddLevelPolicy",
    "HashArray",
    "MerkleProof",
    "TreeBuilder",
    "ProofVerifier",
    "build",
    "hash_at",
    "extract_proof",
    "verify",
    "verify_proof",
    "encode_packed",
    "hash_record",
    "TxMerkleException",
    "InvalidInputError",
    "IndexOutOfRangeError",
    "ConfigurationException",
]
