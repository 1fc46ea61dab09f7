"""
Merkle Tree Construction and Membership Proofs

This module provides:
- HashArray: the immutable, flattened hash array of a built tree
- TreeBuilder / build: records -> HashArray
- hash_at: bounds-checked access to a single hash
- extract_proof: the sibling path for one leaf
- ProofVerifier / verify: record + index + root + siblings -> bool

Commitment Rules:
1. Leaf hashing: H(encode_packed(record))
2. Parent hashing: H(left || right)
3. Odd levels: duplicate the last node (default) or drop it (legacy parity)
4. Single record: root = leaf

Usage:
    from txmerkle.merkle import build, extract_proof, verify

    tree = build(records)
    proof = extract_proof(tree, 2)
    assert verify(records[2], 2, tree.root, proof.siblings)
"""
from .tree_builder import (
    OddLevelPolicy,
    HashArray,
    TreeBuilder,
    compute_level_sizes,
    build,
    hash_at,
    compute_root,
)

from .merkle_proofs import (
    MerkleProof,
    extract_proof,
)

from .proof_verifier import (
    HashLike,
    ProofVerifier,
    verify,
    verify_proof,
)


__all__ = [
    # Core types
    "OddLevelPolicy",
    "HashArray",
    "MerkleProof",
    "HashLike",
    # Construction
    "TreeBuilder",
    "compute_level_sizes",
    "build",
    "hash_at",
    "compute_root",
    # Proofs
    "extract_proof",
    "ProofVerifier",
    "verify",
    "verify_proof",
]
