"""
Merkle - Proof Verification
Decides whether a record sits at a claimed position under a claimed root.

The verifier needs nothing from the tree that produced the root: only the
record, its index, the root and the sibling path.

Algorithm:
1. running = H(encode_packed(record))
2. For each sibling, leaf level first:
   - index even: running = H(running || sibling)   (current node is left)
   - index odd:  running = H(sibling || running)   (current node is right)
   - index = index // 2
3. Accept iff running == root

Verification never raises. Malformed input and genuine non-membership both
yield False, so a caller learns nothing about which level failed. Proof
length is not checked: a truncated or padded path just fails to match.
"""
from __future__ import annotations

import hmac
import logging
from typing import Sequence, Union

from txmerkle.crypto.encoding import Record, hash_record
from txmerkle.crypto.hashing import (
    HashFunction,
    algorithm_name,
    from_hex,
    get_hash_function,
    hash_concat,
)
from txmerkle.merkle.merkle_proofs import MerkleProof
from txmerkle.schemas.errors import TxMerkleException

logger = logging.getLogger(__name__)


HashLike = Union[bytes, bytearray, memoryview, str]


def _coerce_hash(value: HashLike) -> bytes:
    """Accept raw digest bytes or a 0x-prefixed hex string."""
    if isinstance(value, str):
        return from_hex(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected hash bytes or 0x hex string, got {type(value).__name__}")


class ProofVerifier:
    """
    Verifies sibling-path proofs with a fixed hash function.

    Stateless apart from the hash function, so it is safe to share.

    Example:
        >>> verifier = ProofVerifier("keccak256")
        >>> verifier.verify("TX3: Alice => Elisabeth", 2, root, [h3, h45])
        True
    """

    def __init__(self, hash_fn: Union[HashFunction, str, None] = None) -> None:
        """
        Args:
            hash_fn: Hash function, or registered algorithm name.
                     Defaults to the runtime config.

        Raises:
            ConfigurationException: If the algorithm name is unknown
        """
        if hash_fn is None:
            from txmerkle.config.runtime import get_default_config

            hash_fn = get_default_config().tree.hash_algorithm
        if isinstance(hash_fn, str):
            hash_fn = get_hash_function(hash_fn)

        self.hash_fn: HashFunction = hash_fn
        self.hash_algorithm: str = algorithm_name(hash_fn)

    def compute_root(self, leaf: bytes, index: int, proof: Sequence[HashLike]) -> bytes:
        """
        Fold a sibling path into a root, starting from a leaf hash.

        Unlike verify(), this raises on malformed input.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Index must be an integer, got {type(index).__name__}")
        if index < 0:
            raise ValueError(f"Index must be non-negative, got {index}")

        running = bytes(leaf)
        for sibling in proof:
            sibling = _coerce_hash(sibling)
            if index % 2 == 0:
                running = hash_concat(running, sibling, self.hash_fn)
            else:
                running = hash_concat(sibling, running, self.hash_fn)
            index //= 2
        return running

    def verify(
        self,
        record: Record,
        index: int,
        root: HashLike,
        proof: Sequence[HashLike],
    ) -> bool:
        """
        Check that record is the leaf at index under root.

        Args:
            record: The claimed record (str or bytes-like)
            index: Claimed 0-based position among the original records
            root: Claimed root, as bytes or 0x hex
            proof: Sibling hashes, leaf level first

        Returns:
            True only if the recomputed root equals root bit for bit
        """
        try:
            leaf = hash_record(record, self.hash_fn)
            return self._matches(leaf, index, root, proof)
        except (TxMerkleException, TypeError, ValueError) as e:
            logger.debug("Proof rejected for index %r: malformed input (%s)", index, e)
            return False

    def verify_proof(self, proof: MerkleProof) -> bool:
        """Check a MerkleProof, starting from its leaf hash. Never raises."""
        try:
            return self._matches(proof.leaf, proof.index, proof.root, proof.siblings)
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("Proof rejected for index %r: malformed input (%s)", getattr(proof, "index", None), e)
            return False

    def _matches(self, leaf: bytes, index: int, root: HashLike, proof: Sequence[HashLike]) -> bool:
        proof = list(proof)
        computed = self.compute_root(leaf, index, proof)
        ok = hmac.compare_digest(computed, _coerce_hash(root))
        logger.debug("Proof for index %d with %d siblings: %s", index, len(proof), "valid" if ok else "invalid")
        return ok


def verify(
    record: Record,
    index: int,
    root: HashLike,
    proof: Sequence[HashLike],
    *,
    hash_fn: Union[HashFunction, str, None] = None,
) -> bool:
    """Membership check for a record. See ProofVerifier.verify."""
    return ProofVerifier(hash_fn).verify(record, index, root, proof)


def verify_proof(
    proof: MerkleProof,
    *,
    hash_fn: Union[HashFunction, str, None] = None,
) -> bool:
    """Check a leaf-level MerkleProof. See ProofVerifier.verify_proof."""
    return ProofVerifier(hash_fn).verify_proof(proof)


__all__ = [
    "HashLike",
    "ProofVerifier",
    "verify",
    "verify_proof",
]
