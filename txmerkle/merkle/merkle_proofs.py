"""
Merkle - Proof Extraction
Reads the sibling path for a single leaf out of a built HashArray.

In a deployed system proofs are produced by whoever stores the hash array;
this module is that caller-side convenience. It only reads the array, it
never rebuilds or modifies it.

Sibling Rules:
1. At every level the sibling of position p is position p ^ 1
2. DUPLICATE policy: a trailing unpaired node is its own sibling
3. DROP policy: a node dropped at some level is not committed to by the
   root and has no proof
4. Single leaf: no siblings, root = leaf
"""
from __future__ import annotations

from dataclasses import dataclass, field

from txmerkle.merkle.tree_builder import HashArray, OddLevelPolicy
from txmerkle.schemas.errors import IndexOutOfRangeError, InvalidInputError


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based index of the leaf among the original records
        siblings: Sibling hashes from the leaf level up to just below the root
        root: The root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    @property
    def depth(self) -> int:
        """Number of hashing steps from leaf to root."""
        return len(self.siblings)


def extract_proof(hash_array: HashArray, index: int) -> MerkleProof:
    """
    Collect the sibling path for the leaf at index.

    Args:
        hash_array: A built tree
        index: 0-based leaf position

    Returns:
        MerkleProof with leaf, index, siblings (leaf level first) and root

    Raises:
        IndexOutOfRangeError: If index is not a leaf position
        InvalidInputError: If the leaf was dropped under the DROP policy
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidInputError(f"Leaf index must be an integer, got {type(index).__name__}")
    if index < 0 or index >= hash_array.leaf_count:
        raise IndexOutOfRangeError(
            index,
            hash_array.leaf_count,
            f"Leaf index {index} out of range for {hash_array.leaf_count} leaves",
        )

    siblings: list[bytes] = []
    offsets = hash_array.level_offsets
    position = index

    # The root level has no sibling
    for depth in range(hash_array.depth - 1):
        size = hash_array.level_sizes[depth]
        unpaired = size % 2 == 1 and position == size - 1

        if unpaired and hash_array.policy is OddLevelPolicy.DROP:
            raise InvalidInputError(
                f"Leaf {index} is not committed to by the root: its branch was "
                f"dropped at level {depth} under the drop policy",
                record_index=index,
                details={"level": depth},
            )

        sibling_position = position if unpaired else position ^ 1
        siblings.append(hash_array[offsets[depth] + sibling_position])
        position //= 2

    return MerkleProof(
        leaf=hash_array[index],
        index=index,
        siblings=siblings,
        root=hash_array.root,
    )


__all__ = [
    "MerkleProof",
    "extract_proof",
]
