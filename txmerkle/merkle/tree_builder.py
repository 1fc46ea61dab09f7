"""
Merkle - Tree Construction
Deterministic construction of the flattened hash array for a record set.

This module provides:
- HashArray: the immutable, level-by-level array of every tree hash
- TreeBuilder: builds a HashArray from ordered records
- build / hash_at: the module-level operations used by callers

Layout of a HashArray for n records:
    [ leaf_0 .. leaf_{n-1} | level 1 nodes | level 2 nodes | ... | root ]
Indices [0, n) are leaf hashes in input order; each following range holds
one level's parents, left to right; the last element is the root. For a
power-of-two n the array has exactly 2n - 1 elements.

Commitment Rules:
1. Leaf hashing: leaf = H(encode_packed(record))
2. Parent hashing: parent = H(left || right), never commutative
3. Odd levels follow the OddLevelPolicy:
   - DUPLICATE: the trailing node is paired with itself (not stored twice)
   - DROP: the trailing node is left out of the next level
4. Single record: root = leaf
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from txmerkle.crypto.encoding import Record, hash_record
from txmerkle.crypto.hashing import (
    DEFAULT_HASH_ALGORITHM,
    HashFunction,
    algorithm_name,
    get_hash_function,
    hash_concat,
)
from txmerkle.schemas.errors import (
    ConfigurationException,
    IndexOutOfRangeError,
    InvalidInputError,
    SchemaValidationException,
)

logger = logging.getLogger(__name__)


class OddLevelPolicy(str, Enum):
    """How a level with an odd number of nodes is reduced."""

    DUPLICATE = "duplicate"
    DROP = "drop"

    @classmethod
    def parse(cls, value: Union["OddLevelPolicy", str]) -> "OddLevelPolicy":
        """Accept a policy member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationException(
                f"Unknown odd-level policy: {value!r} "
                f"(expected one of {[p.value for p in cls]})",
                setting="odd_level_policy",
            ) from None


def compute_level_sizes(
    num_leaves: int,
    policy: OddLevelPolicy = OddLevelPolicy.DUPLICATE,
) -> tuple[int, ...]:
    """
    Number of nodes on every level, leaves first, root last.

    Examples:
        >>> compute_level_sizes(4)
        (4, 2, 1)
        >>> compute_level_sizes(5)
        (5, 3, 2, 1)
        >>> compute_level_sizes(5, OddLevelPolicy.DROP)
        (5, 2, 1)
    """
    if num_leaves < 1:
        return ()

    policy = OddLevelPolicy.parse(policy)
    sizes = [num_leaves]
    size = num_leaves
    while size > 1:
        if policy is OddLevelPolicy.DUPLICATE:
            size = (size + 1) // 2
        else:
            size = size // 2
        sizes.append(size)
    return tuple(sizes)


@dataclass(frozen=True)
class HashArray(Sequence):
    """
    The complete, read-only state of a built tree.

    Behaves as an immutable sequence of hashes. Besides the flat array it
    records the leaf count, the size of each level and the parameters the
    tree was built with, so proofs can be read out of it without rebuilding.

    Attributes:
        hashes: Every tree hash, leaves first, root last
        leaf_count: Number of records the tree was built from
        level_sizes: Node count of each level, leaves first
        policy: Odd-level policy used during construction
        hash_algorithm: Name of the hash function used
    """
    hashes: tuple[bytes, ...]
    leaf_count: int
    level_sizes: tuple[int, ...]
    policy: OddLevelPolicy = OddLevelPolicy.DUPLICATE
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM

    def __post_init__(self) -> None:
        """Validate that the layout is consistent."""
        object.__setattr__(self, "hashes", tuple(self.hashes))
        object.__setattr__(self, "level_sizes", tuple(self.level_sizes))
        object.__setattr__(self, "policy", OddLevelPolicy.parse(self.policy))

        if self.leaf_count < 1:
            raise SchemaValidationException(
                f"A hash array needs at least one leaf, got {self.leaf_count}",
                field_path="leaf_count",
            )
        expected = compute_level_sizes(self.leaf_count, self.policy)
        if self.level_sizes != expected:
            raise SchemaValidationException(
                f"Level sizes {list(self.level_sizes)} do not match "
                f"{self.leaf_count} leaves under the {self.policy.value} policy "
                f"(expected {list(expected)})",
                field_path="level_sizes",
            )
        if len(self.hashes) != sum(expected):
            raise SchemaValidationException(
                f"Expected {sum(expected)} hashes, got {len(self.hashes)}",
                field_path="hashes",
            )

    def __len__(self) -> int:
        return len(self.hashes)

    def __getitem__(self, index):
        return self.hashes[index]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.hashes)

    @property
    def root(self) -> bytes:
        """The root hash (last element)."""
        return self.hashes[-1]

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Leaf hashes in input order."""
        return self.hashes[: self.leaf_count]

    @property
    def depth(self) -> int:
        """Number of levels, leaves and root included."""
        return len(self.level_sizes)

    @property
    def level_offsets(self) -> tuple[int, ...]:
        """Array index at which each level starts."""
        offsets = []
        offset = 0
        for size in self.level_sizes:
            offsets.append(offset)
            offset += size
        return tuple(offsets)

    def level(self, depth: int) -> tuple[bytes, ...]:
        """Hashes of one level (0 = leaves, depth - 1 = root)."""
        if not 0 <= depth < self.depth:
            raise IndexOutOfRangeError(depth, self.depth, f"Level {depth} out of range for depth {self.depth}")
        start = self.level_offsets[depth]
        return self.hashes[start : start + self.level_sizes[depth]]

    def hash_at(self, index: int) -> bytes:
        """
        Bounds-checked access to a single hash.

        Raises:
            IndexOutOfRangeError: If index is negative or >= len(self)
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidInputError(f"Index must be an integer, got {type(index).__name__}")
        if index < 0 or index >= len(self.hashes):
            raise IndexOutOfRangeError(index, len(self.hashes))
        return self.hashes[index]


class TreeBuilder:
    """
    Builds HashArrays with a fixed hash function and odd-level policy.

    Holds no per-tree state, so one instance can be shared between threads.

    Example:
        >>> builder = TreeBuilder("keccak256")
        >>> tree = builder.build(["a", "b", "c", "d"])
        >>> len(tree)
        7
    """

    def __init__(
        self,
        hash_fn: Union[HashFunction, str, None] = None,
        policy: Union[OddLevelPolicy, str, None] = None,
    ) -> None:
        """
        Args:
            hash_fn: Hash function, or registered algorithm name.
                     Defaults to the runtime config.
            policy: Odd-level policy, or its name. Defaults to the runtime config.
        """
        if hash_fn is None or policy is None:
            from txmerkle.config.runtime import get_default_config

            tree_config = get_default_config().tree
            if hash_fn is None:
                hash_fn = tree_config.hash_algorithm
            if policy is None:
                policy = tree_config.odd_level_policy

        if isinstance(hash_fn, str):
            hash_fn = get_hash_function(hash_fn)

        self.hash_fn: HashFunction = hash_fn
        self.policy: OddLevelPolicy = OddLevelPolicy.parse(policy)
        self.hash_algorithm: str = algorithm_name(hash_fn)

    def build(self, records: Sequence[Record]) -> HashArray:
        """
        Build the full hash array for an ordered, non-empty record set.

        Args:
            records: Ordered records (str or bytes-like)

        Returns:
            HashArray whose last element is the root

        Raises:
            InvalidInputError: If records is empty, is itself a single
                string/bytes value, or contains an un-encodable record
        """
        if isinstance(records, (str, bytes, bytearray, memoryview)):
            raise InvalidInputError(
                "Records must be a sequence of records, not a single "
                f"{type(records).__name__} value"
            )

        records = list(records)
        if not records:
            raise InvalidInputError("Cannot build a tree from an empty record set")

        hashes: list[bytes] = [self._leaf_hash(record, i) for i, record in enumerate(records)]

        level_sizes = [len(records)]
        offset = 0
        size = len(records)
        while size > 1:
            next_size = self._reduce_level(hashes, offset, size, depth=len(level_sizes) - 1)
            offset += size
            size = next_size
            level_sizes.append(size)

        logger.debug(
            "Built tree: %d leaves, levels=%s, %d hashes (%s, %s)",
            len(records), level_sizes, len(hashes), self.hash_algorithm, self.policy.value,
        )

        return HashArray(
            hashes=tuple(hashes),
            leaf_count=len(records),
            level_sizes=tuple(level_sizes),
            policy=self.policy,
            hash_algorithm=self.hash_algorithm,
        )

    def _leaf_hash(self, record: Record, index: int) -> bytes:
        try:
            return hash_record(record, self.hash_fn)
        except InvalidInputError as e:
            raise InvalidInputError(e.message, record_index=index) from e

    def _reduce_level(self, hashes: list[bytes], offset: int, size: int, depth: int) -> int:
        """Append the parents of hashes[offset:offset + size]; return how many were added."""
        for i in range(0, size - 1, 2):
            left = hashes[offset + i]
            right = hashes[offset + i + 1]
            hashes.append(hash_concat(left, right, self.hash_fn))

        if size % 2 == 1:
            last = hashes[offset + size - 1]
            if self.policy is OddLevelPolicy.DUPLICATE:
                hashes.append(hash_concat(last, last, self.hash_fn))
            else:
                logger.warning(
                    "Dropping unpaired node %d at level %d; it is not committed to by the root",
                    size - 1, depth,
                )

        return len(hashes) - offset - size


def build(
    records: Sequence[Record],
    *,
    hash_fn: Union[HashFunction, str, None] = None,
    policy: Union[OddLevelPolicy, str, None] = None,
) -> HashArray:
    """Build the hash array for records. See TreeBuilder.build."""
    return TreeBuilder(hash_fn=hash_fn, policy=policy).build(records)


def hash_at(hash_array: HashArray, index: int) -> bytes:
    """Bounds-checked accessor. See HashArray.hash_at."""
    return hash_array.hash_at(index)


def compute_root(
    records: Sequence[Record],
    *,
    hash_fn: Union[HashFunction, str, None] = None,
    policy: Union[OddLevelPolicy, str, None] = None,
) -> bytes:
    """Root hash of the tree over records."""
    return build(records, hash_fn=hash_fn, policy=policy).root


__all__ = [
    "OddLevelPolicy",
    "HashArray",
    "TreeBuilder",
    "compute_level_sizes",
    "build",
    "hash_at",
    "compute_root",
]
