"""
Core cryptographic utilities.

Hash functions, canonical record encoding and hex helpers shared by the
tree builder and the proof verifier.
"""
from .hashing import (
    HashFunction,
    DEFAULT_HASH_ALGORITHM,
    HASH_SIZE,
    keccak256,
    sha256,
    available_algorithms,
    get_hash_function,
    algorithm_name,
    hash_concat,
    to_hex,
    from_hex,
)
from .encoding import (
    Record,
    encode_packed,
    hash_record,
)

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
    "Record",
    "encode_packed",
    "hash_record",
]
