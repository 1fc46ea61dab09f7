"""
Crypto - Canonical Record Encoding

A record's leaf hash is H(encode_packed(record)). The encoding matches
Solidity's ``abi.encodePacked(string)``: the raw UTF-8 bytes of the string,
with no length prefix, padding or type tag. Anyone rebuilding a proof
off-chain must reproduce it exactly.
"""
from __future__ import annotations

from typing import Union

from txmerkle.crypto.hashing import HashFunction, keccak256
from txmerkle.schemas.errors import InvalidInputError


Record = Union[str, bytes, bytearray, memoryview]


def encode_packed(record: Record) -> bytes:
    """
    Encode a record to its canonical packed bytes.

    Strings are UTF-8 encoded; bytes-like records are copied unchanged.

    Raises:
        InvalidInputError: If the record is neither a string nor bytes-like
    """
    if isinstance(record, str):
        return record.encode("utf-8")
    if isinstance(record, (bytes, bytearray, memoryview)):
        return bytes(record)
    raise InvalidInputError(
        f"Record must be str or bytes-like, got {type(record).__name__}"
    )


def hash_record(record: Record, hash_fn: HashFunction = keccak256) -> bytes:
    """
    Compute the leaf hash of a record: H(encode_packed(record)).

    With the default hash this equals ethers'
    ``solidityPackedKeccak256(["string"], [record])``.
    """
    return hash_fn(encode_packed(record))


__all__ = [
    "Record",
    "encode_packed",
    "hash_record",
]
