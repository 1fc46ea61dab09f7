"""
Schemas - Tree and Proof Documents
File: documents.py

Purpose: JSON documents for handing a built tree or a single proof to
another party. Hashes are 0x hex. Every document names the hash algorithm,
since a proof is meaningless under any other one.

Not re-exported from txmerkle.schemas: it depends on txmerkle.merkle,
which itself depends on the error taxonomy in this package.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from txmerkle.crypto.encoding import hash_record
from txmerkle.crypto.hashing import HASH_SIZE, available_algorithms, from_hex, get_hash_function, to_hex
from txmerkle.merkle.merkle_proofs import MerkleProof
from txmerkle.merkle.proof_verifier import ProofVerifier
from txmerkle.merkle.tree_builder import HashArray, OddLevelPolicy
from txmerkle.schemas.errors import SchemaValidationException
from txmerkle.schemas.versioning import SCHEMA_VERSION, assert_supported_schema_version


def _validate_hash_hex(value: str) -> str:
    raw = from_hex(value)
    if len(raw) != HASH_SIZE:
        raise ValueError(f"Expected a {HASH_SIZE}-byte hash, got {len(raw)} bytes")
    return value.lower()


def _validate_algorithm(value: str) -> str:
    name = value.strip().lower()
    if name not in available_algorithms():
        raise ValueError(f"Unknown hash algorithm {value!r} (expected one of {available_algorithms()})")
    return name


def _require_registered(hash_algorithm: str) -> None:
    if hash_algorithm.strip().lower() not in available_algorithms():
        raise SchemaValidationException(
            f"Cannot serialise hashes from unregistered hash function {hash_algorithm!r}",
            field_path="hash_algorithm",
        )


class TreeDocument(BaseModel):
    """
    Serialised HashArray.

    Converts losslessly to and from HashArray; loading re-checks that the
    level layout matches the leaf count and policy.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    hash_algorithm: str = Field(..., description="Hash algorithm the tree was built with")
    odd_level_policy: str = Field(..., description="Odd-level policy: duplicate or drop")
    leaf_count: int = Field(..., ge=1, description="Number of records")
    level_sizes: list[int] = Field(..., min_length=1, description="Node count per level, leaves first")
    hashes: list[str] = Field(..., min_length=1, description="Flattened hash array, leaves first")
    root: str = Field(..., description="Root hash (last element of hashes)")

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        return _validate_algorithm(v)

    @field_validator("odd_level_policy")
    @classmethod
    def validate_odd_level_policy(cls, v: str) -> str:
        name = v.strip().lower()
        if name not in {p.value for p in OddLevelPolicy}:
            raise ValueError(f"Unknown odd-level policy {v!r}")
        return name

    @field_validator("hashes")
    @classmethod
    def validate_hashes(cls, v: list[str]) -> list[str]:
        return [_validate_hash_hex(h) for h in v]

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _validate_hash_hex(v)

    @model_validator(mode="after")
    def validate_root_is_last(self) -> "TreeDocument":
        """The root must be the final element of the array."""
        if self.hashes[-1] != self.root:
            raise ValueError("root does not match the last element of hashes")
        return self

    @classmethod
    def from_hash_array(cls, hash_array: HashArray) -> "TreeDocument":
        """
        Raises:
            SchemaValidationException: If the tree was built with a hash
                function outside the registry
        """
        _require_registered(hash_array.hash_algorithm)
        return cls(
            hash_algorithm=hash_array.hash_algorithm,
            odd_level_policy=hash_array.policy.value,
            leaf_count=hash_array.leaf_count,
            level_sizes=list(hash_array.level_sizes),
            hashes=[to_hex(h) for h in hash_array],
            root=to_hex(hash_array.root),
        )

    def to_hash_array(self) -> HashArray:
        """
        Rebuild the HashArray.

        Raises:
            SchemaValidationException: If the layout is inconsistent
        """
        return HashArray(
            hashes=tuple(from_hex(h) for h in self.hashes),
            leaf_count=self.leaf_count,
            level_sizes=tuple(self.level_sizes),
            policy=OddLevelPolicy.parse(self.odd_level_policy),
            hash_algorithm=self.hash_algorithm,
        )


class ProofDocument(BaseModel):
    """
    Serialised membership claim: a record, its index, a root and the path.

    Self-contained: verify() needs nothing else.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    hash_algorithm: str = Field(..., description="Hash algorithm of the tree")
    record: str = Field(..., description="The record being proven")
    index: int = Field(..., ge=0, description="0-based leaf position")
    root: str = Field(..., description="Claimed root hash")
    siblings: list[str] = Field(default_factory=list, description="Sibling hashes, leaf level first")

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        return _validate_algorithm(v)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _validate_hash_hex(v)

    @field_validator("siblings")
    @classmethod
    def validate_siblings(cls, v: list[str]) -> list[str]:
        return [_validate_hash_hex(h) for h in v]

    @classmethod
    def from_proof(cls, proof: MerkleProof, record: str, hash_algorithm: str) -> "ProofDocument":
        _require_registered(hash_algorithm)
        return cls(
            hash_algorithm=hash_algorithm,
            record=record,
            index=proof.index,
            root=to_hex(proof.root),
            siblings=[to_hex(s) for s in proof.siblings],
        )

    def to_proof(self) -> MerkleProof:
        """MerkleProof whose leaf is the hash of this document's record."""
        return MerkleProof(
            leaf=hash_record(self.record, get_hash_function(self.hash_algorithm)),
            index=self.index,
            siblings=[from_hex(s) for s in self.siblings],
            root=from_hex(self.root),
        )

    def verify(self) -> bool:
        """Check the claim with the document's own hash algorithm."""
        return ProofVerifier(self.hash_algorithm).verify(self.record, self.index, self.root, self.siblings)


Document = Union[TreeDocument, ProofDocument]


def save_document(document: Document, path: Union[str, Path]) -> Path:
    """Write a document as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return path


def _load(model: type[BaseModel], path: Union[str, Path]):
    path = Path(path)
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise SchemaValidationException(
            f"Invalid {model.__name__} in {path}: {e.error_count()} error(s)",
            field_path=".".join(str(p) for p in e.errors()[0]["loc"]) or None,
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def load_tree_document(path: Union[str, Path]) -> TreeDocument:
    """
    Read a TreeDocument from JSON.

    Raises:
        FileNotFoundError: If the file does not exist
        SchemaValidationException: If the content is not a valid document
    """
    return _load(TreeDocument, path)


def load_proof_document(path: Union[str, Path]) -> ProofDocument:
    """Read a ProofDocument from JSON. Raises like load_tree_document."""
    return _load(ProofDocument, path)


__all__ = [
    "TreeDocument",
    "ProofDocument",
    "save_document",
    "load_tree_document",
    "load_proof_document",
]
