"""
Hashing and Encoding Unit Tests
Tests for txmerkle/crypto/hashing.py and txmerkle/crypto/encoding.py

Tests:
- keccak256 / sha256 known values
- algorithm registry lookup
- parent hashing order
- to_hex/from_hex round trip and errors
- packed record encoding and leaf hashing
"""
import hashlib

import pytest
from eth_utils import keccak

from txmerkle.crypto.encoding import encode_packed, hash_record
from txmerkle.crypto.hashing import (
    DEFAULT_HASH_ALGORITHM,
    HASH_SIZE,
    algorithm_name,
    available_algorithms,
    from_hex,
    get_hash_function,
    hash_concat,
    keccak256,
    sha256,
    to_hex,
)
from txmerkle.schemas.errors import ConfigurationException, InvalidInputError

from fixtures import TRANSACTIONS, identity_hash


class TestKeccak256:
    """Tests for keccak256()."""

    def test_empty_input_known_value(self):
        """Ethereum Keccak-256 of empty bytes, not NIST SHA3-256."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_abc_known_value(self):
        assert keccak256(b"abc").hex() == (
            "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"
        )

    def test_not_sha3_256(self):
        assert keccak256(b"") != hashlib.sha3_256(b"").digest()

    def test_digest_size(self):
        assert len(keccak256(b"anything")) == HASH_SIZE


class TestSha256:
    """Tests for sha256()."""

    def test_matches_hashlib(self):
        assert sha256(b"hello") == hashlib.sha256(b"hello").digest()

    def test_empty_bytes(self):
        assert sha256(b"").hex() == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )


class TestRegistry:
    """Tests for get_hash_function() and algorithm_name()."""

    def test_default_is_keccak(self):
        assert DEFAULT_HASH_ALGORITHM == "keccak256"
        assert get_hash_function() is keccak256
        assert get_hash_function(None) is keccak256

    def test_lookup_is_case_insensitive(self):
        assert get_hash_function("SHA256") is sha256
        assert get_hash_function(" Keccak256 ") is keccak256

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ConfigurationException, match="Unknown hash algorithm"):
            get_hash_function("md5")

    def test_available_algorithms(self):
        assert available_algorithms() == ["keccak256", "sha256"]

    def test_algorithm_name_round_trip(self):
        for name in available_algorithms():
            assert algorithm_name(get_hash_function(name)) == name

    def test_algorithm_name_for_injected_function(self):
        assert algorithm_name(identity_hash) == "identity_hash"


class TestHashConcat:
    """Tests for hash_concat()."""

    def test_hashes_left_then_right(self):
        left, right = keccak256(b"l"), keccak256(b"r")
        assert hash_concat(left, right) == keccak(left + right)

    def test_order_matters(self):
        a, b = keccak256(b"a"), keccak256(b"b")
        assert hash_concat(a, b) != hash_concat(b, a)

    def test_injected_hash(self):
        assert hash_concat(b"ab", b"cd", identity_hash) == b"abcd"


class TestHex:
    """Tests for to_hex() and from_hex()."""

    def test_round_trip(self):
        data = keccak256(b"x")
        assert from_hex(to_hex(data)) == data

    def test_to_hex_prefix(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_missing_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_invalid_characters(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")


class TestEncodePacked:
    """Tests for the canonical record encoding."""

    def test_string_is_raw_utf8(self):
        """Matches solidityPacked(["string"], [tx]): no length prefix or padding."""
        for tx in TRANSACTIONS:
            assert encode_packed(tx) == tx.encode("utf-8")

    def test_reference_transaction_hex(self):
        assert to_hex(encode_packed("TX1: Maria => Alice")) == "0x" + b"TX1: Maria => Alice".hex()

    def test_non_ascii(self):
        assert encode_packed("Ωmega") == "Ωmega".encode("utf-8")

    def test_empty_string(self):
        assert encode_packed("") == b""

    def test_bytes_like_pass_through(self):
        assert encode_packed(b"\x00\x01") == b"\x00\x01"
        assert encode_packed(bytearray(b"ab")) == b"ab"
        assert encode_packed(memoryview(b"cd")) == b"cd"

    def test_rejects_other_types(self):
        with pytest.raises(InvalidInputError, match="int"):
            encode_packed(42)


class TestHashRecord:
    """Tests for hash_record()."""

    def test_matches_packed_keccak(self):
        """Equivalent to solidityPackedKeccak256(["string"], [tx])."""
        for tx in TRANSACTIONS:
            assert hash_record(tx) == keccak(tx.encode("utf-8"))

    def test_injected_hash(self):
        assert hash_record("abc", identity_hash) == b"abc"
        assert hash_record("abc", sha256) == hashlib.sha256(b"abc").digest()
