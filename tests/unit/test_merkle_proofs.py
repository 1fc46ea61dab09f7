"""
Proof Extraction Unit Tests
Tests for txmerkle/merkle/merkle_proofs.py

Covers:
1. Sibling paths for the reference transactions
2. Trailing odd nodes under the duplicate policy
3. Unprovable leaves under the drop policy
4. Index validation
"""
import pytest

from txmerkle.merkle.merkle_proofs import MerkleProof, extract_proof
from txmerkle.merkle.proof_verifier import verify, verify_proof
from txmerkle.merkle.tree_builder import build
from txmerkle.schemas.errors import IndexOutOfRangeError, InvalidInputError

from fixtures import TRANSACTIONS, identity_hash, make_letters, make_transactions


class TestMerkleProof:
    """MerkleProof value object."""

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            MerkleProof(leaf=b"a", index=-1, siblings=[], root=b"a")

    def test_depth(self):
        assert MerkleProof(leaf=b"a", index=0, siblings=[b"b", b"cd"], root=b"abcd").depth == 2

    def test_frozen(self):
        proof = MerkleProof(leaf=b"a", index=0, siblings=[], root=b"a")
        with pytest.raises(AttributeError):
            proof.index = 1


class TestReferenceProofs:
    """Sibling paths over the four reference transactions."""

    def test_third_transaction(self, keccak_tree):
        proof = extract_proof(keccak_tree, 2)
        assert proof.siblings == [keccak_tree[3], keccak_tree[4]]
        assert proof.leaf == keccak_tree[2]
        assert proof.root == keccak_tree.root
        assert proof.index == 2

    def test_first_transaction(self, keccak_tree):
        assert extract_proof(keccak_tree, 0).siblings == [keccak_tree[1], keccak_tree[5]]

    def test_last_transaction(self, keccak_tree):
        assert extract_proof(keccak_tree, 3).siblings == [keccak_tree[2], keccak_tree[4]]

    def test_every_proof_verifies(self, keccak_tree):
        for i, tx in enumerate(TRANSACTIONS):
            proof = extract_proof(keccak_tree, i)
            assert verify(tx, i, keccak_tree.root, proof.siblings, hash_fn="keccak256")
            assert verify_proof(proof, hash_fn="keccak256")


class TestDuplicatePolicyProofs:
    """A trailing unpaired node is its own sibling."""

    def test_five_leaves_last(self, identity_builder):
        tree = identity_builder.build(make_letters(5))
        proof = extract_proof(tree, 4)
        assert proof.siblings == [b"e", b"ee", b"abcd"]
        assert proof.root == b"abcdeeee"

    def test_five_leaves_fourth(self, identity_builder):
        tree = identity_builder.build(make_letters(5))
        assert extract_proof(tree, 3).siblings == [b"c", b"ab", b"eeee"]

    def test_single_leaf(self):
        tree = build(["only"], hash_fn="keccak256")
        proof = extract_proof(tree, 0)
        assert proof.siblings == []
        assert proof.root == proof.leaf

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 6, 7, 9, 12])
    def test_every_leaf_verifies(self, n):
        records = make_transactions(n)
        tree = build(records, hash_fn="keccak256", policy="duplicate")
        for i, record in enumerate(records):
            proof = extract_proof(tree, i)
            assert verify(record, i, tree.root, proof.siblings, hash_fn="keccak256")

    def test_proof_length_is_tree_height(self):
        tree = build(make_transactions(9), hash_fn="keccak256")
        assert extract_proof(tree, 0).depth == tree.depth - 1


class TestDropPolicyProofs:
    """Leaves dropped from the tree have no proof."""

    def test_paired_leaf_verifies(self, drop_builder):
        tree = drop_builder.build(make_letters(6))
        proof = extract_proof(tree, 0)
        assert proof.siblings == [b"b", b"cd"]
        assert verify_proof(proof, hash_fn=identity_hash)

    def test_dropped_leaf(self, drop_builder):
        tree = drop_builder.build(make_letters(5))
        with pytest.raises(InvalidInputError, match="not committed"):
            extract_proof(tree, 4)

    def test_dropped_branch(self, drop_builder):
        """Leaves 4 and 5 pair up, but their parent is dropped one level higher."""
        tree = drop_builder.build(make_letters(6))
        for index in (4, 5):
            with pytest.raises(InvalidInputError) as exc_info:
                extract_proof(tree, index)
            assert exc_info.value.details["level"] == 1

    @pytest.mark.parametrize("n", [3, 5, 6, 7])
    def test_provable_leaves_verify(self, n):
        records = make_transactions(n)
        tree = build(records, hash_fn="keccak256", policy="drop")
        provable = 0
        for i, record in enumerate(records):
            try:
                proof = extract_proof(tree, i)
            except InvalidInputError:
                continue
            provable += 1
            assert verify(record, i, tree.root, proof.siblings, hash_fn="keccak256")
        assert provable >= 2


class TestIndexValidation:
    """Only leaf positions can be proven."""

    def test_past_last_leaf(self, keccak_tree):
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            extract_proof(keccak_tree, 4)
        assert exc_info.value.size == 4

    def test_negative(self, keccak_tree):
        with pytest.raises(IndexOutOfRangeError):
            extract_proof(keccak_tree, -1)

    def test_non_integer(self, keccak_tree):
        with pytest.raises(InvalidInputError):
            extract_proof(keccak_tree, 1.0)

    def test_does_not_modify_tree(self, keccak_tree):
        before = tuple(keccak_tree)
        for i in range(4):
            extract_proof(keccak_tree, i)
        assert tuple(keccak_tree) == before
