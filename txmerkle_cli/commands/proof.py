"""
CLI Proof Command

Extract the sibling path for one leaf, from records or from a saved tree.

Usage:
    txmerkle proof --index 2 "TX1: ..." "TX2: ..." "TX3: ..." [--out proof.json] [--json]
    txmerkle proof --index 2 --file records.txt
    txmerkle proof --index 2 --tree tree.json [--record "TX3: ..."]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from txmerkle.crypto.encoding import hash_record
from txmerkle.crypto.hashing import get_hash_function, to_hex
from txmerkle.merkle.merkle_proofs import MerkleProof, extract_proof
from txmerkle.schemas.documents import ProofDocument, load_tree_document, save_document
from txmerkle.schemas.errors import InvalidInputError
from txmerkle_cli.commands.build import builder_from_args, load_records


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_proof_human(proof: MerkleProof, record: str | None) -> None:
    """Print a proof in human-readable format."""
    if record is not None:
        print(f"record: {record}")
    print(f"index: {proof.index}")
    print(f"leaf: {to_hex(proof.leaf)}")
    print(f"root: {to_hex(proof.root)}")
    print(f"siblings ({len(proof.siblings)}):")
    for sibling in proof.siblings:
        print(f"  {to_hex(sibling)}")


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    if args.tree:
        if args.records or args.file:
            raise InvalidInputError("Give either --tree or records, not both")
        tree = load_tree_document(args.tree).to_hash_array()
        record = args.record
    else:
        records = load_records(args.records, args.file)
        tree = builder_from_args(args).build(records)
        record = args.record
        if record is None and 0 <= args.index < len(records):
            record = records[args.index]

    proof = extract_proof(tree, args.index)

    if record is not None:
        leaf = hash_record(record, get_hash_function(tree.hash_algorithm))
        if leaf != proof.leaf:
            raise InvalidInputError(
                f"Record does not match the leaf at index {args.index}",
                record_index=args.index,
            )

    document = None
    if record is not None:
        document = ProofDocument.from_proof(proof, record, tree.hash_algorithm)

    if args.out:
        if document is None:
            raise InvalidInputError("--out needs the record text; pass --record with --tree")
        path = save_document(document, args.out)
        logger.info("Wrote proof document to %s", path)

    if args.json:
        if document is not None:
            data = document.model_dump(mode="json")
        else:
            data = {
                "hash_algorithm": tree.hash_algorithm,
                "index": proof.index,
                "leaf": to_hex(proof.leaf),
                "root": to_hex(proof.root),
                "siblings": [to_hex(s) for s in proof.siblings],
            }
        print(json.dumps(data, indent=2))
    else:
        print_proof_human(proof, record)

    return EXIT_SUCCESS
