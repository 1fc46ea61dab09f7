"""
CLI Build Command

Build the hash array for a record set and print or save it.

Usage:
    txmerkle build "TX1: Maria => Alice" "TX2: Alice => Shara" [--out tree.json] [--json]
    txmerkle build --file records.txt [--out tree.json] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from txmerkle.crypto.hashing import to_hex
from txmerkle.merkle.tree_builder import HashArray, TreeBuilder
from txmerkle.schemas.documents import TreeDocument, save_document
from txmerkle.schemas.errors import InvalidInputError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_records(records: list[str] | None, file: str | None) -> list[str]:
    """
    Collect records from positional arguments or a file (one per line).

    Raises:
        InvalidInputError: If both or neither source is given
    """
    if records and file:
        raise InvalidInputError("Give records either as arguments or with --file, not both")
    if file:
        path = Path(file)
        if not path.exists():
            raise InvalidInputError(f"Records file not found: {path}")
        return path.read_text(encoding="utf-8").splitlines()
    if records:
        return list(records)
    raise InvalidInputError("No records given")


def builder_from_args(args: Namespace) -> TreeBuilder:
    """TreeBuilder configured from the resolved runtime config."""
    tree_config = args.runtime_config.tree
    return TreeBuilder(hash_fn=tree_config.hash_function, policy=tree_config.policy)


def print_tree_human(tree: HashArray) -> None:
    """Print a built tree in human-readable format."""
    print(f"records: {tree.leaf_count}")
    print(f"hash_algorithm: {tree.hash_algorithm}")
    print(f"odd_level_policy: {tree.policy.value}")
    print(f"levels: {', '.join(str(s) for s in tree.level_sizes)}")
    print(f"hashes: {len(tree)}")

    for depth, offset in enumerate(tree.level_offsets):
        label = "leaves" if depth == 0 else f"level {depth}"
        print(f"\n{label}:")
        for position, node in enumerate(tree.level(depth)):
            print(f"  [{offset + position}] {to_hex(node)}")

    print(f"\nroot: {to_hex(tree.root)}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    records = load_records(args.records, args.file)
    tree = builder_from_args(args).build(records)
    document = TreeDocument.from_hash_array(tree)

    if args.out:
        path = save_document(document, args.out)
        logger.info("Wrote tree document to %s", path)

    if args.json:
        print(json.dumps(document.model_dump(mode="json"), indent=2))
    else:
        print_tree_human(tree)
        if args.out:
            print(f"\nsaved: {args.out}", file=sys.stderr)

    return EXIT_SUCCESS
