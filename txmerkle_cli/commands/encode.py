"""
CLI Encode Command

Show a record's packed encoding and leaf hash, for checking an
independent implementation against this one.

Usage:
    txmerkle encode "TX1: Maria => Alice" [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace

from txmerkle.crypto.encoding import encode_packed
from txmerkle.crypto.hashing import to_hex


EXIT_SUCCESS = 0


def encode_cmd(args: Namespace) -> int:
    """Execute the encode command."""
    tree_config = args.runtime_config.tree
    encoded = encode_packed(args.record)
    leaf = tree_config.hash_function(encoded)

    data = {
        "record": args.record,
        "encoded": to_hex(encoded),
        "hash_algorithm": tree_config.hash_algorithm,
        "leaf_hash": to_hex(leaf),
    }

    if args.json:
        print(json.dumps(data, indent=2))
    else:
        for key, value in data.items():
            print(f"{key}: {value}")

    return EXIT_SUCCESS
