"""
txmerkle CLI

Command-line interface for building Merkle trees and checking proofs.

Usage:
    python -m txmerkle_cli build "TX1: Maria => Alice" "TX2: Alice => Shara" --out tree.json
    python -m txmerkle_cli proof --index 1 --tree tree.json --record "TX2: Alice => Shara"
    python -m txmerkle_cli verify --proof-file proof.json
    python -m txmerkle_cli encode "TX1: Maria => Alice"
"""

__version__ = "0.1.0"
