"""
CLI command modules.
"""

from txmerkle_cli.commands import build, proof, verify, encode

__all__ = ["build", "proof", "verify", "encode"]
