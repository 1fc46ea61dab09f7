"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m txmerkle_cli build RECORD... [--file PATH] [--out PATH] [--json]
    python -m txmerkle_cli proof --index I (RECORD... | --file PATH | --tree PATH) [--record TEXT] [--out PATH] [--json]
    python -m txmerkle_cli verify RECORD --index I --root HEX --proof HEX... [--json]
    python -m txmerkle_cli verify [RECORD] --proof-file PATH [--json]
    python -m txmerkle_cli encode RECORD [--json]
    python -m txmerkle_cli config --init | --show

Environment Variables:
    TXMERKLE_HASH_ALGORITHM     keccak256 (default) or sha256
    TXMERKLE_ODD_LEVEL_POLICY   duplicate (default) or drop
    TXMERKLE_LOG_LEVEL          Log level (default: INFO)
    TXMERKLE_LOG_FILE           Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from txmerkle.config.runtime import set_default_config
from txmerkle.crypto.hashing import available_algorithms
from txmerkle.merkle.tree_builder import OddLevelPolicy
from txmerkle.schemas.errors import TxMerkleException
from txmerkle_cli.commands import build, proof, verify, encode
from txmerkle_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="txmerkle",
        description="Build Merkle trees over ordered records and verify membership proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./txmerkle.yaml or ~/.config/txmerkle/config.yaml)",
    )
    parser.add_argument(
        "--hash",
        dest="hash_algorithm",
        type=str,
        default=None,
        choices=available_algorithms(),
        help="Hash algorithm (overrides config)",
    )
    parser.add_argument(
        "--policy",
        dest="odd_level_policy",
        type=str,
        default=None,
        choices=[p.value for p in OddLevelPolicy],
        help="Odd-level policy (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build the hash array for a record set",
        description="Hash every record, reduce level by level, and print the full array and root.",
    )
    build_parser.add_argument("records", nargs="*", help="Records, in order")
    build_parser.add_argument("--file", "-f", type=str, default=None, help="Read records from a file, one per line")
    build_parser.add_argument("--out", "-o", type=str, default=None, help="Write a tree document (JSON)")
    build_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    build_parser.set_defaults(func=build.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Extract the sibling path for one leaf",
        description="Read a membership proof out of a tree built from records or loaded from a tree document.",
    )
    proof_parser.add_argument("records", nargs="*", help="Records, in order")
    proof_parser.add_argument("--index", "-i", type=int, required=True, help="0-based leaf index")
    proof_parser.add_argument("--file", "-f", type=str, default=None, help="Read records from a file, one per line")
    proof_parser.add_argument("--tree", "-t", type=str, default=None, help="Tree document written by 'build --out'")
    proof_parser.add_argument("--record", "-r", type=str, default=None, help="Record text at --index (needed with --tree for --out)")
    proof_parser.add_argument("--out", "-o", type=str, default=None, help="Write a proof document (JSON)")
    proof_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof",
        description="Recompute the root from a record and its sibling path. Exit code 2 if it does not match.",
    )
    verify_parser.add_argument("record", nargs="?", default=None, help="The claimed record")
    verify_parser.add_argument("--index", "-i", type=int, default=None, help="Claimed 0-based leaf index")
    verify_parser.add_argument("--root", type=str, default=None, help="Claimed root (0x hex)")
    verify_parser.add_argument("--proof", "-p", nargs="*", default=None, help="Sibling hashes, leaf level first (0x hex)")
    verify_parser.add_argument("--proof-file", type=str, default=None, help="Proof document written by 'proof --out'")
    verify_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- encode command ---
    encode_parser = subparsers.add_parser(
        "encode",
        help="Show a record's packed encoding and leaf hash",
    )
    encode_parser.add_argument("record", type=str, help="Record to encode")
    encode_parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    encode_parser.set_defaults(func=encode.encode_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument("--init", action="store_true", default=False, help="Create a template configuration file")
    config_parser.add_argument("--show", action="store_true", default=False, help="Show the resolved configuration")
    config_parser.add_argument("--path", type=str, default="txmerkle.yaml", help="Path for --init (default: txmerkle.yaml)")
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (TXMERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: txmerkle config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(
            args.config,
            hash_algorithm=args.hash_algorithm,
            odd_level_policy=args.odd_level_policy,
            log_level=args.log_level,
        )
    except TxMerkleException as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=config.logging.level, log_file=config.logging.file)
    set_default_config(config)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except TxMerkleException as e:
        if getattr(args, "json", False):
            print(e.to_error_model().model_dump_json(indent=2))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (OSError, ValueError) as e:
        if config.logging.level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
