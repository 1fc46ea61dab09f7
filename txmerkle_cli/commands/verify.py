"""
CLI Verify Command

Check a membership claim offline. Needs no tree, only the claim.

Usage:
    txmerkle verify "TX3: Alice => Elisabeth" --index 2 --root 0x... --proof 0x... 0x...
    txmerkle verify --proof-file proof.json ["<other record>"]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field

from txmerkle.merkle.proof_verifier import ProofVerifier
from txmerkle.schemas.documents import load_proof_document
from txmerkle.schemas.errors import InvalidInputError


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of a verification for CLI output."""
    record: str = ""
    index: int = 0
    root: str = ""
    hash_algorithm: str = ""
    siblings: list[str] = field(default_factory=list)
    valid: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def summary_from_args(args: Namespace) -> VerifySummary:
    """Assemble the claim from a proof file or from explicit flags."""
    if args.proof_file:
        document = load_proof_document(args.proof_file)
        return VerifySummary(
            record=args.record if args.record is not None else document.record,
            index=document.index,
            root=document.root,
            hash_algorithm=document.hash_algorithm,
            siblings=list(document.siblings),
        )

    missing = [
        flag for flag, value in (("RECORD", args.record), ("--index", args.index), ("--root", args.root))
        if value is None
    ]
    if missing:
        raise InvalidInputError(f"Missing {', '.join(missing)} (or use --proof-file)")

    return VerifySummary(
        record=args.record,
        index=args.index,
        root=args.root,
        hash_algorithm=args.runtime_config.tree.hash_algorithm,
        siblings=list(args.proof or []),
    )


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"record: {summary.record}")
    print(f"index: {summary.index}")
    print(f"root: {summary.root}")
    print(f"hash_algorithm: {summary.hash_algorithm}")
    print(f"siblings: {len(summary.siblings)}")
    print(f"valid: {str(summary.valid).lower()}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 valid, 2 not valid)
    """
    summary = summary_from_args(args)
    verifier = ProofVerifier(summary.hash_algorithm)
    summary.valid = verifier.verify(summary.record, summary.index, summary.root, summary.siblings)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
