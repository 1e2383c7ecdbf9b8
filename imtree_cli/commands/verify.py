"""
CLI Verify Command

Verify a leaf value against a proof file offline.

Usage:
    imtree verify baz proof.json [--root 0x..] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from imtree.crypto.hashing import from_hex, to_hex
from imtree.merkle import InclusionProof, MerkleVerifier
from imtree.schemas.errors import MalformedProofException

from imtree_cli.commands.build import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Outcome of a proof verification for CLI output."""
    proof_path: str = ""
    value: str = ""
    leaf_index: int | None = None
    root: str = ""
    ok: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.error is None:
            del d["error"]
        return d


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"value: {summary.value}")
    if summary.leaf_index is not None:
        print(f"leaf_index: {summary.leaf_index}")
    if summary.root:
        print(f"root: {summary.root}")
    print(f"valid: {str(summary.ok).lower()}")
    if summary.error:
        print(f"  ✗ {summary.error}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(proof_path=str(proof_path), value=args.value)

    try:
        proof = InclusionProof.from_json_dict(json.loads(proof_path.read_text()))
    except (json.JSONDecodeError, MalformedProofException) as e:
        logger.warning(f"Could not decode proof: {e}")
        summary.error = f"Malformed proof: {e}"
        proof = None

    if proof is not None:
        summary.leaf_index = proof.leaf_index
        summary.root = to_hex(proof.root)
        if args.root:
            try:
                expected_root = from_hex(args.root)
            except ValueError as e:
                print(f"Error: invalid --root: {e}", file=sys.stderr)
                return EXIT_RUNTIME_ERROR
            summary.ok = MerkleVerifier.verify_against_root(args.value, proof, expected_root)
        else:
            summary.ok = MerkleVerifier.verify(args.value, proof)
        if not summary.ok:
            summary.error = "Recomputed root does not match"

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
