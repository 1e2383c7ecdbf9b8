"""
CLI Build Command

Build a tree from values given on the command line and report its state.

Usage:
    imtree build foo bar baz yup [--depth N] [--declared-root 0x..] [--json] [--levels]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from imtree.crypto.hashing import from_hex, to_hex
from imtree.merkle import IncrementalMerkleTree
from imtree.schemas.errors import TreeConfigurationException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    depth: int = 0
    capacity: int = 0
    next_index: int = 0
    algorithm: str = ""
    root: str = ""
    declared_root: str = ""
    root_final: bool = False
    root_matches_declared: bool = False
    levels: list[list[str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["levels"]:
            del d["levels"]
        return d


def build_tree_from_args(args: Namespace) -> IncrementalMerkleTree:
    """
    Construct a tree from CLI args, falling back to the loaded config,
    and append args.values.
    """
    tree_config = args.runtime_config.tree

    depth = args.depth if getattr(args, "depth", None) is not None else tree_config.depth
    algorithm = getattr(args, "algorithm", None) or tree_config.algorithm

    declared_hex = getattr(args, "declared_root", None)
    if declared_hex:
        try:
            declared_root = from_hex(declared_hex)
        except ValueError as e:
            raise TreeConfigurationException(str(e), field_path="declared_root") from e
    else:
        declared_root = tree_config.declared_root_bytes()

    tree = IncrementalMerkleTree(
        depth=depth,
        declared_root=declared_root,
        algorithm=algorithm,
    )
    tree.extend(args.values)
    logger.info(f"Appended {tree.next_index} of {tree.capacity} leaves")
    if not tree.is_full:
        logger.warning(
            f"Root is not final: {tree.remaining} of {tree.capacity} leaf slots are empty"
        )
    return tree


def build_summary(tree: IncrementalMerkleTree, include_levels: bool = False) -> BuildSummary:
    """Build a BuildSummary from a tree."""
    summary = BuildSummary(
        depth=tree.depth,
        capacity=tree.capacity,
        next_index=tree.next_index,
        algorithm=tree.algorithm,
        root=to_hex(tree.root),
        root_final=tree.is_full,
        declared_root=to_hex(tree.declared_root),
        root_matches_declared=tree.matches_declared_root(),
    )
    if include_levels:
        summary.levels = [
            [to_hex(node) for node in tree.level(d)]
            for d in range(tree.depth + 1)
        ]
    return summary


def print_summary_human(summary: BuildSummary) -> None:
    """Print summary in human-readable format."""
    print(f"depth: {summary.depth}")
    print(f"leaves: {summary.next_index}/{summary.capacity}")
    print(f"algorithm: {summary.algorithm}")
    print(f"root: {summary.root}")
    if not summary.root_final:
        print(
            f"WARNING: root not final, {summary.capacity - summary.next_index} "
            f"leaf slots still empty"
        )
    print(f"declared_root: {summary.declared_root}")
    print(f"root_matches_declared: {str(summary.root_matches_declared).lower()}")

    for d, level in enumerate(summary.levels):
        print(f"\nlevel {d}:")
        for i, node in enumerate(level):
            print(f"  [{i}] {node}")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    tree = build_tree_from_args(args)
    summary = build_summary(tree, include_levels=args.levels)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
