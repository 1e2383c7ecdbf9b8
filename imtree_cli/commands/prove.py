"""
CLI Prove Command

Build a tree from values and emit the inclusion proof for one index.
The values must fill the tree (2**depth of them) so the proof commits to them.

Usage:
    imtree prove 2 foo bar baz yup [--depth N] [--out proof.json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from imtree_cli.commands.build import EXIT_SUCCESS, build_tree_from_args


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    tree = build_tree_from_args(args)
    proof = tree.prove(args.index)
    tree.ensure_full()

    payload = json.dumps(proof.to_json_dict(), indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(payload + "\n")
        logger.info(f"Wrote proof for leaf {args.index} to {out_path}")
        print(f"Proof for leaf {args.index} written to {out_path}")
    else:
        print(payload)

    return EXIT_SUCCESS
