"""
CLI Demo Command

Build the depth-3 sample tree over eight words, then check that every
leaf verifies at its own index and fails at its neighbour's.

Usage:
    imtree demo [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from imtree.crypto.hashing import to_hex
from imtree.merkle import construct_tree

from imtree_cli.commands.build import EXIT_SUCCESS, EXIT_VERIFICATION_FAILED


logger = logging.getLogger(__name__)

DEMO_DEPTH = 3
DEMO_VALUES = ["foo", "bar", "baz", "yup", "maw", "wap", "pit", "fos"]


def run_demo() -> dict:
    """Build the sample tree and collect per-leaf verification results."""
    tree = construct_tree(DEMO_DEPTH, declared_root=b"")
    tree.extend(DEMO_VALUES)

    results = []
    for i, value in enumerate(DEMO_VALUES):
        proof = tree.prove(i)
        wrong = DEMO_VALUES[(i + 1) % len(DEMO_VALUES)]
        results.append({
            "index": i,
            "value": value,
            "verifies": tree.verify(value, proof),
            "rejects_other_value": not tree.verify(wrong, proof),
        })

    return {
        "depth": tree.depth,
        "root": to_hex(tree.root),
        "results": results,
        "ok": all(r["verifies"] and r["rejects_other_value"] for r in results),
    }


def demo_cmd(args: Namespace) -> int:
    """Execute the demo command."""
    report = run_demo()

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(f"depth: {report['depth']}")
        print(f"root: {report['root']}")
        for r in report["results"]:
            status = "✓" if r["verifies"] and r["rejects_other_value"] else "✗"
            print(f"  {status} [{r['index']}] {r['value']}")

    if report["ok"]:
        return EXIT_SUCCESS
    logger.warning("Demo tree failed self-verification")
    return EXIT_VERIFICATION_FAILED
