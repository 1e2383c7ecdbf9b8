"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m imtree_cli demo [--json]
    python -m imtree_cli build foo bar baz yup [--depth N] [--declared-root 0x..] [--levels] [--json]
    python -m imtree_cli prove INDEX foo bar baz yup [--depth N] [--out proof.json]
    python -m imtree_cli verify VALUE proof.json [--root 0x..] [--json]
    python -m imtree_cli config --init | --show

Environment Variables:
    IMTREE_DEPTH                Default tree depth (default: 3)
    IMTREE_ALGORITHM            Digest algorithm (default: sha256)
    IMTREE_DECLARED_ROOT        Declared root digest, 0x hex
    IMTREE_LOG_LEVEL            Log level (default: INFO)
    IMTREE_LOG_FILE             Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from imtree import __version__
from imtree.config import get_default_config_template
from imtree.crypto.hashing import available_algorithms
from imtree.schemas.errors import MerkleTreeException
from imtree_cli.commands import build, demo, prove, verify
from imtree_cli.config import DEFAULT_CONFIG_NAME, load_config


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
        force=True,
    )


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--depth", "-d",
        type=int,
        default=None,
        help="Tree depth (default: from config)",
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        choices=available_algorithms(),
        default=None,
        help="Digest algorithm (default: from config)",
    )
    parser.add_argument(
        "--declared-root",
        type=str,
        default=None,
        help="Declared root digest as 0x hex (default: from config)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="imtree",
        description="Incremental Merkle tree CLI - build trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/imtree/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Build the sample depth-3 tree and self-verify every leaf",
    )
    demo_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree from values and print its root",
        description="Append the given values in order and report the resulting tree state.",
    )
    build_parser.add_argument("values", nargs="*", help="Leaf values, in index order")
    _add_tree_arguments(build_parser)
    build_parser.add_argument(
        "--levels",
        action="store_true",
        default=False,
        help="Include every level's digests",
    )
    build_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one leaf",
        description="Append the given values in order and emit the proof for INDEX as JSON.",
    )
    prove_parser.add_argument("index", type=int, help="Leaf index to prove")
    prove_parser.add_argument(
        "values", nargs="+", help="Leaf values, in index order; must fill the tree (2**depth values)"
    )
    _add_tree_arguments(prove_parser)
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof JSON to this file instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a value against a proof file",
        description="Recompute the root from VALUE and the proof's siblings and compare.",
    )
    verify_parser.add_argument("value", type=str, help="Claimed leaf value")
    verify_parser.add_argument("proof_path", type=str, help="Path to proof JSON")
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Also require the proof's root to equal this 0x hex digest",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
    )
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
        print("You can also use environment variables (IMTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: imtree config [--init|--show]")
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

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleTreeException as e:
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
