"""
imtree CLI

Command-line interface for building incremental Merkle trees and
generating / verifying inclusion proofs.

Usage:
    python -m imtree_cli demo
    python -m imtree_cli build foo bar baz yup --depth 2
    python -m imtree_cli prove 1 foo bar baz yup --depth 2 --out proof.json
    python -m imtree_cli verify bar proof.json
"""

__version__ = "0.1.0"
