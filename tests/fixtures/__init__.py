"""
Test fixtures package for imtree tests.

Usage:
    from fixtures import make_filled_tree, SAMPLE_VALUES

    def test_something():
        tree = make_filled_tree(SAMPLE_VALUES, depth=3)
"""

from .common import (
    SAMPLE_VALUES,
    expected_root,
    make_filled_tree,
    make_tree,
)

__all__ = [
    "SAMPLE_VALUES",
    "expected_root",
    "make_filled_tree",
    "make_tree",
]
