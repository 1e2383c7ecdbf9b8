"""
Common test fixtures shared by all modules.

Provides factory functions for trees and proofs:
- make_tree: empty tree of a given depth
- make_filled_tree: tree with values appended in order
- expected_root: root computed by hand from a full leaf list
"""

from typing import Any, Optional, Sequence

from imtree.crypto.hashing import sha256
from imtree.merkle import IncrementalMerkleTree
from imtree.schemas.canonical import encode_value


SAMPLE_VALUES = ["foo", "bar", "baz", "yup", "maw", "wap", "pit", "fos"]


def make_tree(depth: int = 3, declared_root: bytes = b"", **kwargs: Any) -> IncrementalMerkleTree:
    """Create an empty tree."""
    return IncrementalMerkleTree(depth=depth, declared_root=declared_root, **kwargs)


def make_filled_tree(
    values: Optional[Sequence[Any]] = None,
    depth: int = 3,
    declared_root: bytes = b"",
    **kwargs: Any,
) -> IncrementalMerkleTree:
    """Create a tree and append values (default: the eight sample words)."""
    tree = make_tree(depth=depth, declared_root=declared_root, **kwargs)
    for value in SAMPLE_VALUES if values is None else values:
        tree.append(value)
    return tree


def expected_root(values: Sequence[Any], digest=sha256) -> bytes:
    """
    Root of a full tree computed level by level, independent of the
    incremental implementation. len(values) must be a power of two.
    """
    level = [digest(encode_value(v)) for v in values]
    while len(level) > 1:
        level = [digest(level[i] + level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]
