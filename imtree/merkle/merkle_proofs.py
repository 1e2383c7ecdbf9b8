"""
Merkle Proofs Convenience Wrappers
Thin class-based wrappers around IncrementalMerkleTree for one-shot use.

This module provides:
- MerkleProver: Build a tree from a list of values and prove leaves
- MerkleVerifier: Verify proofs without holding a tree
- compute_tree_depth: Smallest depth whose capacity fits a leaf count
"""
from __future__ import annotations

from typing import Any, Optional, Sequence

from imtree.crypto.hashing import DEFAULT_ALGORITHM, get_digest_function
from imtree.merkle.merkle_tree import (
    IncrementalMerkleTree,
    ProofLike,
    ValueEncoder,
    verify_inclusion_proof,
)
from imtree.merkle.models import InclusionProof
from imtree.schemas.canonical import encode_value
from imtree.schemas.errors import MerkleTreeException


def compute_tree_depth(num_leaves: int) -> int:
    """
    Smallest depth whose capacity (2**depth) holds ``num_leaves``.

    Zero or one leaf fits in a depth-0 tree.

    Raises:
        ValueError: If num_leaves is negative
    """
    if num_leaves < 0:
        raise ValueError(f"Leaf count must be non-negative, got {num_leaves}")
    depth = 0
    while 2 ** depth < num_leaves:
        depth += 1
    return depth


class MerkleProver:
    """
    Convenience class for building trees and generating proofs.

    prove() and compute_root() need a full tree: the value count must equal
    2**depth, otherwise the root does not yet commit to the values.

    Example:
        >>> proof = MerkleProver.prove(["a", "b", "c", "d"], index=1)
        >>> MerkleVerifier.verify("b", proof)
        True
    """

    @staticmethod
    def build(
        values: Sequence[Any],
        depth: Optional[int] = None,
        declared_root: bytes = b"",
        algorithm: str = DEFAULT_ALGORITHM,
        encoder: Optional[ValueEncoder] = None,
    ) -> IncrementalMerkleTree:
        """
        Construct a tree and append every value in order.

        The tree may be partially filled; check ``is_full`` before relying
        on its root.

        Args:
            values: Leaf values, in index order
            depth: Tree depth; defaults to compute_tree_depth(len(values))
            declared_root: Expected root passed through to the tree
            algorithm: Digest registry name
            encoder: Optional leaf value encoder

        Raises:
            CapacityExceededException: If values do not fit at ``depth``
        """
        if depth is None:
            depth = compute_tree_depth(len(values))
        tree = IncrementalMerkleTree(
            depth=depth,
            declared_root=declared_root,
            encoder=encoder,
            algorithm=algorithm,
        )
        tree.extend(values)
        return tree

    @staticmethod
    def prove(
        values: Sequence[Any],
        index: int,
        depth: Optional[int] = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> InclusionProof:
        """
        Generate a proof for ``values[index]``.

        Raises:
            IndexNotYetAppendedException: If index is out of range
            TreeNotFullException: If the values do not fill the tree
        """
        tree = MerkleProver.build(values, depth=depth, algorithm=algorithm)
        proof = tree.prove(index)
        tree.ensure_full()
        return proof

    @staticmethod
    def compute_root(
        values: Sequence[Any],
        depth: Optional[int] = None,
        algorithm: str = DEFAULT_ALGORITHM,
    ) -> bytes:
        """
        Root of the full tree over ``values``.

        Raises:
            TreeNotFullException: If the values do not fill the tree
        """
        tree = MerkleProver.build(values, depth=depth, algorithm=algorithm)
        tree.ensure_full()
        return tree.root


class MerkleVerifier:
    """
    Convenience class for verifying proofs.

    The digest function is taken from the proof's ``algorithm`` field
    unless one is given explicitly.
    """

    @staticmethod
    def verify(
        value: Any,
        proof: ProofLike,
        algorithm: Optional[str] = None,
        encoder: ValueEncoder = encode_value,
    ) -> bool:
        """
        Verify a proof against the root it carries.

        Returns:
            True if the proof is valid, False otherwise (including an
            unknown algorithm name)
        """
        if algorithm is None:
            algorithm = proof.algorithm if isinstance(proof, InclusionProof) else DEFAULT_ALGORITHM
        try:
            digest = get_digest_function(algorithm)
        except MerkleTreeException:
            return False
        return verify_inclusion_proof(value, proof, digest=digest, encoder=encoder)

    @staticmethod
    def verify_against_root(
        value: Any,
        proof: InclusionProof,
        expected_root: bytes,
        algorithm: Optional[str] = None,
    ) -> bool:
        """
        Verify a proof and also require its root to equal ``expected_root``.

        Use this when the root is known from a trusted source (for example
        a tree's declared root) rather than taken from the proof.
        """
        if proof.root != expected_root:
            return False
        return MerkleVerifier.verify(value, proof, algorithm=algorithm)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
    "compute_tree_depth",
]
