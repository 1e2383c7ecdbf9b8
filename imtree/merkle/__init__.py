"""
Incremental Merkle Tree
Fixed-depth, append-only Merkle tree with inclusion proofs.

This module provides:
- IncrementalMerkleTree: construct / append / prove / verify
- InclusionProof, ProofStep: proof models with a hex JSON form
- verify_inclusion_proof: stateless verification
- MerkleProver / MerkleVerifier: one-shot convenience wrappers

Commitment Rules:
1. Leaf hashing: digest(encode_value(value))
2. Parent hashing: digest(left + right)
3. Placeholder leaves: digest(b"")
4. Proof layout: proof[0] is the root slot, proof[d] the sibling at level d

Usage:
    from imtree.merkle import construct_tree

    tree = construct_tree(depth=3, declared_root=expected_root)
    for value in ["foo", "bar", "baz", "yup", "maw", "wap", "pit", "fos"]:
        tree.append(value)

    proof = tree.prove(2)
    assert tree.verify("baz", proof)
"""
from .models import (
    InclusionProof,
    ProofStep,
)

from .merkle_tree import (
    IncrementalMerkleTree,
    ValueEncoder,
    construct_tree,
    verify_inclusion_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    compute_tree_depth,
)


__all__ = [
    # Core types
    "IncrementalMerkleTree",
    "InclusionProof",
    "ProofStep",
    "ValueEncoder",
    # Core functions
    "construct_tree",
    "verify_inclusion_proof",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
