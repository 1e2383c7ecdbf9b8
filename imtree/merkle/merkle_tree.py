"""
Incremental Merkle Tree
Fixed-depth, append-only binary Merkle tree with per-append hashing.

This module provides:
- IncrementalMerkleTree: level-indexed digest arrays with an append cursor
- construct_tree: construction entry point
- verify_inclusion_proof: stateless proof check

Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = digest(encoder(value))
2. Parent hashing: parent = digest(left + right)
3. Placeholder leaves: every unappended slot holds digest(b"")
4. Levels: level 0 is the root, level ``depth`` holds the 2**depth leaves
5. Leaves arrive strictly in index order 0 .. capacity - 1

Propagation Notes:
- An append only recomputes ancestors while the written index is a right
  child. The first left child stops the walk because its sibling subtree
  has not received real data yet.
- Ancestors of a partially filled subtree therefore hold values derived
  from placeholder children until that subtree completes. The root is
  final once next_index == capacity.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from imtree.crypto.hashing import (
    DEFAULT_ALGORITHM,
    EMPTY,
    DigestFunction,
    algorithm_name,
    get_digest_function,
    hash_concat,
    sha256,
)
from imtree.merkle.models import InclusionProof, ProofStep
from imtree.schemas.canonical import encode_value
from imtree.schemas.errors import (
    CapacityExceededException,
    IndexNotYetAppendedException,
    MalformedProofException,
    MerkleTreeException,
    TreeConfigurationException,
    TreeNotFullException,
)


logger = logging.getLogger(__name__)

ValueEncoder = Callable[[Any], bytes]

ProofLike = Union[InclusionProof, Sequence[Any]]


class IncrementalMerkleTree:
    """
    Append-only Merkle tree of fixed depth.

    Example:
        >>> tree = IncrementalMerkleTree(depth=1, declared_root=b"")
        >>> tree.append("foo")
        >>> tree.append("bar")
        >>> tree.verify("foo", tree.prove(0))
        True
    """

    def __init__(
        self,
        depth: int,
        declared_root: bytes,
        digest: Optional[DigestFunction] = None,
        encoder: Optional[ValueEncoder] = None,
        algorithm: Optional[str] = None,
    ) -> None:
        """
        Build the all-placeholder tree.

        Args:
            depth: Number of levels below the root (>= 0)
            declared_root: Expected root digest, stored verbatim and never
                checked here
            digest: Digest function; defaults to the one named by
                ``algorithm``, else SHA-256. When both are given they must
                name the same registered function
            encoder: Leaf value to bytes encoder (default encode_value)
            algorithm: Registry name of the digest function, recorded in
                proofs

        Raises:
            TreeConfigurationException: If depth or declared_root is invalid
        """
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise TreeConfigurationException(
                f"Tree depth must be a non-negative integer, got {depth!r}",
                field_path="depth",
            )
        if not isinstance(declared_root, (bytes, bytearray)):
            raise TreeConfigurationException(
                f"Declared root must be bytes, got {type(declared_root).__name__}",
                field_path="declared_root",
            )

        if digest is None:
            digest = get_digest_function(algorithm or DEFAULT_ALGORITHM)
        elif algorithm is not None and get_digest_function(algorithm) is not digest:
            raise TreeConfigurationException(
                f"Digest function does not match algorithm {algorithm!r}",
                field_path="algorithm",
            )
        self._digest = digest
        self._encoder = encoder or encode_value
        # Unregistered digests are recorded as "custom" and cannot be
        # resolved by name at verification time.
        self._algorithm = algorithm_name(digest) or "custom"

        self._depth = depth
        self._capacity = 2 ** depth
        self._declared_root = bytes(declared_root)
        self._next_index = 0

        self._leaves: list[Any] = [None] * self._capacity
        self._levels: list[list[bytes]] = [[] for _ in range(depth + 1)]
        self._levels[depth] = [self._digest(EMPTY)] * self._capacity

        for d in range(depth - 1, -1, -1):
            below = self._levels[d + 1]
            self._levels[d] = [
                self._hash_pair(below[2 * i], below[2 * i + 1])
                for i in range(2 ** d)
            ]

        logger.info(
            f"Constructed Merkle tree: depth={depth}, capacity={self._capacity}, "
            f"algorithm={self._algorithm}"
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def next_index(self) -> int:
        """Next free leaf position."""
        return self._next_index

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def declared_root(self) -> bytes:
        """Root digest supplied at construction."""
        return self._declared_root

    @property
    def root(self) -> bytes:
        """Current digest at level 0."""
        return self._levels[0][0]

    @property
    def is_full(self) -> bool:
        return self._next_index == self._capacity

    @property
    def remaining(self) -> int:
        return self._capacity - self._next_index

    @property
    def leaves(self) -> tuple[Any, ...]:
        """Appended leaf values in index order."""
        return tuple(self._leaves[: self._next_index])

    def __len__(self) -> int:
        return self._next_index

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(depth={self._depth}, "
            f"next_index={self._next_index}, root={self.root.hex()[:16]}...)"
        )

    def level(self, d: int) -> tuple[bytes, ...]:
        """
        Snapshot of all digests at level ``d``.

        Raises:
            IndexError: If d is outside 0..depth
        """
        if not 0 <= d <= self._depth:
            raise IndexError(f"Level {d} out of range for depth {self._depth}")
        return tuple(self._levels[d])

    def digest_at(self, d: int, i: int) -> bytes:
        """
        Digest stored at level ``d``, position ``i``.

        Raises:
            IndexError: If (d, i) is outside the tree
        """
        if not 0 <= d <= self._depth or not 0 <= i < 2 ** d:
            raise IndexError(f"Node ({d}, {i}) out of range for depth {self._depth}")
        return self._levels[d][i]

    def leaf_hash(self, value: Any) -> bytes:
        """Digest a leaf value with this tree's encoder and digest function."""
        return self._digest(self._encoder(value))

    def matches_declared_root(self) -> bool:
        """Compare the current root against the declared root."""
        return self.root == self._declared_root

    def ensure_full(self) -> None:
        """
        Require every leaf slot to be filled, so the root and all proofs
        commit to the appended values.

        Raises:
            TreeNotFullException: If next_index < capacity
        """
        if not self.is_full:
            logger.warning(
                f"Tree holds {self._next_index} of {self._capacity} leaves; root is not final"
            )
            raise TreeNotFullException(self._next_index, self._capacity)

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append(self, value: Any) -> None:
        """
        Insert ``value`` at the next free leaf position.

        Raises:
            CapacityExceededException: If the tree is full (tree unchanged)
            CanonicalizationException: If the value cannot be encoded
                (tree unchanged)
        """
        if self._next_index == self._capacity:
            logger.warning(f"Append rejected: tree of capacity {self._capacity} is full")
            raise CapacityExceededException(self._capacity)

        leaf = self.leaf_hash(value)

        i = self._next_index
        d = self._depth
        self._leaves[i] = value
        self._levels[d][i] = leaf

        while i % 2 == 1:
            i //= 2
            d -= 1
            below = self._levels[d + 1]
            self._levels[d][i] = self._hash_pair(below[2 * i], below[2 * i + 1])

        logger.debug(f"Appended leaf {self._next_index}; propagated up to level {d}")
        self._next_index += 1

    def extend(self, values: Iterable[Any]) -> None:
        """
        Append each value in order.

        Stops at the first failure; values appended before it stay in place.
        """
        for value in values:
            self.append(value)

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def prove(self, index: int) -> InclusionProof:
        """
        Generate the inclusion proof for the leaf at ``index``.

        Returns:
            InclusionProof with depth + 1 steps; step 0 holds the current root

        Raises:
            IndexNotYetAppendedException: If index is negative or >= next_index
        """
        if isinstance(index, bool) or not isinstance(index, int) \
                or index < 0 or index >= self._next_index:
            logger.warning(
                f"Proof rejected: index {index!r} not appended "
                f"(next_index={self._next_index})"
            )
            raise IndexNotYetAppendedException(index, self._next_index)

        steps = [ProofStep(digest=self.root, is_right_sibling=True)]
        siblings: list[ProofStep] = []

        i = index
        for d in range(self._depth, 0, -1):
            if i % 2 == 0:
                siblings.append(ProofStep(digest=self._levels[d][i + 1], is_right_sibling=True))
            else:
                siblings.append(ProofStep(digest=self._levels[d][i - 1], is_right_sibling=False))
            i //= 2

        # siblings were collected leaf-first; proof[d] must be level d
        steps.extend(reversed(siblings))

        logger.debug(f"Generated proof for leaf {index} ({len(steps)} steps)")
        return InclusionProof(
            leaf_index=index,
            steps=tuple(steps),
            algorithm=self._algorithm,
        )

    def verify(self, value: Any, proof: ProofLike) -> bool:
        """
        Check that ``proof`` places ``value`` under the proof's root.

        Never raises: a proof of the wrong length for this tree, or one
        that is structurally invalid, yields False.
        """
        try:
            steps = _coerce_steps(proof)
            leaf = self.leaf_hash(value)
        except MerkleTreeException as e:
            logger.debug(f"Rejecting proof: {e.message}")
            return False

        if len(steps) != self._depth + 1:
            logger.debug(
                f"Rejecting proof of length {len(steps)} for depth {self._depth}"
            )
            return False

        return _fold(leaf, steps, self._digest)

    def verify_at(self, value: Any, index: int) -> bool:
        """
        Check that ``value`` is the leaf at ``index`` against the current root.

        Returns False for indices that have not been appended.
        """
        try:
            proof = self.prove(index)
        except IndexNotYetAppendedException:
            return False
        return self.verify(value, proof)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _hash_pair(self, left: bytes, right: bytes) -> bytes:
        return hash_concat(left, right, self._digest)


def construct_tree(
    depth: int,
    declared_root: bytes,
    *,
    digest: Optional[DigestFunction] = None,
    encoder: Optional[ValueEncoder] = None,
    algorithm: Optional[str] = None,
) -> IncrementalMerkleTree:
    """
    Construct an all-placeholder tree of the given depth.

    Args:
        depth: Levels below the root; capacity is 2**depth
        declared_root: Expected root digest, kept for the caller to compare
        digest: Optional digest function (default SHA-256)
        encoder: Optional leaf value encoder (default encode_value)
        algorithm: Optional digest registry name

    Returns:
        A new IncrementalMerkleTree
    """
    return IncrementalMerkleTree(
        depth=depth,
        declared_root=declared_root,
        digest=digest,
        encoder=encoder,
        algorithm=algorithm,
    )


def verify_inclusion_proof(
    value: Any,
    proof: ProofLike,
    *,
    digest: DigestFunction = sha256,
    encoder: ValueEncoder = encode_value,
) -> bool:
    """
    Verify a proof without a tree instance.

    The tree depth is taken to be ``len(proof) - 1``.

    Args:
        value: Claimed leaf value
        proof: InclusionProof, or a sequence of (digest, is_right_sibling)
            pairs with the root slot first
        digest: Digest function the tree was built with
        encoder: Leaf value encoder the tree was built with

    Returns:
        True if the recomputed root equals proof[0]'s digest, else False
    """
    try:
        steps = _coerce_steps(proof)
        leaf = digest(encoder(value))
    except MerkleTreeException as e:
        logger.debug(f"Rejecting proof: {e.message}")
        return False
    return _fold(leaf, steps, digest)


def _fold(leaf: bytes, steps: Sequence[ProofStep], digest: DigestFunction) -> bool:
    current = leaf
    for d in range(len(steps) - 1, 0, -1):
        step = steps[d]
        if step.is_right_sibling:
            current = hash_concat(current, step.digest, digest)
        else:
            current = hash_concat(step.digest, current, digest)
    return current == steps[0].digest


def _coerce_steps(proof: Any) -> list[ProofStep]:
    """Normalize a proof into ProofStep entries or raise MalformedProofException."""
    if isinstance(proof, InclusionProof):
        return list(proof.steps)
    if isinstance(proof, (str, bytes, bytearray)) or not isinstance(proof, Sequence):
        raise MalformedProofException(
            f"Proof must be a sequence of steps, got {type(proof).__name__}"
        )
    if len(proof) == 0:
        raise MalformedProofException("Proof is empty")

    steps: list[ProofStep] = []
    for i, entry in enumerate(proof):
        if isinstance(entry, ProofStep):
            steps.append(entry)
            continue
        if isinstance(entry, (tuple, list)) and len(entry) == 2 \
                and isinstance(entry[0], (bytes, bytearray)) and isinstance(entry[1], bool):
            steps.append(ProofStep(digest=bytes(entry[0]), is_right_sibling=entry[1]))
            continue
        raise MalformedProofException(
            f"Proof step {i} must be a (digest, is_right_sibling) pair",
            details={"step": i, "type": type(entry).__name__},
        )
    return steps


__all__ = [
    "IncrementalMerkleTree",
    "ValueEncoder",
    "construct_tree",
    "verify_inclusion_proof",
]
