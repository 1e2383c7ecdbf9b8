"""
Inclusion proof models.

An inclusion proof for a tree of depth ``D`` has ``D + 1`` steps. Step 0
carries the root digest the proof is checked against (its direction flag is
unused). Step ``d`` for ``d >= 1`` carries the sibling digest at level ``d``
and whether that sibling sits to the right of the running hash.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from imtree.crypto.hashing import DEFAULT_ALGORITHM, from_hex, to_hex
from imtree.schemas.errors import MalformedProofException


class ProofStep(BaseModel):
    """One (digest, direction) entry of an inclusion proof."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    digest: bytes = Field(
        ...,
        description="Sibling digest at this level (root digest for step 0)",
    )
    is_right_sibling: bool = Field(
        ...,
        description="True: hash(current + sibling). False: hash(sibling + current)",
    )


class InclusionProof(BaseModel):
    """
    Proof that a value occupies ``leaf_index`` in a tree.

    Indexing follows tree levels: ``proof[0]`` is the root slot and
    ``proof[d]`` is the sibling needed at level ``d``.

    Attributes:
        leaf_index: Leaf position the proof was generated for
        steps: depth + 1 entries, root slot first
        algorithm: Name of the digest function the tree was built with
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., ge=0)
    steps: tuple[ProofStep, ...] = Field(..., min_length=1)
    algorithm: str = Field(default=DEFAULT_ALGORITHM)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, level: int) -> ProofStep:
        return self.steps[level]

    @property
    def depth(self) -> int:
        """Depth of the tree this proof was generated from."""
        return len(self.steps) - 1

    @property
    def root(self) -> bytes:
        """Root digest carried in the proof's level-0 slot."""
        return self.steps[0].digest

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-safe form with 0x-prefixed hex digests."""
        return {
            "leaf_index": self.leaf_index,
            "algorithm": self.algorithm,
            "steps": [
                {"digest": to_hex(step.digest), "is_right_sibling": step.is_right_sibling}
                for step in self.steps
            ],
        }

    @classmethod
    def from_json_dict(cls, data: Any) -> "InclusionProof":
        """
        Decode the form produced by to_json_dict().

        Raises:
            MalformedProofException: If the payload is structurally invalid
        """
        if not isinstance(data, dict):
            raise MalformedProofException(
                "Proof payload must be a JSON object",
                details={"type": type(data).__name__},
            )
        raw_steps = data.get("steps")
        if not isinstance(raw_steps, list):
            raise MalformedProofException("Proof payload is missing a 'steps' list")

        steps = []
        for i, raw in enumerate(raw_steps):
            if not isinstance(raw, dict) or not isinstance(raw.get("digest"), str):
                raise MalformedProofException(
                    f"Proof step {i} must be an object with a hex 'digest'",
                    details={"step": i},
                )
            try:
                digest = from_hex(raw["digest"])
                steps.append(
                    ProofStep(digest=digest, is_right_sibling=raw.get("is_right_sibling"))
                )
            except (ValueError, ValidationError) as e:
                raise MalformedProofException(
                    f"Proof step {i} is invalid: {e}",
                    details={"step": i},
                ) from e

        try:
            return cls(
                leaf_index=data.get("leaf_index"),
                steps=tuple(steps),
                algorithm=data.get("algorithm", DEFAULT_ALGORITHM),
            )
        except ValidationError as e:
            raise MalformedProofException(
                f"Proof payload is invalid: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e


__all__ = [
    "ProofStep",
    "InclusionProof",
]
