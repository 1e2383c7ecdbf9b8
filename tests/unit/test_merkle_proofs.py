"""
Merkle Proofs Unit Tests
Tests for imtree/merkle/models.py and imtree/merkle/merkle_proofs.py
"""
import json

import pytest
from pydantic import ValidationError

from imtree.crypto.hashing import sha256, to_hex
from imtree.merkle import (
    InclusionProof,
    MerkleProver,
    MerkleVerifier,
    ProofStep,
    compute_tree_depth,
)
from imtree.schemas.errors import (
    CapacityExceededException,
    ErrorCodes,
    IndexNotYetAppendedException,
    MalformedProofException,
    TreeNotFullException,
)

from fixtures import SAMPLE_VALUES, expected_root


class TestProofModels:
    """Tests for ProofStep and InclusionProof."""

    def test_step_rejects_non_bytes_digest(self):
        with pytest.raises(ValidationError):
            ProofStep(digest="abc", is_right_sibling=True)

    def test_step_rejects_non_bool_direction(self):
        with pytest.raises(ValidationError):
            ProofStep(digest=b"\x00", is_right_sibling="yes")

    def test_proof_requires_a_step(self):
        with pytest.raises(ValidationError):
            InclusionProof(leaf_index=0, steps=())

    def test_proof_rejects_negative_index(self):
        step = ProofStep(digest=b"\x00", is_right_sibling=True)
        with pytest.raises(ValidationError):
            InclusionProof(leaf_index=-1, steps=(step,))

    def test_proof_is_frozen(self, full_tree):
        proof = full_tree.prove(0)
        with pytest.raises(ValidationError):
            proof.leaf_index = 3

    def test_json_round_trip_still_verifies(self, full_tree):
        """A proof survives JSON transport and verifies afterwards."""
        proof = full_tree.prove(4)
        payload = json.loads(json.dumps(proof.to_json_dict()))

        decoded = InclusionProof.from_json_dict(payload)

        assert decoded == proof
        assert payload["steps"][0]["digest"] == to_hex(full_tree.root)
        assert full_tree.verify("maw", decoded)


class TestProofDecoding:
    """Tests for InclusionProof.from_json_dict() failure modes."""

    @staticmethod
    def _valid_payload():
        return {
            "leaf_index": 0,
            "algorithm": "sha256",
            "steps": [{"digest": to_hex(sha256(b"x")), "is_right_sibling": True}],
        }

    @pytest.mark.parametrize("payload", [None, [], "proof", 7])
    def test_non_object_payload(self, payload):
        with pytest.raises(MalformedProofException):
            InclusionProof.from_json_dict(payload)

    def test_missing_steps(self):
        payload = self._valid_payload()
        del payload["steps"]

        with pytest.raises(MalformedProofException, match="steps"):
            InclusionProof.from_json_dict(payload)

    def test_bad_hex_digest(self):
        payload = self._valid_payload()
        payload["steps"][0]["digest"] = "nothex"

        with pytest.raises(MalformedProofException) as exc_info:
            InclusionProof.from_json_dict(payload)

        assert exc_info.value.code == ErrorCodes.MALFORMED_PROOF
        assert exc_info.value.details["step"] == 0

    def test_missing_direction(self):
        payload = self._valid_payload()
        del payload["steps"][0]["is_right_sibling"]

        with pytest.raises(MalformedProofException):
            InclusionProof.from_json_dict(payload)

    def test_missing_leaf_index(self):
        payload = self._valid_payload()
        del payload["leaf_index"]

        with pytest.raises(MalformedProofException):
            InclusionProof.from_json_dict(payload)

    def test_algorithm_defaults_to_sha256(self):
        payload = self._valid_payload()
        del payload["algorithm"]

        assert InclusionProof.from_json_dict(payload).algorithm == "sha256"


class TestComputeTreeDepth:
    """Tests for compute_tree_depth()."""

    @pytest.mark.parametrize(
        "num_leaves,depth",
        [(0, 0), (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4)],
    )
    def test_smallest_fitting_depth(self, num_leaves, depth):
        assert compute_tree_depth(num_leaves) == depth

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            compute_tree_depth(-1)


class TestMerkleProver:
    """Tests for MerkleProver class."""

    def test_build_picks_depth(self):
        tree = MerkleProver.build(["a", "b", "c"])

        assert tree.depth == 2
        assert tree.next_index == 3

    def test_build_partial_tree_is_not_full(self):
        tree = MerkleProver.build(["a", "b", "c"])

        assert not tree.is_full
        assert tree.remaining == 1

    def test_compute_root_rejects_partial_values(self):
        """Three values cannot fill a depth-2 tree, so no root is final."""
        with pytest.raises(TreeNotFullException) as exc_info:
            MerkleProver.compute_root(["a", "b", "c"])

        assert exc_info.value.code == ErrorCodes.TREE_NOT_FULL
        assert exc_info.value.details == {"next_index": 3, "capacity": 4}

    def test_compute_root_commits_to_values(self):
        assert MerkleProver.compute_root(["a", "b", "c", "d"]) != MerkleProver.compute_root(
            ["x", "y", "z", "w"]
        )

    def test_prove_rejects_partial_values(self):
        with pytest.raises(TreeNotFullException):
            MerkleProver.prove(["a", "b", "c"], index=1)

    def test_prove_full_values_verifies(self):
        proof = MerkleProver.prove(["a", "b", "c", "d"], index=1)

        assert MerkleVerifier.verify("b", proof)
        assert not MerkleVerifier.verify("c", proof)

    def test_build_explicit_depth_too_small(self):
        with pytest.raises(CapacityExceededException):
            MerkleProver.build(["a", "b", "c"], depth=1)

    def test_compute_root_full_tree(self):
        assert MerkleProver.compute_root(SAMPLE_VALUES) == expected_root(SAMPLE_VALUES)

    def test_prove_out_of_range(self):
        with pytest.raises(IndexNotYetAppendedException):
            MerkleProver.prove(["a", "b"], index=2)

    def test_prove_records_algorithm(self):
        proof = MerkleProver.prove(["a", "b"], index=1, algorithm="blake2s256")

        assert proof.algorithm == "blake2s256"


class TestMerkleVerifier:
    """Tests for MerkleVerifier class."""

    def test_verify_uses_proof_algorithm(self):
        proof = MerkleProver.prove(["a", "b"], index=0, algorithm="sha3_256")

        assert MerkleVerifier.verify("a", proof)
        assert not MerkleVerifier.verify("a", proof, algorithm="sha256")

    def test_verify_unknown_algorithm_is_false(self):
        proof = MerkleProver.prove(["a", "b"], index=0)

        assert MerkleVerifier.verify("a", proof, algorithm="nope") is False

    def test_verify_plain_pairs(self):
        proof = MerkleProver.prove(SAMPLE_VALUES, index=7)
        pairs = [(s.digest, s.is_right_sibling) for s in proof.steps]

        assert MerkleVerifier.verify("fos", pairs)

    def test_verify_against_root(self):
        proof = MerkleProver.prove(SAMPLE_VALUES, index=1)
        root = expected_root(SAMPLE_VALUES)

        assert MerkleVerifier.verify_against_root("bar", proof, root)
        assert not MerkleVerifier.verify_against_root("bar", proof, sha256(b"other"))
