"""
Error taxonomy for the incremental Merkle tree.

Defines both a Pydantic model for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree mutation & lookup
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    INDEX_NOT_YET_APPENDED = "INDEX_NOT_YET_APPENDED"

    # Proofs
    MALFORMED_PROOF = "MALFORMED_PROOF"
    TREE_NOT_FULL = "TREE_NOT_FULL"

    # Construction & configuration
    TREE_CONFIGURATION_ERROR = "TREE_CONFIGURATION_ERROR"

    # Leaf value encoding
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Error model for reporting tree failures without raising.

    Callers that prefer result values over exceptions (CLI summaries,
    batch drivers) convert exceptions to this model.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CAPACITY_EXCEEDED],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleTreeException":
        """Convert this error model to a raised exception."""
        return MerkleTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleTreeException(Exception):
    """
    Base exception for all tree errors.

    Carries structured error information and converts to/from
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_TREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CapacityExceededException(MerkleTreeException):
    """Raised when appending to a tree whose every leaf slot is filled."""

    def __init__(self, capacity: int, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        full_details["capacity"] = capacity
        super().__init__(
            message=f"Tree is full: all {capacity} leaf slots have been appended",
            code=ErrorCodes.CAPACITY_EXCEEDED,
            details=full_details,
            retryable=False,
        )


class IndexNotYetAppendedException(MerkleTreeException):
    """Raised when a proof is requested for a leaf that holds no data yet."""

    def __init__(
        self,
        index: int,
        next_index: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["index"] = index
        full_details["next_index"] = next_index
        super().__init__(
            message=(
                f"Leaf index {index} has not been appended "
                f"(next free index is {next_index})"
            ),
            code=ErrorCodes.INDEX_NOT_YET_APPENDED,
            details=full_details,
            retryable=False,
        )


class TreeNotFullException(MerkleTreeException):
    """
    Raised when a final root or a verifiable proof is requested from a
    tree with unfilled leaf slots, whose ancestor digests may be stale.
    """

    def __init__(
        self,
        next_index: int,
        capacity: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["next_index"] = next_index
        full_details["capacity"] = capacity
        super().__init__(
            message=(
                f"Tree holds {next_index} of {capacity} leaves; the root is "
                f"final only once every leaf slot is filled"
            ),
            code=ErrorCodes.TREE_NOT_FULL,
            details=full_details,
            retryable=False,
        )


class MalformedProofException(MerkleTreeException):
    """Raised when a proof cannot be decoded into the expected structure."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=details,
            retryable=False,
        )


class TreeConfigurationException(MerkleTreeException):
    """Raised for invalid construction parameters or configuration values."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_CONFIGURATION_ERROR,
            details=full_details,
            retryable=False,
        )


class CanonicalizationException(MerkleTreeException):
    """Raised when a leaf value has no canonical byte encoding."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )
