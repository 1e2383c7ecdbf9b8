"""
Public API for value encoding and the error taxonomy.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    encode_json_value,
    encode_value,
    ensure_utc,
    format_datetime_canonical,
)

from .errors import (
    CanonicalizationException,
    CapacityExceededException,
    ErrorCodes,
    IndexNotYetAppendedException,
    MalformedProofException,
    MerkleError,
    MerkleTreeException,
    TreeConfigurationException,
    TreeNotFullException,
)

__all__ = [
    # Canonical encoding
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "encode_json_value",
    "encode_value",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleTreeException",
    "CapacityExceededException",
    "IndexNotYetAppendedException",
    "MalformedProofException",
    "TreeConfigurationException",
    "CanonicalizationException",
    "TreeNotFullException",
]
