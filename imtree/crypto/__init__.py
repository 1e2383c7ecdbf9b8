"""
Digest functions and hex helpers for the incremental Merkle tree.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    EMPTY,
    DigestFunction,
    algorithm_name,
    available_algorithms,
    blake2b256,
    blake2s256,
    from_hex,
    get_digest_function,
    hash_concat,
    sha3_256,
    sha256,
    to_hex,
)

__all__ = [
    "DigestFunction",
    "DEFAULT_ALGORITHM",
    "EMPTY",
    "sha256",
    "sha3_256",
    "blake2b256",
    "blake2s256",
    "algorithm_name",
    "available_algorithms",
    "get_digest_function",
    "hash_concat",
    "to_hex",
    "from_hex",
]
