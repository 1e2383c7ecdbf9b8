"""
Digest Functions
Hashing primitives used by the incremental Merkle tree.

This module provides:
- SHA-256 hashing for raw bytes (the default digest function)
- A small registry of alternative hashlib digests, selectable by name
- The parent hash: digest(left + right)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Every registered digest is deterministic and fixed-size
"""
from __future__ import annotations

import hashlib
from typing import Callable, Optional

from imtree.schemas.errors import TreeConfigurationException


DigestFunction = Callable[[bytes], bytes]

DEFAULT_ALGORITHM = "sha256"

# Canonical placeholder value for leaf slots that have not been appended yet
EMPTY: bytes = b""


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256 hash of raw bytes."""
    return hashlib.sha3_256(data).digest()


def blake2b256(data: bytes) -> bytes:
    """Compute BLAKE2b hash of raw bytes truncated to a 32-byte digest."""
    return hashlib.blake2b(data, digest_size=32).digest()


def blake2s256(data: bytes) -> bytes:
    """Compute BLAKE2s hash of raw bytes (32-byte digest)."""
    return hashlib.blake2s(data).digest()


_DIGEST_FUNCTIONS: dict[str, DigestFunction] = {
    "sha256": sha256,
    "sha3_256": sha3_256,
    "blake2b256": blake2b256,
    "blake2s256": blake2s256,
}


def available_algorithms() -> list[str]:
    """Names accepted by get_digest_function(), sorted."""
    return sorted(_DIGEST_FUNCTIONS)


def get_digest_function(name: str = DEFAULT_ALGORITHM) -> DigestFunction:
    """
    Look up a digest function by name.

    Args:
        name: One of available_algorithms() (case-insensitive)

    Returns:
        The digest function

    Raises:
        TreeConfigurationException: If the name is not registered
    """
    key = name.strip().lower().replace("-", "_")
    try:
        return _DIGEST_FUNCTIONS[key]
    except KeyError:
        raise TreeConfigurationException(
            message=f"Unknown digest algorithm: {name!r}",
            details={"algorithm": name, "available": available_algorithms()},
        ) from None


def algorithm_name(digest: DigestFunction) -> Optional[str]:
    """Registry name of a digest function, or None if it is not registered."""
    for name, func in _DIGEST_FUNCTIONS.items():
        if func is digest:
            return name
    return None


def hash_concat(left: bytes, right: bytes, digest: DigestFunction = sha256) -> bytes:
    """
    Hash the concatenation of two child digests.

    This is the Merkle parent hash: parent = digest(left + right)

    Args:
        left: Left child digest
        right: Right child digest
        digest: Digest function to apply (default SHA-256)

    Returns:
        Parent digest
    """
    return digest(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
