"""
Hashing Unit Tests
Tests for imtree/crypto/hashing.py

Tests:
- sha256 stability and known values
- digest registry lookup
- hash_concat as the parent hash
- to_hex/from_hex behaviour
"""
import hashlib
import pytest

from imtree.crypto.hashing import (
    EMPTY,
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
from imtree.schemas.errors import TreeConfigurationException


class TestSha256:
    """Tests for sha256() function."""

    def test_sha256_known_value(self):
        """sha256 of "hello" matches the published digest."""
        assert sha256(b"hello").hex() == (
            "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
        )

    def test_sha256_empty_placeholder(self):
        """The placeholder value hashes to the well-known empty digest."""
        assert EMPTY == b""
        assert sha256(EMPTY).hex() == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_sha256_different_inputs_different_outputs(self):
        assert sha256(b"input1") != sha256(b"input2")


class TestDigestRegistry:
    """Tests for get_digest_function() and the registered digests."""

    def test_available_algorithms(self):
        assert available_algorithms() == ["blake2b256", "blake2s256", "sha256", "sha3_256"]

    def test_default_is_sha256(self):
        assert get_digest_function() is sha256

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("sha256", sha256),
            ("SHA3-256", sha3_256),
            ("  blake2b256 ", blake2b256),
            ("blake2s256", blake2s256),
        ],
    )
    def test_lookup_normalizes_name(self, name, expected):
        assert get_digest_function(name) is expected

    def test_unknown_algorithm_raises(self):
        with pytest.raises(TreeConfigurationException) as exc_info:
            get_digest_function("md5")

        assert exc_info.value.details["algorithm"] == "md5"
        assert "sha256" in exc_info.value.details["available"]

    def test_all_digests_are_32_bytes(self):
        for name in available_algorithms():
            assert len(get_digest_function(name)(b"data")) == 32

    def test_digests_match_hashlib(self):
        assert sha3_256(b"x") == hashlib.sha3_256(b"x").digest()
        assert blake2b256(b"x") == hashlib.blake2b(b"x", digest_size=32).digest()
        assert blake2s256(b"x") == hashlib.blake2s(b"x").digest()

    def test_algorithm_name_reverse_lookup(self):
        for name in available_algorithms():
            assert algorithm_name(get_digest_function(name)) == name
        assert algorithm_name(lambda data: data) is None


class TestHashConcat:
    """Tests for hash_concat() function."""

    def test_hash_concat_is_sha256_of_concatenation(self):
        left = sha256(b"left")
        right = sha256(b"right")

        assert hash_concat(left, right) == sha256(left + right)

    def test_hash_concat_order_matters(self):
        a = sha256(b"a")
        b = sha256(b"b")

        assert hash_concat(a, b) != hash_concat(b, a)

    def test_hash_concat_custom_digest(self):
        assert hash_concat(b"l", b"r", digest=sha3_256) == sha3_256(b"lr")


class TestHexConversion:
    """Tests for to_hex() and from_hex() functions."""

    def test_to_hex_has_prefix(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_to_hex_empty(self):
        assert to_hex(b"") == "0x"

    def test_from_hex_decodes(self):
        assert from_hex("0xdeadbeef") == bytes.fromhex("deadbeef")

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")
