"""
Module 02 - Hashing Utilities
Pluggable hashers for MMR commitments and hex transport encoding.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Hasher: the merge/leaf-hash strategy an MMR is parameterized with
- Blake2bHasher, Blake2b256Hasher, Sha256Hasher: concrete strategies
- get_hasher / available_hashers: name-based registry
- Hex encoding/decoding with 0x prefix
- Comma-joined proof item encoding

Commitment Rules (Hard Contracts):
1. Parent hashing: parent = H(left || right), order matters
2. Leaf hashing: leaf = H(payload)
3. Every digest produced by a hasher is exactly digest_size bytes

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- No domain separation prefixes; roots must match other implementations
  using the same hash function
"""
from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from core.schemas.errors import (
    DigestWidthException,
    EncodingException,
    SchemaValidationException,
)


DEFAULT_HASHER = "blake2b"

DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


class Hasher(ABC):
    """
    Merge strategy for an MMR.

    A hasher is pure and stateless: the same inputs always yield the
    same digest, and instances can be shared freely between engines,
    verifiers and threads.
    """

    name: str = ""
    digest_size: int = DIGEST_SIZE

    @abstractmethod
    def digest(self, data: bytes) -> bytes:
        """Hash raw bytes to a digest_size-byte digest."""

    def merge(self, left: bytes, right: bytes) -> bytes:
        """
        Merge two child digests into their parent digest.

        Args:
            left: Digest of the earlier-positioned child
            right: Digest of the later-positioned child

        Returns:
            Parent digest, H(left || right)
        """
        return self._checked(self.digest(left + right))

    def leaf_hash(self, payload: bytes) -> bytes:
        """Hash an arbitrary leaf payload into a digest."""
        return self._checked(self.digest(payload))

    def ensure_digest(self, digest: bytes) -> bytes:
        """
        Check that a value is a digest this hasher could have produced.

        Raises:
            DigestWidthException: If the width does not match digest_size
        """
        if not isinstance(digest, (bytes, bytearray)):
            raise DigestWidthException(
                expected=self.digest_size, actual=-1, hasher=self.name
            )
        if len(digest) != self.digest_size:
            raise DigestWidthException(
                expected=self.digest_size, actual=len(digest), hasher=self.name
            )
        return bytes(digest)

    def _checked(self, digest: bytes) -> bytes:
        if len(digest) != self.digest_size:
            raise DigestWidthException(
                expected=self.digest_size, actual=len(digest), hasher=self.name
            )
        return digest

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hasher):
            return NotImplemented
        return self.name == other.name and self.digest_size == other.digest_size

    def __hash__(self) -> int:
        return hash((self.name, self.digest_size))


class Blake2bHasher(Hasher):
    """BLAKE2b-512, truncated to its first 32 bytes."""

    name = "blake2b"

    def digest(self, data: bytes) -> bytes:
        return hashlib.blake2b(data).digest()[:DIGEST_SIZE]


class Blake2b256Hasher(Hasher):
    """BLAKE2b configured for a native 32-byte output."""

    name = "blake2b-256"

    def digest(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=DIGEST_SIZE).digest()


class Sha256Hasher(Hasher):
    """SHA-256."""

    name = "sha256"

    def digest(self, data: bytes) -> bytes:
        return sha256(data)


_HASHERS: dict[str, type[Hasher]] = {
    Blake2bHasher.name: Blake2bHasher,
    Blake2b256Hasher.name: Blake2b256Hasher,
    Sha256Hasher.name: Sha256Hasher,
}


def available_hashers() -> list[str]:
    """Names accepted by get_hasher(), sorted."""
    return sorted(_HASHERS)


def get_hasher(name: str | None = None) -> Hasher:
    """
    Look up a hasher by name.

    Args:
        name: Registered hasher name (default: "blake2b")

    Raises:
        SchemaValidationException: If the name is not registered
    """
    key = (name or DEFAULT_HASHER).strip().lower()
    try:
        return _HASHERS[key]()
    except KeyError:
        raise SchemaValidationException(
            f"Unknown hasher '{name}', expected one of {available_hashers()}",
            field_path="hasher",
        ) from None


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

    Raises:
        EncodingException: If string doesn't start with 0x, has odd length,
                           or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not isinstance(hex_string, str):
        raise EncodingException(
            f"Hex value must be a string, got {type(hex_string).__name__}"
        )

    if not hex_string.startswith("0x"):
        raise EncodingException(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}...",
            details={"value": hex_string[:18]},
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise EncodingException(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise EncodingException(f"Invalid hex characters in string: {e}") from e


def encode_proof_items(items: Iterable[bytes]) -> str:
    """
    Join proof digests as comma-separated 0x-hex.

    Example:
        >>> encode_proof_items([b"\\x01", b"\\x02"])
        '0x01,0x02'
    """
    return ",".join(to_hex(item) for item in items)


def decode_proof_items(encoded: str) -> list[bytes]:
    """Inverse of encode_proof_items(). An empty string is an empty proof."""
    if encoded is None:
        raise EncodingException("Proof string must not be None")
    encoded = encoded.strip()
    if not encoded:
        return []
    return [from_hex(part.strip()) for part in encoded.split(",")]


def decode_digests(values: Sequence[str], hasher: Hasher) -> list[bytes]:
    """
    Decode 0x-hex leaf digests given on the wire.

    Raises:
        EncodingException: If a value is not valid 0x-hex
        DigestWidthException: If a value is not hasher.digest_size bytes
    """
    return [hasher.ensure_digest(from_hex(value)) for value in values]


__all__ = [
    "DEFAULT_HASHER",
    "DIGEST_SIZE",
    "sha256",
    "Hasher",
    "Blake2bHasher",
    "Blake2b256Hasher",
    "Sha256Hasher",
    "available_hashers",
    "get_hasher",
    "to_hex",
    "from_hex",
    "encode_proof_items",
    "decode_proof_items",
    "decode_digests",
]
