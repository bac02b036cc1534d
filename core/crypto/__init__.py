"""
Core cryptographic utilities.

Module 02 provides the pluggable MMR hashers and hex transport encoding.
"""
from .hashing import (
    DEFAULT_HASHER,
    Hasher,
    Blake2bHasher,
    Blake2b256Hasher,
    Sha256Hasher,
    available_hashers,
    get_hasher,
    sha256,
    to_hex,
    from_hex,
    encode_proof_items,
    decode_proof_items,
    decode_digests,
)

__all__ = [
    "DEFAULT_HASHER",
    "Hasher",
    "Blake2bHasher",
    "Blake2b256Hasher",
    "Sha256Hasher",
    "available_hashers",
    "get_hasher",
    "sha256",
    "to_hex",
    "from_hex",
    "encode_proof_items",
    "decode_proof_items",
    "decode_digests",
]
