"""
Common test fixtures shared by all modules.

Provides factory functions for MMR test data:
- Deterministic leaf payloads
- Populated MMR engines
- Bit-flipped copies for tamper tests
"""

from typing import Optional

from core.crypto.hashing import Hasher, get_hasher
from core.mmr.mmr import MMR


# =============================================================================
# Payload Factories
# =============================================================================

def make_payload(index: int, width: int = 32) -> bytes:
    """Leaf payload i: bytes(b ^ i for b in range(width))."""
    return bytes((b ^ index) & 0xFF for b in range(width))


def make_payloads(count: int, width: int = 32) -> list[bytes]:
    """make_payload() for indices 0..count-1."""
    return [make_payload(i, width) for i in range(count)]


def flip_bit(data: bytes, byte_index: int = 0, bit: int = 0) -> bytes:
    """Copy of data with one bit flipped."""
    out = bytearray(data)
    out[byte_index] ^= 1 << bit
    return bytes(out)


# =============================================================================
# MMR Factories
# =============================================================================

def make_mmr(
    count: int,
    hasher: Optional[Hasher] = None,
    payloads: Optional[list[bytes]] = None,
) -> tuple[MMR, list[int], list[bytes]]:
    """
    Build an MMR by pushing payloads through leaf_hash.

    Returns:
        (mmr, leaf positions, payloads)
    """
    hasher = hasher or get_hasher("blake2b")
    payloads = payloads if payloads is not None else make_payloads(count)
    mmr = MMR(hasher)
    positions = [mmr.push_payload(p) for p in payloads]
    return mmr, positions, payloads
