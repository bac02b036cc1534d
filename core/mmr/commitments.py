"""
Module 03 - MMR Commitments
Record-level helpers shared by the CLI and the HTTP API.

Owner: Protocol/Crypto Engineer
Module ID: M03

Each helper builds a fresh engine for one call. Long-lived callers
should hold an MMR directly instead.
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.crypto.hashing import Hasher, get_hasher, to_hex
from core.mmr.mmr import MMR
from core.mmr.positions import pos_to_leaf_index
from core.mmr.proof import verify, verify_digest
from core.schemas.errors import InvalidTargetException
from core.schemas.records import ProofRecord, RootRecord, VerificationRecord


logger = logging.getLogger(__name__)


def build_mmr(
    leaves: Sequence[bytes],
    hasher: Hasher | None = None,
    hash_leaves: bool = True,
) -> MMR:
    """
    Build an MMR from leaves in order.

    Args:
        leaves: Leaf payloads, or leaf digests when hash_leaves is False
        hasher: Merge strategy (default: blake2b)
        hash_leaves: Hash each leaf with hasher.leaf_hash before pushing
    """
    mmr = MMR(hasher)
    for leaf in leaves:
        if hash_leaves:
            mmr.push_payload(leaf)
        else:
            mmr.push(leaf)
    return mmr


def root_record(mmr: MMR) -> RootRecord:
    """RootRecord for the current state of mmr."""
    return RootRecord(
        hasher=mmr.hasher.name,
        mmr_size=mmr.mmr_size,
        leaf_count=mmr.leaf_count,
        root=to_hex(mmr.root()),
    )


def prove_leaves(
    leaves: Sequence[bytes],
    leaf_position: int,
    hasher: Hasher | None = None,
    hash_leaves: bool = True,
) -> ProofRecord:
    """
    Build an MMR from leaves and prove the leaf at leaf_position.

    Raises:
        InvalidTargetException: If leaf_position is not a leaf of the MMR
    """
    mmr = build_mmr(leaves, hasher, hash_leaves)
    proof = mmr.gen_proof([leaf_position])
    leaf_index = pos_to_leaf_index(leaf_position)
    return ProofRecord.from_proof(
        proof,
        root=mmr.root(),
        leaf_position=leaf_position,
        leaf=leaves[leaf_index],
        hasher=mmr.hasher.name,
        leaf_index=leaf_index,
        leaf_kind="payload" if hash_leaves else "digest",
    )


def verify_record(record: ProofRecord) -> VerificationRecord:
    """
    Verify a ProofRecord against its own root.

    Raises:
        MalformedProofException: If the proof is structurally invalid
        SchemaValidationException: If the hasher is unknown
    """
    hasher = get_hasher(record.hasher)
    proof = record.to_proof()
    if record.leaf_kind == "digest":
        valid = verify_digest(
            record.root_bytes(), proof, record.leaf_position, record.leaf_bytes(), hasher
        )
    else:
        valid = verify(
            record.root_bytes(), proof, record.leaf_position, record.leaf_bytes(), hasher
        )
    return VerificationRecord(
        valid=valid,
        hasher=hasher.name,
        root=record.root,
        mmr_size=record.mmr_size,
        leaf_position=record.leaf_position,
    )


def sample_leaf(index: int, width: int = 32) -> bytes:
    """Deterministic demo leaf: `width` zero bytes with byte 0 = index mod 256."""
    tx = bytearray(width)
    tx[0] = index & 0xFF
    return bytes(tx)


def build_sample_mmr(items_len: int, hasher: Hasher | None = None) -> MMR:
    """MMR holding items_len sample_leaf() digests pushed as-is."""
    mmr = MMR(hasher)
    mmr.extend(sample_leaf(i, mmr.hasher.digest_size) for i in range(items_len))
    return mmr


def generate_root(
    items_len: int,
    target_pos: int,
    hasher: Hasher | None = None,
) -> ProofRecord:
    """
    Push demo leaves until target_pos is written, then prove it.

    Leaves come from sample_leaf() and are pushed as digests. The root and
    proof are taken at the moment the target leaf is pushed, so mmr_size
    is the size right after that push, not after all items_len leaves.

    Raises:
        InvalidTargetException: If target_pos is never written as a leaf
    """
    mmr = MMR(hasher)
    for i in range(items_len):
        leaf = sample_leaf(i, mmr.hasher.digest_size)
        pos = mmr.push(leaf)
        if pos != target_pos:
            continue

        root = mmr.root()
        proof = mmr.gen_proof([pos])
        valid = verify_digest(root, proof, pos, leaf, mmr.hasher)
        logger.info(f"Proof for leaf node {i} (position {pos}) valid: {valid}")
        logger.debug(f"Leaf data for node {i} (position {pos}) (hex): 0x{leaf.hex()}")
        return ProofRecord.from_proof(
            proof,
            root=root,
            leaf_position=pos,
            leaf=leaf,
            hasher=mmr.hasher.name,
            leaf_index=i,
            leaf_kind="digest",
        )

    raise InvalidTargetException(
        "Node proofs not supported",
        position=target_pos,
        mmr_size=mmr.mmr_size,
    )


__all__ = [
    "build_mmr",
    "root_record",
    "prove_leaves",
    "verify_record",
    "sample_leaf",
    "build_sample_mmr",
    "generate_root",
]
