"""
Module 03 - Merkle Mountain Range
Append-only accumulator with compact single-leaf inclusion proofs.

Commitment Rules:
1. Leaf: leaf = hasher.leaf_hash(payload), or a digest pushed directly
2. Parent: parent = hasher.merge(left, right), left = earlier position
3. Root: peaks bagged right-to-left, acc = merge(acc, next_left_peak)
4. Empty MMR has no root (EmptyStructureException)

Usage:
    from core.crypto import get_hasher
    from core.mmr import MMR, verify

    mmr = MMR(get_hasher("blake2b"))
    positions = [mmr.push_payload(p) for p in payloads]
    root = mmr.root()

    proof = mmr.gen_proof([positions[3]])
    assert verify(root, proof, positions[3], payloads[3], mmr.hasher)
"""
from .positions import (
    get_peaks,
    height,
    is_leaf,
    is_valid_mmr_size,
    leaf_count,
    leaf_index_to_mmr_size,
    leaf_index_to_pos,
    parent,
    pos_height_in_tree,
    pos_to_leaf_index,
    sibling,
)

from .proof import (
    MerkleMountainProof,
    bag_peaks,
    calculate_root,
    expected_proof_length,
    generate_proof,
    verify,
    verify_digest,
)

from .mmr import (
    MemStore,
    MMR,
)

from .commitments import (
    build_mmr,
    build_sample_mmr,
    generate_root,
    prove_leaves,
    root_record,
    sample_leaf,
    verify_record,
)


__all__ = [
    # Position index
    "get_peaks",
    "height",
    "is_leaf",
    "is_valid_mmr_size",
    "leaf_count",
    "leaf_index_to_mmr_size",
    "leaf_index_to_pos",
    "parent",
    "pos_height_in_tree",
    "pos_to_leaf_index",
    "sibling",
    # Proofs
    "MerkleMountainProof",
    "bag_peaks",
    "calculate_root",
    "expected_proof_length",
    "generate_proof",
    "verify",
    "verify_digest",
    # Engine
    "MemStore",
    "MMR",
    # Records
    "build_mmr",
    "build_sample_mmr",
    "generate_root",
    "prove_leaves",
    "root_record",
    "sample_leaf",
    "verify_record",
]
