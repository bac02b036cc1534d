"""
Module 03 - MMR Proofs
Inclusion proof generation and verification for a Merkle Mountain Range.

Owner: Protocol/Crypto Engineer
Module ID: M03

Proof layout (for one target leaf, left to right):
1. Sibling digests from the leaf up to the peak of its mountain
2. Digest of every peak LEFT of that mountain, tallest first
3. One digest bagging every peak RIGHT of that mountain (omitted when
   the target mountain is the right-most one)

Bagging Rule (Hard Contract):
    Peaks are folded right-to-left, the right-hand accumulator first:

        acc = peaks[-1]
        for peak in reversed(peaks[:-1]):
            acc = merge(acc, peak)

    MMR.root(), proof generation and verification all use bag_peaks(),
    so the three can never disagree.

The expected proof length is a pure function of (leaf_position, mmr_size);
a proof of any other length is malformed rather than merely invalid.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

from core.crypto.hashing import Hasher, get_hasher
from core.mmr.positions import (
    get_peaks,
    is_leaf,
    is_valid_mmr_size,
    parent_offset,
    pos_height_in_tree,
    sibling_offset,
)
from core.schemas.errors import (
    EmptyStructureException,
    InvalidTargetException,
    MalformedProofException,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleMountainProof:
    """
    An inclusion proof, pinned to the MMR size it was generated against.

    Attributes:
        mmr_size: Node count of the MMR when the proof was generated
        items: Ordered proof digests (see module docstring for layout)
    """
    mmr_size: int
    items: tuple[bytes, ...] = ()

    def __post_init__(self) -> None:
        if self.mmr_size < 0:
            raise ValueError(f"MMR size must be non-negative, got {self.mmr_size}")
        object.__setattr__(self, "items", tuple(bytes(item) for item in self.items))

    def proof_items(self) -> list[bytes]:
        """Proof digests as a list."""
        return list(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def calculate_root(
        self,
        leaf_position: int,
        leaf_digest: bytes,
        hasher: Hasher | None = None,
    ) -> bytes:
        """Recompute the root implied by this proof. See calculate_root()."""
        return calculate_root(self, leaf_position, leaf_digest, hasher)

    def verify(
        self,
        root: bytes,
        leaf_position: int,
        leaf_payload: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """Verify a leaf payload against a claimed root. See verify()."""
        return verify(root, self, leaf_position, leaf_payload, hasher)


def bag_peaks(peak_digests: Sequence[bytes], hasher: Hasher) -> bytes:
    """
    Fold peak digests (left to right order) into a single digest.

    A single peak is returned as-is.

    Raises:
        EmptyStructureException: If there are no peaks
    """
    peaks = list(peak_digests)
    if not peaks:
        raise EmptyStructureException("No peaks to bag")
    while len(peaks) > 1:
        right = peaks.pop()
        left = peaks.pop()
        peaks.append(hasher.merge(right, left))
    return peaks[0]


# =============================================================================
# Generation
# =============================================================================

def _gen_path_for_peak(
    path: list[bytes],
    pos_list: list[int],
    peak_pos: int,
    lookup: Callable[[int], bytes],
) -> None:
    """Append the sibling digests that lift pos_list up to peak_pos."""
    # the target is the peak itself
    if len(pos_list) == 1 and pos_list[0] == peak_pos:
        return

    queue: deque[tuple[int, int]] = deque((pos, 0) for pos in pos_list)
    while queue:
        pos, height = queue.popleft()
        if pos == peak_pos:
            if not queue:
                break
            raise InvalidTargetException(
                "Node proofs not supported", position=pos
            )

        if pos_height_in_tree(pos + 1) > height:
            sib_pos, parent_pos = pos - sibling_offset(height), pos + 1
        else:
            sib_pos, parent_pos = pos + sibling_offset(height), pos + parent_offset(height)

        if queue and queue[0][0] == sib_pos:
            # sibling is on another target's path; the verifier derives it
            queue.popleft()
        else:
            path.append(lookup(sib_pos))

        if parent_pos < peak_pos:
            queue.append((parent_pos, height + 1))


def generate_proof(
    lookup: Callable[[int], bytes],
    mmr_size: int,
    positions: Iterable[int],
    hasher: Hasher,
) -> MerkleMountainProof:
    """
    Generate an inclusion proof for one or more leaf positions.

    Args:
        lookup: Returns the digest stored at a position
        mmr_size: Current node count of the MMR
        positions: Non-empty collection of leaf positions
        hasher: Hasher used to pre-bag the right-hand peaks

    Returns:
        MerkleMountainProof pinned to mmr_size

    Raises:
        InvalidTargetException: If positions is empty, or any position is
            out of range or not a leaf
    """
    pos_list = sorted(set(positions))
    if not pos_list:
        raise InvalidTargetException(
            "At least one target position is required", mmr_size=mmr_size
        )
    for pos in pos_list:
        if pos < 0 or pos >= mmr_size:
            raise InvalidTargetException(
                f"Position {pos} is out of range for MMR size {mmr_size}",
                position=pos,
                mmr_size=mmr_size,
            )
        if not is_leaf(pos):
            raise InvalidTargetException(
                f"Position {pos} is not a leaf; node proofs not supported",
                position=pos,
                mmr_size=mmr_size,
            )

    path: list[bytes] = []
    left_peaks: list[bytes] = []
    rhs_peaks: list[bytes] = []
    remaining = pos_list
    for peak_pos in get_peaks(mmr_size):
        split = 0
        while split < len(remaining) and remaining[split] <= peak_pos:
            split += 1
        under_peak, remaining = remaining[:split], remaining[split:]
        if not under_peak:
            rhs_peaks.append(lookup(peak_pos))
            continue
        # peaks passed so far lie left of a target mountain
        left_peaks.extend(rhs_peaks)
        rhs_peaks = []
        _gen_path_for_peak(path, under_peak, peak_pos, lookup)

    items = path + left_peaks
    if len(rhs_peaks) > 1:
        items.append(bag_peaks(rhs_peaks, hasher))
    else:
        items.extend(rhs_peaks)

    logger.debug(
        f"Generated proof for positions {pos_list} at size {mmr_size}: {len(items)} items"
    )
    return MerkleMountainProof(mmr_size=mmr_size, items=tuple(items))


# =============================================================================
# Verification
# =============================================================================

def expected_proof_length(leaf_position: int, mmr_size: int) -> int:
    """
    Number of proof items a single-leaf proof must carry.

    peak height (path length) + peaks to the left + 1 if any peak lies
    to the right.
    """
    peaks = get_peaks(mmr_size)
    for index, peak_pos in enumerate(peaks):
        if leaf_position <= peak_pos:
            has_rhs = 1 if index < len(peaks) - 1 else 0
            return pos_height_in_tree(peak_pos) + index + has_rhs
    raise MalformedProofException(
        f"Leaf position {leaf_position} lies beyond MMR size {mmr_size}",
        details={"leaf_position": leaf_position, "mmr_size": mmr_size},
    )


def _check_shape(
    proof: MerkleMountainProof,
    leaf_position: int,
    leaf_digest: bytes,
    hasher: Hasher,
) -> None:
    details = {"leaf_position": leaf_position, "mmr_size": proof.mmr_size}
    if proof.mmr_size == 0 or not is_valid_mmr_size(proof.mmr_size):
        raise MalformedProofException(
            f"Proof carries an impossible MMR size {proof.mmr_size}", details=details
        )
    if leaf_position < 0 or leaf_position >= proof.mmr_size:
        raise MalformedProofException(
            f"Leaf position {leaf_position} is out of range for MMR size {proof.mmr_size}",
            details=details,
        )
    if not is_leaf(leaf_position):
        raise MalformedProofException(
            f"Position {leaf_position} is not a leaf", details=details
        )
    if len(leaf_digest) != hasher.digest_size:
        raise MalformedProofException(
            f"Leaf digest must be {hasher.digest_size} bytes, got {len(leaf_digest)}",
            details=details,
        )
    for index, item in enumerate(proof.items):
        if len(item) != hasher.digest_size:
            raise MalformedProofException(
                f"Proof item {index} must be {hasher.digest_size} bytes, got {len(item)}",
                details={**details, "item_index": index},
            )
    expected = expected_proof_length(leaf_position, proof.mmr_size)
    if len(proof.items) != expected:
        raise MalformedProofException(
            f"Proof has {len(proof.items)} items, expected {expected}",
            details={**details, "expected": expected, "actual": len(proof.items)},
        )


def _calculate_peak_root(
    leaf_position: int,
    leaf_digest: bytes,
    peak_pos: int,
    items: Iterator[bytes],
    hasher: Hasher,
) -> bytes:
    """Climb from a leaf to its peak, consuming one sibling per level."""
    current = leaf_digest
    pos = leaf_position
    height = 0
    while pos != peak_pos:
        sibling_digest = next(items)
        if pos_height_in_tree(pos + 1) > height:
            current = hasher.merge(sibling_digest, current)
            pos += 1
        else:
            current = hasher.merge(current, sibling_digest)
            pos += parent_offset(height)
        height += 1
        if pos > peak_pos:
            raise MalformedProofException(
                f"Path from {leaf_position} overshoots peak {peak_pos}"
            )
    return current


def calculate_root(
    proof: MerkleMountainProof,
    leaf_position: int,
    leaf_digest: bytes,
    hasher: Hasher | None = None,
) -> bytes:
    """
    Recompute the root a single-leaf proof commits to.

    The walk is derived from leaf_position and proof.mmr_size alone; the
    proof only supplies digests.

    Raises:
        MalformedProofException: If the proof cannot belong to any MMR of
            its declared size
    """
    hasher = hasher or get_hasher()
    _check_shape(proof, leaf_position, leaf_digest, hasher)

    peaks = get_peaks(proof.mmr_size)
    peak_index = next(i for i, peak_pos in enumerate(peaks) if leaf_position <= peak_pos)

    items = iter(proof.items)
    target_peak = _calculate_peak_root(
        leaf_position, leaf_digest, peaks[peak_index], items, hasher
    )
    left_peaks = [next(items) for _ in range(peak_index)]

    # bagged right-hand peaks, if any
    peak_hashes = left_peaks + [target_peak] + list(items)

    return bag_peaks(peak_hashes, hasher)


def verify(
    claimed_root: bytes,
    proof: MerkleMountainProof,
    leaf_position: int,
    leaf_payload: bytes,
    hasher: Hasher | None = None,
) -> bool:
    """
    Verify that leaf_payload sits at leaf_position under claimed_root.

    Args:
        claimed_root: Root the verifier trusts
        proof: Proof produced against an MMR of proof.mmr_size nodes
        leaf_position: Position of the leaf
        leaf_payload: Raw leaf bytes (hashed with hasher.leaf_hash)
        hasher: Hasher the MMR was built with (default: blake2b)

    Returns:
        True if the recomputed root equals claimed_root, False otherwise

    Raises:
        MalformedProofException: If the proof is structurally invalid
    """
    hasher = hasher or get_hasher()
    return verify_digest(
        claimed_root, proof, leaf_position, hasher.leaf_hash(leaf_payload), hasher
    )


def verify_digest(
    claimed_root: bytes,
    proof: MerkleMountainProof,
    leaf_position: int,
    leaf_digest: bytes,
    hasher: Hasher | None = None,
) -> bool:
    """Like verify(), for callers that already hold the leaf digest."""
    hasher = hasher or get_hasher()
    computed = calculate_root(proof, leaf_position, leaf_digest, hasher)
    return computed == bytes(claimed_root)


__all__ = [
    "MerkleMountainProof",
    "bag_peaks",
    "generate_proof",
    "expected_proof_length",
    "calculate_root",
    "verify",
    "verify_digest",
]
