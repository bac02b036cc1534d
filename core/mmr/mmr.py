"""
Module 03 - MMR Engine
Append-only Merkle Mountain Range over an in-memory node store.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MemStore: append-only position -> digest mapping
- MMR: push / root / get / gen_proof / snapshot

Ownership & Concurrency:
- One MMR instance has exactly one writer. Every push depends on the
  exact prior state, so interleaved pushes must be serialized by the
  caller; the engine takes no locks.
- Proofs are immutable snapshots with no reference back to the engine,
  and verification is pure, so both are safe to share across threads.
"""
from __future__ import annotations

import logging
from typing import Iterable

from core.crypto.hashing import Hasher, get_hasher
from core.mmr.positions import (
    children,
    get_peaks,
    is_valid_mmr_size,
    leaf_count,
    parent_offset,
    pos_height_in_tree,
    sibling_offset,
)
from core.mmr.proof import MerkleMountainProof, bag_peaks, generate_proof
from core.schemas.errors import (
    EmptyStructureException,
    InconsistentStoreException,
    SchemaValidationException,
    UnknownPositionException,
)
from core.schemas.records import MMRSnapshot


logger = logging.getLogger(__name__)


class MemStore:
    """
    Append-only in-memory node store.

    Every position is written exactly once; overwriting is an error.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, bytes] = {}

    def get_elem(self, pos: int) -> bytes | None:
        return self._nodes.get(pos)

    def append(self, pos: int, elems: Iterable[bytes]) -> None:
        """
        Write consecutive digests starting at pos.

        Nothing is written if any target position is already taken.
        """
        batch = list(elems)
        for target in range(pos, pos + len(batch)):
            if target in self._nodes:
                raise InconsistentStoreException(
                    f"Position {target} has already been written", position=target
                )
        for offset, elem in enumerate(batch):
            self._nodes[pos + offset] = elem

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, pos: object) -> bool:
        return pos in self._nodes


class MMR:
    """
    Merkle Mountain Range parameterized by a Hasher.

    Example:
        >>> mmr = MMR(get_hasher("sha256"))
        >>> pos = mmr.push_payload(b"first")
        >>> proof = mmr.gen_proof([pos])
        >>> proof.verify(mmr.root(), pos, b"first", mmr.hasher)
        True
    """

    def __init__(
        self,
        hasher: Hasher | None = None,
        store: MemStore | None = None,
    ) -> None:
        """
        Args:
            hasher: Merge strategy (default: blake2b)
            store: Existing node store; its size becomes the MMR size

        Raises:
            InconsistentStoreException: If the store does not hold exactly
                positions [0, n) for a reachable size n
        """
        self.hasher = hasher or get_hasher()
        self.store = store if store is not None else MemStore()
        self._mmr_size = len(self.store)
        if not is_valid_mmr_size(self._mmr_size):
            raise InconsistentStoreException(
                f"Store holds {self._mmr_size} nodes, not a reachable MMR size"
            )
        for pos in range(self._mmr_size):
            if pos not in self.store:
                raise InconsistentStoreException(
                    f"Store is missing position {pos}", position=pos
                )

    @property
    def mmr_size(self) -> int:
        """Total node count, leaves and internal nodes."""
        return self._mmr_size

    @property
    def leaf_count(self) -> int:
        return leaf_count(self._mmr_size)

    def is_empty(self) -> bool:
        return self._mmr_size == 0

    def _find_elem(self, pos: int, base: int, pending: list[bytes]) -> bytes:
        if pos >= base:
            return pending[pos - base]
        elem = self.store.get_elem(pos)
        if elem is None:
            raise InconsistentStoreException(
                f"Store is missing position {pos}", position=pos
            )
        return elem

    def push(self, leaf_digest: bytes) -> int:
        """
        Append a leaf digest and merge completed mountains.

        Args:
            leaf_digest: Digest of the leaf (hasher.digest_size bytes)

        Returns:
            Position of the new leaf
        """
        leaf_digest = self.hasher.ensure_digest(leaf_digest)
        elem_pos = self._mmr_size
        pending = [leaf_digest]
        pos = elem_pos
        height = 0
        # the next position sits higher exactly when a merge is due
        while pos_height_in_tree(pos + 1) > height:
            pos += 1
            left_pos = pos - parent_offset(height)
            right_pos = left_pos + sibling_offset(height)
            left = self._find_elem(left_pos, elem_pos, pending)
            right = self._find_elem(right_pos, elem_pos, pending)
            pending.append(self.hasher.merge(left, right))
            height += 1

        self.store.append(elem_pos, pending)
        self._mmr_size = pos + 1
        return elem_pos

    def push_payload(self, payload: bytes) -> int:
        """Hash a raw payload with hasher.leaf_hash and push it."""
        return self.push(self.hasher.leaf_hash(payload))

    def extend(self, leaf_digests: Iterable[bytes]) -> list[int]:
        """Push several leaf digests; returns their positions."""
        return [self.push(digest) for digest in leaf_digests]

    def get(self, pos: int) -> bytes:
        """
        Digest of the node at pos.

        Raises:
            UnknownPositionException: If pos >= mmr_size
        """
        if pos < 0 or pos >= self._mmr_size:
            raise UnknownPositionException(pos, self._mmr_size)
        return self._find_elem(pos, self._mmr_size, [])

    def peaks(self) -> list[bytes]:
        """Peak digests, tallest mountain first."""
        return [self.get(pos) for pos in get_peaks(self._mmr_size)]

    def root(self) -> bytes:
        """
        Bag the current peaks into the committed root.

        Raises:
            EmptyStructureException: If no leaf has been pushed
        """
        if self._mmr_size == 0:
            raise EmptyStructureException()
        if self._mmr_size == 1:
            return self.get(0)
        return bag_peaks(self.peaks(), self.hasher)

    def get_root(self) -> bytes:
        """Alias for root()."""
        return self.root()

    def gen_proof(self, positions: Iterable[int]) -> MerkleMountainProof:
        """
        Inclusion proof for leaf positions against the current size.

        Raises:
            InvalidTargetException: For empty, non-leaf or out-of-range targets
        """
        return generate_proof(self.get, self._mmr_size, positions, self.hasher)

    def snapshot(self) -> MMRSnapshot:
        """Capture the full node mapping so it can cross a call boundary."""
        nodes = [self.get(pos) for pos in range(self._mmr_size)]
        return MMRSnapshot.from_digests(self.hasher.name, nodes)

    @classmethod
    def from_snapshot(cls, snapshot: MMRSnapshot, check: bool = True) -> "MMR":
        """
        Rebuild an engine from a snapshot.

        Args:
            snapshot: Snapshot produced by MMR.snapshot()
            check: Recompute every internal node and compare (default True)

        Raises:
            SchemaValidationException: Unknown hasher or unreachable size
            InconsistentStoreException: An internal node does not match
                the merge of its children
        """
        hasher = get_hasher(snapshot.hasher)
        digests = [hasher.ensure_digest(d) for d in snapshot.digests()]
        if check:
            for pos, digest in enumerate(digests):
                if pos_height_in_tree(pos) == 0:
                    continue
                left, right = children(pos)
                if hasher.merge(digests[left], digests[right]) != digest:
                    raise InconsistentStoreException(
                        f"Snapshot node {pos} does not match its children",
                        position=pos,
                    )
        if not is_valid_mmr_size(len(digests)):
            raise SchemaValidationException(
                f"{len(digests)} is not a reachable MMR size", field_path="mmr_size"
            )
        store = MemStore()
        store.append(0, digests)
        mmr = cls(hasher=hasher, store=store)
        logger.debug(f"Restored MMR of size {len(digests)} ({hasher.name})")
        return mmr

    def __len__(self) -> int:
        return self._mmr_size

    def __repr__(self) -> str:
        return f"MMR(hasher={self.hasher.name!r}, mmr_size={self._mmr_size})"


__all__ = ["MemStore", "MMR"]
