"""
Module 01 - Schemas & Canonicalization
File: records.py

Purpose: Transport records for values crossing a process or language
boundary. Field names are stable; every digest is a lowercase
0x-prefixed hex string.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.crypto.hashing import DEFAULT_HASHER, encode_proof_items, from_hex, to_hex

if TYPE_CHECKING:
    from core.mmr.proof import MerkleMountainProof


def _normalize_hex(value: str) -> str:
    """Validate a 0x-hex string and return it lowercased."""
    return to_hex(from_hex(value))


class RootRecord(BaseModel):
    """Committed root of an MMR at a given size."""

    model_config = ConfigDict(extra="forbid")

    hasher: str = Field(default=DEFAULT_HASHER, description="Hasher the MMR was built with")
    mmr_size: int = Field(..., ge=0, description="Total node count")
    leaf_count: int = Field(..., ge=0, description="Number of leaves")
    root: str = Field(..., description="Bagged root, 0x-hex")

    @field_validator("root")
    @classmethod
    def _check_root(cls, v: str) -> str:
        return _normalize_hex(v)

    def root_bytes(self) -> bytes:
        return from_hex(self.root)


class ProofRecord(BaseModel):
    """
    A single-leaf inclusion proof together with what it proves.

    The record is self-contained: a verifier needs nothing else to
    replay it.
    """

    model_config = ConfigDict(extra="forbid")

    hasher: str = Field(default=DEFAULT_HASHER)
    mmr_size: int = Field(..., ge=1, description="MMR size the proof is pinned to")
    leaf_position: int = Field(..., ge=0, description="Position of the proven leaf")
    leaf_index: int | None = Field(default=None, ge=0, description="0-based leaf index")
    leaf: str = Field(..., description="Leaf payload or leaf digest, 0x-hex")
    leaf_kind: Literal["payload", "digest"] = Field(
        default="payload",
        description="'payload' leaves are hashed with leaf_hash; 'digest' leaves were pushed as-is",
    )
    root: str = Field(..., description="Root at mmr_size, 0x-hex")
    proof: list[str] = Field(default_factory=list, description="Proof items, 0x-hex")

    @field_validator("leaf", "root")
    @classmethod
    def _check_hex(cls, v: str) -> str:
        return _normalize_hex(v)

    @field_validator("proof")
    @classmethod
    def _check_items(cls, v: list[str]) -> list[str]:
        return [_normalize_hex(item) for item in v]

    @property
    def proof_csv(self) -> str:
        """Proof items in the comma-joined wire form."""
        return encode_proof_items(self.proof_items())

    def proof_items(self) -> list[bytes]:
        return [from_hex(item) for item in self.proof]

    def leaf_bytes(self) -> bytes:
        return from_hex(self.leaf)

    def root_bytes(self) -> bytes:
        return from_hex(self.root)

    def to_proof(self) -> "MerkleMountainProof":
        from core.mmr.proof import MerkleMountainProof

        return MerkleMountainProof(
            mmr_size=self.mmr_size,
            items=tuple(self.proof_items()),
        )

    @classmethod
    def from_proof(
        cls,
        proof: "MerkleMountainProof",
        root: bytes,
        leaf_position: int,
        leaf: bytes,
        hasher: str = DEFAULT_HASHER,
        leaf_index: int | None = None,
        leaf_kind: Literal["payload", "digest"] = "payload",
    ) -> "ProofRecord":
        return cls(
            hasher=hasher,
            mmr_size=proof.mmr_size,
            leaf_position=leaf_position,
            leaf_index=leaf_index,
            leaf=to_hex(leaf),
            leaf_kind=leaf_kind,
            root=to_hex(root),
            proof=[to_hex(item) for item in proof.items],
        )


class VerificationRecord(BaseModel):
    """Outcome of verifying one proof."""

    model_config = ConfigDict(extra="forbid")

    valid: bool = Field(..., description="Whether the proof reproduced the root")
    hasher: str = Field(default=DEFAULT_HASHER)
    root: str = Field(..., description="Claimed root, 0x-hex")
    mmr_size: int = Field(..., ge=0)
    leaf_position: int = Field(..., ge=0)


class MMRSnapshot(BaseModel):
    """
    Full in-memory node mapping of an MMR.

    nodes[i] is the digest at position i. This is a transfer format for
    one commitment session, not a storage format.
    """

    model_config = ConfigDict(extra="forbid")

    hasher: str = Field(default=DEFAULT_HASHER)
    mmr_size: int = Field(..., ge=0)
    nodes: list[str] = Field(default_factory=list)

    @field_validator("nodes")
    @classmethod
    def _check_nodes(cls, v: list[str]) -> list[str]:
        return [_normalize_hex(item) for item in v]

    @model_validator(mode="after")
    def _check_size(self) -> "MMRSnapshot":
        if self.mmr_size != len(self.nodes):
            raise ValueError(
                f"mmr_size {self.mmr_size} does not match {len(self.nodes)} nodes"
            )
        return self

    @classmethod
    def from_digests(cls, hasher: str, digests: Sequence[bytes]) -> "MMRSnapshot":
        return cls(
            hasher=hasher,
            mmr_size=len(digests),
            nodes=[to_hex(d) for d in digests],
        )

    def digests(self) -> list[bytes]:
        return [from_hex(node) for node in self.nodes]


__all__ = [
    "RootRecord",
    "ProofRecord",
    "VerificationRecord",
    "MMRSnapshot",
]
