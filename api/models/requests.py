"""
Module 06 - API Request Models

Pydantic models for API request validation.

Hex fields are kept as strings here and decoded in the route, so a bad
encoding surfaces as an ENCODING_ERROR response rather than a generic
validation failure.
"""

from typing import Literal

from pydantic import BaseModel, Field


class RootRequest(BaseModel):
    """Request body for POST /mmr/root."""

    leaves: list[str] = Field(
        default_factory=list,
        description="Leaves as 0x-hex, in push order",
    )
    leaf_kind: Literal["payload", "digest"] = Field(
        default="payload",
        description="'payload' leaves are leaf-hashed; 'digest' leaves are pushed as-is",
    )
    hasher: str | None = Field(default=None, description="Hasher name (default: server config)")


class ProofRequest(RootRequest):
    """Request body for POST /mmr/proof."""

    leaf_position: int = Field(..., ge=0, description="Position of the leaf to prove")


class GenerateRequest(BaseModel):
    """Request body for POST /mmr/generate."""

    items_len: int = Field(..., ge=0, le=1_000_000, description="Number of sample leaves")
    target_pos: int = Field(..., ge=0, description="Leaf position to prove")
    hasher: str | None = Field(default=None)


class VerifyRequest(BaseModel):
    """Request body for POST /mmr/verify."""

    root: str = Field(..., description="Claimed root, 0x-hex")
    proof: list[str] | str = Field(
        default_factory=list,
        description="Proof items as a list, or one comma-separated string",
    )
    mmr_size: int = Field(..., ge=0, description="MMR size the proof was generated at")
    leaf_position: int = Field(..., ge=0)
    leaf: str = Field(..., description="Leaf payload or digest, 0x-hex")
    leaf_kind: Literal["payload", "digest"] = Field(default="payload")
    hasher: str | None = Field(default=None)
