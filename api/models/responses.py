"""
Module 06 - API Response Models

Pydantic models for API response serialization.

The /mmr endpoints answer with the transport records from
core.schemas.records directly.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health."""

    ok: bool = True
    service: str = "mmr-commitments-api"
    version: str
    hashers: list[str] = Field(default_factory=list, description="Accepted hasher names")
    default_hasher: str = Field(..., description="Hasher used when a request names none")


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Stable error code, see core.schemas.errors.ErrorCodes")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Body of every non-2xx answer except request validation (422)."""

    ok: bool = False
    error: ErrorDetail
