"""API request and response models."""

from api.models.requests import (
    GenerateRequest,
    ProofRequest,
    RootRequest,
    VerifyRequest,
)
from api.models.responses import (
    HealthResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "GenerateRequest",
    "ProofRequest",
    "RootRequest",
    "VerifyRequest",
    "HealthResponse",
    "ErrorDetail",
    "ErrorResponse",
]
