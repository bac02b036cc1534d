"""
Module 06 - Health Check Route

Liveness check that also advertises which hashers the service accepts.
"""

from fastapi import APIRouter

from api import __version__
from api.deps import get_runtime_config
from api.models.responses import HealthResponse
from core.crypto.hashing import available_hashers


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
    """Service status, accepted hashers and the default hasher."""
    return HealthResponse(
        ok=True,
        version=__version__,
        hashers=available_hashers(),
        default_hasher=get_runtime_config().hasher.name,
    )
