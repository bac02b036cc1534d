"""
Module 06 - API Error Handling

Maps core exceptions onto structured JSON error responses.

Status mapping:
    UNKNOWN_POSITION                           -> 404
    EMPTY_STRUCTURE                            -> 409
    INCONSISTENT_STORE, CANONICALIZATION_ERROR -> 500
    any other core error code                  -> 400
    anything else                              -> 500 INTERNAL_ERROR
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, MMRException


logger = logging.getLogger(__name__)


MMR_ERROR_STATUS: dict[str, int] = {
    ErrorCodes.UNKNOWN_POSITION: 404,
    ErrorCodes.EMPTY_STRUCTURE: 409,
    ErrorCodes.INCONSISTENT_STORE: 500,
    ErrorCodes.CANONICALIZATION_ERROR: 500,
}


class APIError(Exception):
    """Error raised by a route with an explicit HTTP status."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    @classmethod
    def from_mmr_exception(cls, exc: MMRException) -> "APIError":
        """Wrap a core exception, keeping its code and details."""
        return cls(
            code=exc.code,
            message=exc.message,
            status_code=MMR_ERROR_STATUS.get(exc.code, 400),
            details=exc.details,
        )

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(code=self.code, message=self.message, details=self.details),
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def mmr_error_handler(request: Request, exc: MMRException) -> JSONResponse:
    """Core MMRException raised inside a route."""
    return await api_error_handler(request, APIError.from_mmr_exception(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that escaped the core taxonomy."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
