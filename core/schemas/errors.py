"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the MMR core and its binding layers.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

All core errors are fail-fast and non-retryable: retrying a push or a
proof generation without restoring the exact prior state would corrupt
the structure.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the project."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Structure Errors
    EMPTY_STRUCTURE = "EMPTY_STRUCTURE"
    UNKNOWN_POSITION = "UNKNOWN_POSITION"
    INCONSISTENT_STORE = "INCONSISTENT_STORE"

    # Proof Errors
    INVALID_TARGET = "INVALID_TARGET"
    MALFORMED_PROOF = "MALFORMED_PROOF"

    # Hashing & Transport Errors
    DIGEST_WIDTH_VIOLATION = "DIGEST_WIDTH_VIOLATION"
    ENCODING_ERROR = "ENCODING_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MMRError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the binding layers to report core failures without
    leaking exceptions across a process boundary.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MMRException":
        """Convert this error model to a raised exception."""
        return MMRException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MMRException(Exception):
    """
    Base exception for all MMR errors.

    This exception carries structured error information and can be
    converted to/from MMRError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MMR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MMRError:
        """Convert this exception to an MMRError model."""
        return MMRError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(MMRException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class SchemaValidationException(MMRException):
    """Exception raised when an input does not match its expected shape."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_VALIDATION_ERROR,
            details=full_details,
        )


class EmptyStructureException(MMRException):
    """Raised when a root is requested from an MMR with no nodes."""

    def __init__(self, message: str = "MMR is empty and has no root") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_STRUCTURE,
            details={"mmr_size": 0},
        )


class UnknownPositionException(MMRException):
    """Raised when a node lookup targets a position that was never written."""

    def __init__(
        self,
        position: int,
        mmr_size: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message=message or f"Position {position} is out of range for MMR size {mmr_size}",
            code=ErrorCodes.UNKNOWN_POSITION,
            details={"position": position, "mmr_size": mmr_size},
        )


class InconsistentStoreException(MMRException):
    """Raised when the node store violates the append-only contract."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.INCONSISTENT_STORE,
            details=full_details,
        )


class InvalidTargetException(MMRException):
    """Raised when a proof is requested for a non-leaf or out-of-range position."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        mmr_size: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if position is not None:
            details["position"] = position
        if mmr_size is not None:
            details["mmr_size"] = mmr_size
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_TARGET,
            details=details,
        )


class MalformedProofException(MMRException):
    """
    Raised when a proof is structurally invalid.

    A well-formed proof that simply does not match the claimed root is
    NOT an error; verification returns False in that case.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=details,
        )


class DigestWidthException(MMRException):
    """Raised when a digest does not have the width its hasher produces."""

    def __init__(
        self,
        expected: int,
        actual: int,
        hasher: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"expected": expected, "actual": actual}
        if hasher:
            details["hasher"] = hasher
        super().__init__(
            message=f"Digest must be {expected} bytes, got {actual}",
            code=ErrorCodes.DIGEST_WIDTH_VIOLATION,
            details=details,
        )


class EncodingException(MMRException, ValueError):
    """Raised when hex or record decoding fails at the transport boundary."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=details,
        )
