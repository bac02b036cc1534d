"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the error taxonomy and canonical serialization API.

Transport records live in core.schemas.records and are imported from
there directly, since they depend on core.crypto.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    DigestWidthException,
    EmptyStructureException,
    EncodingException,
    ErrorCodes,
    InconsistentStoreException,
    InvalidTargetException,
    MalformedProofException,
    MMRError,
    MMRException,
    SchemaValidationException,
    UnknownPositionException,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "CanonicalizationException",
    "DigestWidthException",
    "EmptyStructureException",
    "EncodingException",
    "ErrorCodes",
    "InconsistentStoreException",
    "InvalidTargetException",
    "MalformedProofException",
    "MMRError",
    "MMRException",
    "SchemaValidationException",
    "UnknownPositionException",
]
