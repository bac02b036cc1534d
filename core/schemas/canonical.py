"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic JSON for transport records and MMR snapshots.

Encoding rules:
- Object keys sorted, no whitespace, UTF-8 kept as-is
- None-valued fields omitted
- bytes / bytearray encoded as lowercase 0x-hex (the digest wire format)
- Tuples encoded as arrays
- Floats are rejected: sizes and positions are integers, digests are hex
"""

import json
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

_SCALARS = (str, int)


def _child_path(path: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types under the encoding rules above.

    Pydantic models go through model_dump(mode="json") first, so their
    own field validators and serializers apply.

    Raises:
        CanonicalizationException: On floats, non-string keys, or any
            type with no canonical encoding. details["path"] points at
            the offending value.
    """
    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, _SCALARS):
        return value

    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()

    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json", exclude_none=True), path)

    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise CanonicalizationException(
                    message=f"Object keys must be strings, got {type(key).__name__}",
                    details={"path": path, "type": type(key).__name__},
                )
            if item is not None:
                out[key] = canonicalize_value(item, _child_path(path, key))
        return out

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, _child_path(path, i)) for i, item in enumerate(value)]

    if isinstance(value, float):
        raise CanonicalizationException(
            message=f"Floats have no canonical encoding: {value!r}",
            details={"path": path, "type": "float"},
        )

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize obj to its canonical JSON text.

    Example:
        >>> dumps_canonical({"root": b"\\x01", "mmr_size": 1})
        '{"mmr_size":1,"root":"0x01"}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def loads_canonical(data: str | bytes) -> Any:
    """Parse canonical JSON text. Floats in the input are rejected."""

    def _no_floats(raw: str) -> Any:
        raise CanonicalizationException(
            message=f"Floats have no canonical encoding: {raw}",
            details={"value": raw},
        )

    return json.loads(data, parse_float=_no_floats, parse_constant=_no_floats)

