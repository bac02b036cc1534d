"""
Helpers shared by the CLI commands.
"""

from __future__ import annotations

from argparse import Namespace
from typing import Any, Sequence

from core.crypto.hashing import Hasher, decode_digests, from_hex, get_hasher
from core.schemas.canonical import dumps_canonical


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def resolve_hasher(args: Namespace) -> Hasher:
    """Hasher from --hasher, falling back to the loaded CLI config."""
    name = getattr(args, "hasher", None)
    if not name:
        config = getattr(args, "cli_config", None)
        name = config.hasher if config is not None else None
    return get_hasher(name)


def wants_json(args: Namespace) -> bool:
    if getattr(args, "json", False):
        return True
    config = getattr(args, "cli_config", None)
    return config is not None and config.default_output_format == "json"


def parse_leaves(values: Sequence[str], leaf_kind: str, hasher: Hasher) -> list[bytes]:
    """Decode --leaf arguments; digest leaves must match the hasher's width."""
    if leaf_kind == "digest":
        return decode_digests(values, hasher)
    return [from_hex(value) for value in values]


def print_json(data: Any) -> None:
    """Print a record or dict as one line of canonical JSON."""
    print(dumps_canonical(data))
