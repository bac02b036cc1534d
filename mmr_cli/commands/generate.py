"""
Module 05 - CLI Generate Command

Reproduce the sample driver: push N deterministic leaves and prove the
leaf written at a target position, at the moment it is written.

Usage:
    mmr generate --items 10 --target 16 [--hasher blake2b] [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field, asdict
from typing import Any

from core.mmr.commitments import generate_root, verify_record
from core.schemas.errors import MMRException
from mmr_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    print_json,
    resolve_hasher,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class GenerateSummary:
    """Summary of a generate run for CLI output."""
    items_len: int = 0
    target_pos: int = 0
    hasher: str = ""
    leaf_index: int | None = None
    mmr_size: int = 0
    root: str = ""
    leaf: str = ""
    proof: list[str] = field(default_factory=list)
    proof_csv: str = ""
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def print_summary_human(summary: GenerateSummary) -> None:
    """Print summary in human-readable format."""
    print(f"hasher: {summary.hasher}")
    print(f"leaf_index: {summary.leaf_index}")
    print(f"leaf_position: {summary.target_pos}")
    print(f"mmr_size: {summary.mmr_size}")
    print(f"root: {summary.root}")
    print(f"leaf: {summary.leaf}")
    print(f"proof: {summary.proof_csv}")
    print(f"valid: {str(summary.valid).lower()}")


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    if args.items < 0:
        print("Error: --items must be non-negative", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        hasher = resolve_hasher(args)
        record = generate_root(args.items, args.target, hasher)
        valid = verify_record(record).valid
    except MMRException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = GenerateSummary(
        items_len=args.items,
        target_pos=args.target,
        hasher=record.hasher,
        leaf_index=record.leaf_index,
        mmr_size=record.mmr_size,
        root=record.root,
        leaf=record.leaf,
        proof=list(record.proof),
        proof_csv=record.proof_csv,
        valid=valid,
    )

    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
