"""
Module 05 - CLI Prove Command

Build an MMR from leaves and print an inclusion proof for one of them.

Usage:
    mmr prove --leaf 0x01 --leaf 0x02 --leaf 0x03 --position 3 [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from core.mmr.commitments import prove_leaves
from core.schemas.errors import MMRException
from mmr_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    parse_leaves,
    print_json,
    resolve_hasher,
    wants_json,
)


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """Execute the prove command."""
    try:
        hasher = resolve_hasher(args)
        leaves = parse_leaves(args.leaf, args.leaf_kind, hasher)
        record = prove_leaves(
            leaves,
            args.position,
            hasher,
            hash_leaves=args.leaf_kind == "payload",
        )
    except MMRException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if wants_json(args):
        print_json(record)
    else:
        print(f"hasher: {record.hasher}")
        print(f"leaf_index: {record.leaf_index}")
        print(f"leaf_position: {record.leaf_position}")
        print(f"mmr_size: {record.mmr_size}")
        print(f"root: {record.root}")
        print(f"leaf: {record.leaf}")
        print(f"proof: {record.proof_csv}")

    return EXIT_SUCCESS
