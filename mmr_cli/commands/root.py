"""
Module 05 - CLI Root Command

Build an MMR from leaves given on the command line (or sample leaves)
and print its root.

Usage:
    mmr root --leaf 0x01 --leaf 0x02 [--leaf-kind payload|digest] [--json]
    mmr root --items 10 [--json]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from core.mmr.commitments import build_mmr, build_sample_mmr, root_record
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


def root_cmd(args: Namespace) -> int:
    """Execute the root command."""
    try:
        hasher = resolve_hasher(args)
        if args.items is not None:
            mmr = build_sample_mmr(args.items, hasher)
        else:
            leaves = parse_leaves(args.leaf, args.leaf_kind, hasher)
            mmr = build_mmr(leaves, hasher, hash_leaves=args.leaf_kind == "payload")
        record = root_record(mmr)
    except MMRException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Built MMR with {record.leaf_count} leaves ({record.mmr_size} nodes)")

    if wants_json(args):
        print_json(record)
    else:
        print(f"hasher: {record.hasher}")
        print(f"leaf_count: {record.leaf_count}")
        print(f"mmr_size: {record.mmr_size}")
        print(f"root: {record.root}")

    return EXIT_SUCCESS
