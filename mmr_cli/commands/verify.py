"""
Module 05 - CLI Verify Command

Check a single-leaf inclusion proof against a claimed root, offline.

Usage:
    mmr verify --root 0x.. --proof 0x..,0x.. --mmr-size 19 --position 16 \
        --leaf 0x.. [--leaf-kind payload|digest] [--json]
    mmr prove ... --json > proof.json && mmr verify --record proof.json

Exit codes: 0 valid, 2 invalid, 1 malformed input.
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from core.crypto.hashing import decode_proof_items, to_hex
from core.mmr.commitments import verify_record
from core.schemas.canonical import loads_canonical
from core.schemas.errors import MMRException
from core.schemas.records import ProofRecord
from mmr_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
    resolve_hasher,
    wants_json,
)


logger = logging.getLogger(__name__)

# Arguments required when no --record is given
PROOF_ARGS = ("root", "proof", "mmr_size", "position", "leaf")


def load_record(path: Path) -> ProofRecord:
    """Read a ProofRecord written by `mmr prove --json`."""
    if not path.exists():
        raise FileNotFoundError(f"Proof record not found: {path}")
    return ProofRecord.model_validate(loads_canonical(path.read_text()))


def record_from_args(args: Namespace) -> ProofRecord:
    """Assemble a ProofRecord from the individual command-line arguments."""
    missing = [name for name in PROOF_ARGS if getattr(args, name) is None]
    if missing:
        flags = ", ".join("--" + name.replace("_", "-") for name in missing)
        raise ValueError(f"missing {flags} (or pass --record)")

    hasher = resolve_hasher(args)
    return ProofRecord(
        hasher=hasher.name,
        mmr_size=args.mmr_size,
        leaf_position=args.position,
        leaf=args.leaf,
        leaf_kind=args.leaf_kind,
        root=args.root,
        proof=[to_hex(item) for item in decode_proof_items(args.proof)],
    )


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        if args.record is not None:
            record = load_record(args.record)
        else:
            record = record_from_args(args)
        result = verify_record(record)
    except ValidationError as e:
        print(f"Error: invalid proof input: {e.errors()[0]['msg']}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MMRException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if wants_json(args):
        print_json(result)
    else:
        print(f"valid: {str(result.valid).lower()}")
        print(f"root: {result.root}")
        print(f"mmr_size: {result.mmr_size}")
        print(f"leaf_position: {result.leaf_position}")

    if result.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
