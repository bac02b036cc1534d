"""
Module 05 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m mmr_cli generate --items N --target POS [--hasher H] [--json]
    python -m mmr_cli root (--leaf HEX ... | --items N) [--hasher H] [--json]
    python -m mmr_cli prove --leaf HEX ... --position POS [--hasher H] [--json]
    python -m mmr_cli verify --root HEX --proof CSV --mmr-size N --position POS --leaf HEX
    python -m mmr_cli verify --record proof.json
    python -m mmr_cli config --init

Environment Variables:
    MMR_HASHER          Hasher name (default: blake2b)
    MMR_LOG_LEVEL       Log level (default: INFO)
    MMR_LOG_FILE        Optional log file
    MMR_OUTPUT_FORMAT   human or json (default: human)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.crypto.hashing import available_hashers
from mmr_cli.commands import generate, root, prove, verify
from mmr_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from mmr_cli.config import load_config, get_default_config_template


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_common_options(parser: argparse.ArgumentParser, leaf_kind: bool = True) -> None:
    parser.add_argument(
        "--hasher",
        type=str,
        default=None,
        choices=available_hashers(),
        help="Merge strategy (default: from config, else blake2b)",
    )
    if leaf_kind:
        parser.add_argument(
            "--leaf-kind",
            type=str,
            choices=["payload", "digest"],
            default="payload",
            help="'payload' leaves are leaf-hashed; 'digest' leaves are pushed as-is",
        )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mmr",
        description="Merkle Mountain Range CLI - build roots, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./mmr.json or ~/.config/mmr/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Push sample leaves and prove the one at a target position",
        description="Push N deterministic 32-byte leaves; prove the leaf written at --target.",
    )
    generate_parser.add_argument(
        "--items", "-n",
        type=int,
        required=True,
        help="Number of sample leaves to push",
    )
    generate_parser.add_argument(
        "--target", "-t",
        type=int,
        required=True,
        help="Leaf position to prove",
    )
    _add_common_options(generate_parser, leaf_kind=False)
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the root of an MMR",
        description="Build an MMR from the given leaves and print its bagged root.",
    )
    source = root_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--leaf", "-l",
        type=str,
        action="append",
        help="Leaf as 0x-hex (repeat in push order)",
    )
    source.add_argument(
        "--items", "-n",
        type=int,
        default=None,
        help="Use N sample leaves instead of --leaf",
    )
    _add_common_options(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one leaf",
        description="Build an MMR from the given leaves and prove the leaf at --position.",
    )
    prove_parser.add_argument(
        "--leaf", "-l",
        type=str,
        action="append",
        required=True,
        help="Leaf as 0x-hex (repeat in push order)",
    )
    prove_parser.add_argument(
        "--position", "-p",
        type=int,
        required=True,
        help="Position of the leaf to prove",
    )
    _add_common_options(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof offline",
        description="Recompute the root from a proof and compare it with --root.",
    )
    verify_parser.add_argument(
        "--record", "-r",
        type=Path,
        default=None,
        help="Proof record written by `mmr prove --json` (replaces the arguments below)",
    )
    verify_parser.add_argument("--root", type=str, default=None, help="Claimed root, 0x-hex")
    verify_parser.add_argument(
        "--proof",
        type=str,
        default=None,
        help="Comma-separated 0x-hex proof items (empty string for none)",
    )
    verify_parser.add_argument("--mmr-size", type=int, default=None, help="MMR size the proof was made at")
    verify_parser.add_argument("--position", "-p", type=int, default=None, help="Leaf position")
    verify_parser.add_argument("--leaf", "-l", type=str, default=None, help="Leaf, 0x-hex")
    _add_common_options(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="mmr.json",
        help="Path for config file (default: mmr.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MMR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: mmr config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "setup_logging",
    "create_parser",
    "config_cmd",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
