"""
Module 05 - MMR CLI

Command-line interface for building MMR commitments and checking proofs.

Usage:
    python -m mmr_cli generate --items 10 --target 16
    python -m mmr_cli root --leaf 0x01 --leaf 0x02
    python -m mmr_cli prove --leaf 0x01 --leaf 0x02 --position 1
    python -m mmr_cli verify --root 0x.. --proof 0x..,0x.. --mmr-size 3 --position 1 --leaf 0x02
"""

__version__ = "0.1.0"
