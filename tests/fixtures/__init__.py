"""
Test fixtures package for MMR tests.

This package provides factory functions for creating test objects:
- common.py: payload and engine factories shared by all modules

Usage:
    from fixtures import make_mmr, make_payloads

    def test_something():
        mmr, positions, payloads = make_mmr(10)
"""

from .common import (
    flip_bit,
    make_mmr,
    make_payload,
    make_payloads,
)

__all__ = [
    "flip_bit",
    "make_mmr",
    "make_payload",
    "make_payloads",
]
