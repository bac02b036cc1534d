"""
CLI command modules.
"""

from mmr_cli.commands import generate, root, prove, verify

__all__ = ["generate", "root", "prove", "verify"]
