"""API route handlers."""

from api.routes import health, mmr

__all__ = ["health", "mmr"]
