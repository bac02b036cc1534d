"""
Module 06 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.deps import get_runtime_config
from api.errors import APIError, api_error_handler, generic_error_handler, mmr_error_handler
from api.routes import health, mmr
from core.schemas.errors import MMRException


def _resolve_log_level() -> int:
    """Resolve log level from MMR_LOG_LEVEL or mmr.json, defaulting to INFO."""
    raw = get_runtime_config().logging.level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="MMR Commitments API",
        description="""
HTTP API for Merkle Mountain Range commitments.

## Endpoints

- **POST /mmr/root** - Bagged root of an MMR built from leaves
- **POST /mmr/proof** - Inclusion proof for one leaf
- **POST /mmr/generate** - Sample-leaf driver returning root, proof and leaf
- **POST /mmr/verify** - Verify an inclusion proof against a root
- **GET /health** - Health check

## Encoding

Every byte string (leaves, digests, proof items) is `0x`-prefixed hex.
Proof items may also be sent as one comma-separated string.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_runtime_config().api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(MMRException, mmr_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(mmr.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    config = get_runtime_config()
    uvicorn.run(app, host=config.api.host, port=config.api.port)
