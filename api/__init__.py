"""
Module 06 - Minimal API (FastAPI)

HTTP API for MMR commitments:
- POST /mmr/root - Root of an MMR built from leaves
- POST /mmr/proof - Inclusion proof for one leaf
- POST /mmr/generate - Sample-leaf driver (root, proof, leaf)
- POST /mmr/verify - Verify an inclusion proof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
