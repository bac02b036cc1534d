"""
Pytest configuration and shared fixtures for MMR tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_payload = _common.make_payload
make_payloads = _common.make_payloads
make_mmr = _common.make_mmr
flip_bit = _common.flip_bit


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(params=["blake2b", "blake2b-256", "sha256"])
def any_hasher(request):
    """Each registered hasher in turn."""
    from core.crypto.hashing import get_hasher
    return get_hasher(request.param)


@pytest.fixture
def blake2b():
    """The default hasher."""
    from core.crypto.hashing import get_hasher
    return get_hasher("blake2b")


@pytest.fixture
def ten_leaf_mmr():
    """MMR with ten leaves (payload i = bytes(b ^ i for b in range(32)))."""
    return make_mmr(10)


@pytest.fixture
def clean_mmr_env(monkeypatch):
    """Remove every MMR_* variable so config tests start from defaults."""
    import os
    for key in list(os.environ):
        if key.startswith("MMR_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
