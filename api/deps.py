"""
Module 06 - API Dependencies

Runtime configuration and hasher resolution for request handlers.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import Hasher, get_hasher

logger = logging.getLogger(__name__)


CONFIG_SEARCH_PATHS = (
    Path("mmr.json"),
    Path(".mmr.json"),
    Path.home() / ".config" / "mmr" / "config.json",
)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./mmr.json
      2. ./.mmr.json
      3. ~/.config/mmr/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    config: RuntimeConfig | None = None

    for path in CONFIG_SEARCH_PATHS:
        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to parse {path}: {e}")
                continue
            logger.info(f"Loaded config from {path}")
            config = RuntimeConfig.from_dict(data)
            break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


@lru_cache(maxsize=1)
def get_runtime_config() -> RuntimeConfig:
    """Process-wide runtime config, loaded once."""
    return _load_runtime_config()


def resolve_hasher(name: str | None = None) -> Hasher:
    """
    Hasher named in the request, else the server default.

    Raises:
        SchemaValidationException: If the name is not a registered hasher
    """
    if name:
        return get_hasher(name)
    return get_runtime_config().hasher.build()
