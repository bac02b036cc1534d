"""
Runtime Configuration

Central configuration for hasher selection, logging, and the HTTP service.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from core.crypto.hashing import DEFAULT_HASHER, get_hasher, Hasher

load_dotenv()


@dataclass
class HasherConfig:
    """Configuration for the merge strategy."""
    name: str = DEFAULT_HASHER

    def build(self) -> Hasher:
        """Instantiate the configured hasher."""
        return get_hasher(self.name)


@dataclass
class LoggingConfig:
    """Configuration for process-wide logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class ApiConfig:
    """Configuration for the HTTP service."""
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hasher: HasherConfig = field(default_factory=HasherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MMR_HASHER: Hasher name (blake2b, blake2b-256, sha256)
        - MMR_LOG_LEVEL: Log level name
        - MMR_LOG_FILE: Optional log file path
        - MMR_API_HOST: Bind host for the HTTP service
        - MMR_API_PORT: Bind port for the HTTP service
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MMR_HASHER"):
            overrides.setdefault("hasher", {})["name"] = os.getenv("MMR_HASHER")

        if os.getenv("MMR_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("MMR_LOG_LEVEL").upper()
        if os.getenv("MMR_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("MMR_LOG_FILE")

        if os.getenv("MMR_API_HOST"):
            overrides.setdefault("api", {})["host"] = os.getenv("MMR_API_HOST")
        if os.getenv("MMR_API_PORT"):
            overrides.setdefault("api", {})["port"] = int(os.getenv("MMR_API_PORT"))

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        hasher_data = data.get("hasher", {})
        # a bare string names the hasher
        if isinstance(hasher_data, str):
            hasher_data = {"name": hasher_data}
        logging_data = data.get("logging", {})
        api_data = data.get("api", {})

        return cls(
            hasher=HasherConfig(**hasher_data) if hasher_data else HasherConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            api=ApiConfig(**api_data) if api_data else ApiConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hasher": {
                "name": self.hasher.name,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "api": {
                "host": self.api.host,
                "port": self.api.port,
                "cors_origins": list(self.api.cors_origins),
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets to env-derived)."""
    global _default_config
    _default_config = config
