"""
Runtime Configuration Module

Provides configuration loading and management for the MMR service and CLI.
"""

from .runtime import (
    ApiConfig,
    HasherConfig,
    LoggingConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "HasherConfig",
    "LoggingConfig",
    "ApiConfig",
    "get_default_config",
    "set_default_config",
]
