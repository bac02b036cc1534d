"""
Module 05 - CLI Configuration

Settings for the `mmr` command, read from a JSON file and overlaid with
MMR_* environment variables.

File search order (first hit wins, unless --config is given):
    ./mmr.json
    ./.mmr.json
    ~/.config/mmr/config.json
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any

from core.crypto.hashing import DEFAULT_HASHER


# Environment variable prefix
ENV_PREFIX = "MMR_"

# CLIConfig field -> environment variable
ENV_VARS: dict[str, str] = {
    "hasher": f"{ENV_PREFIX}HASHER",
    "log_level": f"{ENV_PREFIX}LOG_LEVEL",
    "log_file": f"{ENV_PREFIX}LOG_FILE",
    "default_output_format": f"{ENV_PREFIX}OUTPUT_FORMAT",
}


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    hasher: str = DEFAULT_HASHER
    log_level: str = "INFO"
    log_file: str | None = None
    default_output_format: str = "human"  # "human" or "json"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def update(self, values: dict[str, Any]) -> None:
        """Overwrite known fields from values; unknown keys are ignored."""
        for f in fields(self):
            if f.name in values:
                setattr(self, f.name, values[f.name])
        self.log_level = self.log_level.upper()


def _env_values() -> dict[str, str]:
    """CLIConfig values set in the environment, skipping empty variables."""
    return {name: os.environ[var] for name, var in ENV_VARS.items() if os.getenv(var)}


def load_config_from_env() -> CLIConfig:
    """Defaults overlaid with environment variables."""
    config = CLIConfig()
    config.update(_env_values())
    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must hold a JSON object")

    config = CLIConfig()
    config.update(data)
    return config


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "mmr.json",
        Path.cwd() / ".mmr.json",
        Path.home() / ".config" / "mmr" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Explicit config file; skips the search when given

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.update(_env_values())
    return config


def get_default_config_template() -> str:
    """JSON text written by `mmr config --init`."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
