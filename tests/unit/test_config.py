"""
Runtime & CLI Configuration Unit Tests
Tests for core/config/runtime.py and mmr_cli/config.py
"""

import json

import pytest

from core.config.runtime import (
    ApiConfig,
    HasherConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)
from core.schemas.errors import SchemaValidationException
from mmr_cli.config import (
    CLIConfig,
    get_default_config_template,
    load_config,
    load_config_from_file,
)


class TestRuntimeConfig:
    """Tests for RuntimeConfig loading."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.hasher.name == "blake2b"
        assert config.logging.level == "INFO"
        assert config.api.port == 8000

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"api": {"port": 9000}})

        assert config.api.port == 9000
        assert config.api.host == "127.0.0.1"
        assert config.hasher.name == "blake2b"

    def test_from_dict_hasher_shortcut(self):
        assert RuntimeConfig.from_dict({"hasher": "sha256"}).hasher.name == "sha256"

    def test_from_env(self, clean_mmr_env):
        clean_mmr_env.setenv("MMR_HASHER", "sha256")
        clean_mmr_env.setenv("MMR_LOG_LEVEL", "debug")
        clean_mmr_env.setenv("MMR_API_PORT", "8123")

        config = RuntimeConfig.from_env()

        assert config.hasher.name == "sha256"
        assert config.logging.level == "DEBUG"
        assert config.api.port == 8123

    def test_with_env_overrides(self, clean_mmr_env):
        base = RuntimeConfig.from_dict({"hasher": {"name": "blake2b-256"}, "api": {"host": "0.0.0.0"}})
        assert base.with_env_overrides() is base

        clean_mmr_env.setenv("MMR_HASHER", "sha256")
        overridden = base.with_env_overrides()

        assert overridden.hasher.name == "sha256"
        assert overridden.api.host == "0.0.0.0"
        assert base.hasher.name == "blake2b-256"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "mmr.yaml"
        path.write_text("hasher:\n  name: sha256\nlogging:\n  level: WARNING\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.hasher.name == "sha256"
        assert config.logging.level == "WARNING"

    def test_from_yaml_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_to_dict_round_trip(self):
        config = RuntimeConfig(api=ApiConfig(port=1234))
        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_hasher_build(self):
        assert HasherConfig("sha256").build().name == "sha256"
        with pytest.raises(SchemaValidationException):
            HasherConfig("md5").build()

    def test_default_config(self, clean_mmr_env):
        custom = RuntimeConfig(hasher=HasherConfig("sha256"))
        set_default_config(custom)
        try:
            assert get_default_config() is custom
        finally:
            set_default_config(None)

        assert get_default_config().hasher.name == "blake2b"
        set_default_config(None)


class TestCLIConfig:
    """Tests for the CLI's JSON config file."""

    def test_template_is_valid_json(self):
        data = json.loads(get_default_config_template())
        assert data["hasher"] == "blake2b"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "mmr.json"
        path.write_text(json.dumps({"hasher": "sha256", "log_level": "DEBUG"}))

        config = load_config_from_file(path)

        assert config.hasher == "sha256"
        assert config.log_level == "DEBUG"
        assert config.default_output_format == "human"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_from_file(tmp_path / "nope.json")

    def test_default_search_path(self, tmp_path, clean_mmr_env):
        clean_mmr_env.chdir(tmp_path)
        (tmp_path / "mmr.json").write_text(json.dumps({"hasher": "blake2b-256"}))

        assert load_config().hasher == "blake2b-256"

    def test_env_overrides_file(self, tmp_path, clean_mmr_env):
        clean_mmr_env.chdir(tmp_path)
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"hasher": "blake2b-256", "log_level": "ERROR"}))
        clean_mmr_env.setenv("MMR_HASHER", "sha256")

        config = load_config(path)

        assert config.hasher == "sha256"
        assert config.log_level == "ERROR"

    def test_to_dict(self):
        assert CLIConfig().to_dict() == {
            "hasher": "blake2b",
            "log_level": "INFO",
            "log_file": None,
            "default_output_format": "human",
        }


class TestApiRuntimeConfig:
    """Tests for the API's config file search."""

    def test_file_then_env(self, tmp_path, clean_mmr_env):
        from api.deps import _load_runtime_config

        clean_mmr_env.chdir(tmp_path)
        (tmp_path / "mmr.json").write_text(
            json.dumps({"hasher": "blake2b-256", "api": {"port": 9100}})
        )
        clean_mmr_env.setenv("MMR_API_PORT", "9200")

        config = _load_runtime_config()

        assert config.hasher.name == "blake2b-256"
        assert config.api.port == 9200

    def test_unparseable_file_skipped(self, tmp_path, clean_mmr_env):
        from api.deps import _load_runtime_config

        clean_mmr_env.chdir(tmp_path)
        (tmp_path / "mmr.json").write_text("{not json")
        (tmp_path / ".mmr.json").write_text(json.dumps({"hasher": "sha256"}))

        assert _load_runtime_config().hasher.name == "sha256"

    def test_resolve_hasher_named(self):
        from api.deps import resolve_hasher

        assert resolve_hasher("sha256").name == "sha256"
        with pytest.raises(SchemaValidationException):
            resolve_hasher("md5")
