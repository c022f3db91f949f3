"""Tests for cache config loading."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError
import pytest

from treecache.core.config import CacheConfig, detect_format, load_cache_config, load_config
from treecache.core.config.loader import ROOT_ENV_VAR


@pytest.fixture(autouse=True)
def _clear_root_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ROOT_ENV_VAR, raising=False)


class TestDetectFormat:
    """Tests for detect_format."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("cache.json", "json"), ("cache.yaml", "yaml"), ("cache.YML", "yaml")],
    )
    def test_known_extensions(self, name: str, expected: str) -> None:
        assert detect_format(name) == expected

    def test_unknown_extension(self) -> None:
        with pytest.raises(ValueError, match="Unsupported config format"):
            detect_format("cache.toml")


class TestLoadConfig:
    """Tests for raw config loading."""

    def test_load_json(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"default_ttl_seconds": 60}))

        assert load_config(path) == {"default_ttl_seconds": 60}

    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.yaml"
        path.write_text("read_only: true\nlogging:\n  level: debug\n")

        assert load_config(path) == {"read_only": True, "logging": {"level": "debug"}}

    def test_empty_yaml_is_empty_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.yml"
        path.write_text("")

        assert load_config(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(path)

    def test_root_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)


class TestLoadCacheConfig:
    """Tests for validated cache config loading."""

    def test_defaults_without_file(self) -> None:
        config = load_cache_config()

        assert config.root == Path("./cache").resolve()
        assert config.default_ttl_seconds == 0
        assert config.read_only is False
        assert config.layout == "sharded"
        assert config.type == "file-system"

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        assert load_cache_config(tmp_path / "absent.yaml") == CacheConfig()

    def test_values_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.yaml"
        path.write_text(
            f"root: {tmp_path / 'store'}\n"
            "default_ttl_seconds: 30\n"
            "layout: padded\n"
            "logging:\n  level: info\n  structured: true\n"
        )

        config = load_cache_config(path)

        assert config.root == (tmp_path / "store").resolve()
        assert config.default_ttl_seconds == 30
        assert config.layout == "padded"
        assert config.logging.level == "INFO"
        assert config.logging.structured is True

    def test_env_overrides_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"root": str(tmp_path / "from-file")}))
        monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path / "from-env"))

        assert load_cache_config(path).root == (tmp_path / "from-env").resolve()

    def test_unknown_keys_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"rooot": "/tmp"}))

        with pytest.raises(ValidationError):
            load_cache_config(path)

    @pytest.mark.parametrize(
        "raw",
        [
            {"default_ttl_seconds": -1},
            {"shard_width": 0},
            {"layout": "nested"},
            {"logging": {"level": "LOUD"}},
        ],
    )
    def test_invalid_values_rejected(self, raw: dict) -> None:
        with pytest.raises(ValidationError):
            CacheConfig.model_validate(raw)
