"""Tests for fetchkit.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from fetchkit.config import (
    _atomic_write,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    load_global_config,
    resolve_config,
    save_global_config,
)
from fetchkit.exceptions import ConfigError
from fetchkit.models import CacheConfig, GlobalConfig, OutputConfig, RequestConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    @pytest.fixture(autouse=True)
    def _linux(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchkit.config._is_xdg_platform", lambda: True)

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        result = get_config_dir()
        assert result == tmp_path / "xdg" / "fetchkit"
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "fetchkit"

    def test_cache_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
        assert get_cache_dir() == tmp_path / "xdg-cache" / "fetchkit"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "fetchkit"
        assert result.is_dir()


class TestXDGPathsFallback:
    """Fallback paths on non-XDG platforms (macOS, Windows)."""

    @pytest.fixture(autouse=True)
    def _not_linux(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchkit.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    def test_config_dir_fallback(self, tmp_path: Path) -> None:
        assert get_config_dir() == tmp_path / ".fetchkit"

    def test_cache_dir_fallback(self, tmp_path: Path) -> None:
        result = get_cache_dir()
        assert result == tmp_path / ".fetchkit" / "cache"
        assert result.is_dir()

    def test_data_dir_fallback(self, tmp_path: Path) -> None:
        assert get_data_dir() == tmp_path / ".fetchkit" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("fetchkit.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        cfg = load_global_config()
        assert cfg == GlobalConfig()
        assert cfg.request.timeout == 30.0
        assert cfg.cache.enabled is True
        assert cfg.cache.serve_fresh is False

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        original = GlobalConfig(
            request=RequestConfig(timeout=5.0, verify_ssl=False),
            cache=CacheConfig(ttl_seconds=60),
            output=OutputConfig(format="json"),
        )
        save_global_config(original)
        assert load_global_config() == original

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        path = isolated_config / "config" / "fetchkit" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{invalid json!!!", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "config" / "fetchkit" / "config.json", {"cache": "not-a-dict"})
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > config file > defaults."""

    @pytest.fixture(autouse=True)
    def _isolate(self, isolated_config: Path) -> None:
        self.tmp_path = isolated_config

    def test_defaults(self) -> None:
        assert resolve_config() == GlobalConfig()

    def test_file_overrides_defaults(self) -> None:
        save_global_config(GlobalConfig(request=RequestConfig(timeout=12.5)))
        assert resolve_config().request.timeout == 12.5

    def test_env_overrides_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig(request=RequestConfig(timeout=12.5)))
        monkeypatch.setenv("FETCHKIT_TIMEOUT", "3")
        monkeypatch.setenv("FETCHKIT_CACHE_ENABLED", "no")
        monkeypatch.setenv("FETCHKIT_CACHE_TTL", "120")

        cfg = resolve_config()
        assert cfg.request.timeout == 3.0
        assert cfg.cache.enabled is False
        assert cfg.cache.ttl_seconds == 120

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_TIMEOUT", "3")
        monkeypatch.setenv("FETCHKIT_CACHE_ENABLED", "false")

        cfg = resolve_config(cli_timeout=9.0, cli_format="json")
        assert cfg.request.timeout == 9.0
        assert cfg.cache.enabled is False
        assert cfg.output.format == "json"

    def test_empty_env_is_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FETCHKIT_TIMEOUT", "")
        assert resolve_config().request.timeout == 30.0

    @pytest.mark.parametrize(
        "var, value",
        [
            ("FETCHKIT_TIMEOUT", "soon"),
            ("FETCHKIT_CACHE_TTL", "1.5"),
            ("FETCHKIT_CACHE_ENABLED", "maybe"),
        ],
    )
    def test_invalid_env_raises_config_error(
        self, monkeypatch: pytest.MonkeyPatch, var: str, value: str
    ) -> None:
        monkeypatch.setenv(var, value)
        with pytest.raises(ConfigError, match=var):
            resolve_config()
