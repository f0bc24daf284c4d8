"""Tests for the configuration management module.

Covers:
- XDG directory resolution
- Atomic writes
- Global config load/save, including invalid files
- Project-local config
- resolve_config precedence: CLI > env > project > global > defaults
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from reqconv.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from reqconv.exceptions import ConfigError
from reqconv.models import CommandFormat, FlattenMode, GlobalConfig


class TestDirectories:
    def test_config_dir_follows_xdg(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "reqconv"
        assert get_config_dir().is_dir()

    def test_data_dir_follows_xdg(self, isolated_config: Path) -> None:
        assert get_data_dir() == isolated_config / "data" / "reqconv"

    def test_fallback_on_non_xdg_platform(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("reqconv.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".reqconv"
        assert get_data_dir() == tmp_path / ".reqconv" / "logs"


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, "{}\n")
        assert target.read_text() == "{}\n"

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "a")
        _atomic_write(target, "b")
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]
        assert target.read_text() == "b"


class TestGlobalConfig:
    def test_missing_file_gives_defaults(self, isolated_config: Path) -> None:
        assert load_global_config() == GlobalConfig()

    def test_save_and_load(self, isolated_config: Path) -> None:
        config = GlobalConfig(output_format=CommandFormat.HTTPIE)
        save_global_config(config)
        assert load_global_config() == config

    def test_saved_file_is_pretty_json(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig())
        data = json.loads((get_config_dir() / "config.json").read_text())
        assert data["converter"]["flatten_mode"] == "recursive"

    def test_invalid_json(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_value(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text('{"output_format": "wget"}')
        with pytest.raises(ConfigError):
            load_global_config()


class TestProjectConfig:
    def test_absent(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_present(self, isolated_config: Path) -> None:
        (isolated_config / "reqconv.json").write_text('{"output_format": "httpie"}')
        assert load_project_config() == {"output_format": "httpie"}

    def test_not_an_object(self, isolated_config: Path) -> None:
        (isolated_config / "reqconv.json").write_text("[]")
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.input_format is CommandFormat.CURL
        assert config.output_format is CommandFormat.CURL

    def test_global_config_is_used(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output_format=CommandFormat.HTTPIE))
        assert resolve_config().output_format is CommandFormat.HTTPIE

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output_format=CommandFormat.HTTPIE))
        (isolated_config / "reqconv.json").write_text(
            '{"output_format": "curl", "converter": {"flatten_mode": "inline"}}'
        )
        config = resolve_config()
        assert config.output_format is CommandFormat.CURL
        assert config.converter.flatten_mode is FlattenMode.INLINE
        # Nested keys not mentioned by the project file keep their values.
        assert config.converter.header_whitelist == ["authorization", "content-type"]

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (isolated_config / "reqconv.json").write_text('{"input_format": "curl"}')
        monkeypatch.setenv("REQCONV_FROM", "HTTPIE")
        assert resolve_config().input_format is CommandFormat.HTTPIE

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REQCONV_TO", "httpie")
        config = resolve_config(cli_output_format="curl", cli_flatten_mode="inline")
        assert config.output_format is CommandFormat.CURL
        assert config.converter.flatten_mode is FlattenMode.INLINE

    @pytest.mark.parametrize("converter", ['"oops"', "[]", "3"])
    def test_non_object_converter_section_with_flatten_flag(
        self, isolated_config: Path, converter: str
    ) -> None:
        (isolated_config / "reqconv.json").write_text(f'{{"converter": {converter}}}')
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(cli_flatten_mode="inline")

    def test_flatten_flag_keeps_other_converter_settings(
        self, isolated_config: Path
    ) -> None:
        (isolated_config / "reqconv.json").write_text(
            '{"converter": {"sort_keys": false, "header_whitelist": ["X-Api-Key"]}}'
        )
        config = resolve_config(cli_flatten_mode="inline")
        assert config.converter.flatten_mode is FlattenMode.INLINE
        assert config.converter.sort_keys is False
        assert config.converter.header_whitelist == ["x-api-key"]

    def test_invalid_env_value(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REQCONV_TO", "wget")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config()
