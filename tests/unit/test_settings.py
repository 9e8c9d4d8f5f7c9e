"""Tests for config.yaml settings and home directory resolution."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from create_toolchain.core.errors import SettingsError
from create_toolchain.core.settings import (
    Settings,
    coerce_setting,
    config_path,
    get_home,
    load_settings,
    save_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CREATE_TOOLCHAIN_HOME", "CREATE_TOOLCHAIN_DEFAULT_TEMPLATE", "CREATE_TOOLCHAIN_INSTALLER"):
        monkeypatch.delenv(name, raising=False)


class TestGetHome:
    def test_env_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("CREATE_TOOLCHAIN_HOME", str(tmp_path))
        assert get_home() == tmp_path

    def test_unix_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("os.name", "posix")
        assert get_home() == Path.home() / ".create-toolchain"

    def test_windows_uses_platformdirs(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("create_toolchain.core.settings._is_windows", lambda: True)
        with patch("platformdirs.user_config_dir", return_value=r"C:\Users\me\AppData\Roaming\create-toolchain"):
            assert get_home() == Path(r"C:\Users\me\AppData\Roaming\create-toolchain")


class TestLoadSettings:
    def test_defaults_when_missing(self, tmp_path: Path):
        assert load_settings(tmp_path) == Settings()

    def test_reads_yaml(self, tmp_path: Path):
        config_path(tmp_path).write_text(
            "default_template: cra-template\ninstaller: yarn\nverbose: true\nunknown: 1\n",
            encoding="utf-8",
        )
        settings = load_settings(tmp_path)
        assert settings.default_template == "cra-template"
        assert settings.use_yarn
        assert settings.verbose

    def test_corrupt_yaml(self, tmp_path: Path):
        config_path(tmp_path).write_text("invalid: yaml: content: [", encoding="utf-8")
        with pytest.raises(SettingsError, match="Invalid YAML"):
            load_settings(tmp_path)

    def test_unknown_installer(self, tmp_path: Path):
        config_path(tmp_path).write_text("installer: pnpm\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="Unknown installer 'pnpm'"):
            load_settings(tmp_path)

    def test_non_mapping(self, tmp_path: Path):
        config_path(tmp_path).write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(SettingsError, match="expected a mapping"):
            load_settings(tmp_path)

    def test_env_overrides_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        config_path(tmp_path).write_text("installer: npm\n", encoding="utf-8")
        monkeypatch.setenv("CREATE_TOOLCHAIN_INSTALLER", "yarn")
        monkeypatch.setenv("CREATE_TOOLCHAIN_DEFAULT_TEMPLATE", "default-template")
        settings = load_settings(tmp_path)
        assert settings.installer == "yarn"
        assert settings.default_template == "default-template"
        assert load_settings(tmp_path, apply_env=False).installer == "npm"


class TestSaveSettings:
    def test_round_trip_preserves_unknown_keys(self, tmp_path: Path):
        config_path(tmp_path).write_text("# my settings\nteam: web\n", encoding="utf-8")
        save_settings(Settings(installer="yarn"), tmp_path)

        content = config_path(tmp_path).read_text(encoding="utf-8")
        assert "team: web" in content
        assert "installer: yarn" in content
        assert load_settings(tmp_path).installer == "yarn"

    def test_creates_home(self, tmp_path: Path):
        home = tmp_path / "new-home"
        path = save_settings(Settings(), home)
        assert path == home / "config.yaml"
        assert path.exists()

    def test_rejects_invalid(self, tmp_path: Path):
        with pytest.raises(SettingsError):
            save_settings(Settings(index_url="ftp://nope"), tmp_path)


class TestCoerceSetting:
    def test_bool_values(self):
        assert coerce_setting("verbose", "yes") is True
        assert coerce_setting("check_latest", "off") is False

    def test_bad_bool(self):
        with pytest.raises(SettingsError, match="true or false"):
            coerce_setting("verbose", "maybe")

    def test_string_value(self):
        assert coerce_setting("default_template", " cra-template ") == "cra-template"

    def test_unknown_key(self):
        with pytest.raises(SettingsError, match="Unknown setting"):
            coerce_setting("colour", "blue")
