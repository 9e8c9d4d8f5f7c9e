"""User settings stored in ``config.yaml`` under the create-toolchain home.

Resolution of the home directory:

1. ``CREATE_TOOLCHAIN_HOME`` environment variable (all platforms)
2. ``%APPDATA%\\create-toolchain\\`` on Windows (via platformdirs)
3. ``~/.create-toolchain/`` elsewhere

Environment overrides applied on top of the file:
``CREATE_TOOLCHAIN_DEFAULT_TEMPLATE`` and ``CREATE_TOOLCHAIN_INSTALLER``.
Command-line flags win over both.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from create_toolchain.core.config import DEFAULT_INDEX_URL, DEFAULT_TEMPLATE, INSTALLER_CHOICES
from create_toolchain.core.errors import SettingsError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
HOME_ENV = "CREATE_TOOLCHAIN_HOME"
ENV_OVERRIDES = {
    "CREATE_TOOLCHAIN_DEFAULT_TEMPLATE": "default_template",
    "CREATE_TOOLCHAIN_INSTALLER": "installer",
}


def _is_windows() -> bool:
    return os.name == "nt"


def get_home() -> Path:
    """Return the directory holding create-toolchain's config.yaml."""
    if env_home := os.environ.get(HOME_ENV):
        return Path(env_home)

    if _is_windows():
        from platformdirs import user_config_dir

        return Path(user_config_dir("create-toolchain", appauthor=False))

    return Path.home() / ".create-toolchain"


@dataclass
class Settings:
    default_template: str = DEFAULT_TEMPLATE
    installer: str = "npm"
    verbose: bool = False
    check_latest: bool = True
    index_url: str = DEFAULT_INDEX_URL

    @property
    def use_yarn(self) -> bool:
        return self.installer == "yarn"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: data[key] for key in data if key in known}
        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self) -> None:
        if not isinstance(self.default_template, str) or not self.default_template.strip():
            raise SettingsError("default_template must be a non-empty string")
        if self.installer not in INSTALLER_CHOICES:
            choices = ", ".join(INSTALLER_CHOICES)
            raise SettingsError(f"Unknown installer '{self.installer}'. Choose from: {choices}")
        for flag in ("verbose", "check_latest"):
            if not isinstance(getattr(self, flag), bool):
                raise SettingsError(f"{flag} must be true or false")
        if not isinstance(self.index_url, str) or not self.index_url.startswith(("http://", "https://")):
            raise SettingsError("index_url must be an http(s) URL")


def config_path(home: Path | None = None) -> Path:
    return (home or get_home()) / CONFIG_FILENAME


def _load_payload(path: Path) -> dict[str, Any]:
    yaml = YAML()
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except Exception as exc:
        raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsError(f"Invalid {path}: expected a mapping at the top level")
    return payload


def load_settings(home: Path | None = None, *, apply_env: bool = True) -> Settings:
    """Load settings from config.yaml (defaults when absent) plus env overrides."""
    path = config_path(home)
    payload: dict[str, Any] = {}
    if path.exists():
        payload = dict(_load_payload(path))
        logger.debug("Loaded settings from %s", path)

    if apply_env:
        for env_name, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                payload[key] = value.strip()

    return Settings.from_dict(payload)


def save_settings(settings: Settings, home: Path | None = None) -> Path:
    """Write settings to config.yaml, preserving keys this version doesn't know."""
    settings.validate()
    path = config_path(home)
    path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.preserve_quotes = True
    payload = _load_payload(path) if path.exists() else {}
    payload.update(settings.to_dict())

    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(payload, handle)
    logger.info("Saved settings to %s", path)
    return path


def coerce_setting(key: str, raw: str) -> Any:
    """Convert a ``KEY=VALUE`` string from the command line to the field's type."""
    known = {f.name: f for f in fields(Settings)}
    if key not in known:
        raise SettingsError(f"Unknown setting '{key}'. Known settings: {', '.join(known)}")
    if isinstance(getattr(Settings(), key), bool):
        lowered = raw.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
        raise SettingsError(f"{key} must be true or false, got '{raw}'")
    return raw.strip()


__all__ = [
    "CONFIG_FILENAME",
    "Settings",
    "coerce_setting",
    "config_path",
    "get_home",
    "load_settings",
    "save_settings",
]
