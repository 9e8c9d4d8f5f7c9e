from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config.yaml lookups at a throwaway home and drop env overrides."""
    home = tmp_path / "toolchain-home"
    monkeypatch.setenv("CREATE_TOOLCHAIN_HOME", str(home))
    monkeypatch.delenv("CREATE_TOOLCHAIN_DEFAULT_TEMPLATE", raising=False)
    monkeypatch.delenv("CREATE_TOOLCHAIN_INSTALLER", raising=False)
    return home
