from __future__ import annotations

import io

import pytest
from rich.console import Console
from typer.testing import CliRunner

from create_toolchain import app
from create_toolchain.cli import helpers
from create_toolchain.cli.commands import info_cmd as info_module
from create_toolchain.cli.commands.info_cmd import collect_environment_info

runner = CliRunner()

VERSIONS = {"node": "v18.17.1", "npm": "9.6.7"}


@pytest.fixture()
def console(monkeypatch: pytest.MonkeyPatch) -> Console:
    console = Console(file=io.StringIO(), force_terminal=False, width=200)
    monkeypatch.setattr(info_module, "console", console)
    monkeypatch.setattr(helpers, "console", console)
    monkeypatch.setattr(info_module, "get_tool_version", lambda command: VERSIONS.get(command[0]))
    return console


def test_collect_environment_info(console: Console):
    info = collect_environment_info()

    assert info["Binaries"] == {"Node": "v18.17.1", "npm": "9.6.7", "Yarn": "Not Found"}
    assert set(info["System"]) == {"OS", "CPU", "Python"}
    assert "version" in info["create-toolchain"]


def test_info_command_reports_tools(monkeypatch: pytest.MonkeyPatch, console: Console):
    available = {"node", "npm"}
    monkeypatch.setattr(info_module.shutil, "which", lambda name: f"/usr/bin/{name}" if name in available else None)

    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    output = console.file.getvalue()
    assert "Environment Info" in output
    assert "v18.17.1" in output
    assert "Not Found" in output
    assert "Check Available Tools" in output
    assert "Install Node 12" not in output


def test_info_command_tips_when_node_missing(monkeypatch: pytest.MonkeyPatch, console: Console):
    monkeypatch.setattr(info_module.shutil, "which", lambda name: None)

    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    output = console.file.getvalue()
    assert "Install Node 12 or higher" in output
    assert "Install npm or Yarn 2+" in output
