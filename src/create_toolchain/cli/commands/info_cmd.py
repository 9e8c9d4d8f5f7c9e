"""Environment info command implementation."""

from __future__ import annotations

import platform
import shutil
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from create_toolchain.cli import StepTracker
from create_toolchain.cli.helpers import console, get_cli_version, show_banner
from create_toolchain.core.config import CLI_NAME
from create_toolchain.core.validation import get_tool_version

TOOL_LABELS = [
    ("node", "Node.js runtime"),
    ("npm", "npm package manager"),
    ("yarnpkg", "Yarn package manager"),
    ("git", "Git version control"),
]

BINARY_VERSIONS = [
    ("Node", ["node", "--version"]),
    ("npm", ["npm", "--version"]),
    ("Yarn", ["yarnpkg", "--version"]),
]


def collect_environment_info() -> dict[str, dict[str, str]]:
    """Gather system and binary details for bug reports."""
    binaries = {}
    for label, command in BINARY_VERSIONS:
        binaries[label] = get_tool_version(command) or "Not Found"

    return {
        CLI_NAME: {
            "version": get_cli_version(),
            "location": str(Path(__file__).resolve().parents[2]),
        },
        "System": {
            "OS": f"{platform.system()} {platform.release()}",
            "CPU": platform.machine() or "unknown",
            "Python": sys.version.split()[0],
        },
        "Binaries": binaries,
    }


def print_environment_info(output: Console | None = None) -> None:
    output = output or console
    info = collect_environment_info()

    table = Table(title="Environment Info", show_header=False, title_justify="left")
    table.add_column("Section", style="bold cyan")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for section, values in info.items():
        for index, (key, value) in enumerate(values.items()):
            table.add_row(section if index == 0 else "", key, value)

    output.print(table)


def info() -> None:
    """Print environment debug info and check for required tools."""
    show_banner()
    print_environment_info()
    console.print()

    tracker = StepTracker("Check Available Tools")
    for key, label in TOOL_LABELS:
        tracker.add(key, label)
        if shutil.which(key):
            tracker.complete(key, "available")
        else:
            tracker.error(key, "not found")

    console.print(tracker.render())
    console.print()

    if tracker.get("node").status == "error":
        console.print("[dim]Tip: Install Node 12 or higher to create projects[/dim]")
    if tracker.get("npm").status == "error" and tracker.get("yarnpkg").status == "error":
        console.print("[dim]Tip: Install npm or Yarn 2+ to install templates[/dim]")


__all__ = ["collect_environment_info", "info", "print_environment_info"]
