"""Shared console, banner and logging setup for CLI commands."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

from rich.align import Align
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from create_toolchain.core.config import BANNER, CLI_NAME, TAGLINE

console = Console()


def get_cli_version() -> str:
    try:
        return version(CLI_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def show_banner() -> None:
    """Display the ASCII art banner."""
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]
    styled = Text()
    for i, line in enumerate(BANNER.strip("\n").split("\n")):
        styled.append(line + "\n", style=colors[i % len(colors)])

    console.print(Align.center(styled))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


def configure_logging(verbose: bool = False) -> None:
    """Route create_toolchain log records through Rich on stderr."""
    logger = logging.getLogger("create_toolchain")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
        logger.addHandler(handler)


__all__ = ["configure_logging", "console", "get_cli_version", "show_banner"]
