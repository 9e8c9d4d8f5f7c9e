"""CLI command modules for create-toolchain."""

from __future__ import annotations

import typer

from .config_cmd import config
from .info_cmd import info
from .init_cmd import init
from .resolve import resolve


def register_commands(app: typer.Typer) -> None:
    """Attach every top-level command to *app*."""
    app.command()(init)
    app.command()(info)
    app.command()(resolve)
    app.command()(config)


__all__ = ["config", "info", "init", "register_commands", "resolve"]
