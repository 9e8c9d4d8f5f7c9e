"""Top-level ``create-toolchain config`` command."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.table import Table

from create_toolchain.cli.helpers import console
from create_toolchain.core.errors import CreateToolchainError
from create_toolchain.core.settings import coerce_setting, config_path, load_settings, save_settings


def config(
    set_values: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Update a setting, e.g. --set installer=yarn (repeatable)",
    ),
) -> None:
    """Show or update create-toolchain settings."""
    try:
        if set_values:
            # Persist only what the file says, not environment overrides.
            settings = load_settings(apply_env=False)
            for item in set_values:
                key, sep, value = item.partition("=")
                if not sep:
                    raise typer.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint="--set")
                setattr(settings, key.strip(), coerce_setting(key.strip(), value))
            path = save_settings(settings)
            console.print(f"[green]Saved[/green] {path}")

        settings = load_settings()
    except CreateToolchainError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(1)

    table = Table(title="Settings", show_lines=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="bold")
    for key, value in settings.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)
    console.print(f"[dim]Config file: {config_path()}[/dim]")


__all__ = ["config"]
