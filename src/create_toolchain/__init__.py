"""
create-toolchain CLI - scaffold projects from template and toolchain packages.

Usage:
    create-toolchain init <project-directory> --template <template>
    create-toolchain resolve <template>
    create-toolchain info
"""

import sys

import typer
from rich.align import Align
from typer.core import TyperGroup

from create_toolchain.cli.commands import register_commands
from create_toolchain.cli.helpers import console, get_cli_version, show_banner


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="create-toolchain",
    help="Create projects from template and toolchain packages",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(get_cli_version())
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the create-toolchain version and exit",
    ),
):
    """Show banner when no subcommand is provided."""
    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print(Align.center("[dim]Run 'create-toolchain --help' for usage information[/dim]"))
        console.print()


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
