"""Init command implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer
from rich.panel import Panel

from create_toolchain.cli import StepTracker
from create_toolchain.cli.commands.info_cmd import print_environment_info
from create_toolchain.cli.commands.init_help import INIT_COMMAND_DOC
from create_toolchain.cli.helpers import configure_logging, console, get_cli_version
from create_toolchain.core.config import CLI_NAME
from create_toolchain.core.errors import (
    CommandFailedError,
    CreateToolchainError,
    DirectoryConflictError,
    OutdatedCliError,
    ProjectNameError,
)
from create_toolchain.core.project import ProjectContext, cleanup_generated_files, create_project
from create_toolchain.core.settings import Settings, load_settings
from create_toolchain.core.validation import (
    check_cli_version,
    check_node_version,
    check_npm_can_read_cwd,
    check_npm_version,
    check_yarn_version,
    find_conflicting_files,
    remove_error_logs,
    validate_project_name,
)


def _run_check(tracker: StepTracker, key: str, check: Callable[[], Optional[str]]) -> None:
    tracker.start(key)
    try:
        detail = check()
    except CreateToolchainError as exc:
        tracker.error(key, "failed")
        console.print(tracker.render())
        _report_error(exc)
        raise typer.Exit(1)
    tracker.complete(key, detail or "ok")


def _report_error(exc: CreateToolchainError) -> None:
    console.print()
    if isinstance(exc, ProjectNameError):
        lines = [f"[red]{exc.message}[/red]", ""]
        lines.extend(f"  * {problem}" for problem in exc.problems)
        lines.extend(["", "Please choose a different project name."])
        console.print(Panel("\n".join(lines), title="[red]Invalid Project Name[/red]", border_style="red"))
    elif isinstance(exc, DirectoryConflictError):
        lines = [f"The directory [green]{exc.root}[/green] contains files that could conflict:", ""]
        for entry in exc.conflicts:
            if (exc.root / entry).is_dir():
                lines.append(f"  [blue]{entry}/[/blue]")
            else:
                lines.append(f"  {entry}")
        lines.extend(["", "Either try using a new directory name, or remove the files listed above."])
        console.print(Panel("\n".join(lines), title="[red]Directory Conflict[/red]", border_style="red"))
    elif isinstance(exc, OutdatedCliError):
        console.print(f"[yellow]{exc.message}[/yellow]")
        console.print()
        console.print(
            "Please upgrade with one of the following commands:\n"
            f"- pip install --upgrade {CLI_NAME}\n"
            f"- pipx upgrade {CLI_NAME}\n"
            "or pass --skip-version-check to continue with this version."
        )
    else:
        console.print(f"[red]Error:[/red] {exc.message}")


def _check_project_name(name: str) -> str:
    validation = validate_project_name(name)
    if not validation.valid:
        raise ProjectNameError(name, validation.problems)
    return name


def _check_project_directory(root: Path) -> str:
    root.mkdir(parents=True, exist_ok=True)
    conflicts = find_conflicting_files(root)
    if conflicts:
        raise DirectoryConflictError(root, conflicts)
    removed = remove_error_logs(root)
    return f"removed {len(removed)} old log(s)" if removed else "empty"


def _abort(root: Path, exc: BaseException) -> None:
    console.print()
    console.print("Aborting installation.")
    if isinstance(exc, CommandFailedError):
        console.print(f"  [cyan]{exc.command}[/cyan] has failed.")
        if exc.message != f"{exc.command} has failed.":
            console.print(f"  [dim]{exc.message}[/dim]")
    elif isinstance(exc, CreateToolchainError):
        console.print(f"[red]{exc.message}[/red]")
    else:
        console.print("[red]Unexpected error. Please report it as a bug:[/red]")
        console.print(repr(exc))
    console.print()
    cleanup_generated_files(root, console=console)
    console.print("Done.")


def init(
    project_directory: Optional[str] = typer.Argument(None, help="Directory to create the project in"),
    template: Optional[str] = typer.Option(
        None,
        "--template",
        "-t",
        help="Template to create the project from (name, @scope, name@version, file:path, URL or .tgz)",
    ),
    use_yarn: Optional[bool] = typer.Option(
        None,
        "--use-yarn/--use-npm",
        help="Install packages with yarn instead of npm (defaults to the configured installer)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print additional logs"),
    skip_version_check: bool = typer.Option(
        False,
        "--skip-version-check",
        help="Do not check the package index for a newer create-toolchain release",
    ),
    show_info: bool = typer.Option(False, "--info", help="Print environment debug info and exit"),
) -> None:
    configure_logging(verbose)

    if show_info:
        print_environment_info()
        return

    try:
        settings: Settings = load_settings()
    except CreateToolchainError as exc:
        _report_error(exc)
        raise typer.Exit(1)

    verbose = verbose or settings.verbose
    if verbose:
        configure_logging(True)
    if use_yarn is None:
        use_yarn = settings.use_yarn

    if not project_directory:
        console.print("[red]Error:[/red] Please specify the project directory:")
        console.print(f"  [cyan]{CLI_NAME} init[/cyan] [green]<project-directory>[/green]")
        console.print()
        console.print("For example:")
        console.print(f"  [cyan]{CLI_NAME} init[/cyan] [green]my-project-name[/green]")
        console.print()
        console.print(f"Run [cyan]{CLI_NAME} init --help[/cyan] to see all options.")
        raise typer.Exit(1)

    root = Path(project_directory).resolve()
    project_name = root.name
    program_directory = Path.cwd()

    tracker = StepTracker("Preflight Checks")
    tracker.add("node", "Node version")
    tracker.add("installer", "yarn version" if use_yarn else "npm version")
    tracker.add("name", "Project name")
    tracker.add("directory", "Project directory")
    if not use_yarn:
        tracker.add("npm-cwd", "npm working directory")
    tracker.add("cli-version", f"{CLI_NAME} version")

    _run_check(tracker, "node", check_node_version)
    _run_check(tracker, "installer", check_yarn_version if use_yarn else check_npm_version)
    _run_check(tracker, "name", lambda: _check_project_name(project_name))
    _run_check(tracker, "directory", lambda: _check_project_directory(root))
    if not use_yarn:
        _run_check(tracker, "npm-cwd", lambda: check_npm_can_read_cwd(root))
    if skip_version_check or not settings.check_latest:
        tracker.skip("cli-version", "skipped")
    else:
        _run_check(
            tracker,
            "cli-version",
            lambda: check_cli_version(get_cli_version(), index_url=settings.index_url),
        )

    if verbose:
        console.print(tracker.render())

    ctx = ProjectContext(
        root=root,
        name=project_name,
        program_directory=program_directory,
        template=template,
        use_yarn=use_yarn,
        verbose=verbose,
        default_template=settings.default_template,
    )
    try:
        create_project(ctx, console=console)
    except Exception as exc:
        _abort(root, exc)
        raise typer.Exit(1)

    console.print(f"[bold green]Success![/bold green] Created {project_name} at {root}")


init.__doc__ = INIT_COMMAND_DOC


__all__ = ["init"]
