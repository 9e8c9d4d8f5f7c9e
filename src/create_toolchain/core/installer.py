"""npm / yarn installation of template and toolchain packages."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from create_toolchain.core.errors import InstallError

logger = logging.getLogger(__name__)


def installer_name(use_yarn: bool) -> str:
    return "yarn" if use_yarn else "npm"


def build_install_command(
    root: Path,
    dependencies: list[str],
    use_yarn: bool = False,
    verbose: bool = False,
) -> list[str]:
    """Return the argv that installs *dependencies* as exact dependencies of *root*."""
    if use_yarn:
        # npm has no --cwd flag and installs into the process cwd.
        command = ["yarnpkg", "add", "--exact", *dependencies, "--cwd", str(root)]
    else:
        command = ["npm", "install", "--save", "--save-exact", "--loglevel", "error", *dependencies]

    if verbose:
        command.append("--verbose")
    return command


def install(
    root: Path,
    dependencies: list[str],
    *,
    use_yarn: bool = False,
    verbose: bool = False,
) -> None:
    """Install *dependencies* into *root*, streaming the installer output.

    Raises:
        InstallError: The installer is missing or exits with a non-zero status.
    """
    command = build_install_command(root, dependencies, use_yarn=use_yarn, verbose=verbose)
    display = " ".join(command)
    logger.debug("Running %s in %s", display, root)

    try:
        completed = subprocess.run(command, cwd=str(root), check=False)
    except FileNotFoundError as exc:
        raise InstallError(display, f"{command[0]} executable not found on PATH") from exc

    if completed.returncode != 0:
        logger.debug("%s exited with %s", display, completed.returncode)
        raise InstallError(display)


__all__ = ["build_install_command", "install", "installer_name"]
