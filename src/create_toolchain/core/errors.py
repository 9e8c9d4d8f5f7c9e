"""Exception hierarchy for create-toolchain.

Core modules raise these; only the command layer turns them into console
output and a non-zero exit status.
"""

from __future__ import annotations

from pathlib import Path


class CreateToolchainError(Exception):
    """Base class for all user-facing create-toolchain failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CommandFailedError(CreateToolchainError):
    """An external command exited unsuccessfully."""

    def __init__(self, command: str, message: str | None = None):
        super().__init__(message or f"{command} has failed.")
        self.command = command


class InstallError(CommandFailedError):
    """Raised when npm, yarn or the toolchain init script fails."""


class VersionError(CreateToolchainError):
    """Raised when Node, npm or yarn is older than required."""


class OutdatedCliError(CreateToolchainError):
    """Raised when a newer create-toolchain release is available."""

    def __init__(self, current: str, latest: str):
        super().__init__(f"You are running create-toolchain {current}, but {latest} is available.")
        self.current = current
        self.latest = latest


class EnvironmentCheckError(CreateToolchainError):
    """Raised when the shell environment would break package installation."""


class ProjectNameError(CreateToolchainError):
    """Raised when the project directory name is not a valid npm package name."""

    def __init__(self, name: str, problems: list[str]):
        super().__init__(f'Cannot create a project named "{name}" because of npm naming restrictions.')
        self.name = name
        self.problems = problems


class DirectoryConflictError(CreateToolchainError):
    """Raised when the target directory already holds files we could overwrite."""

    def __init__(self, root: Path, conflicts: list[str]):
        super().__init__(f"The directory {root} contains files that could conflict.")
        self.root = root
        self.conflicts = conflicts


class ManifestError(CreateToolchainError):
    """Raised when a template package or its template.json manifest is unusable."""


class PackageMetadataError(CreateToolchainError):
    """Raised when package.json metadata for an install reference cannot be read."""


class SettingsError(CreateToolchainError):
    """Raised when config.yaml cannot be parsed or holds invalid values."""


__all__ = [
    "CommandFailedError",
    "CreateToolchainError",
    "DirectoryConflictError",
    "EnvironmentCheckError",
    "InstallError",
    "ManifestError",
    "OutdatedCliError",
    "PackageMetadataError",
    "ProjectNameError",
    "SettingsError",
    "VersionError",
]
