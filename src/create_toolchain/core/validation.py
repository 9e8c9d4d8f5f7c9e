"""Environment and project checks run before anything is installed."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

import httpx
from packaging.version import InvalidVersion, Version

from create_toolchain.core.config import (
    DEFAULT_INDEX_URL,
    ERROR_LOG_PREFIXES,
    MIN_NODE_VERSION,
    MIN_NPM_VERSION,
    MIN_YARN_VERSION,
    VALID_PROJECT_FILES,
)
from create_toolchain.core.errors import EnvironmentCheckError, OutdatedCliError, VersionError

logger = logging.getLogger(__name__)

__all__ = [
    "NameValidation",
    "check_cli_version",
    "check_node_version",
    "check_npm_can_read_cwd",
    "check_npm_version",
    "check_yarn_version",
    "find_conflicting_files",
    "get_tool_version",
    "is_error_log",
    "remove_error_logs",
    "validate_project_name",
]

NODE_CORE_MODULES = frozenset(
    {
        "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
        "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
        "events", "fs", "http", "http2", "https", "inspector", "module", "net",
        "os", "path", "perf_hooks", "process", "punycode", "querystring",
        "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
        "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
        "worker_threads", "zlib",
    }
)
BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})
SCOPED_NAME_PATTERN = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
SPECIAL_CHARS_PATTERN = re.compile(r"[~'!()*]")
MAX_NAME_LENGTH = 214
NPM_CWD_PREFIX = "; cwd = "

# Characters JavaScript's encodeURIComponent leaves untouched.
_URL_SAFE = "-_.!~*'()"


# ---------------------------------------------------------------------------
# Tool versions
# ---------------------------------------------------------------------------

def _parse_version(raw: str) -> Version | None:
    text = raw.strip().lstrip("v")
    try:
        return Version(text)
    except InvalidVersion:
        pass
    # Nightly builds use non-standard strings; compare the part before the first -/+.
    trimmed = re.match(r"^(.+?)[-+].+$", text)
    if trimmed:
        try:
            return Version(trimmed.group(1))
        except InvalidVersion:
            return None
    return None


def get_tool_version(command: list[str]) -> str | None:
    """Return the trimmed ``--version`` output of a tool, or None if it cannot run."""
    try:
        completed = subprocess.run(command, capture_output=True, text=True, check=True, timeout=30)
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None
    return completed.stdout.strip() or None


def check_node_version() -> str:
    """Require Node >= 12 and return the detected version."""
    raw = get_tool_version(["node", "--version"])
    if raw is None:
        raise VersionError("Node was not found. Please install Node 12 or higher.")
    parsed = _parse_version(raw)
    if parsed is None or parsed < Version(MIN_NODE_VERSION):
        raise VersionError(f"You are using Node {raw}, please update to Node 12 or higher.")
    return raw


def check_npm_version() -> str | None:
    raw = get_tool_version(["npm", "--version"])
    if raw is None:
        return None
    parsed = _parse_version(raw)
    if parsed is None or parsed < Version(MIN_NPM_VERSION):
        raise VersionError(f"You are using npm {raw}, please update to npm v{MIN_NPM_VERSION} or higher.")
    return raw


def check_yarn_version() -> str | None:
    raw = get_tool_version(["yarnpkg", "--version"])
    if raw is None:
        return None
    parsed = _parse_version(raw)
    if parsed is None or parsed < Version(MIN_YARN_VERSION):
        raise VersionError(f"You are using Yarn {raw}, please update to Yarn v{MIN_YARN_VERSION} or higher.")
    return raw


def check_npm_can_read_cwd(cwd: Path | None = None) -> None:
    """Make sure a freshly spawned npm runs in our working directory.

    A misconfigured shell (e.g. a Windows AutoRun entry) can start npm in a
    different directory, which would install packages in the wrong place.
    """
    cwd = cwd or Path.cwd()
    try:
        completed = subprocess.run(["npm", "config", "list"], capture_output=True, text=True, cwd=str(cwd), timeout=60)
    except (OSError, subprocess.TimeoutExpired):
        logger.debug("Could not spawn npm to check its working directory")
        return

    output = (completed.stdout or "") + (completed.stderr or "")
    line = next((line for line in output.splitlines() if line.startswith(NPM_CWD_PREFIX)), None)
    if line is None:
        return

    npm_cwd = line[len(NPM_CWD_PREFIX):].strip()
    if npm_cwd == str(cwd):
        return

    message = (
        "Could not start an npm process in the right directory.\n\n"
        f"The current directory is: {cwd}\n"
        f"However, a newly started npm process runs in: {npm_cwd}\n\n"
        "This is probably caused by a misconfigured system terminal shell."
    )
    if sys.platform == "win32":
        message += (
            "\n\nOn Windows, this can usually be fixed by running:\n\n"
            '  reg delete "HKCU\\Software\\Microsoft\\Command Processor" /v AutoRun /f\n'
            '  reg delete "HKLM\\Software\\Microsoft\\Command Processor" /v AutoRun /f'
        )
    raise EnvironmentCheckError(message)


def fetch_latest_cli_version(
    *,
    client: httpx.Client | None = None,
    index_url: str = DEFAULT_INDEX_URL,
) -> str | None:
    """Return the newest released CLI version from the package index, or None."""
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=10, follow_redirects=True)
    try:
        response = client.get(index_url)
        if response.status_code != 200:
            logger.debug("Package index returned %s for %s", response.status_code, index_url)
            return None
        latest = response.json().get("info", {}).get("version")
    except (httpx.HTTPError, ValueError, AttributeError) as exc:
        logger.debug("Could not determine latest version: %s", exc)
        return None
    finally:
        if owns_client:
            client.close()
    return latest if isinstance(latest, str) else None


def check_cli_version(
    current_version: str,
    *,
    client: httpx.Client | None = None,
    index_url: str = DEFAULT_INDEX_URL,
) -> str | None:
    """Raise OutdatedCliError if a newer release exists; return the latest version seen."""
    latest = fetch_latest_cli_version(client=client, index_url=index_url)
    if latest is None:
        return None
    current, newest = _parse_version(current_version), _parse_version(latest)
    if current is not None and newest is not None and current < newest:
        raise OutdatedCliError(current_version, latest)
    return latest


# ---------------------------------------------------------------------------
# Project name
# ---------------------------------------------------------------------------

@dataclass
class NameValidation:
    """Outcome of npm package name validation.

    ``errors`` make a name unusable everywhere; ``warnings`` only rule it
    out for new packages, which is what a new project is.
    """

    name: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def problems(self) -> list[str]:
        return [*self.errors, *self.warnings]


def _is_url_safe(text: str) -> bool:
    return quote(text, safe=_URL_SAFE) == text


def validate_project_name(name: str) -> NameValidation:
    result = NameValidation(name=name)

    if not name:
        result.errors.append("name length must be greater than zero")
        return result

    if name.startswith("."):
        result.errors.append("name cannot start with a period")
    if name.startswith("_"):
        result.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        result.errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        result.errors.append(f"{name} is a blacklisted name")

    if name in NODE_CORE_MODULES:
        result.warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        result.warnings.append(f"name can no longer contain more than {MAX_NAME_LENGTH} characters")
    if name.lower() != name:
        result.warnings.append("name can no longer contain capital letters")
    if SPECIAL_CHARS_PATTERN.search(name.split("/")[-1]):
        result.warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if not _is_url_safe(name):
        scoped = SCOPED_NAME_PATTERN.match(name)
        if not (scoped and scoped.group(1) and _is_url_safe(scoped.group(1)) and _is_url_safe(scoped.group(2))):
            result.errors.append("name can only contain URL-friendly characters")

    return result


# ---------------------------------------------------------------------------
# Project directory
# ---------------------------------------------------------------------------

def is_error_log(filename: str) -> bool:
    return filename.startswith(ERROR_LOG_PREFIXES)


def find_conflicting_files(root: Path) -> list[str]:
    """Return entries of *root* that a new project could clobber, sorted."""
    conflicts = []
    for entry in sorted(os.listdir(root)):
        if entry in VALID_PROJECT_FILES:
            continue
        # IntelliJ IDEA creates module files before the CLI is launched.
        if entry.endswith(".iml"):
            continue
        if is_error_log(entry):
            continue
        conflicts.append(entry)
    return conflicts


def remove_error_logs(root: Path) -> list[str]:
    """Delete npm/yarn logs left by a previous failed run; return what was removed."""
    removed = []
    for entry in sorted(os.listdir(root)):
        if not is_error_log(entry):
            continue
        target = root / entry
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        removed.append(entry)
    return removed
