"""Template manifest loading and toolchain init script execution.

A template package ships a ``template.json`` next to its ``package.json``::

    {
        "toolchain": "tjs-toolchain-rollup",
        ...
    }

The named toolchain package provides ``scripts/init.js``, which receives
the project path, project name, a template descriptor (``path``, ``name``,
``toolchainPackageName`` plus every ``template.json`` field), the caller
directory, and the verbose/use-yarn flags.
"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from create_toolchain.core.config import TEMPLATE_MANIFEST, TOOLCHAIN_INIT_SCRIPT
from create_toolchain.core.errors import InstallError, ManifestError

logger = logging.getLogger(__name__)

INIT_SCRIPT_SOURCE = """
var init = require({module});
init.apply(null, JSON.parse(process.argv[1]));
"""


@dataclass
class TemplateManifest:
    """Parsed ``template.json`` of an installed template package."""

    toolchain: str
    data: dict[str, Any] = field(default_factory=dict)


def locate_package(root: Path, package_name: str) -> Path:
    """Return the installed directory of *package_name*, looking in node_modules of root and its parents."""
    for directory in (root, *root.parents):
        candidate = directory / "node_modules" / package_name
        if (candidate / "package.json").is_file():
            return candidate
    raise ManifestError(f"Cannot find installed package {package_name} from {root}.")


def load_template_manifest(template_path: Path, template_name: str) -> TemplateManifest:
    manifest_path = template_path / TEMPLATE_MANIFEST
    if not manifest_path.is_file():
        raise ManifestError(f"Template {template_name} is missing {TEMPLATE_MANIFEST} manifest.")

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Template {template_name} has an unreadable {TEMPLATE_MANIFEST}: {exc}") from exc

    toolchain = data.get("toolchain") if isinstance(data, dict) else None
    if not isinstance(toolchain, str) or not toolchain:
        raise ManifestError(
            f"Template {template_name} is missing 'toolchain' package field in {TEMPLATE_MANIFEST} manifest."
        )
    return TemplateManifest(toolchain=toolchain, data=dict(data))


def build_template_descriptor(
    template_path: Path,
    template_name: str,
    toolchain_package_name: str,
    manifest: TemplateManifest,
) -> dict[str, Any]:
    """Build the template object handed to the toolchain init script."""
    return {
        "path": str(template_path),
        "name": template_name,
        "toolchainPackageName": toolchain_package_name,
        **manifest.data,
    }


def build_init_command(
    root: Path,
    project_name: str,
    template: dict[str, Any],
    program_directory: Path,
    *,
    toolchain_name: str,
    verbose: bool = False,
    use_yarn: bool = False,
) -> list[str]:
    module = json.dumps(f"{toolchain_name}/{TOOLCHAIN_INIT_SCRIPT}")
    args = [str(root), project_name, template, str(program_directory), verbose, use_yarn]
    return ["node", "-e", INIT_SCRIPT_SOURCE.format(module=module), "--", json.dumps(args)]


def run_toolchain_init(
    root: Path,
    project_name: str,
    template: dict[str, Any],
    program_directory: Path,
    *,
    toolchain_name: str,
    verbose: bool = False,
    use_yarn: bool = False,
    cwd: Path | None = None,
) -> None:
    """Run ``<toolchain>/scripts/init.js`` with Node, inheriting stdio.

    Raises:
        InstallError: Node is missing or the script exits non-zero.
    """
    command = build_init_command(
        root,
        project_name,
        template,
        program_directory,
        toolchain_name=toolchain_name,
        verbose=verbose,
        use_yarn=use_yarn,
    )
    display = f"node {toolchain_name}/{TOOLCHAIN_INIT_SCRIPT}"
    logger.debug("Running toolchain init script %s", display)
    try:
        completed = subprocess.run(command, cwd=str(cwd or root), check=False)
    except FileNotFoundError as exc:
        raise InstallError(display, "node executable not found on PATH") from exc
    if completed.returncode != 0:
        raise InstallError(display)


__all__ = [
    "TemplateManifest",
    "build_init_command",
    "build_template_descriptor",
    "load_template_manifest",
    "locate_package",
    "run_toolchain_init",
]
