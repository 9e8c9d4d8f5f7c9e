"""Project creation: install the template and toolchain, then hand off to init.js."""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from create_toolchain.core.config import DEFAULT_TEMPLATE, KNOWN_GENERATED_FILES
from create_toolchain.core.installer import install
from create_toolchain.core.manifest import (
    build_template_descriptor,
    load_template_manifest,
    locate_package,
    run_toolchain_init,
)
from create_toolchain.core.package_info import PackageInfo, get_package_info
from create_toolchain.core.resolver import resolve_template_install_package

logger = logging.getLogger(__name__)


@dataclass
class ProjectContext:
    """Everything create_project needs to know about one invocation."""

    root: Path
    name: str
    program_directory: Path
    template: str | None = None
    use_yarn: bool = False
    verbose: bool = False
    default_template: str = DEFAULT_TEMPLATE


@dataclass
class ProjectResult:
    template_reference: str
    template: PackageInfo
    toolchain: PackageInfo


def write_package_json(root: Path, name: str) -> Path:
    path = root / "package.json"
    payload = {"name": name, "version": "0.1.0", "private": True}
    path.write_text(json.dumps(payload, indent=2) + os.linesep, encoding="utf-8")
    return path


def create_project(ctx: ProjectContext, *, console: Console) -> ProjectResult:
    """Create the project described by *ctx*.

    Raises whatever the individual steps raise (``InstallError``,
    ``ManifestError``, ``PackageMetadataError``); cleanup is the caller's job.
    """
    console.print()
    console.print(f"Creating a new project in [green]{ctx.root}[/green].")
    console.print()

    write_package_json(ctx.root, ctx.name)

    template_reference = resolve_template_install_package(
        ctx.template,
        ctx.program_directory,
        default_template=ctx.default_template,
    )
    logger.debug("Resolved template %r to %s", ctx.template, template_reference)
    template_info = get_package_info(template_reference)

    console.print(f"Installing template: [cyan]{template_info.name}[/cyan]...")
    console.print()
    install(ctx.root, [template_reference], use_yarn=ctx.use_yarn, verbose=ctx.verbose)

    template_path = locate_package(ctx.root, template_info.name)
    manifest = load_template_manifest(template_path, template_info.name)
    toolchain_info = get_package_info(manifest.toolchain)
    template = build_template_descriptor(template_path, template_info.name, toolchain_info.name, manifest)

    console.print(f"Installing toolchain: [cyan]{toolchain_info.name}[/cyan]...")
    console.print()
    install(ctx.root, [manifest.toolchain], use_yarn=ctx.use_yarn, verbose=ctx.verbose)

    console.print("Finished installing:")
    console.print(f"    * template: [cyan]{template_info.name}[/cyan]")
    console.print(f"    * toolchain: [cyan]{toolchain_info.name}[/cyan]")
    console.print()

    console.print("Running toolchain init script...")
    console.print()
    run_toolchain_init(
        ctx.root,
        ctx.name,
        template,
        ctx.program_directory,
        toolchain_name=toolchain_info.name,
        verbose=ctx.verbose,
        use_yarn=ctx.use_yarn,
    )

    return ProjectResult(template_reference=template_reference, template=template_info, toolchain=toolchain_info)


def cleanup_generated_files(root: Path, *, console: Console) -> bool:
    """Remove files a failed run generated; drop *root* itself if it ends up empty.

    Returns True when the project directory was removed.
    """
    if not root.is_dir():
        return False

    for entry in sorted(os.listdir(root)):
        if entry not in KNOWN_GENERATED_FILES:
            continue
        target = root / entry
        console.print(f"Deleting generated file... [cyan]{entry}[/cyan]")
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    if any(root.iterdir()):
        return False

    console.print(f"Deleting [cyan]{root.name}/[/cyan] from [cyan]{root.parent}[/cyan]")
    root.rmdir()
    return True


__all__ = [
    "ProjectContext",
    "ProjectResult",
    "cleanup_generated_files",
    "create_project",
    "write_package_json",
]
