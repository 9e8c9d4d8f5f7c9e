"""Resolve command: show what a --template value would install."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from create_toolchain.cli.helpers import console
from create_toolchain.core.errors import CreateToolchainError
from create_toolchain.core.resolver import (
    TemplateReferenceKind,
    classify_template,
    parse_template_descriptor,
    resolve_template_install_package,
)
from create_toolchain.core.settings import load_settings


def resolve(
    template: str = typer.Argument(..., help="Template value as passed to --template"),
    base_dir: Optional[Path] = typer.Option(
        None,
        "--base-dir",
        help="Directory file: paths are relative to (defaults to the current directory)",
    ),
    default_template: Optional[str] = typer.Option(
        None,
        "--default-template",
        help="Default template family name (defaults to the configured one)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit JSON result"),
) -> None:
    """Print the install reference a template value resolves to."""
    if default_template is None:
        try:
            default_template = load_settings().default_template
        except CreateToolchainError as exc:
            console.print(f"[red]Error:[/red] {exc.message}")
            raise typer.Exit(1)

    reference = resolve_template_install_package(template, base_dir, default_template=default_template)

    if not json_output:
        print(reference)
        return

    kind = classify_template(template) if template else TemplateReferenceKind.PACKAGE
    payload: dict[str, object] = {
        "template": template,
        "kind": kind.value,
        "reference": reference,
    }
    if kind is TemplateReferenceKind.PACKAGE:
        payload["descriptor"] = parse_template_descriptor(template).to_dict()
    print(json.dumps(payload, indent=2))


__all__ = ["resolve"]
