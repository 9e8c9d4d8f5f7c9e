"""Template identifier resolution.

Turns the value given to ``--template`` into an install reference that npm
or yarn understands. Short names get the default template prefix so that
``my-app`` installs ``tjs-template-my-app``; scopes, versions, URLs,
tarballs and ``file:`` paths are passed through or merged with that rule.

Resolution (first match wins):

1. LOCAL_PATH -- ``file:<path>``, resolved against the caller directory
2. ARCHIVE    -- anything containing ``://`` or ending in ``.tgz``/``.tar.gz``
3. PACKAGE    -- ``[@scope/]name[@version]``, prefixed unless already in
   the default template family

The resolver performs no I/O and never raises for string input.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from create_toolchain.core.config import DEFAULT_TEMPLATE

LOCAL_PATH_PREFIX = "file:"
ARCHIVE_PATTERN = re.compile(r"^.+\.(tgz|tar\.gz)$")


class TemplateReferenceKind(Enum):
    LOCAL_PATH = "local_path"
    ARCHIVE = "archive"
    PACKAGE = "package"


@dataclass(frozen=True)
class TemplateDescriptor:
    """A package-style template reference split into its three parts.

    ``scope`` keeps its trailing ``/`` and ``version`` keeps its leading
    ``@`` so that ``str()`` reassembles the reference by concatenation.
    """

    scope: str = ""
    name: str = ""
    version: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"scope": self.scope, "name": self.name, "version": self.version}

    def __str__(self) -> str:
        return f"{self.scope}{self.name}{self.version}"


def is_archive_reference(reference: str) -> bool:
    """Return True for URLs and ``.tgz``/``.tar.gz`` paths."""
    return "://" in reference or ARCHIVE_PATTERN.match(reference) is not None


def classify_template(template: str) -> TemplateReferenceKind:
    if template.startswith(LOCAL_PATH_PREFIX):
        return TemplateReferenceKind.LOCAL_PATH
    if is_archive_reference(template):
        return TemplateReferenceKind.ARCHIVE
    return TemplateReferenceKind.PACKAGE


def _split_scope(template: str) -> tuple[str, str]:
    # A scope needs at least one character between "@" and "/".
    if template.startswith("@"):
        slash = template.find("/")
        if slash >= 2:
            return template[: slash + 1], template[slash + 1 :]
    return "", template


def parse_template_descriptor(template: str) -> TemplateDescriptor:
    """Split ``[@scope/]name[@version]`` into a :class:`TemplateDescriptor`.

    A bare ``@token`` without a slash is not a scope: it lands in the
    ``version`` slot with empty scope and name. A trailing ``@`` with
    nothing after it is dropped.
    """
    scope, remainder = _split_scope(template)
    name, at, version = remainder.partition("@")
    if at and version:
        version = f"@{version}"
    else:
        version = ""
    return TemplateDescriptor(scope=scope, name=name, version=version)


def is_template_family(name: str, default_template: str = DEFAULT_TEMPLATE) -> bool:
    """Return True when *name* already carries the default template prefix."""
    return name == default_template or name.startswith(f"{default_template}-")


def _resolve_package(descriptor: TemplateDescriptor, default_template: str) -> str:
    scope, name, version = descriptor.scope, descriptor.name, descriptor.version

    if is_template_family(name, default_template):
        return f"{scope}{name}{version}"

    if version and not scope and not name:
        # "@my-scope": the scope was captured as a version fragment.
        return f"{version}/{default_template}"

    # Everything else, including an empty name, is a suffix of the default family.
    return f"{scope}{default_template}-{name}{version}"


def resolve_template_install_package(
    template: str | None,
    base_dir: str | os.PathLike[str] | None = None,
    *,
    default_template: str = DEFAULT_TEMPLATE,
) -> str:
    """Resolve a user-supplied template identifier into an install reference.

    Args:
        template: Value of ``--template``; ``None`` or empty selects the default.
        base_dir: Directory ``file:`` paths are relative to (defaults to cwd).
        default_template: Name of the default template package family.

    Returns:
        A reference accepted by ``npm install``/``yarn add``.
    """
    if not template:
        return default_template

    kind = classify_template(template)

    if kind is TemplateReferenceKind.LOCAL_PATH:
        raw_path = template[len(LOCAL_PATH_PREFIX) :]
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        return f"{LOCAL_PATH_PREFIX}{os.path.abspath(os.path.join(base, raw_path))}"

    if kind is TemplateReferenceKind.ARCHIVE:
        return template

    return _resolve_package(parse_template_descriptor(template), default_template)


__all__ = [
    "ARCHIVE_PATTERN",
    "LOCAL_PATH_PREFIX",
    "TemplateDescriptor",
    "TemplateReferenceKind",
    "classify_template",
    "is_archive_reference",
    "is_template_family",
    "parse_template_descriptor",
    "resolve_template_install_package",
]
