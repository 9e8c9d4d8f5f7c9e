"""Core utilities and configuration exports."""

from .config import (
    BANNER,
    CLI_NAME,
    DEFAULT_TEMPLATE,
    INSTALLER_CHOICES,
    TAGLINE,
)
from .resolver import (
    TemplateDescriptor,
    TemplateReferenceKind,
    classify_template,
    parse_template_descriptor,
    resolve_template_install_package,
)

__all__ = [
    "BANNER",
    "CLI_NAME",
    "DEFAULT_TEMPLATE",
    "INSTALLER_CHOICES",
    "TAGLINE",
    "TemplateDescriptor",
    "TemplateReferenceKind",
    "classify_template",
    "parse_template_descriptor",
    "resolve_template_install_package",
]
