"""Static configuration shared across the create-toolchain CLI."""

from __future__ import annotations

CLI_NAME = "create-toolchain"

DEFAULT_TEMPLATE = "tjs-template"

INSTALLER_CHOICES = {"npm": "npm (default)", "yarn": "Yarn 2+"}

MIN_NODE_VERSION = "12.0.0"
MIN_NPM_VERSION = "6.0.0"
MIN_YARN_VERSION = "2.0.0"

DEFAULT_INDEX_URL = "https://pypi.org/pypi/create-toolchain/json"

# Entries allowed to exist in the target directory before a project is created.
VALID_PROJECT_FILES = frozenset(
    {
        ".DS_Store",
        ".git",
        ".gitattributes",
        ".gitignore",
        ".gitlab-ci.yml",
        ".hg",
        ".hgcheck",
        ".hgignore",
        ".idea",
        ".npmignore",
        ".travis.yml",
        "docs",
        "LICENSE",
        "README.md",
        "mkdocs.yml",
        "Thumbs.db",
    }
)

# Logs left behind by a failed install; tolerated and removed on the next run.
ERROR_LOG_PREFIXES = ("npm-debug.log", "yarn-error.log", "yarn-debug.log")

# Removed from the project directory when creation fails.
KNOWN_GENERATED_FILES = ("package.json", "yarn.lock", "node_modules")

TEMPLATE_MANIFEST = "template.json"
TOOLCHAIN_INIT_SCRIPT = "scripts/init.js"

BANNER = r"""
                      _             _              _      _           _
  ___ _ __ ___  __ _| |_ ___      | |_ ___   ___ | | ___| |__   __ _(_)_ __
 / __| '__/ _ \/ _` | __/ _ \_____| __/ _ \ / _ \| |/ __| '_ \ / _` | | '_ \
| (__| | |  __/ (_| | ||  __/_____| || (_) | (_) | | (__| | | | (_| | | | | |
 \___|_|  \___|\__,_|\__\___|      \__\___/ \___/|_|\___|_| |_|\__,_|_|_| |_|
"""

TAGLINE = "create-toolchain - scaffold projects from template and toolchain packages"

__all__ = [
    "BANNER",
    "CLI_NAME",
    "DEFAULT_INDEX_URL",
    "DEFAULT_TEMPLATE",
    "ERROR_LOG_PREFIXES",
    "INSTALLER_CHOICES",
    "KNOWN_GENERATED_FILES",
    "MIN_NODE_VERSION",
    "MIN_NPM_VERSION",
    "MIN_YARN_VERSION",
    "TAGLINE",
    "TEMPLATE_MANIFEST",
    "TOOLCHAIN_INIT_SCRIPT",
    "VALID_PROJECT_FILES",
]
