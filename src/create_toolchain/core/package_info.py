"""Package name/version discovery for install references.

npm needs the *package name* of the template and toolchain after they are
installed (to find them under ``node_modules``), but the install reference
may be a tarball URL, a git URL, a local path or ``name@version``.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
import tarfile
import tempfile
from dataclasses import dataclass
from pathlib import Path

import httpx

from create_toolchain.core.errors import PackageMetadataError
from create_toolchain.core.resolver import ARCHIVE_PATTERN, LOCAL_PATH_PREFIX

logger = logging.getLogger(__name__)

GIT_URL_PATTERN = re.compile(r"([^/]+)\.git(#.*)?$")
# e.g. react-scripts-0.2.0-alpha.1.tgz -> react-scripts
ARCHIVE_NAME_PATTERN = re.compile(r"(?:^|/)([^/]+?)(?:-\d[^/]*)?\.(?:tgz|tar\.gz)$")

DOWNLOAD_TIMEOUT = 60


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str | None = None


def _read_package_json(directory: Path) -> PackageInfo:
    manifest = directory / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise PackageMetadataError(f"No package.json found in {directory}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise PackageMetadataError(f"Failed to read {manifest}: {exc}") from exc

    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        raise PackageMetadataError(f"{manifest} does not declare a package name")
    version = data.get("version")
    return PackageInfo(name=name, version=version if isinstance(version, str) else None)


def _download_archive(url: str, destination: Path, client: httpx.Client | None) -> None:
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=DOWNLOAD_TIMEOUT, follow_redirects=True)
    try:
        with client.stream("GET", url) as response:
            if response.status_code != 200:
                raise PackageMetadataError(f"Download of {url} failed with HTTP {response.status_code}")
            with destination.open("wb") as handle:
                for chunk in response.iter_bytes(chunk_size=8192):
                    handle.write(chunk)
    finally:
        if owns_client:
            client.close()


def _package_root(extracted: Path) -> Path:
    """Return the directory holding package.json (npm packs into ``package/``)."""
    if (extracted / "package.json").is_file():
        return extracted
    children = list(extracted.iterdir())
    if len(children) == 1 and children[0].is_dir():
        return children[0]
    return extracted


def _archive_package_info(install_package: str, client: httpx.Client | None, work_dir: Path | None) -> PackageInfo:
    temp_dir = Path(tempfile.mkdtemp(prefix="create-toolchain-", dir=work_dir))
    try:
        if install_package.startswith("http"):
            archive_path = temp_dir / "package.tgz"
            logger.debug("Downloading %s to %s", install_package, archive_path)
            _download_archive(install_package, archive_path, client)
        else:
            archive_path = Path(install_package)

        extract_dir = temp_dir / "extracted"
        extract_dir.mkdir()
        with tarfile.open(archive_path, "r:*") as archive:
            archive.extractall(extract_dir, filter="data")
        return _read_package_json(_package_root(extract_dir))
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


def package_name_from_archive(install_package: str) -> str:
    """Guess a package name from an archive file name, dropping any version suffix."""
    match = ARCHIVE_NAME_PATTERN.search(install_package)
    return match.group(1) if match else install_package


def get_package_info(
    install_package: str,
    *,
    client: httpx.Client | None = None,
    work_dir: Path | None = None,
) -> PackageInfo:
    """Return the package name (and version when known) behind an install reference."""
    if ARCHIVE_PATTERN.match(install_package):
        try:
            return _archive_package_info(install_package, client, work_dir)
        except (PackageMetadataError, OSError, tarfile.TarError, httpx.HTTPError) as exc:
            assumed = package_name_from_archive(install_package)
            logger.warning("Could not extract the package name from the archive: %s", exc)
            logger.warning('Based on the filename, assuming it is "%s"', assumed)
            return PackageInfo(name=assumed)

    if install_package.startswith("git+"):
        match = GIT_URL_PATTERN.search(install_package)
        return PackageInfo(name=match.group(1) if match else install_package)

    if install_package.startswith(LOCAL_PATH_PREFIX):
        return _read_package_json(Path(install_package[len(LOCAL_PATH_PREFIX) :]))

    # Skip the first character so a leading @scope is not taken for @version.
    at = install_package.find("@", 1)
    if at != -1:
        return PackageInfo(name=install_package[:at], version=install_package[at + 1 :] or None)

    return PackageInfo(name=install_package)


__all__ = ["PackageInfo", "get_package_info", "package_name_from_archive"]
