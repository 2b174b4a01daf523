"""Reader for downloaded repository index archives.

An index is a gzipped tarball whose members are package descriptions laid
out as ``<name>/<version>/<name>.cabal``. Members with any other shape are
ignored.
"""

from __future__ import annotations

import logging
import tarfile
from typing import List

from constants import Constants
from common.errors import LocalIOError
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import PackageIdentity
from versioning.parser import is_valid_package_name, parse_version

logger = logging.getLogger(__name__)


def _identity_from_member(member_name: str):
    parts = member_name.strip("/").split("/")
    if len(parts) != 3:
        return None
    name, version_text, file_name = parts
    if file_name != f"{name}{Constants.PACKAGE_DESCRIPTION_SUFFIX}":
        return None
    if not is_valid_package_name(name):
        return None
    try:
        version = parse_version(version_text)
    except ValueError:
        return None
    return PackageIdentity(name=name, version=version)


def read_index(path: str) -> List[PackageIdentity]:
    """List the package identities described by the index at ``path``.

    Raises:
        LocalIOError: the archive is missing, unreadable or corrupt.
    """
    try:
        with tarfile.open(path, "r:*") as archive:
            names = archive.getnames()
    except (OSError, tarfile.TarError) as exc:
        raise LocalIOError(path, exc) from exc

    packages = []
    for member_name in names:
        identity = _identity_from_member(member_name)
        if identity is not None:
            packages.append(identity)

    if is_debug_enabled(logger):
        logger.debug(
            "Index read",
            extra=extra_context(
                event="index_read",
                component="index",
                action="read",
                target=path,
                count=len(packages)
            )
        )
    return packages
