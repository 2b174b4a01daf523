"""Package and index fetching.

Packages are cached under a path derived from (package, repository); the
presence of that file is the whole cache state. Fetching is sequential and
fail-fast: the first error aborts the batch and nothing is retried.

The presence check and the download are separate filesystem operations, so
two processes sharing a cache can race. No locking is done.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence

from constants import Constants
from common.errors import (
    DownloadFailedError,
    FetchError,
    IndexDownloadFailedError,
    LocalIOError,
)
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from common.transport import download_uri_to_path
from repository.layout import index_file, package_dir, package_file, repo_cache_dir
from versioning.parser import parse_requests
from versioning.resolver import filter_fetchables, resolve_dependencies
from .models import FetchConfig, FetchTarget
from .reporter import Reporter

logger = logging.getLogger(__name__)


def pkg_url(pkg, repo) -> str:
    """Generate the URL of the tarball for a given package."""
    return "/".join([repo.url, pkg.name, str(pkg.version), str(pkg)]) + Constants.PACKAGE_SUFFIX


def index_url(repo) -> str:
    """Generate the URL of a repository's index archive."""
    return f"{repo.url}/{Constants.INDEX_FILE_NAME}"


def is_fetched(cfg: FetchConfig, pkg, repo) -> bool:
    """Returns True if the package has already been fetched."""
    return os.path.isfile(package_file(cfg, pkg, repo))


def _ensure_dir(path: str) -> None:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise LocalIOError(path, exc) from exc


def download_package(cfg: FetchConfig, pkg, repo, reporter: Reporter) -> str:
    """Download a package into the cache and return its path.

    Raises:
        DownloadFailedError: wrapping whatever made the download fail.
    """
    url = pkg_url(pkg, repo)
    path = package_file(cfg, pkg, repo)
    reporter.message(logging.DEBUG, f"GET {url}")
    try:
        _ensure_dir(package_dir(cfg, pkg, repo))
        download_uri_to_path(url, path, timeout=cfg.timeout)
    except FetchError as exc:
        logger.error(
            "Package download failed",
            extra=extra_context(
                event="download",
                component="fetch",
                outcome="failed",
                target=safe_url(url),
                package=str(pkg)
            )
        )
        raise DownloadFailedError(pkg, exc) from exc
    return path


def fetch_package(cfg: FetchConfig, pkg, repo, reporter: Reporter) -> str:
    """Fetch a package if we don't have it already; return its cache path."""
    if is_fetched(cfg, pkg, repo):
        reporter.pkg_is_present(pkg)
        return package_file(cfg, pkg, repo)
    reporter.downloading_pkg(pkg)
    return download_package(cfg, pkg, repo, reporter)


def download_index(cfg: FetchConfig, repo, reporter: Optional[Reporter] = None) -> str:
    """Download a repository index unconditionally and return its path.

    Raises:
        IndexDownloadFailedError: wrapping whatever made the download fail.
    """
    url = index_url(repo)
    path = index_file(cfg, repo)
    if reporter is not None:
        reporter.message(logging.DEBUG, f"GET {url}")
    try:
        _ensure_dir(repo_cache_dir(cfg, repo))
        download_uri_to_path(url, path, timeout=cfg.timeout)
    except FetchError as exc:
        raise IndexDownloadFailedError(repo, exc) from exc
    return path


def update(cfg: FetchConfig, reporter: Reporter) -> List[str]:
    """Refresh the index of every configured repository, in order."""
    paths = []
    for repo in cfg.repos:
        reporter.message(logging.INFO, f"Downloading package list from {repo.name}")
        paths.append(download_index(cfg, repo, reporter))
    return paths


def _is_not_fetched(cfg: FetchConfig, target: FetchTarget, reporter: Reporter) -> bool:
    fetched = is_fetched(cfg, target.package, target.repo)
    if fetched:
        reporter.pkg_is_present(target.package)
    else:
        reporter.message(logging.INFO, f"'{target.package}' is not present.")
    return not fetched


def fetch(cfg: FetchConfig, requested: Sequence[str], reporter: Reporter) -> List[str]:
    """Fetch a list of packages; return the paths of the newly downloaded ones.

    Every request is parsed before anything else happens, so one malformed
    name aborts the batch with no resolution or I/O.
    """
    deps = parse_requests(list(requested))
    targets = filter_fetchables(resolve_dependencies(cfg, cfg.installed, deps))
    missing = [target for target in targets if _is_not_fetched(cfg, target, reporter)]

    if is_debug_enabled(logger):
        logger.debug(
            "Fetch plan",
            extra=extra_context(
                event="decision",
                component="fetch",
                action="partition",
                count=len(targets),
                missing=len(missing)
            )
        )

    return [fetch_package(cfg, target.package, target.repo, reporter) for target in missing]
