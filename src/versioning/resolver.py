"""Dependency resolution against installed packages and cached indexes."""

from __future__ import annotations

import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from common.errors import ResolutionError
from common.logging_utils import extra_context, is_debug_enabled
from fetch.models import FetchTarget
from repository.index import read_index
from repository.layout import index_file
from repository.models import Repository
from .models import Dependency, PackageIdentity, ResolvedPackage, UnresolvedDependency

logger = logging.getLogger(__name__)


def available_packages(cfg) -> List[Tuple[Repository, List[PackageIdentity]]]:
    """Identities listed by each repository's cached index, in repository order.

    A repository whose index has not been downloaded yet contributes nothing.
    """
    available = []
    for repo in cfg.repos:
        path = index_file(cfg, repo)
        if not os.path.isfile(path):
            logger.warning(
                "No cached index for repository %s; run 'update' first.", repo.name
            )
            continue
        available.append((repo, read_index(path)))
    return available


def _best_installed(dep: Dependency, installed: Iterable[PackageIdentity]) -> Optional[PackageIdentity]:
    matches = [pkg for pkg in installed if dep.accepts(pkg)]
    return max(matches, key=lambda pkg: pkg.version) if matches else None


def _best_available(
    dep: Dependency,
    available: Sequence[Tuple[Repository, List[PackageIdentity]]],
) -> Optional[Tuple[PackageIdentity, Repository]]:
    best: Optional[Tuple[PackageIdentity, Repository]] = None
    for repo, packages in available:
        for pkg in packages:
            if not dep.accepts(pkg):
                continue
            # Strictly greater: earlier repositories win ties.
            if best is None or pkg.version > best[0].version:
                best = (pkg, repo)
    return best


def resolve_dependencies(
    cfg,
    installed: Sequence[PackageIdentity],
    deps: Sequence[UnresolvedDependency],
) -> List[ResolvedPackage]:
    """Resolve each requested dependency to an installed or available package.

    Args:
        cfg: Fetch configuration (repositories and cache root).
        installed: Packages already present on the system.
        deps: Parsed requests.

    Returns:
        One ``ResolvedPackage`` per request, in request order.

    Raises:
        ResolutionError: nothing satisfies a dependency.
    """
    available = available_packages(cfg)
    resolved: List[ResolvedPackage] = []
    for unresolved in deps:
        dep = unresolved.dependency
        installed_pkg = _best_installed(dep, installed)
        if installed_pkg is not None:
            resolved.append(ResolvedPackage(dependency=dep, installed=installed_pkg))
            continue
        best = _best_available(dep, available)
        if best is None:
            raise ResolutionError(dep)
        pkg, repo = best
        if is_debug_enabled(logger):
            logger.debug(
                "Dependency resolved",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    action="resolve",
                    target=str(dep),
                    package=str(pkg),
                    repository=repo.name
                )
            )
        resolved.append(ResolvedPackage(dependency=dep, package=pkg, repo=repo))
    return resolved


def filter_fetchables(resolved: Iterable[ResolvedPackage]) -> List[FetchTarget]:
    """Keep only packages that are not satisfied by installed software."""
    seen: Dict[Tuple[PackageIdentity, str], FetchTarget] = {}
    for item in resolved:
        if item.installed is not None or item.package is None or item.repo is None:
            continue
        key = (item.package, item.repo.name)
        if key not in seen:
            seen[key] = FetchTarget(package=item.package, repo=item.repo)
    return list(seen.values())
