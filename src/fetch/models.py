"""Fetch configuration and units of work."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, List, Optional

from constants import Constants
from repository.models import Repository
from versioning.models import PackageIdentity


def default_repos() -> List[Repository]:
    return [Repository(name=Constants.DEFAULT_REPO_NAME, url=Constants.DEFAULT_REPO_URL)]


def default_cache_dir() -> str:
    return os.environ.get(Constants.ENV_CACHE_DIR) or Constants.DEFAULT_CACHE_DIR


@dataclass
class FetchConfig:
    """Configuration for a fetch session.

    Read-only for the duration of a session.
    """

    cache_dir: str = field(default_factory=default_cache_dir)
    repos: List[Repository] = field(default_factory=default_repos)
    installed: List[PackageIdentity] = field(default_factory=list)
    timeout: float = Constants.REQUEST_TIMEOUT

    @classmethod
    def from_args(cls, args: Any, base: Optional["FetchConfig"] = None) -> "FetchConfig":
        """Apply CLI overrides on top of ``base`` (or the defaults).

        Args:
            args: Parsed CLI arguments namespace.
            base: Configuration loaded from a file, if any.

        Returns:
            FetchConfig instance.
        """
        config = base if base is not None else cls()

        if getattr(args, "CACHE_DIR", None):
            config.cache_dir = args.CACHE_DIR
        if getattr(args, "REPOS", None):
            config.repos = [Repository.from_spec(spec) for spec in args.REPOS]
        if getattr(args, "TIMEOUT", None) is not None:
            config.timeout = args.TIMEOUT

        config.cache_dir = os.path.expanduser(config.cache_dir)
        return config


@dataclass(frozen=True)
class FetchTarget:
    """A resolved (package, repository) pair: one unit of download work."""

    package: PackageIdentity
    repo: Repository
