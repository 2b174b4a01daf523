"""Cache path layout.

Every path is a pure function of the configuration, the package and the
repository::

    <cache_dir>/<repo>/00-index.tar.gz
    <cache_dir>/<repo>/<name>/<version>/<name>-<version>.tar.gz
"""

import os

from constants import Constants


def packages_directory(cfg) -> str:
    """Root of the package cache."""
    return cfg.cache_dir


def repo_cache_dir(cfg, repo) -> str:
    """Cache directory holding one repository's index and packages."""
    return os.path.join(packages_directory(cfg), repo.name)


def package_dir(cfg, pkg, repo) -> str:
    return os.path.join(repo_cache_dir(cfg, repo), pkg.name, str(pkg.version))


def package_file(cfg, pkg, repo) -> str:
    return os.path.join(package_dir(cfg, pkg, repo), f"{pkg}{Constants.PACKAGE_SUFFIX}")


def index_file(cfg, repo) -> str:
    return os.path.join(repo_cache_dir(cfg, repo), Constants.INDEX_FILE_NAME)
