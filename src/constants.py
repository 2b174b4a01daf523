"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    USAGE_ERROR = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DEFAULT_CACHE_DIR = os.path.join(os.path.expanduser("~"), ".pkgfetch", "packages")
    ENV_CACHE_DIR = "PKGFETCH_CACHE_DIR"
    ENV_LOG_LEVEL = "PKGFETCH_LOG_LEVEL"
    DEFAULT_REPO_NAME = "hackage.haskell.org"
    DEFAULT_REPO_URL = "http://hackage.haskell.org/packages/archive"
    INDEX_FILE_NAME = "00-index.tar.gz"
    PACKAGE_SUFFIX = ".tar.gz"
    PACKAGE_DESCRIPTION_SUFFIX = ".cabal"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_OK = 200
