"""Error taxonomy for fetch operations.

Every failure raised by the fetch engine is a ``FetchError`` tagged with an
``ErrorKind`` so callers can branch on the category (parse vs. transport vs.
filesystem) without matching on message text. Wrapping errors keep the
underlying failure on ``.cause`` and chain it via ``raise ... from``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Categories of fetch failures."""

    INVALID_URI = "invalid_uri"
    CONNECTION = "connection"
    INVALID_STATUS = "invalid_status"
    LOCAL_IO = "local_io"
    DEPENDENCY_PARSE = "dependency_parse"
    RESOLUTION = "resolution"
    DOWNLOAD_FAILED = "download_failed"
    INDEX_DOWNLOAD_FAILED = "index_download_failed"


class FetchError(Exception):
    """Base class for all fetch failures."""

    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class TransportError(FetchError):
    """Failure while reading or downloading a URI."""


class InvalidURIError(TransportError):
    """A URI string could not be parsed; raised before any I/O."""

    kind = ErrorKind.INVALID_URI

    def __init__(self, uri: str):
        super().__init__(f"Failed to parse url: {uri!r}")
        self.uri = uri


class ConnectionFailedError(TransportError):
    """The remote host could not be reached (DNS, refused, timeout)."""

    kind = ErrorKind.CONNECTION

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Connection to '{url}' failed: {cause}", cause)
        self.url = url


class InvalidStatusError(TransportError):
    """The remote host answered with a status other than 200."""

    kind = ErrorKind.INVALID_STATUS

    def __init__(self, url: str, status_code: int):
        super().__init__(f"Invalid HTTP code: {status_code} for '{url}'")
        self.url = url
        self.status_code = status_code


class LocalIOError(TransportError):
    """Filesystem failure during a file: copy/read or directory creation."""

    kind = ErrorKind.LOCAL_IO

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"Local I/O error on '{path}': {cause}", cause)
        self.path = path


class DependencyParseError(FetchError):
    """A requested dependency expression is malformed."""

    kind = ErrorKind.DEPENDENCY_PARSE

    def __init__(self, text: str, reason: Optional[str] = None):
        message = f"Failed to parse package dependency: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.text = text


class ResolutionError(FetchError):
    """No installed or available package satisfies a dependency."""

    kind = ErrorKind.RESOLUTION

    def __init__(self, dependency: Any):
        super().__init__(f"No package satisfies dependency: {dependency}")
        self.dependency = dependency


class DownloadFailedError(FetchError):
    """Downloading a package failed."""

    kind = ErrorKind.DOWNLOAD_FAILED

    def __init__(self, package: Any, cause: BaseException):
        super().__init__(f"Failed to download '{package}': {cause}", cause)
        self.package = package


class IndexDownloadFailedError(FetchError):
    """Downloading a repository index failed."""

    kind = ErrorKind.INDEX_DOWNLOAD_FAILED

    def __init__(self, repo: Any, cause: BaseException):
        super().__init__(f"Failed to download index for '{repo}': {cause}", cause)
        self.repo = repo
