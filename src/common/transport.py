"""URI transport: dispatch reads and downloads on the URI scheme.

``file:`` URIs are served from the local filesystem; every other scheme is
handed unchanged to the HTTP client as a GET. Only a 200 response counts as
success, and a download never touches the destination before the status is
known.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import urllib.parse
import urllib.request
from typing import Optional

from constants import Constants
from common.errors import InvalidStatusError, InvalidURIError, LocalIOError
from common.http_client import safe_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)

FILE_SCHEME = "file"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_FORBIDDEN_CHARS_RE = re.compile(r"[\s<>\"{}|\\^`]")


def parse_uri(uri: str) -> urllib.parse.SplitResult:
    """Split ``uri`` or raise ``InvalidURIError``.

    A URI needs a scheme and must not contain whitespace or characters that
    are never legal in a URI.
    """
    if not isinstance(uri, str) or not uri or _FORBIDDEN_CHARS_RE.search(uri):
        raise InvalidURIError(uri)
    try:
        parts = urllib.parse.urlsplit(uri)
        # Accessing .port validates the port component.
        _ = parts.port
    except ValueError as exc:
        raise InvalidURIError(uri) from exc
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise InvalidURIError(uri)
    if parts.scheme.lower() != FILE_SCHEME and not parts.netloc:
        raise InvalidURIError(uri)
    return parts


def _local_path(parts: urllib.parse.SplitResult) -> str:
    return urllib.request.url2pathname(parts.path)


def _is_file(parts: urllib.parse.SplitResult) -> bool:
    return parts.scheme.lower() == FILE_SCHEME


def fetch_uri_content(uri: str, *, timeout: Optional[float] = None) -> str:
    """Return the full content of ``uri`` as text.

    Raises:
        InvalidURIError: ``uri`` does not parse.
        LocalIOError: the ``file:`` source cannot be read.
        ConnectionFailedError: the remote host is unreachable.
        InvalidStatusError: the remote answered with a status other than 200.
    """
    parts = parse_uri(uri)
    if _is_file(parts):
        path = _local_path(parts)
        try:
            with open(path, "rb") as fh:
                body = fh.read()
        except OSError as exc:
            raise LocalIOError(path, exc) from exc
        # Undecodable bytes are replaced, as requests does for ``.text``.
        return body.decode("utf-8", errors="replace")

    res = safe_get(uri, context="read", timeout=timeout)
    if res.status_code != Constants.HTTP_OK:
        raise InvalidStatusError(uri, res.status_code)
    return res.text


def download_uri_to_path(uri: str, dest_path: str, *, timeout: Optional[float] = None) -> str:
    """Store the content behind ``uri`` at ``dest_path`` and return the path.

    ``file:`` sources are copied byte for byte; the copy itself reports a
    missing source. Remote bodies are written in binary mode, overwriting
    any existing file, only after a 200 response.
    """
    parts = parse_uri(uri)
    if _is_file(parts):
        source = _local_path(parts)
        if is_debug_enabled(logger):
            logger.debug(
                "Local copy",
                extra=extra_context(
                    event="file_copy",
                    component="transport",
                    action="copy",
                    target=source,
                    destination=dest_path
                )
            )
        try:
            shutil.copyfile(source, dest_path)
        except OSError as exc:
            # Source-side failures leave the destination untouched.
            if exc.filename != source and not isinstance(exc, shutil.SameFileError):
                _remove_partial(dest_path)
            raise LocalIOError(source, exc) from exc
        return dest_path

    res = safe_get(uri, context="download", timeout=timeout)
    if res.status_code != Constants.HTTP_OK:
        logger.warning(
            "Download rejected",
            extra=extra_context(
                event="http_response",
                component="transport",
                outcome="invalid_status",
                status_code=res.status_code,
                target=safe_url(uri)
            )
        )
        raise InvalidStatusError(uri, res.status_code)

    _write_body(dest_path, res.content)
    return dest_path


def _write_body(dest_path: str, body: bytes) -> None:
    try:
        with open(dest_path, "wb") as fh:
            fh.write(body)
    except OSError as exc:
        _remove_partial(dest_path)
        raise LocalIOError(dest_path, exc) from exc


def _remove_partial(dest_path: str) -> None:
    # A partial file would pass the cache presence check.
    try:
        os.remove(dest_path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove partial download %s", dest_path)
