"""Shared HTTP helpers used by the transport layer.

Encapsulates request/timeout error handling so callers get a single
``ConnectionFailedError`` for every connection-level failure. Requests are
plain GETs: no custom headers, no body, no retries.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from constants import Constants
from common.errors import ConnectionFailedError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def safe_get(url: str, *, context: str, timeout: Optional[float] = None, **kwargs: Any) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL, passed to ``requests`` unmodified.
        context: Human-readable source tag for logs (e.g., "package", "index").
        timeout: Seconds to wait; defaults to ``Constants.REQUEST_TIMEOUT``.
        **kwargs: Passed through to requests.get.

    Returns:
        requests.Response: The HTTP response object, whatever its status.

    Raises:
        ConnectionFailedError: DNS failure, refused connection, timeout or any
            other ``requests.RequestException``.
    """
    safe_target = safe_url(url)
    effective_timeout = timeout if timeout is not None else Constants.REQUEST_TIMEOUT
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=effective_timeout, **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                effective_timeout,
            )
            raise ConnectionFailedError(url, exc) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise ConnectionFailedError(url, exc) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == Constants.HTTP_OK else "non_200",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res
