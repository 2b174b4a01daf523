"""Reporting channel for fetch progress.

Fetch operations never print; they talk to a ``Reporter`` passed in by the
caller. The channel is write-only: nothing it does feeds back into control
flow.
"""

from __future__ import annotations

import logging
from typing import Optional

from common.logging_utils import extra_context


class Reporter:
    """Receives fetch notifications."""

    def message(self, level: int, text: str) -> None:
        """Free-form progress text at a ``logging`` level."""
        raise NotImplementedError

    def pkg_is_present(self, pkg) -> None:
        """``pkg`` is already in the cache."""
        raise NotImplementedError

    def downloading_pkg(self, pkg) -> None:
        """``pkg`` is missing and about to be downloaded."""
        raise NotImplementedError


class LoggingReporter(Reporter):
    """Forward notifications to the ``logging`` hierarchy."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("pkgfetch")

    def message(self, level: int, text: str) -> None:
        self._logger.log(level, text)

    def pkg_is_present(self, pkg) -> None:
        self._logger.info(
            "'%s' is present.",
            pkg,
            extra=extra_context(event="cache_hit", component="fetch", target=str(pkg)),
        )

    def downloading_pkg(self, pkg) -> None:
        self._logger.info(
            "Downloading '%s'",
            pkg,
            extra=extra_context(event="cache_miss", component="fetch", target=str(pkg)),
        )
