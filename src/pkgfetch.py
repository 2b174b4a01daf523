"""pkgfetch - download and cache packages from remote repositories.

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ExitCodes
from common.errors import ErrorKind, FetchError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import load_config
from fetch.fetcher import fetch, update
from fetch.models import FetchConfig
from fetch.reporter import LoggingReporter

_EXIT_CODES = {
    ErrorKind.LOCAL_IO: ExitCodes.FILE_ERROR,
    ErrorKind.INVALID_URI: ExitCodes.CONNECTION_ERROR,
    ErrorKind.CONNECTION: ExitCodes.CONNECTION_ERROR,
    ErrorKind.INVALID_STATUS: ExitCodes.CONNECTION_ERROR,
    ErrorKind.DOWNLOAD_FAILED: ExitCodes.CONNECTION_ERROR,
    ErrorKind.INDEX_DOWNLOAD_FAILED: ExitCodes.CONNECTION_ERROR,
    ErrorKind.DEPENDENCY_PARSE: ExitCodes.USAGE_ERROR,
    ErrorKind.RESOLUTION: ExitCodes.USAGE_ERROR,
}


def exit_code_for(error: FetchError) -> ExitCodes:
    """Map a fetch failure to the process exit code.

    Wrapped local I/O failures keep the file error code.
    """
    cause = getattr(error, "cause", None)
    if error.kind in (ErrorKind.DOWNLOAD_FAILED, ErrorKind.INDEX_DOWNLOAD_FAILED) \
            and isinstance(cause, FetchError) and cause.kind == ErrorKind.LOCAL_IO:
        return ExitCodes.FILE_ERROR
    return _EXIT_CODES.get(error.kind, ExitCodes.CONNECTION_ERROR)


def build_config(args) -> FetchConfig:
    """Load the configuration file, then apply CLI overrides."""
    base = load_config(getattr(args, "CONFIG", None))
    return FetchConfig.from_args(args, base)


def run(args) -> int:
    """Execute the parsed command; return the exit code."""
    logger = logging.getLogger(__name__)
    reporter = LoggingReporter()

    try:
        cfg = build_config(args)
    except ValueError as exc:  # ConfigError or a bad --repo value
        logger.error("Invalid configuration: %s", exc)
        return ExitCodes.USAGE_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.action,
                cache_dir=cfg.cache_dir,
                count=len(cfg.repos)
            )
        )

    try:
        if args.action == "update":
            update(cfg, reporter)
        else:
            paths = fetch(cfg, args.PACKAGES, reporter)
            logger.info("%d package(s) downloaded.", len(paths))
    except FetchError as exc:
        logger.error("%s", exc)
        return exit_code_for(exc).value

    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, getattr(args, "LOG_FILE", None))
    sys.exit(run(args))


if __name__ == "__main__":
    main()
