"""Argument parsing functionality for pkgfetch."""

import argparse


def _add_common_options(parser):
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)
    parser.add_argument("--cache-dir",
                        dest="CACHE_DIR",
                        help="Directory holding cached indexes and packages",
                        action="store",
                        type=str)
    parser.add_argument("--repo",
                        dest="REPOS",
                        help="Repository as NAME=URL (can be used multiple times; replaces configured repositories)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Timeout in seconds for HTTP requests",
                        action="store",
                        type=float)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def build_parser():
    """Build the top-level parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="pkgfetch",
        description="pkgfetch - download and cache packages from remote repositories",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Download packages into the local cache",
    )
    fetch_parser.add_argument("PACKAGES",
                              help="Package dependencies, e.g. 'foo' or 'foo (>= 1.2 && < 2)'",
                              nargs="+")
    _add_common_options(fetch_parser)

    update_parser = subparsers.add_parser(
        "update",
        help="Download the package index of every repository",
    )
    _add_common_options(update_parser)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
