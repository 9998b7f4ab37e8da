"""Argument parsing functionality for loadermeta."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="loadermeta",
        description=(
            "loadermeta - Mirror and normalize Minecraft mod-loader metadata"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--upstream-dir",
                        dest="UPSTREAM_DIR",
                        help=f"Directory holding mirrored upstream metadata (default: {Constants.DEFAULT_UPSTREAM_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("--launcher-dir",
                        dest="LAUNCHER_DIR",
                        help=f"Directory receiving launcher-format output (default: {Constants.DEFAULT_LAUNCHER_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("--static-dir",
                        dest="STATIC_DIR",
                        help=f"Directory holding hand-authored overrides (default: {Constants.DEFAULT_STATIC_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    commands = parser.add_subparsers(dest="COMMAND", required=True)

    update = commands.add_parser("update", help="Mirror upstream metadata")
    update.add_argument("SOURCES",
                        help="Sources to update",
                        nargs="+",
                        choices=Constants.SUPPORTED_SOURCES + ["all"])

    generate = commands.add_parser("generate", help="Generate launcher-format metadata")
    generate.add_argument("TARGET",
                          help="Component to generate",
                          choices=Constants.GENERATE_TARGETS)

    return parser.parse_args(argv)
