"""loadermeta - Mirror and normalize Minecraft mod-loader metadata

    Returns:
        int: Exit code
"""
import json
import logging
import sys

from args import parse_args
from cli_config import ConfigError, build_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, Sources
from errors import FetchError, MetadataError
from generators import generate_minecraft
from updaters import FabricUpdater, ForgeUpdater, MojangUpdater, update_liteloader

logger = logging.getLogger(__name__)


def _expand_sources(requested):
    """Expand ``all`` and drop duplicates, keeping the supported-sources order."""
    if "all" in requested:
        return list(Constants.SUPPORTED_SOURCES)
    return [source for source in Constants.SUPPORTED_SOURCES if source in requested]


def run_update(config, sources):
    """Run the updater for each requested source, in order."""
    for source in _expand_sources(sources):
        logger.info("Updating %s metadata...", source)
        if source == Sources.MOJANG.value:
            MojangUpdater(config).run()
        elif source == Sources.FORGE.value:
            ForgeUpdater(config).run()
        elif source == Sources.FABRIC.value:
            FabricUpdater(config).run()
        elif source == Sources.LITELOADER.value:
            update_liteloader(config)


def run_generate(config, target):
    if target == "minecraft":
        generate_minecraft(config)


def run(argv=None):
    """Parse arguments, dispatch the command and map failures to exit codes."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", command=args.COMMAND)
        )

    try:
        config = build_config(args)
        if args.COMMAND == "update":
            run_update(config, args.SOURCES)
        elif args.COMMAND == "generate":
            run_generate(config, args.TARGET)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return ExitCodes.FILE_ERROR.value
    except FetchError as exc:
        logger.error("Upstream fetch failed: %s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    except MetadataError as exc:
        logger.error("Metadata error: %s", exc)
        return ExitCodes.METADATA_ERROR.value
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("File error: %s", exc)
        return ExitCodes.FILE_ERROR.value

    logger.info("Done.")
    return ExitCodes.SUCCESS.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
