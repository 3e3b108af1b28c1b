"""Main entry point for the auto-index command."""

import argparse
import logging
import sys
from pathlib import Path

from auto_index.config import Config, get_config, set_overrides
from auto_index.indexer import IndexBuilder
from auto_index.indexer.errors import AutoIndexError
from auto_index.output import write_index

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auto-index",
        description="Build a documentation term index from source files and an index script",
    )
    parser.add_argument("--script", type=Path, help="Index script to process")
    parser.add_argument(
        "--scan",
        type=Path,
        action="append",
        default=[],
        help="Source file to scan before the script runs (repeatable)",
    )
    parser.add_argument(
        "--prefix",
        help="Base directory for relative paths in the script (default: the script's directory)",
    )
    parser.add_argument(
        "--scanners",
        type=Path,
        action="append",
        default=[],
        help="YAML file of scanner definitions (repeatable)",
    )
    parser.add_argument("--output", type=Path, help="Write the index as YAML here (default: stdout)")
    parser.add_argument("--verbose", action="store_true", help="Report progress")
    parser.add_argument("--debug", help="Debug filter passed on to the renderer")
    return parser


def run(config: Config, script: Path | None, scan: list[Path], output: Path | None) -> IndexBuilder:
    """Build the index described by ``config`` and the given inputs, then write it."""
    builder = IndexBuilder.from_config(config)

    for path in scan:
        builder.scan_file(path)
    if script is not None:
        builder.process_script(script)

    logger.info(
        "Index complete: %d entries, %d rewrite rules",
        len(builder.entries),
        len(builder.rewrite_rules),
    )
    write_index(builder, output)
    return builder


def main(argv: list[str] | None = None) -> None:
    """Main function - processes the script and writes the index."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.script is None and not args.scan:
        parser.error("nothing to do: give --script and/or --scan")

    # CLI flags take precedence over env vars
    set_overrides(
        prefix=args.prefix,
        verbose=True if args.verbose else None,
        debug=args.debug,
    )
    try:
        config = get_config()
    except ValueError as e:
        parser.error(str(e))

    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.INFO if config.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config.scanner_files.extend(args.scanners)

    if config.verbose:
        logger.info("=" * 50)
        logger.info("auto-index starting...")
        logger.info("  SCRIPT:   %s", args.script)
        logger.info("  PREFIX:   %s", config.prefix or "(script directory)")
        logger.info("  SCANNERS: %s", ", ".join(str(p) for p in config.scanner_files) or "(defaults)")
        logger.info("  OUTPUT:   %s", args.output or "(stdout)")
        logger.info("=" * 50)

    try:
        run(config, args.script, args.scan, args.output)
    except (AutoIndexError, OSError) as e:
        logger.error("auto-index failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
