# main.py

"""Entry point for pricewatch (one-shot fetch or scheduled watch)."""

import argparse
import asyncio
import logging
import sys

from pricewatch.config.logging_config import setup_logging
from pricewatch.config.settings import Settings

logger = logging.getLogger("pricewatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pricewatch",
        description="Price-list change tracker.",
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help=f"Source document URL (default: {Settings.SOURCE_URL}).",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        default=False,
        help="Keep fetching on a fixed interval.",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=None,
        help=f"Seconds between cycles (default: {Settings.FETCH_INTERVAL:g}).",
    )
    parser.add_argument(
        "-n",
        "--cycles",
        type=int,
        default=None,
        help="Stop watching after this many cycles (default: run forever).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format for a one-shot fetch (default: json).",
    )
    return parser


def main() -> None:
    """Route to a one-shot fetch or the watch loop."""
    log_file = setup_logging()
    logger.info("pricewatch starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from pricewatch.cli.runner import run_once, run_watch

    try:
        if args.watch:
            exit_code = asyncio.run(
                run_watch(args.url, args.interval, args.cycles)
            )
        else:
            exit_code = asyncio.run(
                run_once(args.url, args.output_format)
            )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 0
    finally:
        logger.info("pricewatch shutting down")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
