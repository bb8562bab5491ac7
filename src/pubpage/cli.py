"""Command-line interface for the publication list renderer."""

import argparse
import datetime
import logging
import sys
from pathlib import Path

from .config import SiteConfig, load_config, resolve_output, resolve_source
from .exceptions import PubpageError
from .fetch import read_bibtex
from .parser import find_problems
from .pipeline import publish


def setup_logging(verbosity: int = 0) -> None:
    """Configure logging for the CLI application.

    Args:
        verbosity: Logging verbosity level (0=WARNING, 1=INFO, 2+=DEBUG)
    """
    level = {0: logging.WARNING, 1: logging.INFO}.get(min(verbosity, 2), logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s:%(lineno)d – %(message)s",
    )


def _load_site_config(args: argparse.Namespace) -> SiteConfig:
    """Load settings for the workspace and apply command-line overrides."""
    workspace = Path(args.workspace)
    config_path = Path(args.config) if args.config else None
    config = load_config(workspace, config_path)

    # Paths given on the command line are relative to the current directory
    if args.source:
        config.source = resolve_source(args.source, Path.cwd())

    return config


def cmd_render(args: argparse.Namespace) -> None:
    """Render the recent publications to HTML."""
    logger = logging.getLogger(__name__)

    try:
        config = _load_site_config(args)

        if args.output:
            config.output = resolve_output(args.output, Path.cwd())
        if args.all:
            config.window = None
        elif args.window is not None:
            config.window = args.window
        if args.document:
            config.document = True
        if args.strict:
            config.strict = True

        today = datetime.date(args.year, 1, 1) if args.year is not None else None

        logger.info(f"Rendering publications from {config.source}")
        html = publish(config, today=today)

        if config.output is None:
            sys.stdout.write(html)

        sys.exit(0)

    except PubpageError as e:
        logger.error(f"Render error: {e}")
        sys.exit(1)


def cmd_check(args: argparse.Namespace) -> None:
    """Report entries that cannot be parsed or rendered completely."""
    logger = logging.getLogger(__name__)

    try:
        config = _load_site_config(args)
        text = read_bibtex(config.source, timeout=config.timeout)
        problems = find_problems(text)

    except PubpageError as e:
        logger.error(f"Check error: {e}")
        sys.exit(1)

    for problem in problems:
        logger.warning(problem)

    if problems:
        logger.error(f"✗ Found {len(problems)} problems in {config.source}")
        sys.exit(1)

    logger.info("✓ No problems found")
    sys.exit(0)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def _calendar_year(value: str) -> int:
    year = int(value)
    if not datetime.MINYEAR <= year <= datetime.MAXYEAR:
        raise argparse.ArgumentTypeError(
            f"must be between {datetime.MINYEAR} and {datetime.MAXYEAR}: {value}"
        )
    return year


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pubpage",
        description="Render the recent publications of a BibTeX file as HTML for a homepage.",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (use -v for INFO, -vv for DEBUG)",
    )

    parser.add_argument(
        "--workspace",
        type=str,
        default=".",
        help="Path to the homepage directory (default: current directory)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Settings file (default: pubpage.json in the workspace, if present)",
    )

    parser.add_argument(
        "--source",
        type=str,
        help="BibTeX file path or http(s) URL (default: bibliography.bib in the workspace)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # render subcommand
    render_parser = subparsers.add_parser("render", help="Render recent publications to HTML")
    render_parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output file, '-' for stdout (default: publications.html in the workspace)",
    )
    window_group = render_parser.add_mutually_exclusive_group()
    window_group.add_argument(
        "--window",
        type=_non_negative_int,
        help="Show publications from the last N years (default: 3)",
    )
    window_group.add_argument(
        "--all",
        action="store_true",
        help="Show every publication, including undated ones",
    )
    render_parser.add_argument(
        "--year",
        type=_calendar_year,
        help="Reference year for the recency window (default: current year)",
    )
    render_parser.add_argument(
        "--document",
        action="store_true",
        help="Wrap the list in a standalone HTML page",
    )
    render_parser.add_argument(
        "--strict",
        action="store_true",
        help="Parse with bibtexparser and skip blocks it rejects",
    )
    render_parser.set_defaults(func=cmd_render)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check", help="Report unparseable blocks and entries missing key, title or year"
    )
    check_parser.set_defaults(func=cmd_check)

    return parser


def main() -> None:
    """Main entry point for the pubpage CLI."""
    parser = create_parser()
    args = parser.parse_args()

    # Setup logging based on verbosity
    setup_logging(args.verbose)

    # Handle case where no subcommand is provided
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    # Execute the subcommand
    args.func(args)


if __name__ == "__main__":
    main()
