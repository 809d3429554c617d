"""Command-line interface for qfuncs."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from qfuncs.bundle import write_bundle
from qfuncs.config_loader import load_configs
from qfuncs.errors import ConfigError
from qfuncs.includes import DEFAULT_INCLUDES_DIR
from qfuncs.pipeline import DEFAULT_JOBS, generate

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="qfuncs",
        description="Infer, test and bundle JavaScript custom functions",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Test function definitions and generate a bundle",
    )
    generate_parser.add_argument(
        "config",
        nargs="+",
        type=Path,
        help="directory/file containing function definitions",
    )
    generate_parser.add_argument(
        "--bundle",
        "-b",
        type=Path,
        help="path to bundle file",
    )
    generate_parser.add_argument(
        "--includes-dir",
        type=Path,
        default=DEFAULT_INCLUDES_DIR,
        help="Directory holding include groups (default: ./includes)",
    )
    generate_parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=DEFAULT_JOBS,
        help=f"Number of functions tested concurrently (default: {DEFAULT_JOBS})",
    )
    generate_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress to stderr",
    )

    return parser


def parse_args(args: list[str]) -> argparse.Namespace:
    return create_parser().parse_args(args)


async def run_generate(
    config: list[Path],
    bundle: Path | None,
    includes_dir: Path,
    jobs: int,
) -> int:
    """Run the generate command.

    Returns:
        Exit code (0 for success, 1 if any function failed)
    """
    try:
        configs = load_configs(config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = await generate(configs, includes_dir=includes_dir, jobs=jobs)

    for fn in report.functions:
        print(fn.signature.describe())
    for failure in report.failures:
        print(f"Error: {failure.message}", file=sys.stderr)

    if not report.ok:
        logger.error(f"{len(report.failures)} functions failed, no bundle written")
        return 1

    if bundle is not None:
        try:
            write_bundle(report.functions, bundle)
        except OSError as e:
            print(f"Error: failed writing bundle file '{bundle}': {e}", file=sys.stderr)
            return 1
        print(f"wrote bundle to {bundle}.")

    return 0


async def run_cli(args: list[str]) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command-line arguments (without program name)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        parsed = parse_args(args)
    except SystemExit as e:
        return e.code if e.code else 1

    if parsed.command is None:
        create_parser().print_help(sys.stderr)
        return 1

    setup_logging(parsed.verbose)

    if parsed.command == "generate":
        return await run_generate(
            parsed.config, parsed.bundle, parsed.includes_dir, parsed.jobs
        )

    return 1


def main():
    """Entry point for the CLI."""
    exit_code = asyncio.run(run_cli(sys.argv[1:]))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
