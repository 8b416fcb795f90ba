"""Package List Validator - check that every listed repository has a parseable Swift package manifest."""

import argparse
import asyncio
import sys
from pathlib import Path

from config import Config
from fetcher import build_client
from list_checks import DEFAULT_CHECKS, run_list_checks
from logging_setup import get_logger, setup_logging
from master_list import fetch_master_list, filter_new
from package_list import find_package_list, load_package_urls
from pipeline import build_pipeline, run_all
from reporting import ProgressReporter, summarize

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_LIST = 2
EXIT_BAD_CONFIG = 2


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Validate that each repository in packages.json has a valid Package.swift",
    )
    parser.add_argument(
        "command",
        choices=["all", "diff", "mine"],
        help="all: every package in the list; diff: packages not in the master list; "
        "mine: the package in a local directory",
    )
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="packages.json file (all, diff) or package directory (mine)",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.toml)",
    )
    parser.add_argument(
        "-b", "--branch",
        type=str,
        default=None,
        help="Branch to fetch Package.swift from",
    )
    parser.add_argument(
        "-j", "--dump-concurrency",
        type=int,
        default=None,
        help="Number of concurrent package dumps (default: 3)",
    )
    parser.add_argument(
        "-t", "--dump-timeout",
        type=float,
        default=None,
        help="Seconds before a package dump is terminated (default: 10)",
    )
    parser.add_argument(
        "--keep-workspaces",
        action="store_true",
        default=None,
        help="Keep the downloaded manifest of failed packages for inspection",
    )

    # Logging verbosity (mutually exclusive)
    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only warnings and errors)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to file (always DEBUG level)",
    )

    return parser.parse_args()


async def validate_list(config: Config, urls: list[str], only_new: bool, show_progress: bool) -> int:
    logger = get_logger()

    async with build_client(config) as client:
        if only_new:
            logger.debug("Fetching master list...")
            try:
                master = await fetch_master_list(client, config.master_list_url)
            except Exception as e:
                logger.error("Error fetching master list: %s", e)
                return EXIT_FAILED
            urls = filter_new(urls, master)
            logger.info("Found %d packages not in the master list", len(urls))

        logger.info("Checking each url for valid package dump...")
        pipeline = build_pipeline(config, client)
        reporter = ProgressReporter(len(urls), show_progress=show_progress)
        outcomes = await run_all(pipeline, urls, on_outcome=reporter.on_outcome)

    failures = summarize(outcomes)
    if failures:
        logger.warning("Validation failed.")
        return EXIT_FAILED

    logger.info("Validation Successful.")
    return EXIT_OK


async def validate_local(config: Config, directory: Path) -> int:
    logger = get_logger()

    async with build_client(config) as client:
        outcome = await build_pipeline(config, client).validate_directory(directory)

    if outcome.error is not None:
        logger.error("%s: %s", directory, outcome.error.reason)
        return EXIT_FAILED

    logger.info("Package %s is valid (first product: %s)", outcome.detail.package.name, outcome.detail.first_product.name)
    return EXIT_OK


def main() -> int:
    args = parse_args()

    # Setup logging first
    verbosity = 1 if args.verbose else (-1 if args.quiet else 0)
    setup_logging(verbosity=verbosity, log_file=args.log_file)
    logger = get_logger()

    logger.debug("Loading configuration...")
    try:
        config = Config.load(
            config_path=args.config,
            branch_override=args.branch,
            dump_concurrency_override=args.dump_concurrency,
            dump_timeout_override=args.dump_timeout,
            keep_failed_workspaces_override=args.keep_workspaces,
        )
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return EXIT_BAD_CONFIG

    logger.debug("Dump command: %s", " ".join(config.dump_command))
    logger.debug("Concurrent dumps: %s", config.dump_concurrency)
    logger.debug("Dump timeout: %ss", config.dump_timeout)

    if args.command == "mine":
        directory = (args.path or Path.cwd()).resolve()
        return asyncio.run(validate_local(config, directory))

    list_path = find_package_list(args.path, [Path.cwd(), Path(__file__).resolve().parent])
    if list_path is None:
        logger.error("Unable to find packages.json to validate.")
        return EXIT_NO_LIST

    try:
        urls = load_package_urls(list_path)
    except (OSError, ValueError) as e:
        logger.error("Error reading %s: %s", list_path, e)
        return EXIT_NO_LIST
    logger.info("Found %d packages in %s", len(urls), list_path)

    errors = run_list_checks(urls)
    for error in errors:
        logger.error("%s", error)
    if errors:
        return EXIT_FAILED
    for check in DEFAULT_CHECKS:
        logger.info("%-25s ✓", check.success_description)

    return asyncio.run(
        validate_list(config, urls, only_new=args.command == "diff", show_progress=verbosity >= 0)
    )


if __name__ == "__main__":
    sys.exit(main())
