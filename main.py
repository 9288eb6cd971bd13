"""CLI entry point for the job search scraper."""

import argparse
import asyncio
import json
import logging
import sys
import typing

from src.core.config import Settings
from src.core.errors import InvalidQuery
from src.core.schemas import DatePostedFilter, JobTypeFilter, Query, ScrapeResult
from src.pipeline.orchestrator import UNEXPECTED_WARNING, ScrapeOrchestrator
from src.pipeline.result_cache import ResultCache
from src.platforms.linkedin.adapter import LinkedInDriver
from src.platforms.linkedin.searcher import build_url

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job search scraper - fetch LinkedIn job postings as JSON",
    )
    subparsers = parser.add_subparsers(dest="command")

    search_parser = subparsers.add_parser("search", help="Run a job search")
    search_parser.add_argument("--keywords", "-k", help="Search keywords (required)")
    search_parser.add_argument("--location", default="", help="Location (default: any)")
    search_parser.add_argument(
        "--job-type",
        default="all",
        help=(
            f"Job type filter: {', '.join(typing.get_args(JobTypeFilter))} "
            "(default: all; unknown values apply no filter)"
        ),
    )
    search_parser.add_argument(
        "--date-posted",
        default="anytime",
        help=(
            f"Recency filter: {', '.join(typing.get_args(DatePostedFilter))} "
            "(default: anytime; unknown values apply no filter)"
        ),
    )
    search_parser.add_argument(
        "--page", type=int, default=1, help="One-based result page (default: 1)",
    )
    search_parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in defaults)",
    )
    search_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the search URL and cache key without launching a browser",
    )
    search_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    return args


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def load_settings(path: str | None) -> Settings:
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def build_query(args: argparse.Namespace) -> Query:
    return Query.build(
        keywords=args.keywords,
        location=args.location,
        job_type=args.job_type,
        date_posted=args.date_posted,
        page=args.page,
    )


def dry_run(query: Query) -> None:
    """Print what would happen without actually searching."""
    print(f"[DRY RUN] Cache key: {query.fingerprint}")
    print(f"[DRY RUN] URL: {build_url(query)}")


async def run(settings: Settings, query: Query) -> ScrapeResult:
    """Fetch one query with a real browser, inside the outer request budget."""
    cache = ResultCache(
        settings.scraper.cache_ttl_seconds,
        max_entries=settings.scraper.cache_max_entries,
    )
    driver = LinkedInDriver(settings.browser, max_records=settings.scraper.max_results)
    orchestrator = ScrapeOrchestrator(driver, cache, settings.scraper)
    try:
        return await asyncio.wait_for(
            orchestrator.fetch(query), timeout=settings.scraper.request_timeout_seconds,
        )
    except TimeoutError:
        logger.error(
            "Request exceeded %ss budget", settings.scraper.request_timeout_seconds,
        )
        return ScrapeResult(page=query.page, warning=UNEXPECTED_WARNING)
    finally:
        await orchestrator.aclose()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        query = build_query(args)
    except InvalidQuery as e:
        print(f"Error: invalid query: {e}", file=sys.stderr)
        sys.exit(1)

    if args.dry_run:
        dry_run(query)
        return

    result = asyncio.run(run(settings, query))
    print(json.dumps(result.to_payload(), indent=2))


if __name__ == "__main__":
    main()
