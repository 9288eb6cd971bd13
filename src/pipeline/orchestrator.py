"""Orchestrator: turns a Query into a cached, scraped, or synthetic result.

Data flow:
  1. Fingerprint + cache lookup (hit returns immediately)
  2. URL build
  3. Browser driver raced against the deadline
  4. Parse → cap → cache → return
  5. Empty page → cached empty result + warning
  6. Any failure → classify → synthetic fallback → cache → return + warning

Nothing but InvalidQuery escapes ``fetch``; degradation is reported only via
``ScrapeResult.warning``.
"""

import asyncio
import logging
import random

from src.core.config import ScraperConfig
from src.core.errors import EmptyExtraction, FailureKind, FetchFailure, FetchTimeout, InvalidQuery
from src.core.schemas import Job, Query, RawRecord, ScrapeResult
from src.pipeline import fallback
from src.pipeline.result_cache import ResultCache
from src.platforms.base import SearchDriver
from src.platforms.linkedin.parser import LinkedInParser
from src.platforms.linkedin.searcher import build_url

logger = logging.getLogger(__name__)

NO_RESULTS_WARNING = (
    "No jobs found matching your criteria. Try different keywords or filters."
)
UNEXPECTED_WARNING = "Could not fetch job listings right now. Please try again later."

FAILURE_WARNINGS: dict[FailureKind, str] = {
    FailureKind.TIMEOUT: (
        "LinkedIn did not respond in time (timeout). Showing sample listings instead."
    ),
    FailureKind.NAVIGATION: (
        "Could not load LinkedIn search results (navigation failure). "
        "Showing sample listings instead."
    ),
    FailureKind.OTHER: (
        "Could not fetch real job listings (scraper error). Showing sample listings instead."
    ),
}

_NAVIGATION_MARKERS = ("net::", "err_", "navigat", "dns", "connection refused")


def classify_failure(exc: BaseException) -> FailureKind:
    """Map a browser-step failure to timeout / navigation-failure / other."""
    if isinstance(exc, FetchFailure):
        return exc.kind
    if isinstance(exc, TimeoutError):
        return FailureKind.TIMEOUT
    message = str(exc).lower()
    if "timeout" in message or "timed out" in message:
        return FailureKind.TIMEOUT
    if any(marker in message for marker in _NAVIGATION_MARKERS):
        return FailureKind.NAVIGATION
    return FailureKind.OTHER


class ScrapeOrchestrator:
    """Coordinates cache, browser driver, parser and fallback generator.

    Usage::

        orchestrator = ScrapeOrchestrator(driver, ResultCache(), settings.scraper)
        result = await orchestrator.fetch(Query(keywords="engineer"))
        ...
        await orchestrator.aclose()
    """

    def __init__(
        self,
        driver: SearchDriver,
        cache: ResultCache,
        config: ScraperConfig | None = None,
        *,
        rng: random.Random | None = None,
        deadline_seconds: float | None = None,
    ) -> None:
        self._driver = driver
        self._cache = cache
        self._config = config or ScraperConfig()
        self._deadline = (
            deadline_seconds if deadline_seconds is not None
            else self._config.browser_deadline_seconds
        )
        self._rng = rng or random.Random()
        self._parser = LinkedInParser(max_results=self._config.max_results, rng=self._rng)
        self._teardown: set[asyncio.Task[list[RawRecord]]] = set()

    @property
    def pending_teardowns(self) -> int:
        """Browser sessions that lost the deadline race and are still closing."""
        return len(self._teardown)

    async def fetch(self, query: Query) -> ScrapeResult:
        """Return jobs for ``query``. Raises only InvalidQuery."""
        if not query.keywords.strip():
            msg = "keywords must not be empty"
            raise InvalidQuery(msg)

        fingerprint = query.fingerprint
        try:
            cached = self._cache.get(fingerprint)
            if cached is not None:
                logger.info("Using cached results for '%s'", fingerprint)
                return ScrapeResult(
                    jobs=list(cached.jobs),
                    total_count=cached.total_count,
                    is_from_cache=True,
                    page=query.page,
                )
            return await self._scrape(query, fingerprint)
        except Exception:
            logger.exception("Unexpected error while fetching '%s'", fingerprint)
            return ScrapeResult(page=query.page, warning=UNEXPECTED_WARNING)

    async def aclose(self) -> None:
        """Wait for browser sessions abandoned by timeouts to finish closing."""
        if self._teardown:
            await asyncio.gather(*self._teardown, return_exceptions=True)

    # --- Private helpers ---

    async def _scrape(self, query: Query, fingerprint: str) -> ScrapeResult:
        url = build_url(query)
        logger.info("Scraping '%s': %s", fingerprint, url)
        try:
            records = await self._race_deadline(url)
            jobs = self._extract(records)
        except EmptyExtraction:
            logger.info("No jobs found for '%s'", fingerprint)
            self._cache.put(fingerprint, [], total_count=0)
            return ScrapeResult(
                jobs=[], total_count=0, page=query.page, warning=NO_RESULTS_WARNING,
            )
        except Exception as e:
            return self._fallback(query, fingerprint, e)

        self._cache.put(fingerprint, jobs, total_count=len(jobs))
        logger.info("Scraped %d jobs for '%s'", len(jobs), fingerprint)
        return ScrapeResult(jobs=jobs, total_count=len(jobs), page=query.page)

    async def _race_deadline(self, url: str) -> list[RawRecord]:
        """Run the driver against the deadline; first to settle wins.

        A driver that loses is cancelled and left to close its browser in
        the background, tracked in ``_teardown`` until it finishes.
        """
        task = asyncio.create_task(self._driver.fetch_records(url))
        try:
            done, _ = await asyncio.wait({task}, timeout=self._deadline)
        except asyncio.CancelledError:
            self._abandon(task)
            raise
        if task in done:
            if task.cancelled():
                msg = "browser driver cancelled itself"
                raise FetchFailure(msg, kind=FailureKind.OTHER)
            return task.result()

        self._abandon(task)
        msg = f"Scraping timeout after {self._deadline:g}s"
        raise FetchTimeout(msg)

    def _abandon(self, task: "asyncio.Task[list[RawRecord]]") -> None:
        task.cancel()
        self._teardown.add(task)
        task.add_done_callback(self._teardown_finished)

    def _teardown_finished(self, task: "asyncio.Task[list[RawRecord]]") -> None:
        self._teardown.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Abandoned browser session ended with error", exc_info=task.exception())

    def _extract(self, records: list[RawRecord]) -> list[Job]:
        if not records:
            msg = "page held no candidate records"
            raise EmptyExtraction(msg)
        jobs = self._parser.parse_cards(records)
        if not jobs:
            msg = f"none of {len(records)} records could be parsed"
            raise EmptyExtraction(msg)
        return jobs[: self._config.max_results]

    def _fallback(self, query: Query, fingerprint: str, error: Exception) -> ScrapeResult:
        kind = classify_failure(error)
        logger.warning(
            "Scraping failed for '%s' (%s): %s, using fallback data",
            fingerprint, kind.value, error,
        )
        count = min(self._config.fallback_count, self._config.max_results)
        jobs = fallback.generate(query, count, self._rng)
        total_count = max(self._config.fallback_total_count, len(jobs))
        self._cache.put(fingerprint, jobs, total_count=total_count)
        return ScrapeResult(
            jobs=jobs, total_count=total_count, page=query.page,
            warning=FAILURE_WARNINGS[kind],
        )
