"""LinkedIn search driver — opens a browser session and snapshots result cards."""

import logging
from collections.abc import Callable
from typing import Any

from patchright.async_api import Error as PlaywrightError
from patchright.async_api import TimeoutError as PlaywrightTimeoutError

from src.browser.session import BrowserSession
from src.core.config import BrowserConfig
from src.core.errors import FailureKind, FetchFailure, FetchTimeout
from src.core.schemas import RawRecord
from src.platforms.base import SearchDriver
from src.platforms.linkedin.selectors import (
    CARD_SELECTORS,
    FIELD_SELECTORS,
    RESULTS_LIST_SELECTOR,
)

logger = logging.getLogger(__name__)

# Runs in the page: copies every field selector's text/attribute per card so
# the parser can apply fallback order after the browser is gone.
SNAPSHOT_JS = """
(cards, spec) => cards.slice(0, spec.limit).map((card) => {
    const record = {};
    for (const [field, selectors] of Object.entries(spec.fields)) {
        const values = {};
        for (const s of selectors) {
            const el = card.querySelector(s.css);
            if (!el) continue;
            const value = s.attr ? el.getAttribute(s.attr) : el.textContent;
            if (value) values[s.key] = value;
        }
        record[field] = values;
    }
    return record;
})
"""


def snapshot_spec(limit: int) -> dict[str, Any]:
    """Serializable selector table handed to SNAPSHOT_JS."""
    return {
        "limit": limit,
        "fields": {
            field: [{"css": s.css, "attr": s.attr, "key": s.key} for s in selectors]
            for field, selectors in FIELD_SELECTORS.items()
        },
    }


class LinkedInDriver(SearchDriver):
    """Fetches raw cards from LinkedIn's public job search page.

    A fresh BrowserSession is opened per call, so concurrent requests never
    share a context, and cancellation tears the session down.
    """

    def __init__(
        self,
        config: BrowserConfig,
        *,
        max_records: int = 25,
        session_factory: Callable[[BrowserConfig], Any] = BrowserSession,
    ) -> None:
        self._config = config
        self._max_records = max_records
        self._session_factory = session_factory

    async def fetch_records(self, url: str) -> list[RawRecord]:
        """Navigate to ``url`` and snapshot up to ``max_records`` cards."""
        try:
            async with self._session_factory(self._config) as session:
                page = session.page
                await self._navigate(page, url)
                await self._wait_for_results(page)
                return await self._snapshot_cards(page)
        except FetchFailure:
            raise
        except PlaywrightTimeoutError as e:
            raise FetchTimeout(f"Browser step timed out: {e}") from e
        except PlaywrightError as e:
            raise FetchFailure(f"Browser error: {e}", kind=FailureKind.OTHER) from e

    async def _navigate(self, page: Any, url: str) -> None:
        logger.info("Navigating to %s", url)
        try:
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self._config.navigation_timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise FetchTimeout(f"Navigation timeout: {e}") from e
        except PlaywrightError as e:
            raise FetchFailure(
                f"Navigation failed: {e}", kind=FailureKind.NAVIGATION,
            ) from e

    async def _wait_for_results(self, page: Any) -> None:
        """Wait for the result list, then let dynamic content settle.

        A missing list is not an error: the page may still hold cards under
        another layout, or legitimately have none.
        """
        try:
            await page.wait_for_selector(
                RESULTS_LIST_SELECTOR, timeout=self._config.results_wait_ms,
            )
        except PlaywrightTimeoutError:
            logger.info("Timeout waiting for job listings")
        if self._config.settle_ms:
            await page.wait_for_timeout(self._config.settle_ms)

    async def _snapshot_cards(self, page: Any) -> list[RawRecord]:
        """Snapshot cards using the first card selector that matches anything."""
        spec = snapshot_spec(self._max_records)
        for selector in CARD_SELECTORS:
            records = await page.eval_on_selector_all(selector, SNAPSHOT_JS, spec)
            if records:
                logger.debug("Found %d cards with selector '%s'", len(records), selector)
                return list(records)
        logger.warning("No cards found with any selector")
        return []
