"""Browser session management using patchright.

Rules:
  - One isolated browser context per session, torn down on exit
  - Teardown also runs when the owning task is cancelled
  - No login flow; presentation is limited to UA, viewport and headers
  - patchright, not vanilla playwright
"""

import logging
from types import TracebackType

from patchright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from src.core.config import BrowserConfig

logger = logging.getLogger(__name__)

LAUNCH_ARGS: tuple[str, ...] = (
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    "--hide-scrollbars",
    "--mute-audio",
)

EXTRA_HEADERS: dict[str, str] = {
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}


class BrowserSession:
    """Async context manager that owns one patchright browser + context + page.

    Usage::

        async with BrowserSession(config) as session:
            page = session.page
            await page.goto("https://...")
    """

    def __init__(self, config: BrowserConfig) -> None:
        self._config = config
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        """The single page for this session. Raises if not entered."""
        if self._page is None:
            msg = "BrowserSession not entered — use 'async with'"
            raise RuntimeError(msg)
        return self._page

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self._open()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _open(self) -> None:
        pw = await async_playwright().start()
        self._playwright = pw

        self._browser = await pw.chromium.launch(
            headless=self._config.headless, args=list(LAUNCH_ARGS),
        )
        self._context = await self._browser.new_context(**context_options(self._config))
        await self._context.set_extra_http_headers(EXTRA_HEADERS)
        self._context.set_default_timeout(self._config.timeout_ms)
        self._page = await self._context.new_page()
        logger.debug("Browser session opened (headless=%s)", self._config.headless)

    async def close(self) -> None:
        """Release context, browser and driver. Safe to call more than once."""
        context, browser, playwright = self._context, self._browser, self._playwright
        self._page = None
        self._context = None
        self._browser = None
        self._playwright = None
        try:
            if context is not None:
                await context.close()
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()
        logger.debug("Browser session closed")


def context_options(config: BrowserConfig) -> dict[str, object]:
    """Keyword arguments for ``Browser.new_context``."""
    return {
        "user_agent": config.user_agent,
        "viewport": {"width": 1920, "height": 1080},
        "device_scale_factor": 1,
        "has_touch": False,
        "is_mobile": False,
        "locale": config.locale,
        "timezone_id": config.timezone_id,
    }
