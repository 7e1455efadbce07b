"""
Browser Session

One headless Chromium instance shared by every adapter call in a run.
Started on first use and closed once by the owning ScrapeContext.
"""

import logging
from typing import Optional

from playwright.sync_api import Browser, BrowserContext, Playwright, sync_playwright
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..errors import FetchError, NotFoundError

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
]


class BrowserSession:
    """Lazily started Playwright browser for JavaScript-rendered pages."""

    def __init__(
        self,
        user_agent: str = "",
        headless: bool = True,
        navigation_timeout_ms: int = 30000,
        selector_timeout_ms: int = 10000,
    ):
        self.user_agent = user_agent
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.selector_timeout_ms = selector_timeout_ms

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @property
    def started(self) -> bool:
        return self._context is not None

    def _ensure_started(self) -> BrowserContext:
        if self._context is None:
            logger.info("Starting headless browser...")
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=LAUNCH_ARGS,
            )
            context_kwargs = {"locale": "ja-JP"}
            if self.user_agent:
                context_kwargs["user_agent"] = self.user_agent
            self._context = self._browser.new_context(**context_kwargs)
        return self._context

    def page_content(
        self,
        url: str,
        wait_selector: Optional[str] = None,
        wait_until: str = "domcontentloaded",
    ) -> str:
        """
        Navigate to url and return the rendered HTML.

        Args:
            url: Page to load
            wait_selector: Optional CSS selector to wait for after navigation
            wait_until: Playwright load state for goto()

        Raises:
            NotFoundError: On HTTP 404
            FetchError: On other HTTP errors, timeouts or browser failures
        """
        context = self._ensure_started()
        page = context.new_page()
        try:
            response = page.goto(url, wait_until=wait_until,
                                 timeout=self.navigation_timeout_ms)
            if response is not None:
                if response.status == 404:
                    raise NotFoundError(f"Page not found: {url}", url=url)
                if response.status >= 400:
                    raise FetchError(f"HTTP {response.status} for {url}",
                                     url=url, status_code=response.status)
            if wait_selector:
                try:
                    page.wait_for_selector(wait_selector, timeout=self.selector_timeout_ms)
                except PlaywrightTimeoutError:
                    # Parsing decides whether the page is usable
                    logger.debug("Selector %s not found on %s", wait_selector, url)
            return page.content()
        except PlaywrightError as e:
            raise FetchError(f"Browser navigation failed for {url}: {e}", url=url) from e
        finally:
            page.close()

    def close(self) -> None:
        """Close the browser if it was started. Safe to call more than once."""
        if self._context is not None:
            self._context.close()
            self._context = None
        if self._browser is not None:
            self._browser.close()
            self._browser = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
            logger.debug("Browser closed")
