"""
Source Adapter Contract

Every manufacturer adapter subclasses SourceAdapter and turns a product
URL into a ScrapedProduct. Run-scoped resources (HTTP session, browser,
retry policy) are owned by a ScrapeContext passed into each call.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests

from ..common.config_loader import get_section
from ..errors import FetchError, NotFoundError
from ..models import ProductListing, ScrapedProduct
from .browser import BrowserSession

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


@dataclass
class RetryPolicy:
    """
    Bounded exponential backoff for transient fetch failures.

    Only FetchError is retried; NotFoundError and ParseError propagate
    on the first occurrence.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given 1-based failed attempt."""
        return min(self.base_delay * self.multiplier ** (attempt - 1), self.max_delay)

    def call(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func(*args, **kwargs)
            except FetchError as e:
                if attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(attempt)
                logger.warning("Fetch failed (attempt %d/%d): %s; retrying in %.1fs",
                               attempt, self.max_attempts, e, delay)
                self.sleep(delay)
        raise FetchError("Retry policy allows no attempts")


def fetch_html(session: requests.Session, url: str, timeout: int = 30) -> str:
    """
    GET a page and return its decoded HTML.

    Raises:
        NotFoundError: On HTTP 404
        FetchError: On any other HTTP error or transport failure
    """
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"Request failed for {url}: {e}", url=url) from e

    if response.status_code == 404:
        raise NotFoundError(f"Page not found: {url}", url=url)
    if response.status_code >= 400:
        raise FetchError(f"HTTP {response.status_code} for {url}",
                         url=url, status_code=response.status_code)

    # Japanese sites often omit the charset header
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = response.apparent_encoding
    return response.text


class ScrapeContext:
    """
    Run-scoped resources shared by adapter calls.

    Usage:
        with ScrapeContext.from_config(load_pipeline_config()) as ctx:
            product = ctx.retry.call(adapter.scrape, url, ctx)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        browser: Optional[BrowserSession] = None,
        retry: Optional[RetryPolicy] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: int = 30,
    ):
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
        })
        self.browser = browser or BrowserSession(user_agent=user_agent)
        self.retry = retry or RetryPolicy()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScrapeContext":
        http = get_section(config, "http")
        retry = get_section(config, "scrape", "retry")
        browser = get_section(config, "scrape", "browser")
        user_agent = http.get("user_agent") or DEFAULT_USER_AGENT

        return cls(
            browser=BrowserSession(
                user_agent=user_agent,
                headless=browser.get("headless", True),
                navigation_timeout_ms=int(browser.get("navigation_timeout_ms", 30000)),
                selector_timeout_ms=int(browser.get("selector_timeout_ms", 10000)),
            ),
            retry=RetryPolicy(
                max_attempts=int(retry.get("max_attempts", 3)),
                base_delay=float(retry.get("base_delay", 1.0)),
                multiplier=float(retry.get("multiplier", 2.0)),
                max_delay=float(retry.get("max_delay", 30.0)),
            ),
            user_agent=user_agent,
            timeout=int(http.get("timeout", 30)),
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        try:
            self.browser.close()
        finally:
            self.session.close()

    def get_html(self, url: str) -> str:
        """Fetch static HTML with the shared session."""
        return fetch_html(self.session, url, timeout=self.timeout)

    def render_html(self, url: str, wait_selector: Optional[str] = None) -> str:
        """Fetch browser-rendered HTML with the shared browser."""
        return self.browser.page_content(url, wait_selector=wait_selector)


class SourceAdapter(ABC):
    """
    Contract for one manufacturer's website.

    Subclasses set the class attributes and implement scrape(); discover()
    is optional.
    """

    manufacturer: str = ""
    manufacturer_slug: str = ""
    site_url: str = ""

    @abstractmethod
    def scrape(self, url: str, context: ScrapeContext) -> ScrapedProduct:
        """
        Scrape one product page.

        Raises:
            FetchError: Network/HTTP failure
            ParseError: Expected page structure missing
            NotFoundError: Page no longer exists
        """

    def discover(self, context: ScrapeContext) -> List[ProductListing]:
        """List product pages for this manufacturer."""
        raise NotImplementedError(f"{type(self).__name__} does not support discovery")
