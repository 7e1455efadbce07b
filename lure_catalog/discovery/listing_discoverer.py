"""
URL Discovery from listing pages

Collects product page links from a manufacturer's category/listing pages.
"""

import logging
import re
from typing import Callable, Iterable, List, Optional, Union
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup

from ..common.text_utils import clean_text
from ..models import ProductListing

logger = logging.getLogger(__name__)


class ListingDiscoverer:
    """
    Discovers product URLs by scanning listing pages for matching links.

    Usage:
        discoverer = ListingDiscoverer(ctx.get_html, r"/products/worm/[^/]+/?$")
        listings = discoverer.discover(["https://34net.jp/products/worm/"])
    """

    def __init__(
        self,
        fetch: Callable[[str], str],
        link_pattern: Union[str, "re.Pattern[str]"],
        exclude_keywords: Iterable[str] = (),
    ):
        """
        Args:
            fetch: Returns HTML for a URL (static session or browser)
            link_pattern: Regex a resolved product URL must match
            exclude_keywords: Link texts containing any of these are skipped
        """
        self.fetch = fetch
        self.link_pattern = re.compile(link_pattern) if isinstance(link_pattern, str) else link_pattern
        self.exclude_keywords = list(exclude_keywords)
        self.listings: List[ProductListing] = []

    def extract_links(self, html: str, page_url: str) -> List[ProductListing]:
        """Extract matching product links from one listing page."""
        soup = BeautifulSoup(html, "lxml")
        found: List[ProductListing] = []

        for a in soup.find_all("a", href=True):
            url, _ = urldefrag(urljoin(page_url, a["href"].strip()))
            if not self.link_pattern.search(url):
                continue

            name = clean_text(a.get_text(" "))
            if any(keyword in name for keyword in self.exclude_keywords):
                logger.debug("Excluded by keyword: %s (%s)", name, url)
                continue
            found.append(ProductListing(url=url, name=name))

        return found

    def discover(self, pages: List[str], limit: int = 0) -> List[ProductListing]:
        """
        Fetch each listing page and collect product URLs in first-seen order.

        Args:
            pages: Listing page URLs
            limit: Maximum number of URLs to return (0 = no limit)

        Returns:
            Deduplicated product listings
        """
        seen = set()
        self.listings = []

        for page_url in pages:
            logger.info("Fetching listing %s...", page_url)
            html = self.fetch(page_url)
            for listing in self.extract_links(html, page_url):
                if listing.url in seen:
                    continue
                seen.add(listing.url)
                self.listings.append(listing)

        logger.info("Found %d product URLs", len(self.listings))

        if limit and len(self.listings) > limit:
            self.listings = self.listings[:limit]
            logger.info("Limited to %d URLs", limit)

        return self.listings

    def save_urls(self, filepath: str):
        """Save discovered URLs to a file."""
        save_url_file(self.listings, filepath)

    def get_stats(self) -> dict:
        """Return discovery statistics."""
        return {
            "products_found": len(self.listings),
        }


def save_url_file(listings: List[ProductListing], filepath: str) -> None:
    """Write one URL per line, in the format load_url_file reads back."""
    with open(filepath, "w", encoding="utf-8") as f:
        for listing in listings:
            f.write(listing.url + "\n")

    logger.info("Saved %d URLs to %s", len(listings), filepath)


def load_url_file(filepath: str, limit: Optional[int] = None) -> List[ProductListing]:
    """
    Read product URLs from a text file.

    One URL per line; blank lines and lines starting with '#' are ignored.
    """
    with open(filepath, "r", encoding="utf-8") as f:
        urls = [line.strip() for line in f
                if line.strip() and not line.strip().startswith("#")]

    if limit:
        urls = urls[:limit]
    return [ProductListing(url=url) for url in urls]
