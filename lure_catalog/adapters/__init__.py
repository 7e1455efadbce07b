"""
Source adapters, one per manufacturer site.

Modules:
    base       - SourceAdapter contract, ScrapeContext, RetryPolicy, fetch_html
    browser    - BrowserSession (shared headless Chromium)
    parsing    - Price, weight, length and keyword helpers
    thirtyfour - ThirtyFourAdapter for 34net.jp
    maria      - MariaAdapter for yamaria.co.jp/maria

To add a manufacturer, subclass SourceAdapter in a new module and add one
line to ADAPTER_REGISTRY.
"""

from urllib.parse import urlparse

from .base import RetryPolicy, ScrapeContext, SourceAdapter, fetch_html
from .browser import BrowserSession
from .maria import MariaAdapter
from .thirtyfour import ThirtyFourAdapter

# Manufacturer slug to adapter mapping
ADAPTER_REGISTRY = {
    'maria': MariaAdapter,
    'thirtyfour': ThirtyFourAdapter,
}


def get_adapter(manufacturer_slug: str) -> SourceAdapter:
    """
    Get an adapter instance for a manufacturer.

    Args:
        manufacturer_slug: Manufacturer identifier (e.g., "maria")

    Returns:
        Adapter instance

    Raises:
        ValueError: If the manufacturer is not supported
    """
    slug = (manufacturer_slug or '').lower().strip()

    if slug in ADAPTER_REGISTRY:
        return ADAPTER_REGISTRY[slug]()

    raise ValueError(
        f"Unsupported manufacturer: {manufacturer_slug}. "
        f"Supported: {', '.join(get_registered_manufacturers())}"
    )


def get_adapter_for_url(url: str) -> SourceAdapter:
    """
    Get the adapter whose site hosts url.

    Raises:
        ValueError: If no registered adapter covers the URL's host
    """
    host = urlparse(url).netloc.lower()
    for adapter_class in ADAPTER_REGISTRY.values():
        site_host = urlparse(adapter_class.site_url).netloc.lower()
        if host == site_host or host.endswith("." + site_host):
            return adapter_class()

    raise ValueError(f"No adapter for URL: {url}")


def get_registered_manufacturers() -> list:
    """Return the sorted list of manufacturer slugs with an adapter."""
    return sorted(ADAPTER_REGISTRY.keys())


__all__ = [
    'ADAPTER_REGISTRY',
    'BrowserSession',
    'MariaAdapter',
    'RetryPolicy',
    'ScrapeContext',
    'SourceAdapter',
    'ThirtyFourAdapter',
    'fetch_html',
    'get_adapter',
    'get_adapter_for_url',
    'get_registered_manufacturers',
]
