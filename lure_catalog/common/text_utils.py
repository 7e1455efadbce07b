"""
Text Utilities

Helper functions for slugs and text cleanup.
"""

import re
from urllib.parse import quote, urlparse

_ASCII_NAME = re.compile(r'^[a-zA-Z0-9\s\-_.]+$')


def slugify(name: str) -> str:
    """
    Generate a URL-friendly slug from a product name.

    ASCII names are lowercased and hyphenated; names containing other
    characters (kana, kanji) are percent-encoded so they stay stable.

    Example:
        >>> slugify("Sea Ride 30g")
        'sea-ride-30g'
        >>> slugify("乱牙65")
        '%E4%B9%B1%E7%89%9965'
    """
    if _ASCII_NAME.match(name):
        slug = name.lower().strip()
        slug = re.sub(r'[\s_.]+', '-', slug)
        slug = re.sub(r'-+', '-', slug)
        return slug.strip('-')
    return quote(name, safe='')


def slug_from_url(url: str) -> str:
    """
    Derive a slug from the last path segment of a product URL.

    Example:
        >>> slug_from_url("https://34net.jp/products/worm/medusa/")
        'medusa'
    """
    path = urlparse(url).path.rstrip('/')
    last = path.split('/')[-1] if path else ''
    last = re.sub(r'\.html?$', '', last, flags=re.IGNORECASE)
    slug = re.sub(r'[^a-z0-9\-]', '-', last.lower())
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def clean_text(text: str) -> str:
    """Collapse whitespace (including full-width spaces) to single spaces."""
    if not text:
        return ""
    return re.sub(r'[\s　]+', ' ', text).strip()


def truncate(text: str, max_length: int) -> str:
    """Truncate text to at most max_length characters."""
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length]
