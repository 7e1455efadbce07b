"""
Data models for product ingestion.

This module contains pure data classes with no business logic.
"""

from .product import (
    DESCRIPTION_MAX_LENGTH,
    ProductListing,
    ScrapedColor,
    ScrapedModel,
    ScrapedProduct,
    Variant,
)

__all__ = [
    'DESCRIPTION_MAX_LENGTH',
    'ProductListing',
    'ScrapedColor',
    'ScrapedModel',
    'ScrapedProduct',
    'Variant',
]
