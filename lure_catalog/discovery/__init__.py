"""
URL Discovery for manufacturer sites.

Modules:
    listing_discoverer - ListingDiscoverer (links from listing pages), URL file I/O
"""

from .listing_discoverer import ListingDiscoverer, load_url_file, save_url_file

__all__ = ['ListingDiscoverer', 'load_url_file', 'save_url_file']
