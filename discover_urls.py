#!/usr/bin/env python3
"""
URL Discovery Script

Lists a manufacturer's product URLs from its listing pages and writes them
to a file that scripts/run_pipeline.py --urls accepts.

Usage:
    python3 discover_urls.py --manufacturer thirtyfour --output data/thirtyfour/urls.txt
    python3 discover_urls.py --manufacturer maria --limit 20
"""

import argparse
import os
import sys

from lure_catalog.adapters import ScrapeContext, get_adapter, get_registered_manufacturers
from lure_catalog.common.config_loader import load_pipeline_config
from lure_catalog.common.log_config import setup_logging
from lure_catalog.discovery import save_url_file
from lure_catalog.errors import CatalogError


def main():
    supported = get_registered_manufacturers()

    parser = argparse.ArgumentParser(
        description=f"Discover product URLs (supports: {', '.join(supported)})"
    )
    parser.add_argument(
        "--manufacturer", "-m",
        required=True,
        choices=supported,
        help=f"Manufacturer to crawl ({', '.join(supported)})"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file for product URLs (default: data/{manufacturer}/urls.txt)"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of URLs to keep (0 = no limit)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    output_path = args.output or f"data/{args.manufacturer}/urls.txt"
    if os.path.dirname(output_path):
        os.makedirs(os.path.dirname(output_path), exist_ok=True)

    print("=" * 60)
    print(f"{args.manufacturer} URL Discovery")
    print("=" * 60)
    print(f"  Output: {output_path}")
    print(f"  Limit:  {args.limit if args.limit else 'none'}")

    adapter = get_adapter(args.manufacturer)

    try:
        config = load_pipeline_config()
        with ScrapeContext.from_config(config) as context:
            listings = adapter.discover(context)
    except (CatalogError, NotImplementedError) as e:
        print(f"\nDiscovery failed: {e}")
        sys.exit(1)

    if args.limit:
        listings = listings[:args.limit]
    save_url_file(listings, output_path)

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(f"  Manufacturer:     {adapter.manufacturer} ({adapter.manufacturer_slug})")
    print(f"  Products found:   {len(listings)}")
    print(f"  Output file:      {output_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
