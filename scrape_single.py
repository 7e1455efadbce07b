#!/usr/bin/env python3
"""
Single Product Scrape

Scrapes one product page and prints the normalized product and the
variants the pipeline would write. Nothing is uploaded or inserted and
no credentials are needed.

Usage:
    python3 scrape_single.py --url https://34net.jp/products/worm/medusa/
    python3 scrape_single.py --url https://www.yamaria.co.jp/maria/product/detail/134 --manufacturer maria
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from lure_catalog.adapters import ScrapeContext, get_adapter, get_adapter_for_url
from lure_catalog.common.config_loader import load_pipeline_config
from lure_catalog.common.log_config import setup_logging
from lure_catalog.errors import CatalogError
from lure_catalog.models import ScrapedProduct
from lure_catalog.pipeline import expand_variants

logger = logging.getLogger(__name__)


def print_report(product: ScrapedProduct):
    """Print the scraped product and its variant expansion."""
    variants = expand_variants(product)

    print("\n" + "=" * 80)
    print("SCRAPE REPORT")
    print("=" * 80)

    print("\nCORE FIELDS:")
    fields = [
        ("Name", product.name),
        ("Name (kana)", product.name_kana),
        ("Slug", product.slug),
        ("Manufacturer", f"{product.manufacturer} ({product.manufacturer_slug})"),
        ("Type", product.type),
        ("Target fish", ", ".join(product.target_fish)),
        ("Price", f"¥{product.price:,}" if product.price else ""),
        ("Length", f"{product.length}mm" if product.length else ""),
        ("Weights", ", ".join(f"{w}g" for w in product.weights)),
        ("Main image", product.main_image),
    ]
    for label, value in fields:
        status = "OK" if value else "MISSING"
        print(f"  [{status:7}] {label:15} {value or '-'}")

    print(f"\nDESCRIPTION ({len(product.description)} characters)")

    print(f"\nCOLORS ({len(product.colors)}):")
    for idx, color in enumerate(product.colors, 1):
        image = color.image_url.split('/')[-1] if color.image_url else "(no image)"
        print(f"  {idx:2}. {color.name:30} {image}")

    print(f"\nVARIANTS ({len(variants)}):")
    for variant in variants:
        weight = f"{variant.weight}g" if variant.weight is not None else "-"
        source = "main" if variant.uses_main_image else ("color" if variant.image_source else "none")
        print(f"  {variant.color_name:30} {weight:>8}  image={source}")

    print("\n" + "=" * 80)


def main():
    parser = argparse.ArgumentParser(
        description="Scrape a single product page and show its variants"
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Product URL"
    )
    parser.add_argument(
        "--manufacturer", "-m",
        help="Manufacturer slug (default: detected from URL)"
    )
    parser.add_argument(
        "--output-json",
        help="Also write the scraped product as JSON to this path"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    try:
        adapter = get_adapter(args.manufacturer) if args.manufacturer else get_adapter_for_url(args.url)
        config = load_pipeline_config()
    except (ValueError, CatalogError) as e:
        print(f"\nError: {e}")
        sys.exit(1)

    print(f"Scraping with: {type(adapter).__name__}")
    print(f"URL: {args.url}")

    try:
        with ScrapeContext.from_config(config) as context:
            product = context.retry.call(adapter.scrape, args.url, context)
    except CatalogError as e:
        print(f"\nScrape failed: {type(e).__name__}: {e}")
        sys.exit(1)

    print_report(product)

    if args.output_json:
        with open(args.output_json, 'w', encoding='utf-8') as f:
            json.dump(asdict(product), f, indent=2, ensure_ascii=False)
        print(f"\nProduct saved to: {args.output_json}")


if __name__ == "__main__":
    main()
