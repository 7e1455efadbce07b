#!/usr/bin/env python3
"""
Lure Catalog Pipeline

Scrapes manufacturer product pages and writes one catalog row per
color/weight variant, with processed images and tracker bookkeeping.
Re-running is safe: variants already in the catalog are skipped.

Usage:
    python3 scripts/run_pipeline.py --manufacturer maria
    python3 scripts/run_pipeline.py --manufacturer thirtyfour --urls urls.txt --limit 10
    python3 scripts/run_pipeline.py --pending
    python3 scripts/run_pipeline.py --manufacturer maria --dry-run --no-tracker
"""

import argparse
import logging
import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from lure_catalog.adapters import ScrapeContext, get_adapter, get_registered_manufacturers
from lure_catalog.common.config_loader import (
    get_section,
    load_pipeline_config,
    load_tracker_config,
)
from lure_catalog.common.log_config import setup_logging
from lure_catalog.common.settings import load_settings
from lure_catalog.discovery import load_url_file
from lure_catalog.errors import ConfigError
from lure_catalog.pipeline import (
    DeployHook,
    ImagePipeline,
    PipelineOrchestrator,
    print_summary,
)
from lure_catalog.storage import BlobStore, CatalogStore
from lure_catalog.tracker import TrackerSync

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Ingest lure products into the catalog"
    )
    parser.add_argument(
        "--manufacturer", "-m",
        help=f"Manufacturer slug ({', '.join(get_registered_manufacturers())})"
    )
    parser.add_argument(
        "--urls", "-u",
        help="File with product URLs for --manufacturer (one per line)"
    )
    parser.add_argument(
        "--pending",
        action="store_true",
        help="Process URL records waiting in the tracker queue"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of products (0 = no limit)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=None,
        help="Delay between products in seconds (default: from config/pipeline.yaml)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Scrape and check for duplicates only; no uploads, inserts or tracker writes"
    )
    parser.add_argument(
        "--no-tracker",
        action="store_true",
        help="Do not record progress in the tracker"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    return parser.parse_args(argv)


def validate_args(args) -> str:
    """Return an error message for an invalid flag combination, or ''."""
    if args.pending and args.manufacturer:
        return "Use either --manufacturer or --pending, not both"
    if not args.pending and not args.manufacturer:
        return "One of --manufacturer or --pending is required"
    if args.urls and not args.manufacturer:
        return "--urls requires --manufacturer"
    if args.pending and args.no_tracker:
        return "--pending needs the tracker; drop --no-tracker"
    if args.urls and not os.path.exists(args.urls):
        return f"URL file not found: {args.urls}"
    return ""


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    error = validate_args(args)
    if error:
        logger.error(error)
        return 1

    adapter = None
    if args.manufacturer:
        try:
            adapter = get_adapter(args.manufacturer)
        except ValueError as e:
            logger.error("%s", e)
            return 1

    try:
        config = load_pipeline_config()
        tracker_config = None if args.no_tracker else load_tracker_config()
        settings = load_settings()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    http = get_section(config, "http")
    image = get_section(config, "image")
    delay = args.delay if args.delay is not None else float(
        get_section(config, "scrape").get("product_delay", 0.5))

    print("=" * 60)
    print("Lure Catalog Pipeline")
    print("=" * 60)
    print(f"  Mode:             {'pending queue' if args.pending else args.manufacturer}")
    if args.urls:
        print(f"  Input file:       {args.urls}")
    print(f"  Limit:            {args.limit or 'none'}")
    print(f"  Product delay:    {delay}s")
    print(f"  Tracker:          {'off' if args.no_tracker else 'on'}")
    print(f"  Dry run:          {args.dry_run}")

    catalog = CatalogStore(
        settings.supabase_url,
        settings.supabase_service_role_key,
        table=get_section(config, "catalog").get("table", "lures"),
        timeout=int(http.get("timeout", 30)),
    )
    tracker = None if args.no_tracker else TrackerSync.from_settings(settings, tracker_config)
    images = ImagePipeline(
        BlobStore.from_settings(settings),
        width=int(image.get("width", 500)),
        quality=int(image.get("quality", 80)),
        user_agent=http.get("user_agent", ""),
        referers=image.get("referers") or {},
        timeout=int(http.get("timeout", 30)),
    )

    try:
        with ScrapeContext.from_config(config) as context:
            orchestrator = PipelineOrchestrator(
                catalog, images, context,
                tracker=tracker,
                delay=delay,
                dry_run=args.dry_run,
            )
            if args.pending:
                summary = orchestrator.run_pending(limit=args.limit)
            else:
                listings = load_url_file(args.urls) if args.urls else None
                summary = orchestrator.run(adapter, listings=listings, limit=args.limit)
    finally:
        catalog.close()
        images.close()
        if tracker is not None:
            tracker.close()

    print_summary(summary, dry_run=args.dry_run)

    if summary.inserted > 0 and not args.dry_run:
        DeployHook(settings.deploy_hook_url).trigger()

    return 0


if __name__ == "__main__":
    sys.exit(main())
