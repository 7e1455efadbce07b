"""
Pipeline Orchestrator

Runs products through scrape -> expand -> (dedup -> image -> insert) per
variant, then records the outcome in the tracker.

Features:
- Sequential processing with a delay between products
- Failure isolation per variant and per product
- Dedup check before every insert, so re-runs are safe to resume
- Tracker failures counted separately from catalog errors
- Dry-run mode (reads only)
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

import requests

from ..adapters import get_adapter
from ..adapters.base import ScrapeContext, SourceAdapter
from ..errors import CatalogError, ImageError, PersistenceError, TrackerError
from ..models import ProductListing, ScrapedProduct, Variant
from ..storage.catalog_store import CatalogStore, build_lure_row
from ..tracker.sync import TrackerSync
from .images import ImagePipeline, image_key, main_image_key
from .variants import expand_variants

logger = logging.getLogger(__name__)

# Errors that fail one product without stopping the run
PRODUCT_ERRORS = (
    CatalogError, requests.RequestException,
    ValueError, KeyError, TypeError, AttributeError,
)


@dataclass
class ProductResult:
    """Outcome of one product in a run."""
    name: str
    url: str
    status: str                 # "ok", "skipped" or "error"
    message: str = ""
    rows_inserted: int = 0


@dataclass
class RunSummary:
    """Counters for one pipeline run."""
    discovered: int = 0
    scraped: int = 0
    skipped_no_colors: int = 0
    skipped_existing: int = 0
    inserted: int = 0
    images_uploaded: int = 0
    errors: int = 0
    tracker_errors: int = 0
    results: List[ProductResult] = field(default_factory=list)
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def elapsed(self) -> float:
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def finish(self) -> None:
        self.end_time = time.time()

    def get_stats(self) -> dict:
        return {
            'discovered': self.discovered,
            'scraped': self.scraped,
            'skipped_no_colors': self.skipped_no_colors,
            'skipped_existing': self.skipped_existing,
            'inserted': self.inserted,
            'images_uploaded': self.images_uploaded,
            'errors': self.errors,
            'tracker_errors': self.tracker_errors,
        }


def outcome_note(product: ScrapedProduct, rows_inserted: int) -> str:
    """
    Human-readable tracker note for a processed product.

    Example:
        '2色 x 3ウェイト = 6行挿入'
    """
    # A product without weights still yields one row per color
    weight_count = len(product.weights) or 1
    return f"{len(product.colors)}色 x {weight_count}ウェイト = {rows_inserted}行挿入"


class PipelineOrchestrator:
    """
    Sequential ingestion of products into the catalog.

    Usage:
        orchestrator = PipelineOrchestrator(catalog, images, context, tracker=tracker)
        summary = orchestrator.run(adapter)
        print_summary(summary)
    """

    def __init__(
        self,
        catalog: CatalogStore,
        images: ImagePipeline,
        context: ScrapeContext,
        tracker: Optional[TrackerSync] = None,
        delay: float = 0.5,
        dry_run: bool = False,
        adapter_lookup: Callable[[str], SourceAdapter] = get_adapter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            catalog: Relational store (dedup query and insert)
            images: Image pipeline for color and main images
            context: Run-scoped scrape resources
            tracker: Optional tracker; None disables tracking
            delay: Seconds to wait between products
            dry_run: Skip uploads, inserts and tracker writes
            adapter_lookup: Maps a manufacturer slug to an adapter (queue mode)
            sleep: Sleep function (tests pass a no-op)
        """
        self.catalog = catalog
        self.images = images
        self.context = context
        self.tracker = tracker
        self.delay = delay
        self.dry_run = dry_run
        self.adapter_lookup = adapter_lookup
        self._sleep = sleep

    # ── Run modes ───────────────────────────────────────────

    def run(
        self,
        adapter: SourceAdapter,
        listings: Optional[List[ProductListing]] = None,
        limit: int = 0,
    ) -> RunSummary:
        """
        Ingest every product of one manufacturer.

        Args:
            adapter: Source adapter for the manufacturer
            listings: Product pages to process (default: adapter.discover())
            limit: Maximum number of products (0 = no limit)

        Returns:
            RunSummary for the run
        """
        summary = RunSummary()

        if listings is None:
            try:
                listings = adapter.discover(self.context)
            except CatalogError as e:
                logger.error("Discovery failed for %s: %s", adapter.manufacturer_slug, e)
                summary.errors += 1
                summary.finish()
                return summary

        if limit > 0:
            listings = listings[:limit]
        summary.discovered = len(listings)
        logger.info("%s: %d products to process", adapter.manufacturer_slug, len(listings))

        maker_id = None
        if self._tracking:
            maker_id = self._tracker_call(
                summary, self.tracker.find_or_create_maker,
                adapter.manufacturer_slug, adapter.manufacturer, adapter.site_url,
            )

        for i, listing in enumerate(listings, 1):
            logger.info("[%d/%d] %s", i, len(listings), listing.url)
            product, result = self.process_product(adapter, listing.url, summary)

            if maker_id and product is not None and result.status == "ok":
                self._tracker_call(
                    summary, self.tracker.record_product,
                    product.name, product.source_url, maker_id, result.message,
                )

            if i < len(listings):
                self._sleep(self.delay)

        if maker_id:
            self._tracker_call(summary, self.tracker.finalize_maker, maker_id)

        summary.finish()
        return summary

    def run_pending(
        self,
        listings: Optional[List[ProductListing]] = None,
        limit: int = 0,
    ) -> RunSummary:
        """
        Process URL records waiting in the tracker queue.

        Each record's maker decides the adapter. Records move to
        "processing", then to "done" with the outcome note or "error"
        with the failure message.
        """
        if self.tracker is None:
            raise ValueError("Queue mode requires a tracker")

        summary = RunSummary()

        if listings is None:
            try:
                listings = self.tracker.fetch_pending()
            except TrackerError as e:
                logger.error("Could not fetch pending records: %s", e)
                summary.tracker_errors += 1
                summary.finish()
                return summary

        if limit > 0:
            listings = listings[:limit]
        summary.discovered = len(listings)
        completed_makers: List[str] = []

        for i, listing in enumerate(listings, 1):
            logger.info("[%d/%d] %s", i, len(listings), listing.url)

            adapter = self._adapter_for_listing(listing, summary)
            if adapter is not None:
                self._set_status(summary, listing, "processing")
                _, result = self.process_product(adapter, listing.url, summary)

                if result.status == "error":
                    self._set_status(summary, listing, "error", result.message)
                else:
                    self._set_status(summary, listing, "done", result.message)
                    if listing.maker_id not in completed_makers:
                        completed_makers.append(listing.maker_id)

            if i < len(listings):
                self._sleep(self.delay)

        if self._tracking:
            for maker_id in completed_makers:
                self._tracker_call(summary, self.tracker.finalize_maker, maker_id)

        summary.finish()
        return summary

    # ── Product and variant stages ──────────────────────────

    def process_product(self, adapter: SourceAdapter, url: str, summary: RunSummary):
        """
        Scrape one product and persist its variants.

        Returns:
            (product or None, ProductResult); the result is also appended
            to summary.results
        """
        try:
            product = self.context.retry.call(adapter.scrape, url, self.context)
        except PRODUCT_ERRORS as e:
            message = f"{type(e).__name__}: {e}"
            logger.error("Scrape failed for %s: %s", url, message)
            summary.errors += 1
            result = ProductResult(name="", url=url, status="error", message=message)
            summary.results.append(result)
            return None, result

        summary.scraped += 1

        variants = expand_variants(product)
        if not variants:
            logger.info("Skipped (no colors): %s", product.name)
            summary.skipped_no_colors += 1
            result = ProductResult(name=product.name, url=url, status="skipped",
                                   message="no colors")
            summary.results.append(result)
            return product, result

        image_cache: Dict[str, Optional[str]] = {}
        planned: Set[tuple] = set()
        rows_inserted = 0
        for variant in variants:
            try:
                if self.process_variant(product, variant, image_cache, summary, planned):
                    rows_inserted += 1
            except PRODUCT_ERRORS as e:
                logger.error("Variant %s / %s of %s failed: %s: %s", variant.color_name,
                             variant.weight, product.name, type(e).__name__, e)
                summary.errors += 1

        note = outcome_note(product, rows_inserted)
        logger.info("OK: %s (%s)", product.name, note)
        result = ProductResult(name=product.name, url=url, status="ok",
                               message=note, rows_inserted=rows_inserted)
        summary.results.append(result)
        return product, result

    def process_variant(
        self,
        product: ScrapedProduct,
        variant: Variant,
        image_cache: Dict[str, Optional[str]],
        summary: RunSummary,
        planned: Optional[Set[tuple]] = None,
    ) -> bool:
        """
        Dedup, upload the image and insert one variant.

        In dry run nothing is written, so keys already counted for this
        product (planned) stand in for the rows the store would hold.

        Returns:
            True if the row was inserted (or would be, in dry run)
        """
        try:
            if self.catalog.exists(*variant.key):
                logger.debug("Exists: %s / %s", variant.color_name, variant.weight)
                summary.skipped_existing += 1
                return False
        except PersistenceError as e:
            logger.error("Dedup query failed for %s: %s", variant.key, e)
            summary.errors += 1
            return False

        if self.dry_run and planned is not None:
            if variant.key in planned:
                logger.debug("Already planned: %s / %s", variant.color_name, variant.weight)
                summary.skipped_existing += 1
                return False
            planned.add(variant.key)

        image_url = None
        if variant.image_source:
            image_url = self._image_for(variant, image_cache, summary)

        row = build_lure_row(product, variant, image_url)

        if self.dry_run:
            logger.info("[DRY RUN] Would insert %s / %s", variant.color_name, variant.weight)
            summary.inserted += 1
            return True

        try:
            self.catalog.insert(row)
        except PersistenceError as e:
            logger.error("Insert failed for %s: %s", variant.key, e)
            summary.errors += 1
            return False

        summary.inserted += 1
        return True

    def _image_for(
        self,
        variant: Variant,
        image_cache: Dict[str, Optional[str]],
        summary: RunSummary,
    ) -> Optional[str]:
        if variant.uses_main_image:
            key = main_image_key(variant.manufacturer_slug, variant.slug)
        else:
            key = image_key(variant.manufacturer_slug, variant.slug, variant.color_index)

        if key in image_cache:
            return image_cache[key]

        url = None
        if not self.dry_run:
            try:
                url = self.images.process(variant.image_source, key)
                summary.images_uploaded += 1
            except ImageError as e:
                logger.warning("Image failed for %s: %s", variant.color_name, e)
                summary.errors += 1

        image_cache[key] = url
        return url

    # ── Tracker helpers ─────────────────────────────────────

    @property
    def _tracking(self) -> bool:
        return self.tracker is not None and not self.dry_run

    def _tracker_call(self, summary: RunSummary, func, *args):
        """Call a tracker method; failures are counted and logged, never raised."""
        try:
            return func(*args)
        except TrackerError as e:
            logger.warning("Tracker call %s failed: %s", func.__name__, e)
            summary.tracker_errors += 1
            return None

    def _set_status(self, summary: RunSummary, listing: ProductListing,
                    status: str, note: str = "") -> None:
        if self._tracking and listing.record_id:
            self._tracker_call(summary, self.tracker.update_url_status,
                               listing.record_id, status, note)

    def _adapter_for_listing(
        self,
        listing: ProductListing,
        summary: RunSummary,
    ) -> Optional[SourceAdapter]:
        """Resolve the adapter for a queued record; failures mark the record as error."""
        try:
            maker = self.tracker.get_maker(listing.maker_id)
        except TrackerError as e:
            message = f"Maker lookup failed: {e}"
            summary.tracker_errors += 1
        else:
            try:
                return self.adapter_lookup(maker["slug"])
            except ValueError as e:
                message = str(e)

        logger.error("%s: %s", listing.url, message)
        summary.errors += 1
        summary.results.append(ProductResult(name=listing.name, url=listing.url,
                                             status="error", message=message))
        self._set_status(summary, listing, "error", message)
        return None


def print_summary(summary: RunSummary, dry_run: bool = False) -> None:
    """Print the run summary to stdout."""
    title = "Pipeline Summary (DRY RUN)" if dry_run else "Pipeline Summary"

    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)
    print("\n  Products:")
    print(f"     Discovered:         {summary.discovered}")
    print(f"     Scraped:            {summary.scraped}")
    print(f"     Skipped (no color): {summary.skipped_no_colors}")
    print("\n  Variants:")
    print(f"     Inserted:           {summary.inserted}")
    print(f"     Skipped (existing): {summary.skipped_existing}")
    print(f"     Images uploaded:    {summary.images_uploaded}")
    print("\n  Errors:")
    print(f"     Pipeline errors:    {summary.errors}")
    print(f"     Tracker errors:     {summary.tracker_errors}")
    print(f"\n  Time elapsed:          {summary.elapsed:.1f} seconds")

    if summary.results:
        print("\n  Results:")
        labels = {"ok": "[OK]  ", "skipped": "[SKIP]", "error": "[FAIL]"}
        for result in summary.results:
            label = labels.get(result.status, "[?]   ")
            name = result.name or result.url
            print(f"     {label} {name[:50]}  {result.message[:80]}")
    print("=" * 60)
