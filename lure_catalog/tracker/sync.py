"""
Tracker Sync

Records ingestion progress in the tracker: one maker record per
manufacturer (found or created by slug) and one URL record per processed
product. Also serves the queue of pending URL records.

Tracker entries are an audit log; they are never used for idempotency.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from ..common.config_loader import load_tracker_config
from ..common.text_utils import truncate
from ..errors import TrackerError
from ..models import ProductListing
from .api_client import AirtableAPIClient, quote_formula_value

logger = logging.getLogger(__name__)

NOTE_MAX_LENGTH = 500


class TrackerSync:
    """
    Maker and URL-record bookkeeping on top of AirtableAPIClient.

    Field names and status labels come from config/tracker.yaml:
        maker.fields / maker.statuses
        url_record.fields / url_record.statuses
    """

    def __init__(
        self,
        client: AirtableAPIClient,
        maker_table_id: str,
        url_table_id: str,
        config: Dict[str, Any],
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.maker_table_id = maker_table_id
        self.url_table_id = url_table_id

        self.maker_fields = config["maker"]["fields"]
        self.maker_statuses = config["maker"]["statuses"]
        self.url_fields = config["url_record"]["fields"]
        self.url_statuses = config["url_record"]["statuses"]
        self.page_delay = float(config.get("page_delay", 0.2))
        self._sleep = sleep

        self._maker_cache: Dict[str, Dict[str, str]] = {}

    @classmethod
    def from_settings(cls, settings, config: Optional[Dict[str, Any]] = None) -> "TrackerSync":
        config = config or load_tracker_config()
        client = AirtableAPIClient(
            base_id=settings.airtable_base_id,
            token=settings.airtable_pat,
            api_base=settings.airtable_api_base,
            min_request_interval=float(config.get("min_request_interval", 0.25)),
        )
        return cls(
            client,
            maker_table_id=settings.airtable_maker_table_id,
            url_table_id=settings.airtable_url_table_id,
            config=config,
        )

    def close(self):
        self.client.close()

    # ── Makers ──────────────────────────────────────────────

    def find_or_create_maker(self, slug: str, name: str = "", site_url: str = "") -> str:
        """
        Return the maker record id for slug, creating it if absent.

        New makers start in the "registering" status.

        Raises:
            TrackerError: If the tracker cannot be reached
        """
        formula = f"{{{self.maker_fields['slug']}}}={quote_formula_value(slug)}"
        record = self.client.find_first(self.maker_table_id, formula)
        if record:
            logger.debug("Found maker %s: %s", slug, record["id"])
            return record["id"]

        fields = {
            self.maker_fields["name"]: name or slug,
            self.maker_fields["slug"]: slug,
            self.maker_fields["status"]: self.maker_statuses["registering"],
        }
        if site_url:
            fields[self.maker_fields["site_url"]] = site_url

        maker_id = self.client.create_record(self.maker_table_id, fields)
        logger.info("Created maker record for %s: %s", slug, maker_id)
        return maker_id

    def finalize_maker(self, maker_id: str) -> None:
        self.client.update_record(self.maker_table_id, maker_id, {
            self.maker_fields["status"]: self.maker_statuses["registered"],
        })
        logger.info("Maker %s marked as %s", maker_id, self.maker_statuses["registered"])

    def get_maker(self, maker_id: str) -> Dict[str, str]:
        """
        Return {'id', 'name', 'slug'} for a maker record (cached per run).
        """
        if maker_id in self._maker_cache:
            return self._maker_cache[maker_id]

        record = self.client.get_record(self.maker_table_id, maker_id)
        fields = record.get("fields") or {}
        maker = {
            "id": maker_id,
            "name": fields.get(self.maker_fields["name"], ""),
            "slug": fields.get(self.maker_fields["slug"], ""),
        }
        self._maker_cache[maker_id] = maker
        return maker

    # ── URL records ─────────────────────────────────────────

    def record_product(
        self,
        name: str,
        url: str,
        maker_id: str,
        note: str,
        status: str = "done",
    ) -> str:
        """
        Append a URL record for a processed product.

        Re-running appends another record.
        """
        fields = {
            self.url_fields["name"]: name,
            self.url_fields["url"]: url,
            self.url_fields["maker"]: [maker_id],
            self.url_fields["status"]: self._url_status(status),
            self.url_fields["note"]: truncate(note, NOTE_MAX_LENGTH),
        }
        return self.client.create_record(self.url_table_id, fields)

    def update_url_status(self, record_id: str, status: str, note: str = "") -> None:
        """
        Set the status (and optionally the note) of a URL record.

        Args:
            record_id: Tracker record id
            status: Logical status ('pending', 'processing', 'done', 'error')
            note: Outcome note or error message (truncated to 500 chars)
        """
        fields = {self.url_fields["status"]: self._url_status(status)}
        if note:
            fields[self.url_fields["note"]] = truncate(note, NOTE_MAX_LENGTH)
        self.client.update_record(self.url_table_id, record_id, fields)

    def fetch_pending(self) -> List[ProductListing]:
        """
        List every URL record still in the pending status.

        Returns:
            ProductListing per record, carrying record and maker ids
        """
        formula = (
            f"{{{self.url_fields['status']}}}="
            f"{quote_formula_value(self.url_statuses['pending'])}"
        )
        listings: List[ProductListing] = []

        for page_number, records in enumerate(self.client.iter_pages(self.url_table_id, formula)):
            if page_number:
                self._sleep(self.page_delay)
            for record in records:
                fields = record.get("fields") or {}
                url = fields.get(self.url_fields["url"], "")
                if not url:
                    logger.warning("Pending record %s has no URL, skipping", record.get("id"))
                    continue
                makers = fields.get(self.url_fields["maker"]) or []
                listings.append(ProductListing(
                    url=url,
                    name=fields.get(self.url_fields["name"], ""),
                    record_id=record.get("id", ""),
                    maker_id=makers[0] if makers else "",
                ))

        logger.info("Found %d pending URL records", len(listings))
        return listings

    def _url_status(self, status: str) -> str:
        if status not in self.url_statuses:
            raise TrackerError(f"Unknown URL record status: {status}")
        return self.url_statuses[status]
