"""
Airtable API Client

Thin REST wrapper around one Airtable base: formula-filtered search,
record creation, record update and paginated listing.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ..common.rest_client import RestClient
from ..errors import TrackerError

logger = logging.getLogger(__name__)


def quote_formula_value(value: str) -> str:
    """Quote a string literal for an Airtable formula."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


class AirtableAPIClient(RestClient):
    """
    Airtable REST client scoped to a single base.

    Usage:
        client = AirtableAPIClient(base_id="appXXX", token="patXXX")
        record = client.find_first("tblMakers", "{Slug}='maria'")
    """

    PAGE_SIZE = 100

    def __init__(
        self,
        base_id: str,
        token: str,
        api_base: str = "https://api.airtable.com/v0",
        min_request_interval: float = 0.25,
        timeout: int = 30,
        session=None,
    ):
        super().__init__(
            base_url=f"{api_base.rstrip('/')}/{base_id}",
            headers={"Authorization": f"Bearer {token}"},
            error_class=TrackerError,
            min_request_interval=min_request_interval,
            timeout=timeout,
            session=session,
        )

    def find_first(self, table_id: str, formula: str) -> Optional[Dict[str, Any]]:
        """Return the first record matching formula, or None."""
        data = self.request(
            "GET", table_id,
            params={"filterByFormula": formula, "maxRecords": 1},
        ) or {}
        records = data.get("records") or []
        return records[0] if records else None

    def get_record(self, table_id: str, record_id: str) -> Dict[str, Any]:
        data = self.request("GET", f"{table_id}/{record_id}")
        if not data:
            raise TrackerError(f"Empty response for record {record_id}")
        return data

    def create_record(self, table_id: str, fields: Dict[str, Any]) -> str:
        """
        Create a record and return its id.

        Raises:
            TrackerError: If creation fails or no id is returned
        """
        data = self.request("POST", table_id, json={"fields": fields}) or {}
        record_id = data.get("id")
        if not record_id:
            raise TrackerError(f"Record creation in {table_id} returned no id")
        return record_id

    def update_record(self, table_id: str, record_id: str, fields: Dict[str, Any]) -> None:
        self.request("PATCH", f"{table_id}/{record_id}", json={"fields": fields})

    def iter_pages(self, table_id: str, formula: str) -> Iterator[List[Dict[str, Any]]]:
        """
        Yield pages of records matching formula, following the offset cursor.
        """
        offset = None
        while True:
            params = {"filterByFormula": formula, "pageSize": self.PAGE_SIZE}
            if offset:
                params["offset"] = offset
            data = self.request("GET", table_id, params=params) or {}
            yield data.get("records") or []

            offset = data.get("offset")
            if not offset:
                return
