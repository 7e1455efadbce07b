"""
Catalog Store

PostgREST client for the relational lure catalog. Provides the dedup
point query and single-row inserts; each row is written independently.
"""

import logging
from typing import Any, Dict, Optional

from ..common.rest_client import RestClient
from ..errors import PersistenceError
from ..models import ScrapedProduct, Variant

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """
    Format a numeric filter value the way the store compares it.

    Example:
        >>> format_number(10.0)
        '10'
        >>> format_number(3.5)
        '3.5'
    """
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def build_lure_row(
    product: ScrapedProduct,
    variant: Variant,
    image_url: Optional[str],
) -> Dict[str, Any]:
    """
    Build the denormalized catalog row for one variant.

    Args:
        product: Source product
        variant: Color/weight combination being written
        image_url: Public URL of the processed image, or None

    Returns:
        Row dictionary ready to insert
    """
    return {
        "name": product.name,
        "name_kana": product.name_kana or product.name,
        "slug": variant.slug,
        "manufacturer": product.manufacturer,
        "manufacturer_slug": variant.manufacturer_slug,
        "type": product.type,
        "price": product.price,
        "description": product.description or None,
        "images": [image_url] if image_url else None,
        "color_name": variant.color_name,
        "weight": variant.weight,
        "length": product.length,
        "target_fish": list(product.target_fish) or None,
        "source_url": product.source_url,
        "is_limited": product.is_limited,
        "is_discontinued": product.is_discontinued,
    }


class CatalogStore(RestClient):
    """
    Supabase REST client for the lures table.

    Usage:
        store = CatalogStore(settings.supabase_url, settings.supabase_service_role_key)
        if not store.exists("maria", "1234", "Red", 10.0):
            store.insert(row)
    """

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        table: str = "lures",
        timeout: int = 30,
        session=None,
    ):
        super().__init__(
            base_url=f"{supabase_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
            error_class=PersistenceError,
            timeout=timeout,
            session=session,
        )
        self.table = table

    def exists(
        self,
        manufacturer_slug: str,
        slug: str,
        color_name: str,
        weight: Optional[float],
    ) -> bool:
        """
        Check whether a row with this natural key is already stored.

        A null weight is matched with "is.null", never "eq".

        Raises:
            PersistenceError: If the query fails
        """
        params = {
            "manufacturer_slug": f"eq.{manufacturer_slug}",
            "slug": f"eq.{slug}",
            "color_name": f"eq.{color_name}",
            "weight": "is.null" if weight is None else f"eq.{format_number(weight)}",
            "select": "id",
            "limit": "1",
        }
        rows = self.request("GET", self.table, params=params)
        return bool(rows)

    def insert(self, row: Dict[str, Any]) -> None:
        """
        Insert a single row.

        Raises:
            PersistenceError: If the store rejects the row
        """
        self.request(
            "POST", self.table, json=row,
            headers={"Prefer": "return=minimal"},
        )
        logger.debug("Inserted %s/%s %s %s", row.get("manufacturer_slug"),
                     row.get("slug"), row.get("color_name"), row.get("weight"))
