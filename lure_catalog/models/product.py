"""
Product data models.

Pure data classes shared by every source adapter and by the pipeline
stages downstream of them. No business logic beyond field validation.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

DESCRIPTION_MAX_LENGTH = 500


@dataclass
class ScrapedColor:
    """One color variant as shown on the product page."""
    name: str
    image_url: str = ""
    # Model codes this color is sold in (e.g. ["70SLM", "85SLM"]); empty = all models
    models: List[str] = field(default_factory=list)


@dataclass
class ScrapedModel:
    """A size/weight model of a product (e.g. "AOG70SLM", 9.5g, 70mm)."""
    name: str
    weight: Optional[float] = None
    length: Optional[float] = None


@dataclass
class ProductListing:
    """A discovered product URL, optionally tied to a tracker record."""
    url: str
    name: str = ""
    record_id: str = ""       # tracker URL-record id (queue mode only)
    maker_id: str = ""        # tracker maker-record id (queue mode only)


@dataclass
class ScrapedProduct:
    """
    Normalized adapter output for one product page.

    Field Groups:
    - Identity: name, slug and manufacturer identifiers
    - Classification: free-text type and target species tags
    - Commercial: tax-included price in yen (0 when unknown)
    - Variants: ordered colors, weights in grams, optional models
    - Media: main image used when a color has no swatch
    - Provenance: source URL and catalog flags
    """

    # Identity (required)
    name: str
    slug: str
    manufacturer: str
    manufacturer_slug: str
    source_url: str
    name_kana: str = ""

    # Classification
    type: str = ""
    target_fish: List[str] = field(default_factory=list)
    description: str = ""

    # Commercial
    price: int = 0

    # Variants
    colors: List[ScrapedColor] = field(default_factory=list)
    weights: List[float] = field(default_factory=list)
    length: Optional[float] = None
    models: List[ScrapedModel] = field(default_factory=list)

    # Media
    main_image: str = ""

    # Provenance flags
    is_limited: bool = False
    is_discontinued: bool = False

    def __post_init__(self):
        """Validate required fields and normalize collections."""
        if not self.name:
            raise ValueError("Product name is required")
        if not self.slug:
            raise ValueError("Product slug is required")
        if not self.manufacturer_slug:
            raise ValueError("Manufacturer slug is required")

        # Weights behave as a set, but order is kept so re-runs are reproducible
        unique: List[float] = []
        for weight in self.weights:
            if weight not in unique:
                unique.append(weight)
        self.weights = unique

        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            self.description = self.description[:DESCRIPTION_MAX_LENGTH]


@dataclass(frozen=True)
class Variant:
    """
    One catalog row to persist: a (color, weight) combination of a product.

    The natural key (manufacturer_slug, slug, color_name, weight) is unique
    in the relational store.
    """
    manufacturer_slug: str
    slug: str
    color_name: str
    weight: Optional[float]
    color_index: int = 0          # 0-based position of the color on the product
    image_source: str = ""        # resolved source image URL ("" = no image)
    uses_main_image: bool = False

    @property
    def key(self) -> Tuple[str, str, str, Optional[float]]:
        return (self.manufacturer_slug, self.slug, self.color_name, self.weight)
