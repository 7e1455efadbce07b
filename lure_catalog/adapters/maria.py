"""
Maria adapter (yamaria.co.jp/maria)

Product pages are rendered in the browser. Prices are not published for
lures (price = 0) and colors carry no images, so every variant falls
back to the main product image.
"""

import logging
import re
from typing import Dict, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ..common.text_utils import clean_text
from ..discovery.listing_discoverer import ListingDiscoverer
from ..errors import ParseError
from ..models import ProductListing, ScrapedColor, ScrapedProduct
from .base import ScrapeContext, SourceAdapter
from .parsing import classify_by_keywords, parse_length_mm, parse_weights

logger = logging.getLogger(__name__)

_DETAIL_ID = re.compile(r'/detail/(\d+)')

# Checked against the product name first, then the start of the description
TYPE_KEYWORDS = [
    (re.compile(r'ポッパー|POPPER', re.IGNORECASE), 'ポッパー'),
    (re.compile(r'ダイビングペンシル|ダイペン'), 'ダイビングペンシル'),
    (re.compile(r'シンキングペンシル|シンペン'), 'シンキングペンシル'),
    (re.compile(r'ペンシルベイト'), 'ペンシルベイト'),
    (re.compile(r'ミノー|MINNOW', re.IGNORECASE), 'ミノー'),
    (re.compile(r'バイブレーション|VIBRATION', re.IGNORECASE), 'バイブレーション'),
    (re.compile(r'メタルジグ|ジグ|JIG', re.IGNORECASE), 'メタルジグ'),
    (re.compile(r'シャッド|SHAD', re.IGNORECASE), 'シャッド'),
    (re.compile(r'クランク|CRANK', re.IGNORECASE), 'クランクベイト'),
    (re.compile(r'トップウォーター|TOPWATER', re.IGNORECASE), 'トップウォーター'),
]

# Maria is saltwater only; first match wins
SPECIES_KEYWORDS = [
    (re.compile(r'メバル|メバリング'), 'メバル'),
    (re.compile(r'アジ|アジング'), 'アジ'),
    (re.compile(r'タチウオ|太刀魚'), 'タチウオ'),
    (re.compile(r'ヒラメ|フラット'), 'ヒラメ'),
    (re.compile(r'マゴチ'), 'マゴチ'),
    (re.compile(r'イカ|エギ|squid', re.IGNORECASE), 'イカ'),
    (re.compile(r'チヌ|クロダイ|黒鯛'), 'クロダイ'),
    (re.compile(r'青物|ヒラマサ|ブリ|カンパチ|gt|ショアジギ|キャスティング|オフショア|ジギング|磯',
                re.IGNORECASE), '青物'),
]
DEFAULT_SPECIES = 'シーバス'
DEFAULT_TYPE = 'プラグ'


def detect_type(name: str, description: str, spec_type: str) -> str:
    """Classify the lure type from its name, spec-table type and description."""
    label = classify_by_keywords(name, TYPE_KEYWORDS)
    if label:
        return label

    if spec_type:
        has_pencil_hint = 'ペンシル' in name or 'ペンシル' in description[:200]
        if has_pencil_hint and 'シンキング' in spec_type:
            return 'シンキングペンシル'
        if 'フローティング' in spec_type:
            return 'フローティングミノー'
        if 'シンキング' in spec_type:
            return 'シンキングミノー'
        return spec_type

    return classify_by_keywords(description[:150], TYPE_KEYWORDS, DEFAULT_TYPE)


def detect_target_fish(name: str, description: str) -> List[str]:
    text = f"{name} {description}"
    return [classify_by_keywords(text, SPECIES_KEYWORDS, DEFAULT_SPECIES)]


class MariaAdapter(SourceAdapter):
    """Adapter for Maria plug pages on yamaria.co.jp."""

    manufacturer = "Maria"
    manufacturer_slug = "maria"
    site_url = "https://www.yamaria.co.jp/maria/"

    LISTING_PAGES = [
        "https://www.yamaria.co.jp/maria/product/gm/plug",
        "https://www.yamaria.co.jp/maria/product/gm/plug?absolutepage=2",
        "https://www.yamaria.co.jp/maria/product/gm/plug?absolutepage=3",
    ]
    PRODUCT_LINK = r'/maria/product/detail/\d+'
    WAIT_SELECTOR = "h2.item-ttl"

    def scrape(self, url: str, context: ScrapeContext) -> ScrapedProduct:
        html = context.render_html(url, wait_selector=self.WAIT_SELECTOR)
        return self.parse(html, url)

    def discover(self, context: ScrapeContext) -> List[ProductListing]:
        discoverer = ListingDiscoverer(context.render_html, self.PRODUCT_LINK)
        return discoverer.discover(self.LISTING_PAGES)

    def parse(self, html: str, url: str) -> ScrapedProduct:
        """
        Build a ScrapedProduct from rendered page HTML.

        Raises:
            ParseError: If the URL has no product id or the page no name
        """
        match = _DETAIL_ID.search(url)
        if not match:
            raise ParseError(f"No product id in URL: {url}")

        soup = BeautifulSoup(html, "lxml")

        h2 = soup.select_one("h2.item-ttl")
        name = clean_text(h2.get_text()) if h2 else ""
        if not name:
            raise ParseError(f"No product name found on {url}")

        description = self._extract_description(soup)
        spec = self._extract_spec_table(soup)
        lengths = spec["lengths"]

        return ScrapedProduct(
            name=name,
            slug=match.group(1),
            manufacturer=self.manufacturer,
            manufacturer_slug=self.manufacturer_slug,
            source_url=url,
            type=detect_type(name, description, spec["type"]),
            target_fish=detect_target_fish(name, description),
            description=description,
            price=0,
            colors=[ScrapedColor(name=color) for color in spec["colors"]],
            weights=spec["weights"],
            length=lengths[0] if lengths else None,
            main_image=self._extract_main_image(soup, url),
        )

    def _extract_main_image(self, soup: BeautifulSoup, url: str) -> str:
        for img in soup.select(".cont-area img[src]"):
            src = img["src"]
            if "_main" in src or "/cms/product/" in src:
                return urljoin(url, src)
        return ""

    def _extract_description(self, soup: BeautifulSoup) -> str:
        blocks = [clean_text(box.get_text(" "))
                  for box in soup.select(".item-body-area .item-cont-box")]
        description = "\n\n".join(text for text in blocks if text)
        if description:
            return description

        fallback = soup.select_one(".cont-area .item-body-area, .cont-area p")
        return clean_text(fallback.get_text(" ")) if fallback else ""

    def _extract_spec_table(self, soup: BeautifulSoup) -> Dict:
        """
        Read table.bk-th-tbl, locating columns by header text.

        Returns:
            {'lengths': [...], 'weights': [...], 'type': str, 'colors': [...]}
        """
        spec = {"lengths": [], "weights": [], "type": "", "colors": []}
        table = soup.select_one(".spec-tbl-area table.bk-th-tbl")
        if not table:
            return spec

        headers = [clean_text(th.get_text()) for th in table.find_all("th")]
        columns = {label: self._column(headers, label)
                   for label in ("全長", "重量", "タイプ", "カラー")}

        rows = table.select("tbody tr") or table.find_all("tr")
        for row in rows:
            cells = [clean_text(td.get_text(" ")) for td in row.find_all("td")]
            if not cells:
                continue

            length_text = self._cell(cells, columns["全長"])
            length = parse_length_mm(length_text) if "mm" in length_text else None
            if length is not None and length not in spec["lengths"]:
                spec["lengths"].append(length)

            for weight in parse_weights(self._cell(cells, columns["重量"]))[:1]:
                if weight not in spec["weights"]:
                    spec["weights"].append(weight)

            type_text = self._cell(cells, columns["タイプ"])
            if type_text and not spec["type"]:
                spec["type"] = type_text

            color = self._cell(cells, columns["カラー"])
            if color and color not in spec["colors"]:
                spec["colors"].append(color)

        return spec

    @staticmethod
    def _column(headers: List[str], label: str) -> Optional[int]:
        return headers.index(label) if label in headers else None

    @staticmethod
    def _cell(cells: List[str], index: Optional[int]) -> str:
        if index is None or index >= len(cells):
            return ""
        return cells[index]
