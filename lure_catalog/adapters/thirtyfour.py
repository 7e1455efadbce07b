"""
34 / THIRTY FOUR adapter (34net.jp)

Static WordPress pages, fetched without a browser.

Page structure:
- Name: <title>, minus the " - アジング…" / " - THIRTY…" site suffix;
  h3.modProductsContent-Title holds the English or kana counterpart
- Spec: table.product_tbl th/td pairs (全長 in inches, 販売価格 tax-included)
- Colors: li.cosGrid_Inner4 (name in the first non-JAN <strong>,
  image in a[href] or img[src])
- Main image: first wp-content/uploads image on the page
"""

import logging
import re
from typing import Dict, List

from bs4 import BeautifulSoup

from ..common.text_utils import clean_text, slug_from_url
from ..discovery.listing_discoverer import ListingDiscoverer
from ..errors import ParseError
from ..models import ProductListing, ScrapedColor, ScrapedProduct
from .base import ScrapeContext, SourceAdapter
from .parsing import parse_length_mm, parse_weights, parse_yen_price

logger = logging.getLogger(__name__)

_TITLE_SUFFIX = re.compile(r'\s*[-–—]\s*(?:アジング|THIRTY).*$', re.IGNORECASE)
_H3_SIZE_SUFFIX = re.compile(r'\s*\d+\.?\d*\s*in\.?$', re.IGNORECASE)
_KATAKANA = re.compile(r'[゠-ヿ]')
_LATIN_START = re.compile(r'^[A-Za-z]')
_IMAGE_EXT = re.compile(r'\.(?:jpe?g|png|webp)', re.IGNORECASE)
_UPLOADS_IMAGE = re.compile(r'^https://34net\.jp/wp-content/uploads/.*\.(?:jpe?g|png|webp)', re.IGNORECASE)
_JAN_CODE = re.compile(r'JAN|^\d{10,}')


class ThirtyFourAdapter(SourceAdapter):
    """Adapter for 34net.jp worm product pages."""

    manufacturer = "34"
    manufacturer_slug = "thirtyfour"
    site_url = "https://34net.jp/"

    LISTING_PAGES = ["https://34net.jp/products/worm/"]
    PRODUCT_LINK = r'^https://34net\.jp/products/worm/[^/]+/?$'

    PRODUCT_TYPE = "ワーム"
    TARGET_FISH = ["アジ", "メバル"]

    def scrape(self, url: str, context: ScrapeContext) -> ScrapedProduct:
        html = context.get_html(url)
        return self.parse(html, url)

    def discover(self, context: ScrapeContext) -> List[ProductListing]:
        discoverer = ListingDiscoverer(context.get_html, self.PRODUCT_LINK)
        return discoverer.discover(self.LISTING_PAGES)

    def parse(self, html: str, url: str) -> ScrapedProduct:
        """
        Build a ScrapedProduct from page HTML.

        Raises:
            ParseError: If the page has no product name
        """
        soup = BeautifulSoup(html, "lxml")

        name, name_kana = self._extract_names(soup)
        if not name:
            raise ParseError(f"No product name found on {url}")

        spec = self._extract_spec(soup)
        product = ScrapedProduct(
            name=name,
            name_kana=name_kana,
            slug=slug_from_url(url),
            manufacturer=self.manufacturer,
            manufacturer_slug=self.manufacturer_slug,
            source_url=url,
            type=self.PRODUCT_TYPE,
            target_fish=list(self.TARGET_FISH),
            price=parse_yen_price(spec.get("販売価格") or spec.get("価格", "")),
            colors=self._extract_colors(soup),
            weights=parse_weights(spec.get("重量") or spec.get("重さ", "")),
            length=parse_length_mm(spec.get("全長", "")),
            main_image=self._extract_main_image(soup),
        )
        logger.info("%s: %d colors, length=%s, price=%d",
                    product.name, len(product.colors), product.length, product.price)
        return product

    def _extract_names(self, soup: BeautifulSoup):
        """Return (name, name_kana), preferring the Latin name as name."""
        title = soup.title.get_text() if soup.title else ""
        name = _TITLE_SUFFIX.sub("", clean_text(title)).strip()
        name_kana = ""

        h3 = soup.select_one("h3.modProductsContent-Title")
        h3_name = _H3_SIZE_SUFFIX.sub("", clean_text(h3.get_text())).strip() if h3 else ""

        if h3_name and h3_name != name:
            if _KATAKANA.search(name) and _LATIN_START.match(h3_name):
                name_kana, name = name, h3_name
            elif _LATIN_START.match(name) and _KATAKANA.search(h3_name):
                name_kana = h3_name

        return name, name_kana

    def _extract_spec(self, soup: BeautifulSoup) -> Dict[str, str]:
        spec: Dict[str, str] = {}
        table = soup.select_one("table.product_tbl")
        if not table:
            return spec

        for row in table.find_all("tr"):
            th = row.find("th")
            td = row.find("td")
            if th and td:
                label = clean_text(th.get_text())
                value = clean_text(td.get_text(" "))
                if label and value:
                    spec[label] = value
        return spec

    def _extract_main_image(self, soup: BeautifulSoup) -> str:
        for img in soup.find_all("img", src=True):
            if _UPLOADS_IMAGE.match(img["src"]):
                return img["src"]
        return ""

    def _extract_colors(self, soup: BeautifulSoup) -> List[ScrapedColor]:
        colors: List[ScrapedColor] = []

        for item in soup.select("li.cosGrid_Inner4"):
            image_url = ""
            link = item.find("a", href=_IMAGE_EXT)
            if link:
                image_url = link["href"]
            else:
                img = item.find("img", src=_IMAGE_EXT)
                if img:
                    image_url = img["src"]

            color_name = ""
            for strong in item.find_all("strong"):
                text = clean_text(strong.get_text())
                if text and not _JAN_CODE.search(text):
                    color_name = text
                    break

            if not color_name:
                color_name = f"カラー{len(colors) + 1:02d}"

            colors.append(ScrapedColor(name=color_name, image_url=image_url))

        return colors
