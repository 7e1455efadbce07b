"""
Image Pipeline

Downloads a source image, resizes it to a fixed width (never upscaling),
re-encodes it as WebP and uploads it to the blob store under a
deterministic key.
"""

import io
import logging
from typing import Dict, Optional
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError

from ..errors import ImageError
from ..storage.blob_store import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 500
DEFAULT_QUALITY = 80


def image_key(manufacturer_slug: str, product_slug: str, color_index: int) -> str:
    """
    Object key for a color image (color_index is 0-based).

    Example:
        >>> image_key("maria", "1234", 0)
        'maria/1234/01.webp'
    """
    return f"{manufacturer_slug}/{product_slug}/{color_index + 1:02d}.webp"


def main_image_key(manufacturer_slug: str, product_slug: str) -> str:
    return f"{manufacturer_slug}/{product_slug}/main.webp"


class ImagePipeline:
    """
    Download -> transcode -> upload for product images.

    Usage:
        images = ImagePipeline(blob_store, session)
        url = images.process("https://example.com/a.jpg", "maria/1234/01.webp")
    """

    def __init__(
        self,
        blob_store: BlobStore,
        session: Optional[requests.Session] = None,
        width: int = DEFAULT_WIDTH,
        quality: int = DEFAULT_QUALITY,
        user_agent: str = "",
        referers: Optional[Dict[str, str]] = None,
        timeout: int = 30,
    ):
        self.blob_store = blob_store
        self.session = session or requests.Session()
        self.width = width
        self.quality = quality
        self.user_agent = user_agent
        self.referers = referers or {}
        self.timeout = timeout

    def _headers_for(self, url: str) -> Dict[str, str]:
        headers = {}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        host = urlparse(url).netloc.lower()
        for domain, referer in self.referers.items():
            if host == domain or host.endswith("." + domain):
                headers["Referer"] = referer
                break
        return headers

    def download(self, url: str) -> bytes:
        """
        Fetch raw image bytes.

        Raises:
            ImageError: On transport errors or non-2xx responses
        """
        try:
            response = self.session.get(url, headers=self._headers_for(url), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ImageError(f"Download failed for {url}: {e}") from e
        if not response.content:
            raise ImageError(f"Empty image body from {url}")
        return response.content

    def transcode(self, data: bytes) -> bytes:
        """
        Resize to the configured width (only if wider) and encode as WebP.

        Raises:
            ImageError: If the bytes are not a readable image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                if img.mode in ("P", "LA", "PA"):
                    img = img.convert("RGBA")
                elif img.mode not in ("RGB", "RGBA"):
                    img = img.convert("RGB")

                if img.width > self.width:
                    height = max(1, round(img.height * self.width / img.width))
                    img = img.resize((self.width, height), Image.Resampling.LANCZOS)

                buf = io.BytesIO()
                img.save(buf, format="WEBP", quality=self.quality)
                return buf.getvalue()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageError(f"Could not transcode image: {e}") from e

    def close(self):
        self.session.close()

    def process(self, source_url: str, key: str) -> str:
        """
        Download, transcode and upload one image.

        Returns:
            Public URL of the uploaded object

        Raises:
            ImageError: If any step fails
        """
        raw = self.download(source_url)
        webp = self.transcode(raw)
        self.blob_store.put(key, webp, content_type="image/webp")
        logger.debug("Image %s -> %s (%d -> %d bytes)", source_url, key, len(raw), len(webp))
        return self.blob_store.public_url(key)
