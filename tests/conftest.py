"""Shared test fixtures."""

from pathlib import Path
from typing import Dict, List

import pytest

from lure_catalog.errors import ImageError, PersistenceError
from lure_catalog.models import ScrapedColor, ScrapedProduct

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def thirtyfour_html():
    """Load the 34net.jp product page fixture."""
    return (FIXTURES_DIR / "thirtyfour_product.html").read_text(encoding="utf-8")


@pytest.fixture
def maria_html():
    """Load the rendered yamaria.co.jp product page fixture."""
    return (FIXTURES_DIR / "maria_product.html").read_text(encoding="utf-8")


@pytest.fixture
def two_color_product():
    """Red has its own image, Blue falls back to the main image."""
    return ScrapedProduct(
        name="Test Minnow",
        slug="test-minnow",
        manufacturer="TestMaker",
        manufacturer_slug="testmaker",
        source_url="https://example.com/products/test-minnow",
        type="ミノー",
        target_fish=["シーバス"],
        description="Floating minnow.",
        price=1650,
        colors=[
            ScrapedColor(name="Red", image_url="a.jpg"),
            ScrapedColor(name="Blue", image_url=""),
        ],
        weights=[10, 14],
        length=90,
        main_image="main.jpg",
    )


@pytest.fixture
def tracker_config():
    """Tracker field/status layout matching config/tracker.yaml."""
    return {
        "maker": {
            "fields": {"name": "メーカー名", "slug": "Slug", "status": "ステータス", "site_url": "公式サイト"},
            "statuses": {"registering": "処理中", "registered": "登録済み"},
        },
        "url_record": {
            "fields": {"name": "ルアー名", "url": "URL", "maker": "メーカー", "status": "ステータス", "note": "備考"},
            "statuses": {"pending": "未処理", "processing": "処理中", "done": "登録完了", "error": "エラー"},
        },
        "min_request_interval": 0,
        "page_delay": 0.2,
    }


class FakeCatalog:
    """In-memory catalog store keyed by the variant natural key."""

    def __init__(self, fail_insert_colors=()):
        self.rows: Dict[tuple, dict] = {}
        self.fail_insert_colors = set(fail_insert_colors)
        self.exists_calls: List[tuple] = []

    def exists(self, manufacturer_slug, slug, color_name, weight) -> bool:
        key = (manufacturer_slug, slug, color_name, weight)
        self.exists_calls.append(key)
        return key in self.rows

    def insert(self, row: dict) -> None:
        if row["color_name"] in self.fail_insert_colors:
            raise PersistenceError(f"rejected {row['color_name']}")
        key = (row["manufacturer_slug"], row["slug"], row["color_name"], row["weight"])
        if key in self.rows:
            raise PersistenceError(f"duplicate key {key}")
        self.rows[key] = row


class FakeImages:
    """Image pipeline that records keys and fails for chosen sources."""

    def __init__(self, fail_sources=()):
        self.fail_sources = set(fail_sources)
        self.processed: List[tuple] = []

    def process(self, source_url: str, key: str) -> str:
        self.processed.append((source_url, key))
        if source_url in self.fail_sources:
            raise ImageError(f"cannot fetch {source_url}")
        return f"https://cdn.example.com/{key}"


@pytest.fixture
def fake_catalog():
    return FakeCatalog()


@pytest.fixture
def fake_images():
    return FakeImages()


@pytest.fixture
def catalog_factory():
    """Build a FakeCatalog with custom failures."""
    return FakeCatalog


@pytest.fixture
def images_factory():
    """Build a FakeImages with custom failures."""
    return FakeImages
