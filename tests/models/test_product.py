"""Tests for lure_catalog/models/product.py"""

import pytest

from lure_catalog.models import (
    DESCRIPTION_MAX_LENGTH,
    ProductListing,
    ScrapedColor,
    ScrapedProduct,
    Variant,
)


def make_product(**overrides):
    fields = dict(
        name="Medusa",
        slug="medusa",
        manufacturer="34",
        manufacturer_slug="thirtyfour",
        source_url="https://34net.jp/products/worm/medusa/",
    )
    fields.update(overrides)
    return ScrapedProduct(**fields)


class TestScrapedColor:
    def test_defaults(self):
        color = ScrapedColor(name="Clear Red")
        assert color.image_url == ""
        assert color.models == []


class TestScrapedProduct:
    def test_default_values(self):
        product = make_product()
        assert product.price == 0
        assert product.colors == []
        assert product.weights == []
        assert product.length is None
        assert product.main_image == ""
        assert product.is_limited is False
        assert product.is_discontinued is False

    def test_raises_on_empty_name(self):
        with pytest.raises(ValueError, match="name is required"):
            make_product(name="")

    def test_raises_on_empty_slug(self):
        with pytest.raises(ValueError, match="slug is required"):
            make_product(slug="")

    def test_raises_on_empty_manufacturer_slug(self):
        with pytest.raises(ValueError, match="Manufacturer slug is required"):
            make_product(manufacturer_slug="")

    def test_weights_deduplicated_in_order(self):
        product = make_product(weights=[14, 10, 14, 7])
        assert product.weights == [14, 10, 7]

    def test_description_truncated(self):
        product = make_product(description="あ" * 600)
        assert len(product.description) == DESCRIPTION_MAX_LENGTH

    def test_two_color_fixture(self, two_color_product):
        assert [c.name for c in two_color_product.colors] == ["Red", "Blue"]
        assert two_color_product.main_image == "main.jpg"


class TestVariant:
    def test_key(self):
        variant = Variant("maria", "134", "Red", 10.0)
        assert variant.key == ("maria", "134", "Red", 10.0)

    def test_key_with_null_weight(self):
        variant = Variant("maria", "134", "Red", None)
        assert variant.key[3] is None

    def test_is_hashable(self):
        a = Variant("maria", "134", "Red", 10.0, image_source="a.jpg")
        b = Variant("maria", "134", "Red", 10.0, image_source="a.jpg")
        assert len({a, b}) == 1


class TestProductListing:
    def test_defaults(self):
        listing = ProductListing(url="https://34net.jp/products/worm/medusa/")
        assert listing.record_id == ""
        assert listing.maker_id == ""
