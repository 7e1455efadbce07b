"""Tests for lure_catalog/pipeline/variants.py"""

import logging

from lure_catalog.models import ScrapedColor, ScrapedModel, ScrapedProduct
from lure_catalog.pipeline.variants import expand_variants, resolve_image_source, resolve_weights


def make_product(**kwargs):
    defaults = dict(
        name="Blues Code",
        slug="134",
        manufacturer="Maria",
        manufacturer_slug="maria",
        source_url="https://www.yamaria.co.jp/maria/product/detail/134",
    )
    defaults.update(kwargs)
    return ScrapedProduct(**defaults)


class TestExpandVariants:
    def test_colors_outer_weights_inner(self, two_color_product):
        variants = expand_variants(two_color_product)

        assert [(v.color_name, v.weight, v.image_source) for v in variants] == [
            ("Red", 10, "a.jpg"),
            ("Red", 14, "a.jpg"),
            ("Blue", 10, "main.jpg"),
            ("Blue", 14, "main.jpg"),
        ]

    def test_main_image_flag_and_color_index(self, two_color_product):
        variants = expand_variants(two_color_product)

        assert [v.color_index for v in variants] == [0, 0, 1, 1]
        assert [v.uses_main_image for v in variants] == [False, False, True, True]

    def test_count_is_colors_times_weights(self):
        product = make_product(
            colors=[ScrapedColor(name=f"C{i}") for i in range(5)],
            weights=[7, 9.5, 12],
        )
        assert len(expand_variants(product)) == 15

    def test_no_weights_gives_null_weight_per_color(self):
        product = make_product(colors=[ScrapedColor(name="Clear"), ScrapedColor(name="Glow")])
        variants = expand_variants(product)

        assert [(v.color_name, v.weight) for v in variants] == [("Clear", None), ("Glow", None)]

    def test_no_colors_gives_nothing(self):
        assert expand_variants(make_product(weights=[10, 14])) == []

    def test_duplicate_weights_collapse(self):
        product = make_product(colors=[ScrapedColor(name="Red")], weights=[10, 10, 14])
        assert [v.weight for v in expand_variants(product)] == [10, 14]

    def test_deterministic(self, two_color_product):
        assert expand_variants(two_color_product) == expand_variants(two_color_product)


class TestResolveImageSource:
    def test_color_image_preferred(self, two_color_product):
        assert resolve_image_source(two_color_product, two_color_product.colors[0]) == ("a.jpg", False)

    def test_falls_back_to_main(self, two_color_product):
        assert resolve_image_source(two_color_product, two_color_product.colors[1]) == ("main.jpg", True)

    def test_no_image_anywhere(self):
        product = make_product(colors=[ScrapedColor(name="Red")])
        assert resolve_image_source(product, product.colors[0]) == ("", False)


class TestResolveWeights:
    def test_restricted_to_matching_models(self):
        product = make_product(
            weights=[9.5, 14, 21],
            models=[
                ScrapedModel(name="BC70SLM", weight=9.5),
                ScrapedModel(name="BC85SLM", weight=14),
                ScrapedModel(name="BC100SLM", weight=21),
            ],
        )
        color = ScrapedColor(name="Red", models=["85SLM", "100SLM"])

        assert resolve_weights(product, color) == [14, 21]

    def test_no_match_falls_back_to_all_weights(self, caplog):
        product = make_product(
            weights=[9.5, 14],
            models=[ScrapedModel(name="BC70SLM", weight=9.5), ScrapedModel(name="BC85SLM", weight=14)],
        )
        color = ScrapedColor(name="Red", models=["120F"])

        with caplog.at_level(logging.WARNING):
            assert resolve_weights(product, color) == [9.5, 14]
        assert "matched none of models" in caplog.text

    def test_color_without_models_gets_all(self):
        product = make_product(weights=[9.5, 14], models=[ScrapedModel(name="BC70SLM", weight=9.5)])
        assert resolve_weights(product, ScrapedColor(name="Red")) == [9.5, 14]

    def test_empty_weights(self):
        assert resolve_weights(make_product(), ScrapedColor(name="Red")) == [None]
