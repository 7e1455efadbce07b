"""Tests for lure_catalog/storage/catalog_store.py"""

from unittest.mock import MagicMock, patch

import pytest

from lure_catalog.errors import PersistenceError
from lure_catalog.models import Variant
from lure_catalog.storage.catalog_store import CatalogStore, build_lure_row, format_number


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.content = b"x" if json_data is not None or text else b""
    response.text = text
    response.headers = {}
    return response


@pytest.fixture
def store():
    return CatalogStore("https://xyz.supabase.co/", "service-key")


class TestInit:
    def test_rest_base_url(self, store):
        assert store.base_url == "https://xyz.supabase.co/rest/v1"

    def test_auth_headers(self, store):
        assert store.session.headers["apikey"] == "service-key"
        assert store.session.headers["Authorization"] == "Bearer service-key"


class TestFormatNumber:
    def test_whole_number_has_no_decimal(self):
        assert format_number(10.0) == "10"
        assert format_number(7) == "7"

    def test_fraction_kept(self):
        assert format_number(3.5) == "3.5"
        assert format_number(14.2) == "14.2"


class TestExists:
    def test_query_filters_on_all_key_fields(self, store):
        with patch.object(store.session, "request", return_value=make_response(200, [])) as mock_request:
            result = store.exists("maria", "134", "Red", 10.0)

        assert result is False
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://xyz.supabase.co/rest/v1/lures")
        assert kwargs["params"] == {
            "manufacturer_slug": "eq.maria",
            "slug": "eq.134",
            "color_name": "eq.Red",
            "weight": "eq.10",
            "select": "id",
            "limit": "1",
        }

    def test_null_weight_uses_is_null(self, store):
        with patch.object(store.session, "request", return_value=make_response(200, [])) as mock_request:
            store.exists("thirtyfour", "medusa", "Clear", None)

        assert mock_request.call_args.kwargs["params"]["weight"] == "is.null"

    def test_returns_true_when_row_found(self, store):
        with patch.object(store.session, "request", return_value=make_response(200, [{"id": 42}])):
            assert store.exists("maria", "134", "Red", 10.0) is True

    def test_query_error_raises(self, store):
        with patch.object(store.session, "request", return_value=make_response(400, text="bad filter")):
            with pytest.raises(PersistenceError):
                store.exists("maria", "134", "Red", 10.0)


class TestInsert:
    def test_posts_row_with_minimal_return(self, store):
        row = {"manufacturer_slug": "maria", "slug": "134", "color_name": "Red", "weight": 10.0}
        with patch.object(store.session, "request", return_value=make_response(201)) as mock_request:
            store.insert(row)

        args, kwargs = mock_request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == row
        assert kwargs["headers"] == {"Prefer": "return=minimal"}

    def test_rejected_row_raises(self, store):
        with patch.object(store.session, "request", return_value=make_response(409, text="duplicate")):
            with pytest.raises(PersistenceError, match="409"):
                store.insert({"slug": "134"})

    def test_custom_table(self):
        s = CatalogStore("https://xyz.supabase.co", "k", table="lures_staging")
        with patch.object(s.session, "request", return_value=make_response(201)) as mock_request:
            s.insert({})
        assert mock_request.call_args.args[1].endswith("/lures_staging")


class TestBuildLureRow:
    def test_denormalized_fields(self, two_color_product):
        variant = Variant("testmaker", "test-minnow", "Red", 10, color_index=0, image_source="a.jpg")
        row = build_lure_row(two_color_product, variant, "https://cdn.example.com/testmaker/test-minnow/01.webp")

        assert row["name"] == "Test Minnow"
        assert row["name_kana"] == "Test Minnow"
        assert row["manufacturer_slug"] == "testmaker"
        assert row["color_name"] == "Red"
        assert row["weight"] == 10
        assert row["length"] == 90
        assert row["price"] == 1650
        assert row["images"] == ["https://cdn.example.com/testmaker/test-minnow/01.webp"]
        assert row["target_fish"] == ["シーバス"]
        assert row["is_discontinued"] is False

    def test_no_image_is_null(self, two_color_product):
        variant = Variant("testmaker", "test-minnow", "Blue", None)
        row = build_lure_row(two_color_product, variant, None)
        assert row["images"] is None
        assert row["weight"] is None

    def test_empty_optional_text_is_null(self, two_color_product):
        two_color_product.description = ""
        two_color_product.target_fish = []
        row = build_lure_row(two_color_product, Variant("testmaker", "test-minnow", "Red", 10), None)
        assert row["description"] is None
        assert row["target_fish"] is None
