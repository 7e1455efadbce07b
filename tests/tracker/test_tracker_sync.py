"""Tests for lure_catalog/tracker/sync.py"""

from unittest.mock import MagicMock

import pytest

from lure_catalog.errors import TrackerError
from lure_catalog.tracker.sync import TrackerSync


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sync(client, tracker_config, sleeps):
    return TrackerSync(client, "tblMakers", "tblUrls", tracker_config, sleep=sleeps.append)


class TestFindOrCreateMaker:
    def test_existing_maker_is_reused(self, sync, client):
        client.find_first.return_value = {"id": "recMARIA", "fields": {}}

        assert sync.find_or_create_maker("maria", "Maria") == "recMARIA"
        client.find_first.assert_called_once_with("tblMakers", "{Slug}='maria'")
        client.create_record.assert_not_called()

    def test_missing_maker_is_created_registering(self, sync, client):
        client.find_first.return_value = None
        client.create_record.return_value = "recNEW"

        maker_id = sync.find_or_create_maker("maria", "Maria", "https://www.yamaria.co.jp/maria/")

        assert maker_id == "recNEW"
        client.create_record.assert_called_once_with("tblMakers", {
            "メーカー名": "Maria",
            "Slug": "maria",
            "ステータス": "処理中",
            "公式サイト": "https://www.yamaria.co.jp/maria/",
        })

    def test_name_defaults_to_slug(self, sync, client):
        client.find_first.return_value = None
        client.create_record.return_value = "recNEW"

        sync.find_or_create_maker("thirtyfour")

        fields = client.create_record.call_args.args[1]
        assert fields["メーカー名"] == "thirtyfour"
        assert "公式サイト" not in fields


class TestFinalizeMaker:
    def test_sets_registered(self, sync, client):
        sync.finalize_maker("recMARIA")
        client.update_record.assert_called_once_with("tblMakers", "recMARIA", {"ステータス": "登録済み"})


class TestGetMaker:
    def test_reads_name_and_slug_once(self, sync, client):
        client.get_record.return_value = {"id": "recM", "fields": {"メーカー名": "Maria", "Slug": "maria"}}

        first = sync.get_maker("recM")
        second = sync.get_maker("recM")

        assert first == {"id": "recM", "name": "Maria", "slug": "maria"}
        assert second is first
        client.get_record.assert_called_once()


class TestRecordProduct:
    def test_appends_done_record(self, sync, client):
        client.create_record.return_value = "recURL"

        record_id = sync.record_product("Blues Code", "https://example.com/p/1", "recM", "2色 x 1ウェイト = 2行挿入")

        assert record_id == "recURL"
        client.create_record.assert_called_once_with("tblUrls", {
            "ルアー名": "Blues Code",
            "URL": "https://example.com/p/1",
            "メーカー": ["recM"],
            "ステータス": "登録完了",
            "備考": "2色 x 1ウェイト = 2行挿入",
        })

    def test_note_truncated(self, sync, client):
        sync.record_product("X", "https://example.com", "recM", "n" * 800)
        fields = client.create_record.call_args.args[1]
        assert len(fields["備考"]) <= 500


class TestUpdateUrlStatus:
    def test_status_only(self, sync, client):
        sync.update_url_status("recURL", "processing")
        client.update_record.assert_called_once_with("tblUrls", "recURL", {"ステータス": "処理中"})

    def test_with_note(self, sync, client):
        sync.update_url_status("recURL", "error", "ParseError: no name")
        fields = client.update_record.call_args.args[2]
        assert fields == {"ステータス": "エラー", "備考": "ParseError: no name"}

    def test_unknown_status_raises(self, sync, client):
        with pytest.raises(TrackerError, match="archived"):
            sync.update_url_status("recURL", "archived")
        client.update_record.assert_not_called()


class TestFetchPending:
    def test_collects_listings_across_pages(self, sync, client, sleeps):
        client.iter_pages.return_value = iter([
            [{"id": "rec1", "fields": {"URL": "https://a", "ルアー名": "A", "メーカー": ["recM"]}}],
            [{"id": "rec2", "fields": {"URL": "https://b"}}],
        ])

        listings = sync.fetch_pending()

        assert [l.url for l in listings] == ["https://a", "https://b"]
        assert listings[0].record_id == "rec1"
        assert listings[0].maker_id == "recM"
        assert listings[0].name == "A"
        assert listings[1].maker_id == ""
        client.iter_pages.assert_called_once_with("tblUrls", "{ステータス}='未処理'")

    def test_sleeps_between_pages_only(self, sync, client, sleeps):
        client.iter_pages.return_value = iter([[], [], []])
        sync.fetch_pending()
        assert sleeps == [0.2, 0.2]

    def test_records_without_url_are_skipped(self, sync, client):
        client.iter_pages.return_value = iter([[{"id": "rec1", "fields": {"ルアー名": "No URL"}}]])
        assert sync.fetch_pending() == []


class TestFromSettings:
    def test_builds_client_from_settings(self, tracker_config):
        settings = MagicMock(
            airtable_base_id="appBASE",
            airtable_pat="patTOKEN",
            airtable_api_base="https://api.airtable.com/v0",
            airtable_maker_table_id="tblMakers",
            airtable_url_table_id="tblUrls",
        )
        sync = TrackerSync.from_settings(settings, tracker_config)

        assert sync.client.base_url == "https://api.airtable.com/v0/appBASE"
        assert sync.maker_table_id == "tblMakers"
        assert sync.url_table_id == "tblUrls"
        sync.close()
