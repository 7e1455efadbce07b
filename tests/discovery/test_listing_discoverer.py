"""Tests for lure_catalog/discovery/listing_discoverer.py"""

from unittest.mock import MagicMock

from lure_catalog.discovery.listing_discoverer import ListingDiscoverer, load_url_file, save_url_file

PATTERN = r'/maria/product/detail/\d+$'

PAGE_1 = """
<ul>
  <li><a href="/maria/product/detail/134">ブルースコード C</a></li>
  <li><a href="/maria/product/detail/201#spec">ラピード F</a></li>
  <li><a href="/maria/product/gm/plug?absolutepage=2">次へ</a></li>
  <li><a href="/maria/product/detail/999">【生産終了】 旧モデル</a></li>
</ul>
"""

PAGE_2 = """
<a href="https://www.yamaria.co.jp/maria/product/detail/134">ブルースコード C</a>
<a href="https://www.yamaria.co.jp/maria/product/detail/305">メタラー</a>
"""


def make_discoverer(**kwargs):
    pages = {
        "https://www.yamaria.co.jp/maria/product/gm/plug": PAGE_1,
        "https://www.yamaria.co.jp/maria/product/gm/plug?absolutepage=2": PAGE_2,
    }
    fetch = MagicMock(side_effect=lambda url: pages[url])
    return ListingDiscoverer(fetch, PATTERN, **kwargs), list(pages)


class TestExtractLinks:
    def test_resolves_and_strips_fragments(self):
        discoverer, pages = make_discoverer()

        listings = discoverer.extract_links(PAGE_1, pages[0])

        assert listings[0].url == "https://www.yamaria.co.jp/maria/product/detail/134"
        assert listings[0].name == "ブルースコード C"
        assert listings[1].url == "https://www.yamaria.co.jp/maria/product/detail/201"

    def test_exclude_keywords(self):
        discoverer, pages = make_discoverer(exclude_keywords=["生産終了"])

        urls = [l.url for l in discoverer.extract_links(PAGE_1, pages[0])]

        assert "https://www.yamaria.co.jp/maria/product/detail/999" not in urls
        assert len(urls) == 2


class TestDiscover:
    def test_dedup_in_first_seen_order(self):
        discoverer, pages = make_discoverer()

        listings = discoverer.discover(pages)

        assert [l.url.rsplit("/", 1)[-1] for l in listings] == ["134", "201", "999", "305"]
        assert discoverer.get_stats() == {"products_found": 4}

    def test_limit(self):
        discoverer, pages = make_discoverer()
        assert len(discoverer.discover(pages, limit=2)) == 2

    def test_save_urls(self, tmp_path):
        discoverer, pages = make_discoverer()
        discoverer.discover(pages)
        output = tmp_path / "urls.txt"

        discoverer.save_urls(str(output))

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "https://www.yamaria.co.jp/maria/product/detail/134"
        assert len(lines) == 4


class TestLoadUrlFile:
    def test_skips_blank_and_comment_lines(self, tmp_path):
        path = tmp_path / "urls.txt"
        path.write_text(
            "# thirtyfour worms\n"
            "https://34net.jp/products/worm/medusa/\n"
            "\n"
            "https://34net.jp/products/worm/pletha/\n",
            encoding="utf-8",
        )

        listings = load_url_file(str(path))

        assert [l.url for l in listings] == [
            "https://34net.jp/products/worm/medusa/",
            "https://34net.jp/products/worm/pletha/",
        ]

    def test_limit(self, tmp_path):
        path = tmp_path / "urls.txt"
        path.write_text("https://a\nhttps://b\nhttps://c\n", encoding="utf-8")
        assert len(load_url_file(str(path), limit=2)) == 2

    def test_reads_back_saved_file(self, tmp_path):
        path = tmp_path / "urls.txt"
        discoverer, pages = make_discoverer()
        save_url_file(discoverer.discover(pages), str(path))

        assert len(load_url_file(str(path))) == 4
