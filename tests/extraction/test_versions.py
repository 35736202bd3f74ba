# ABOUTME: Tests for the game version catalog parser
# ABOUTME: Item defaults, date and size formatting, link normalization and page errors

import pytest

from minebbs_scout.extraction.base import MalformedPayload
from minebbs_scout.extraction.versions import format_date, format_size, parse_version, parse_version_page


class TestParseVersion:
    """One catalog item"""

    def test_full_item(self):
        version = parse_version(
            {
                "id": 321,
                "version": "1.21.0",
                "total_download_count": 98765,
                "log": "New biomes",
                "abstract": "Summary",
                "time": 1718236800,
                "size": 734003200,
                "downloadlinks": ["//dl.example.com/a.appx", "https://mirror.example.com/a.appx", "ignored"],
            }
        )

        assert version.version == "1.21.0"
        assert version.downloads == "98765"
        assert version.description == "New biomes"
        assert version.date == "2024-06-13"
        assert version.size == "700 MB"
        assert version.download_url == "https://dl.example.com/a.appx"
        assert version.mirror_url == "https://mirror.example.com/a.appx"
        assert version.share_url == "https://mc.minebbs.com/version/321"

    def test_defaults(self):
        version = parse_version({})

        assert version.version == "未知版本"
        assert version.downloads == "0"
        assert version.description == "暂无更新说明"
        assert version.date == ""
        assert version.size == ""
        assert version.download_url == ""
        assert version.mirror_url == ""
        assert version.share_url == ""

    def test_description_falls_back_to_abstract(self):
        assert parse_version({"log": None, "abstract": "Short"}).description == "Short"

    def test_single_download_link(self):
        version = parse_version({"downloadlinks": ["https://dl.example.com/a"]})
        assert version.download_url == "https://dl.example.com/a"
        assert version.mirror_url == ""

    def test_non_object_item(self):
        with pytest.raises(MalformedPayload):
            parse_version(["not", "an", "object"])


class TestFormatting:
    """Timestamps and sizes"""

    @pytest.mark.parametrize(
        "value,expected",
        [(0, "1970-01-01"), ("1718236800", "2024-06-13"), ("soon", ""), (None, ""), (True, "")],
    )
    def test_format_date(self, value, expected):
        assert format_date(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [(1048576, "1 MB"), ("5242880", "5 MB"), (0, "0 MB"), ("big", ""), (None, "")],
    )
    def test_format_size(self, value, expected):
        assert format_size(value) == expected


class TestParseVersionPage:
    """Whole catalog responses"""

    def test_page(self):
        page = parse_version_page(
            {"totalPages": 4, "data": [{"version": "1.21.0"}, "broken", {"version": "1.20.80"}]},
            page=2,
        )

        assert page.page == 2
        assert page.total_pages == 4
        assert [version.version for version in page.versions] == ["1.21.0", "1.20.80"]
        assert page.has_more is True

    def test_total_pages_defaults_to_one(self):
        page = parse_version_page({"data": [{"version": "1.0"}]})

        assert page.total_pages == 1
        assert page.has_more is False

    @pytest.mark.parametrize("payload", [{"data": []}, {"data": None}, {}, {"data": {"version": "x"}}, None])
    def test_no_versions(self, payload):
        with pytest.raises(MalformedPayload):
            parse_version_page(payload)
