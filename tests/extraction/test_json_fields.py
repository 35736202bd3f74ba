# ABOUTME: Tests for fallback field resolution over JSON trees
# ABOUTME: Candidate order, null skipping, list indexing and typed helpers

import pytest

from minebbs_scout.extraction.base import MalformedPayload
from minebbs_scout.extraction.json_fields import (
    is_success,
    parse_json,
    resolve,
    resolve_int,
    resolve_path,
    resolve_text,
)

PAYLOAD = {
    "success": True,
    "data": {
        "basic": {"title": "Skyblock", "author": {"name": "Alex"}},
        "title": "Legacy title",
        "version": None,
        "updates": [{"title": "First"}, {"title": "Second"}],
        "downloads": "12",
        "enabled": False,
        "tags": [],
    },
}


class TestResolve:
    """First present, non-null candidate wins"""

    def test_first_candidate_wins_when_both_present(self):
        assert resolve(PAYLOAD, ["data.basic.title", "data.title"]) == "Skyblock"

    def test_second_candidate_when_first_missing(self):
        assert resolve(PAYLOAD, ["data.basic.subtitle", "data.title"]) == "Legacy title"

    def test_null_is_treated_as_missing(self):
        assert resolve(PAYLOAD, ["data.version", "data.basic.title"]) == "Skyblock"

    def test_all_missing_is_none(self):
        assert resolve(PAYLOAD, ["data.nothing", "meta.title"]) is None
        assert resolve(PAYLOAD, []) is None

    def test_empty_values_are_present(self):
        assert resolve(PAYLOAD, ["data.tags", "data.title"]) == []
        assert resolve(PAYLOAD, ["data.enabled", "data.title"]) is False

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("data.updates.0.title", "First"),
            ("data.updates.-1.title", "Second"),
            (["data", "updates", 1, "title"], "Second"),
            ("data.updates.5.title", None),
            ("data.updates.x", None),
            ("data.basic.title.deeper", None),
            ("", PAYLOAD),
        ],
    )
    def test_resolve_path(self, path, expected):
        assert resolve_path(PAYLOAD, path) == expected

    def test_resolve_on_non_container(self):
        assert resolve_path("text", "data") is None
        assert resolve_path(None, "data") is None

    def test_does_not_mutate_node(self):
        node = {"a": {"b": 1}}
        resolve(node, ["a.b", "a.c"])
        assert node == {"a": {"b": 1}}


class TestTypedHelpers:
    """Text and integer projections with defaults"""

    def test_resolve_text(self):
        assert resolve_text(PAYLOAD, ["data.basic.author.name"]) == "Alex"
        assert resolve_text(PAYLOAD, ["data.downloads"]) == "12"
        assert resolve_text(PAYLOAD, ["data.enabled"]) == "false"
        assert resolve_text(PAYLOAD, ["data.missing"], default="-") == "-"

    def test_resolve_text_skips_containers(self):
        assert resolve_text(PAYLOAD, ["data.basic", "data.title"]) == "Legacy title"
        assert resolve_text(PAYLOAD, ["data.updates"], default="none") == "none"

    def test_resolve_text_numbers(self):
        assert resolve_text({"n": 3}, ["n"]) == "3"
        assert resolve_text({"n": 4.5}, ["n"]) == "4.5"

    @pytest.mark.parametrize(
        "node,expected",
        [
            ({"n": 7}, 7),
            ({"n": "12"}, 12),
            ({"n": " 8 "}, 8),
            ({"n": 2.9}, 2),
            ({"n": "abc"}, -1),
            ({"n": True}, -1),
            ({"n": None}, -1),
            ({"n": [1]}, -1),
            ({}, -1),
        ],
    )
    def test_resolve_int(self, node, expected):
        assert resolve_int(node, ["n"], default=-1) == expected


class TestParseJson:
    """Decoding response bodies"""

    def test_valid(self):
        assert parse_json(b'{"success": true, "data": []}') == {"success": True, "data": []}
        assert parse_json('{"a": "中文"}') == {"a": "中文"}

    @pytest.mark.parametrize("raw", [b"", b"   ", "<html>error</html>", b"{broken", b"\xc3\x28"])
    def test_malformed(self, raw):
        with pytest.raises(MalformedPayload):
            parse_json(raw)


class TestIsSuccess:
    """Only a literal true success flag counts"""

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ({"success": True}, True),
            ({"success": False}, False),
            ({"success": "true"}, False),
            ({"success": 1}, False),
            ({"data": {}}, False),
            ([{"success": True}], False),
            (None, False),
        ],
    )
    def test_is_success(self, payload, expected):
        assert is_success(payload) is expected
