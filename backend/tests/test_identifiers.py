"""
Tests for identifier normalization.

Run with: pytest backend/tests/test_identifiers.py -v
"""
import logging

import pytest

from app.explorer.identifiers import (
    NestedId,
    PlainId,
    UnsupportedIdentifier,
    WrappedId,
    document_id,
    normalize_id,
    parse_identifier,
    same_id,
)


class TestParseIdentifier:
    """The closed set of accepted identifier shapes."""

    def test_plain_string(self):
        assert parse_identifier("abc") == PlainId("abc")

    def test_wrapped_oid(self):
        assert parse_identifier({"$oid": "abc"}) == WrappedId("abc")

    def test_nested_plain(self):
        assert parse_identifier({"_id": "abc"}) == NestedId(PlainId("abc"))

    def test_nested_wrapped(self):
        assert parse_identifier({"_id": {"$oid": "abc"}}) == NestedId(WrappedId("abc"))

    def test_missing(self):
        assert parse_identifier(None) is None
        assert parse_identifier("") is None

    @pytest.mark.parametrize("value", [42, 3.5, ["abc"], {"id": "abc"}, {"$oid": 7}, {"_id": 7}])
    def test_unsupported_shapes_raise(self, value):
        with pytest.raises(UnsupportedIdentifier):
            parse_identifier(value)


class TestNormalizeId:
    """Canonical forms and lenient handling."""

    @pytest.mark.parametrize("value", [
        "65a1f2000000000000000001",
        {"$oid": "65a1f2000000000000000001"},
        {"_id": "65a1f2000000000000000001"},
        {"_id": {"$oid": "65a1f2000000000000000001"}},
    ])
    def test_all_shapes_agree(self, value):
        assert normalize_id(value) == "65a1f2000000000000000001"

    def test_full_document_uses_its_id(self):
        doc = {"_id": {"$oid": "e1"}, "title": "Founding of Văn Lang"}
        assert normalize_id(doc) == "e1"

    def test_unsupported_shape_is_logged_and_dropped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="app.explorer.identifiers"):
            assert normalize_id(12345) is None
        assert "unsupported shape" in caplog.text

    def test_empty_is_none(self):
        assert normalize_id("") is None
        assert normalize_id(None) is None


class TestSameId:
    def test_mixed_shapes_compare_equal(self):
        assert same_id({"$oid": "p1"}, "p1")
        assert same_id({"_id": "p1"}, {"$oid": "p1"})

    def test_different_ids(self):
        assert not same_id("p1", "p2")

    def test_missing_never_matches_missing(self):
        assert not same_id(None, None)
        assert not same_id("", None)


class TestDocumentId:
    def test_prefers_underscore_id(self):
        assert document_id({"_id": {"$oid": "a"}, "id": "b"}) == "a"

    def test_falls_back_to_id(self):
        assert document_id({"id": "b"}) == "b"

    def test_empty_document(self):
        assert document_id({}) is None
        assert document_id(None) is None
