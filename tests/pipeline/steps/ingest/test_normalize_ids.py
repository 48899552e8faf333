"""Tests for identifier normalization."""

import copy

import pytest

from contentful_snapshot.pipeline.steps.ingest.normalize import fix_id, fix_ids, normalize_records
from contentful_snapshot.pipeline.steps.ingest.resolve import resolve_response
from fakes import content_type, entry, link

pytestmark = pytest.mark.unit


class TestFixId:
    def test_digit_prefixed_ids_get_c_prefix(self):
        assert fix_id("123abc") == "c123abc"

    def test_other_ids_unchanged(self):
        assert fix_id("abc123") == "abc123"

    def test_non_string_ids_are_stringified(self):
        assert fix_id(42) == "c42"

    def test_idempotent(self):
        assert fix_id(fix_id("9lives")) == fix_id("9lives") == "c9lives"


class TestFixIds:
    def test_none_passes_through(self):
        assert fix_ids(None) is None

    def test_returns_new_record_without_mutating_input(self):
        record = entry("1post", title="Hello")
        before = copy.deepcopy(record)

        out = fix_ids(record)

        assert out is not record
        assert out["sys"] is not record["sys"]
        assert record == before

    def test_rewrites_sys_id_and_keeps_remote_id(self):
        out = fix_ids(entry("1post"))

        assert out["sys"]["id"] == "c1post"
        assert out["sys"]["contentful_id"] == "1post"

    def test_rewrites_nested_ids(self):
        out = fix_ids(entry("e1", related=link("Entry", "2nd")))

        assert out["fields"]["related"]["en-US"]["sys"]["id"] == "c2nd"
        # placeholders are not records
        assert "contentful_id" not in out["fields"]["related"]["en-US"]["sys"]

    def test_content_type_field_ids(self):
        ct = content_type("3col")
        ct["fields"].append({"id": "2ndTitle", "type": "Symbol"})

        out = fix_ids(ct)

        assert out["sys"]["id"] == "c3col"
        assert [f["id"] for f in out["fields"]] == ["title", "image", "c2ndTitle"]

    def test_applying_twice_is_stable(self):
        once = fix_ids(entry("7up"))
        twice = fix_ids(once)

        assert twice["sys"]["id"] == once["sys"]["id"] == "c7up"
        assert twice["sys"]["contentful_id"] == "7up"


class TestNormalizeRecords:
    def test_keeps_none_slots(self):
        out = normalize_records([entry("1a"), None])

        assert out[0]["sys"]["id"] == "c1a"
        assert out[1] is None

    def test_cyclic_resolved_entries_stay_shared(self):
        resolved = resolve_response([entry("1A", ref=link("Entry", "2B")), entry("2B", ref=link("Entry", "1A"))])

        a, b = normalize_records(resolved)

        assert a["fields"]["ref"]["en-US"] is b
        assert b["fields"]["ref"]["en-US"] is a
        assert a["sys"]["id"] == "c1A"
        assert b["sys"]["contentful_id"] == "2B"
        assert a is not resolved[0]
