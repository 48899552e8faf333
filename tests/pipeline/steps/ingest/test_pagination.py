"""Tests for skip/limit pagination helpers."""

import pytest

from contentful_snapshot.pipeline.steps.ingest.pagination import (
    collect_all,
    fetch_all_pages,
    iter_pages,
    iter_pages_until_empty,
)
from fakes import content_type, entry

pytestmark = pytest.mark.unit

PAGE_SIZE = 5


@pytest.mark.parametrize("count", [0, PAGE_SIZE, PAGE_SIZE + 1, 3 * PAGE_SIZE])
def test_fetch_all_pages_returns_every_item_in_order(make_client, count):
    items = [content_type(f"type{i}") for i in range(count)]
    client = make_client(content_types=items)

    result = fetch_all_pages(client.get_content_types, PAGE_SIZE)

    assert result == items
    assert [ct["sys"]["id"] for ct in result] == [f"type{i}" for i in range(count)]


@pytest.mark.parametrize(
    "count,expected_requests",
    [(0, 1), (PAGE_SIZE, 2), (PAGE_SIZE + 1, 2), (3 * PAGE_SIZE, 4)],
)
def test_fetch_all_pages_stops_when_skip_passes_total(make_client, count, expected_requests):
    client = make_client(content_types=[content_type(f"t{i}") for i in range(count)])

    fetch_all_pages(client.get_content_types, PAGE_SIZE)

    assert len(client.calls["content_types"]) == expected_requests


def test_iter_pages_sends_skip_limit_and_stable_order(make_client):
    client = make_client(content_types=[content_type(f"t{i}") for i in range(7)])

    list(iter_pages(client.get_content_types, PAGE_SIZE, {"locale": "*"}))

    assert client.calls["content_types"] == [
        {"locale": "*", "skip": 0, "limit": PAGE_SIZE, "order": "sys.createdAt"},
        {"locale": "*", "skip": PAGE_SIZE, "limit": PAGE_SIZE, "order": "sys.createdAt"},
    ]


def test_iter_pages_keeps_going_past_short_page_when_total_says_more():
    pages = [
        {"items": [{"id": 1}], "total": 3},
        {"items": [{"id": 2}, {"id": 3}], "total": 3},
    ]
    calls = []

    def list_operation(query):
        calls.append(query["skip"])
        return pages[len(calls) - 1]

    result = fetch_all_pages(list_operation, 2)

    assert calls == [0, 2]
    assert [item["id"] for item in result] == [1, 2, 3]


def test_fetch_all_pages_propagates_remote_error():
    def list_operation(query):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        fetch_all_pages(list_operation, 10)


@pytest.mark.parametrize("count", [0, 3, 4, 9])
def test_iter_pages_until_empty_issues_one_extra_request(make_client, count):
    client = make_client(entries=[entry(f"e{i}") for i in range(count)])

    pages = list(iter_pages_until_empty(client.get_entries, 3, {"include": 0}, label="entries"))

    non_empty_pages = -(-count // 3)
    assert len(pages) == non_empty_pages
    assert len(client.calls["entries"]) == non_empty_pages + 1
    assert collect_all(pages) == client.collections["entries"]


def test_iter_pages_until_empty_ignores_total():
    # total under-reports; only an empty page ends the loop
    pages = [
        {"items": [{"id": 1}, {"id": 2}], "total": 1},
        {"items": [{"id": 3}], "total": 1},
        {"items": [], "total": 1},
    ]
    calls = []

    def list_operation(query):
        calls.append(query)
        return pages[len(calls) - 1]

    result = collect_all(iter_pages_until_empty(list_operation, 2))

    assert [item["id"] for item in result] == [1, 2, 3]
    assert [c["skip"] for c in calls] == [0, 2, 4]


def test_collect_all_concatenates_pages():
    assert collect_all([[1, 2], [], [3]]) == [1, 2, 3]
    assert collect_all([]) == []
