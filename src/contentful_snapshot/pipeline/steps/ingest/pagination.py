"""Cursor-less skip/limit pagination over Delivery API collections."""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from ....core.logging import log

ListOperation = Callable[[Dict[str, Any]], Dict[str, Any]]

# Stable sort key so records created mid-fetch cannot shift page boundaries
CREATED_AT_ORDER = "sys.createdAt"


def iter_pages(
    list_operation: ListOperation,
    page_size: int,
    query: Optional[Dict[str, Any]] = None,
) -> Iterator[Dict[str, Any]]:
    """
    Yield one collection response per request until ``total`` is exhausted.

    Stops after the response for which ``skip + page_size > total``; a short
    page alone does not end the loop.

    Args:
        list_operation: Client call taking a query dict (e.g. ``client.get_content_types``)
        page_size: ``limit`` sent with every request
        query: Extra query parameters merged into each request

    Yields:
        Raw response dicts (``items``, ``total``, ...)
    """
    skip = 0
    while True:
        response = list_operation(
            {
                **(query or {}),
                "skip": skip,
                "limit": page_size,
                "order": CREATED_AT_ORDER,
            }
        )
        yield response
        if skip + page_size > response.get("total", 0):
            return
        skip += page_size


def iter_pages_until_empty(
    list_operation: ListOperation,
    page_size: int,
    query: Optional[Dict[str, Any]] = None,
    label: str = "items",
) -> Iterator[List[Dict[str, Any]]]:
    """
    Yield non-empty pages of items, stopping at the first empty page.

    ``total`` is ignored: above the response-size cap it is not reliable.
    The empty page costs exactly one extra request.
    """
    skip = 0
    while True:
        log.info(
            f"ingest.contentful.{label}.page",
            message=f"FETCHING {label.upper()} {skip + 1} TO {skip + page_size}",
            skip=skip,
            limit=page_size,
        )
        response = list_operation(
            {
                **(query or {}),
                "skip": skip,
                "limit": page_size,
                "order": CREATED_AT_ORDER,
            }
        )
        items = response.get("items") or []
        if not items:
            return
        yield items
        skip += page_size


def collect_all(pages: Iterable[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Concatenate pages of items, preserving order."""
    collected: List[Dict[str, Any]] = []
    for page in pages:
        collected.extend(page)
    return collected


def fetch_all_pages(
    list_operation: ListOperation,
    page_size: int = 1000,
    query: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Fetch every item of a collection using ``total``-based termination."""
    return collect_all(response.get("items") or [] for response in iter_pages(list_operation, page_size, query))
