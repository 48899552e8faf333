"""Full re-fetch of every entry and asset in a space.

The sync endpoint is deliberately not used: it enforces a server-side
response size limit that a single page of large entries can exceed, and it
offers no way to shrink its pages. Two skip/limit loops with caller-chosen
page sizes replace it, at the cost of always fetching everything.
"""

import concurrent.futures
import contextvars
from typing import Any, Dict, List

from ....core.logging import log
from ....core.models import SyncSnapshot
from .pagination import collect_all, iter_pages_until_empty
from .resolve import resolve_links

ENTRIES_PAGE_SIZE = 50
ASSETS_PAGE_SIZE = 100


def fetch_all_entries(client: Any, page_size: int = ENTRIES_PAGE_SIZE) -> List[Dict[str, Any]]:
    """All entries in every locale, with links left unresolved (``include=0``)."""
    return collect_all(
        iter_pages_until_empty(
            client.get_entries,
            page_size,
            {"include": 0, "locale": "*"},
            label="entries",
        )
    )


def fetch_all_assets(client: Any, page_size: int = ASSETS_PAGE_SIZE) -> List[Dict[str, Any]]:
    """All assets in every locale."""
    return collect_all(
        iter_pages_until_empty(
            client.get_assets,
            page_size,
            {"locale": "*"},
            label="assets",
        )
    )


def fetch_all_entries_and_assets(
    client: Any,
    entries_page_size: int = ENTRIES_PAGE_SIZE,
    assets_page_size: int = ASSETS_PAGE_SIZE,
    workers: int = 1,
) -> SyncSnapshot:
    """
    Fetch all entries and assets, then resolve entry links against them.

    Args:
        client: Object exposing ``get_entries(query)`` and ``get_assets(query)``
        entries_page_size: Entries per request
        assets_page_size: Assets per request
        workers: 2 or more runs the two loops concurrently; each loop stays sequential

    Returns:
        SyncSnapshot with resolved entries, raw assets and empty deletion lists
    """
    if workers > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
            # Each worker gets its own copy of the bound log context
            entries_future = executor.submit(contextvars.copy_context().run, fetch_all_entries, client, entries_page_size)
            assets_future = executor.submit(contextvars.copy_context().run, fetch_all_assets, client, assets_page_size)
            entries = entries_future.result()
            assets = assets_future.result()
    else:
        entries = fetch_all_entries(client, entries_page_size)
        assets = fetch_all_assets(client, assets_page_size)

    log.info("ingest.contentful.space.fetched", entries=len(entries), assets=len(assets))

    # Resolved entries point at the same asset objects returned below
    resolved_entries, resolved_assets = resolve_links(entries, includes=assets, item_entry_points=("fields",))

    # Full fetches never observe deletions
    return SyncSnapshot(
        entries=resolved_entries,
        assets=resolved_assets,
        deleted_entries=[],
        deleted_assets=[],
    )
