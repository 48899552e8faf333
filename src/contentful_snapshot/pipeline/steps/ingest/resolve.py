"""Client-side link resolution for entries fetched with ``include=0``."""

import copy
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ....core.logging import log

LookupKey = Tuple[str, str]

_UNRESOLVED = object()


def is_link(node: Any) -> bool:
    """True for ``{"sys": {"type": "Link", "linkType": ..., "id": ...}}`` placeholders."""
    if not isinstance(node, dict):
        return False
    sys = node.get("sys")
    return isinstance(sys, dict) and sys.get("type") == "Link" and "id" in sys


def _entity_key(entity: Dict[str, Any]) -> Optional[LookupKey]:
    sys = entity.get("sys") or {}
    if sys.get("type") is None or sys.get("id") is None:
        return None
    return (str(sys["type"]), str(sys["id"]))


def _link_key(link: Dict[str, Any]) -> LookupKey:
    sys = link["sys"]
    return (str(sys.get("linkType")), str(sys["id"]))


class _Resolver:
    def __init__(self, lookup: Dict[LookupKey, Dict[str, Any]], remove_unresolved: bool):
        self.lookup = lookup
        self.remove_unresolved = remove_unresolved
        self.resolved = 0
        self.unresolved = 0
        # Records are walked from their own entry points only
        self._records: Set[int] = {id(record) for record in lookup.values()}
        self._seen: Set[int] = set()

    def resolve_link(self, link: Dict[str, Any]) -> Any:
        target = self.lookup.get(_link_key(link))
        if target is not None:
            self.resolved += 1
            return target
        self.unresolved += 1
        return _UNRESOLVED if self.remove_unresolved else link

    def walk(self, node: Any) -> Any:
        if is_link(node):
            return self.resolve_link(node)
        if not isinstance(node, (list, dict)):
            return node

        # Already-resolved records and revisited containers come back unchanged
        if id(node) in self._records or id(node) in self._seen:
            return node
        self._seen.add(id(node))

        if isinstance(node, list):
            walked = [self.walk(value) for value in node]
            node[:] = [value for value in walked if value is not _UNRESOLVED]
        elif isinstance(node, dict):
            for key, value in list(node.items()):
                walked_value = self.walk(value)
                node[key] = None if walked_value is _UNRESOLVED else walked_value
        return node


def resolve_links(
    items: Iterable[Dict[str, Any]],
    includes: Iterable[Dict[str, Any]] = (),
    item_entry_points: Iterable[str] = ("fields",),
    remove_unresolved: bool = False,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Replace link placeholders inside ``items`` with the records they point to.

    Inputs are deep-copied first and never modified. Both ``items`` and
    ``includes`` are link targets, but only the entry points of ``items``
    are walked, so links inside includes (assets) stay as placeholders.

    Args:
        items: Records whose links should be resolved (entries)
        includes: Additional link targets (assets)
        item_entry_points: Top-level keys of each item to walk
        remove_unresolved: Drop links with no target (None in mappings,
            removed from lists) instead of keeping the placeholder

    Returns:
        ``(items, includes)`` copies. A record reachable from several places
        is the same object everywhere, including in the returned includes.
    """
    cloned_items, cloned_includes = copy.deepcopy((list(items), list(includes)))

    lookup: Dict[LookupKey, Dict[str, Any]] = {}
    for entity in [*cloned_items, *cloned_includes]:
        if isinstance(entity, dict):
            key = _entity_key(entity)
            if key is not None:
                lookup[key] = entity

    resolver = _Resolver(lookup, remove_unresolved)
    entry_points = list(item_entry_points)
    walked_items: Set[int] = set()
    for item in cloned_items:
        if not isinstance(item, dict) or id(item) in walked_items:
            continue
        walked_items.add(id(item))
        for entry_point in entry_points:
            if entry_point in item:
                walked = resolver.walk(item[entry_point])
                item[entry_point] = None if walked is _UNRESOLVED else walked

    log.info(
        "ingest.contentful.links_resolved",
        items=len(cloned_items),
        includes=len(cloned_includes),
        resolved=resolver.resolved,
        unresolved=resolver.unresolved,
    )
    return cloned_items, cloned_includes


def resolve_response(
    items: Iterable[Dict[str, Any]],
    includes: Iterable[Dict[str, Any]] = (),
    item_entry_points: Iterable[str] = ("fields",),
    remove_unresolved: bool = False,
) -> List[Dict[str, Any]]:
    """Resolved copies of ``items``; see ``resolve_links``."""
    resolved_items, _ = resolve_links(items, includes, item_entry_points, remove_unresolved)
    return resolved_items
