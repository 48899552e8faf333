"""Identifier normalization for fetched records."""

from typing import Any, Dict, List, Optional


def fix_id(remote_id: Any) -> str:
    """Prefix ids that start with a digit with ``c`` so they are valid node ids."""
    value = str(remote_id)
    if value[:1].isdigit():
        return f"c{value}"
    return value


def _fix_tree(node: Any, memo: Dict[int, Any]) -> Any:
    if isinstance(node, list):
        if id(node) in memo:
            return memo[id(node)]
        out_list: List[Any] = []
        memo[id(node)] = out_list
        out_list.extend(_fix_tree(value, memo) for value in node)
        return out_list

    if not isinstance(node, dict):
        return node
    if id(node) in memo:
        return memo[id(node)]

    out: Dict[str, Any] = {}
    memo[id(node)] = out
    for key, value in node.items():
        if key == "id" and value is not None and not isinstance(value, (dict, list)):
            out[key] = fix_id(value)
        else:
            out[key] = _fix_tree(value, memo)

    # Records (not link placeholders) keep their remote id alongside the fixed one
    sys = node.get("sys")
    if isinstance(sys, dict) and sys.get("id") is not None and sys.get("type") != "Link":
        out["sys"].setdefault("contentful_id", sys["id"])
    return out


def fix_ids(record: Optional[Dict[str, Any]], memo: Optional[Dict[int, Any]] = None) -> Optional[Dict[str, Any]]:
    """
    Return a copy of ``record`` with every ``id`` rewritten by ``fix_id``.

    The original ``sys.id`` is kept as ``sys.contentful_id`` (an existing
    ``contentful_id`` wins, so normalizing twice is stable). ``None`` is
    returned unchanged and the input is never mutated. Pass the same ``memo``
    for a whole collection to keep shared and cyclic references shared in
    the output.
    """
    if record is None:
        return None
    return _fix_tree(record, {} if memo is None else memo)


def normalize_records(
    records: List[Optional[Dict[str, Any]]],
    memo: Optional[Dict[int, Any]] = None,
) -> List[Optional[Dict[str, Any]]]:
    """Apply ``fix_ids`` to each record, keeping ``None`` slots."""
    memo = {} if memo is None else memo
    return [fix_ids(record, memo) for record in records]
