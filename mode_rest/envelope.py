"""Accessors for the Mode HAL envelope (``_embedded`` / ``_links``).

Mode nests a single related object one level deep (``_embedded[name]``) but
wraps collections twice (``_embedded[name]._embedded[name]``). The two
accessors below keep that asymmetry in one place.
"""
from typing import Any, Dict, List, Optional


def get_embedded_value(envelope: Optional[Dict[str, Any]], name: str) -> Optional[Dict[str, Any]]:
    """
    Return the single embedded object for a relation.

    Args:
        envelope: Raw resource from the Mode API
        name: Relation name

    Returns:
        ``envelope["_embedded"][name]`` as-is, or None when it is not there
    """
    embedded = (envelope or {}).get("_embedded") or {}
    return embedded.get(name)


def get_embedded_collection(envelope: Optional[Dict[str, Any]], name: str) -> List[Dict[str, Any]]:
    """
    Return the embedded collection for a relation.

    Args:
        envelope: Raw resource from the Mode API
        name: Relation name

    Returns:
        ``envelope["_embedded"][name]["_embedded"][name]``, or an empty list
        when any level is missing, null or not a list
    """
    wrapper = get_embedded_value(envelope, name)
    if not isinstance(wrapper, dict):
        return []
    inner = wrapper.get("_embedded")
    items = inner.get(name) if isinstance(inner, dict) else None
    if not isinstance(items, list):
        return []
    return items


def get_link_href(envelope: Optional[Dict[str, Any]], name: str) -> Optional[str]:
    """Return ``_links[name].href`` or None."""
    links = (envelope or {}).get("_links") or {}
    link = links.get(name) or {}
    return link.get("href")
