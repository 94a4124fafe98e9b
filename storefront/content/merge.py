"""Default-filling deep merge and list normalization for site content."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping

from storefront.content.defaults import DEFAULT_SITE_CONTENT


class _Unset:
    """Marker for override values that mean "leave the base alone"."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

# Paths that renderers iterate over; they must always hold lists.
LIST_PATHS: tuple[tuple[str, ...], ...] = (
    ("home", "specs", "items"),
    ("hero", "meta"),
    ("timeline",),
    ("benefits",),
    ("collections",),
)


def _is_document(value: Any) -> bool:
    return isinstance(value, (Mapping, list))


def merge_content(base: Any, override: Any) -> Any:
    """Merge ``override`` onto ``base`` and return a new document.

    Mappings merge key by key and recursively, lists are replaced wholesale,
    and scalars (``None`` included) replace whatever the base held. Keys set to
    :data:`UNSET` are skipped, so the base value survives.
    """

    if override is None or not _is_document(override):
        return deepcopy(base)

    if isinstance(base, list):
        return deepcopy(override) if isinstance(override, list) else deepcopy(base)

    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        return deepcopy(base)

    result = {key: deepcopy(value) for key, value in base.items()}
    for key, value in override.items():
        if value is UNSET:
            continue
        current = base.get(key)
        if isinstance(value, list):
            result[key] = deepcopy(value)
        elif isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = merge_content(current, value)
        else:
            result[key] = deepcopy(value)
    return result


def sanitize_content(doc: dict[str, Any]) -> dict[str, Any]:
    """Force every path in :data:`LIST_PATHS` to be a list, in place.

    Parents on the way that are missing or not mappings become empty mappings.
    """

    for path in LIST_PATHS:
        parent = doc
        for key in path[:-1]:
            child = parent.get(key)
            if not isinstance(child, dict):
                child = {}
                parent[key] = child
            parent = child
        leaf = path[-1]
        if not isinstance(parent.get(leaf), list):
            parent[leaf] = []
    return doc


def materialize(doc: Any) -> dict[str, Any]:
    """Return the complete content document for a stored or submitted override."""

    return sanitize_content(merge_content(DEFAULT_SITE_CONTENT, doc or {}))


__all__ = ["LIST_PATHS", "UNSET", "materialize", "merge_content", "sanitize_content"]
