"""Rewrites for copy that older releases stored and later renamed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ContentRewrite:
    path: tuple[str, ...]
    old: Any
    new: Any


CONTENT_REWRITES: tuple[ContentRewrite, ...] = (
    ContentRewrite(("shop", "header", "eyebrow"), "Butikk", "Tilbud"),
    ContentRewrite(("products_page", "header", "eyebrow"), "Butikk", "Produkter"),
    ContentRewrite(("collections_page", "cta", "primary_cta", "label"), "Gå til butikk", "Gå til tilbud"),
)


def apply_rewrites(doc: dict[str, Any], rewrites=CONTENT_REWRITES) -> bool:
    """Replace values equal to a rule's ``old`` value in place.

    Returns ``True`` when at least one value changed.
    """

    changed = False
    for rule in rewrites:
        parent: Any = doc
        for key in rule.path[:-1]:
            parent = parent.get(key) if isinstance(parent, dict) else None
        if not isinstance(parent, dict):
            continue
        leaf = rule.path[-1]
        if parent.get(leaf) == rule.old:
            parent[leaf] = rule.new
            changed = True
    return changed


__all__ = ["CONTENT_REWRITES", "ContentRewrite", "apply_rewrites"]
