"""Normalization of admin content edits before they are merged and saved."""

from __future__ import annotations

from typing import Any, Iterable

from storefront.utils.slugs import slugify_name


def _trim(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        # null means "leave as is"; the defaults fill the gap on save
        return {key: _trim(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_trim(item) for item in value]
    return value


def _text(row: dict[str, Any], key: str) -> str:
    value = row.get(key)
    return value if isinstance(value, str) else ""


def _rows(value: Any, fields: Iterable[str], required: Iterable[str]) -> list[dict[str, str]]:
    fields = tuple(fields)
    required = tuple(required)
    rows = []
    for raw in value if isinstance(value, list) else []:
        if not isinstance(raw, dict):
            continue
        row = {field: _text(raw, field) for field in fields}
        if all(row[field] for field in required):
            rows.append(row)
    return rows


def _collections(value: Any) -> list[dict[str, str]]:
    rows = []
    for raw in value if isinstance(value, list) else []:
        if not isinstance(raw, dict):
            continue
        row = {field: _text(raw, field) for field in ("title", "subtitle", "handle", "pitch", "lead")}
        if not row["handle"] and row["title"]:
            row["handle"] = slugify_name(row["title"])
        if row["handle"]:
            rows.append(row)
    return rows


def clean_content_update(payload: dict[str, Any]) -> dict[str, Any]:
    """Return a trimmed copy of an admin edit with incomplete rows and nulls dropped.

    Only sections present in ``payload`` are touched, so the result can be
    merged onto the current document as a partial update.
    """

    update = _trim(payload or {})
    if not isinstance(update, dict):
        return {}

    hero = update.get("hero")
    if isinstance(hero, dict) and not hero.get("image"):
        hero.pop("image", None)
    if isinstance(hero, dict) and "meta" in hero:
        meta = hero["meta"] if isinstance(hero["meta"], list) else []
        hero["meta"] = [item for item in meta if isinstance(item, str) and item]

    specs = (update.get("home") or {}).get("specs") if isinstance(update.get("home"), dict) else None
    if isinstance(specs, dict) and "items" in specs:
        specs["items"] = _rows(specs["items"], ("value", "label", "detail"), ("value", "label"))

    if "timeline" in update:
        update["timeline"] = _rows(update["timeline"], ("title", "description", "detail"), ("title", "description"))
    if "benefits" in update:
        update["benefits"] = _rows(update["benefits"], ("title", "description"), ("title", "description"))
    if "collections" in update:
        update["collections"] = _collections(update["collections"])
    return update


__all__ = ["clean_content_update"]
