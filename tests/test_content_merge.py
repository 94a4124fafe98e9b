from __future__ import annotations

from copy import deepcopy

import pytest

from storefront.content.defaults import DEFAULT_SITE_CONTENT
from storefront.content.merge import UNSET, materialize, merge_content, sanitize_content


def _leaf_paths(doc, prefix=()):
    if isinstance(doc, dict):
        for key, value in doc.items():
            yield from _leaf_paths(value, prefix + (key,))
    else:
        yield prefix


def _lookup(doc, path):
    for key in path:
        doc = doc[key]
    return doc


def test_merge_fills_missing_keys_from_base():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    merged = merge_content(base, {"b": {"c": 20}})
    assert merged == {"a": 1, "b": {"c": 20, "d": 3}}
    assert base == {"a": 1, "b": {"c": 2, "d": 3}}


def test_merge_replaces_lists_wholesale():
    base = {"items": [{"title": "a", "detail": "x"}, {"title": "b"}]}
    merged = merge_content(base, {"items": [{"title": "only"}]})
    assert merged["items"] == [{"title": "only"}]


def test_merge_scalars_and_none_replace():
    base = {"title": "Hei", "nested": {"x": 1}}
    merged = merge_content(base, {"title": None, "nested": "flat", "extra": 5})
    assert merged == {"title": None, "nested": "flat", "extra": 5}


def test_merge_skips_unset_values():
    base = {"title": "Hei", "subtitle": "Der"}
    merged = merge_content(base, {"title": UNSET, "subtitle": "Ny"})
    assert merged == {"title": "Hei", "subtitle": "Ny"}


@pytest.mark.parametrize("override", [None, "text", 5])
def test_merge_non_document_override_returns_copy(override):
    base = {"a": {"b": 1}}
    merged = merge_content(base, override)
    assert merged == base
    assert merged is not base
    assert merged["a"] is not base["a"]


def test_merge_list_base():
    assert merge_content([1, 2], [3]) == [3]
    assert merge_content([1, 2], {"a": 1}) == [1, 2]
    assert merge_content({"a": 1}, [1]) == {"a": 1}


def test_merge_result_does_not_alias_override():
    override = {"hero": {"meta": ["a", "b"]}}
    merged = merge_content(DEFAULT_SITE_CONTENT, override)
    override["hero"]["meta"].append("c")
    assert merged["hero"]["meta"] == ["a", "b"]


def test_merge_is_idempotent():
    override = {"brand": "X", "hero": {"title": "T", "meta": ["m"]}, "timeline": []}
    once = merge_content(DEFAULT_SITE_CONTENT, override)
    twice = merge_content(once, override)
    assert once == twice


def test_materialize_contains_every_default_path():
    doc = materialize({"hero": {"title": "Ny tittel"}, "shop": {"header": {"eyebrow": "X"}}})
    for path in _leaf_paths(DEFAULT_SITE_CONTENT):
        _lookup(doc, path)
    assert doc["hero"]["title"] == "Ny tittel"
    assert doc["hero"]["primary_cta"] == DEFAULT_SITE_CONTENT["hero"]["primary_cta"]
    assert doc["shop"]["header"]["title"] == DEFAULT_SITE_CONTENT["shop"]["header"]["title"]


def test_materialize_does_not_mutate_defaults():
    snapshot = deepcopy(DEFAULT_SITE_CONTENT)
    doc = materialize({})
    doc["hero"]["meta"].append("extra")
    doc["collections"].clear()
    assert DEFAULT_SITE_CONTENT == snapshot


def test_sanitize_forces_lists():
    doc = {"hero": {"meta": "nope"}, "home": "broken", "timeline": {"a": 1}, "benefits": None}
    cleaned = sanitize_content(doc)
    assert cleaned["hero"]["meta"] == []
    assert cleaned["home"] == {"specs": {"items": []}}
    assert cleaned["timeline"] == []
    assert cleaned["benefits"] == []
    assert cleaned["collections"] == []


def test_sanitize_is_idempotent_and_keeps_lists():
    doc = materialize({})
    once = sanitize_content(deepcopy(doc))
    assert sanitize_content(deepcopy(once)) == once
    assert once["home"]["specs"]["items"] == DEFAULT_SITE_CONTENT["home"]["specs"]["items"]


def test_materialize_recovers_from_wrong_types():
    doc = materialize({"hero": {"meta": None}, "collections": "x"})
    assert doc["hero"]["meta"] == []
    assert doc["collections"] == []
