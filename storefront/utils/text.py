"""Plain-text helpers for feed descriptions and URLs."""

from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")


def strip_html(value: str | None) -> str:
    """Remove tags, decode entities and collapse whitespace."""

    if not value:
        return ""
    stripped = _TAG_RE.sub(" ", value)
    return _WS_RE.sub(" ", html.unescape(stripped)).strip()


def to_absolute_url(url: str | None, base_url: str) -> str:
    """Resolve protocol-relative and root-relative URLs against ``base_url``."""

    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/"):
        return f"{base_url.rstrip('/')}{url}"
    return url


__all__ = ["strip_html", "to_absolute_url"]
