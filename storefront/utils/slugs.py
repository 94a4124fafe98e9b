"""Slug derivation for product names and collection handles."""

from __future__ import annotations

from slugify import slugify

# Applied after lowercasing so that "Æ" and "æ" resolve the same way. The
# comma rule keeps decimal sizes such as 15,6 apart; slugify would join them.
NORWEGIAN_REPLACEMENTS = [["æ", "ae"], ["ø", "o"], ["å", "aa"], [",", "-"]]
FALLBACK_SLUG = "item"


def slugify_name(value: str | None) -> str:
    """Return an ASCII slug, or an empty string when nothing survives."""

    if not value:
        return ""
    return slugify(value.lower().strip(), lowercase=True, replacements=NORWEGIAN_REPLACEMENTS)


def base_slug(value: str | None) -> str:
    return slugify_name(value) or FALLBACK_SLUG


__all__ = ["FALLBACK_SLUG", "NORWEGIAN_REPLACEMENTS", "base_slug", "slugify_name"]
