"""Editable site copy: defaults, override merging and persistence."""

from storefront.content.defaults import DEFAULT_SITE_CONTENT
from storefront.content.merge import UNSET, materialize, merge_content, sanitize_content

__all__ = ["DEFAULT_SITE_CONTENT", "UNSET", "materialize", "merge_content", "sanitize_content"]
