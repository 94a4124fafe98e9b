"""Live per-collection product lists from the remote storefront."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from storefront.catalog.feed import feed_url, fetch_products, first_image, first_price
from storefront.config import settings
from storefront.http_client import AsyncCircuitBreaker, async_http_client
from storefront.repo.products import PLACEHOLDER_IMAGE
from storefront.utils.text import to_absolute_url

log = logging.getLogger("catalog.collections")


@dataclass(slots=True)
class CollectionResult:
    ok: bool
    products: list[dict[str, Any]] = field(default_factory=list)
    disabled: bool = False


def collection_path(handle: str) -> str:
    return f"/collections/{quote(handle, safe='')}/products.json?limit=250"


def _card(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": item.get("id"),
        "name": item.get("title"),
        "slug": item.get("handle"),
        "price_cents": first_price(item),
        "image_path": to_absolute_url(first_image(item, PLACEHOLDER_IMAGE), settings.CATALOG_BASE_URL),
    }


async def fetch_collection_products(
    handle: str,
    *,
    client: httpx.AsyncClient | None = None,
    circuit_breaker: AsyncCircuitBreaker | None = None,
) -> CollectionResult:
    if not settings.CATALOG_COLLECTIONS_ENABLED:
        return CollectionResult(ok=False, disabled=True)

    try:
        async with AsyncExitStack() as stack:
            if client is None:
                client = await stack.enter_async_context(async_http_client())
            items = await fetch_products(client, feed_url(collection_path(handle)), circuit_breaker)
    except Exception:
        log.exception("collections: fetch failed for %s", handle)
        return CollectionResult(ok=False)
    return CollectionResult(ok=True, products=[_card(item) for item in items])


__all__ = ["CollectionResult", "collection_path", "fetch_collection_products"]
