"""Fetching and projecting the remote storefront's JSON product feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Collection

import httpx

from storefront.config import settings
from storefront.http_client import AsyncCircuitBreaker, breaker_from_settings, get_with_settings
from storefront.utils.money import parse_price_to_cents
from storefront.utils.slugs import base_slug
from storefront.utils.text import strip_html, to_absolute_url

log = logging.getLogger("catalog.feed")

SYNC_PLACEHOLDER_IMAGE = "/images/mission-patch.svg"

CATALOG_CIRCUIT_BREAKER = breaker_from_settings("catalog")


@dataclass(slots=True)
class FeedProduct:
    external_id: int | None
    name: str
    slug: str
    description: str
    price_cents: int
    image_path: str
    is_featured: bool
    created_at: datetime
    updated_at: datetime


def feed_url(path: str) -> str:
    return f"{settings.CATALOG_BASE_URL}{path}"


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            log.debug("feed: unparseable timestamp %r", value)
        else:
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)


def _external_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def first_image(item: dict[str, Any], placeholder: str) -> str:
    images = item.get("images") or []
    if images and isinstance(images[0], dict) and images[0].get("src"):
        return images[0]["src"]
    image = item.get("image")
    if isinstance(image, dict) and image.get("src"):
        return image["src"]
    return placeholder


def first_price(item: dict[str, Any]) -> int:
    variants = item.get("variants") or []
    price = variants[0].get("price") if variants and isinstance(variants[0], dict) else None
    cents = parse_price_to_cents(price)
    return cents if cents is not None else 0


def project(
    item: dict[str, Any],
    featured_handles: Collection[str] = frozenset(),
    *,
    placeholder: str = SYNC_PLACEHOLDER_IMAGE,
) -> FeedProduct:
    """Map one feed entry onto the local product columns."""

    name = str(item.get("title") or "")
    handle = item.get("handle") or base_slug(name)
    return FeedProduct(
        external_id=_external_id(item.get("id")),
        name=name,
        slug=handle,
        description=strip_html(item.get("body_html")) or name,
        price_cents=first_price(item),
        image_path=to_absolute_url(first_image(item, placeholder), settings.CATALOG_BASE_URL),
        is_featured=handle in featured_handles,
        created_at=parse_timestamp(item.get("created_at")),
        updated_at=parse_timestamp(item.get("updated_at")),
    )


async def fetch_products(
    client: httpx.AsyncClient,
    url: str,
    circuit_breaker: AsyncCircuitBreaker | None = None,
) -> list[dict[str, Any]]:
    """Return the ``products`` array of a feed; raises on non-2xx or bad JSON."""

    response = await get_with_settings(client, url, circuit_breaker or CATALOG_CIRCUIT_BREAKER)
    response.raise_for_status()
    payload = response.json()
    products = payload.get("products") if isinstance(payload, dict) else None
    return [item for item in products or [] if isinstance(item, dict)]


__all__ = [
    "CATALOG_CIRCUIT_BREAKER",
    "FeedProduct",
    "SYNC_PLACEHOLDER_IMAGE",
    "feed_url",
    "fetch_products",
    "first_image",
    "parse_timestamp",
    "project",
]
