"""Reconcile local products with the remote catalog feed."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.catalog.feed import FeedProduct, feed_url, fetch_products, project
from storefront.config import settings
from storefront.db.models import SOURCE_PROMONITOR, SOURCE_SEED, Product
from storefront.http_client import AsyncCircuitBreaker, CircuitBreakerOpenError, async_http_client
from storefront.repo import products as products_repo

log = logging.getLogger("catalog.sync")


@dataclass(frozen=True, slots=True)
class SyncResult:
    ok: bool
    count: int = 0


async def _featured_handles(
    client: httpx.AsyncClient, circuit_breaker: AsyncCircuitBreaker | None
) -> set[str]:
    try:
        items = await fetch_products(client, feed_url(settings.CATALOG_FEATURED_PATH), circuit_breaker)
    except (httpx.HTTPError, CircuitBreakerOpenError, ValueError) as exc:
        log.warning("sync: featured feed unavailable, nothing will be featured: %s", exc)
        return set()
    return {item["handle"] for item in items if item.get("handle")}


def _apply(product: Product, row: FeedProduct) -> None:
    product.name = row.name
    product.slug = row.slug
    product.description = row.description
    product.price_cents = row.price_cents
    product.image_path = row.image_path
    product.is_featured = row.is_featured
    product.updated_at = row.updated_at
    product.source = SOURCE_PROMONITOR
    product.external_id = row.external_id


async def _upsert(session: AsyncSession, row: FeedProduct, next_sort_order: int) -> bool:
    """Write one feed row; returns ``True`` when a new product was inserted."""

    existing = await products_repo.find_by_keys(
        session, [("external_id", row.external_id), ("slug", row.slug)]
    )
    if existing is not None:
        _apply(existing, row)
        await session.commit()
        return False

    product = Product(created_at=row.created_at, sort_order=next_sort_order)
    _apply(product, row)
    session.add(product)
    await session.commit()
    return True


async def reconcile(session: AsyncSession, items: list[dict[str, Any]], featured: set[str]) -> int:
    """Upsert ``items`` one row at a time, then drop stale synced and seed rows."""

    next_sort_order = await products_repo.max_sort_order(session)
    seen: list[int] = []
    for item in items:
        row = project(item, featured)
        if row.external_id is not None:
            seen.append(row.external_id)
        if await _upsert(session, row, next_sort_order + 1):
            next_sort_order += 1

    if seen:
        removed = await products_repo.delete_products_where(
            session,
            Product.source == SOURCE_PROMONITOR,
            Product.external_id.not_in(seen),
        )
        if removed:
            log.info("sync: removed %s products no longer in the feed", removed)
    await products_repo.delete_products_where(session, Product.source == SOURCE_SEED)
    await session.commit()
    return len(items)


async def sync_catalog(
    *,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    client: httpx.AsyncClient | None = None,
    circuit_breaker: AsyncCircuitBreaker | None = None,
) -> SyncResult:
    """Pull the remote feed into the local catalog. Never raises."""

    if session_factory is None:
        from storefront.db.session import async_session_factory

        session_factory = async_session_factory

    try:
        async with AsyncExitStack() as stack:
            if client is None:
                client = await stack.enter_async_context(async_http_client())
            items, featured = await asyncio.gather(
                fetch_products(client, feed_url(settings.CATALOG_PRODUCTS_PATH), circuit_breaker),
                _featured_handles(client, circuit_breaker),
            )
            async with session_factory() as session:
                count = await reconcile(session, items, featured)
    except Exception:
        log.exception("sync: catalog sync failed")
        return SyncResult(ok=False, count=0)

    log.info("sync: %s products synced, %s featured", count, len(featured))
    return SyncResult(ok=True, count=count)


__all__ = ["SyncResult", "reconcile", "sync_catalog"]
