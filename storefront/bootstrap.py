"""Startup sequence: schema, admin account, content and catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.catalog.seed import SEED_SLUGS, seed_products
from storefront.catalog.sync import SyncResult, sync_catalog
from storefront.config import settings
from storefront.content.store import ContentStore, content_store
from storefront.repo import admins as admins_repo
from storefront.repo import products as products_repo

startup_log = logging.getLogger("startup")


@dataclass(slots=True)
class StartupReport:
    db_ready: bool
    synced: bool = False
    seeded: int = 0
    content_migrated: bool = False


async def startup(
    *,
    engine: AsyncEngine | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    store: ContentStore | None = None,
    sync: Callable[[], Awaitable[SyncResult]] | None = None,
) -> StartupReport:
    """Prepare the database and catalog; failures are logged, never raised."""

    from storefront.db.session import async_engine, async_session_factory, init_db

    engine = engine or async_engine
    session_factory = session_factory or async_session_factory
    store = store or content_store
    sync = sync or (lambda: sync_catalog(session_factory=session_factory))

    if not await init_db(engine):
        startup_log.error("S1: database unavailable, skipping bootstrap")
        return StartupReport(db_ready=False)
    startup_log.info("S1: database ready")

    report = StartupReport(db_ready=True)
    try:
        async with session_factory() as session:
            if await admins_repo.ensure_default_admin(
                session, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD
            ):
                startup_log.info("S2: default admin created")
            await products_repo.ensure_sort_order(session)
    except Exception:
        startup_log.exception("S2: admin account or sort order setup failed")

    try:
        await store.ensure()
        report.content_migrated = await store.migrate()
    except Exception:
        startup_log.exception("S3: content setup failed")

    try:
        async with session_factory() as session:
            tagged = await products_repo.mark_seed_products(session, SEED_SLUGS)
            if tagged:
                startup_log.info("S4: tagged %s legacy seed products", tagged)
            existing = await products_repo.count(session)
    except Exception:
        startup_log.exception("S4: catalog inspection failed, skipping seed")
        return report

    if settings.CATALOG_SYNC_ON_START:
        result = await sync()
        report.synced = result.ok
        startup_log.info("S5: catalog sync ok=%s count=%s", result.ok, result.count)

    if not report.synced and existing == 0 and settings.SEED_PRODUCTS:
        try:
            async with session_factory() as session:
                report.seeded = await seed_products(session)
            startup_log.info("S6: seeded %s fallback products", report.seeded)
        except Exception:
            startup_log.exception("S6: seeding fallback products failed")

    return report


__all__ = ["StartupReport", "startup"]
