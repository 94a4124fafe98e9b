"""Persistence of the single site-content document."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from storefront.content.defaults import DEFAULT_SITE_CONTENT
from storefront.content.merge import materialize, sanitize_content
from storefront.content.migrations import apply_rewrites
from storefront.db.models import SiteContent

log = logging.getLogger("content")

CONTENT_ROW_ID = 1


class ContentCache:
    """Holds the last materialized document for this process."""

    def __init__(self) -> None:
        self._value: dict[str, Any] | None = None

    def get(self) -> dict[str, Any] | None:
        return self._value

    def set(self, value: dict[str, Any]) -> None:
        self._value = value

    def invalidate(self) -> None:
        self._value = None


class ContentStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        engine: AsyncEngine | None = None,
        cache: ContentCache | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine
        self.cache = cache or ContentCache()

    def _sessions(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            from storefront.db.session import async_session_factory

            self._session_factory = async_session_factory
        return self._session_factory

    def _bind(self) -> AsyncEngine:
        if self._engine is None:
            from storefront.db.session import async_engine

            self._engine = async_engine
        return self._engine

    async def ensure(self) -> None:
        """Create the table and the default row when they are missing."""

        async with self._bind().begin() as connection:
            await connection.run_sync(SiteContent.__table__.create, checkfirst=True)

        async with self._sessions()() as session:
            row = await session.get(SiteContent, CONTENT_ROW_ID)
            if row is not None:
                return
            default = deepcopy(DEFAULT_SITE_CONTENT)
            session.add(
                SiteContent(
                    id=CONTENT_ROW_ID,
                    content_json=json.dumps(default, ensure_ascii=False),
                    updated_at=datetime.now(timezone.utc),
                )
            )
            await session.commit()
            self.cache.set(default)
            log.info("content: default document stored")

    async def _load(self) -> dict[str, Any]:
        async with self._sessions()() as session:
            row = await session.get(SiteContent, CONTENT_ROW_ID)
        if row is None:
            return materialize({})
        try:
            stored = json.loads(row.content_json)
        except (TypeError, ValueError):
            log.exception("content: stored document is not valid JSON, serving defaults")
            return sanitize_content(deepcopy(DEFAULT_SITE_CONTENT))
        return materialize(stored)

    async def get(self) -> dict[str, Any]:
        cached = self.cache.get()
        if cached is None:
            cached = await self._load()
            self.cache.set(cached)
        return deepcopy(cached)

    async def save(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Store ``doc`` merged onto the defaults and return the stored result.

        Anything ``doc`` leaves out falls back to the shipped defaults, not to
        the previously stored document.
        """

        merged = materialize(doc)
        async with self._sessions()() as session:
            row = await session.get(SiteContent, CONTENT_ROW_ID)
            payload = json.dumps(merged, ensure_ascii=False)
            now = datetime.now(timezone.utc)
            if row is None:
                session.add(SiteContent(id=CONTENT_ROW_ID, content_json=payload, updated_at=now))
            else:
                row.content_json = payload
                row.updated_at = now
            await session.commit()
        self.cache.set(merged)
        log.info("content: document saved")
        return deepcopy(merged)

    async def migrate(self) -> bool:
        current = await self.get()
        if not apply_rewrites(current):
            return False
        await self.save(current)
        log.info("content: legacy copy migrated")
        return True


def collection_by_handle(content: dict[str, Any], handle: str) -> dict[str, Any] | None:
    for collection in content.get("collections") or []:
        if isinstance(collection, dict) and collection.get("handle") == handle:
            return collection
    return None


content_store = ContentStore()


__all__ = ["ContentCache", "ContentStore", "collection_by_handle", "content_store"]
