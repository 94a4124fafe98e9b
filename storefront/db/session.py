from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from storefront.config import settings
from storefront.db.models import Base

log = logging.getLogger("db")


def _ensure_sqlite_dir(db_url: str) -> None:
    if not db_url.startswith("sqlite"):
        return
    _, _, raw_path = db_url.partition("///")
    if not raw_path or raw_path.startswith(":memory:"):
        return
    db_path = Path(raw_path)
    directory = db_path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        log.info("DB: ensured sqlite dir %s", directory)
    except Exception:
        log.exception("DB: ensure sqlite dir failed")


_DB_URL = settings.DB_URL
_ensure_sqlite_dir(_DB_URL)

async_engine: AsyncEngine = create_async_engine(
    _DB_URL,
    echo=False,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    async_engine,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session_factory() as session:
        yield session


async def create_schema(engine: AsyncEngine | None = None) -> None:
    """Create every table that does not exist yet."""

    engine = engine or async_engine
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def init_db(engine: AsyncEngine | None = None) -> bool:
    """Check connectivity and create the schema; never raises."""

    db_url = settings.DB_URL
    log.info("DB: url=%s", db_url)

    _ensure_sqlite_dir(db_url)

    engine = engine or async_engine
    try:
        async with engine.begin() as connection:
            await connection.execute(text("SELECT 1"))
        log.info("DB: connectivity ok")
    except Exception:
        log.exception("DB: connectivity check failed")
        return False

    try:
        await create_schema(engine)
    except Exception:
        log.exception("DB: schema creation failed")
        return False

    log.info("DB: schema ready")
    return True
