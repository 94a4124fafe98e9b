from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import AdminUser

log = logging.getLogger("admin")

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        log.warning("admin: stored password hash is malformed")
        return False


async def get_by_email(session: AsyncSession, email: str) -> Optional[AdminUser]:
    stmt = select(AdminUser).where(AdminUser.email == email.strip().lower())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def ensure_default_admin(session: AsyncSession, email: str, password: str) -> bool:
    """Create the bootstrap admin account once. Returns ``True`` if it was created."""

    if not email or not password:
        return False
    if await get_by_email(session, email) is not None:
        return False
    session.add(
        AdminUser(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            created_at=datetime.now(timezone.utc),
        )
    )
    await session.commit()
    log.info("admin: default account created")
    return True


async def verify_admin(session: AsyncSession, email: str, password: str) -> Optional[AdminUser]:
    if not email or not password:
        return None
    admin = await get_by_email(session, email)
    if admin is None or not check_password(password, admin.password_hash):
        return None
    return admin
