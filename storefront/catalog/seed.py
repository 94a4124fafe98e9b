"""Fallback products used when the remote feed is not synced."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import SOURCE_SEED, Product
from storefront.repo import products as products_repo
from storefront.repo.products import PLACEHOLDER_IMAGE

log = logging.getLogger("catalog.seed")

SEED_PRODUCTS: tuple[dict, ...] = (
    {
        "name": 'Bærbar skjerm 14"',
        "description": "Ekstra skjerm som pakkes flatt og kobles til med USB-C.",
        "price_cents": 299900,
        "is_featured": True,
    },
    {
        "name": 'Bærbar skjerm 16"',
        "description": "Stor arbeidsflate for kreative oppgaver og multitasking.",
        "price_cents": 349900,
        "is_featured": True,
    },
    {
        "name": "Dobbelt skjermsett",
        "description": "To skjermer som festes rundt laptopen for ekstra arbeidsflate.",
        "price_cents": 449000,
        "is_featured": True,
    },
    {
        "name": "Trippel skjermsett",
        "description": "Jobb på tre skjermer samtidig med fleksibel montering.",
        "price_cents": 499000,
        "is_featured": False,
    },
    {
        "name": "USB-C dokkingstasjon",
        "description": "Koble til skjerm, nettverk og lading med en dokkingstasjon.",
        "price_cents": 129900,
        "is_featured": False,
    },
    {
        "name": "HDMI-kabel 2 m",
        "description": "Solid kabel til ekstra skjermer og docking.",
        "price_cents": 24900,
        "is_featured": False,
    },
    {
        "name": "Magnetstativ",
        "description": "Stabilt stativ for bærbare skjermer og oppsett på farten.",
        "price_cents": 59900,
        "is_featured": False,
    },
    {
        "name": "Bæreetui",
        "description": "Beskyttende etui for sikker transport av skjerm.",
        "price_cents": 39900,
        "is_featured": False,
    },
)

# Slugs of SEED_PRODUCTS; rows created before the source column existed are
# recognised by these.
SEED_SLUGS: tuple[str, ...] = (
    "baerbar-skjerm-14",
    "baerbar-skjerm-16",
    "dobbelt-skjermsett",
    "trippel-skjermsett",
    "usb-c-dokkingstasjon",
    "hdmi-kabel-2-m",
    "magnetstativ",
    "baereetui",
)


async def seed_products(session: AsyncSession) -> int:
    next_sort_order = await products_repo.max_sort_order(session)
    for entry in SEED_PRODUCTS:
        next_sort_order += 1
        now = datetime.now(timezone.utc)
        session.add(
            Product(
                name=entry["name"],
                slug=await products_repo.generate_unique_slug(session, entry["name"]),
                description=entry["description"],
                price_cents=entry["price_cents"],
                image_path=PLACEHOLDER_IMAGE,
                is_featured=entry["is_featured"],
                source=SOURCE_SEED,
                sort_order=next_sort_order,
                created_at=now,
                updated_at=now,
            )
        )
        await session.flush()
    await session.commit()
    log.info("seed: inserted %s fallback products", len(SEED_PRODUCTS))
    return len(SEED_PRODUCTS)
