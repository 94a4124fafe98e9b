from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import (
    SOURCE_CUSTOM,
    SOURCE_PROMONITOR,
    SOURCE_SEED,
    Product,
    ProductImage,
)
from storefront.errors import ProductValidationError
from storefront.utils.money import parse_price_to_cents
from storefront.utils.slugs import base_slug

log = logging.getLogger("catalog")

PLACEHOLDER_IMAGE = "/images/monitor-placeholder.svg"

SCOPE_PUBLIC = "public"
SCOPE_CUSTOM = "custom"
SCOPE_OFFERS = "offers"

_PUBLIC_SOURCES = (SOURCE_CUSTOM, SOURCE_SEED, SOURCE_PROMONITOR)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def public_filter():
    return or_(Product.source.is_(None), Product.source.in_(_PUBLIC_SOURCES))


def custom_filter():
    return or_(Product.source.is_(None), Product.source == SOURCE_CUSTOM)


def _ordered(stmt):
    return stmt.order_by(Product.sort_order.asc(), Product.updated_at.desc(), Product.id.asc())


async def list_products(session: AsyncSession, scope: str = SCOPE_PUBLIC) -> Sequence[Product]:
    """Products for a listing, in admin-defined order.

    ``public`` is everything visitors may see, ``custom`` is what the admin
    manages by hand and ``offers`` is the featured subset of ``custom``.
    """

    stmt = select(Product)
    if scope == SCOPE_PUBLIC:
        stmt = stmt.where(public_filter())
    elif scope == SCOPE_CUSTOM:
        stmt = stmt.where(custom_filter())
    elif scope == SCOPE_OFFERS:
        stmt = stmt.where(custom_filter(), Product.is_featured.is_(True))
    else:
        raise ValueError(f"unknown product scope: {scope}")
    result = await session.execute(_ordered(stmt))
    return result.scalars().all()


async def get(session: AsyncSession, product_id: int) -> Optional[Product]:
    return await session.get(Product, product_id)


async def get_public(session: AsyncSession, product_id: int) -> Optional[Product]:
    stmt = select(Product).where(Product.id == product_id, public_filter())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_by_slug(session: AsyncSession, slug: str) -> Optional[Product]:
    stmt = select(Product).where(Product.slug == slug, public_filter())
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(Product.id)))
    return int(result.scalar_one())


async def find_by_keys(
    session: AsyncSession, keys: Iterable[tuple[str, Any]]
) -> Optional[Product]:
    """Return the first product matching one of the ordered ``(column, value)`` keys.

    Keys with a ``None`` value are skipped, so callers can pass every
    candidate and let the first present one win.
    """

    for column, value in keys:
        if value is None:
            continue
        stmt = select(Product).where(getattr(Product, column) == value).limit(1)
        result = await session.execute(stmt)
        product = result.scalars().first()
        if product is not None:
            return product
    return None


async def slug_taken(session: AsyncSession, slug: str, product_id: int | None = None) -> bool:
    stmt = select(Product.id).where(Product.slug == slug)
    if product_id is not None:
        stmt = stmt.where(Product.id != product_id)
    result = await session.execute(stmt.limit(1))
    return result.first() is not None


async def generate_unique_slug(
    session: AsyncSession, name: str, product_id: int | None = None
) -> str:
    base = base_slug(name)
    slug = base
    counter = 1
    while await slug_taken(session, slug, product_id):
        counter += 1
        slug = f"{base}-{counter}"
    return slug


async def max_sort_order(session: AsyncSession) -> int:
    result = await session.execute(select(func.max(Product.sort_order)))
    return int(result.scalar_one_or_none() or 0)


async def ensure_sort_order(session: AsyncSession) -> int:
    """Give every product without a position one after the current maximum."""

    stmt = (
        select(Product)
        .where(Product.sort_order.is_(None))
        .order_by(Product.created_at.asc(), Product.id.asc())
    )
    result = await session.execute(stmt)
    pending = result.scalars().all()
    if not pending:
        return 0
    next_order = await max_sort_order(session)
    for product in pending:
        next_order += 1
        product.sort_order = next_order
    await session.commit()
    log.info("catalog: backfilled sort order for %s products", len(pending))
    return len(pending)


def parse_order_param(raw: str | None) -> list[int]:
    """Turn ``"2,3,1"`` into ``[2, 3, 1]``, dropping anything that is not an integer."""

    ids: list[int] = []
    for chunk in (raw or "").split(","):
        chunk = chunk.strip()
        try:
            ids.append(int(chunk))
        except ValueError:
            continue
    return ids


async def reorder_products(session: AsyncSession, product_ids: Sequence[int]) -> bool:
    """Assign positions ``1..N`` in the given order as one transaction.

    On any failure the whole batch is rolled back and ``False`` is returned.
    """

    if not product_ids:
        return False
    try:
        for index, product_id in enumerate(product_ids, start=1):
            await session.execute(
                update(Product).where(Product.id == product_id).values(sort_order=index)
            )
        await session.commit()
    except Exception:
        await session.rollback()
        log.exception("catalog: reorder failed, nothing changed")
        return False
    return True


@dataclass(slots=True)
class ProductInput:
    """Validated admin product form."""

    name: str
    description: str
    price_cents: int
    is_featured: bool = False
    image_url: str = ""
    gallery_paths: list[str] = field(default_factory=list)

    @classmethod
    def parse(
        cls,
        data: Mapping[str, Any],
        *,
        gallery_paths: Iterable[str] = (),
    ) -> "ProductInput":
        name = str(data.get("name") or "").strip()
        description = str(data.get("description") or "").strip()
        price_cents = parse_price_to_cents(data.get("price"))
        if not name or not description or price_cents is None:
            raise ProductValidationError("Fyll inn produktnavn, beskrivelse og pris.")
        return cls(
            name=name,
            description=description,
            price_cents=price_cents,
            is_featured=bool(data.get("is_featured")),
            image_url=str(data.get("image_url") or "").strip(),
            gallery_paths=list(gallery_paths),
        )

    def main_image(self) -> str:
        """Image for a new product; consumes the first gallery path when used."""

        if self.image_url:
            return self.image_url
        if self.gallery_paths:
            return self.gallery_paths.pop(0)
        return PLACEHOLDER_IMAGE


async def create_product(session: AsyncSession, data: ProductInput) -> Product:
    now = _now()
    product = Product(
        name=data.name,
        slug=await generate_unique_slug(session, data.name),
        description=data.description,
        price_cents=data.price_cents,
        image_path=data.main_image(),
        is_featured=data.is_featured,
        source=SOURCE_CUSTOM,
        sort_order=await max_sort_order(session) + 1,
        created_at=now,
        updated_at=now,
    )
    session.add(product)
    await session.flush()
    await add_product_images(session, product.id, data.gallery_paths)
    await session.commit()
    return product


async def update_product(session: AsyncSession, product: Product, data: ProductInput) -> Product:
    product.name = data.name
    product.slug = await generate_unique_slug(session, data.name, product.id)
    product.description = data.description
    product.price_cents = data.price_cents
    product.image_path = data.image_url or product.image_path
    product.is_featured = data.is_featured
    product.updated_at = _now()
    await session.flush()
    await add_product_images(session, product.id, data.gallery_paths)
    await session.commit()
    return product


async def delete_product(session: AsyncSession, product_id: int) -> bool:
    await session.execute(delete(ProductImage).where(ProductImage.product_id == product_id))
    result = await session.execute(delete(Product).where(Product.id == product_id))
    await session.commit()
    return bool(result.rowcount)


async def delete_products_where(session: AsyncSession, *criteria) -> int:
    """Delete matching products together with their gallery rows."""

    ids_stmt = select(Product.id).where(*criteria)
    await session.execute(delete(ProductImage).where(ProductImage.product_id.in_(ids_stmt)))
    result = await session.execute(delete(Product).where(*criteria))
    return int(result.rowcount or 0)


async def mark_seed_products(session: AsyncSession, slugs: Iterable[str]) -> int:
    """Tag untagged rows that carry a known seed slug as ``seed``."""

    slugs = list(slugs)
    if not slugs:
        return 0
    result = await session.execute(
        update(Product)
        .where(Product.source.is_(None), Product.slug.in_(slugs))
        .values(source=SOURCE_SEED)
    )
    await session.commit()
    return int(result.rowcount or 0)


async def list_product_images(session: AsyncSession, product_id: int) -> Sequence[ProductImage]:
    stmt = (
        select(ProductImage)
        .where(ProductImage.product_id == product_id)
        .order_by(ProductImage.sort_order.asc(), ProductImage.id.asc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def add_product_images(
    session: AsyncSession, product_id: int, image_paths: Iterable[str]
) -> list[ProductImage]:
    image_paths = [path for path in image_paths if path]
    if not image_paths:
        return []
    result = await session.execute(
        select(func.max(ProductImage.sort_order)).where(ProductImage.product_id == product_id)
    )
    next_order = int(result.scalar_one_or_none() or 0)
    now = _now()
    images = []
    for path in image_paths:
        next_order += 1
        images.append(
            ProductImage(product_id=product_id, image_path=path, sort_order=next_order, created_at=now)
        )
    session.add_all(images)
    await session.flush()
    return images


async def product_gallery(session: AsyncSession, product: Product) -> list[str]:
    """Main image first, then the extra images, without duplicates."""

    paths = [product.image_path] + [image.image_path for image in await list_product_images(session, product.id)]
    gallery: list[str] = []
    for path in paths:
        if path and path not in gallery:
            gallery.append(path)
    return gallery


async def delete_product_image(session: AsyncSession, product_id: int, image_id: int) -> bool:
    """Remove one gallery image; a deleted main image is replaced by the next one."""

    stmt = select(ProductImage).where(ProductImage.id == image_id, ProductImage.product_id == product_id)
    result = await session.execute(stmt)
    image = result.scalar_one_or_none()
    if image is None:
        return False

    removed_path = image.image_path
    await session.delete(image)
    await session.flush()

    product = await session.get(Product, product_id)
    if product is not None and product.image_path == removed_path:
        remaining = await list_product_images(session, product_id)
        product.image_path = remaining[0].image_path if remaining else PLACEHOLDER_IMAGE
    await session.commit()
    return True


__all__ = [
    "PLACEHOLDER_IMAGE",
    "ProductInput",
    "SCOPE_CUSTOM",
    "SCOPE_OFFERS",
    "SCOPE_PUBLIC",
    "add_product_images",
    "count",
    "create_product",
    "custom_filter",
    "delete_product",
    "delete_product_image",
    "delete_products_where",
    "ensure_sort_order",
    "find_by_keys",
    "generate_unique_slug",
    "get",
    "get_by_slug",
    "get_public",
    "list_product_images",
    "list_products",
    "mark_seed_products",
    "max_sort_order",
    "parse_order_param",
    "product_gallery",
    "public_filter",
    "reorder_products",
    "update_product",
]
