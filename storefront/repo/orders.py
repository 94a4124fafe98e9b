from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import Order, OrderItem, Product


@dataclass(slots=True)
class StoreStats:
    product_count: int
    order_count: int
    revenue_cents: int


async def get(session: AsyncSession, order_id: int) -> Optional[Order]:
    return await session.get(Order, order_id)


async def list_recent(session: AsyncSession, limit: int | None = None) -> Sequence[Order]:
    stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await session.execute(stmt)
    return result.scalars().all()


async def items_for(session: AsyncSession, order_id: int) -> Sequence[OrderItem]:
    stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    result = await session.execute(stmt)
    return result.scalars().all()


async def stats(session: AsyncSession) -> StoreStats:
    products = await session.execute(select(func.count(Product.id)))
    orders = await session.execute(select(func.count(Order.id), func.coalesce(func.sum(Order.total_cents), 0)))
    order_count, revenue = orders.one()
    return StoreStats(
        product_count=int(products.scalar_one()),
        order_count=int(order_count),
        revenue_cents=int(revenue),
    )
