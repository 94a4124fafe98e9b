"""Turning a cart into a stored order."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import Order, OrderItem
from storefront.errors import CheckoutValidationError
from storefront.services.cart import Cart

log = logging.getLogger("checkout")

MISSING_FIELDS_MESSAGE = "Fyll inn alle feltene i kassen."
EMPTY_CART_MESSAGE = "Handlekurven er tom."


async def create_order(
    session: AsyncSession,
    *,
    cart: Cart,
    name: str | None,
    email: str | None,
    address: str | None,
) -> Order:
    """Persist the cart as an order with snapshotted lines and return it."""

    if not cart.items:
        raise CheckoutValidationError(EMPTY_CART_MESSAGE)

    name = (name or "").strip()
    email = (email or "").strip()
    address = (address or "").strip()
    if not name or not email or not address:
        raise CheckoutValidationError(MISSING_FIELDS_MESSAGE)

    _, total = cart.totals()
    order = Order(
        name=name,
        email=email,
        address=address,
        total_cents=total,
        created_at=datetime.now(timezone.utc),
    )
    session.add(order)
    await session.flush()

    session.add_all(
        OrderItem(
            order_id=order.id,
            product_id=item.id,
            name=item.name,
            price_cents=item.price_cents,
            qty=item.qty,
            line_total_cents=item.line_total_cents,
        )
        for item in cart.items.values()
    )
    await session.commit()
    log.info("checkout: order %s placed for %s (%s items)", order.id, email, len(cart.items))
    return order


__all__ = ["create_order"]
