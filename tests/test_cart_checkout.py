from __future__ import annotations

import pytest
from sqlalchemy import select

from storefront.db.models import Order, OrderItem, Product
from storefront.errors import CheckoutValidationError
from storefront.repo import orders as orders_repo
from storefront.services.cart import Cart, clear_cart, get_cart, save_cart
from storefront.services.checkout import create_order


def _product(product_id: int, price_cents: int, name: str = "Skjerm") -> Product:
    return Product(
        id=product_id,
        name=name,
        slug=f"{name.lower()}-{product_id}",
        description="d",
        price_cents=price_cents,
        image_path="/images/monitor-placeholder.svg",
        source="custom",
    )


def test_cart_add_accumulates_and_totals():
    cart = Cart()
    cart.add(_product(1, 299900), 1)
    cart.add(_product(1, 299900), 2)
    cart.add(_product(2, 24900, "Kabel"), 0)

    assert cart.items[1].qty == 3
    assert cart.items[2].qty == 1
    assert cart.count == 4
    assert cart.totals() == (924600, 924600)


def test_cart_update_and_remove():
    cart = Cart()
    cart.add(_product(1, 1000))
    cart.add(_product(2, 500, "Kabel"))
    cart.add(_product(3, 200, "Etui"))

    cart.update_quantities({"1": "4", 2: 0})
    assert set(cart.items) == {1}
    assert cart.items[1].qty == 4

    cart.remove(1)
    assert cart.items == {}


def test_cart_storage_roundtrip_by_token():
    token = "cart-test-token"
    clear_cart(token)
    cart = get_cart(token)
    cart.add(_product(9, 59900, "Stativ"), 2)
    save_cart(token, cart)

    stored = get_cart(token)
    assert stored.items[9].name == "Stativ"
    assert stored.items[9].qty == 2
    assert get_cart("other-token").items == {}

    clear_cart(token)
    assert get_cart(token).items == {}


@pytest.mark.asyncio
async def test_create_order_snapshots_lines(memory_db):
    async with memory_db() as db:
        async with db.sessions() as session:
            cart = Cart()
            cart.add(_product(1, 299900), 2)
            cart.add(_product(2, 24900, "Kabel"), 1)

            order = await create_order(
                session,
                cart=cart,
                name="  Kari Nordmann ",
                email=" kari@example.no ",
                address=" Storgata 1, Oslo ",
            )

            assert order.id is not None
            assert order.name == "Kari Nordmann"
            assert order.email == "kari@example.no"
            assert order.total_cents == 624700

            items = await orders_repo.items_for(session, order.id)
            assert [(i.product_id, i.qty, i.price_cents, i.line_total_cents) for i in items] == [
                (1, 2, 299900, 599800),
                (2, 1, 24900, 24900),
            ]

            stats = await orders_repo.stats(session)
            assert stats.order_count == 1
            assert stats.revenue_cents == 624700
            assert [o.id for o in await orders_repo.list_recent(session)] == [order.id]


@pytest.mark.asyncio
async def test_create_order_requires_fields_and_items(memory_db):
    async with memory_db() as db:
        async with db.sessions() as session:
            with pytest.raises(CheckoutValidationError):
                await create_order(session, cart=Cart(), name="a", email="b", address="c")

            cart = Cart()
            cart.add(_product(1, 1000))
            with pytest.raises(CheckoutValidationError) as excinfo:
                await create_order(session, cart=cart, name="Kari", email="  ", address="Oslo")
            assert excinfo.value.message == "Fyll inn alle feltene i kassen."

            assert (await session.execute(select(Order))).scalars().all() == []
            assert (await session.execute(select(OrderItem))).scalars().all() == []
