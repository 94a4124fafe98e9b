"""Per-visitor shopping carts kept in process memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from storefront.db.models import Product


@dataclass(slots=True)
class CartItem:
    id: int
    name: str
    price_cents: int
    image_path: str | None = None
    qty: int = 1

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.qty

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price_cents": self.price_cents,
            "image_path": self.image_path,
            "qty": self.qty,
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "CartItem":
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            price_cents=int(data.get("price_cents", 0)),
            image_path=data.get("image_path"),
            qty=int(data.get("qty", 1)),
        )


@dataclass
class Cart:
    items: dict[int, CartItem] = field(default_factory=dict)

    def add(self, product: Product, qty: int = 1) -> CartItem:
        """Add ``qty`` (at least one) of ``product``; repeated adds accumulate."""

        qty = max(int(qty or 1), 1)
        existing = self.items.get(product.id)
        if existing:
            existing.qty += qty
            return existing
        item = CartItem(
            id=product.id,
            name=product.name,
            price_cents=product.price_cents,
            image_path=product.image_path,
            qty=qty,
        )
        self.items[product.id] = item
        return item

    def update_quantities(self, quantities: Mapping[Any, Any]) -> None:
        """Set new quantities; items with a missing, zero or negative quantity are removed."""

        for product_id in list(self.items):
            raw = quantities.get(product_id, quantities.get(str(product_id)))
            try:
                qty = int(raw)
            except (TypeError, ValueError):
                qty = 0
            if qty <= 0:
                del self.items[product_id]
            else:
                self.items[product_id].qty = qty

    def remove(self, product_id: int) -> None:
        self.items.pop(int(product_id), None)

    def clear(self) -> None:
        self.items.clear()

    @property
    def count(self) -> int:
        return sum(item.qty for item in self.items.values())

    def totals(self) -> tuple[int, int]:
        subtotal = sum(item.line_total_cents for item in self.items.values())
        return subtotal, subtotal

    def to_payload(self) -> dict[str, Any]:
        subtotal, total = self.totals()
        return {
            "items": [item.to_payload() for item in self.items.values()],
            "count": self.count,
            "subtotal_cents": subtotal,
            "total_cents": total,
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Cart":
        items: dict[int, CartItem] = {}
        for raw in data.get("items") or []:
            item = CartItem.from_payload(raw)
            items[item.id] = item
        return cls(items=items)


class CartStorage:
    """Carts keyed by the visitor's cart token."""

    def __init__(self) -> None:
        self._local: dict[str, dict[str, Any]] = {}

    def get(self, token: str) -> Cart:
        payload = self._local.get(token)
        if payload is None:
            return Cart()
        return Cart.from_payload(payload)

    def set(self, token: str, cart: Cart) -> None:
        self._local[token] = cart.to_payload()

    def clear(self, token: str) -> None:
        self._local.pop(token, None)


_CART = CartStorage()


def get_cart(token: str) -> Cart:
    return _CART.get(token)


def save_cart(token: str, cart: Cart) -> None:
    _CART.set(token, cart)


def clear_cart(token: str) -> None:
    _CART.clear(token)


__all__ = ["Cart", "CartItem", "CartStorage", "clear_cart", "get_cart", "save_cart"]
