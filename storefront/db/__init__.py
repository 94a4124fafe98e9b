"""Database package."""

from .models import (
    SOURCE_CUSTOM,
    SOURCE_PROMONITOR,
    SOURCE_SEED,
    AdminUser,
    Base,
    Order,
    OrderItem,
    Product,
    ProductImage,
    SiteContent,
)

__all__ = [
    "SOURCE_CUSTOM",
    "SOURCE_PROMONITOR",
    "SOURCE_SEED",
    "AdminUser",
    "Base",
    "Order",
    "OrderItem",
    "Product",
    "ProductImage",
    "SiteContent",
]
