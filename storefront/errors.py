"""Typed failures surfaced to the presentation layer."""

from __future__ import annotations


class StorefrontError(Exception):
    """Base class for user-facing storefront failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProductValidationError(StorefrontError):
    """Raised when a product form is missing name, description or price."""


class CheckoutValidationError(StorefrontError):
    """Raised when checkout fields are missing or the cart is empty."""


class UploadRejectedError(StorefrontError):
    """Raised for uploads with a forbidden type or size."""


class NotFoundError(StorefrontError):
    status_code = 404


__all__ = [
    "CheckoutValidationError",
    "NotFoundError",
    "ProductValidationError",
    "StorefrontError",
    "UploadRejectedError",
]
