"""Storefront services: cart, checkout and uploads."""
