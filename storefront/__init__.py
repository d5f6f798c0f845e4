"""Storefront: product catalog, auth gate and a persistent shopping cart."""

__version__ = "0.1.0"
