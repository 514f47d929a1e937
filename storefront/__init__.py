"""Storefront client: shopping cart, checkout validation and order submission."""

__version__ = "1.0.0"
