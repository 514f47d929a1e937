"""Bookstore API: catalog browsing and integrity-checked order placement."""

__version__ = "1.0.0"
