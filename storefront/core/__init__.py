# Core modules

from .config import Settings, get_settings
from .cart import CartItem, CartState, CartStore, calculate_totals, resolve_book_id
from .storage import (
    CART_STORAGE_KEY,
    CART_STORAGE_VERSION,
    CartPersistence,
    JSONFileStorage,
    KeyValueStorage,
    MemoryStorage,
)
from .session import SessionState, StorefrontSession, open_session

__all__ = [
    "Settings",
    "get_settings",
    "CartItem",
    "CartState",
    "CartStore",
    "calculate_totals",
    "resolve_book_id",
    "CART_STORAGE_KEY",
    "CART_STORAGE_VERSION",
    "CartPersistence",
    "JSONFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SessionState",
    "StorefrontSession",
    "open_session",
]
