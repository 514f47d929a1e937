# Core modules

from .config import settings, get_settings, Settings
from .exceptions import (
    BookstoreError,
    BadRequestError,
    InvalidOrderError,
    TotalMismatchError,
    BookNotFoundError,
    OrderNotFoundError,
    DuplicateOrderError,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "BookstoreError",
    "BadRequestError",
    "InvalidOrderError",
    "TotalMismatchError",
    "BookNotFoundError",
    "OrderNotFoundError",
    "DuplicateOrderError",
]
