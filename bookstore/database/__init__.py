# Database modules

from .books import BookDatabase, SAMPLE_BOOKS
from .orders import OrderDatabase

__all__ = [
    "BookDatabase",
    "SAMPLE_BOOKS",
    "OrderDatabase",
]
