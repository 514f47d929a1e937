# API Routes

from .books import router as books_router
from .orders import router as orders_router

__all__ = ["books_router", "orders_router"]
