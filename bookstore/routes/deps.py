"""Request-scoped accessors for the stores wired onto the application"""

from fastapi import Request

from ..database.books import BookDatabase
from ..services.order_service import OrderService


def get_book_db(request: Request) -> BookDatabase:
    """Catalog attached to the running app"""
    return request.app.state.book_db


def get_order_service(request: Request) -> OrderService:
    """Order service attached to the running app"""
    return request.app.state.order_service
