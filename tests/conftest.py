"""
Shared fixtures for the bookstore API and storefront tests
"""

import pytest
from fastapi.testclient import TestClient

from bookstore.core.config import Settings as ServerSettings
from bookstore.database import BookDatabase, OrderDatabase
from bookstore.main import create_app
from bookstore.services import NotificationService
from storefront.core import CartPersistence, CartStore, MemoryStorage

CUSTOMER = {
    "name": "Jane Reader",
    "organization": "City Library",
    "phone": "+1-555-123-4567",
    "email": "Jane@Example.com",
    "address": "221B Baker Street, London",
}


@pytest.fixture
def server_settings():
    """Server settings with mail disabled"""
    return ServerSettings(mail_enabled=False, owner_email="owner@example.com")


@pytest.fixture
def book_db():
    """Fresh seeded catalog"""
    return BookDatabase(seed=True)


@pytest.fixture
def order_db():
    """Fresh empty order store"""
    return OrderDatabase()


@pytest.fixture
def app(server_settings, book_db, order_db):
    return create_app(
        settings=server_settings,
        book_db=book_db,
        order_db=order_db,
        notifications=NotificationService(server_settings),
    )


@pytest.fixture
def api(app):
    """HTTP test client for the bookstore API"""
    return TestClient(app)


@pytest.fixture
def find_book(book_db):
    """Look up a seeded book by title"""
    def _find(title):
        return next(b for b in book_db.books.values() if b.title == title)
    return _find


@pytest.fixture
def gatsby(find_book):
    return find_book("The Great Gatsby")


@pytest.fixture
def customer():
    return dict(CUSTOMER)


@pytest.fixture
def book_a():
    """Book snapshot as the storefront holds it"""
    return {
        "_id": "book-a",
        "title": "The Great Gatsby",
        "publisher": "Scribner",
        "class": "Fiction",
        "price": 12.99,
        "image": "https://example.com/gatsby.jpg",
    }


@pytest.fixture
def book_b():
    return {
        "_id": "book-b",
        "title": "1984",
        "publisher": "Signet Classic",
        "class": "Fiction",
        "price": 9.99,
        "image": "https://example.com/1984.jpg",
    }


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cart(storage):
    """Cart persisting into in-memory storage"""
    return CartStore(CartPersistence(storage))
