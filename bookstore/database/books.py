"""In-memory book catalog"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from ..models.book import Book, BookSortField, SortOrder

logger = logging.getLogger(__name__)

# Sample catalog loaded on startup
SAMPLE_BOOKS: list[dict] = [
    {
        "title": "The Great Gatsby",
        "publisher": "Scribner",
        "class": "Fiction",
        "price": 12.99,
        "image": "https://images.unsplash.com/photo-1544947950-fa07a98d237f?w=400&h=600&fit=crop",
        "description": "A classic American novel about the Jazz Age and the American Dream.",
        "isbn": "978-0743273565",
    },
    {
        "title": "To Kill a Mockingbird",
        "publisher": "Harper Perennial",
        "class": "Fiction",
        "price": 14.99,
        "image": "https://images.unsplash.com/photo-1543002588-bfa74002ed7e?w=400&h=600&fit=crop",
        "description": "A powerful story of racial injustice and loss of innocence in the American South.",
        "isbn": "978-0061120084",
    },
    {
        "title": "Sapiens: A Brief History of Humankind",
        "publisher": "Harper",
        "class": "Non-Fiction",
        "price": 24.99,
        "image": "https://images.unsplash.com/photo-1481627834876-b7833e8f5570?w=400&h=600&fit=crop",
        "description": "An exploration of how an insignificant ape became the ruler of planet Earth.",
        "isbn": "978-0062316097",
    },
    {
        "title": "Introduction to Algorithms",
        "publisher": "MIT Press",
        "class": "Academic",
        "price": 89.99,
        "image": "https://images.unsplash.com/photo-1517842645767-c639042777db?w=400&h=600&fit=crop",
        "description": "The standard reference on algorithm design and analysis.",
        "isbn": "978-0262033848",
    },
    {
        "title": "The Very Hungry Caterpillar",
        "publisher": "Philomel Books",
        "class": "Children's",
        "price": 8.99,
        "image": "https://images.unsplash.com/photo-1512820790803-83ca734da794?w=400&h=600&fit=crop",
        "description": "A caterpillar eats its way through a week of food.",
        "isbn": "978-0399226908",
    },
    {
        "title": "The Hunger Games",
        "publisher": "Scholastic Press",
        "class": "Young Adult",
        "price": 16.99,
        "image": "https://images.unsplash.com/photo-1495446815901-a7297e633e8d?w=400&h=600&fit=crop",
        "description": "A televised fight to the death in a dystopian future.",
        "isbn": "978-0439023481",
    },
    {
        "title": "1984",
        "publisher": "Signet Classic",
        "class": "Fiction",
        "price": 9.99,
        "image": "https://images.unsplash.com/photo-1532012197267-da84d127e765?w=400&h=600&fit=crop",
        "description": "A dystopian novel about surveillance and totalitarian rule.",
        "isbn": "978-0451524935",
    },
    {
        "title": "The Art of War",
        "publisher": "Shambhala",
        "class": "Non-Fiction",
        "price": 11.99,
        "image": "https://images.unsplash.com/photo-1519682337058-a94d519337bc?w=400&h=600&fit=crop",
        "description": "Ancient Chinese treatise on military strategy.",
        "isbn": "978-1590302255",
    },
    {
        "title": "Calculus: Early Transcendentals",
        "publisher": "Cengage Learning",
        "class": "Academic",
        "price": 199.99,
        "image": "https://images.unsplash.com/photo-1509228468518-180dd4864904?w=400&h=600&fit=crop",
        "description": "Comprehensive calculus textbook for university courses.",
        "isbn": "978-1337613927",
    },
    {
        "title": "Where the Wild Things Are",
        "publisher": "Harper & Row",
        "class": "Children's",
        "price": 7.99,
        "image": "https://images.unsplash.com/photo-1476275466078-4007374efbbe?w=400&h=600&fit=crop",
        "description": "A classic picture book about imagination and adventure.",
        "isbn": "978-0060254926",
    },
    {
        "title": "The Fault in Our Stars",
        "publisher": "Dutton Books",
        "class": "Young Adult",
        "price": 13.99,
        "image": "https://images.unsplash.com/photo-1474932430478-367dbb6832c1?w=400&h=600&fit=crop",
        "description": "Two teenagers meet at a cancer support group.",
        "isbn": "978-0525478812",
    },
    {
        "title": "Pride and Prejudice",
        "publisher": "Penguin Classics",
        "class": "Fiction",
        "price": 10.99,
        "image": "https://images.unsplash.com/photo-1544716278-ca5e3f4abd8c?w=400&h=600&fit=crop",
        "description": "Jane Austen's beloved novel about love, marriage, and social class.",
        "isbn": "978-0141439518",
    },
]


def _matches(value: Optional[str], needle: str) -> bool:
    """Case-insensitive substring match"""
    return bool(value) and needle.lower() in value.lower()


class BookDatabase:
    """In-memory book catalog"""

    def __init__(self, seed: bool = True):
        self.books: dict[str, Book] = {}
        if seed:
            self.seed(SAMPLE_BOOKS)

    def seed(self, entries: list[dict]) -> list[Book]:
        """Load catalog entries, assigning identifiers and timestamps"""
        created = [self.add_book(entry) for entry in entries]
        logger.info(f"Seeded catalog with {len(created)} books")
        return created

    def add_book(self, data: dict) -> Book:
        """Insert a book document"""
        now = datetime.now(timezone.utc)
        document = {
            "_id": uuid.uuid4().hex[:24],
            "created_at": now,
            "updated_at": now,
            **data,
        }
        book = Book.model_validate(document)
        self.books[book.id] = book
        return book

    def get_book(self, book_id: str) -> Optional[Book]:
        """Get an active book by ID"""
        book = self.books.get(book_id)
        if book is None or not book.is_active:
            return None
        return book

    def set_price(self, book_id: str, price: float) -> Optional[Book]:
        """Change a book's catalog price"""
        book = self.books.get(book_id)
        if not book:
            return None
        book.price = price
        book.updated_at = datetime.now(timezone.utc)
        return book

    def _active(self) -> list[Book]:
        return [b for b in self.books.values() if b.is_active]

    @staticmethod
    def _sort(
        books: list[Book],
        sort: BookSortField,
        order: SortOrder,
    ) -> list[Book]:
        key_map = {
            BookSortField.TITLE: lambda b: b.title.lower(),
            BookSortField.PRICE: lambda b: b.price,
            BookSortField.PUBLISHER: lambda b: b.publisher.lower(),
            BookSortField.CREATED_AT: lambda b: b.created_at,
        }
        return sorted(books, key=key_map[sort], reverse=order == SortOrder.DESC)

    @staticmethod
    def _paginate(books: list[Book], page: int, limit: int) -> tuple[list[Book], int]:
        total = len(books)
        offset = (page - 1) * limit
        return books[offset : offset + limit], total

    def list_books(
        self,
        book_class: Optional[str] = None,
        publisher: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: BookSortField = BookSortField.TITLE,
        order: SortOrder = SortOrder.ASC,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Book], int]:
        """
        List books with filters.

        Returns:
            Tuple of (page of matching books, total count)
        """
        results = self._active()

        if book_class:
            results = [b for b in results if _matches(b.book_class, book_class)]
        if publisher:
            results = [b for b in results if _matches(b.publisher, publisher)]

        # Filter by price range
        if min_price is not None:
            results = [b for b in results if b.price >= min_price]
        if max_price is not None:
            results = [b for b in results if b.price <= max_price]

        results = self._sort(results, sort, order)
        return self._paginate(results, page, limit)

    def search_books(self, query: str, page: int = 1, limit: int = 10) -> tuple[list[Book], int]:
        """Match query against title, publisher, description and class"""
        needle = query.strip()
        results = [
            b for b in self._active()
            if _matches(b.title, needle)
            or _matches(b.publisher, needle)
            or _matches(b.description, needle)
            or _matches(b.book_class, needle)
        ]
        results = self._sort(results, BookSortField.TITLE, SortOrder.ASC)
        return self._paginate(results, page, limit)

    def get_classes(self) -> list[str]:
        """Distinct non-empty classes of active books"""
        return sorted({b.book_class for b in self._active() if b.book_class})
