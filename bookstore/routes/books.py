"""Catalog API routes for the bookstore"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.exceptions import BadRequestError, BookNotFoundError
from ..database.books import BookDatabase
from ..models.book import (
    BookListResponse,
    BookResponse,
    BookSortField,
    ClassListResponse,
    SortOrder,
)
from ..models.common import Pagination
from .deps import get_book_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/books", tags=["Books"])


@router.get("", response_model=BookListResponse)
async def list_books(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Page size"),
    sort: BookSortField = Query(BookSortField.TITLE, description="Sort field"),
    order: SortOrder = Query(SortOrder.ASC, description="Sort order"),
    min_price: Optional[float] = Query(None, ge=0, alias="minPrice"),
    max_price: Optional[float] = Query(None, ge=0, alias="maxPrice"),
    publisher: Optional[str] = Query(None, description="Publisher contains"),
    book_class: Optional[str] = Query(None, alias="class", description="Class contains"),
    db: BookDatabase = Depends(get_book_db),
):
    """List active books with filtering, sorting and pagination"""
    books, total = db.list_books(
        book_class=book_class,
        publisher=publisher,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return BookListResponse(data=books, pagination=Pagination.build(page, limit, total))


@router.get("/classes", response_model=ClassListResponse)
async def list_classes(db: BookDatabase = Depends(get_book_db)):
    """Distinct book classes"""
    classes = db.get_classes()
    return ClassListResponse(data=classes, meta={"totalClasses": len(classes)})


@router.get("/search", response_model=BookListResponse)
async def search_books(
    q: str = Query("", description="Search query"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: BookDatabase = Depends(get_book_db),
):
    """Search title, publisher, description and class"""
    if not q.strip():
        raise BadRequestError("Search query required", "Please provide a search query")

    books, total = db.search_books(q, page=page, limit=limit)
    logger.debug(f"Search '{q.strip()}' matched {total} books")
    return BookListResponse(
        data=books,
        pagination=Pagination.build(page, limit, total),
        meta={"query": q.strip()},
    )


@router.get("/class/{book_class}", response_model=BookListResponse)
async def get_books_by_class(
    book_class: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: BookSortField = Query(BookSortField.TITLE),
    order: SortOrder = Query(SortOrder.ASC),
    db: BookDatabase = Depends(get_book_db),
):
    """Books in a class/genre"""
    if not book_class.strip():
        raise BadRequestError("Class parameter required", "Please provide a book class/genre")

    books, total = db.list_books(
        book_class=book_class.strip(),
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return BookListResponse(
        data=books,
        pagination=Pagination.build(page, limit, total),
        meta={"class": book_class.strip()},
    )


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: str, db: BookDatabase = Depends(get_book_db)):
    """Get a book by ID"""
    book = db.get_book(book_id)
    if not book:
        raise BookNotFoundError(book_id)
    return BookResponse(data=book)
