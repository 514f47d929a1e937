"""Book models for the bookstore catalog"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from .common import ApiModel, Pagination


class BookSortField(str, Enum):
    TITLE = "title"
    PRICE = "price"
    PUBLISHER = "publisher"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Book(ApiModel):
    """Book in the catalog"""
    id: str = Field(alias="_id")
    title: str = Field(min_length=1, max_length=200)
    publisher: str = Field(min_length=1, max_length=100)
    book_class: Optional[str] = Field(default=None, alias="class", max_length=50)
    price: float = Field(ge=0, le=10000)
    image: str = Field(pattern=r"^https?://.+")
    description: Optional[str] = Field(default=None, max_length=1000)
    isbn: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class BookResponse(ApiModel):
    """Single book envelope"""
    success: bool = True
    data: Book


class BookListResponse(ApiModel):
    """Paginated book list envelope"""
    success: bool = True
    data: list[Book]
    pagination: Pagination
    meta: Optional[dict[str, Any]] = None


class ClassListResponse(ApiModel):
    """Distinct class list envelope"""
    success: bool = True
    data: list[str]
    meta: Optional[dict[str, Any]] = None
