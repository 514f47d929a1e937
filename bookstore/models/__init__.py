# Bookstore Models

from .common import ApiModel, Pagination, ErrorDetail, ErrorResponse
from .book import Book, BookSortField, SortOrder, BookResponse, BookListResponse, ClassListResponse
from .order import (
    CustomerInfo,
    Order,
    OrderItemRequest,
    OrderLineItem,
    OrderRequest,
    OrderResponse,
    OrderListResponse,
    OrderStatus,
    PaymentStatus,
)

__all__ = [
    "ApiModel",
    "Pagination",
    "ErrorDetail",
    "ErrorResponse",
    "Book",
    "BookSortField",
    "SortOrder",
    "BookResponse",
    "BookListResponse",
    "ClassListResponse",
    "CustomerInfo",
    "Order",
    "OrderItemRequest",
    "OrderLineItem",
    "OrderRequest",
    "OrderResponse",
    "OrderListResponse",
    "OrderStatus",
    "PaymentStatus",
]
