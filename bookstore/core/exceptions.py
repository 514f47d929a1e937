"""Bookstore API errors.

Each error knows the HTTP status it maps to and how to render itself into
the failure envelope ``{success: false, error, message, details?}``.
"""

from typing import Any, Optional


class BookstoreError(Exception):
    """Base exception for bookstore API errors"""

    status_code: int = 500
    error: str = "Failed to process request"

    def __init__(
        self,
        message: str,
        details: Optional[list[dict[str, str]]] = None,
        **extra: Any,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.extra = extra

    def to_response(self) -> dict[str, Any]:
        """Render the failure envelope"""
        body: dict[str, Any] = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class BadRequestError(BookstoreError):
    """Request is malformed"""

    status_code = 400

    def __init__(self, error: str, message: str, **extra: Any):
        super().__init__(message, **extra)
        self.error = error


class InvalidOrderError(BadRequestError):
    """Order payload is structurally invalid (no items, bad quantity, bad total)"""


class TotalMismatchError(BookstoreError):
    """Server-calculated total disagrees with the client's claimed total"""

    status_code = 400
    error = "Total price mismatch"

    def __init__(self, calculated_total: float, provided_total: float):
        super().__init__(
            "Calculated total does not match provided total",
            calculatedTotal=round(calculated_total, 2),
            providedTotal=provided_total,
        )
        self.calculated_total = calculated_total
        self.provided_total = provided_total


class BookNotFoundError(BookstoreError):
    """Referenced book does not exist or is inactive"""

    status_code = 404
    error = "Book not found"

    def __init__(self, book_id: str):
        super().__init__(f"Book with ID {book_id} not found", bookId=book_id)
        self.book_id = book_id


class OrderNotFoundError(BookstoreError):
    """Order lookup failed"""

    status_code = 404
    error = "Order not found"

    def __init__(self, order_id: str):
        super().__init__(f"No order found with ID: {order_id}")
        self.order_id = order_id


class DuplicateOrderError(BookstoreError):
    """Generated order ID collided with an existing order"""

    status_code = 409
    error = "Duplicate order"

    def __init__(self, order_id: str):
        super().__init__("An order with this ID already exists")
        self.order_id = order_id
