"""
Order Service

Turns an order request into a persisted order. Prices, titles, publishers and
images are always re-resolved from the catalog; the client only supplies book
identifiers, quantities and the total it expects to pay.

The catalog is read once per line and the decision is taken on that snapshot.
A price change landing between the lookup and the insert is not detected;
the stored line items keep the prices that were checked.
"""

import logging
import math
import time
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from ..core.exceptions import (
    BookNotFoundError,
    InvalidOrderError,
    OrderNotFoundError,
    TotalMismatchError,
)
from ..database.books import BookDatabase
from ..database.orders import OrderDatabase
from ..models.order import (
    Order,
    OrderItemRequest,
    OrderLineItem,
    OrderRequest,
    OrderStatus,
    PaymentStatus,
)

logger = logging.getLogger(__name__)

PostCommitHook = Callable[[Order], Awaitable[None]]


def generate_order_id() -> str:
    """Millisecond timestamp plus a random suffix, e.g. ORD-1718000000000-3F9A0C1B2"""
    return f"ORD-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9].upper()}"


class OrderService:
    """Validates, prices and persists orders"""

    def __init__(
        self,
        book_db: BookDatabase,
        order_db: OrderDatabase,
        price_tolerance: float = 0.01,
        post_commit_hooks: Optional[list[PostCommitHook]] = None,
        id_factory: Callable[[], str] = generate_order_id,
    ):
        self.book_db = book_db
        self.order_db = order_db
        self.price_tolerance = price_tolerance
        self.post_commit_hooks = list(post_commit_hooks or [])
        self._id_factory = id_factory

    def add_post_commit_hook(self, hook: PostCommitHook) -> None:
        """Register a side effect to run after an order is persisted"""
        self.post_commit_hooks.append(hook)

    async def create_order(
        self,
        request: OrderRequest,
        idempotency_key: Optional[str] = None,
    ) -> tuple[Order, bool]:
        """
        Create an order.

        Args:
            request: Validated order request
            idempotency_key: Optional client token; a repeat returns the first order

        Returns:
            Tuple of (order, created). ``created`` is False for a replayed key.

        Raises:
            InvalidOrderError: empty items, bad item data or non-positive total
            BookNotFoundError: any requested book is unknown (nothing is persisted)
            TotalMismatchError: claimed total differs from the catalog total
            DuplicateOrderError: generated order ID already exists
        """
        if idempotency_key:
            existing = self.order_db.get_by_idempotency_key(idempotency_key)
            if existing:
                logger.info(
                    f"Replaying order {existing.order_id} for idempotency key {idempotency_key}"
                )
                return existing, False

        self._check_request(request)
        logger.info(
            f"Creating order for {request.customer.email}: "
            f"{len(request.items)} items, claimed total {request.total_price}"
        )

        line_items = [self._resolve_line(item) for item in request.items]
        calculated_total = sum(line.line_total for line in line_items)

        if abs(calculated_total - request.total_price) > self.price_tolerance:
            logger.warning(
                f"Total mismatch for {request.customer.email}: "
                f"calculated={calculated_total:.2f} provided={request.total_price}"
            )
            raise TotalMismatchError(calculated_total, request.total_price)

        now = datetime.now(timezone.utc)
        order = Order(
            order_id=self._id_factory(),
            customer=request.customer,
            items=line_items,
            total_price=round(calculated_total, 2),
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            shipping_address=request.customer.address,
            notes=request.notes or "",
            created_at=now,
            updated_at=now,
        )
        self.order_db.insert_order(order, idempotency_key=idempotency_key)

        logger.info(
            f"Order {order.order_id} created: {order.total_items} items, "
            f"total {order.total_price:.2f}"
        )

        await self._run_post_commit_hooks(order)
        return order, True

    @staticmethod
    def _check_request(request: OrderRequest) -> None:
        if not request.items:
            raise InvalidOrderError(
                "Invalid order items",
                "Order must contain at least one item",
            )
        if not math.isfinite(request.total_price) or request.total_price <= 0:
            raise InvalidOrderError(
                "Invalid total price",
                "Total price must be greater than zero",
                providedTotal=request.total_price,
            )

    def _resolve_line(self, item: OrderItemRequest) -> OrderLineItem:
        """Build a line snapshot from the catalog, ignoring any client pricing"""
        if not item.book_id or item.quantity <= 0:
            raise InvalidOrderError(
                "Invalid item data",
                "Each item must have a valid bookId and quantity",
                bookId=item.book_id,
                quantity=item.quantity,
            )

        book = self.book_db.get_book(item.book_id)
        if book is None:
            logger.warning(f"Order references unknown book {item.book_id}")
            raise BookNotFoundError(item.book_id)

        return OrderLineItem(
            book=book.id,
            quantity=item.quantity,
            price=book.price,
            title=book.title,
            publisher=book.publisher,
            image=book.image,
        )

    async def _run_post_commit_hooks(self, order: Order) -> None:
        for hook in self.post_commit_hooks:
            name = getattr(hook, "__name__", repr(hook))
            try:
                await hook(order)
            except Exception:
                logger.exception(f"Post-commit hook {name} failed for order {order.order_id}")

    def get_order(self, order_id: str) -> Order:
        """Get an order by ID or raise OrderNotFoundError"""
        order = self.order_db.get_order(order_id)
        if not order:
            logger.info(f"Order {order_id} not found")
            raise OrderNotFoundError(order_id)
        return order

    def get_customer_orders(
        self,
        email: str,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        """List a customer's orders, newest first"""
        return self.order_db.find_by_customer_email(email, page=page, limit=limit)
