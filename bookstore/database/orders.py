"""Order storage for the bookstore"""

import logging
from typing import Optional

from ..core.exceptions import DuplicateOrderError
from ..models.order import Order

logger = logging.getLogger(__name__)


class OrderDatabase:
    """
    In-memory order storage.

    Inserting a document is atomic per order. ``order_id`` is a unique key and
    an idempotency key, when given, maps to exactly one order.
    """

    def __init__(self):
        self.orders: dict[str, Order] = {}
        self.idempotency_keys: dict[str, str] = {}

    def insert_order(self, order: Order, idempotency_key: Optional[str] = None) -> Order:
        """Persist a new order document"""
        if order.order_id in self.orders:
            raise DuplicateOrderError(order.order_id)

        self.orders[order.order_id] = order
        if idempotency_key:
            self.idempotency_keys[idempotency_key] = order.order_id
        logger.debug(f"Inserted order {order.order_id}")
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Get the order previously created under an idempotency key"""
        order_id = self.idempotency_keys.get(key)
        return self.orders.get(order_id) if order_id else None

    def find_by_customer_email(
        self,
        email: str,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        """List a customer's orders, newest first"""
        email = email.strip().lower()
        orders = [o for o in self.orders.values() if o.customer.email == email]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        offset = (page - 1) * limit
        return orders[offset : offset + limit], len(orders)
