# Bookstore services

from .order_service import OrderService, generate_order_id
from .notifications import NotificationService

__all__ = ["OrderService", "generate_order_id", "NotificationService"]
