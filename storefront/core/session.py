"""Session context for the storefront"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .cart import CartStore
from .config import Settings
from .storage import CartPersistence, JSONFileStorage, KeyValueStorage

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Where the shopper is in the purchase flow"""
    BROWSING = "browsing"
    CHECKOUT = "checkout"
    COMPLETED = "completed"


@dataclass
class StorefrontSession:
    """A shopper's session; owns the cart for its lifetime"""
    session_id: str
    created_at: datetime
    updated_at: datetime
    cart: CartStore
    state: SessionState = SessionState.BROWSING
    last_order_id: Optional[str] = None

    def update_state(self, new_state: SessionState) -> None:
        """Update session state"""
        self.state = new_state
        self.updated_at = datetime.now(timezone.utc)

    def begin_checkout(self) -> bool:
        """Enter checkout; refused while the cart is empty"""
        if self.cart.is_empty():
            logger.warning(f"Session {self.session_id} attempted checkout with empty cart")
            return False
        self.update_state(SessionState.CHECKOUT)
        return True

    def complete_order(self, order: dict) -> None:
        """Move to the confirmation view for a confirmed order"""
        self.last_order_id = order.get("orderId")
        self.update_state(SessionState.COMPLETED)

    def continue_shopping(self) -> None:
        self.update_state(SessionState.BROWSING)


def open_session(
    settings: Settings,
    storage: Optional[KeyValueStorage] = None,
) -> StorefrontSession:
    """Create a session and rehydrate its cart from local storage"""
    storage = storage or JSONFileStorage(settings.cart_storage_path)
    cart = CartStore(CartPersistence(storage, key=settings.cart_storage_key))
    cart.rehydrate()

    now = datetime.now(timezone.utc)
    session = StorefrontSession(
        session_id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        cart=cart,
    )
    logger.info(
        f"Opened session {session.session_id} with {cart.total_items} items in cart"
    )
    return session
