"""
Checkout workflow.

Packages the cart into an order request, submits it and reports one of four
outcomes. The cart is cleared only after the server confirmed the order; a
rejection, a timeout or any other failure leaves it untouched so the shopper
can retry.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..core.cart import CartState, CartStore
from .bookstore_client import (
    BookstoreAPIError,
    BookstoreClient,
    BookstoreTransportError,
)
from .validation import CheckoutForm, validate_checkout_form

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to place order. Please try again."


class InvalidCartError(Exception):
    """Cart cannot be turned into an order request"""
    pass


class CheckoutOutcome(str, Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    REJECTED = "rejected"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class CheckoutResult:
    """What the checkout view needs to render after a submit"""
    outcome: CheckoutOutcome
    order: Optional[dict] = None
    errors: dict[str, str] = field(default_factory=dict)
    message: Optional[str] = None
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == CheckoutOutcome.SUCCESS

    @property
    def order_id(self) -> Optional[str]:
        return self.order.get("orderId") if self.order else None


def build_order_request(cart: CartState, form: CheckoutForm) -> dict:
    """
    Turn cart contents into an order request.

    Only book identifiers and quantities are sent; the cart total travels as
    the claimed total the server checks against its own prices.
    """
    if not cart.items:
        raise InvalidCartError("Cart is empty")

    items = []
    for item in cart.items:
        book_id = item.book_id
        if not book_id:
            title = item.book.get("title") if isinstance(item.book, dict) else None
            raise InvalidCartError(f"Invalid book ID for item: {title or 'Unknown'}")
        items.append({"bookId": book_id, "quantity": item.quantity})

    return {
        "customer": form.customer(),
        "items": items,
        "totalPrice": round(cart.total_price, 2),
        "notes": form.notes.strip(),
    }


class CheckoutService:
    """Submits the session's cart as an order"""

    def __init__(
        self,
        cart: CartStore,
        client: BookstoreClient,
        on_success: Optional[Callable[[dict], None]] = None,
    ):
        self.cart = cart
        self.client = client
        self.on_success = on_success
        self._pending: Optional[tuple[str, str]] = None

    def _idempotency_key(self, order_request: dict) -> str:
        """Same request content, same key; retries after a timeout reuse it"""
        fingerprint = json.dumps(order_request, sort_keys=True)
        if self._pending is None or self._pending[0] != fingerprint:
            self._pending = (fingerprint, uuid.uuid4().hex)
        return self._pending[1]

    async def place_order(self, form: CheckoutForm) -> CheckoutResult:
        """Validate, submit, and clear the cart on confirmed success only"""
        errors = validate_checkout_form(form.to_dict())
        if errors:
            logger.warning(f"Checkout form validation failed: {sorted(errors)}")
            return CheckoutResult(CheckoutOutcome.INVALID, errors=errors)

        try:
            order_request = build_order_request(self.cart.state, form)
        except InvalidCartError as e:
            logger.error(f"Cannot build order request: {e}")
            return CheckoutResult(CheckoutOutcome.INVALID, errors={"cart": str(e)}, message=str(e))

        key = self._idempotency_key(order_request)
        logger.info(
            f"Submitting checkout order for {form.email.strip()}: "
            f"{len(order_request['items'])} items, total {order_request['totalPrice']}"
        )

        try:
            order = await self.client.create_order(order_request, idempotency_key=key)
        except BookstoreAPIError as e:
            logger.error(
                f"Order rejected ({e.status_code} {e.error}): {e.message} "
                f"customer={form.email.strip()}"
            )
            return CheckoutResult(
                CheckoutOutcome.REJECTED,
                errors={str(d.get("field", "submit")): str(d.get("message", "")) for d in e.details},
                message=GENERIC_FAILURE_MESSAGE,
                detail=e.message or e.error,
            )
        except BookstoreTransportError as e:
            logger.error(f"Order submission failed in transport: {e} customer={form.email.strip()}")
            return CheckoutResult(
                CheckoutOutcome.TRANSPORT_ERROR,
                message=GENERIC_FAILURE_MESSAGE,
                detail=str(e),
            )
        except Exception as e:
            logger.exception(f"Unexpected checkout failure for {form.email.strip()}")
            return CheckoutResult(
                CheckoutOutcome.TRANSPORT_ERROR,
                message=GENERIC_FAILURE_MESSAGE,
                detail=str(e),
            )

        self._pending = None
        self.cart.clear()
        logger.info(
            f"Checkout complete: order {order['orderId']}, "
            f"total {order_request['totalPrice']}, {len(order_request['items'])} items"
        )
        if self.on_success is not None:
            try:
                self.on_success(order)
            except Exception:
                logger.exception(f"Checkout success callback failed for order {order['orderId']}")

        return CheckoutResult(CheckoutOutcome.SUCCESS, order=order, message="Order placed successfully")
