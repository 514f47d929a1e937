# Storefront services

from .bookstore_client import (
    ApiResponse,
    BookstoreAPIError,
    BookstoreClient,
    BookstoreClientError,
    BookstoreTransportError,
)
from .checkout import (
    CheckoutOutcome,
    CheckoutResult,
    CheckoutService,
    InvalidCartError,
    build_order_request,
)
from .validation import (
    CheckoutForm,
    validate_address,
    validate_checkout_form,
    validate_email,
    validate_field,
    validate_name,
    validate_phone,
)

__all__ = [
    "ApiResponse",
    "BookstoreAPIError",
    "BookstoreClient",
    "BookstoreClientError",
    "BookstoreTransportError",
    "CheckoutOutcome",
    "CheckoutResult",
    "CheckoutService",
    "InvalidCartError",
    "build_order_request",
    "CheckoutForm",
    "validate_address",
    "validate_checkout_form",
    "validate_email",
    "validate_field",
    "validate_name",
    "validate_phone",
]
