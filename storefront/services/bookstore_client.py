"""
Bookstore API Client

Async HTTP client for the bookstore catalog and order endpoints.
Failures surface as two distinct exceptions: ``BookstoreAPIError`` when the
server answered with a structured rejection, ``BookstoreTransportError`` when
no usable answer arrived (network error, timeout, malformed body).
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..core.config import Settings

logger = logging.getLogger(__name__)


class BookstoreClientError(Exception):
    """Base exception for bookstore client errors"""
    pass


class BookstoreTransportError(BookstoreClientError):
    """The request did not produce a usable response"""
    pass


class BookstoreAPIError(BookstoreClientError):
    """The server rejected the request"""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: Optional[str] = None,
        details: Any = None,
        payload: Optional[dict] = None,
    ):
        super().__init__(f"{status_code} {error}: {message or ''}".rstrip(": "))
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = _field_details(details)
        self.payload = payload or {}


def _field_details(details: Any) -> list[dict]:
    """Field-level problems from a failure envelope; anything malformed is dropped"""
    if not isinstance(details, list):
        return []
    return [d for d in details if isinstance(d, dict)]


@dataclass
class ApiResponse:
    """Successful envelope from the bookstore API"""
    data: Any = None
    message: Optional[str] = None
    pagination: Optional[dict] = None
    meta: Optional[dict] = None
    status_code: int = 200


class BookstoreClient:
    """
    Client for the bookstore API.

    Usage:
        async with BookstoreClient.from_settings(settings) as client:
            books = await client.list_books(limit=5)
            order = await client.create_order(order_request)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. http://localhost:8000/api
            timeout: Seconds before a request counts as a transport failure
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookstoreClient":
        return cls(settings.bookstore_api_url, timeout=settings.request_timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> "BookstoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        body: Optional[dict] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> ApiResponse:
        """Make a request and unwrap the ``{success, data}`` envelope"""
        url = f"{self.base_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._http_client.request(
                method,
                url,
                params=params,
                json=body,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out")
            raise BookstoreTransportError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BookstoreTransportError(f"Request to {path} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body (status {response.status_code})")
            raise BookstoreTransportError(
                f"Malformed response from {path} (status {response.status_code})"
            ) from e

        if not isinstance(payload, dict):
            raise BookstoreTransportError(f"Malformed response from {path}")

        if response.status_code >= 400 or not payload.get("success", False):
            error = payload.get("error") or payload.get("message") or f"HTTP error! status: {response.status_code}"
            logger.error(f"API request failed for {path}: {response.status_code} - {error}")
            raise BookstoreAPIError(
                status_code=response.status_code,
                error=error,
                message=payload.get("message"),
                details=payload.get("details"),
                payload=payload,
            )

        return ApiResponse(
            data=payload.get("data"),
            message=payload.get("message"),
            pagination=payload.get("pagination"),
            meta=payload.get("meta"),
            status_code=response.status_code,
        )

    # ==================== Catalog APIs ====================

    async def list_books(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        publisher: Optional[str] = None,
        book_class: Optional[str] = None,
    ) -> ApiResponse:
        """List books with optional filters"""
        return await self._request(
            "GET",
            "/books",
            params={
                "page": page,
                "limit": limit,
                "sort": sort,
                "order": order,
                "minPrice": min_price,
                "maxPrice": max_price,
                "publisher": publisher,
                "class": book_class,
            },
        )

    async def get_book(self, book_id: str) -> dict:
        """Get book details"""
        return (await self._request("GET", f"/books/{book_id}")).data

    async def search_books(
        self,
        query: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApiResponse:
        """Search the catalog"""
        return await self._request(
            "GET",
            "/books/search",
            params={"q": query, "page": page, "limit": limit},
        )

    async def get_books_by_class(
        self,
        book_class: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
        order: Optional[str] = None,
    ) -> ApiResponse:
        """Books in one class/genre"""
        return await self._request(
            "GET",
            f"/books/class/{quote(book_class, safe='')}",
            params={"page": page, "limit": limit, "sort": sort, "order": order},
        )

    async def get_classes(self) -> list[str]:
        """Available book classes"""
        return (await self._request("GET", "/books/classes")).data

    # ==================== Order APIs ====================

    async def create_order(
        self,
        order_request: dict,
        idempotency_key: Optional[str] = None,
    ) -> dict:
        """
        Submit an order.

        Returns:
            The canonical order as stored by the server

        Raises:
            BookstoreAPIError: validation, integrity or not-found rejection
            BookstoreTransportError: network failure, timeout or malformed response
        """
        logger.info(
            f"Creating order for {order_request.get('customer', {}).get('email')}: "
            f"{len(order_request.get('items', []))} items, total {order_request.get('totalPrice')}"
        )
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else None
        response = await self._request("POST", "/orders", body=order_request, headers=headers)

        order = response.data
        if not isinstance(order, dict) or not order.get("orderId"):
            raise BookstoreTransportError("Order response did not include an order ID")
        return order

    async def get_order(self, order_id: str) -> dict:
        """Get order details"""
        return (await self._request("GET", f"/orders/{order_id}")).data

    async def get_orders_by_customer(
        self,
        email: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApiResponse:
        """A customer's orders, newest first"""
        return await self._request(
            "GET",
            f"/orders/customer/{quote(email, safe='')}",
            params={"page": page, "limit": limit},
        )
