"""Order API routes for the bookstore"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response

from ..models.common import Pagination
from ..models.order import OrderListResponse, OrderRequest, OrderResponse
from ..services.order_service import OrderService
from .deps import get_order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    request: OrderRequest,
    response: Response,
    idempotency_key: Optional[str] = Header(None),
    service: OrderService = Depends(get_order_service),
):
    """
    Create an order.

    Line prices come from the catalog, never from the request. The claimed
    ``totalPrice`` must match the catalog total within the configured tolerance.
    Send an ``Idempotency-Key`` header to make retries safe.
    """
    order, created = await service.create_order(request, idempotency_key=idempotency_key)

    if not created:
        response.status_code = 200
        return OrderResponse(data=order, message="Order already created")

    return OrderResponse(data=order, message="Order created successfully")


@router.get("/customer/{email}", response_model=OrderListResponse)
async def get_customer_orders(
    email: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: OrderService = Depends(get_order_service),
):
    """List a customer's orders, newest first"""
    orders, total = service.get_customer_orders(email, page=page, limit=limit)
    return OrderListResponse(data=orders, pagination=Pagination.build(page, limit, total))


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
):
    """Get order details"""
    return OrderResponse(data=service.get_order(order_id))
