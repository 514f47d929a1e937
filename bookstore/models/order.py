"""Order models for the bookstore API"""

import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from .common import ApiModel, Pagination

PHONE_PATTERN = re.compile(r"^\+?(\d{1,3})?[-.\s]?(\(?\d{3}\)?[-.\s]?)?(\d[-.\s]?){6,15}\d$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 16


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class CustomerInfo(ApiModel):
    """Customer details captured at checkout"""
    name: str = Field(min_length=2, max_length=100)
    organization: Optional[str] = Field(default="", max_length=100)
    phone: str
    email: str
    address: str = Field(min_length=10, max_length=500)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("organization")
    @classmethod
    def _default_organization(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        digits = sum(ch.isdigit() for ch in value)
        if not PHONE_PATTERN.match(value) or not MIN_PHONE_DIGITS <= digits <= MAX_PHONE_DIGITS:
            raise ValueError("Please enter a valid phone number")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value.lower()


class OrderItemRequest(ApiModel):
    """Requested line: identity and quantity only, never price"""
    book_id: str = ""
    quantity: int = 0


class OrderRequest(ApiModel):
    """Order creation request from the storefront"""
    customer: CustomerInfo
    items: list[OrderItemRequest] = []
    total_price: float = Field(default=0.0, allow_inf_nan=False)
    notes: Optional[str] = Field(default="", max_length=1000)


class OrderLineItem(ApiModel):
    """Point-in-time snapshot of a purchased book"""
    book: str
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)
    title: str
    publisher: str
    image: str

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Order(ApiModel):
    """Persisted order"""
    order_id: str
    customer: CustomerInfo
    items: list[OrderLineItem]
    total_price: float = Field(ge=0)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    shipping_address: str
    notes: str = ""
    created_at: datetime
    updated_at: datetime

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


class OrderResponse(ApiModel):
    """Single order envelope"""
    success: bool = True
    data: Order
    message: Optional[str] = None


class OrderListResponse(ApiModel):
    """Paginated order list envelope"""
    success: bool = True
    data: list[Order]
    pagination: Pagination
