"""Shared model plumbing for the bookstore API"""

import math
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(ApiModel):
    """Pagination block attached to list responses"""
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
            limit=limit,
        )


class ErrorDetail(BaseModel):
    """Single field-level validation problem"""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope"""
    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[list[ErrorDetail]] = None
