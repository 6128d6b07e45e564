"""
Mnemosyne Backend — Shared Pydantic Schemas
=============================================

What:  The response envelope, pagination block, error body and health model
       shared by every route.
Why:   Every endpoint answers with the same shape:

           {success, data?, error?, message?, pagination?}

       so the frontend can handle results and failures uniformly.

Naming:
    Python attributes are snake_case; JSON is camelCase (`totalPages`,
    `likeCount`). CamelModel wires the alias generator once, and
    `populate_by_name` lets request bodies use either spelling.
"""

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every API model: camelCase JSON, snake_case Python, ORM-friendly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def compute_total_pages(total: int, limit: int) -> int:
    """totalPages = ceil(total / limit); zero items means zero pages."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


class Pagination(CamelModel):
    page: int = Field(description="1-indexed page number that was returned")
    limit: int = Field(description="Page size that was applied")
    total: int = Field(description="Total number of matching items")
    total_pages: int = Field(description="ceil(total / limit)")


class Page(BaseModel, Generic[T]):
    """
    What:  A page of service results before they are wrapped in the envelope.
    Why:   Services stay HTTP-agnostic; routes turn this into
           `ApiResponse(data=page.items, pagination=page.pagination())`.
    """

    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return compute_total_pages(self.total, self.limit)

    def pagination(self) -> Pagination:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=self.total,
            total_pages=self.total_pages,
        )


class ApiResponse(CamelModel, Generic[T]):
    """
    Uniform success envelope.

    Example:
        {
            "success": true,
            "data": [...],
            "pagination": {"page": 1, "limit": 10, "total": 42, "totalPages": 5}
        }
    """

    success: bool = Field(default=True)
    data: Optional[T] = Field(default=None)
    error: Optional[str] = Field(default=None)
    message: Optional[str] = Field(default=None)
    pagination: Optional[Pagination] = Field(default=None)


class ErrorDetail(BaseModel):
    field: str = Field(description="Request field that failed validation")
    message: str = Field(description="Why it failed")


class ErrorResponse(CamelModel):
    """
    Failure envelope returned by the global exception handlers.

    Example:
        {
            "success": false,
            "error": "Validation failed",
            "details": [{"field": "text", "message": "Quote text is required"}],
            "requestId": "a1b2c3d4"
        }
    """

    success: bool = Field(default=False)
    error: str = Field(description="Human-readable error description")
    details: Optional[List[ErrorDetail]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
