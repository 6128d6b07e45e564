"""
Mnemosyne Backend — Quote Schemas
===================================

What:  Request bodies for quote mutation, the quote representation returned
       everywhere, and the filter/sort objects consumed by the query service.

Input rules (enforced here, before any service runs):
    text      required, trimmed, 1–2000 chars
    author    required, trimmed, 1–200 chars
    category  optional, trimmed, ≤100 chars
    tags      optional, ≤20 entries, each trimmed, non-empty, no commas
    source    optional, trimmed, ≤500 chars
    isPublic  optional, defaults to true on create
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mnemosyne.schemas.common import CamelModel
from mnemosyne.schemas.user import UserSummary

MAX_TAGS = 20


def _required_text(v: str, label: str, max_length: int) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    if len(v) > max_length:
        raise ValueError(f"{label} must be {max_length} characters or less")
    return v


def _optional_text(v: Optional[str], label: str, max_length: int) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if len(v) > max_length:
        raise ValueError(f"{label} must be {max_length} characters or less")
    return v or None


def _clean_tags(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return None
    if len(v) > MAX_TAGS:
        raise ValueError(f"Maximum {MAX_TAGS} tags allowed")
    cleaned = []
    for tag in v:
        tag = tag.strip()
        if not tag:
            raise ValueError("Tags cannot be empty")
        if "," in tag:
            raise ValueError("Tags cannot contain commas")
        cleaned.append(tag)
    return cleaned


class QuoteCreate(CamelModel):
    text: str
    author: str
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    source: Optional[str] = None
    is_public: bool = True

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _required_text(v, "Quote text", 2000)

    @field_validator("author")
    @classmethod
    def validate_author(cls, v: str) -> str:
        return _required_text(v, "Author", 200)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, "Category", 100)

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, "Source", 500)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class QuoteUpdate(CamelModel):
    """
    Partial update: only fields present in the request body are applied.

    An empty body is rejected here so the service never sees a no-op update.
    """

    text: Optional[str] = None
    author: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    source: Optional[str] = None
    is_public: Optional[bool] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Quote text cannot be empty")
        return _required_text(v, "Quote text", 2000)

    @field_validator("author")
    @classmethod
    def validate_author(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Author cannot be empty")
        return _required_text(v, "Author", 200)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, "Category", 100)

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v, "Source", 500)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)

    @field_validator("is_public")
    @classmethod
    def validate_is_public(cls, v: Optional[bool]) -> Optional[bool]:
        if v is None:
            raise ValueError("isPublic must be true or false")
        return v

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "QuoteUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class QuoteResponse(CamelModel):
    """
    A quote as the API exposes it.

    like_count and is_liked_by_user are computed per request and never stored.
    """

    id: uuid.UUID
    text: str
    author: str
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source: Optional[str] = None
    is_public: bool
    user_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    like_count: int = 0
    is_liked_by_user: bool = False


class FeedQuoteResponse(QuoteResponse):
    """A quote in the following feed, annotated with who liked it and when."""

    liked_by: UserSummary
    liked_at: datetime


class QuoteLikeResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    quote_id: uuid.UUID
    created_at: datetime


SortField = Literal["createdAt", "updatedAt", "author", "text"]
SortOrder = Literal["asc", "desc"]


class QuoteFilters(BaseModel):
    """
    What:  Filters accepted by GET /api/quotes.

    category   case-insensitive exact match
    author     case-insensitive substring
    tags       any-of; each term is a case-insensitive substring of some tag
    search     case-insensitive substring over text, author and tags
    is_public  exact
    liked_by_me restrict to quotes the caller has liked (caller required)
    """

    category: Optional[str] = None
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    search: Optional[str] = None
    is_public: Optional[bool] = None
    liked_by_me: bool = False


class QuoteSort(BaseModel):
    field: SortField = "createdAt"
    order: SortOrder = "desc"
