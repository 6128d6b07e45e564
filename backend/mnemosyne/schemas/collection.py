"""
Mnemosyne Backend — Collection Schemas
========================================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from mnemosyne.schemas.common import CamelModel


class CollectionCreate(CamelModel):
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Collection name is required")
        return v

    @field_validator("description")
    @classmethod
    def blank_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class CollectionUpdate(CamelModel):
    """Sending `description: ""` or `null` clears the description."""

    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Collection name cannot be empty")
        v = v.strip()
        if not v:
            raise ValueError("Collection name cannot be empty")
        return v

    @field_validator("description")
    @classmethod
    def blank_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @model_validator(mode="after")
    def require_at_least_one_field(self) -> "CollectionUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        return self


class AddQuoteRequest(CamelModel):
    quote_id: str = Field(min_length=1)


class CollectionResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    quote_count: int = 0


class CollectionQuoteResponse(CamelModel):
    id: uuid.UUID
    collection_id: uuid.UUID
    quote_id: uuid.UUID
    added_at: datetime
