"""
Mnemosyne Backend — User Schemas
==================================

Three views of a user, from most to least private:
    UserProfile       → the caller's own account (includes email)
    PublicUserProfile → anyone may read it
    UserSummary       → compact card embedded in lists and feeds
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from mnemosyne.schemas.common import CamelModel


class UserSummary(CamelModel):
    id: uuid.UUID
    username: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None


class AuthUser(CamelModel):
    """User block returned by register/login."""

    id: uuid.UUID
    email: str
    username: str
    likes_private: bool


class PublicUserProfile(CamelModel):
    id: uuid.UUID
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    likes_private: bool
    created_at: datetime


class UserProfile(PublicUserProfile):
    email: str


class UserStats(CamelModel):
    """
    Counters shown on a profile page.

    likes_count is None when the viewer is not allowed to see the owner's likes.
    """

    user_id: uuid.UUID
    followers_count: int
    following_count: int
    collections_count: int
    likes_count: Optional[int] = None


class ProfileUpdate(CamelModel):
    """
    What:  Partial update of the caller's own profile (PATCH /api/users/profile).

    Blank optional text fields are stored as NULL so a user can clear
    their bio or display name by sending an empty string.
    """

    email: Optional[EmailStr] = None
    username: Optional[str] = Field(default=None, max_length=100)
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = Field(default=None, max_length=500)
    likes_private: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Username cannot be empty")
        return v

    @field_validator("display_name", "bio", "avatar_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None
