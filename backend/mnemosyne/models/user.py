"""
Mnemosyne Backend — User & Follow SQLAlchemy Models
=====================================================

What:  ORM models for the `users` and `follows` tables.
Why:   Users own collections, likes and activities; follows form the
       directed social graph that powers the following feed.

Table Design Rationale:
    - email and username are both unique (login by email, mention by username)
    - password_hash stores a bcrypt digest, never the password
    - likes_private gates whether other users may see this user's likes
      (see services/permissions.py for the single predicate that reads it)
    - follows is a pure join table unique on (follower_id, following_id).
      "A user cannot follow themselves" is a service-layer rule, not a
      schema constraint.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from mnemosyne.database import Base, utcnow


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created by POST /api/auth/register; profile fields are editable
        through PATCH /api/users/profile. Account deletion is not exposed.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Stored lower-cased and trimmed (normalized by the request schemas)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    display_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    likes_private: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    @property
    def name(self) -> str:
        """Name shown next to activity: display name when set, else username."""
        return self.display_name or self.username

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class Follow(Base):
    """
    Directed edge: `follower_id` follows `following_id`.

    Query Patterns:
        - Followers of X:  WHERE following_id = X ORDER BY created_at DESC
        - Following of X:  WHERE follower_id = X ORDER BY created_at DESC
        - Status check:    WHERE follower_id = A AND following_id = B (unique index)
    """

    __tablename__ = "follows"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    follower_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    following_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_follower_following"),
        Index("idx_follows_following_id", "following_id"),
    )

    def __repr__(self) -> str:
        return f"<Follow(follower_id={self.follower_id}, following_id={self.following_id})>"
