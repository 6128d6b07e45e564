"""
Mnemosyne Backend — Quote & QuoteLike SQLAlchemy Models
=========================================================

What:  ORM models for the `quotes` and `quote_likes` tables.

Table Design Rationale:
    - tags are stored as one comma-joined TEXT column. Every tag filter in
      the API is a case-insensitive substring match, which maps directly to
      `tags ILIKE '%term%'` on any backend. Commas are rejected inside tags.
    - like_count and is_liked_by_user are NEVER stored: they are computed
      per request from quote_likes (services/quote_service.py).
    - user_id records who created the quote; it is nullable because quotes
      may be created without a session.
    - quote_likes is unique on (user_id, quote_id): at most one like per
      user per quote.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text as sql_text,
)
from sqlalchemy.orm import Mapped, mapped_column

from mnemosyne.database import Base, utcnow

TAG_SEPARATOR = ","


def join_tags(tags: Optional[List[str]]) -> Optional[str]:
    """Serialize a tag list for storage; an empty list is stored as NULL."""
    if not tags:
        return None
    return TAG_SEPARATOR.join(tags)


def split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag for tag in raw.split(TAG_SEPARATOR) if tag]


class Quote(Base):
    """A quotation with attribution and optional taxonomy."""

    __tablename__ = "quotes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=sql_text("true"),
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_quotes_created_at", created_at.desc()),
        Index("idx_quotes_category", "category"),
    )

    @property
    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, author='{self.author}')>"


class QuoteLike(Base):
    """Join row: `user_id` likes `quote_id`."""

    __tablename__ = "quote_likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    quote_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "quote_id", name="uq_quote_likes_user_quote"),
        Index("idx_quote_likes_quote_id", "quote_id"),
    )

    def __repr__(self) -> str:
        return f"<QuoteLike(user_id={self.user_id}, quote_id={self.quote_id})>"
