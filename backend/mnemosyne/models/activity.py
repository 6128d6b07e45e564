"""
Mnemosyne Backend — Activity SQLAlchemy Model
===============================================

What:  Append-only log of user actions that feeds are built from.

Table Design Rationale:
    - quote_id / collection_id are deliberately NOT foreign keys: the
      referenced quote or collection may be deleted later and the activity
      row must survive. Feed enrichment omits references that no longer
      resolve instead of failing.
    - Rows are never updated. Only the retention job deletes them.
    - Python attribute `meta` maps to the `metadata` column because
      `metadata` is reserved on declarative classes.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from mnemosyne.database import Base, utcnow


class ActivityType(str, enum.Enum):
    LIKE = "like"
    COLLECTION_CREATE = "collectionCreate"
    COLLECTION_UPDATE = "collectionUpdate"
    QUOTE_ADD = "quoteAdd"


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    activity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    quote_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    collection_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    meta: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Global feed: ORDER BY created_at DESC; user feed: WHERE user_id ORDER BY created_at DESC
    __table_args__ = (
        Index("idx_activities_created_at", "created_at"),
        Index("idx_activities_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, type='{self.activity_type}', user_id={self.user_id})>"
