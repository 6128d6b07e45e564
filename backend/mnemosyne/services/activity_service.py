"""
Mnemosyne Backend — Activity Service
======================================

What:  Appends activity records and builds the enriched activity feeds.
Who:   record_activity() is called by the like, collection and quote services
       inside their own transaction; the feeds are served by routes/activity.py.

Enrichment:
    Activities reference quotes and collections by bare id (no foreign key),
    so the referenced row may be gone by the time a feed is read. Quote and
    collection summaries are fetched in two bulk queries per page and a
    reference that no longer resolves is simply left out of the record.

Privacy:
    `like` activities belonging to users with private likes are filtered
    out in SQL for every viewer except the owner (permissions.likes_visible_clause).
"""

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import utcnow
from mnemosyne.exceptions import DatabaseError, NotFoundError
from mnemosyne.models.activity import Activity, ActivityType
from mnemosyne.models.collection import Collection
from mnemosyne.models.quote import Quote
from mnemosyne.models.user import User
from mnemosyne.schemas.activity import (
    ActivityCollectionSummary,
    ActivityQuoteSummary,
    ActivityResponse,
)
from mnemosyne.services.common import clamp_limit
from mnemosyne.services.permissions import likes_visible_clause

logger = logging.getLogger(__name__)

GLOBAL_FEED_DEFAULT_LIMIT = 50
USER_FEED_DEFAULT_LIMIT = 20
RETENTION_DAYS = 90


class ActivityService:
    """Stateless; every method receives the request's session."""

    async def record_activity(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        activity_type: Union[ActivityType, str],
        quote_id: Optional[uuid.UUID] = None,
        collection_id: Optional[uuid.UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Activity:
        """Pure append. Raises ValueError for an unknown activity type."""
        activity = Activity(
            user_id=user_id,
            activity_type=ActivityType(activity_type).value,
            quote_id=quote_id,
            collection_id=collection_id,
            meta=metadata,
        )
        db.add(activity)
        await db.flush()
        logger.debug(
            "Activity recorded: %s by %s (quote=%s collection=%s)",
            activity.activity_type, user_id, quote_id, collection_id,
        )
        return activity

    async def get_global_feed(
        self,
        db: AsyncSession,
        limit: int = GLOBAL_FEED_DEFAULT_LIMIT,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> List[ActivityResponse]:
        """Most recent activities from all users, newest first."""
        limit = clamp_limit(limit, GLOBAL_FEED_DEFAULT_LIMIT)
        stmt = (
            select(Activity, User)
            .join(User, User.id == Activity.user_id)
            .where(self._visible_to(viewer_id))
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        return await self._run_feed(db, stmt)

    async def get_user_feed(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        limit: int = USER_FEED_DEFAULT_LIMIT,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> List[ActivityResponse]:
        """
        One user's activities, newest first.

        Raises:
            NotFoundError: the user does not exist
        """
        limit = clamp_limit(limit, USER_FEED_DEFAULT_LIMIT)
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        stmt = (
            select(Activity, User)
            .join(User, User.id == Activity.user_id)
            .where(Activity.user_id == user_id)
            .where(self._visible_to(viewer_id))
            .order_by(Activity.created_at.desc())
            .limit(limit)
        )
        return await self._run_feed(db, stmt)

    async def delete_old_activities(self, db: AsyncSession, days: int = RETENTION_DAYS) -> int:
        """
        Retention job: remove activities older than `days` days.

        Returns:
            Number of rows deleted
        """
        cutoff = utcnow() - timedelta(days=days)
        try:
            result = await db.execute(delete(Activity).where(Activity.created_at < cutoff))
        except SQLAlchemyError as e:
            logger.error("Activity cleanup failed: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete_old_activities"})
        deleted = result.rowcount or 0
        logger.info("Deleted %d activities older than %d days", deleted, days)
        return deleted

    # ── Internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _visible_to(viewer_id: Optional[uuid.UUID]):
        return or_(
            Activity.activity_type != ActivityType.LIKE.value,
            likes_visible_clause(viewer_id),
        )

    async def _run_feed(self, db: AsyncSession, stmt) -> List[ActivityResponse]:
        try:
            rows = (await db.execute(stmt)).all()
            return await self._enrich(db, [(row[0], row[1]) for row in rows])
        except SQLAlchemyError as e:
            logger.error("Database error building activity feed: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve activity. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def _enrich(
        self, db: AsyncSession, rows: List[Tuple[Activity, User]]
    ) -> List[ActivityResponse]:
        quotes = await self._quote_summaries(
            db, (a.quote_id for a, _ in rows if a.quote_id is not None)
        )
        collections = await self._collection_summaries(
            db, (a.collection_id for a, _ in rows if a.collection_id is not None)
        )

        return [
            ActivityResponse(
                id=activity.id,
                user_id=activity.user_id,
                user_name=user.name,
                username=user.username,
                activity_type=activity.activity_type,
                created_at=activity.created_at,
                quote=quotes.get(activity.quote_id) if activity.quote_id else None,
                collection=(
                    collections.get(activity.collection_id) if activity.collection_id else None
                ),
                metadata=activity.meta,
            )
            for activity, user in rows
        ]

    @staticmethod
    async def _quote_summaries(
        db: AsyncSession, ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, ActivityQuoteSummary]:
        wanted = set(ids)
        if not wanted:
            return {}
        result = await db.execute(
            select(Quote.id, Quote.text, Quote.author).where(Quote.id.in_(wanted))
        )
        return {
            row.id: ActivityQuoteSummary(id=row.id, text=row.text, author=row.author)
            for row in result.all()
        }

    @staticmethod
    async def _collection_summaries(
        db: AsyncSession, ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, ActivityCollectionSummary]:
        wanted = set(ids)
        if not wanted:
            return {}
        result = await db.execute(
            select(Collection.id, Collection.name, Collection.description).where(
                Collection.id.in_(wanted)
            )
        )
        return {
            row.id: ActivityCollectionSummary(
                id=row.id, name=row.name, description=row.description
            )
            for row in result.all()
        }


activity_service = ActivityService()
