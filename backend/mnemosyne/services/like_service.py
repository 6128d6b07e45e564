"""
Mnemosyne Backend — Like Service
==================================

State machine per (user, quote) pair:

    unliked ──like()──▶ liked ──unlike()──▶ unliked

    like()   on liked     → AlreadyLikedError (400)
    unlike() on unliked   → NotLikedError (404)
    either on a missing quote → NotFoundError (404)

like() appends a `like` activity in the same transaction; unlike() records
nothing.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.exceptions import AlreadyLikedError, NotLikedError
from mnemosyne.models.activity import ActivityType
from mnemosyne.models.quote import QuoteLike
from mnemosyne.schemas.quote import QuoteLikeResponse
from mnemosyne.services.activity_service import activity_service
from mnemosyne.services.quote_service import quote_service

logger = logging.getLogger(__name__)


class LikeService:
    async def _find(
        self, db: AsyncSession, user_id: uuid.UUID, quote_id: uuid.UUID
    ) -> QuoteLike | None:
        result = await db.execute(
            select(QuoteLike).where(QuoteLike.user_id == user_id, QuoteLike.quote_id == quote_id)
        )
        return result.scalar_one_or_none()

    async def like(
        self, db: AsyncSession, user_id: uuid.UUID, quote_id: uuid.UUID
    ) -> QuoteLikeResponse:
        await quote_service.get_quote_row(db, quote_id)

        if await self._find(db, user_id, quote_id) is not None:
            raise AlreadyLikedError(context={"quote_id": str(quote_id)})

        like = QuoteLike(user_id=user_id, quote_id=quote_id)
        db.add(like)
        try:
            await db.flush()
        except IntegrityError:
            # A concurrent request inserted the same pair first
            await db.rollback()
            raise AlreadyLikedError(context={"quote_id": str(quote_id)})

        await activity_service.record_activity(db, user_id, ActivityType.LIKE, quote_id=quote_id)
        logger.info("Quote %s liked by %s", quote_id, user_id)
        return QuoteLikeResponse.model_validate(like)

    async def unlike(self, db: AsyncSession, user_id: uuid.UUID, quote_id: uuid.UUID) -> None:
        await quote_service.get_quote_row(db, quote_id)

        like = await self._find(db, user_id, quote_id)
        if like is None:
            raise NotLikedError(quote_id=str(quote_id))

        await db.delete(like)
        await db.flush()
        logger.info("Quote %s unliked by %s", quote_id, user_id)


like_service = LikeService()
