"""
Mnemosyne Backend — User Service
==================================

What:  User directory search, profile read/update, profile statistics and
       the liked-quotes list.

Like visibility is always decided by permissions.can_view_likes; this
module never reads `likes_private` directly.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import utcnow
from mnemosyne.exceptions import (
    AuthorizationError,
    EmailTakenError,
    NotFoundError,
    UsernameTakenError,
)
from mnemosyne.models.collection import Collection
from mnemosyne.models.quote import Quote, QuoteLike
from mnemosyne.models.user import Follow, User
from mnemosyne.schemas.common import Page
from mnemosyne.schemas.quote import QuoteResponse
from mnemosyne.schemas.user import (
    ProfileUpdate,
    PublicUserProfile,
    UserProfile,
    UserStats,
    UserSummary,
)
from mnemosyne.services.common import account_conflict, page_offset
from mnemosyne.services.permissions import can_view_likes
from mnemosyne.services.quote_service import quote_service

logger = logging.getLogger(__name__)


class UserService:
    async def get_user_row(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def search_users(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[UserSummary]:
        """Case-insensitive substring search over username and display name."""
        conditions = []
        if query and query.strip():
            term = query.strip()
            conditions.append(
                or_(
                    User.username.icontains(term, autoescape=True),
                    User.display_name.icontains(term, autoescape=True),
                )
            )
        total = (
            await db.execute(select(func.count(User.id)).where(*conditions))
        ).scalar_one()
        result = await db.execute(
            select(User)
            .where(*conditions)
            .order_by(func.lower(User.username).asc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        items = [UserSummary.model_validate(u) for u in result.scalars().all()]
        return Page[UserSummary](items=items, total=total, page=page, limit=limit)

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> UserProfile:
        return UserProfile.model_validate(await self.get_user_row(db, user_id))

    async def get_public_profile(self, db: AsyncSession, user_id: uuid.UUID) -> PublicUserProfile:
        return PublicUserProfile.model_validate(await self.get_user_row(db, user_id))

    async def update_profile(
        self, db: AsyncSession, user_id: uuid.UUID, data: ProfileUpdate
    ) -> UserProfile:
        """
        Raises:
            EmailTakenError / UsernameTakenError: value belongs to another account
        """
        user = await self.get_user_row(db, user_id)
        changes = data.model_dump(exclude_unset=True)

        # Non-nullable columns cannot be cleared
        for required in ("email", "username", "likes_private"):
            if required in changes and changes[required] is None:
                changes.pop(required)

        if "email" in changes and changes["email"] != user.email:
            if await self._taken(db, User.email == changes["email"], user_id):
                raise EmailTakenError()
        if "username" in changes and changes["username"] != user.username:
            if await self._taken(db, User.username == changes["username"], user_id):
                raise UsernameTakenError()

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = utcnow()
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            raise account_conflict(e)

        logger.info("Profile updated: %s (fields=%s)", user_id, sorted(changes))
        return UserProfile.model_validate(user)

    async def get_stats(
        self, db: AsyncSession, user_id: uuid.UUID, viewer_id: Optional[uuid.UUID]
    ) -> UserStats:
        user = await self.get_user_row(db, user_id)

        followers = await self._count(
            db, select(func.count(Follow.id)).where(Follow.following_id == user_id)
        )
        following = await self._count(
            db, select(func.count(Follow.id)).where(Follow.follower_id == user_id)
        )
        collections = await self._count(
            db, select(func.count(Collection.id)).where(Collection.user_id == user_id)
        )
        likes = None
        if can_view_likes(viewer_id, user):
            likes = await self._count(
                db, select(func.count(QuoteLike.id)).where(QuoteLike.user_id == user_id)
            )

        return UserStats(
            user_id=user.id,
            followers_count=followers,
            following_count=following,
            collections_count=collections,
            likes_count=likes,
        )

    async def get_liked_quotes(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        viewer_id: Optional[uuid.UUID],
        page: int = 1,
        limit: int = 10,
    ) -> Page[QuoteResponse]:
        """
        Quotes `user_id` has liked, most recent like first.

        Raises:
            AuthorizationError: the viewer may not see this user's likes (→ 404)
        """
        user = await self.get_user_row(db, user_id)
        if not can_view_likes(viewer_id, user):
            raise AuthorizationError(
                message="This user's likes are private",
                context={"user_id": str(user_id)},
            )

        total = await self._count(
            db, select(func.count(QuoteLike.id)).where(QuoteLike.user_id == user_id)
        )
        result = await db.execute(
            select(Quote)
            .join(QuoteLike, QuoteLike.quote_id == Quote.id)
            .where(QuoteLike.user_id == user_id)
            .order_by(QuoteLike.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        items = await quote_service.enrich(db, list(result.scalars().all()), viewer_id)
        return Page[QuoteResponse](items=items, total=total, page=page, limit=limit)

    @staticmethod
    async def _count(db: AsyncSession, stmt) -> int:
        return (await db.execute(stmt)).scalar_one()

    @staticmethod
    async def _taken(db: AsyncSession, condition, user_id: uuid.UUID) -> bool:
        result = await db.execute(select(User.id).where(condition, User.id != user_id))
        return result.scalar_one_or_none() is not None


user_service = UserService()
