"""
Mnemosyne Backend — Follow Service
====================================

What:  Directed follow relationships between users.

Rules:
    follow(A, A)          → SelfFollowError (400), checked before any lookup
    follow(A, missing)    → NotFoundError (404)
    follow(A, B) twice    → AlreadyFollowingError (400)
    unfollow(A, B) unfollowed → NotFollowingError (404)
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.exceptions import (
    AlreadyFollowingError,
    NotFollowingError,
    NotFoundError,
    SelfFollowError,
)
from mnemosyne.models.user import Follow, User
from mnemosyne.schemas.common import Page
from mnemosyne.schemas.follow import FollowResponse
from mnemosyne.schemas.user import UserSummary
from mnemosyne.services.common import page_offset

logger = logging.getLogger(__name__)


class FollowService:
    async def _find(
        self, db: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
    ) -> Follow | None:
        result = await db.execute(
            select(Follow).where(
                Follow.follower_id == follower_id, Follow.following_id == following_id
            )
        )
        return result.scalar_one_or_none()

    async def _require_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user

    async def follow(
        self, db: AsyncSession, follower_id: uuid.UUID, target_id: uuid.UUID
    ) -> FollowResponse:
        if follower_id == target_id:
            raise SelfFollowError(context={"user_id": str(follower_id)})
        await self._require_user(db, target_id)

        if await self._find(db, follower_id, target_id) is not None:
            raise AlreadyFollowingError(context={"target_id": str(target_id)})

        follow = Follow(follower_id=follower_id, following_id=target_id)
        db.add(follow)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise AlreadyFollowingError(context={"target_id": str(target_id)})

        logger.info("User %s now follows %s", follower_id, target_id)
        return FollowResponse.model_validate(follow)

    async def unfollow(
        self, db: AsyncSession, follower_id: uuid.UUID, target_id: uuid.UUID
    ) -> None:
        follow = await self._find(db, follower_id, target_id)
        if follow is None:
            raise NotFollowingError(user_id=str(target_id))
        await db.delete(follow)
        await db.flush()
        logger.info("User %s unfollowed %s", follower_id, target_id)

    async def is_following(
        self, db: AsyncSession, follower_id: uuid.UUID, target_id: uuid.UUID
    ) -> bool:
        return await self._find(db, follower_id, target_id) is not None

    async def list_followers(
        self, db: AsyncSession, user_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> Page[UserSummary]:
        """Users following `user_id`, most recent follow first."""
        return await self._list(db, user_id, page, limit, followers=True)

    async def list_following(
        self, db: AsyncSession, user_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> Page[UserSummary]:
        """Users `user_id` follows, most recent follow first."""
        return await self._list(db, user_id, page, limit, followers=False)

    async def _list(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        page: int,
        limit: int,
        followers: bool,
    ) -> Page[UserSummary]:
        await self._require_user(db, user_id)

        # followers: the other side is follower_id; following: following_id
        anchor, other = (
            (Follow.following_id, Follow.follower_id)
            if followers
            else (Follow.follower_id, Follow.following_id)
        )
        total = (
            await db.execute(select(func.count(Follow.id)).where(anchor == user_id))
        ).scalar_one()
        result = await db.execute(
            select(User)
            .join(Follow, other == User.id)
            .where(anchor == user_id)
            .order_by(Follow.created_at.desc())
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        items = [UserSummary.model_validate(u) for u in result.scalars().all()]
        return Page[UserSummary](items=items, total=total, page=page, limit=limit)


follow_service = FollowService()
