"""
Mnemosyne Backend — Activity Feed Routes
==========================================

    GET /api/activity/feed            global feed, newest first (optional auth)
    GET /api/activity/user/{userId}   one user's activity (optional auth)
    GET /api/activity/me              caller's own activity (auth)

`limit` is clamped to 1..100. Viewers never see `like` activities of users
whose likes are private, unless the viewer is that user.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user, get_optional_user
from mnemosyne.models.user import User
from mnemosyne.schemas.activity import ActivityResponse
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.services.activity_service import (
    GLOBAL_FEED_DEFAULT_LIMIT,
    USER_FEED_DEFAULT_LIMIT,
    activity_service,
)
from mnemosyne.services.common import parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/activity", tags=["Activity"])


@router.get("/feed", response_model=ApiResponse[List[ActivityResponse]])
async def global_feed(
    limit: int = Query(default=GLOBAL_FEED_DEFAULT_LIMIT, ge=1),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[ActivityResponse]]:
    activities = await activity_service.get_global_feed(
        db, limit=limit, viewer_id=user.id if user else None
    )
    return ApiResponse[List[ActivityResponse]](data=activities)


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[ActivityResponse]],
    responses={404: {"model": ErrorResponse}},
)
async def user_feed(
    user_id: str,
    limit: int = Query(default=USER_FEED_DEFAULT_LIMIT, ge=1),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[ActivityResponse]]:
    activities = await activity_service.get_user_feed(
        db, parse_id(user_id, "user"), limit=limit, viewer_id=user.id if user else None
    )
    return ApiResponse[List[ActivityResponse]](data=activities)


@router.get(
    "/me",
    response_model=ApiResponse[List[ActivityResponse]],
    responses={401: {"model": ErrorResponse}},
)
async def my_feed(
    limit: int = Query(default=USER_FEED_DEFAULT_LIMIT, ge=1),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[ActivityResponse]]:
    activities = await activity_service.get_user_feed(db, user.id, limit=limit, viewer_id=user.id)
    return ApiResponse[List[ActivityResponse]](data=activities)
