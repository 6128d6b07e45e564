"""
Mnemosyne Backend — User Routes
=================================

    GET   /api/users                 search the directory (`q`, paginated)
    GET   /api/users/profile         caller's private profile (auth)
    PATCH /api/users/profile         update caller's profile (auth)
    GET   /api/users/{id}            public profile
    GET   /api/users/{id}/stats      follower/following/collection/like counts
    GET   /api/users/{id}/likes      liked quotes; 404 when likes are private

/profile is declared before /{user_id} so it is not taken as an id.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user, get_optional_user
from mnemosyne.models.user import User
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.schemas.quote import QuoteResponse
from mnemosyne.schemas.user import (
    ProfileUpdate,
    PublicUserProfile,
    UserProfile,
    UserStats,
    UserSummary,
)
from mnemosyne.services.common import parse_id
from mnemosyne.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=ApiResponse[List[UserSummary]])
async def search_users(
    q: Optional[str] = Query(default=None, description="Username or display name substring"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[UserSummary]]:
    result = await user_service.search_users(db, q, page, limit)
    return ApiResponse[List[UserSummary]](data=result.items, pagination=result.pagination())


@router.get(
    "/profile",
    response_model=ApiResponse[UserProfile],
    responses={401: {"model": ErrorResponse}},
)
async def get_profile(user: User = Depends(get_current_user)) -> ApiResponse[UserProfile]:
    return ApiResponse[UserProfile](data=UserProfile.model_validate(user))


@router.patch(
    "/profile",
    response_model=ApiResponse[UserProfile],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserProfile]:
    profile = await user_service.update_profile(db, user.id, body)
    return ApiResponse[UserProfile](data=profile, message="Profile updated successfully")


@router.get(
    "/{user_id}",
    response_model=ApiResponse[PublicUserProfile],
    responses={404: {"model": ErrorResponse}},
)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[PublicUserProfile]:
    profile = await user_service.get_public_profile(db, parse_id(user_id, "user"))
    return ApiResponse[PublicUserProfile](data=profile)


@router.get(
    "/{user_id}/stats",
    response_model=ApiResponse[UserStats],
    responses={404: {"model": ErrorResponse}},
)
async def get_user_stats(
    user_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[UserStats]:
    stats = await user_service.get_stats(
        db, parse_id(user_id, "user"), viewer.id if viewer else None
    )
    return ApiResponse[UserStats](data=stats)


@router.get(
    "/{user_id}/likes",
    response_model=ApiResponse[List[QuoteResponse]],
    responses={404: {"model": ErrorResponse}},
)
async def get_user_likes(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    viewer: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[QuoteResponse]]:
    result = await user_service.get_liked_quotes(
        db, parse_id(user_id, "user"), viewer.id if viewer else None, page, limit
    )
    return ApiResponse[List[QuoteResponse]](data=result.items, pagination=result.pagination())
