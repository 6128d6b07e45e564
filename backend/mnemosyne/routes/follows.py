"""
Mnemosyne Backend — Follow Routes
===================================

    POST   /api/follows/{userId}             follow (auth)
    DELETE /api/follows/{userId}             unfollow (auth)
    GET    /api/follows/{userId}/followers   paginated, newest first
    GET    /api/follows/{userId}/following   paginated, newest first
    GET    /api/follows/check/{userId}       {"isFollowing": bool} (auth)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user
from mnemosyne.exceptions import NotFollowingError, SelfFollowError
from mnemosyne.models.user import User
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.schemas.follow import FollowResponse, FollowStatus
from mnemosyne.schemas.user import UserSummary
from mnemosyne.services.common import parse_id, parse_optional_id
from mnemosyne.services.follow_service import follow_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/follows", tags=["Follows"])


@router.get(
    "/check/{user_id}",
    response_model=ApiResponse[FollowStatus],
    responses={401: {"model": ErrorResponse}},
)
async def check_follow_status(
    user_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[FollowStatus]:
    target_id = parse_optional_id(user_id)
    following = target_id is not None and await follow_service.is_following(db, user.id, target_id)
    return ApiResponse[FollowStatus](data=FollowStatus(is_following=following))


@router.post(
    "/{user_id}",
    response_model=ApiResponse[FollowResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def follow_user(
    user_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[FollowResponse]:
    # Self-follow is rejected before the id is even looked up
    if user_id == str(user.id):
        raise SelfFollowError(context={"user_id": user_id})
    follow = await follow_service.follow(db, user.id, parse_id(user_id, "user"))
    return ApiResponse[FollowResponse](data=follow, message="User followed successfully")


@router.delete(
    "/{user_id}",
    response_model=ApiResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def unfollow_user(
    user_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    target_id = parse_optional_id(user_id)
    if target_id is None:
        raise NotFollowingError(user_id=user_id)
    await follow_service.unfollow(db, user.id, target_id)
    return ApiResponse(message="User unfollowed successfully")


@router.get(
    "/{user_id}/followers",
    response_model=ApiResponse[List[UserSummary]],
    responses={404: {"model": ErrorResponse}},
)
async def list_followers(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[UserSummary]]:
    result = await follow_service.list_followers(db, parse_id(user_id, "user"), page, limit)
    return ApiResponse[List[UserSummary]](data=result.items, pagination=result.pagination())


@router.get(
    "/{user_id}/following",
    response_model=ApiResponse[List[UserSummary]],
    responses={404: {"model": ErrorResponse}},
)
async def list_following(
    user_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[UserSummary]]:
    result = await follow_service.list_following(db, parse_id(user_id, "user"), page, limit)
    return ApiResponse[List[UserSummary]](data=result.items, pagination=result.pagination())
