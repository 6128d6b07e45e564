"""
Mnemosyne Backend — Quote Routes
==================================

Route Inventory:
    GET    /api/quotes                        filter, sort, paginate (optional auth)
    GET    /api/quotes/random                 one random quote (optional auth)
    GET    /api/quotes/feed                   likes by followed users (auth)
    GET    /api/quotes/author/{author}        by author substring
    GET    /api/quotes/category/{category}    by category
    GET    /api/quotes/{id}                   one quote (optional auth)
    POST   /api/quotes                        create
    PUT    /api/quotes/{id}                   partial update
    DELETE /api/quotes/{id}                   delete
    POST   /api/quotes/{id}/like              like (auth)
    DELETE /api/quotes/{id}/like              unlike (auth)

Fixed paths (/random, /feed, /author, /category) are declared before
/{quote_id} so they are not captured by the path parameter.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user, get_optional_user, get_quote_writer
from mnemosyne.models.user import User
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.schemas.quote import (
    FeedQuoteResponse,
    QuoteCreate,
    QuoteFilters,
    QuoteLikeResponse,
    QuoteResponse,
    QuoteSort,
    QuoteUpdate,
    SortField,
    SortOrder,
)
from mnemosyne.services.common import parse_id
from mnemosyne.services.like_service import like_service
from mnemosyne.services.quote_service import quote_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


def _viewer_id(user: Optional[User]):
    return user.id if user is not None else None


def _split_tags(raw: Optional[List[str]]) -> List[str]:
    """Accept `?tags=a,b` as well as `?tags=a&tags=b`."""
    if not raw:
        return []
    return [tag.strip() for value in raw for tag in value.split(",") if tag.strip()]


@router.get(
    "",
    response_model=ApiResponse[List[QuoteResponse]],
    responses={400: {"model": ErrorResponse}},
    summary="List quotes with filtering, sorting and pagination",
)
async def list_quotes(
    category: Optional[str] = Query(default=None, description="Case-insensitive exact match"),
    author: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    tags: Optional[List[str]] = Query(default=None, description="Comma-separated or repeated"),
    search: Optional[str] = Query(default=None, description="Substring of text, author or tags"),
    is_public: Optional[bool] = Query(default=None, alias="isPublic"),
    liked_by_me: bool = Query(default=False, alias="likedByMe"),
    sort_by: SortField = Query(default="createdAt", alias="sortBy"),
    sort_order: SortOrder = Query(default="desc", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[QuoteResponse]]:
    filters = QuoteFilters(
        category=category,
        author=author,
        tags=_split_tags(tags),
        search=search,
        is_public=is_public,
        liked_by_me=liked_by_me,
    )
    result = await quote_service.list_quotes(
        db,
        filters=filters,
        sort=QuoteSort(field=sort_by, order=sort_order),
        page=page,
        limit=limit,
        viewer_id=_viewer_id(user),
    )
    return ApiResponse[List[QuoteResponse]](data=result.items, pagination=result.pagination())


@router.get(
    "/random",
    response_model=ApiResponse[QuoteResponse],
    responses={404: {"model": ErrorResponse}},
    summary="A uniformly random quote",
)
async def random_quote(
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[QuoteResponse]:
    quote = await quote_service.get_random_quote(db, viewer_id=_viewer_id(user))
    return ApiResponse[QuoteResponse](data=quote)


@router.get(
    "/feed",
    response_model=ApiResponse[List[FeedQuoteResponse]],
    responses={401: {"model": ErrorResponse}},
    summary="Quotes recently liked by users you follow",
)
async def following_feed(
    sort_order: SortOrder = Query(default="desc", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[FeedQuoteResponse]]:
    result = await quote_service.get_following_feed(
        db, user.id, page=page, limit=limit, order=sort_order
    )
    return ApiResponse[List[FeedQuoteResponse]](data=result.items, pagination=result.pagination())


@router.get(
    "/author/{author}",
    response_model=ApiResponse[List[QuoteResponse]],
    summary="Quotes whose author contains the given text",
)
async def quotes_by_author(
    author: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[QuoteResponse]]:
    result = await quote_service.list_by_author(
        db, author, page=page, limit=limit, viewer_id=_viewer_id(user)
    )
    return ApiResponse[List[QuoteResponse]](data=result.items, pagination=result.pagination())


@router.get(
    "/category/{category}",
    response_model=ApiResponse[List[QuoteResponse]],
    summary="Quotes in a category",
)
async def quotes_by_category(
    category: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[QuoteResponse]]:
    result = await quote_service.list_by_category(
        db, category, page=page, limit=limit, viewer_id=_viewer_id(user)
    )
    return ApiResponse[List[QuoteResponse]](data=result.items, pagination=result.pagination())


@router.get(
    "/{quote_id}",
    response_model=ApiResponse[QuoteResponse],
    responses={404: {"model": ErrorResponse}},
    summary="Get a single quote",
)
async def get_quote(
    quote_id: str,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[QuoteResponse]:
    quote = await quote_service.get_quote(db, parse_id(quote_id, "quote"), _viewer_id(user))
    return ApiResponse[QuoteResponse](data=quote)


@router.post(
    "",
    response_model=ApiResponse[QuoteResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create a quote",
)
async def create_quote(
    body: QuoteCreate,
    user: Optional[User] = Depends(get_quote_writer),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[QuoteResponse]:
    quote = await quote_service.create_quote(db, body, user_id=_viewer_id(user))
    return ApiResponse[QuoteResponse](data=quote, message="Quote created successfully")


@router.put(
    "/{quote_id}",
    response_model=ApiResponse[QuoteResponse],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update fields of a quote",
)
async def update_quote(
    quote_id: str,
    body: QuoteUpdate,
    user: Optional[User] = Depends(get_quote_writer),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[QuoteResponse]:
    quote = await quote_service.update_quote(
        db, parse_id(quote_id, "quote"), body, viewer_id=_viewer_id(user)
    )
    return ApiResponse[QuoteResponse](data=quote, message="Quote updated successfully")


@router.delete(
    "/{quote_id}",
    response_model=ApiResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a quote with its likes and collection memberships",
)
async def delete_quote(
    quote_id: str,
    user: Optional[User] = Depends(get_quote_writer),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    await quote_service.delete_quote(db, parse_id(quote_id, "quote"))
    return ApiResponse(message="Quote deleted successfully")


# ── Likes ─────────────────────────────────────────────────────────────────

@router.post(
    "/{quote_id}/like",
    response_model=ApiResponse[QuoteLikeResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Like a quote",
)
async def like_quote(
    quote_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[QuoteLikeResponse]:
    like = await like_service.like(db, user.id, parse_id(quote_id, "quote"))
    return ApiResponse[QuoteLikeResponse](data=like, message="Quote liked successfully")


@router.delete(
    "/{quote_id}/like",
    response_model=ApiResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Remove your like from a quote",
)
async def unlike_quote(
    quote_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    await like_service.unlike(db, user.id, parse_id(quote_id, "quote"))
    return ApiResponse(message="Quote unliked successfully")
