"""
Mnemosyne Backend — Collection Routes
=======================================

All routes require authentication and only ever see the caller's own
collections; someone else's collection answers 404.

    GET    /api/collections
    POST   /api/collections
    GET    /api/collections/{id}
    PATCH  /api/collections/{id}
    DELETE /api/collections/{id}
    GET    /api/collections/{id}/quotes
    POST   /api/collections/{id}/quotes             body: {"quoteId": "..."}
    DELETE /api/collections/{id}/quotes/{quoteId}  idempotent
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import get_db_session
from mnemosyne.dependencies import get_current_user
from mnemosyne.models.user import User
from mnemosyne.schemas.collection import (
    AddQuoteRequest,
    CollectionCreate,
    CollectionQuoteResponse,
    CollectionResponse,
    CollectionUpdate,
)
from mnemosyne.schemas.common import ApiResponse, ErrorResponse
from mnemosyne.schemas.quote import QuoteResponse
from mnemosyne.services.collection_service import collection_service
from mnemosyne.services.common import parse_id, parse_optional_id

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/collections",
    tags=["Collections"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("", response_model=ApiResponse[List[CollectionResponse]])
async def list_collections(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[CollectionResponse]]:
    collections = await collection_service.list_collections(db, user.id)
    return ApiResponse[List[CollectionResponse]](data=collections)


@router.post(
    "",
    response_model=ApiResponse[CollectionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_collection(
    body: CollectionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CollectionResponse]:
    collection = await collection_service.create_collection(db, user.id, body)
    return ApiResponse[CollectionResponse](data=collection, message="Collection created successfully")


@router.get("/{collection_id}", response_model=ApiResponse[CollectionResponse])
async def get_collection(
    collection_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CollectionResponse]:
    collection = await collection_service.get_collection(
        db, parse_id(collection_id, "collection"), user.id
    )
    return ApiResponse[CollectionResponse](data=collection)


@router.patch("/{collection_id}", response_model=ApiResponse[CollectionResponse])
async def update_collection(
    collection_id: str,
    body: CollectionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CollectionResponse]:
    collection = await collection_service.update_collection(
        db, parse_id(collection_id, "collection"), user.id, body
    )
    return ApiResponse[CollectionResponse](data=collection, message="Collection updated successfully")


@router.delete("/{collection_id}", response_model=ApiResponse)
async def delete_collection(
    collection_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    await collection_service.delete_collection(db, parse_id(collection_id, "collection"), user.id)
    return ApiResponse(message="Collection deleted successfully")


@router.get("/{collection_id}/quotes", response_model=ApiResponse[List[QuoteResponse]])
async def list_collection_quotes(
    collection_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[List[QuoteResponse]]:
    quotes = await collection_service.list_collection_quotes(
        db, parse_id(collection_id, "collection"), user.id
    )
    return ApiResponse[List[QuoteResponse]](data=quotes)


@router.post(
    "/{collection_id}/quotes",
    response_model=ApiResponse[CollectionQuoteResponse],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def add_quote_to_collection(
    collection_id: str,
    body: AddQuoteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse[CollectionQuoteResponse]:
    membership = await collection_service.add_quote(
        db,
        parse_id(collection_id, "collection"),
        user.id,
        parse_id(body.quote_id, "quote"),
    )
    return ApiResponse[CollectionQuoteResponse](
        data=membership, message="Quote added to collection"
    )


@router.delete("/{collection_id}/quotes/{quote_id}", response_model=ApiResponse)
async def remove_quote_from_collection(
    collection_id: str,
    quote_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    collection_uuid = parse_id(collection_id, "collection")
    # A malformed quote id cannot be a member; removal still succeeds
    quote_uuid = parse_optional_id(quote_id)
    if quote_uuid is None:
        await collection_service.get_collection(db, collection_uuid, user.id)
    else:
        await collection_service.remove_quote(db, collection_uuid, user.id, quote_uuid)
    return ApiResponse(message="Quote removed from collection")
