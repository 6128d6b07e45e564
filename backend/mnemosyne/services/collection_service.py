"""
Mnemosyne Backend — Collection Service
========================================

What:  Owner-scoped collection CRUD and membership management.

Ownership:
    Every operation loads the collection with `id AND user_id = caller`.
    A collection owned by someone else is indistinguishable from a missing
    one: both raise NotFoundError("Collection not found").

Activities:
    create            → collectionCreate
    update            → collectionUpdate
    add quote         → collectionUpdate (with quote_id)
    remove / delete   → none
"""

import logging
import uuid
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import utcnow
from mnemosyne.exceptions import AlreadyInCollectionError, NotFoundError
from mnemosyne.models.activity import ActivityType
from mnemosyne.models.collection import Collection, CollectionQuote
from mnemosyne.models.quote import Quote
from mnemosyne.schemas.collection import (
    CollectionCreate,
    CollectionQuoteResponse,
    CollectionResponse,
    CollectionUpdate,
)
from mnemosyne.schemas.quote import QuoteResponse
from mnemosyne.services.activity_service import activity_service
from mnemosyne.services.quote_service import quote_service

logger = logging.getLogger(__name__)


def _to_response(collection: Collection, quote_count: int = 0) -> CollectionResponse:
    return CollectionResponse(
        id=collection.id,
        name=collection.name,
        description=collection.description,
        user_id=collection.user_id,
        created_at=collection.created_at,
        updated_at=collection.updated_at,
        quote_count=quote_count,
    )


class CollectionService:
    async def _get_owned(
        self, db: AsyncSession, collection_id: uuid.UUID, user_id: uuid.UUID
    ) -> Collection:
        result = await db.execute(
            select(Collection).where(Collection.id == collection_id, Collection.user_id == user_id)
        )
        collection = result.scalar_one_or_none()
        if collection is None:
            raise NotFoundError(resource="collection", resource_id=str(collection_id))
        return collection

    async def _quote_count(self, db: AsyncSession, collection_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count(CollectionQuote.id)).where(
                CollectionQuote.collection_id == collection_id
            )
        )
        return result.scalar_one()

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_collections(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> List[CollectionResponse]:
        """The caller's collections, newest first, each with its quote count."""
        quote_count = (
            select(func.count(CollectionQuote.id))
            .where(CollectionQuote.collection_id == Collection.id)
            .correlate(Collection)
            .scalar_subquery()
        )
        result = await db.execute(
            select(Collection, quote_count)
            .where(Collection.user_id == user_id)
            .order_by(Collection.created_at.desc())
        )
        return [_to_response(collection, count) for collection, count in result.all()]

    async def get_collection(
        self, db: AsyncSession, collection_id: uuid.UUID, user_id: uuid.UUID
    ) -> CollectionResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        return _to_response(collection, await self._quote_count(db, collection.id))

    async def list_collection_quotes(
        self, db: AsyncSession, collection_id: uuid.UUID, user_id: uuid.UUID
    ) -> List[QuoteResponse]:
        """Member quotes, most recently added first, with like enrichment."""
        await self._get_owned(db, collection_id, user_id)
        result = await db.execute(
            select(Quote)
            .join(CollectionQuote, CollectionQuote.quote_id == Quote.id)
            .where(CollectionQuote.collection_id == collection_id)
            .order_by(CollectionQuote.added_at.desc())
        )
        quotes = list(result.scalars().all())
        return await quote_service.enrich(db, quotes, user_id)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_collection(
        self, db: AsyncSession, user_id: uuid.UUID, data: CollectionCreate
    ) -> CollectionResponse:
        collection = Collection(name=data.name, description=data.description, user_id=user_id)
        db.add(collection)
        await db.flush()

        await activity_service.record_activity(
            db, user_id, ActivityType.COLLECTION_CREATE, collection_id=collection.id
        )
        logger.info("Collection created: %s by %s", collection.id, user_id)
        return _to_response(collection)

    async def update_collection(
        self,
        db: AsyncSession,
        collection_id: uuid.UUID,
        user_id: uuid.UUID,
        data: CollectionUpdate,
    ) -> CollectionResponse:
        collection = await self._get_owned(db, collection_id, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(collection, field, value)
        collection.updated_at = utcnow()
        await db.flush()

        await activity_service.record_activity(
            db, user_id, ActivityType.COLLECTION_UPDATE, collection_id=collection.id
        )
        logger.info("Collection updated: %s", collection.id)
        return _to_response(collection, await self._quote_count(db, collection.id))

    async def delete_collection(
        self, db: AsyncSession, collection_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        """Delete a collection and its memberships (the quotes themselves stay)."""
        collection = await self._get_owned(db, collection_id, user_id)
        await db.execute(
            delete(CollectionQuote).where(CollectionQuote.collection_id == collection.id)
        )
        await db.delete(collection)
        await db.flush()
        logger.info("Collection deleted: %s", collection_id)

    async def add_quote(
        self,
        db: AsyncSession,
        collection_id: uuid.UUID,
        user_id: uuid.UUID,
        quote_id: uuid.UUID,
    ) -> CollectionQuoteResponse:
        """
        Raises:
            NotFoundError: collection not owned by caller, or quote missing
            AlreadyInCollectionError: quote is already a member
        """
        await self._get_owned(db, collection_id, user_id)
        await quote_service.get_quote_row(db, quote_id)

        existing = await db.execute(
            select(CollectionQuote.id).where(
                CollectionQuote.collection_id == collection_id,
                CollectionQuote.quote_id == quote_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise AlreadyInCollectionError(context={"quote_id": str(quote_id)})

        membership = CollectionQuote(collection_id=collection_id, quote_id=quote_id)
        db.add(membership)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise AlreadyInCollectionError(context={"quote_id": str(quote_id)})

        await activity_service.record_activity(
            db,
            user_id,
            ActivityType.COLLECTION_UPDATE,
            quote_id=quote_id,
            collection_id=collection_id,
        )
        logger.info("Quote %s added to collection %s", quote_id, collection_id)
        return CollectionQuoteResponse.model_validate(membership)

    async def remove_quote(
        self,
        db: AsyncSession,
        collection_id: uuid.UUID,
        user_id: uuid.UUID,
        quote_id: uuid.UUID,
    ) -> None:
        """Idempotent: removing a non-member succeeds silently."""
        await self._get_owned(db, collection_id, user_id)
        await db.execute(
            delete(CollectionQuote).where(
                CollectionQuote.collection_id == collection_id,
                CollectionQuote.quote_id == quote_id,
            )
        )
        logger.info("Quote %s removed from collection %s", quote_id, collection_id)


collection_service = CollectionService()
