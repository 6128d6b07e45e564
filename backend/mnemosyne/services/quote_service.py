"""
Mnemosyne Backend — Quote Service
===================================

What:  Quote querying (filter, sort, paginate, random), quote mutation and
       like-data enrichment.
Who:   routes/quotes.py, routes/users.py (liked quotes) and
       routes/collections.py (member quotes) all return quotes through
       `enrich()` so likeCount / isLikedByUser are computed one way only.

Query Shape (GET /api/quotes):
    SELECT quotes.* FROM quotes
    WHERE <filters>
    ORDER BY <sort column, lower() for text columns> <asc|desc>
    LIMIT :limit OFFSET (:page - 1) * :limit

    plus SELECT count(*) with the same WHERE for the pagination block.

Enrichment (per page, two queries regardless of page size):
    SELECT quote_id, count(id) FROM quote_likes WHERE quote_id IN (...) GROUP BY quote_id
    SELECT quote_id FROM quote_likes WHERE user_id = :viewer AND quote_id IN (...)
"""

import logging
import random
import uuid
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.database import utcnow
from mnemosyne.exceptions import AuthenticationError, DatabaseError, NotFoundError
from mnemosyne.models.activity import ActivityType
from mnemosyne.models.collection import CollectionQuote
from mnemosyne.models.quote import Quote, QuoteLike, join_tags
from mnemosyne.models.user import Follow, User
from mnemosyne.schemas.common import Page
from mnemosyne.schemas.quote import (
    FeedQuoteResponse,
    QuoteCreate,
    QuoteFilters,
    QuoteResponse,
    QuoteSort,
    QuoteUpdate,
)
from mnemosyne.schemas.user import UserSummary
from mnemosyne.services.activity_service import activity_service
from mnemosyne.services.common import page_offset
from mnemosyne.services.permissions import likes_visible_clause

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "createdAt": Quote.created_at,
    "updatedAt": Quote.updated_at,
    "author": Quote.author,
    "text": Quote.text,
}
_CASE_INSENSITIVE_SORTS = {"author", "text"}


def build_filter_conditions(filters: QuoteFilters, viewer_id: Optional[uuid.UUID]) -> list:
    """
    Translate QuoteFilters into SQLAlchemy WHERE clauses.

    Raises:
        AuthenticationError: likedByMe requested without a caller identity
    """
    conditions = []
    if filters.category:
        conditions.append(func.lower(Quote.category) == filters.category.strip().lower())
    if filters.author:
        conditions.append(Quote.author.icontains(filters.author.strip(), autoescape=True))
    tags = [t.strip() for t in filters.tags if t and t.strip()]
    if tags:
        conditions.append(or_(*(Quote.tags.icontains(t, autoescape=True) for t in tags)))
    if filters.search:
        term = filters.search.strip()
        matches = [
            Quote.text.icontains(term, autoescape=True),
            Quote.author.icontains(term, autoescape=True),
        ]
        # Tags are stored comma-joined and never contain a comma themselves,
        # so a term with a comma could only match across two tags
        if "," not in term:
            matches.append(Quote.tags.icontains(term, autoescape=True))
        conditions.append(or_(*matches))
    if filters.is_public is not None:
        conditions.append(Quote.is_public == filters.is_public)
    if filters.liked_by_me:
        if viewer_id is None:
            raise AuthenticationError(message="Authentication required to filter liked quotes.")
        conditions.append(
            Quote.id.in_(select(QuoteLike.quote_id).where(QuoteLike.user_id == viewer_id))
        )
    return conditions


def build_order_by(sort: QuoteSort):
    column = _SORT_COLUMNS[sort.field]
    if sort.field in _CASE_INSENSITIVE_SORTS:
        column = func.lower(column)
    return column.asc() if sort.order == "asc" else column.desc()


def to_quote_response(quote: Quote, like_count: int = 0, liked: bool = False) -> QuoteResponse:
    return QuoteResponse(
        id=quote.id,
        text=quote.text,
        author=quote.author,
        category=quote.category,
        tags=quote.tag_list,
        source=quote.source,
        is_public=quote.is_public,
        user_id=quote.user_id,
        created_at=quote.created_at,
        updated_at=quote.updated_at,
        like_count=like_count,
        is_liked_by_user=liked,
    )


class QuoteService:
    """
    Business logic for quotes.

    Error Handling Strategy:
        Domain failures (NotFoundError, AuthenticationError) propagate as-is.
        Unexpected SQLAlchemy failures on reads are wrapped in DatabaseError
        so the client sees a generic message while the cause is logged.
    """

    # ── Enrichment ────────────────────────────────────────────────────────

    async def like_data(
        self,
        db: AsyncSession,
        quote_ids: Sequence[uuid.UUID],
        viewer_id: Optional[uuid.UUID],
    ) -> Tuple[Dict[uuid.UUID, int], Set[uuid.UUID]]:
        """Like counts for `quote_ids` and the subset the viewer has liked."""
        if not quote_ids:
            return {}, set()
        counts_result = await db.execute(
            select(QuoteLike.quote_id, func.count(QuoteLike.id))
            .where(QuoteLike.quote_id.in_(quote_ids))
            .group_by(QuoteLike.quote_id)
        )
        counts = {quote_id: count for quote_id, count in counts_result.all()}

        liked: Set[uuid.UUID] = set()
        if viewer_id is not None:
            liked_result = await db.execute(
                select(QuoteLike.quote_id).where(
                    QuoteLike.user_id == viewer_id,
                    QuoteLike.quote_id.in_(quote_ids),
                )
            )
            liked = set(liked_result.scalars().all())
        return counts, liked

    async def enrich(
        self,
        db: AsyncSession,
        quotes: Sequence[Quote],
        viewer_id: Optional[uuid.UUID],
    ) -> List[QuoteResponse]:
        """Attach likeCount and isLikedByUser (always false for anonymous viewers)."""
        counts, liked = await self.like_data(db, [q.id for q in quotes], viewer_id)
        return [to_quote_response(q, counts.get(q.id, 0), q.id in liked) for q in quotes]

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_quote_row(self, db: AsyncSession, quote_id: uuid.UUID) -> Quote:
        """
        Fetch the ORM row or raise NotFoundError.

        Used by the like and collection services to validate targets.
        """
        quote = await db.get(Quote, quote_id)
        if quote is None:
            raise NotFoundError(resource="quote", resource_id=str(quote_id))
        return quote

    async def list_quotes(
        self,
        db: AsyncSession,
        filters: QuoteFilters,
        sort: QuoteSort,
        page: int = 1,
        limit: int = 10,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> Page[QuoteResponse]:
        """
        Filtered, sorted, paginated quotes with like enrichment.

        A page beyond the last one yields an empty item list; total and
        totalPages are still reported.
        """
        conditions = build_filter_conditions(filters, viewer_id)
        try:
            total = (
                await db.execute(select(func.count()).select_from(Quote).where(*conditions))
            ).scalar_one()

            result = await db.execute(
                select(Quote)
                .where(*conditions)
                .order_by(build_order_by(sort))
                .offset(page_offset(page, limit))
                .limit(limit)
            )
            quotes = list(result.scalars().all())
            items = await self.enrich(db, quotes, viewer_id)
        except SQLAlchemyError as e:
            logger.error("Database error listing quotes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve quotes. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return Page[QuoteResponse](items=items, total=total, page=page, limit=limit)

    async def get_quote(
        self, db: AsyncSession, quote_id: uuid.UUID, viewer_id: Optional[uuid.UUID] = None
    ) -> QuoteResponse:
        quote = await self.get_quote_row(db, quote_id)
        return (await self.enrich(db, [quote], viewer_id))[0]

    async def get_random_quote(
        self, db: AsyncSession, viewer_id: Optional[uuid.UUID] = None
    ) -> QuoteResponse:
        """
        Uniform random choice: random offset into the row count.

        Raises:
            NotFoundError: there are no quotes at all
        """
        total = (await db.execute(select(func.count()).select_from(Quote))).scalar_one()
        if total == 0:
            raise NotFoundError(resource="quote", message="No quotes available")

        result = await db.execute(
            select(Quote).order_by(Quote.id).offset(random.randrange(total)).limit(1)
        )
        quote = result.scalars().first()
        if quote is None:
            # Rows deleted between the count and the fetch
            raise NotFoundError(resource="quote", message="No quotes available")
        return (await self.enrich(db, [quote], viewer_id))[0]

    async def list_by_author(
        self,
        db: AsyncSession,
        author: str,
        page: int = 1,
        limit: int = 10,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> Page[QuoteResponse]:
        return await self.list_quotes(
            db, QuoteFilters(author=author), QuoteSort(), page, limit, viewer_id
        )

    async def list_by_category(
        self,
        db: AsyncSession,
        category: str,
        page: int = 1,
        limit: int = 10,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> Page[QuoteResponse]:
        return await self.list_quotes(
            db, QuoteFilters(category=category), QuoteSort(), page, limit, viewer_id
        )

    @staticmethod
    def _following_likes(stmt, user_id: uuid.UUID):
        """Restrict `stmt` to visible likes made by users that `user_id` follows."""
        return (
            stmt.join(Quote, Quote.id == QuoteLike.quote_id)
            .join(User, User.id == QuoteLike.user_id)
            .join(Follow, Follow.following_id == QuoteLike.user_id)
            .where(Follow.follower_id == user_id)
            .where(likes_visible_clause(user_id))
        )

    async def get_following_feed(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
        order: str = "desc",
    ) -> Page[FeedQuoteResponse]:
        """
        Quotes liked by the users `user_id` follows, one item per like.

        Likes of followed users whose likes are private are excluded
        (permissions.likes_visible_clause evaluated for the viewer).
        """
        total = (
            await db.execute(
                self._following_likes(
                    select(func.count(QuoteLike.id)).select_from(QuoteLike), user_id
                )
            )
        ).scalar_one()

        liked_at = QuoteLike.created_at.asc() if order == "asc" else QuoteLike.created_at.desc()
        rows = (
            await db.execute(
                self._following_likes(select(QuoteLike, Quote, User), user_id)
                .order_by(liked_at)
                .offset(page_offset(page, limit))
                .limit(limit)
            )
        ).all()

        quotes = [row[1] for row in rows]
        counts, liked = await self.like_data(db, [q.id for q in quotes], user_id)
        items = [
            FeedQuoteResponse(
                **to_quote_response(quote, counts.get(quote.id, 0), quote.id in liked).model_dump(),
                liked_by=UserSummary.model_validate(liker),
                liked_at=like.created_at,
            )
            for like, quote, liker in rows
        ]
        return Page[FeedQuoteResponse](items=items, total=total, page=page, limit=limit)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_quote(
        self, db: AsyncSession, data: QuoteCreate, user_id: Optional[uuid.UUID] = None
    ) -> QuoteResponse:
        """
        Persist a new quote. When the caller is authenticated the quote is
        owned by them and a `quoteAdd` activity is appended.
        """
        quote = Quote(
            text=data.text,
            author=data.author,
            category=data.category,
            tags=join_tags(data.tags),
            source=data.source,
            is_public=data.is_public,
            user_id=user_id,
        )
        db.add(quote)
        await db.flush()

        if user_id is not None:
            await activity_service.record_activity(
                db, user_id, ActivityType.QUOTE_ADD, quote_id=quote.id
            )
        logger.info("Quote created: %s (author=%s, owner=%s)", quote.id, quote.author, user_id)
        return to_quote_response(quote)

    async def update_quote(
        self,
        db: AsyncSession,
        quote_id: uuid.UUID,
        data: QuoteUpdate,
        viewer_id: Optional[uuid.UUID] = None,
    ) -> QuoteResponse:
        """Apply only the fields present in the request body."""
        quote = await self.get_quote_row(db, quote_id)

        changes = data.model_dump(exclude_unset=True)
        if "tags" in changes:
            changes["tags"] = join_tags(changes["tags"])
        for field, value in changes.items():
            setattr(quote, field, value)
        quote.updated_at = utcnow()
        await db.flush()

        logger.info("Quote updated: %s (fields=%s)", quote.id, sorted(changes))
        return (await self.enrich(db, [quote], viewer_id))[0]

    async def delete_quote(self, db: AsyncSession, quote_id: uuid.UUID) -> None:
        """Delete a quote together with its likes and collection memberships."""
        quote = await self.get_quote_row(db, quote_id)

        await db.execute(delete(QuoteLike).where(QuoteLike.quote_id == quote_id))
        await db.execute(delete(CollectionQuote).where(CollectionQuote.quote_id == quote_id))
        await db.delete(quote)
        await db.flush()
        logger.info("Quote deleted: %s", quote_id)


quote_service = QuoteService()
