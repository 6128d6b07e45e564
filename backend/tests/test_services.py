"""
Mnemosyne Backend — Service Unit Tests
========================================

What:  Business rules exercised below the HTTP layer.
How:   Mock sessions where the rule short-circuits before any query,
       the in-memory database everywhere else.

What we test:
    ✅ Self-follow is rejected before any lookup
    ✅ likedByMe without a caller is an authentication error
    ✅ The like-visibility predicate
    ✅ Activity retention deletes only old rows
    ✅ Activity recording rejects unknown types
    ✅ Category lookup
    ✅ Unique-constraint races map to the right conflict error
    ✅ The sample-data seeder only fills an empty table
"""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from mnemosyne.database import utcnow
from mnemosyne.exceptions import (
    AuthenticationError,
    EmailTakenError,
    NotFoundError,
    SelfFollowError,
    UsernameTakenError,
)
from mnemosyne.models.activity import Activity, ActivityType
from mnemosyne.models.quote import Quote, join_tags, split_tags
from mnemosyne.models.user import User
from mnemosyne.schemas.quote import QuoteFilters, QuoteSort
from mnemosyne.schemas.user import ProfileUpdate
from mnemosyne.seed import SAMPLE_QUOTES, seed_quotes
from mnemosyne.services.activity_service import ActivityService
from mnemosyne.services.category_service import CategoryService
from mnemosyne.services.common import account_conflict, clamp_limit, page_offset, parse_id
from mnemosyne.services.follow_service import FollowService
from mnemosyne.services.permissions import can_view_likes
from mnemosyne.services.quote_service import QuoteService, build_filter_conditions
from mnemosyne.services.user_service import UserService


def _user(username: str, likes_private: bool = False) -> User:
    return User(
        id=uuid.uuid4(),
        email=f"{username}@example.com",
        password_hash="x",
        username=username,
        likes_private=likes_private,
    )


class TestFollowServiceRules:
    def setup_method(self):
        self.service = FollowService()

    async def test_self_follow_checked_before_lookup(self, mock_db_session):
        user_id = uuid.uuid4()

        with pytest.raises(SelfFollowError):
            await self.service.follow(mock_db_session, user_id, user_id)

        mock_db_session.get.assert_not_awaited()
        mock_db_session.execute.assert_not_awaited()

    async def test_follow_missing_user(self, mock_db_session):
        mock_db_session.get = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await self.service.follow(mock_db_session, uuid.uuid4(), uuid.uuid4())

        mock_db_session.add.assert_not_called()


class TestQuoteServiceRules:
    def setup_method(self):
        self.service = QuoteService()

    def test_liked_by_me_requires_viewer(self):
        with pytest.raises(AuthenticationError):
            build_filter_conditions(QuoteFilters(liked_by_me=True), viewer_id=None)

    def test_no_filters_means_no_conditions(self):
        assert build_filter_conditions(QuoteFilters(), viewer_id=None) == []

    async def test_list_quotes_empty(self, mock_db_session):
        count_result = MagicMock()
        count_result.scalar_one.return_value = 0
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []
        mock_db_session.execute = AsyncMock(side_effect=[count_result, rows_result])

        page = await self.service.list_quotes(mock_db_session, QuoteFilters(), QuoteSort())

        assert page.items == []
        assert page.total == 0
        assert page.total_pages == 0

    async def test_random_on_empty_table(self, mock_db_session):
        count_result = MagicMock()
        count_result.scalar_one.return_value = 0
        mock_db_session.execute = AsyncMock(return_value=count_result)

        with pytest.raises(NotFoundError, match="No quotes available"):
            await self.service.get_random_quote(mock_db_session)


class TestPermissions:
    def test_public_likes_visible_to_anyone(self):
        owner = _user("owner")

        assert can_view_likes(None, owner) is True
        assert can_view_likes(uuid.uuid4(), owner) is True

    def test_private_likes_visible_to_owner_only(self):
        owner = _user("owner", likes_private=True)

        assert can_view_likes(owner.id, owner) is True
        assert can_view_likes(uuid.uuid4(), owner) is False
        assert can_view_likes(None, owner) is False


class TestActivityService:
    def setup_method(self):
        self.service = ActivityService()

    async def test_delete_old_activities(self, db_session):
        user = _user("alice")
        db_session.add(user)
        await db_session.flush()
        now = utcnow()
        db_session.add_all(
            [
                Activity(user_id=user.id, activity_type="like", created_at=now - timedelta(days=120)),
                Activity(user_id=user.id, activity_type="like", created_at=now - timedelta(days=91)),
                Activity(user_id=user.id, activity_type="like", created_at=now - timedelta(days=5)),
            ]
        )
        await db_session.flush()

        deleted = await self.service.delete_old_activities(db_session, days=90)

        remaining = (await db_session.execute(select(func.count(Activity.id)))).scalar_one()
        assert deleted == 2
        assert remaining == 1

    async def test_record_activity_rejects_unknown_type(self, db_session):
        with pytest.raises(ValueError):
            await self.service.record_activity(db_session, uuid.uuid4(), "share")

    async def test_feed_keeps_activity_with_missing_collection(self, db_session):
        user = _user("alice")
        db_session.add(user)
        await db_session.flush()
        await self.service.record_activity(
            db_session,
            user.id,
            ActivityType.COLLECTION_UPDATE,
            collection_id=uuid.uuid4(),
            metadata={"note": "renamed"},
        )

        feed = await self.service.get_global_feed(db_session)

        assert len(feed) == 1
        assert feed[0].collection is None
        assert feed[0].metadata == {"note": "renamed"}
        assert feed[0].user_name == "alice"

    async def test_user_feed_for_missing_user(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_user_feed(db_session, uuid.uuid4())

    async def test_feed_limit_is_capped(self, db_session):
        user = _user("alice")
        db_session.add(user)
        await db_session.flush()
        for _ in range(3):
            await self.service.record_activity(db_session, user.id, ActivityType.QUOTE_ADD)

        feed = await self.service.get_global_feed(db_session, limit=1)

        assert len(feed) == 1


class TestHelpers:
    def test_parse_id_rejects_garbage_as_not_found(self):
        with pytest.raises(NotFoundError, match="Quote not found"):
            parse_id("nope", "quote")

    def test_clamp_limit(self):
        assert clamp_limit(0, 20) == 20
        assert clamp_limit(500, 20) == 100
        assert clamp_limit(7, 20) == 7

    def test_page_offset(self):
        assert page_offset(1, 10) == 0
        assert page_offset(3, 10) == 20

    def test_tag_storage(self):
        assert join_tags([]) is None
        assert join_tags(["a", "b"]) == "a,b"
        assert split_tags("a,b") == ["a", "b"]
        assert Quote(text="t", author="a", tags=None).tag_list == []

    def test_user_name_prefers_display_name(self):
        user = _user("alice")
        assert user.name == "alice"
        user.display_name = "Alice"
        assert user.name == "Alice"


class TestCategoryService:
    def test_lookup(self):
        service = CategoryService()

        assert service.get_category("MOTIVATION").color == "#06B6D4"
        with pytest.raises(NotFoundError, match="Category not found"):
            service.get_category("unknown")


class TestQuoteSchemas:
    def test_update_rejects_explicit_null_text(self):
        from pydantic import ValidationError

        from mnemosyne.schemas.quote import QuoteUpdate

        with pytest.raises(ValidationError):
            QuoteUpdate.model_validate({"text": None})

    def test_update_tracks_only_sent_fields(self):
        from mnemosyne.schemas.quote import QuoteUpdate

        update = QuoteUpdate.model_validate({"category": "  "})

        assert update.model_dump(exclude_unset=True) == {"category": None}

    def test_tags_with_commas_rejected(self):
        from pydantic import ValidationError

        from mnemosyne.schemas.quote import QuoteCreate

        with pytest.raises(ValidationError, match="Tags cannot contain commas"):
            QuoteCreate(text="t", author="a", tags=["a,b"])


def _unique_violation(message: str) -> IntegrityError:
    return IntegrityError("UPDATE users", {}, Exception(message))


class TestAccountConflicts:
    def test_constraint_names_pick_the_error(self):
        email = account_conflict(_unique_violation("UNIQUE constraint failed: users.email"))
        username = account_conflict(
            _unique_violation('duplicate key value violates unique constraint "uq_users_username"')
        )

        assert isinstance(email, EmailTakenError)
        assert isinstance(username, UsernameTakenError)

    async def test_profile_update_losing_email_race(self, mock_db_session):
        user = _user("alice")
        mock_db_session.get = AsyncMock(return_value=user)
        free = MagicMock()
        free.scalar_one_or_none.return_value = None
        mock_db_session.execute = AsyncMock(return_value=free)
        mock_db_session.flush = AsyncMock(
            side_effect=_unique_violation("UNIQUE constraint failed: users.email")
        )

        with pytest.raises(EmailTakenError):
            await UserService().update_profile(
                mock_db_session, user.id, ProfileUpdate(email="bob@example.com")
            )

        mock_db_session.rollback.assert_awaited_once()


class TestSeed:
    async def test_seeds_empty_table_once(self, db_session):
        inserted = await seed_quotes(db_session)
        again = await seed_quotes(db_session)

        total = (await db_session.execute(select(func.count(Quote.id)))).scalar_one()
        assert inserted == len(SAMPLE_QUOTES)
        assert again == 0
        assert total == len(SAMPLE_QUOTES)

    async def test_skips_populated_table(self, db_session):
        db_session.add(Quote(text="Already here.", author="Someone"))
        await db_session.flush()

        assert await seed_quotes(db_session) == 0
        total = (await db_session.execute(select(func.count(Quote.id)))).scalar_one()
        assert total == 1
