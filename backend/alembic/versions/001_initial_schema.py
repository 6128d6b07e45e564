"""Initial schema: users, follows, quotes, quote_likes, collections, collection_quotes, activities

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates all seven tables with their unique constraints and indexes.

Uniqueness invariants carried by the schema:
    quote_likes        (user_id, quote_id)         one like per user per quote
    collection_quotes  (collection_id, quote_id)   a quote once per collection
    follows            (follower_id, following_id) one edge per ordered pair

activities.quote_id / collection_id intentionally have no foreign keys:
activity rows outlive the quotes and collections they mention.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("likes_private", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "follows",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_follows"),
        sa.ForeignKeyConstraint(["follower_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["following_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follows_follower_following"),
    )
    op.create_index("idx_follows_following_id", "follows", ["following_id"])

    op.create_table(
        "quotes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.String(200), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("source", sa.String(500), nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_quotes"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_quotes_created_at", "quotes", [sa.text("created_at DESC")])
    op.create_index("idx_quotes_category", "quotes", ["category"])

    op.create_table(
        "quote_likes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("quote_id", sa.Uuid(), nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_quote_likes"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["quote_id"], ["quotes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "quote_id", name="uq_quote_likes_user_quote"),
    )
    op.create_index("idx_quote_likes_quote_id", "quote_likes", ["quote_id"])

    op.create_table(
        "collections",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        _created_at(),
        _created_at("updated_at"),
        sa.PrimaryKeyConstraint("id", name="pk_collections"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_collections_user_id", "collections", ["user_id"])

    op.create_table(
        "collection_quotes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("collection_id", sa.Uuid(), nullable=False),
        sa.Column("quote_id", sa.Uuid(), nullable=False),
        _created_at("added_at"),
        sa.PrimaryKeyConstraint("id", name="pk_collection_quotes"),
        sa.ForeignKeyConstraint(["collection_id"], ["collections.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["quote_id"], ["quotes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "collection_id", "quote_id", name="uq_collection_quotes_collection_quote"
        ),
    )

    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("activity_type", sa.String(32), nullable=False),
        sa.Column("quote_id", sa.Uuid(), nullable=True),
        sa.Column("collection_id", sa.Uuid(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_activities"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_activities_created_at", "activities", ["created_at"])
    op.create_index(
        "idx_activities_user_id_created_at", "activities", ["user_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("idx_activities_user_id_created_at", table_name="activities")
    op.drop_index("idx_activities_created_at", table_name="activities")
    op.drop_table("activities")
    op.drop_table("collection_quotes")
    op.drop_index("idx_collections_user_id", table_name="collections")
    op.drop_table("collections")
    op.drop_index("idx_quote_likes_quote_id", table_name="quote_likes")
    op.drop_table("quote_likes")
    op.drop_index("idx_quotes_category", table_name="quotes")
    op.drop_index("idx_quotes_created_at", table_name="quotes")
    op.drop_table("quotes")
    op.drop_index("idx_follows_following_id", table_name="follows")
    op.drop_table("follows")
    op.drop_table("users")
