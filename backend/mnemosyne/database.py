"""
Mnemosyne Backend — Database Session Management
=================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling, provides a session
       dependency that auto-commits on success and auto-rolls-back on error.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  Engine is created at module import; sessions are created per-request.

Concurrency Note:
    Uniqueness of likes, follows and collection memberships is enforced by
    unique constraints. Services attempt the write and translate the
    resulting IntegrityError into a domain error; there is no explicit locking.
"""

from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from mnemosyne.config import settings


def build_engine(url: str) -> AsyncEngine:
    """
    Create an async engine with pool settings appropriate for the backend.

    SQLite drivers use their own pool classes that reject `pool_size` and
    `max_overflow`, so those arguments are only passed for server databases.
    """
    kwargs: Dict[str, Any] = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": settings.log_level == "DEBUG",
    }
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,  # Recycle after 1 hour to prevent stale connections
        )
    return create_async_engine(url, **kwargs)


# ── Engine Configuration ──────────────────────────────────────────────────
engine = build_engine(settings.database_url)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: attributes stay readable after commit; an expired
# attribute would trigger implicit IO, which async sessions forbid
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers with this metadata, which Alembic reads for
    migrations and the test suite uses to create tables in SQLite.
    """
    pass


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp used for every created/updated column."""
    return datetime.now(timezone.utc)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler (the handler performs queries)
        3. On success: commits the transaction (saves changes)
        4. On error: rolls back the transaction (discards changes)
        5. Always: closes the session (returns connection to pool)

    Each endpoint is a single atomic domain operation: a like and its
    activity row are committed together or not at all.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def create_tables() -> None:
    """Create every table known to the metadata (idempotent)."""
    # Import models so they register with Base.metadata
    import mnemosyne.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
