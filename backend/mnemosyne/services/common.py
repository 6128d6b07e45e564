"""
Mnemosyne Backend — Service Helpers
=====================================

Small helpers shared by every service: identifier parsing, page math and
the IntegrityError → domain error translation used when a unique check
loses a race with a concurrent write.
"""

import logging
import uuid
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError

from mnemosyne.exceptions import (
    ConflictError,
    EmailTakenError,
    NotFoundError,
    UsernameTakenError,
)

logger = logging.getLogger(__name__)

# Hard ceiling on any page size or feed length
MAX_LIMIT = 100


def parse_id(raw: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """
    Coerce a path identifier into a UUID.

    A string that is not a UUID cannot name an existing row, so it is
    reported as the resource being missing (404) rather than as bad input.
    """
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(raw))


def parse_optional_id(raw: Optional[str]) -> Optional[uuid.UUID]:
    """Like parse_id, but None for anything that is not a valid UUID."""
    if raw is None:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def clamp_limit(limit: int, default: int) -> int:
    if limit is None or limit < 1:
        return default
    return min(limit, MAX_LIMIT)


def page_offset(page: int, limit: int) -> int:
    """1-indexed page → row offset."""
    return (max(page, 1) - 1) * limit


def account_conflict(error: IntegrityError) -> ConflictError:
    """
    Map a unique violation on the users table to the matching domain error.

    Both SQLite ("UNIQUE constraint failed: users.email") and PostgreSQL
    ("... constraint \"uq_users_email\"") name the column in the message.
    """
    detail = str(error.orig).lower()
    logger.warning("Account write hit a unique constraint: %s", detail)
    if "username" in detail:
        return UsernameTakenError()
    return EmailTakenError()
