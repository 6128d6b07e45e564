"""
Mnemosyne Backend — FastAPI Authentication Dependencies
=========================================================

What:  Resolves the caller's identity from the `Authorization: Bearer <token>`
       header.
Who:   Injected into route handlers with `Depends(...)`.

    get_current_user   → User, or AuthenticationError (401)
    get_optional_user  → User or None; a bad or missing token means anonymous
    get_quote_writer   → required or optional, per QUOTE_WRITES_REQUIRE_AUTH
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.config import settings
from mnemosyne.database import get_db_session
from mnemosyne.exceptions import AuthenticationError
from mnemosyne.models.user import User
from mnemosyne.security import decode_access_token
from mnemosyne.services.common import parse_optional_id

logger = logging.getLogger(__name__)

# auto_error=False: a missing header reaches our handlers instead of
# FastAPI's default 403, so the envelope and status stay consistent
bearer_scheme = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, db: AsyncSession) -> User:
    payload = decode_access_token(token)
    user_id = parse_optional_id(payload.user_id)
    user = await db.get(User, user_id) if user_id else None
    if user is None:
        raise AuthenticationError(message="Invalid or expired token.")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="No token provided.")
    return await _resolve_user(credentials.credentials, db)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await _resolve_user(credentials.credentials, db)
    except AuthenticationError:
        logger.debug("Ignoring invalid bearer token on optional-auth route")
        return None


async def get_quote_writer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """Caller for quote create/update/delete; anonymous unless writes require auth."""
    if settings.quote_writes_require_auth:
        return await get_current_user(credentials, db)
    return await get_optional_user(credentials, db)
