"""
Mnemosyne Backend — Authentication Service
============================================

What:  Registration, login and access-token refresh.
Why:   Routes only deal with cookies and headers; identity rules live here.

Flow:
    register → hash password → insert user → issue access + refresh tokens
    login    → verify password → issue access + refresh tokens
    refresh  → verify refresh token → issue a new access token only
               (the refresh token is not rotated)
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mnemosyne.exceptions import AuthenticationError, EmailTakenError, UsernameTakenError
from mnemosyne.models.user import User
from mnemosyne.schemas.auth import LoginRequest, RegisterRequest
from mnemosyne.security import (
    TokenPayload,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from mnemosyne.services.common import account_conflict, parse_optional_id

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


@dataclass
class IssuedTokens:
    user: User
    access_token: str
    refresh_token: str


def issue_tokens(user: User) -> IssuedTokens:
    payload = TokenPayload(user_id=str(user.id), email=user.email)
    return IssuedTokens(
        user=user,
        access_token=create_access_token(payload),
        refresh_token=create_refresh_token(payload),
    )


class AuthService:
    async def register(self, db: AsyncSession, data: RegisterRequest) -> IssuedTokens:
        """
        Raises:
            EmailTakenError: email already registered
            UsernameTakenError: username already taken
        """
        if await self._exists(db, User.email == data.email):
            raise EmailTakenError()
        if await self._exists(db, User.username == data.username):
            raise UsernameTakenError()

        user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            username=data.username,
            likes_private=data.likes_private,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent registration
            await db.rollback()
            raise account_conflict(e)

        logger.info("User registered: %s (%s)", user.id, user.username)
        return issue_tokens(user)

    async def login(self, db: AsyncSession, data: LoginRequest) -> IssuedTokens:
        """Same error for unknown email and wrong password."""
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("Failed login attempt for %s", data.email)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user.id)
        return issue_tokens(user)

    async def refresh(self, db: AsyncSession, refresh_token: str | None) -> str:
        """
        Exchange a refresh token for a new access token.

        The user must still exist; a token for a vanished account is invalid.
        """
        if not refresh_token:
            raise AuthenticationError(message="No refresh token provided.")
        payload = decode_refresh_token(refresh_token)

        user_id = parse_optional_id(payload.user_id)
        user = await db.get(User, user_id) if user_id else None
        if user is None:
            raise AuthenticationError(message="Invalid refresh token.")
        return create_access_token(TokenPayload(user_id=str(user.id), email=user.email))

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise AuthenticationError(message="User not found.")
        return user

    @staticmethod
    async def _exists(db: AsyncSession, condition) -> bool:
        result = await db.execute(select(User.id).where(condition))
        return result.scalar_one_or_none() is not None


auth_service = AuthService()
