"""
Mnemosyne Backend — Password Hashing & Token Primitives
=========================================================

What:  bcrypt password hashing and JWT access/refresh token issuance.
Why:   Keeps every cryptographic decision in one module; services only call
       hash_password / verify_password / create_*_token / decode_*_token.

Token Design:
    access token   → 15 minutes, signed with JWT_SECRET, sent as Bearer header
    refresh token  → 7 days, signed with JWT_REFRESH_SECRET, httpOnly cookie

    Payload: {"userId": "<uuid>", "email": "...", "type": "access|refresh",
              "iat": ..., "exp": ...}

    The "type" claim plus distinct secrets mean a refresh token can never be
    replayed as an access token and vice versa.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

import bcrypt
import jwt

from mnemosyne.config import settings
from mnemosyne.database import utcnow
from mnemosyne.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    user_id: str
    email: str


# ── Passwords ─────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """One-way bcrypt hash with a per-password random salt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison of a candidate password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long candidate: treat as a mismatch
        logger.warning("Password verification failed on malformed input")
        return False


# ── Tokens ────────────────────────────────────────────────────────────────

def _encode(payload: TokenPayload, token_type: str, secret: str, lifetime: timedelta) -> str:
    now = utcnow()
    claims = {
        "userId": payload.user_id,
        "email": payload.email,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, token_type: str, secret: str, error_message: str) -> TokenPayload:
    try:
        claims = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        # Covers ExpiredSignatureError, InvalidSignatureError, DecodeError
        logger.debug("Rejected %s token: %s", token_type, type(e).__name__)
        raise AuthenticationError(message=error_message)

    if claims.get("type") != token_type or not claims.get("userId"):
        raise AuthenticationError(message=error_message)
    return TokenPayload(user_id=str(claims["userId"]), email=str(claims.get("email", "")))


def create_access_token(payload: TokenPayload) -> str:
    return _encode(
        payload,
        ACCESS_TOKEN_TYPE,
        settings.jwt_secret,
        timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(payload: TokenPayload) -> str:
    return _encode(
        payload,
        REFRESH_TOKEN_TYPE,
        settings.jwt_refresh_secret,
        timedelta(days=settings.refresh_token_expire_days),
    )


def decode_access_token(token: str) -> TokenPayload:
    """Raises AuthenticationError for any missing, invalid or expired token."""
    return _decode(token, ACCESS_TOKEN_TYPE, settings.jwt_secret, "Invalid or expired token.")


def decode_refresh_token(token: str) -> TokenPayload:
    return _decode(token, REFRESH_TOKEN_TYPE, settings.jwt_refresh_secret, "Invalid refresh token.")
