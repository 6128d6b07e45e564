"""
Mnemosyne Backend — Authentication Schemas
============================================

Request bodies for register/login and the payloads returned by the auth
routes. Emails are trimmed and lower-cased before validation so that
"A@X.com " and "a@x.com" are the same account.
"""

from typing import Any

from pydantic import EmailStr, Field, field_validator

from mnemosyne.schemas.common import CamelModel
from mnemosyne.schemas.user import AuthUser, UserProfile

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _normalize_email(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    username: str = Field(max_length=100)
    likes_private: bool = False

    _normalize = field_validator("email", mode="before")(_normalize_email)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        return v

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required.")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    _normalize = field_validator("email", mode="before")(_normalize_email)


class AuthResponse(CamelModel):
    """Returned by register (201) and login (200); the refresh token travels in a cookie."""

    user: AuthUser
    access_token: str


class TokenResponse(CamelModel):
    access_token: str


class MeResponse(CamelModel):
    user: UserProfile
