"""
Mnemosyne Backend — Password & Token Unit Tests
=================================================

What we test:
    ✅ bcrypt hashing round trip and mismatch
    ✅ Access and refresh tokens decode with their own secret only
    ✅ Expired and tampered tokens raise AuthenticationError
"""

from datetime import timedelta

import jwt
import pytest

from mnemosyne.config import settings
from mnemosyne.database import utcnow
from mnemosyne.exceptions import AuthenticationError
from mnemosyne.security import (
    TokenPayload,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)

PAYLOAD = TokenPayload(user_id="0b5a2c1e-8f43-4a6d-9c1b-2e7f5d3a9b10", email="alice@example.com")


class TestPasswords:
    def test_hash_is_not_the_password(self):
        hashed = hash_password("password123")

        assert hashed != "password123"
        assert hashed.startswith("$2")

    def test_verify(self):
        hashed = hash_password("password123")

        assert verify_password("password123", hashed) is True
        assert verify_password("password124", hashed) is False

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("password123", "not-a-bcrypt-hash") is False


class TestTokens:
    def test_access_token_round_trip(self):
        decoded = decode_access_token(create_access_token(PAYLOAD))

        assert decoded == PAYLOAD

    def test_refresh_token_round_trip(self):
        assert decode_refresh_token(create_refresh_token(PAYLOAD)) == PAYLOAD

    def test_tokens_are_not_interchangeable(self):
        with pytest.raises(AuthenticationError):
            decode_access_token(create_refresh_token(PAYLOAD))
        with pytest.raises(AuthenticationError, match="Invalid refresh token."):
            decode_refresh_token(create_access_token(PAYLOAD))

    def test_expired_token(self):
        now = utcnow()
        expired = jwt.encode(
            {
                "userId": PAYLOAD.user_id,
                "email": PAYLOAD.email,
                "type": "access",
                "iat": now - timedelta(hours=1),
                "exp": now - timedelta(minutes=1),
            },
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError, match="Invalid or expired token."):
            decode_access_token(expired)

    def test_token_signed_with_another_secret(self):
        forged = jwt.encode(
            {"userId": PAYLOAD.user_id, "email": PAYLOAD.email, "type": "access"},
            "some-other-secret-that-is-long-enough",
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError):
            decode_access_token(forged)
