"""
Mnemosyne Backend — Authentication API Tests
==============================================

What:  Registration, login, refresh-cookie flow, logout and /me.
How:   Full HTTP round trips against an in-memory SQLite database.

What we test:
    ✅ Register returns 201 with an access token and sets the refresh cookie
    ✅ Duplicate email / username are rejected with 400
    ✅ Wrong password and unknown email give the same 401
    ✅ Refresh issues a new access token; missing cookie is 401
    ✅ /me requires a bearer token
"""

from mnemosyne.config import settings


def _refresh_token_from(response) -> str:
    cookie = response.headers["set-cookie"]
    name, _, rest = cookie.partition("=")
    assert name == settings.refresh_cookie_name
    return rest.split(";", 1)[0]


class TestRegister:
    async def test_register_returns_token_and_user(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "Alice@Example.com ", "password": "password123", "username": "alice"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["accessToken"]
        assert body["data"]["user"]["username"] == "alice"
        # Emails are stored trimmed and lower-cased
        assert body["data"]["user"]["email"] == "alice@example.com"
        assert body["data"]["user"]["likesPrivate"] is False

    async def test_register_sets_http_only_refresh_cookie(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "bob@example.com", "password": "password123", "username": "bob"},
        )

        cookie = response.headers["set-cookie"].lower()
        assert "httponly" in cookie
        assert "samesite=strict" in cookie

    async def test_duplicate_email_rejected(self, client, register_user):
        await register_user("alice")

        response = await client.post(
            "/api/auth/register",
            json={"email": "alice@example.com", "password": "password123", "username": "other"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Email already registered."

    async def test_duplicate_username_rejected(self, client, register_user):
        await register_user("alice")

        response = await client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "password123", "username": "alice"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Username already taken."

    async def test_short_password_is_validation_error(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "c@example.com", "password": "short", "username": "carol"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert any(d["field"] == "password" for d in body["details"])


class TestLogin:
    async def test_login_success(self, client, register_user):
        await register_user("alice")

        response = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "password123"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["username"] == "alice"

    async def test_wrong_password_and_unknown_email_look_the_same(self, client, register_user):
        await register_user("alice")

        wrong_password = await client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "not-the-password"},
        )
        unknown_email = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "password123"},
        )

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json()["error"] == unknown_email.json()["error"]
        assert wrong_password.json()["error"] == "Invalid email or password."


class TestRefreshAndLogout:
    async def test_refresh_issues_new_access_token(self, client):
        registered = await client.post(
            "/api/auth/register",
            json={"email": "alice@example.com", "password": "password123", "username": "alice"},
        )
        refresh_token = _refresh_token_from(registered)

        response = await client.post(
            "/api/auth/refresh",
            headers={"Cookie": f"{settings.refresh_cookie_name}={refresh_token}"},
        )

        assert response.status_code == 200
        new_token = response.json()["data"]["accessToken"]
        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {new_token}"})
        assert me.status_code == 200

    async def test_refresh_without_cookie_is_401(self, app):
        from httpx import ASGITransport, AsyncClient

        # A fresh client so no cookie from another request is carried over
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            response = await c.post("/api/auth/refresh")

        assert response.status_code == 401
        assert response.json()["error"] == "No refresh token provided."

    async def test_access_token_is_not_a_refresh_token(self, client, register_user):
        token, _ = await register_user("alice")

        response = await client.post(
            "/api/auth/refresh",
            headers={"Cookie": f"{settings.refresh_cookie_name}={token}"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid refresh token."

    async def test_logout_clears_cookie(self, client):
        response = await client.post("/api/auth/logout")

        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Logged out successfully."
        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{settings.refresh_cookie_name}=")
        assert "Max-Age=0" in cookie


class TestMe:
    async def test_me_without_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "No token provided.",
            "requestId": response.headers["X-Request-ID"],
        }

    async def test_me_with_garbage_token(self, client, auth_headers):
        response = await client.get("/api/auth/me", headers=auth_headers("not-a-jwt"))

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token."

    async def test_me_returns_profile(self, client, register_user, auth_headers):
        token, user_id = await register_user("alice")

        response = await client.get("/api/auth/me", headers=auth_headers(token))

        user = response.json()["data"]["user"]
        assert user["id"] == user_id
        assert user["email"] == "alice@example.com"
        assert "passwordHash" not in user
