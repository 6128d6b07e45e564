"""
Mnemosyne Backend — User API Tests
====================================

What we test:
    ✅ Directory search by username / display name
    ✅ Public profile never exposes the email
    ✅ Profile update, including uniqueness conflicts
    ✅ Like privacy on /stats and /likes for owner, others and anonymous
"""

import uuid


class TestDirectory:
    async def test_search(self, client, register_user, auth_headers):
        await register_user("alice")
        bob, _ = await register_user("bob")
        await client.patch(
            "/api/users/profile", json={"displayName": "Robert Alison"}, headers=auth_headers(bob)
        )

        response = await client.get("/api/users", params={"q": "ALI"})

        assert [u["username"] for u in response.json()["data"]] == ["alice", "bob"]
        assert response.json()["pagination"]["total"] == 2

    async def test_public_profile_has_no_email(self, client, register_user):
        _, alice_id = await register_user("alice")

        response = await client.get(f"/api/users/{alice_id}")

        assert response.status_code == 200
        assert response.json()["data"]["username"] == "alice"
        assert "email" not in response.json()["data"]

    async def test_unknown_user(self, client):
        response = await client.get(f"/api/users/{uuid.uuid4()}")

        assert response.status_code == 404


class TestProfileUpdate:
    async def test_update_profile(self, client, register_user, auth_headers):
        token, _ = await register_user("alice")

        response = await client.patch(
            "/api/users/profile",
            json={"displayName": "Alice A.", "bio": "Reader", "likesPrivate": True},
            headers=auth_headers(token),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert response.json()["message"] == "Profile updated successfully"
        assert data["displayName"] == "Alice A."
        assert data["bio"] == "Reader"
        assert data["likesPrivate"] is True
        assert data["email"] == "alice@example.com"

    async def test_username_conflict(self, client, register_user, auth_headers):
        token, _ = await register_user("alice")
        await register_user("bob")

        response = await client.patch(
            "/api/users/profile", json={"username": "bob"}, headers=auth_headers(token)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Username already taken."

    async def test_keeping_own_username_is_fine(self, client, register_user, auth_headers):
        token, _ = await register_user("alice")

        response = await client.patch(
            "/api/users/profile", json={"username": "alice"}, headers=auth_headers(token)
        )

        assert response.status_code == 200


class TestLikePrivacy:
    async def _setup(self, client, register_user, create_quote, auth_headers, likes_private):
        owner, owner_id = await register_user("owner", likes_private=likes_private)
        viewer, _ = await register_user("viewer")
        quote_id = await create_quote()
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(owner))
        return owner, owner_id, viewer, quote_id

    async def test_public_likes_visible_to_everyone(
        self, client, register_user, create_quote, auth_headers
    ):
        _, owner_id, viewer, quote_id = await self._setup(
            client, register_user, create_quote, auth_headers, likes_private=False
        )

        likes = await client.get(f"/api/users/{owner_id}/likes")
        stats = await client.get(f"/api/users/{owner_id}/stats", headers=auth_headers(viewer))

        assert [q["id"] for q in likes.json()["data"]] == [quote_id]
        assert stats.json()["data"]["likesCount"] == 1

    async def test_private_likes_hidden_from_others(
        self, client, register_user, create_quote, auth_headers
    ):
        _, owner_id, viewer, _ = await self._setup(
            client, register_user, create_quote, auth_headers, likes_private=True
        )

        likes = await client.get(f"/api/users/{owner_id}/likes", headers=auth_headers(viewer))
        anonymous = await client.get(f"/api/users/{owner_id}/likes")
        stats = await client.get(f"/api/users/{owner_id}/stats", headers=auth_headers(viewer))

        assert likes.status_code == 404
        assert likes.json()["error"] == "This user's likes are private"
        assert anonymous.status_code == 404
        assert stats.json()["data"]["likesCount"] is None

    async def test_private_likes_visible_to_owner(
        self, client, register_user, create_quote, auth_headers
    ):
        owner, owner_id, _, quote_id = await self._setup(
            client, register_user, create_quote, auth_headers, likes_private=True
        )

        likes = await client.get(f"/api/users/{owner_id}/likes", headers=auth_headers(owner))
        stats = await client.get(f"/api/users/{owner_id}/stats", headers=auth_headers(owner))

        assert [q["id"] for q in likes.json()["data"]] == [quote_id]
        assert likes.json()["data"][0]["isLikedByUser"] is True
        assert stats.json()["data"]["likesCount"] == 1

    async def test_stats_counts(self, client, register_user, auth_headers):
        alice, alice_id = await register_user("alice")
        bob, bob_id = await register_user("bob")
        await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        await client.post(f"/api/follows/{alice_id}", headers=auth_headers(bob))
        await client.post("/api/collections", json={"name": "A"}, headers=auth_headers(alice))

        stats = (await client.get(f"/api/users/{alice_id}/stats")).json()["data"]

        assert stats["followersCount"] == 1
        assert stats["followingCount"] == 1
        assert stats["collectionsCount"] == 1
        assert stats["likesCount"] == 0
