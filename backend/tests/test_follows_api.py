"""
Mnemosyne Backend — Follow API Tests
======================================

What we test:
    ✅ follow / unfollow / check status
    ✅ Self-follow and duplicate follow are 400; unfollow without follow is 404
    ✅ Follower and following lists with pagination
    ✅ The following feed: likes of followed users, private likes excluded
"""

import uuid


class TestFollow:
    async def test_follow_and_check(self, client, register_user, auth_headers):
        alice, alice_id = await register_user("alice")
        _, bob_id = await register_user("bob")

        followed = await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        status = await client.get(f"/api/follows/check/{bob_id}", headers=auth_headers(alice))

        assert followed.status_code == 201
        assert followed.json()["data"]["followerId"] == alice_id
        assert followed.json()["data"]["followingId"] == bob_id
        assert status.json()["data"] == {"isFollowing": True}

    async def test_follow_twice(self, client, register_user, auth_headers):
        alice, _ = await register_user("alice")
        _, bob_id = await register_user("bob")

        await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        second = await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))

        assert second.status_code == 400
        assert second.json()["error"] == "Already following this user"

    async def test_follow_self(self, client, register_user, auth_headers):
        alice, alice_id = await register_user("alice")

        response = await client.post(f"/api/follows/{alice_id}", headers=auth_headers(alice))

        assert response.status_code == 400
        assert response.json()["error"] == "You cannot follow yourself"

    async def test_follow_unknown_user(self, client, register_user, auth_headers):
        alice, _ = await register_user("alice")

        response = await client.post(f"/api/follows/{uuid.uuid4()}", headers=auth_headers(alice))

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    async def test_unfollow(self, client, register_user, auth_headers):
        alice, _ = await register_user("alice")
        _, bob_id = await register_user("bob")
        await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))

        response = await client.delete(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        status = await client.get(f"/api/follows/check/{bob_id}", headers=auth_headers(alice))

        assert response.status_code == 200
        assert status.json()["data"]["isFollowing"] is False

    async def test_unfollow_without_follow(self, client, register_user, auth_headers):
        alice, _ = await register_user("alice")
        _, bob_id = await register_user("bob")

        response = await client.delete(f"/api/follows/{bob_id}", headers=auth_headers(alice))

        assert response.status_code == 404
        assert response.json()["error"] == "Not following this user"

    async def test_check_requires_authentication(self, client, register_user):
        _, bob_id = await register_user("bob")

        response = await client.get(f"/api/follows/check/{bob_id}")

        assert response.status_code == 401


class TestFollowLists:
    async def test_followers_and_following(self, client, register_user, auth_headers):
        alice, alice_id = await register_user("alice")
        bob, bob_id = await register_user("bob")
        _, carol_id = await register_user("carol")
        await client.post(f"/api/follows/{carol_id}", headers=auth_headers(alice))
        await client.post(f"/api/follows/{carol_id}", headers=auth_headers(bob))

        followers = (await client.get(f"/api/follows/{carol_id}/followers")).json()
        following = (await client.get(f"/api/follows/{alice_id}/following")).json()

        assert {u["id"] for u in followers["data"]} == {alice_id, bob_id}
        assert followers["pagination"]["total"] == 2
        assert [u["username"] for u in following["data"]] == ["carol"]

    async def test_followers_are_paginated(self, client, register_user, auth_headers):
        _, target_id = await register_user("target")
        for i in range(3):
            token, _ = await register_user(f"fan{i}")
            await client.post(f"/api/follows/{target_id}", headers=auth_headers(token))

        response = await client.get(
            f"/api/follows/{target_id}/followers", params={"page": 2, "limit": 2}
        )

        body = response.json()
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "totalPages": 2}

    async def test_lists_for_unknown_user(self, client):
        response = await client.get(f"/api/follows/{uuid.uuid4()}/followers")

        assert response.status_code == 404


class TestFollowingFeed:
    async def test_feed_contains_likes_of_followed_users(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        bob, bob_id = await register_user("bob")
        quote_id = await create_quote()
        await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(bob))

        response = await client.get("/api/quotes/feed", headers=auth_headers(alice))

        body = response.json()
        assert response.status_code == 200
        assert len(body["data"]) == 1
        item = body["data"][0]
        assert item["id"] == quote_id
        assert item["likedBy"]["username"] == "bob"
        assert item["likeCount"] == 1
        assert item["isLikedByUser"] is False
        assert body["pagination"]["total"] == 1

    async def test_feed_excludes_private_likes(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        bob, bob_id = await register_user("bob", likes_private=True)
        quote_id = await create_quote()
        await client.post(f"/api/follows/{bob_id}", headers=auth_headers(alice))
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(bob))

        response = await client.get("/api/quotes/feed", headers=auth_headers(alice))

        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 0

    async def test_feed_ignores_unfollowed_users(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        bob, _ = await register_user("bob")
        quote_id = await create_quote()
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(bob))

        response = await client.get("/api/quotes/feed", headers=auth_headers(alice))

        assert response.json()["data"] == []

    async def test_feed_requires_authentication(self, client):
        response = await client.get("/api/quotes/feed")

        assert response.status_code == 401
