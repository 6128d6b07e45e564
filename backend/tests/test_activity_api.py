"""
Mnemosyne Backend — Activity Feed API Tests
=============================================

What we test:
    ✅ Likes, collection creation/updates and authenticated quote creation
       are recorded; unlike records nothing
    ✅ Feeds are newest first and carry quote/collection summaries
    ✅ `like` activities of private-likes users are hidden from others
    ✅ /me requires authentication; unknown users are 404
"""

import uuid


class TestActivityRecording:
    async def test_like_is_recorded_with_quote_summary(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, alice_id = await register_user("alice")
        quote_id = await create_quote("Know thyself.", "Socrates")
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(alice))

        response = await client.get("/api/activity/feed")

        activities = response.json()["data"]
        assert len(activities) == 1
        activity = activities[0]
        assert activity["activityType"] == "like"
        assert activity["userId"] == alice_id
        assert activity["userName"] == "alice"
        assert activity["username"] == "alice"
        assert activity["quote"] == {"id": quote_id, "text": "Know thyself.", "author": "Socrates"}
        assert activity["collection"] is None

    async def test_unlike_records_nothing(self, client, register_user, create_quote, auth_headers):
        alice, _ = await register_user("alice")
        quote_id = await create_quote()
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(alice))
        await client.delete(f"/api/quotes/{quote_id}/like", headers=auth_headers(alice))

        response = await client.get("/api/activity/me", headers=auth_headers(alice))

        assert [a["activityType"] for a in response.json()["data"]] == ["like"]

    async def test_collection_activities_newest_first(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        headers = auth_headers(alice)
        quote_id = await create_quote()
        created = await client.post("/api/collections", json={"name": "Favs"}, headers=headers)
        collection_id = created.json()["data"]["id"]
        await client.post(
            f"/api/collections/{collection_id}/quotes", json={"quoteId": quote_id}, headers=headers
        )

        activities = (await client.get("/api/activity/me", headers=headers)).json()["data"]

        assert [a["activityType"] for a in activities] == ["collectionUpdate", "collectionCreate"]
        assert activities[0]["quote"]["id"] == quote_id
        assert activities[0]["collection"]["name"] == "Favs"

    async def test_authenticated_quote_creation_is_recorded(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        await create_quote(token=alice)

        activities = (await client.get("/api/activity/me", headers=auth_headers(alice))).json()

        assert [a["activityType"] for a in activities["data"]] == ["quoteAdd"]

    async def test_deleted_quote_is_omitted_from_summary(
        self, client, register_user, create_quote, auth_headers
    ):
        alice, _ = await register_user("alice")
        quote_id = await create_quote()
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(alice))
        await client.delete(f"/api/quotes/{quote_id}")

        activities = (await client.get("/api/activity/feed")).json()["data"]

        assert len(activities) == 1
        assert activities[0]["quote"] is None


class TestActivityPrivacy:
    async def test_private_likes_hidden_from_others(
        self, client, register_user, create_quote, auth_headers
    ):
        private, private_id = await register_user("quiet", likes_private=True)
        other, _ = await register_user("other")
        quote_id = await create_quote()
        await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(private))

        anonymous = (await client.get("/api/activity/feed")).json()["data"]
        as_other = (
            await client.get(f"/api/activity/user/{private_id}", headers=auth_headers(other))
        ).json()["data"]
        as_owner = (await client.get("/api/activity/me", headers=auth_headers(private))).json()["data"]

        assert anonymous == []
        assert as_other == []
        assert [a["activityType"] for a in as_owner] == ["like"]

    async def test_private_user_collection_activity_still_visible(
        self, client, register_user, auth_headers
    ):
        private, _ = await register_user("quiet", likes_private=True)
        await client.post("/api/collections", json={"name": "Open"}, headers=auth_headers(private))

        activities = (await client.get("/api/activity/feed")).json()["data"]

        assert [a["activityType"] for a in activities] == ["collectionCreate"]


class TestActivityRoutes:
    async def test_limit_is_applied(self, client, register_user, create_quote, auth_headers):
        alice, _ = await register_user("alice")
        for i in range(3):
            quote_id = await create_quote(f"q{i}", "a")
            await client.post(f"/api/quotes/{quote_id}/like", headers=auth_headers(alice))

        response = await client.get("/api/activity/feed", params={"limit": 2})

        assert len(response.json()["data"]) == 2

    async def test_unknown_user(self, client):
        response = await client.get(f"/api/activity/user/{uuid.uuid4()}")

        assert response.status_code == 404

    async def test_me_requires_authentication(self, client):
        response = await client.get("/api/activity/me")

        assert response.status_code == 401
