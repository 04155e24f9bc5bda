"""HTTP tests for cached read routes and their invalidation."""

import json
from unittest.mock import AsyncMock

import pytest

BOOKS = "/api/v1/books"


@pytest.mark.api
class TestCachedReads:
    """MISS then HIT with the same body."""

    async def test_second_read_is_served_from_cache(self, client) -> None:
        first = await client.get(BOOKS)
        second = await client.get(BOOKS)

        assert first.status_code == 200
        assert first.headers["X-Cache"] == "MISS"
        assert second.status_code == 200
        assert second.headers["X-Cache"] == "HIT"
        assert second.content == first.content

    async def test_entry_stored_under_canonical_key(self, client, redis_client) -> None:
        await client.get(BOOKS, params={"category": "fiction"})

        raw = await redis_client.get('books:list:/api/v1/books:{"category":"fiction"}')

        assert raw is not None
        assert [book["id"] for book in json.loads(raw)] == ["left-hand-of-darkness"]

    async def test_entry_has_ttl(self, client, redis_client) -> None:
        await client.get(f"{BOOKS}/cosmos")

        ttl = await redis_client.ttl("books:detail:cosmos:/api/v1/books/cosmos:{}")

        assert 0 < ttl <= 3600

    async def test_different_query_is_a_separate_entry(self, client) -> None:
        await client.get(BOOKS, params={"category": "fiction"})

        response = await client.get(BOOKS, params={"category": "science"})

        assert response.headers["X-Cache"] == "MISS"
        assert [book["id"] for book in response.json()] == ["cosmos"]

    async def test_query_order_shares_one_entry(self, client) -> None:
        await client.get(f"{BOOKS}?category=fiction&sort=title")

        response = await client.get(f"{BOOKS}?sort=title&category=fiction")

        assert response.headers["X-Cache"] == "HIT"

    async def test_featured_ignores_query(self, client) -> None:
        await client.get(f"{BOOKS}/featured")

        response = await client.get(f"{BOOKS}/featured", params={"utm_source": "mail"})

        assert response.headers["X-Cache"] == "HIT"

    async def test_not_found_is_not_cached(self, client, redis_client) -> None:
        first = await client.get(f"{BOOKS}/missing")
        second = await client.get(f"{BOOKS}/missing")

        assert first.status_code == 404
        assert second.status_code == 404
        assert second.headers["X-Cache"] == "MISS"
        assert await redis_client.keys("books:detail:missing:*") == []

    async def test_writes_are_not_cached(self, client, redis_client) -> None:
        response = await client.post(
            BOOKS,
            json={"title": "Dune", "author_id": "herbert", "category": "fiction", "price": "9.99"},
        )

        assert response.status_code == 201
        assert "X-Cache" not in response.headers

    async def test_disabled_cache_always_calls_handler(
        self, client, app_settings, monkeypatch, redis_client
    ) -> None:
        monkeypatch.setattr(app_settings, "response_cache_enabled", False)

        await client.get(BOOKS)
        response = await client.get(BOOKS)

        assert response.status_code == 200
        assert "X-Cache" not in response.headers
        assert await redis_client.keys("books:*") == []


@pytest.mark.api
class TestInvalidation:
    """Writes drop the cached reads that include the changed resource."""

    async def test_update_drops_list_featured_and_detail(self, client, redis_client) -> None:
        await client.get(BOOKS)
        await client.get(f"{BOOKS}/featured")
        await client.get(f"{BOOKS}/cosmos")
        await client.get(f"{BOOKS}/spqr")

        response = await client.patch(f"{BOOKS}/cosmos", json={"price": "12.00"})
        assert response.status_code == 200

        listing = await client.get(BOOKS)
        featured = await client.get(f"{BOOKS}/featured")
        detail = await client.get(f"{BOOKS}/cosmos")
        untouched = await client.get(f"{BOOKS}/spqr")

        assert listing.headers["X-Cache"] == "MISS"
        assert featured.headers["X-Cache"] == "MISS"
        assert detail.headers["X-Cache"] == "MISS"
        assert detail.json()["price"] == "12.00"
        assert untouched.headers["X-Cache"] == "HIT"

    async def test_create_shows_up_in_next_listing(self, client) -> None:
        await client.get(BOOKS)

        created = await client.post(
            BOOKS,
            json={"title": "Dune", "author_id": "herbert", "category": "fiction", "price": "9.99"},
        )
        listing = await client.get(BOOKS)

        assert listing.headers["X-Cache"] == "MISS"
        assert created.json()["id"] in [book["id"] for book in listing.json()]

    async def test_delete_drops_detail(self, client) -> None:
        await client.get(f"{BOOKS}/spqr")

        deleted = await client.delete(f"{BOOKS}/spqr")
        detail = await client.get(f"{BOOKS}/spqr")

        assert deleted.status_code == 204
        assert detail.status_code == 404

    async def test_event_registration_drops_event_reads(self, client) -> None:
        await client.get("/api/v1/events/author-night")

        registered = await client.post(
            "/api/v1/events/author-night/registrations",
            json={"attendee_name": "Sam", "seats": 2},
        )
        detail = await client.get("/api/v1/events/author-night")

        assert registered.status_code == 201
        assert detail.headers["X-Cache"] == "MISS"
        assert detail.json()["registered"] == 2

    async def test_user_update_drops_profile(self, client) -> None:
        await client.get("/api/v1/users/reader-1")

        await client.patch("/api/v1/users/reader-1", json={"favorite_category": "history"})
        profile = await client.get("/api/v1/users/reader-1")

        assert profile.headers["X-Cache"] == "MISS"
        assert profile.json()["favorite_category"] == "history"


@pytest.mark.api
class TestCacheFailures:
    """A broken store never breaks a read."""

    async def test_unreachable_store_still_serves(self, client, redis_client, monkeypatch) -> None:
        monkeypatch.setattr(redis_client, "get", AsyncMock(side_effect=ConnectionError("down")))
        monkeypatch.setattr(
            redis_client, "setex", AsyncMock(side_effect=ConnectionError("down"))
        )

        first = await client.get(BOOKS)
        second = await client.get(BOOKS)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.headers["X-Cache"] == "MISS"
        assert len(second.json()) == 3

    async def test_failing_invalidation_does_not_fail_the_write(
        self, client, redis_client, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            redis_client, "delete", AsyncMock(side_effect=ConnectionError("down"))
        )

        response = await client.patch(f"{BOOKS}/cosmos", json={"title": "Cosmos (2nd ed.)"})

        assert response.status_code == 200
        assert response.json()["title"] == "Cosmos (2nd ed.)"
