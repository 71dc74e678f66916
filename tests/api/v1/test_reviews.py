"""Tests for review API endpoints."""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestCreateReview:
    """POST /api/reviews"""

    async def test_create(self, client: AsyncClient, sample_review_data):
        response = await client.post("/api/reviews", json=sample_review_data)

        assert response.status_code == 201
        data = response.json()
        assert data["game_name"] == "Hades"
        assert data["tags"] == ["roguelike", "action"]
        assert data["created_at"].endswith("Z")

        archived = await client.get("/api/archived-reviews")
        assert [a["id"] for a in archived.json()] == [data["id"]]

    async def test_create_with_genre(self, client: AsyncClient, sample_review_data):
        response = await client.post(
            "/api/reviews",
            json={**sample_review_data, "genre": "Roguelike", "categoryName": "Action"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["genre"] == "Roguelike"
        assert data["categoryName"] == "Action"

    async def test_missing_field_is_400(self, client: AsyncClient, sample_review_data):
        del sample_review_data["review_text"]
        response = await client.post("/api/reviews", json=sample_review_data)

        assert response.status_code == 400
        assert "review_text" in response.json()["detail"]

    async def test_duplicate_game_is_409(self, client: AsyncClient, sample_review_data):
        await client.post("/api/reviews", json=sample_review_data)
        response = await client.post("/api/reviews", json=sample_review_data)

        assert response.status_code == 409


@pytest.mark.integration
class TestListReviews:
    """GET /api/reviews"""

    async def test_list_empty(self, client: AsyncClient):
        response = await client.get("/api/reviews")
        assert response.status_code == 200
        assert response.json() == []

    async def test_list_newest_first(self, client: AsyncClient, sample_review_data):
        await client.post("/api/reviews", json=sample_review_data)
        await client.post("/api/reviews", json={**sample_review_data, "game_name": "Celeste"})

        response = await client.get("/api/reviews")

        assert [r["game_name"] for r in response.json()] == ["Celeste", "Hades"]


@pytest.mark.integration
class TestUpdateAndDelete:
    """PUT / DELETE /api/reviews/{id}"""

    async def test_update(self, client: AsyncClient, sample_review_data):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()

        response = await client.put(
            f"/api/reviews/{created['id']}", json={**sample_review_data, "rating": 6}
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 6.0

    async def test_update_unknown_is_404(self, client: AsyncClient, sample_review_data):
        response = await client.put(f"/api/reviews/{uuid.uuid4()}", json=sample_review_data)
        assert response.status_code == 404

    async def test_delete(self, client: AsyncClient, sample_review_data):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()

        response = await client.delete(f"/api/reviews/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert (await client.get("/api/reviews")).json() == []
        assert len((await client.get("/api/archived-reviews")).json()) == 1

    async def test_delete_unknown_is_404(self, client: AsyncClient):
        response = await client.delete(f"/api/reviews/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {"detail": "Review not found"}


@pytest.mark.integration
class TestReviewTags:
    """PATCH /api/reviews/{id}/tags"""

    async def test_replace_tags(self, client: AsyncClient, sample_review_data):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()

        response = await client.patch(
            f"/api/reviews/{created['id']}/tags", json={"tags": ["short", "short "]}
        )

        assert response.status_code == 200
        assert response.json()["tags"] == ["short"]

    async def test_non_array_is_400(self, client: AsyncClient, sample_review_data):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()

        response = await client.patch(f"/api/reviews/{created['id']}/tags", json={"tags": "short"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Tags must be an array"


@pytest.mark.integration
class TestReviewGenre:
    """PATCH /api/reviews/{id}/genre"""

    async def test_assign_genre(self, client: AsyncClient, sample_review_data, genre_cache):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()
        genre_cache.set([])

        response = await client.patch(
            f"/api/reviews/{created['id']}/genre",
            json={"genreName": "Roguelike", "categoryName": "Action"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["genre"]["name"] == "Roguelike"
        assert data["genre"]["categoryName"] == "Action"
        assert data["review"]["genre_id"] == data["genre"]["id"]
        assert genre_cache.get() is None

    async def test_missing_genre_is_400(self, client: AsyncClient, sample_review_data):
        created = (await client.post("/api/reviews", json=sample_review_data)).json()

        response = await client.patch(f"/api/reviews/{created['id']}/genre", json={})

        assert response.status_code == 400

    async def test_unknown_review_is_404(self, client: AsyncClient):
        response = await client.patch(
            f"/api/reviews/{uuid.uuid4()}/genre", json={"genreName": "Roguelike"}
        )
        assert response.status_code == 404


@pytest.mark.integration
async def test_reviews_by_rating(client: AsyncClient, sample_review_data):
    await client.post("/api/reviews", json=sample_review_data)

    response = await client.get("/api/reviews/by-rating")

    assert response.status_code == 200
    groups = response.json()
    assert groups[0]["rating"] == 9
    assert groups[0]["count"] == 1
    assert groups[0]["reviews"][0]["game_name"] == "Hades"
