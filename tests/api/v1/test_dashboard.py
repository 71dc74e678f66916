"""Tests for dashboard and games summary endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestDashboards:
    async def test_category_dashboard(self, client: AsyncClient, sample_review_data):
        await client.post(
            "/api/reviews",
            json={**sample_review_data, "genre": "Roguelike", "categoryName": "Action"},
        )

        response = await client.get("/api/dashboard/categories")

        assert response.status_code == 200
        [category] = response.json()
        assert category["category_name"] == "Action"
        assert category["review_count"] == 1
        assert category["avg_rating"] == 9.0
        assert category["genres"][0]["genre_name"] == "Roguelike"

    async def test_rating_dashboard_matches_by_rating(self, client: AsyncClient, sample_review_data):
        await client.post("/api/reviews", json=sample_review_data)

        dashboard = await client.get("/api/dashboard/ratings")
        by_rating = await client.get("/api/reviews/by-rating")

        assert dashboard.json() == by_rating.json()


@pytest.mark.integration
class TestGamesSummary:
    """GET /api/games-summary"""

    async def test_visibility_filter(self, client: AsyncClient, sample_review_data, archive_snapshot):
        await client.post("/api/reviews", json=sample_review_data)
        await archive_snapshot({"game_name": "Hidden Gem", "rating": 7, "visible": False})

        everything = await client.get("/api/games-summary")
        hidden = await client.get("/api/games-summary", params={"visibility": "hidden"})

        assert {g["game_name"] for g in everything.json()} == {"Hades", "Hidden Gem"}
        assert [g["game_name"] for g in hidden.json()] == ["Hidden Gem"]

    async def test_invalid_visibility_is_422(self, client: AsyncClient):
        response = await client.get("/api/games-summary", params={"visibility": "some"})
        assert response.status_code == 422

    async def test_free_form_genre_does_not_break_summary(self, client: AsyncClient, archive_snapshot):
        await archive_snapshot({"game_name": "G", "rating": 7, "genre": ["RPG", "Action"]})

        response = await client.get("/api/games-summary")

        assert response.status_code == 200
        [summary] = response.json()
        assert summary["game_name"] == "G"
        assert summary["genre"] is None
