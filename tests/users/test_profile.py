"""Profile read and update."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


class TestProfile:
    async def test_get_me(self, authed_client: AsyncClient, registered_user: dict):
        response = await authed_client.get("/api/v1/users/me")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == registered_user["user_id"]
        assert data["username"] == "budi"
        assert data["school"] == "SD Negeri 1"
        assert data["gold"] == 100
        assert data["xp"] == 0
        assert "password_hash" not in data

    async def test_update(self, authed_client: AsyncClient):
        response = await authed_client.put(
            "/api/v1/users/me",
            json={"name": "  Budi S.  ", "school": "SD Harapan", "current_grade": 3},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Budi S."
        assert data["school"] == "SD Harapan"
        assert data["current_grade"] == 3
        assert data["username"] == "budi"

        assert (await authed_client.get("/api/v1/users/me")).json()["current_grade"] == 3

    async def test_blank_school_cleared(self, authed_client: AsyncClient):
        data = (await authed_client.put("/api/v1/users/me", json={"name": "Budi", "school": "   "})).json()
        assert data["school"] is None
        assert data["current_grade"] is None

    async def test_blank_name(self, authed_client: AsyncClient):
        response = await authed_client.put("/api/v1/users/me", json={"name": "   "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Name is required"

    @pytest.mark.parametrize("grade", [0, 7])
    async def test_grade_out_of_range(self, authed_client: AsyncClient, grade: int):
        response = await authed_client.put("/api/v1/users/me", json={"name": "Budi", "current_grade": grade})
        assert response.status_code == 400
        assert response.json()["detail"] == "Grade must be between 1 and 6"

        assert (await authed_client.get("/api/v1/users/me")).json()["current_grade"] is None

    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.put("/api/v1/users/me", json={"name": "X"})).status_code == 401
