"""Dashboard aggregation."""

from __future__ import annotations

from httpx import AsyncClient

from tutow.dashboard import service as dashboard_service

COUNTING = "counting-and-numbers"


async def _grade_one_materials(client: AsyncClient) -> list[dict]:
    grades = (await client.get("/api/v1/grades")).json()["grades"]
    grade_id = next(g["id"] for g in grades if g["name"] == "1")
    return (await client.get("/api/v1/materials", params={"grade_id": grade_id})).json()["materials"]


class TestDashboard:
    async def test_new_learner(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/dashboard")
        assert response.status_code == 200
        data = response.json()

        user = data["user"]
        assert user["name"] == "Budi Santoso"
        assert user["gold"] == 100
        assert user["streak"] == 0
        assert user["total_lessons_completed"] == 0
        assert user["total_exercise_sessions"] == 0

        assert len(data["materials"]) == 6
        assert all(m["progress"] == 0 for m in data["materials"])
        assert data["materials"][0]["color"] == "blue"
        assert data["recent_badges"] == []
        assert [t["target"] for t in data["daily_tasks"]] == [1, 3, 50]
        assert not any(t["completed"] for t in data["daily_tasks"])

    async def test_activity_today(self, authed_client: AsyncClient, answer_keys: dict):
        materials = await _grade_one_materials(authed_client)
        shapes = next(m for m in materials if m["name"] == "shapes-and-geometry")
        course = shapes["courses"][0]
        await authed_client.post("/api/v1/progress", json={"course_id": course["id"], "completed": True})

        keys = answer_keys[COUNTING]
        ids = list(keys)[:10]
        await authed_client.post("/api/v1/exercises/submit", json={
            "grade": "1",
            "material": COUNTING,
            "exercise_ids": ids,
            "answers": [keys[i] for i in ids],
            "time_spent": 250,
        })

        data = (await authed_client.get("/api/v1/dashboard")).json()
        user = data["user"]
        assert user["streak"] == 1
        assert user["total_lessons_completed"] == 1
        assert user["total_exercise_sessions"] == 1
        assert user["xp"] == course["xp_reward"]

        shapes_row = next(m for m in data["materials"] if m["id"] == shapes["id"])
        assert shapes_row["completed_lessons"] == 1
        assert shapes_row["total_lessons"] == 2
        assert shapes_row["progress"] == 50

        lessons, sessions, xp = data["daily_tasks"]
        assert lessons == {"task": lessons["task"], "progress": 1, "target": 1, "completed": True}
        assert sessions["progress"] == 1 and sessions["completed"] is False
        assert xp["progress"] == course["xp_reward"]

        assert {b["name"] for b in data["recent_badges"]} == {"Langkah Pertama", "Nilai Sempurna"}

    async def test_follows_current_grade(self, authed_client: AsyncClient):
        await authed_client.put("/api/v1/users/me", json={"name": "Budi", "current_grade": 4})
        data = (await authed_client.get("/api/v1/dashboard")).json()
        assert data["user"]["current_grade"] == 4
        assert data["materials"] == []

    async def test_requires_auth(self, client: AsyncClient):
        assert (await client.get("/api/v1/dashboard")).status_code == 401


class TestDashboardCache:
    async def test_miss_then_hit(self, authed_client: AsyncClient, registered_user: dict, monkeypatch):
        store: dict[str, object] = {}

        async def fake_get(key: str):
            return store.get(key)

        async def fake_set(key: str, ttl: int, value: object) -> None:
            assert ttl == 10
            store[key] = value

        monkeypatch.setattr(dashboard_service, "redis_enabled", lambda: True)
        monkeypatch.setattr(dashboard_service, "get_cached_json", fake_get)
        monkeypatch.setattr(dashboard_service, "set_cached_json", fake_set)

        first = (await authed_client.get("/api/v1/dashboard")).json()
        key = f"dashboard:{registered_user['user_id']}"
        assert key in store

        # A change inside the TTL is not visible until the entry expires
        await authed_client.put("/api/v1/users/me", json={"name": "Budi Baru"})
        second = (await authed_client.get("/api/v1/dashboard")).json()
        assert second == first
        assert second["user"]["name"] == "Budi Santoso"
