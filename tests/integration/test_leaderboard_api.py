"""Public XP leaderboard."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.db.models import User


@pytest_asyncio.fixture
async def learners(db_session: AsyncSession) -> list[User]:
    """25 learners with XP 0, 10, ..., 240 plus one tie at 100."""
    now = datetime.now(timezone.utc)
    users = [
        User(
            name=f"Murid {i}",
            email=f"murid{i}@example.com",
            username=f"murid{i}",
            password_hash="x",
            school="SD Negeri 2" if i % 2 else None,
            current_grade=1 + i % 6,
            xp=i * 10,
            gold=0,
            created_at=now,
        )
        for i in range(25)
    ]
    users.append(
        User(
            name="Seri",
            email="seri@example.com",
            username="seri",
            password_hash="x",
            xp=100,
            gold=0,
            created_at=now,
        )
    )
    db_session.add_all(users)
    await db_session.commit()
    return users


class TestLeaderboard:
    async def test_empty(self, client: AsyncClient):
        data = (await client.get("/api/v1/leaderboard")).json()
        assert data["entries"] == []
        assert data["pagination"] == {
            "current_page": 1,
            "total_pages": 0,
            "total_users": 0,
            "has_next_page": False,
            "has_prev_page": False,
        }

    async def test_first_page(self, client: AsyncClient, learners: list[User]):
        data = (await client.get("/api/v1/leaderboard")).json()
        entries = data["entries"]
        assert len(entries) == 10
        assert [e["rank"] for e in entries] == list(range(1, 11))
        assert entries[0]["username"] == "murid24"
        assert entries[0]["xp"] == 240
        assert data["pagination"]["total_users"] == 26
        assert data["pagination"]["total_pages"] == 3
        assert data["pagination"]["has_next_page"] is True
        assert data["pagination"]["has_prev_page"] is False

    async def test_second_page(self, client: AsyncClient, learners: list[User]):
        data = (await client.get("/api/v1/leaderboard", params={"page": 2, "limit": 10})).json()
        entries = data["entries"]
        assert [e["rank"] for e in entries] == list(range(11, 21))
        xp = [e["xp"] for e in entries]
        assert xp == sorted(xp, reverse=True)
        assert data["pagination"]["has_prev_page"] is True
        assert data["pagination"]["has_next_page"] is True

    async def test_last_page(self, client: AsyncClient, learners: list[User]):
        data = (await client.get("/api/v1/leaderboard", params={"page": 3})).json()
        assert [e["rank"] for e in data["entries"]] == list(range(21, 27))
        assert data["entries"][-1]["xp"] == 0
        assert data["pagination"]["has_next_page"] is False

    async def test_ties_break_by_registration(self, client: AsyncClient, learners: list[User]):
        entries = (await client.get("/api/v1/leaderboard", params={"limit": 100})).json()["entries"]
        tied = [e["username"] for e in entries if e["xp"] == 100]
        assert tied == ["murid10", "seri"]

    async def test_entry_fields(self, client: AsyncClient, learners: list[User]):
        entry = (await client.get("/api/v1/leaderboard", params={"limit": 1})).json()["entries"][0]
        assert set(entry) == {"rank", "id", "name", "username", "school", "xp", "current_grade"}
        assert "email" not in entry

    async def test_bad_params(self, client: AsyncClient):
        assert (await client.get("/api/v1/leaderboard", params={"page": 0})).status_code == 400
        assert (await client.get("/api/v1/leaderboard", params={"limit": 101})).status_code == 400
