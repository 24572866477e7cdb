"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.config import get_settings
from tutow.database import close_db, create_all, get_session, init_db
from tutow.db.models import Exercise, Grade, Material
from tutow.main import create_app, seed_catalogs

TEST_PASSWORD = "rahasia123"

RegisterFn = Callable[..., Awaitable[dict]]


@pytest.fixture(autouse=True)
def _test_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the app at a fresh SQLite file per test, with Redis disabled."""
    monkeypatch.setenv("TUTOW_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'tutow_test.db'}")
    monkeypatch.setenv("TUTOW_REDIS_URL", "")
    monkeypatch.setenv("TUTOW_LOG_FORMAT", "console")
    monkeypatch.setenv("TUTOW_PASSWORD_HASH_TIME_COST", "1")
    monkeypatch.setenv("TUTOW_PASSWORD_HASH_MEMORY_KIB", "8192")
    monkeypatch.setenv("TUTOW_JWT_SECRET_KEY", "test-secret-key-with-enough-bytes-for-hs256")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create the schema and seed the catalogs (grades, courses, exercises, plants, badges)."""
    settings = get_settings()
    await init_db(settings.database_url)
    await create_all()
    async for session in get_session():
        await seed_catalogs(session)
        break
    yield
    await close_db()


@pytest_asyncio.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client against a freshly seeded database."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for test setup and assertions."""
    async for session in get_session():
        yield session
        break


async def _register_and_login(
    client: AsyncClient,
    username: str = "budi",
    name: str = "Budi Santoso",
    school: str | None = "SD Negeri 1",
) -> dict:
    email = f"{username.lower()}@example.com"
    response = await client.post("/api/v1/auth/register", json={
        "name": name,
        "email": email,
        "username": username,
        "password": TEST_PASSWORD,
        "school": school,
    })
    assert response.status_code == 201, response.text
    login = await client.post("/api/v1/auth/login", json={"email": email, "password": TEST_PASSWORD})
    assert login.status_code == 200, login.text
    data = login.json()
    return {
        "user_id": data["user"]["id"],
        "email": email,
        "username": username,
        "access_token": data["access_token"],
        "headers": {"Authorization": f"Bearer {data['access_token']}"},
    }


@pytest.fixture
def register_user(client: AsyncClient) -> RegisterFn:
    """Factory: register + login a learner, returns ids, token and auth headers."""

    async def _register(username: str = "budi", **kwargs: str | None) -> dict:
        return await _register_and_login(client, username, **kwargs)

    return _register


@pytest_asyncio.fixture
async def registered_user(register_user: RegisterFn) -> dict:
    return await register_user()


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, registered_user: dict) -> AsyncClient:
    """Client authenticated as the ``registered_user`` learner."""
    client.headers.update(registered_user["headers"])
    return client


@pytest_asyncio.fixture
async def answer_keys(db_session: AsyncSession) -> dict[str, dict[int, str]]:
    """Correct answers of every grade 1 exercise: material name -> {exercise id: answer}."""
    result = await db_session.execute(
        select(Material.name, Exercise.id, Exercise.answer)
        .select_from(Exercise)
        .join(Material, Material.id == Exercise.material_id)
        .join(Grade, Grade.id == Material.grade_id)
        .where(Grade.name == "1")
        .order_by(Exercise.id)
    )
    keys: dict[str, dict[int, str]] = {}
    for material_name, exercise_id, answer in result:
        keys.setdefault(material_name, {})[exercise_id] = answer
    await db_session.commit()
    return keys
