"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession

from tutow.auth.router import router as auth_router
from tutow.config import get_settings
from tutow.content.router import router as content_router
from tutow.content.seed import seed_content
from tutow.dashboard.router import router as dashboard_router
from tutow.database import close_db, create_all, get_session, init_db
from tutow.exercises.router import router as exercises_router
from tutow.gamification.router import router as gamification_router
from tutow.gamification.seed import seed_badges
from tutow.garden.router import router as garden_router
from tutow.garden.seed import seed_plant_types
from tutow.health.router import router as health_router
from tutow.leaderboard.router import router as leaderboard_router
from tutow.middleware import setup_middleware
from tutow.redis_client import close_redis, init_redis
from tutow.users.router import router as users_router


async def seed_catalogs(db: AsyncSession) -> None:
    """Seed grades, materials, courses, exercises, plants and badges (idempotent)."""
    await seed_content(db)
    await seed_plant_types(db)
    await seed_badges(db)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    # SQLite has no migration step; build the schema in place
    if settings.database_url.startswith("sqlite"):
        await create_all()

    if settings.seed_on_startup:
        try:
            async for db in get_session():
                await seed_catalogs(db)
                break
        except Exception:
            logging.getLogger(__name__).warning("Catalog seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Tutow API",
        description="Backend API for Tutow, a math learning platform for primary school children",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(content_router)
    app.include_router(exercises_router)
    app.include_router(garden_router)
    app.include_router(gamification_router)
    app.include_router(leaderboard_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
