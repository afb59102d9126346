"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from pokerlog.challenges.router import router as challenges_router
from pokerlog.config import get_settings
from pokerlog.database import close_db, init_db
from pokerlog.gamification.router import router as gamification_router
from pokerlog.health.router import router as health_router
from pokerlog.middleware import setup_middleware
from pokerlog.rankings.router import router as rankings_router
from pokerlog.redis_client import close_redis, init_redis
from pokerlog.sessions.router import router as sessions_router
from pokerlog.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url, settings.db_pool_size, settings.db_max_overflow)
    if settings.redis_url:
        await init_redis(settings.redis_url, settings.redis_max_connections)
    else:
        logger.warning("redis_disabled", reason="no redis_url configured")

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Pokerlog API",
        description="Poker session tracking with analytics, XP, challenges and rankings",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(rankings_router)
    app.include_router(sessions_router)
    app.include_router(gamification_router)
    app.include_router(challenges_router)

    return app


app = create_app()
