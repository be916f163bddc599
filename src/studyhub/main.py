"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from studyhub.api.auth import router as auth_router
from studyhub.api.jobs import router as jobs_router
from studyhub.api.notes import router as notes_router
from studyhub.api.profiles import router as profiles_router
from studyhub.api.quizzes import router as quizzes_router
from studyhub.catalog.seed import seed_quizzes
from studyhub.config import Settings, get_settings
from studyhub.database import close_db, create_schema, get_session_factory, init_db
from studyhub.errors import StoreUnavailable
from studyhub.health.router import router as health_router
from studyhub.middleware import setup_middleware
from studyhub.redis_client import close_redis, init_redis
from studyhub.services import build_services
from studyhub.store.base import DocumentStore
from studyhub.store.sql import SqlDocumentStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    owns_db = getattr(app.state, "services", None) is None
    if owns_db:
        await init_db(settings.database_url)
        await create_schema()
        app.state.services = build_services(SqlDocumentStore(get_session_factory()), settings)

    if settings.seed_quizzes:
        try:
            await seed_quizzes(app.state.services.catalog)
        except StoreUnavailable:
            logger.warning("quiz_seed_failed", exc_info=True)

    if settings.redis_url:
        await init_redis(settings.redis_url)

    yield

    await close_redis()
    if owns_db:
        await close_db()


def create_app(settings: Settings | None = None, store: DocumentStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Passing ``store`` wires the services immediately and skips database setup
    in the lifespan; tests use this with an in-memory or SQLite store.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="StudyHub API",
        description="Notes, paid gigs, and quizzes with a points and earnings ledger",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    if store is not None:
        app.state.services = build_services(store, settings)

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(profiles_router)
    app.include_router(notes_router)
    app.include_router(jobs_router)
    app.include_router(quizzes_router)

    return app


app = create_app()
