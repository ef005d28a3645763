"""Standup Tracker - FastAPI app entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.core.config import Settings, get_settings
from app.core.errors import (
    StorageError,
    storage_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from app.core.logging_config import setup_logging
from app.db.base import Base
from app.db.session import create_engine, create_sessionmaker
from app.routers import analysis, auth, standups, weekend_stories
from app.services.providers import build_text_provider


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables (async)
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logger = setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Daily standups, weekend stories and AI analysis for a team",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings.database_url, echo=settings.debug)
    app.state.sessionmaker = create_sessionmaker(app.state.engine)
    app.state.text_provider = build_text_provider(settings)
    logger.info("AI provider: %s", app.state.text_provider.name)

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth.router)
    app.include_router(standups.router)
    app.include_router(weekend_stories.router)
    app.include_router(analysis.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
