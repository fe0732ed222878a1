# ============================================================================
# FILE: vibestream/main.py
# ============================================================================
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from vibestream.api.error_handlers import register_error_handlers
from vibestream.api.v1.router import api_router
from vibestream.config import settings
from vibestream.core.logging import setup_logging
from vibestream.db.session import DatabaseSessionManager
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup, close it on shutdown"""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    owns_store = app.state.store is None
    if owns_store:
        app.state.store = DatabaseSessionManager.from_url(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            timeout_seconds=settings.DB_TIMEOUT_SECONDS,
            echo=settings.DEBUG,
        )
    app.state.store.create_all()
    logger.info(f"Starting {settings.APP_NAME}")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")
    if owns_store:
        app.state.store.dispose()
        app.state.store = None


def create_app(store: Optional[DatabaseSessionManager] = None) -> FastAPI:
    """Build the API; pass ``store`` to run against an existing database handle"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Playlists with gapless track ordering and per-owner access",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    register_error_handlers(app)

    @app.get("/health")
    def health_check(request: Request):
        store = request.app.state.store
        if store is None or not store.health_check():
            return JSONResponse(status_code=503, content={"status": "unhealthy"})
        return {"status": "healthy"}

    return app


app = create_app()
