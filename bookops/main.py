"""BookOps — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookops.adapters.persistence.database import engine
from bookops.config import settings
from bookops.infrastructure.api.routes_assignments import router as assignments_router
from bookops.infrastructure.api.routes_health import router as health_router
from bookops.infrastructure.api.routes_priorities import router as priorities_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="BookOps — Priority Waterfall Assignment Engine",
        description="Holdover protection and optimized account-to-rep assignment",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(priorities_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")

    return app


app = create_app()
