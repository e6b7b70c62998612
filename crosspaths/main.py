"""Crossed Paths API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrossPathsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crosspaths import __version__
from crosspaths.api.error_handlers import register_error_handlers
from crosspaths.api.routes import crossings, health, venues, visits
from crosspaths.config import get_settings
import crosspaths.infrastructure.database as database
from crosspaths.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Crossed Paths API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Crossed Paths API shutting down")


app = FastAPI(
    title="Crossed Paths API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(visits.router)
app.include_router(venues.router)
app.include_router(crossings.router)

register_error_handlers(app)
