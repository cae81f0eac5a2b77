"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from campus_market.api.error_handlers import register_error_handlers
from campus_market.api.routes import admin, health, home, search, user
from campus_market.config import settings
from campus_market.infrastructure.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.log_level, settings.log_format)
    logger.info("campus_market_starting")
    yield
    logger.info("campus_market_stopping")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Campus Marketplace",
        description="Listing moderation and catalog search for the campus marketplace.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Identity (written by the login flow) and flash notifications live here.
    app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(home.router)
    app.include_router(search.router)
    app.include_router(user.router)
    app.include_router(admin.router)

    return app


app = create_app()
