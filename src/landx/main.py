"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from landx.api.routes import router
from landx.config import get_settings
from landx.verification.pool import VerificationPool

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: initialize on startup, clean up on shutdown."""
    settings = get_settings()
    app.state.settings = settings

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    logger.info(
        "Starting LandX document verification (max_concurrent=%s, max_file_size=%s, auth=%s)",
        settings.max_concurrent,
        settings.max_file_size,
        "on" if settings.api_key else "off",
    )

    verification_pool = VerificationPool(settings)
    app.state.verification_pool = verification_pool

    logger.info("LandX ready")
    yield

    logger.info("LandX shutdown complete (%d verifications still running)", verification_pool.active_count)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="LandX",
        description="Document plausibility checks for land registration uploads",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run("landx.main:app", host=settings.host, port=settings.port)
