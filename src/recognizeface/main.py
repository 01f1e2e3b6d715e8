"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recognizeface.api.routes import router
from recognizeface.config import Settings, get_settings
from recognizeface.pipeline import FacePipeline
from recognizeface.providers.face_detector import HttpFaceDetector
from recognizeface.providers.face_identifier import HttpFaceIdentifier
from recognizeface.providers.person_directory import HttpPersonDirectory

logger = logging.getLogger(__name__)


def build_pipeline(http_client: httpx.AsyncClient, settings: Settings) -> FacePipeline:
    """Wire the Face API clients into a pipeline sharing ``http_client``."""
    return FacePipeline(
        detector=HttpFaceDetector(http_client, settings),
        identifier=HttpFaceIdentifier(http_client, settings),
        directory=HttpPersonDirectory(http_client, settings),
        policy=settings.unrecognized_face_policy,
    )


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
        "Starting RecognizeFace (endpoint=%s, person_group=%s, policy=%s)",
        settings.face_api_endpoint,
        settings.person_group_id,
        settings.unrecognized_face_policy,
    )

    http_client = httpx.AsyncClient(timeout=settings.request_timeout)
    app.state.http_client = http_client
    app.state.pipeline = build_pipeline(http_client, settings)

    logger.info("RecognizeFace ready")
    yield

    logger.info("Shutting down RecognizeFace")
    await http_client.aclose()
    logger.info("RecognizeFace shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="RecognizeFace",
        description="Recognizes known people in an image through the Face API",
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
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
