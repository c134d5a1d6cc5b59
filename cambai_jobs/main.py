"""FastAPI application entrypoint for the CambAI job client."""
from __future__ import annotations

import logging

from fastapi import FastAPI

from .config import settings
from .routers import jobs

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    application = FastAPI(
        title="CambAI Job Runner",
        description=(
            "Submits CambAI speech, sound, voice and dubbing jobs, waits for them "
            "to finish and returns the produced media."
        ),
        version="0.1.0",
    )
    application.include_router(jobs.router)

    @application.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
