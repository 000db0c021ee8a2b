"""FastAPI entrypoint for the upload gateway.

Serve with ``uvicorn --factory app.main:create_app`` or ``python -m app.main``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import router as api_router
from app.config import Settings, get_settings
from app.core import UploadOrchestrator
from app.logging import configure_logging
from app.services import ClassifierClient, DuplicateCheckClient


def build_orchestrator(settings: Settings) -> UploadOrchestrator:
    timeout = settings.request_timeout_seconds
    return UploadOrchestrator(
        settings=settings,
        classifier=ClassifierClient(
            settings.classifier_url,
            path=settings.classify_path,
            timeout=timeout,
        ),
        duplicate_checker=DuplicateCheckClient(
            settings.dedupe_url,
            path=settings.check_path,
            timeout=timeout,
        ),
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: UploadOrchestrator | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_file)

    orchestrator = orchestrator or build_orchestrator(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.orchestrator = orchestrator
        await orchestrator.start()
        try:
            yield
        finally:
            await orchestrator.shutdown()

    app = FastAPI(title="Kolam Upload Gateway", version="0.1.0", lifespan=lifespan)
    app.include_router(api_router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
