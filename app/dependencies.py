"""FastAPI dependency helpers."""

from __future__ import annotations

from fastapi import Request
from starlette.datastructures import UploadFile

from app.core import UploadOrchestrator

IMAGE_FIELD = "image"


def get_orchestrator(request: Request) -> UploadOrchestrator:
    orchestrator: UploadOrchestrator | None = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Upload orchestrator missing from app state; was the lifespan run?")
    return orchestrator


async def get_image_upload(request: Request) -> UploadFile | None:
    """Return the ``image`` file part, or None when it is absent or not a file.

    A plain text field named ``image`` counts as missing so the caller gets
    the pipeline's own 400 instead of a framework validation error.
    """

    form = await request.form()
    image = form.get(IMAGE_FIELD)
    if isinstance(image, UploadFile):
        return image
    return None
