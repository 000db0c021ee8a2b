"""FastAPI routes for the upload gateway."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from app.core import UploadOrchestrator
from app.dependencies import get_image_upload, get_orchestrator

router = APIRouter()


@router.get("/healthz", response_model=dict[str, str])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/upload")
async def upload(
    nama_petani: str = Form(default=""),
    alamat: str = Form(default=""),
    kota: str = Form(default=""),
    image: UploadFile | None = Depends(get_image_upload),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    outcome = await orchestrator.handle_upload(
        nama_petani=nama_petani,
        alamat=alamat,
        kota=kota,
        image=image,
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body())
