"""Duplicate-check service client."""

from __future__ import annotations

import logging
from typing import BinaryIO

from pydantic import ValidationError

from app.models import DuplicateVerdict

from .base import BaseServiceClient, ServiceError
from .multipart import MultipartEncodingError, encode_multipart

logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = frozenset({".png", ".jpg"})


class UnsupportedFileTypeError(ServiceError):
    """Raised before any network call when the upload extension is not accepted."""

    def __init__(self, extension: str) -> None:
        super().__init__("unsupported file type")
        self.extension = extension


def file_extension(filename: str) -> str:
    """Return the suffix starting at the last dot of the final path element.

    Unlike ``os.path.splitext`` a leading dot counts, so ``".jpg"`` yields
    ``".jpg"``. Returns an empty string when there is no dot.
    """

    name = filename.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot == -1:
        return ""
    return name[dot:]


class DuplicateCheckClient(BaseServiceClient):
    """Uploads an image with grower metadata for duplicate detection."""

    def __init__(self, base_url: str, *, path: str = "/check", **kwargs) -> None:
        super().__init__(base_url, **kwargs)
        self.path = path

    async def check_duplicate(
        self,
        image: bytes | BinaryIO,
        *,
        nama_petani: str,
        alamat: str,
        kota: str,
        filename: str,
    ) -> DuplicateVerdict:
        extension = file_extension(filename)
        if extension not in SUPPORTED_EXTENSIONS:
            logger.warning("Rejecting upload %r: unsupported extension %r", filename, extension)
            raise UnsupportedFileTypeError(extension)

        # Field order is part of the wire contract: nama_petani, alamat, kota.
        fields = {"nama_petani": nama_petani, "alamat": alamat, "kota": kota}
        try:
            body = encode_multipart(image, extension, fields)
        except MultipartEncodingError as exc:
            raise ServiceError(str(exc)) from exc

        raw = await self._post_encoded(self.path, body)
        try:
            verdict = DuplicateVerdict.model_validate(raw)
        except ValidationError as exc:
            raise ServiceError(f"Duplicate check response invalid: {exc}") from exc

        logger.info(
            "Duplicate check for petani=%r duplicate=%s message=%r",
            nama_petani,
            verdict.duplicate,
            verdict.message,
        )
        return verdict
