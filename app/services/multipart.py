"""Outbound multipart/form-data encoding."""

from __future__ import annotations

from typing import BinaryIO, Mapping

import httpx

from app.models import MultipartBody

IMAGE_FIELD = "image"
IMAGE_PART_CONTENT_TYPE = "application/octet-stream"

# httpx only renders multipart bodies for a request; the URL is never contacted.
_RENDER_URL = "http://multipart.invalid/"


class MultipartEncodingError(ValueError):
    """Raised when the image cannot be written into a multipart part."""


def encode_multipart(
    image: bytes | BinaryIO,
    filename: str,
    fields: Mapping[str, str] | None = None,
) -> MultipartBody:
    """Build a multipart body with ordered text parts and one ``image`` file part.

    httpx writes every text part first, in mapping order, and the ``image``
    part last. A stream passed as ``image`` is consumed. Each call produces a
    fresh boundary, so bodies must not be reused across requests.
    """

    files = {IMAGE_FIELD: (filename, image, IMAGE_PART_CONTENT_TYPE)}
    try:
        request = httpx.Request("POST", _RENDER_URL, data=dict(fields or {}), files=files)
        content = request.read()
    except (OSError, TypeError, ValueError) as exc:
        raise MultipartEncodingError(f"Failed to encode multipart body: {exc}") from exc

    return MultipartBody(content=content, content_type=request.headers["Content-Type"])
