"""Kolam classifier HTTP client."""

from __future__ import annotations

import logging
from typing import BinaryIO

from pydantic import ValidationError

from app.models import ClassificationResponse, ClassificationVerdict

from .base import BaseServiceClient, ServiceError
from .multipart import MultipartEncodingError, encode_multipart

logger = logging.getLogger(__name__)

# The classifier ignores the real type; every upload is announced as JPEG.
CLASSIFY_FILENAME = "image.jpg"


class ClassifierClient(BaseServiceClient):
    """Uploads an image and asks whether it depicts a kolam."""

    def __init__(self, base_url: str, *, path: str = "/classify", **kwargs) -> None:
        super().__init__(base_url, **kwargs)
        self.path = path

    async def classify(self, image: bytes | BinaryIO) -> ClassificationVerdict:
        """Send multipart payload and map the returned label to a verdict."""

        try:
            body = encode_multipart(image, CLASSIFY_FILENAME)
        except MultipartEncodingError as exc:
            raise ServiceError(str(exc)) from exc

        raw = await self._post_encoded(self.path, body)
        try:
            response = ClassificationResponse.model_validate(raw)
        except ValidationError as exc:
            raise ServiceError(f"Classifier response invalid: {exc}") from exc

        verdict = ClassificationVerdict.from_label(response.result)
        logger.info("Classifier returned label=%r verdict=%s", response.result, verdict.value)
        return verdict
