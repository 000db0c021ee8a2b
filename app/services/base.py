"""Common HTTP client utilities."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.models import MultipartBody

logger = logging.getLogger(__name__)


class ServiceError(RuntimeError):
    """Raised when downstream service interaction fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BaseServiceClient:
    """Reusable Async HTTP client wrapper."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _post_encoded(self, path: str, body: MultipartBody) -> Any:
        """POST a pre-encoded multipart body and decode the JSON reply.

        Only HTTP 200 counts as success; any other status is an error.
        """

        url = f"{self.base_url}{path}"
        logger.debug("POST %s multipart bytes=%d", url, len(body.content))
        try:
            response = await self._client.post(
                path,
                content=body.content,
                headers={"Content-Type": body.content_type},
            )
        except httpx.HTTPError as exc:
            raise ServiceError(f"Multipart request to {url} failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise ServiceError(
                f"{url} returned {response.status_code} status code",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ServiceError(f"Response from {url} is not valid JSON: {exc}") from exc
