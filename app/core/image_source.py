"""Replayable view over a single uploaded image."""

from __future__ import annotations

import io
import logging

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)


class ImageIntakeError(RuntimeError):
    """Raised when the uploaded file handle cannot be read."""


class UploadedImage:
    """Materializes an upload once and hands out independent readers.

    Each downstream call consumes its own reader, so the bytes sent to the
    classifier and to the duplicate checker are always the same.
    """

    def __init__(self, content: bytes, filename: str) -> None:
        self._content = content
        self.filename = filename

    @classmethod
    async def from_upload(cls, upload: UploadFile) -> "UploadedImage":
        """Read the upload into memory and release its handle."""

        try:
            content = await upload.read()
        except (OSError, ValueError) as exc:
            raise ImageIntakeError(f"Failed to read upload {upload.filename!r}: {exc}") from exc
        finally:
            await upload.close()

        image = cls(content, upload.filename or "")
        logger.debug("Buffered upload filename=%r size=%d", image.filename, image.size)
        return image

    def open(self) -> io.BytesIO:
        """Return a fresh, unconsumed reader over the uploaded bytes."""

        return io.BytesIO(self._content)

    @property
    def size(self) -> int:
        return len(self._content)
