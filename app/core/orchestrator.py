"""Upload orchestrator coordinating classification and duplicate checks."""

from __future__ import annotations

import asyncio
import logging
from uuid import uuid4

from starlette.datastructures import UploadFile

from app.config import Settings
from app.core.image_source import ImageIntakeError, UploadedImage
from app.core.state_machine import UploadStateMachine
from app.models import (
    ClassificationVerdict,
    FailedStage,
    UploadOutcome,
    UploadStage,
    UploadSubmission,
)
from app.services import ClassifierClient, DuplicateCheckClient, ServiceError

logger = logging.getLogger(__name__)

MISSING_IMAGE = "Missing image in form data"
UNREADABLE_IMAGE = "Failed to open uploaded file"
NOT_KOLAM = "Image is not a kolam"
CLASSIFY_FAILED = "Failed to classify image"
DEDUPE_FAILED = "Failed to check duplicate"
DUPLICATE_FOUND = "Image is a duplicate"
CLASSIFIED_AS_KOLAM = "Image classified as kolam"


class UploadOrchestrator:
    """Runs validate -> classify -> duplicate-check for each upload."""

    def __init__(
        self,
        *,
        settings: Settings,
        classifier: ClassifierClient,
        duplicate_checker: DuplicateCheckClient,
    ) -> None:
        self.settings = settings
        self.classifier = classifier
        self.duplicate_checker = duplicate_checker

    async def start(self) -> None:
        logger.info(
            "Upload orchestrator ready classifier=%s%s dedupe=%s%s",
            self.settings.classifier_url,
            self.settings.classify_path,
            self.settings.dedupe_url,
            self.settings.check_path,
        )

    async def shutdown(self) -> None:
        """Close downstream connection pools."""

        logger.info("Stopping upload orchestrator")
        await asyncio.gather(
            self.classifier.close(),
            self.duplicate_checker.close(),
            return_exceptions=True,
        )

    async def handle_upload(
        self,
        *,
        nama_petani: str = "",
        alamat: str = "",
        kota: str = "",
        image: UploadFile | None,
    ) -> UploadOutcome:
        """Process one upload and return the response for the caller.

        Downstream calls are sequential and never retried; the first failure
        ends the request.
        """

        machine = UploadStateMachine(str(uuid4()))

        if image is None:
            return self._fail(machine, FailedStage.INTAKE, 400, MISSING_IMAGE)
        try:
            uploaded = await UploadedImage.from_upload(image)
        except ImageIntakeError as exc:
            logger.warning("Upload intake failed request=%s: %s", machine.request_id, exc)
            return self._fail(machine, FailedStage.INTAKE, 400, UNREADABLE_IMAGE)

        submission = UploadSubmission(
            nama_petani=nama_petani or "",
            alamat=alamat or "",
            kota=kota or "",
            filename=uploaded.filename,
        )
        machine.advance(UploadStage.VALIDATED)
        logger.info(
            "Starting upload request=%s filename=%r size=%d",
            machine.request_id,
            submission.filename,
            uploaded.size,
        )

        try:
            with uploaded.open() as stream:
                verdict = await self.classifier.classify(stream)
        except ServiceError as exc:
            logger.error("Classification failed request=%s: %s", machine.request_id, exc)
            return self._fail(machine, FailedStage.CLASSIFY, 500, CLASSIFY_FAILED)

        if verdict is not ClassificationVerdict.CONFIRMED:
            return self._fail(machine, FailedStage.CLASSIFY, 400, NOT_KOLAM)
        machine.advance(UploadStage.CLASSIFIED)

        # Unsupported extensions land here too and stay a 500.
        try:
            with uploaded.open() as stream:
                duplicate = await self.duplicate_checker.check_duplicate(
                    stream,
                    nama_petani=submission.nama_petani,
                    alamat=submission.alamat,
                    kota=submission.kota,
                    filename=submission.filename,
                )
        except ServiceError as exc:
            logger.error("Duplicate check failed request=%s: %s", machine.request_id, exc)
            return self._fail(machine, FailedStage.DEDUPE, 500, DEDUPE_FAILED)
        machine.advance(UploadStage.DUPLICATE_CHECKED)

        message = DUPLICATE_FOUND if duplicate.duplicate else CLASSIFIED_AS_KOLAM
        machine.advance(UploadStage.RESPONDED)
        logger.info("Finished upload request=%s message=%r", machine.request_id, message)
        return UploadOutcome(status_code=200, message=message, stage=machine.state)

    @staticmethod
    def _fail(
        machine: UploadStateMachine,
        stage: FailedStage,
        status_code: int,
        error: str,
    ) -> UploadOutcome:
        machine.fail(stage, error)
        return UploadOutcome(
            status_code=status_code,
            error=error,
            stage=machine.state,
            failed_stage=stage,
        )
