"""Per-request state machine for the upload pipeline."""

from __future__ import annotations

import logging

from app.models import FailedStage, UploadStage

logger = logging.getLogger(__name__)


_FORWARD: dict[UploadStage, UploadStage] = {
    UploadStage.RECEIVED: UploadStage.VALIDATED,
    UploadStage.VALIDATED: UploadStage.CLASSIFIED,
    UploadStage.CLASSIFIED: UploadStage.DUPLICATE_CHECKED,
    UploadStage.DUPLICATE_CHECKED: UploadStage.RESPONDED,
}

_TERMINAL = frozenset({UploadStage.RESPONDED, UploadStage.FAILED})


class InvalidTransitionError(RuntimeError):
    """Raised when the pipeline attempts an out-of-order transition."""


class UploadStateMachine:
    """Encapsulates upload pipeline progress with explicit transitions."""

    def __init__(self, request_id: str) -> None:
        self.request_id = request_id
        self.state: UploadStage = UploadStage.RECEIVED
        self.failed_stage: FailedStage | None = None
        self.failure_reason: str | None = None

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL

    def advance(self, target: UploadStage) -> UploadStage:
        """Move to the next stage; only the single forward step is legal."""

        expected = _FORWARD.get(self.state)
        if expected is None or target != expected:
            raise InvalidTransitionError(
                f"Illegal transition {self.state.value}->{target.value} "
                f"for request {self.request_id}"
            )
        logger.debug(
            "State transition %s->%s request=%s",
            self.state.value,
            target.value,
            self.request_id,
        )
        self.state = target
        return self.state

    def fail(self, stage: FailedStage, reason: str) -> UploadStage:
        """Enter the terminal failure state from any non-terminal state."""

        if self.finished:
            raise InvalidTransitionError(
                f"Cannot fail request {self.request_id} from terminal state {self.state.value}"
            )
        logger.info(
            "State transition %s->FAILED request=%s stage=%s reason=%s",
            self.state.value,
            self.request_id,
            stage.value,
            reason,
        )
        self.state = UploadStage.FAILED
        self.failed_stage = stage
        self.failure_reason = reason
        return self.state
