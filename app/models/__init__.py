"""Export Pydantic models for convenience."""

from .common import (
    KOLAM_LABEL,
    ClassificationResponse,
    ClassificationVerdict,
    DuplicateVerdict,
    FailedStage,
    MultipartBody,
    UploadOutcome,
    UploadStage,
    UploadSubmission,
)

__all__ = [
    "KOLAM_LABEL",
    "ClassificationResponse",
    "ClassificationVerdict",
    "DuplicateVerdict",
    "FailedStage",
    "MultipartBody",
    "UploadOutcome",
    "UploadStage",
    "UploadSubmission",
]
