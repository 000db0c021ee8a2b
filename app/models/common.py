"""Common Pydantic models shared across modules."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
    model_validator,
)

KOLAM_LABEL = "kolam"


class UploadSubmission(BaseModel):
    """Grower metadata accompanying a single upload."""

    nama_petani: str = ""
    alamat: str = ""
    kota: str = ""
    filename: str = ""


class ClassificationVerdict(str, Enum):
    """Outcome of asking the classifier whether an image shows a kolam."""

    CONFIRMED = "CONFIRMED"
    REJECTED = "REJECTED"

    @classmethod
    def from_label(cls, label: str) -> "ClassificationVerdict":
        """Exact, case-sensitive comparison against the positive label."""

        return cls.CONFIRMED if label == KOLAM_LABEL else cls.REJECTED


class ClassificationResponse(BaseModel):
    """Classifier response structure."""

    # Absent or null label decodes as empty and is therefore a rejection
    result: StrictStr = ""

    @field_validator("result", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class DuplicateVerdict(BaseModel):
    """Duplicate-check service response structure."""

    duplicate: StrictBool = False
    message: StrictStr = ""

    @field_validator("duplicate", "message", mode="before")
    @classmethod
    def _null_as_default(cls, value, info):
        """JSON null leaves the field at its zero value."""

        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class UploadStage(str, Enum):
    """Pipeline states for one upload request."""

    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    CLASSIFIED = "CLASSIFIED"
    DUPLICATE_CHECKED = "DUPLICATE_CHECKED"
    RESPONDED = "RESPONDED"
    FAILED = "FAILED"


class FailedStage(str, Enum):
    """Stage that terminated a failed request."""

    INTAKE = "intake"
    CLASSIFY = "classify"
    DEDUPE = "dedupe"


class UploadOutcome(BaseModel):
    """Caller-visible result of the upload pipeline."""

    status_code: int = Field(ge=100, le=599)
    message: str | None = None
    error: str | None = None
    stage: UploadStage
    failed_stage: FailedStage | None = None

    @model_validator(mode="after")
    def _exactly_one_body(self) -> "UploadOutcome":
        if (self.message is None) == (self.error is None):
            raise ValueError("UploadOutcome requires exactly one of message or error")
        return self

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def body(self) -> dict[str, Any]:
        """Return the JSON body sent to the caller."""

        if self.error is not None:
            return {"error": self.error}
        return {"message": self.message}


class MultipartBody(BaseModel):
    """Encoded multipart payload plus the content-type header carrying its boundary."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    content_type: str
