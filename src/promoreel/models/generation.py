"""Video generation job models for promoreel."""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

AspectRatio = Literal["16:9", "9:16"]

# Multi-reference jobs only support landscape output
LANDSCAPE_ASPECT_RATIO: AspectRatio = "16:9"


class ReferenceMode(StrEnum):
    """How the selected images condition the video."""

    SINGLE_IMAGE = "single_image"
    MULTI_IMAGE_ASSET = "multi_image_asset"


class JobStatus(StrEnum):
    """Lifecycle of a generation job."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABANDONED = "abandoned"


class FailureKind(StrEnum):
    """Classified terminal failures, each with its own recovery path."""

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_CREDENTIAL = "invalid_credential"
    TIMEOUT = "timeout"
    UNCLASSIFIED = "unclassified"


class OperationStatus(BaseModel):
    """Snapshot of a remote long-running operation."""

    name: str = Field(..., description="Opaque operation handle")
    done: bool = False
    artifact_uri: str | None = Field(
        default=None, description="Result locator once the operation is done"
    )
    error: str | None = Field(
        default=None, description="Error reported by a finished operation"
    )


class GenerationJob(BaseModel):
    """The single active video generation job."""

    id: str = Field(..., description="Local job identifier")
    prompt: str = Field(..., min_length=1, description="Submitted prompt text")
    reference_mode: ReferenceMode
    aspect_ratio: AspectRatio
    model: str
    asset_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    status: JobStatus = Field(default=JobStatus.IDLE)
    status_message: str = Field(default="")
    operation_name: str | None = Field(default=None)
    poll_attempts: int = Field(default=0, ge=0)
    result_locator: str | None = Field(
        default=None, description="Local path of the downloaded video"
    )
    failure_kind: FailureKind | None = Field(default=None)
    error_message: str | None = Field(default=None)

    @property
    def is_active(self) -> bool:
        """Whether the job is still submitting or polling."""
        return self.status in (JobStatus.SUBMITTING, JobStatus.POLLING)


class GenerationOutcome(BaseModel):
    """Typed result of a generation attempt that callers match on."""

    job_id: str
    status: JobStatus
    video_locator: str | None = None
    failure_kind: FailureKind | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED

    @property
    def requires_new_credential(self) -> bool:
        """Whether the caller should ask for a new credential before retrying."""
        return self.failure_kind == FailureKind.INVALID_CREDENTIAL
