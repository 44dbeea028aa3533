"""Video generation orchestrator.

Drives one generation job through submit, poll and download:

    Idle -> Submitting -> Polling -> Succeeded | Failed

Terminal failures are classified and returned as a ``GenerationOutcome``
instead of being raised. Only one job runs at a time. ``discard()``
abandons a running job by bumping the generation token, which the poll
loop checks after every suspension point.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable

from promoreel.api.base import VideoGeneratorProtocol
from promoreel.assets.previews import PreviewStore
from promoreel.core.capability import CapabilityGate
from promoreel.errors import (
    CapabilityError,
    GenerationInProgressError,
    InputValidationError,
)
from promoreel.models.assets import MediaAsset
from promoreel.models.generation import (
    LANDSCAPE_ASPECT_RATIO,
    AspectRatio,
    FailureKind,
    GenerationJob,
    GenerationOutcome,
    JobStatus,
    ReferenceMode,
)

logger = logging.getLogger(__name__)

MAX_REFERENCE_IMAGES = 3

STATUS_INITIATING = "Initiating video generation..."
STATUS_PROCESSING = "Processing request... This may take a few minutes."
STATUS_CHECKING = "Checking video status..."
STATUS_FETCHING = "Video generated! Fetching data..."
STATUS_DONE = "Done!"

QUOTA_MESSAGE = (
    "API quota exceeded. Please check your plan and billing details.\n\n"
    "For more information, visit: "
    "[Google AI Rate Limits](https://ai.google.dev/gemini-api/docs/rate-limits) "
    "or [Monitor Your Usage](https://ai.dev/usage?tab=rate-limit)."
)
INVALID_CREDENTIAL_MESSAGE = (
    "Your API key is invalid or not found. "
    "Please select a valid API key and try again."
)
TIMEOUT_MESSAGE = (
    "Video generation did not finish after {attempts} status checks. "
    "Please try again later."
)
GENERIC_MESSAGE = "Failed to generate video. Please check the logs for details."
MISSING_ARTIFACT_MESSAGE = "Video generation succeeded, but no download link was found."

_QUOTA_MARKERS = ("RESOURCE_EXHAUSTED", '"code":429', "'code': 429")
_CREDENTIAL_MARKERS = (
    "Requested entity was not found.",
    "API_KEY_INVALID",
    "API key not valid",
)

StatusCallback = Callable[[str], None]
ClientFactory = Callable[[str], VideoGeneratorProtocol]


class _GenerationTimeout(Exception):
    pass


class _MissingArtifactError(RuntimeError):
    pass


def plan_reference_mode(
    image_count: int, aspect_ratio: AspectRatio
) -> tuple[ReferenceMode, AspectRatio]:
    """Choose the reference mode and effective aspect ratio.

    One image keeps the requested ratio. Two or three images use asset
    references, which only support landscape output.

    Raises:
        InputValidationError: For zero or more than three images.
    """
    if image_count == 1:
        return ReferenceMode.SINGLE_IMAGE, aspect_ratio
    if 2 <= image_count <= MAX_REFERENCE_IMAGES:
        return ReferenceMode.MULTI_IMAGE_ASSET, LANDSCAPE_ASPECT_RATIO
    raise InputValidationError(
        f"Select between 1 and {MAX_REFERENCE_IMAGES} product images "
        f"(got {image_count})."
    )


def classify_failure(exc: BaseException) -> FailureKind:
    """Map an exception raised during generation to a FailureKind."""
    if isinstance(exc, _GenerationTimeout):
        return FailureKind.TIMEOUT
    text = str(exc)
    if getattr(exc, "code", None) == 429 or any(marker in text for marker in _QUOTA_MARKERS):
        return FailureKind.QUOTA_EXCEEDED
    if any(marker in text for marker in _CREDENTIAL_MARKERS):
        return FailureKind.INVALID_CREDENTIAL
    return FailureKind.UNCLASSIFIED


class VideoGenerationOrchestrator:
    """Runs a single video generation job end to end.

    Args:
        gate: Capability gate consulted before each submission and told to
            forget the credential when it is rejected.
        client_factory: Builds a video client for the current credential.
        previews: Store that holds the downloaded video.
        poll_interval: Seconds between status checks.
        max_poll_attempts: Status checks before timing out (0 = no limit).
        on_status: Called with each human-readable status update.
    """

    def __init__(
        self,
        gate: CapabilityGate,
        client_factory: ClientFactory,
        previews: PreviewStore,
        *,
        poll_interval: float = 10.0,
        max_poll_attempts: int = 60,
        on_status: StatusCallback | None = None,
    ) -> None:
        self.gate = gate
        self.client_factory = client_factory
        self.previews = previews
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.on_status = on_status
        self.job: GenerationJob | None = None
        self._token = 0

    @property
    def is_running(self) -> bool:
        return self.job is not None and self.job.is_active

    async def generate(
        self,
        prompt: str,
        images: list[MediaAsset],
        aspect_ratio: AspectRatio,
    ) -> GenerationOutcome:
        """Submit a job, poll it to completion and download the result.

        Raises:
            InputValidationError: Empty prompt or image count outside 1-3.
            CapabilityError: Unsupported environment or no credential.
            GenerationInProgressError: Another job is still running.
        """
        prompt = prompt.strip()
        if not prompt or not 1 <= len(images) <= MAX_REFERENCE_IMAGES:
            raise InputValidationError(
                "Please provide a video prompt and select between 1 to 3 product images."
            )
        if not self.gate.is_environment_supported:
            raise CapabilityError("Video generation is not supported in this environment.")
        if not self.gate.has_credential:
            raise CapabilityError("Select an API key before generating a video.")
        if self.is_running:
            raise GenerationInProgressError(
                "A video is already being generated. Wait for it to finish or start over."
            )

        mode, effective_ratio = plan_reference_mode(len(images), aspect_ratio)
        if effective_ratio != aspect_ratio:
            logger.info(
                "Multi-image generation forces aspect ratio %s (requested %s)",
                effective_ratio,
                aspect_ratio,
            )

        self.discard()
        token = self._token
        client = self.client_factory(self.gate.credential())
        job = GenerationJob(
            id=str(uuid.uuid4()),
            prompt=prompt,
            reference_mode=mode,
            aspect_ratio=effective_ratio,
            model=client.model_for(len(images)),
            asset_ids=[asset.id for asset in images],
            status=JobStatus.SUBMITTING,
        )
        self.job = job

        try:
            return await self._run(job, client, images, token)
        except asyncio.CancelledError:
            if self._is_current(token):
                logger.info("Generation job %s was cancelled", job.id)
                self.discard()
            raise
        except Exception as exc:
            return self._fail(job, exc, token)

    def discard(self) -> None:
        """Abandon any running job and release the previous job's video."""
        self._token += 1
        job = self.job
        if job is None:
            return
        if job.is_active:
            logger.info(
                "Abandoning generation job %s (operation %s)",
                job.id,
                job.operation_name,
            )
            job.status = JobStatus.ABANDONED
            job.status_message = ""
        if job.result_locator:
            self.previews.release(job.result_locator)
        self.job = None

    def _is_current(self, token: int) -> bool:
        return token == self._token

    def _set_status(self, job: GenerationJob, message: str, token: int) -> None:
        job.status_message = message
        logger.debug("Job %s: %s", job.id, message)
        if self.on_status is not None and self._is_current(token):
            self.on_status(message)

    async def _run(
        self,
        job: GenerationJob,
        client: VideoGeneratorProtocol,
        images: list[MediaAsset],
        token: int,
    ) -> GenerationOutcome:
        self._set_status(job, STATUS_INITIATING, token)
        operation = await client.submit(job.prompt, images, job.aspect_ratio)
        if not self._is_current(token):
            return self._abandoned(job)

        job.operation_name = operation.name
        job.status = JobStatus.POLLING
        self._set_status(job, STATUS_PROCESSING, token)

        while not operation.done:
            if self.max_poll_attempts and job.poll_attempts >= self.max_poll_attempts:
                raise _GenerationTimeout(
                    f"Operation {operation.name} not done after {job.poll_attempts} checks"
                )
            await asyncio.sleep(self.poll_interval)
            if not self._is_current(token):
                return self._abandoned(job)

            self._set_status(job, STATUS_CHECKING, token)
            operation = await client.get_operation(operation.name)
            job.poll_attempts += 1
            if not self._is_current(token):
                return self._abandoned(job)

        if operation.error:
            raise RuntimeError(f"Video generation failed: {operation.error}")
        if not operation.artifact_uri:
            raise _MissingArtifactError(MISSING_ARTIFACT_MESSAGE)

        self._set_status(job, STATUS_FETCHING, token)
        data = await client.download(operation.artifact_uri)
        if not self._is_current(token):
            return self._abandoned(job)

        job.result_locator = self.previews.create(data, "video/mp4")
        job.status = JobStatus.SUCCEEDED
        self._set_status(job, STATUS_DONE, token)
        logger.info("Job %s succeeded: %s", job.id, job.result_locator)

        return GenerationOutcome(
            job_id=job.id,
            status=JobStatus.SUCCEEDED,
            video_locator=job.result_locator,
            message=STATUS_DONE,
        )

    def _abandoned(self, job: GenerationJob) -> GenerationOutcome:
        logger.info("Job %s was abandoned; ignoring its result.", job.id)
        return GenerationOutcome(job_id=job.id, status=JobStatus.ABANDONED)

    def _fail(self, job: GenerationJob, exc: Exception, token: int) -> GenerationOutcome:
        if not self._is_current(token):
            logger.info("Abandoned job %s ended with %s", job.id, type(exc).__name__)
            return self._abandoned(job)

        kind = classify_failure(exc)
        if kind == FailureKind.QUOTA_EXCEEDED:
            message = QUOTA_MESSAGE
            logger.warning("Job %s hit the API quota: %s", job.id, exc)
        elif kind == FailureKind.INVALID_CREDENTIAL:
            message = INVALID_CREDENTIAL_MESSAGE
            logger.warning("Job %s was rejected for its credential: %s", job.id, exc)
            self.gate.forget_credential()
        elif kind == FailureKind.TIMEOUT:
            message = TIMEOUT_MESSAGE.format(attempts=job.poll_attempts)
            logger.warning("Job %s timed out: %s", job.id, exc)
        else:
            message = str(exc) if isinstance(exc, _MissingArtifactError) else GENERIC_MESSAGE
            logger.error("Error generating video for job %s: %s", job.id, exc, exc_info=exc)

        job.status = JobStatus.FAILED
        job.status_message = ""
        job.failure_kind = kind
        job.error_message = message
        return GenerationOutcome(
            job_id=job.id,
            status=JobStatus.FAILED,
            failure_kind=kind,
            message=message,
        )
