"""Google Veo video generation client.

Wraps the google-genai SDK to start video generation jobs conditioned on
product images, check their long-running operations and download the
finished clip.

The SDK calls are synchronous, so each one is pushed to a thread via
asyncio.to_thread() to keep the event loop free while a job is polled.
"""

import asyncio
import base64
import logging

import httpx
from google import genai
from google.genai import types
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from promoreel.models.assets import MediaAsset
from promoreel.models.generation import OperationStatus

logger = logging.getLogger(__name__)

# Fast variant: one image used as the starting frame
DEFAULT_SINGLE_IMAGE_MODEL = "veo-3.1-fast-generate-preview"
# Full variant: required for asset reference images
DEFAULT_MULTI_IMAGE_MODEL = "veo-3.1-generate-preview"

# Transient errors worth retrying
_RETRYABLE_ERRORS = (
    ConnectionError,
    TimeoutError,
    OSError,
)

_RETRYABLE_DOWNLOAD_ERRORS = (*_RETRYABLE_ERRORS, httpx.TransportError)


def _to_image(asset: MediaAsset) -> types.Image:
    return types.Image(
        image_bytes=base64.b64decode(asset.image_bytes),
        mime_type=asset.mime_type,
    )


def _to_status(operation: types.GenerateVideosOperation) -> OperationStatus:
    """Flatten an SDK operation into an OperationStatus snapshot."""
    uri = None
    response = operation.response
    if response and response.generated_videos:
        video = response.generated_videos[0].video
        if video is not None:
            uri = video.uri
    error = operation.error
    return OperationStatus(
        name=operation.name or "",
        done=bool(operation.done),
        artifact_uri=uri,
        error=str(error) if error else None,
    )


class VeoClient:
    """Google Veo client implementing VideoGeneratorProtocol.

    One reference image is passed as the conditioning frame to the fast
    model. Two or three images are passed as ``ASSET`` reference images to
    the full model, which only renders landscape video.
    """

    def __init__(
        self,
        api_key: str,
        single_image_model: str = DEFAULT_SINGLE_IMAGE_MODEL,
        multi_image_model: str = DEFAULT_MULTI_IMAGE_MODEL,
        resolution: str = "720p",
        download_timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = genai.Client(api_key=api_key)
        self.single_image_model = single_image_model
        self.multi_image_model = multi_image_model
        self.resolution = resolution
        self.download_timeout = download_timeout
        self._api_key = api_key
        self._transport = transport

    def model_for(self, image_count: int) -> str:
        return self.single_image_model if image_count == 1 else self.multi_image_model

    def _submit(
        self,
        prompt: str,
        images: list[MediaAsset],
        aspect_ratio: str,
    ) -> OperationStatus:
        """Synchronous submission run inside a thread."""
        if not images:
            raise ValueError("At least one image must be selected to generate a video.")

        model = self.model_for(len(images))
        config = types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=self.resolution,
            aspect_ratio=aspect_ratio,
        )

        logger.info(
            "Starting Veo generation: model=%s, images=%d, aspect_ratio=%s",
            model,
            len(images),
            aspect_ratio,
        )

        if len(images) == 1:
            operation = self.client.models.generate_videos(
                model=model,
                prompt=prompt,
                image=_to_image(images[0]),
                config=config,
            )
        else:
            config.reference_images = [
                types.VideoGenerationReferenceImage(
                    image=_to_image(asset),
                    reference_type=types.VideoGenerationReferenceType.ASSET,
                )
                for asset in images
            ]
            operation = self.client.models.generate_videos(
                model=model,
                prompt=prompt,
                config=config,
            )

        status = _to_status(operation)
        logger.debug("Created Veo operation: %s", status.name)
        return status

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        retry=retry_if_exception_type(_RETRYABLE_ERRORS),
        reraise=True,
    )
    async def submit(
        self,
        prompt: str,
        images: list[MediaAsset],
        aspect_ratio: str,
    ) -> OperationStatus:
        """Start a video generation job.

        Args:
            prompt: Final composed prompt.
            images: One to three reference images.
            aspect_ratio: "16:9" or "9:16"; passed through unchanged.

        Returns:
            Status of the newly created operation.

        Raises:
            ValueError: If no images are given.
            google.genai.errors.APIError: On API rejections (quota, auth, ...).
        """
        return await asyncio.to_thread(self._submit, prompt, images, aspect_ratio)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        retry=retry_if_exception_type(_RETRYABLE_ERRORS),
        reraise=True,
    )
    async def get_operation(self, name: str) -> OperationStatus:
        """Fetch the latest status of an operation by name."""
        operation = await asyncio.to_thread(
            self.client.operations.get,
            types.GenerateVideosOperation(name=name),
        )
        return _to_status(operation)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        retry=retry_if_exception_type(_RETRYABLE_DOWNLOAD_ERRORS),
        reraise=True,
    )
    async def download(self, uri: str) -> bytes:
        """Download the generated video, authenticating with the API key.

        Raises:
            httpx.HTTPStatusError: If the file server answers with an error.
        """
        logger.debug("Downloading video from %s", uri)
        async with httpx.AsyncClient(
            timeout=self.download_timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.get(uri, params={"key": self._api_key})
            response.raise_for_status()
            return response.content
