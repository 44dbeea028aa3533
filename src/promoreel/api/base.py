"""Base protocol definitions for API clients.

Defines structural typing protocols that all API client implementations
must satisfy. Using Protocol instead of ABC allows duck-typing:
any class with matching method signatures automatically conforms.
"""

from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

from promoreel.models.assets import MediaAsset
from promoreel.models.generation import OperationStatus

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class VideoGeneratorProtocol(Protocol):
    """Protocol for asynchronous video generation backends.

    Generation is split into submit / poll / download so the caller owns
    the polling loop (interval, attempt cap, abandonment).
    """

    async def submit(
        self,
        prompt: str,
        images: list[MediaAsset],
        aspect_ratio: str,
    ) -> OperationStatus:
        """Start a generation job and return its initial status."""
        ...

    async def get_operation(self, name: str) -> OperationStatus:
        """Fetch the current status of a previously submitted job."""
        ...

    async def download(self, uri: str) -> bytes:
        """Fetch the finished video bytes from a result locator."""
        ...

    def model_for(self, image_count: int) -> str:
        """Return the model ID used for the given number of reference images."""
        ...


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for LLM clients returning validated pydantic models."""

    async def generate_structured(
        self,
        messages: list[dict[str, Any]],
        schema: type[ModelT],
        system_prompt: str | None = None,
    ) -> ModelT:
        """Generate output for ``schema`` and return the validated model."""
        ...
