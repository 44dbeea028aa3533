"""Factories for API clients built from settings.

Centralizes key checks and client wiring so the workflow controller and
the CLI create clients the same way. Video clients are built per
submission so a freshly selected credential is always used.
"""

from promoreel.api.anthropic_client import AnthropicClient
from promoreel.api.base import LLMClientProtocol, VideoGeneratorProtocol
from promoreel.config.settings import APISettings, VideoSettings


def create_llm_client(api: APISettings) -> LLMClientProtocol:
    """Create the Claude client used for idea and refinement generation.

    Raises:
        ValueError: If ANTHROPIC_API_KEY is not set.
    """
    api_key = api.anthropic_api_key.get_secret_value()
    if not api_key:
        raise ValueError(
            "ANTHROPIC_API_KEY is not set. "
            "Required for idea and refinement generation. "
            "Set it in your .env file or environment variables."
        )
    return AnthropicClient(api_key=api_key, model=api.anthropic_model)


def create_video_client(video: VideoSettings, api_key: str) -> VideoGeneratorProtocol:
    """Create a Veo client for the given credential.

    Args:
        video: Video generation settings (models, resolution, timeouts).
        api_key: The currently selected Gemini API key.

    Raises:
        ValueError: If the API key is empty.
    """
    if not api_key:
        raise ValueError(
            "GEMINI_API_KEY is not set. "
            "Required for Veo video generation. "
            "Set it in your .env file or environment variables."
        )

    from promoreel.api.veo_client import VeoClient

    return VeoClient(
        api_key=api_key,
        single_image_model=video.single_image_model,
        multi_image_model=video.multi_image_model,
        resolution=video.resolution,
        download_timeout=video.download_timeout,
    )
