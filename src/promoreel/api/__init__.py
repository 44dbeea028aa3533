"""API client module for promoreel."""

from .anthropic_client import AnthropicClient
from .base import LLMClientProtocol, VideoGeneratorProtocol
from .factory import create_llm_client, create_video_client
from .veo_client import VeoClient

__all__ = [
    "AnthropicClient",
    "LLMClientProtocol",
    "VeoClient",
    "VideoGeneratorProtocol",
    "create_llm_client",
    "create_video_client",
]
