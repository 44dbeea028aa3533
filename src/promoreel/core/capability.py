"""Capability gate: may this environment and credential generate video?

The gate is injected at startup. ``KeyCredentialGate`` wraps a configured
API key and an optional interactive re-selection prompt;
``UnavailableCapabilityGate`` is the typed variant for environments that
cannot generate video at all.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from pydantic import SecretStr

logger = logging.getLogger(__name__)

KeyPrompt = Callable[[], Awaitable[str]]


@runtime_checkable
class CapabilityGate(Protocol):
    """What the orchestrator needs to know about the credential."""

    @property
    def is_environment_supported(self) -> bool: ...

    @property
    def has_credential(self) -> bool: ...

    def credential(self) -> str:
        """Return the current credential, or an empty string."""
        ...

    async def request_credential_selection(self) -> bool:
        """Ask for a credential; return whether one is now available."""
        ...

    def forget_credential(self) -> None:
        """Drop the stored credential so the next submission re-prompts."""
        ...


class KeyCredentialGate:
    """Gate backed by an API key, with optional interactive re-selection."""

    def __init__(self, api_key: SecretStr | str = "", prompt: KeyPrompt | None = None) -> None:
        if isinstance(api_key, str):
            api_key = SecretStr(api_key)
        self._key = api_key
        self._prompt = prompt

    @property
    def is_environment_supported(self) -> bool:
        return True

    @property
    def has_credential(self) -> bool:
        return bool(self._key.get_secret_value())

    def credential(self) -> str:
        return self._key.get_secret_value()

    async def request_credential_selection(self) -> bool:
        if self._prompt is None:
            logger.warning("No credential prompt configured; cannot select a new key.")
            return self.has_credential
        self._key = SecretStr((await self._prompt()).strip())
        return self.has_credential

    def forget_credential(self) -> None:
        logger.info("Forgetting stored video generation credential.")
        self._key = SecretStr("")


class UnavailableCapabilityGate:
    """Gate for environments where video generation is not possible."""

    def __init__(self, reason: str = "Video generation is not available here.") -> None:
        self.reason = reason

    @property
    def is_environment_supported(self) -> bool:
        return False

    @property
    def has_credential(self) -> bool:
        return False

    def credential(self) -> str:
        return ""

    async def request_credential_selection(self) -> bool:
        return False

    def forget_credential(self) -> None:
        pass
