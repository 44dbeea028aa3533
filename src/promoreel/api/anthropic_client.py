"""Claude client returning schema-validated pydantic models.

Ideas and refinement suggestions are both produced by forcing Claude to
call a single tool whose input schema is the target model's JSON schema.
The tool input is unwrapped and validated here, so callers receive a
model instance or an exception, never a raw dict.
"""

import json
import logging
from typing import Any, TypeVar

import anthropic
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Transient errors worth retrying when retries are enabled
_RETRYABLE_ERRORS = (
    anthropic.APITimeoutError,
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)

DEFAULT_MODEL = "claude-sonnet-4-20250514"

_TOOL_NAME = "structured_output"


class AnthropicClient:
    """Claude client for single-shot structured generation.

    Args:
        api_key: Anthropic API key.
        model: Model ID used for every request.
        max_attempts: Total tries per request. The default of 1 sends each
            request once and lets the caller decide whether to try again.
        backoff_multiplier: Scales the exponential wait between tries
            (4-60 s at 1.0; 0 disables waiting).
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        *,
        max_attempts: int = 1,
        backoff_multiplier: float = 1.0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_attempts = max_attempts
        self.backoff_multiplier = backoff_multiplier

    async def generate_structured(
        self,
        messages: list[dict[str, Any]],
        schema: type[ModelT],
        system_prompt: str | None = None,
        max_tokens: int = 4096,
    ) -> ModelT:
        """Ask Claude for output matching ``schema`` and validate it.

        Raises:
            anthropic.APIError: Transport or API failure (after any retries).
            ValueError: No tool call in the response, or its input is not JSON.
            pydantic.ValidationError: The tool input does not match ``schema``.
        """
        request = self._build_request(messages, schema, system_prompt, max_tokens)
        logger.debug("Requesting %s from %s", schema.__name__, self.model)
        response = await self._send(request)
        return schema.model_validate(_tool_payload(response))

    def _build_request(
        self,
        messages: list[dict[str, Any]],
        schema: type[BaseModel],
        system_prompt: str | None,
        max_tokens: int,
    ) -> dict[str, Any]:
        request: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "tools": [
                {
                    "name": _TOOL_NAME,
                    "description": f"Output data matching the {schema.__name__} schema.",
                    "input_schema": schema.model_json_schema(),
                }
            ],
            "tool_choice": {"type": "tool", "name": _TOOL_NAME},
        }
        if system_prompt is not None:
            request["system"] = system_prompt
        return request

    async def _send(self, request: dict[str, Any]) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_multiplier,
                min=4 * self.backoff_multiplier,
                max=60,
            ),
            retry=retry_if_exception_type(_RETRYABLE_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(self.client.messages.create, **request)


def _tool_payload(response: Any) -> dict[str, Any]:
    """Extract the forced tool call's input from a messages response.

    Claude sometimes nests the payload under an ``output`` key or sends
    it as a JSON string; both are flattened to the bare object.
    """
    for block in response.content:
        if block.type != "tool_use" or block.name != _TOOL_NAME:
            continue
        payload: Any = block.input
        if isinstance(payload, str):
            payload = json.loads(payload)
        if not isinstance(payload, dict):
            raise ValueError(f"Structured output is not an object: {type(payload).__name__}")
        nested = payload.get("output")
        return nested if isinstance(nested, dict) else payload

    raise ValueError(
        f"No structured output found in response. "
        f"Expected tool_use block with name '{_TOOL_NAME}'."
    )
