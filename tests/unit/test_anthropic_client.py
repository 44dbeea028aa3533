"""Unit tests for Anthropic API client."""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest
from pydantic import ValidationError

from promoreel.api import AnthropicClient
from promoreel.models import RefinementSuggestions

SUGGESTIONS = {
    "styles": ["s1", "s2", "s3", "s4"],
    "environments": ["e1", "e2", "e3", "e4"],
    "lightings": ["l1", "l2", "l3", "l4"],
    "details": ["d1", "d2", "d3", "d4"],
    "recommended_duration": 6,
}


def _text_block(text: str) -> MagicMock:
    b = MagicMock()
    b.type = "text"
    b.text = text
    return b


def _tool_block(name: str, data: dict | str) -> MagicMock:
    b = MagicMock()
    b.type = "tool_use"
    b.name = name
    b.input = data
    return b


def _response(blocks: list, stop: str = "tool_use") -> MagicMock:
    r = MagicMock()
    r.content = blocks
    r.stop_reason = stop
    return r


def _connection_error() -> anthropic.APIConnectionError:
    return anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )


async def _ask(client: AnthropicClient, **kwargs: object) -> RefinementSuggestions:
    return await client.generate_structured(
        messages=[{"role": "user", "content": "g"}], schema=RefinementSuggestions, **kwargs
    )


@pytest.fixture
def client() -> AnthropicClient:
    return AnthropicClient(api_key="test")


class TestStructured:
    async def test_returns_validated_model(self, client: AnthropicClient) -> None:
        create = AsyncMock(return_value=_response([_tool_block("structured_output", SUGGESTIONS)]))
        with patch.object(client.client.messages, "create", create):
            result = await _ask(client)
        assert isinstance(result, RefinementSuggestions)
        assert result.recommended_duration == 6

    async def test_parses_string_input(self, client: AnthropicClient) -> None:
        create = AsyncMock(
            return_value=_response(
                [_tool_block("structured_output", '{"styles": ["a", "b", "c", "d"],'
                 ' "environments": ["a", "b", "c", "d"], "lightings": ["a", "b", "c", "d"],'
                 ' "details": ["a", "b", "c", "d"], "recommended_duration": 5}')]
            )
        )
        with patch.object(client.client.messages, "create", create):
            result = await _ask(client)
        assert result.styles == ["a", "b", "c", "d"]

    async def test_unwraps_output_envelope(self, client: AnthropicClient) -> None:
        create = AsyncMock(
            return_value=_response([_tool_block("structured_output", {"output": SUGGESTIONS})])
        )
        with patch.object(client.client.messages, "create", create):
            result = await _ask(client)
        assert result.lightings == ["l1", "l2", "l3", "l4"]

    async def test_schema_violation_raises(self, client: AnthropicClient) -> None:
        bad = {**SUGGESTIONS, "details": ["only one"]}
        create = AsyncMock(return_value=_response([_tool_block("structured_output", bad)]))
        with patch.object(client.client.messages, "create", create), pytest.raises(ValidationError):
            await _ask(client)

    async def test_forces_tool_and_system_prompt(self, client: AnthropicClient) -> None:
        create = AsyncMock(return_value=_response([_tool_block("structured_output", SUGGESTIONS)]))
        with patch.object(client.client.messages, "create", create):
            await _ask(client, system_prompt="S")
        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "S"
        assert kwargs["tool_choice"] == {"type": "tool", "name": "structured_output"}
        assert kwargs["tools"][0]["input_schema"] == RefinementSuggestions.model_json_schema()

    async def test_raises_on_no_tool_use(self, client: AnthropicClient) -> None:
        create = AsyncMock(return_value=_response([_text_block("text")], "end_turn"))
        with patch.object(client.client.messages, "create", create), pytest.raises(
            ValueError, match="No structured output"
        ):
            await _ask(client)


class TestRetryPolicy:
    async def test_single_attempt_by_default(self, client: AnthropicClient) -> None:
        create = AsyncMock(side_effect=_connection_error())
        with patch.object(client.client.messages, "create", create), pytest.raises(
            anthropic.APIConnectionError
        ):
            await _ask(client)
        assert create.await_count == 1

    async def test_retries_when_enabled(self) -> None:
        client = AnthropicClient(api_key="test", max_attempts=3, backoff_multiplier=0)
        create = AsyncMock(side_effect=[
            anthropic.RateLimitError(
                message="x", response=MagicMock(status_code=429, headers={}), body=None,
            ),
            _response([_tool_block("structured_output", SUGGESTIONS)]),
        ])
        with patch.object(client.client.messages, "create", create):
            result = await _ask(client)
        assert result.recommended_duration == 6
        assert create.await_count == 2

    async def test_no_retry_on_auth_error(self) -> None:
        client = AnthropicClient(api_key="test", max_attempts=3, backoff_multiplier=0)
        create = AsyncMock(side_effect=anthropic.AuthenticationError(
            message="x", response=MagicMock(status_code=401, headers={}), body=None,
        ))
        with patch.object(client.client.messages, "create", create), pytest.raises(
            anthropic.AuthenticationError
        ):
            await _ask(client)
        assert create.await_count == 1

    def test_rejects_zero_attempts(self) -> None:
        with pytest.raises(ValueError):
            AnthropicClient(api_key="test", max_attempts=0)
