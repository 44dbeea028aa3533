"""Unit tests for the idea and refinement gateways."""

from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from promoreel.api import AnthropicClient
from promoreel.core import IdeaGenerator, RefinementGenerator, build_feature_focus
from promoreel.errors import GatewayError
from promoreel.models import ConceptBatch, RefinementSuggestions


def _concept_dict(n: int) -> dict[str, str]:
    return {
        "title": f"T{n}",
        "description": f"D{n}",
        "visuals": f"V{n}",
        "video_prompt": f"P{n}",
    }


def _suggestion_dict(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "styles": ["s1", "s2", "s3", "s4"],
        "environments": ["e1", "e2", "e3", "e4"],
        "lightings": ["l1", "l2", "l3", "l4"],
        "details": ["d1", "d2", "d3", "d4"],
        "recommended_duration": 9,
    }
    data.update(overrides)
    return data


def _reply(payload: dict) -> MagicMock:
    block = MagicMock()
    block.type = "tool_use"
    block.name = "structured_output"
    block.input = payload
    response = MagicMock()
    response.content = [block]
    return response


def _connection_error() -> anthropic.APIConnectionError:
    return anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )


@pytest.fixture
def llm() -> AnthropicClient:
    return AnthropicClient(api_key="test")


class TestFeatureFocus:
    def test_empty(self) -> None:
        assert build_feature_focus([]) == ""

    def test_lists_features(self) -> None:
        assert build_feature_focus(["A", "B"]) == (
            "Please create video concepts that specifically highlight the "
            "following features: A, B."
        )


class TestIdeaGenerator:
    async def test_returns_three_concepts(self) -> None:
        client = AsyncMock()
        client.generate_structured.return_value = ConceptBatch.model_validate(
            {"concepts": [_concept_dict(i) for i in range(3)]}
        )
        concepts = await IdeaGenerator(client).generate("A lamp", ["Motion sensor"])

        assert [c.title for c in concepts] == ["T0", "T1", "T2"]
        kwargs = client.generate_structured.call_args.kwargs
        assert kwargs["schema"] is ConceptBatch
        content = kwargs["messages"][0]["content"]
        assert "A lamp" in content
        assert "highlight the following features: Motion sensor." in content

    async def test_no_feature_clause_without_features(self) -> None:
        client = AsyncMock()
        client.generate_structured.return_value = ConceptBatch.model_validate(
            {"concepts": [_concept_dict(i) for i in range(3)]}
        )
        await IdeaGenerator(client).generate("A lamp", [])
        content = client.generate_structured.call_args.kwargs["messages"][0]["content"]
        assert "highlight" not in content

    async def test_wrong_count_is_gateway_error(self, llm: AnthropicClient) -> None:
        create = AsyncMock(return_value=_reply({"concepts": [_concept_dict(1)]}))
        with patch.object(llm.client.messages, "create", create), pytest.raises(
            GatewayError, match="Failed to generate video ideas"
        ):
            await IdeaGenerator(llm).generate("A lamp", [])

    async def test_missing_field_is_gateway_error(self, llm: AnthropicClient) -> None:
        broken = _concept_dict(2)
        del broken["visuals"]
        create = AsyncMock(
            return_value=_reply({"concepts": [_concept_dict(0), _concept_dict(1), broken]})
        )
        with patch.object(llm.client.messages, "create", create), pytest.raises(GatewayError):
            await IdeaGenerator(llm).generate("A lamp", [])

    async def test_transport_error_is_single_attempt(self, llm: AnthropicClient) -> None:
        create = AsyncMock(side_effect=_connection_error())
        with patch.object(llm.client.messages, "create", create), pytest.raises(
            GatewayError
        ) as exc_info:
            await IdeaGenerator(llm).generate("A lamp", [])
        assert isinstance(exc_info.value.__cause__, anthropic.APIConnectionError)
        assert create.await_count == 1


class TestRefinementGenerator:
    async def test_returns_suggestions(self, concept) -> None:
        client = AsyncMock()
        client.generate_structured.return_value = RefinementSuggestions.model_validate(
            _suggestion_dict()
        )
        result = await RefinementGenerator(client).generate(concept)

        assert result.styles == ["s1", "s2", "s3", "s4"]
        assert result.recommended_duration == 9
        kwargs = client.generate_structured.call_args.kwargs
        assert kwargs["schema"] is RefinementSuggestions
        content = kwargs["messages"][0]["content"]
        assert concept.title in content and concept.description in content

    async def test_three_styles_is_gateway_error(self, llm: AnthropicClient, concept) -> None:
        create = AsyncMock(return_value=_reply(_suggestion_dict(styles=["a", "b", "c"])))
        with patch.object(llm.client.messages, "create", create), pytest.raises(
            GatewayError, match="Failed to generate AI-powered suggestions"
        ):
            await RefinementGenerator(llm).generate(concept)

    async def test_duration_out_of_range_is_gateway_error(
        self, llm: AnthropicClient, concept
    ) -> None:
        create = AsyncMock(return_value=_reply(_suggestion_dict(recommended_duration=30)))
        with patch.object(llm.client.messages, "create", create), pytest.raises(GatewayError):
            await RefinementGenerator(llm).generate(concept)

    async def test_transport_error_is_single_attempt(
        self, llm: AnthropicClient, concept
    ) -> None:
        create = AsyncMock(side_effect=_connection_error())
        with patch.object(llm.client.messages, "create", create), pytest.raises(GatewayError):
            await RefinementGenerator(llm).generate(concept)
        assert create.await_count == 1
