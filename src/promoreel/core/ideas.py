"""Idea generation: product description to three video concepts."""

import logging

from promoreel.api.base import LLMClientProtocol
from promoreel.errors import GatewayError
from promoreel.models.concepts import ConceptBatch, VideoConcept

logger = logging.getLogger(__name__)

IDEAS_PROMPT = """\
You are an expert creative director for short social media advertisements.
Based on the product description you are given, generate 3 creative and \
distinct promotional video ideas. Each time you are asked, generate completely \
new and unique ideas. Ensure the ideas are varied and not repetitive.

For each idea, provide:
- **title**: a catchy title
- **description**: a short description of the concept
- **visuals**: a summary of the key visual elements and scenes
- **video_prompt**: a concise, powerful prompt that could be used to generate \
the video with an AI video model like Veo

Return exactly 3 ideas."""

FEATURE_FOCUS_TEMPLATE = (
    "Please create video concepts that specifically highlight the following "
    "features: {features}."
)


def build_feature_focus(features: list[str]) -> str:
    """Return the feature-focus clause, or an empty string for no features."""
    if not features:
        return ""
    return FEATURE_FOCUS_TEMPLATE.format(features=", ".join(features))


class IdeaGenerator:
    """Generates video concepts from a product description via Claude."""

    def __init__(self, client: LLMClientProtocol) -> None:
        self.client = client

    async def generate(self, description: str, features: list[str]) -> list[VideoConcept]:
        """Generate exactly three concepts.

        Raises:
            GatewayError: On any transport, parsing or schema failure.
        """
        user_content = self._build_user_message(description, features)
        logger.info("Generating video ideas (%d focus features)", len(features))

        try:
            batch = await self.client.generate_structured(
                messages=[{"role": "user", "content": user_content}],
                schema=ConceptBatch,
                system_prompt=IDEAS_PROMPT,
            )
        except Exception as exc:
            logger.error("Error generating video ideas: %s", exc, exc_info=True)
            raise GatewayError(
                "Failed to generate video ideas. Please try again."
            ) from exc

        logger.info("Generated %d video ideas", len(batch.concepts))
        return list(batch.concepts)

    def _build_user_message(self, description: str, features: list[str]) -> str:
        parts = [f"Product Description:\n{description.strip()}"]
        focus = build_feature_focus(features)
        if focus:
            parts.append(focus)
        return "\n\n".join(parts)
