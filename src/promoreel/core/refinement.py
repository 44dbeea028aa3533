"""Refinement suggestions for the active video concept."""

import logging

from promoreel.api.base import LLMClientProtocol
from promoreel.errors import GatewayError
from promoreel.models.concepts import RefinementSuggestions, VideoConcept

logger = logging.getLogger(__name__)

REFINEMENT_PROMPT = """\
You are an expert creative director for advertisements.
Based on the video ad concept you are given, generate highly creative and \
specific suggestions to refine the final video prompt.

For each category (video style, environment, lighting, additional details), \
provide exactly 4 distinct and imaginative options that directly relate to the \
concept. Avoid generic suggestions.

Also recommend an ideal video duration in seconds (an integer between 3 and 15) \
for a short, impactful social media ad.

The suggestions must be unique and directly inspired by the video concept."""


class RefinementGenerator:
    """Generates categorised refinement suggestions via Claude."""

    def __init__(self, client: LLMClientProtocol) -> None:
        self.client = client

    async def generate(self, concept: VideoConcept) -> RefinementSuggestions:
        """Generate suggestions keyed by the concept's title and description.

        Raises:
            GatewayError: On any transport, parsing or schema failure,
                including categories without exactly 4 options.
        """
        user_content = (
            f"Video Concept Title: {concept.title}\n"
            f"Video Concept Description: {concept.description}"
        )
        logger.info("Generating refinement suggestions for %r", concept.title)

        try:
            return await self.client.generate_structured(
                messages=[{"role": "user", "content": user_content}],
                schema=RefinementSuggestions,
                system_prompt=REFINEMENT_PROMPT,
            )
        except Exception as exc:
            logger.error("Error generating refinement suggestions: %s", exc, exc_info=True)
            raise GatewayError(
                "Failed to generate AI-powered suggestions. Please try again."
            ) from exc
