"""Final video prompt composition."""

from promoreel.config.settings import DEFAULT_SHAPE_GUIDELINE
from promoreel.models.concepts import RefinementChoices, VideoConcept


def compose_prompt(
    concept: VideoConcept,
    *,
    style: str = "",
    environment: str = "",
    lighting: str = "",
    details: str = "",
    duration_seconds: int,
    shape_guideline: str = DEFAULT_SHAPE_GUIDELINE,
) -> str:
    """Assemble the video-generation prompt.

    The concept's seed prompt is followed by the product-fidelity clause,
    then style, environment, lighting and details clauses (each only when
    non-empty), and always a duration clause.
    """
    prompt = f"{concept.video_prompt} {shape_guideline}"
    if style:
        prompt += f" The video style should be {style}."
    if environment:
        prompt += f" The environment is a {environment}."
    if lighting:
        prompt += f" The lighting should be {lighting}."
    if details:
        prompt += f" Additional details: {details}."
    prompt += f" The video should be approximately {duration_seconds} seconds long."
    return prompt


def compose_from_choices(
    concept: VideoConcept,
    choices: RefinementChoices,
    shape_guideline: str = DEFAULT_SHAPE_GUIDELINE,
) -> str:
    return compose_prompt(
        concept,
        style=choices.style,
        environment=choices.environment,
        lighting=choices.lighting,
        details=choices.details,
        duration_seconds=choices.duration_seconds,
        shape_guideline=shape_guideline,
    )
