"""Video concept and refinement models for promoreel."""

from pydantic import BaseModel, ConfigDict, Field

# Duration used before (or without) AI suggestions
DEFAULT_DURATION_SECONDS = 7


class VideoConcept(BaseModel):
    """A candidate promotional video idea produced by the idea gateway."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="A catchy title for the video ad concept.")
    description: str = Field(..., min_length=1, description="A brief summary of the ad concept.")
    visuals: str = Field(
        ..., min_length=1, description="A description of the key visual elements and scenes."
    )
    video_prompt: str = Field(
        ...,
        min_length=1,
        description="A concise and effective prompt for an AI video generation model.",
    )


class ConceptBatch(BaseModel):
    """Structured-output envelope for idea generation: exactly three concepts."""

    concepts: list[VideoConcept] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Three creative and distinct promotional video ideas.",
    )


class RefinementSuggestions(BaseModel):
    """Categorised suggestions for refining the active concept."""

    model_config = ConfigDict(frozen=True)

    styles: list[str] = Field(
        ...,
        min_length=4,
        max_length=4,
        description="4 distinct video style suggestions (e.g. 'Cinematic', 'Documentary', 'Minimalist').",
    )
    environments: list[str] = Field(
        ...,
        min_length=4,
        max_length=4,
        description=(
            "4 specific environment suggestions (e.g. 'A cozy bedroom with wooden "
            "furniture', 'A futuristic, smart home hallway')."
        ),
    )
    lightings: list[str] = Field(
        ...,
        min_length=4,
        max_length=4,
        description=(
            "4 descriptive lighting suggestions (e.g. 'Soft, diffused moonlight', "
            "'Dynamic, warm light that follows movement')."
        ),
    )
    details: list[str] = Field(
        ...,
        min_length=4,
        max_length=4,
        description=(
            "4 suggestions for additional details or narrative elements (e.g. 'Show a "
            "close-up of the 3D-printed texture', 'A pet interacting with the lights')."
        ),
    )
    recommended_duration: int = Field(
        ...,
        ge=3,
        le=15,
        description="Recommended video duration in seconds, an integer between 3 and 15.",
    )


class RefinementChoices(BaseModel):
    """The user's current refinement selections.

    Values are free-form: any of them may diverge from the offered
    suggestions when the user writes their own.
    """

    style: str = ""
    environment: str = ""
    lighting: str = ""
    details: str = ""
    duration_seconds: int = Field(default=DEFAULT_DURATION_SECONDS, ge=1, le=60)

    @classmethod
    def from_suggestions(cls, suggestions: RefinementSuggestions) -> "RefinementChoices":
        """Pre-fill choices with the first option of each category."""
        return cls(
            style=suggestions.styles[0],
            environment=suggestions.environments[0],
            lighting=suggestions.lightings[0],
            details=suggestions.details[0],
            duration_seconds=suggestions.recommended_duration,
        )

    def custom_fields(self, suggestions: RefinementSuggestions | None) -> list[str]:
        """Return the names of non-empty choices that are not offered options."""
        if suggestions is None:
            return [
                name
                for name in ("style", "environment", "lighting", "details")
                if getattr(self, name)
            ]
        offered = {
            "style": suggestions.styles,
            "environment": suggestions.environments,
            "lighting": suggestions.lightings,
            "details": suggestions.details,
        }
        return [
            name
            for name, options in offered.items()
            if getattr(self, name) and getattr(self, name) not in options
        ]
