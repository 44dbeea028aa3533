"""Workflow state models for the four-stage wizard."""

from enum import StrEnum

from pydantic import BaseModel, Field

from promoreel.models.concepts import RefinementChoices, RefinementSuggestions, VideoConcept
from promoreel.models.generation import (
    LANDSCAPE_ASPECT_RATIO,
    AspectRatio,
    GenerationOutcome,
)


class WorkflowStage(StrEnum):
    """Wizard stages in order."""

    ASSETS = "assets"
    IDEAS = "ideas"
    REFINE = "refine"
    GENERATE = "generate"


class WorkflowState(BaseModel):
    """Everything the wizard knows about the current session.

    Instances are treated as immutable: transitions return an updated copy.
    The asset registry and the running job live outside this object.
    """

    stage: WorkflowStage = Field(default=WorkflowStage.ASSETS)

    # Assets stage
    description: str = Field(default="", description="Product description sent for ideas")
    selected_features: list[str] = Field(default_factory=list)

    # Ideas / Refine stages
    concepts: list[VideoConcept] = Field(default_factory=list)
    active_concept: VideoConcept | None = None
    suggestions: RefinementSuggestions | None = None
    choices: RefinementChoices = Field(default_factory=RefinementChoices)

    # Generate stage
    prompt: str = ""
    aspect_ratio: AspectRatio = LANDSCAPE_ASPECT_RATIO
    outcome: GenerationOutcome | None = None

    # Stage-scoped feedback
    error: str | None = None
    notice: str | None = None

    @property
    def video_locator(self) -> str | None:
        """Local path of the finished video, if the last job succeeded."""
        if self.outcome is not None and self.outcome.succeeded:
            return self.outcome.video_locator
        return None
