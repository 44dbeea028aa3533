"""Workflow state for promoreel."""

from .models import WorkflowStage, WorkflowState
from .transitions import (
    AspectRatioChosen,
    ChoicesEdited,
    ConceptChosen,
    EnterGenerate,
    ErrorRaised,
    FeaturesSelected,
    GenerationFinished,
    IdeasGenerated,
    NoticeRaised,
    PromptEdited,
    Reset,
    SuggestionsLoaded,
    WorkflowEvent,
    transition,
)

__all__ = [
    "AspectRatioChosen",
    "ChoicesEdited",
    "ConceptChosen",
    "EnterGenerate",
    "ErrorRaised",
    "FeaturesSelected",
    "GenerationFinished",
    "IdeasGenerated",
    "NoticeRaised",
    "PromptEdited",
    "Reset",
    "SuggestionsLoaded",
    "WorkflowEvent",
    "WorkflowStage",
    "WorkflowState",
    "transition",
]
