"""Pure workflow transitions: ``transition(state, event) -> state``.

Forward moves are gated on the artifact the previous stage produces:
concepts before Ideas, an active concept before Refine and a composed
prompt before Generate. ``Reset`` is the only backward move. Errors and
notices are scoped to the stage they were raised in and are cleared on
every stage change.
"""

from dataclasses import dataclass, field

from promoreel.errors import WorkflowError
from promoreel.models.concepts import RefinementChoices, RefinementSuggestions, VideoConcept
from promoreel.models.generation import AspectRatio, GenerationOutcome
from promoreel.state.models import WorkflowStage, WorkflowState


@dataclass(frozen=True)
class FeaturesSelected:
    features: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AspectRatioChosen:
    aspect_ratio: AspectRatio


@dataclass(frozen=True)
class IdeasGenerated:
    concepts: list[VideoConcept]


@dataclass(frozen=True)
class ConceptChosen:
    concept: VideoConcept


@dataclass(frozen=True)
class SuggestionsLoaded:
    suggestions: RefinementSuggestions


@dataclass(frozen=True)
class ChoicesEdited:
    choices: RefinementChoices


@dataclass(frozen=True)
class EnterGenerate:
    """Move to Generate with the prompt composed from the current choices."""

    prompt: str


@dataclass(frozen=True)
class PromptEdited:
    prompt: str


@dataclass(frozen=True)
class GenerationFinished:
    outcome: GenerationOutcome


@dataclass(frozen=True)
class ErrorRaised:
    message: str


@dataclass(frozen=True)
class NoticeRaised:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


WorkflowEvent = (
    FeaturesSelected
    | AspectRatioChosen
    | IdeasGenerated
    | ConceptChosen
    | SuggestionsLoaded
    | ChoicesEdited
    | EnterGenerate
    | PromptEdited
    | GenerationFinished
    | ErrorRaised
    | NoticeRaised
    | Reset
)


def _require(state: WorkflowState, *stages: WorkflowStage, action: str) -> None:
    if state.stage not in stages:
        allowed = ", ".join(stage.value for stage in stages)
        raise WorkflowError(
            f"Cannot {action} during the {state.stage.value} stage (allowed: {allowed})."
        )


def _move(state: WorkflowState, stage: WorkflowStage, **update: object) -> WorkflowState:
    return state.model_copy(update={"stage": stage, "error": None, "notice": None, **update})


def transition(state: WorkflowState, event: WorkflowEvent) -> WorkflowState:
    """Apply an event to the workflow state.

    Raises:
        WorkflowError: If the event is not valid in the current stage or the
            artifact it needs is missing.
    """
    match event:
        case FeaturesSelected(features=features):
            _require(state, WorkflowStage.ASSETS, action="change feature focus")
            return state.model_copy(update={"selected_features": list(features)})

        case AspectRatioChosen(aspect_ratio=ratio):
            return state.model_copy(update={"aspect_ratio": ratio})

        case IdeasGenerated(concepts=concepts):
            _require(state, WorkflowStage.ASSETS, WorkflowStage.IDEAS, action="show ideas")
            if not concepts:
                raise WorkflowError("No video ideas to show.")
            return _move(
                state,
                WorkflowStage.IDEAS,
                concepts=list(concepts),
                active_concept=None,
                suggestions=None,
                choices=RefinementChoices(),
            )

        case ConceptChosen(concept=concept):
            _require(state, WorkflowStage.IDEAS, action="choose a concept")
            if concept not in state.concepts:
                raise WorkflowError(f"Unknown concept: {concept.title!r}")
            return _move(
                state,
                WorkflowStage.REFINE,
                active_concept=concept,
                suggestions=None,
                choices=RefinementChoices(),
                prompt="",
            )

        case SuggestionsLoaded(suggestions=suggestions):
            _require(state, WorkflowStage.REFINE, action="load suggestions")
            return state.model_copy(
                update={
                    "suggestions": suggestions,
                    "choices": RefinementChoices.from_suggestions(suggestions),
                    "error": None,
                }
            )

        case ChoicesEdited(choices=choices):
            _require(state, WorkflowStage.REFINE, action="edit refinement choices")
            return state.model_copy(update={"choices": choices})

        case EnterGenerate(prompt=prompt):
            _require(state, WorkflowStage.REFINE, action="start generating")
            if state.active_concept is None:
                raise WorkflowError("Choose a video concept before generating.")
            if not prompt.strip():
                raise WorkflowError("The composed prompt is empty.")
            return _move(state, WorkflowStage.GENERATE, prompt=prompt, outcome=None)

        case PromptEdited(prompt=prompt):
            _require(state, WorkflowStage.GENERATE, action="edit the prompt")
            return state.model_copy(update={"prompt": prompt})

        case GenerationFinished(outcome=outcome):
            _require(state, WorkflowStage.GENERATE, action="record a generation result")
            return state.model_copy(
                update={
                    "outcome": outcome,
                    "error": None if outcome.succeeded else (outcome.message or None),
                }
            )

        case ErrorRaised(message=message):
            return state.model_copy(update={"error": message})

        case NoticeRaised(message=message):
            return state.model_copy(update={"notice": message})

        case Reset():
            return WorkflowState(
                description=state.description,
                aspect_ratio=state.aspect_ratio,
            )

    raise WorkflowError(f"Unsupported workflow event: {event!r}")
