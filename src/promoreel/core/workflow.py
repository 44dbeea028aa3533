"""Workflow controller for the promo video wizard.

Owns the session's ``WorkflowState`` and drives it through the four
stages, ASSETS -> IDEAS -> REFINE -> GENERATE, by calling the asset
registry, the idea and refinement gateways, the prompt compositor and
the video generation orchestrator. State changes go through the pure
``transition`` function; this class only performs the side effects.
"""

import logging

from pydantic import ValidationError

from promoreel.api.factory import create_llm_client, create_video_client
from promoreel.assets import AssetRegistry, PreviewStore, UploadedFile
from promoreel.config.settings import Settings
from promoreel.core.capability import CapabilityGate
from promoreel.core.ideas import IdeaGenerator
from promoreel.core.orchestrator import StatusCallback, VideoGenerationOrchestrator
from promoreel.core.prompt import compose_from_choices
from promoreel.core.refinement import RefinementGenerator
from promoreel.errors import GatewayError, InputValidationError, WorkflowError
from promoreel.models.assets import MediaAsset
from promoreel.models.concepts import RefinementChoices, VideoConcept
from promoreel.models.generation import (
    LANDSCAPE_ASPECT_RATIO,
    AspectRatio,
    GenerationOutcome,
)
from promoreel.state import (
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
    WorkflowStage,
    WorkflowState,
    transition,
)

logger = logging.getLogger(__name__)

SELECTION_LIMIT_NOTICE = "You can select a maximum of {limit} images."
PRELOAD_FAILURE_NOTICE = "Some product images could not be loaded and were skipped."


class WorkflowController:
    """Drives one wizard session.

    Args:
        settings: Resolved application settings.
        registry: The session's media library.
        ideas: Idea generation gateway.
        refinement: Refinement suggestion gateway.
        orchestrator: Video generation orchestrator.
    """

    def __init__(
        self,
        settings: Settings,
        registry: AssetRegistry,
        ideas: IdeaGenerator,
        refinement: RefinementGenerator,
        orchestrator: VideoGenerationOrchestrator,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.ideas = ideas
        self.refinement = refinement
        self.orchestrator = orchestrator
        self.state = WorkflowState(
            description=settings.product.description,
            aspect_ratio=settings.video.aspect_ratio,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        gate: CapabilityGate,
        *,
        on_status: StatusCallback | None = None,
    ) -> "WorkflowController":
        """Wire a controller with real clients from settings.

        Raises:
            ValueError: If ANTHROPIC_API_KEY is not set.
        """
        llm_client = create_llm_client(settings.api)
        previews = PreviewStore()
        orchestrator = VideoGenerationOrchestrator(
            gate,
            lambda api_key: create_video_client(settings.video, api_key),
            previews,
            poll_interval=settings.video.poll_interval,
            max_poll_attempts=settings.video.max_poll_attempts,
            on_status=on_status,
        )
        return cls(
            settings,
            AssetRegistry(settings.assets, previews),
            IdeaGenerator(llm_client),
            RefinementGenerator(llm_client),
            orchestrator,
        )

    @property
    def stage(self) -> WorkflowStage:
        return self.state.stage

    def dispatch(self, event: WorkflowEvent) -> WorkflowState:
        self.state = transition(self.state, event)
        return self.state

    # ------------------------------------------------------------------
    # Assets stage
    # ------------------------------------------------------------------

    async def load_assets(self) -> list[MediaAsset]:
        """Load the preloaded product images; failures only raise a notice."""
        loaded = await self.registry.load_preloaded()
        if self.registry.failed_preloads:
            self.dispatch(NoticeRaised(PRELOAD_FAILURE_NOTICE))
        return loaded

    def set_description(self, description: str) -> None:
        if self.stage != WorkflowStage.ASSETS:
            raise WorkflowError("The product description can only be changed in the assets stage.")
        self.state = self.state.model_copy(update={"description": description})

    def toggle_feature(self, feature: str) -> list[str]:
        """Toggle a feature-focus tag and return the selected tags."""
        if feature not in self.settings.product.features:
            raise InputValidationError(f"Unknown feature: {feature}")
        selected = list(self.state.selected_features)
        if feature in selected:
            selected.remove(feature)
        else:
            selected.append(feature)
        self.dispatch(FeaturesSelected(selected))
        return selected

    def upload(self, files: list[UploadedFile]) -> list[MediaAsset]:
        """Add uploaded images.

        Raises:
            UploadQuotaError: Some images exceeded the quota; the ones that
                fit were added and are listed on the exception.
        """
        self.state = self.state.model_copy(update={"error": None})
        return self.registry.add_uploaded(files)

    def remove_asset(self, asset_id: str) -> MediaAsset | None:
        return self.registry.remove(asset_id)

    def toggle_asset(self, asset_id: str) -> bool:
        """Toggle an image in the selection.

        Selecting more than one image forces the landscape aspect ratio.

        Returns:
            True if the selection limit prevented adding the image.
        """
        self.state = self.state.model_copy(update={"error": None, "notice": None})
        limit_reached = self.registry.toggle(asset_id)
        if limit_reached:
            self.dispatch(
                NoticeRaised(
                    SELECTION_LIMIT_NOTICE.format(limit=self.settings.assets.max_selection)
                )
            )
        if len(self.registry.selection) > 1 and self.state.aspect_ratio != LANDSCAPE_ASPECT_RATIO:
            logger.debug("Multiple images selected; forcing aspect ratio to 16:9")
            self.dispatch(AspectRatioChosen(LANDSCAPE_ASPECT_RATIO))
        return limit_reached

    def set_aspect_ratio(self, aspect_ratio: AspectRatio) -> None:
        """Choose the output aspect ratio.

        Raises:
            InputValidationError: A portrait ratio was requested while
                several images are selected.
        """
        if len(self.registry.selection) > 1 and aspect_ratio != LANDSCAPE_ASPECT_RATIO:
            raise InputValidationError(
                "Multiple reference images only support the 16:9 aspect ratio."
            )
        self.dispatch(AspectRatioChosen(aspect_ratio))

    # ------------------------------------------------------------------
    # Ideas stage
    # ------------------------------------------------------------------

    async def generate_ideas(self) -> list[VideoConcept]:
        """Ask for three concepts and move to the ideas stage.

        Also used to get a fresh batch while already in the ideas stage.
        On failure the error is recorded in the state and the stage is
        unchanged.
        """
        if self.stage not in (WorkflowStage.ASSETS, WorkflowStage.IDEAS):
            raise WorkflowError("Ideas can only be generated from the assets or ideas stage.")
        description = self.state.description.strip()
        if not description:
            raise InputValidationError("Please provide a product description.")

        self.state = self.state.model_copy(update={"error": None})
        try:
            concepts = await self.ideas.generate(description, self.state.selected_features)
        except GatewayError as exc:
            self.dispatch(ErrorRaised(str(exc)))
            return []
        self.dispatch(IdeasGenerated(concepts))
        return concepts

    async def choose_concept(self, concept: VideoConcept) -> bool:
        """Make ``concept`` active, enter refine and load suggestions.

        Returns:
            Whether suggestions were loaded. Without them the choices stay
            empty with the default duration and can still be edited.
        """
        self.dispatch(ConceptChosen(concept))
        return await self.load_suggestions()

    # ------------------------------------------------------------------
    # Refine stage
    # ------------------------------------------------------------------

    async def load_suggestions(self) -> bool:
        """Fetch refinement suggestions for the active concept."""
        concept = self.state.active_concept
        if self.stage != WorkflowStage.REFINE or concept is None:
            raise WorkflowError("Choose a video concept before loading suggestions.")
        try:
            suggestions = await self.refinement.generate(concept)
        except GatewayError as exc:
            self.dispatch(ErrorRaised(str(exc)))
            return False
        if self.state.active_concept != concept or self.stage != WorkflowStage.REFINE:
            logger.info("Discarding suggestions for %r; the session moved on.", concept.title)
            return False
        self.dispatch(SuggestionsLoaded(suggestions))
        return True

    def update_choices(self, **changes: str | int) -> RefinementChoices:
        """Change one or more refinement choices (free text is allowed).

        Raises:
            InputValidationError: Unknown choice name or out-of-range value.
        """
        unknown = sorted(set(changes) - set(RefinementChoices.model_fields))
        if unknown:
            raise InputValidationError(f"Unknown refinement choice: {', '.join(unknown)}")
        try:
            choices = RefinementChoices.model_validate(
                {**self.state.choices.model_dump(), **changes}
            )
        except ValidationError as exc:
            message = "; ".join(error["msg"] for error in exc.errors())
            raise InputValidationError(f"Invalid refinement choice: {message}") from exc
        self.dispatch(ChoicesEdited(choices))
        return choices

    def custom_choices(self) -> list[str]:
        """Names of choices that are not one of the offered suggestions."""
        return self.state.choices.custom_fields(self.state.suggestions)

    def proceed_to_generate(self) -> str:
        """Compose the prompt from the current choices and enter generate."""
        concept = self.state.active_concept
        if concept is None:
            raise WorkflowError("Choose a video concept before generating.")
        prompt = compose_from_choices(
            concept, self.state.choices, self.settings.product.shape_guideline
        )
        self.dispatch(EnterGenerate(prompt))
        return prompt

    # ------------------------------------------------------------------
    # Generate stage
    # ------------------------------------------------------------------

    def edit_prompt(self, prompt: str) -> None:
        self.dispatch(PromptEdited(prompt))

    async def generate_video(self) -> GenerationOutcome:
        """Submit the prompt with the selected images and wait for the result.

        Raises:
            InputValidationError: Bad prompt or selection, or no credential.
            GenerationInProgressError: A job is already running.
        """
        if self.stage != WorkflowStage.GENERATE:
            raise WorkflowError("Enter the generate stage before generating a video.")
        self.state = self.state.model_copy(update={"error": None, "outcome": None})
        try:
            outcome = await self.orchestrator.generate(
                self.state.prompt,
                self.registry.selected_assets(),
                self.state.aspect_ratio,
            )
        except InputValidationError as exc:
            self.dispatch(ErrorRaised(str(exc)))
            raise
        if self.stage == WorkflowStage.GENERATE:
            self.dispatch(GenerationFinished(outcome))
        return outcome

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Return to the assets stage.

        Abandons any running job, clears concepts, suggestions, prompt,
        feature tags and the image selection. The media library itself is
        left untouched.
        """
        logger.info("Resetting workflow from the %s stage", self.stage.value)
        self.orchestrator.discard()
        self.registry.clear_selection()
        self.dispatch(Reset())

    def close(self) -> None:
        """Abandon any job and release every local preview resource."""
        self.orchestrator.discard()
        self.registry.previews.close()
