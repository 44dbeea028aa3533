"""Core business logic for promoreel."""

from .capability import CapabilityGate, KeyCredentialGate, UnavailableCapabilityGate
from .ideas import IDEAS_PROMPT, IdeaGenerator, build_feature_focus
from .orchestrator import (
    VideoGenerationOrchestrator,
    classify_failure,
    plan_reference_mode,
)
from .prompt import compose_from_choices, compose_prompt
from .refinement import REFINEMENT_PROMPT, RefinementGenerator
from .workflow import WorkflowController

__all__ = [
    # Capability gate
    "CapabilityGate",
    "KeyCredentialGate",
    "UnavailableCapabilityGate",
    # Gateways
    "IDEAS_PROMPT",
    "IdeaGenerator",
    "build_feature_focus",
    "REFINEMENT_PROMPT",
    "RefinementGenerator",
    # Prompt composition
    "compose_from_choices",
    "compose_prompt",
    # Video generation
    "VideoGenerationOrchestrator",
    "classify_failure",
    "plan_reference_mode",
    # Workflow
    "WorkflowController",
]
