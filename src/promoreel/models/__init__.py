"""Data models for promoreel."""

from .assets import AssetOrigin, MediaAsset
from .concepts import ConceptBatch, RefinementChoices, RefinementSuggestions, VideoConcept
from .generation import (
    AspectRatio,
    FailureKind,
    GenerationJob,
    GenerationOutcome,
    JobStatus,
    OperationStatus,
    ReferenceMode,
)

__all__ = [
    # Asset models
    "AssetOrigin",
    "MediaAsset",
    # Concept models
    "ConceptBatch",
    "RefinementChoices",
    "RefinementSuggestions",
    "VideoConcept",
    # Generation models
    "AspectRatio",
    "FailureKind",
    "GenerationJob",
    "GenerationOutcome",
    "JobStatus",
    "OperationStatus",
    "ReferenceMode",
]
