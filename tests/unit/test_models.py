"""Unit tests for promoreel data models."""

import pytest
from pydantic import ValidationError

from promoreel.models import (
    AssetOrigin,
    ConceptBatch,
    FailureKind,
    GenerationJob,
    GenerationOutcome,
    JobStatus,
    RefinementChoices,
    ReferenceMode,
    VideoConcept,
)


class TestMediaAsset:
    def test_origin(self, make_asset) -> None:
        assert make_asset("p", AssetOrigin.PRELOADED).is_preloaded
        assert not make_asset("u").is_preloaded

    def test_frozen(self, make_asset) -> None:
        asset = make_asset()
        with pytest.raises(ValidationError):
            asset.id = "other"  # type: ignore[misc]

    def test_repr_hides_payload(self, make_asset) -> None:
        assert "image_bytes" not in repr(make_asset())


class TestConcepts:
    def test_requires_all_fields(self) -> None:
        with pytest.raises(ValidationError):
            VideoConcept(title="T", description="D", visuals="V", video_prompt="")

    def test_batch_requires_three(self, make_concept) -> None:
        with pytest.raises(ValidationError):
            ConceptBatch(concepts=[make_concept(1), make_concept(2)])
        batch = ConceptBatch(concepts=[make_concept(i) for i in range(3)])
        assert len(batch.concepts) == 3


class TestRefinementSuggestions:
    def test_three_styles_rejected(self, make_suggestions) -> None:
        with pytest.raises(ValidationError):
            make_suggestions(styles=["a", "b", "c"])

    def test_duration_bounds(self, make_suggestions) -> None:
        with pytest.raises(ValidationError):
            make_suggestions(recommended_duration=2)
        with pytest.raises(ValidationError):
            make_suggestions(recommended_duration=16)


class TestRefinementChoices:
    def test_defaults(self) -> None:
        choices = RefinementChoices()
        assert choices.duration_seconds == 7
        assert choices.style == ""

    def test_from_suggestions_picks_first(self, suggestions) -> None:
        choices = RefinementChoices.from_suggestions(suggestions)
        assert choices.style == "Cinematic"
        assert choices.environment == "A cozy bedroom"
        assert choices.lighting == "Soft moonlight"
        assert choices.details == "Close-up of texture"
        assert choices.duration_seconds == 8

    def test_custom_fields(self, suggestions) -> None:
        choices = RefinementChoices.from_suggestions(suggestions).model_copy(
            update={"style": "Claymation", "details": ""}
        )
        assert choices.custom_fields(suggestions) == ["style"]

    def test_custom_fields_without_suggestions(self) -> None:
        assert RefinementChoices(lighting="Neon").custom_fields(None) == ["lighting"]


class TestGeneration:
    def test_job_activity(self) -> None:
        job = GenerationJob(
            id="j",
            prompt="p",
            reference_mode=ReferenceMode.SINGLE_IMAGE,
            aspect_ratio="9:16",
            model="m",
            status=JobStatus.POLLING,
        )
        assert job.is_active
        job.status = JobStatus.FAILED
        assert not job.is_active

    def test_outcome_flags(self) -> None:
        ok = GenerationOutcome(job_id="j", status=JobStatus.SUCCEEDED, video_locator="/v.mp4")
        assert ok.succeeded and not ok.requires_new_credential
        bad = GenerationOutcome(
            job_id="j", status=JobStatus.FAILED, failure_kind=FailureKind.INVALID_CREDENTIAL
        )
        assert bad.requires_new_credential and not bad.succeeded
