"""Tests for request validation, job creation and the job read contract."""

from __future__ import annotations

import pytest

from kodapost.constants import JOB_TTL_SECONDS, JobStatus, PipelineStep
from kodapost.jobs import (
    ConfigValidationError,
    GenerateConfig,
    JobNotFoundError,
    create_job,
    describe_job,
    generate_id,
    get_job_for_owner,
    validate_uploads,
)


class TestGenerateConfig:
    """Generation request validation."""

    def test_valid_minimal(self):
        config = GenerateConfig.parse({"theme": "Coffee", "platforms": ["tiktok"]})
        assert config.slide_count is None
        assert config.keywords == []

    @pytest.mark.parametrize("payload,field", [
        ({"theme": "  ", "platforms": ["instagram"]}, "theme"),
        ({"theme": "x", "platforms": []}, "platforms"),
        ({"theme": "x", "platforms": ["myspace"]}, "platforms"),
        ({"theme": "x", "platforms": ["instagram"], "slide_count": 13}, "slide_count"),
        ({"theme": "x", "platforms": ["instagram"], "slide_count": 1}, "slide_count"),
        ({"theme": "x", "platforms": ["instagram"], "caption_style": "poetic"}, "caption_style"),
        ({"theme": "x", "platforms": ["instagram"], "filter": {"predefined_filter": "sepia"}}, "filter.predefined_filter"),
    ])
    def test_invalid_fields(self, payload, field):
        with pytest.raises(ConfigValidationError) as exc_info:
            GenerateConfig.parse(payload)
        assert field in [error["field"] for error in exc_info.value.errors]

    def test_error_messages_are_clean(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            GenerateConfig.parse({"theme": "x", "platforms": ["myspace"]})
        message = exc_info.value.errors[0]["message"]
        assert message.startswith('Invalid platform: "myspace"')

    def test_non_object_payload(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            GenerateConfig.parse(["theme"])
        assert exc_info.value.errors[0]["field"] == "config"


class TestValidateUploads:
    """Uploaded image checks."""

    def test_accepts_valid_set(self):
        validate_uploads([("a.jpg", "image/jpeg", 1000), ("b.png", "image/png", 2000)])

    def test_no_images(self):
        with pytest.raises(ConfigValidationError, match="No images"):
            validate_uploads([])

    def test_too_many_images(self):
        files = [(f"{i}.jpg", "image/jpeg", 10) for i in range(13)]
        with pytest.raises(ConfigValidationError, match="Too many images"):
            validate_uploads(files)

    def test_file_too_large(self):
        with pytest.raises(ConfigValidationError, match="exceeds 10 MB"):
            validate_uploads([("big.jpg", "image/jpeg", 10 * 1024 * 1024 + 1)])

    def test_unsupported_type(self):
        with pytest.raises(ConfigValidationError, match="unsupported type"):
            validate_uploads([("anim.gif", "image/gif", 10)])


class TestJobLifecycle:
    """Creation and reading jobs back."""

    def test_generate_id_prefix(self):
        job_id = generate_id("job")
        assert job_id.startswith("job_")
        assert generate_id("job") != job_id

    def test_create_job_is_pending(self, store, generate_config, clock):
        job = create_job(store, "user_1", generate_config, image_count=3)

        stored = store.get(job.id)
        assert stored.status == JobStatus.PENDING
        assert stored.progress == 0
        assert stored.input_config.image_count == 3
        assert (stored.expires_at - stored.created_at).total_seconds() == JOB_TTL_SECONDS

    def test_owner_check(self, store, pending_job):
        assert get_job_for_owner(store, pending_job.id, "user_1").id == pending_job.id
        with pytest.raises(JobNotFoundError):
            get_job_for_owner(store, pending_job.id, "user_2")


class TestDescribeJob:
    """Response shape depends on status."""

    def test_processing_shape(self, store, pending_job):
        job = store.update(
            pending_job.id,
            status=JobStatus.PROCESSING,
            current_step=PipelineStep.GENERATING,
            progress=40,
        )
        response = describe_job(job)
        assert response["status"] == "processing"
        assert response["current_step"] == "generating"
        assert response["progress"] == 40
        assert "result" not in response
        assert "error" not in response

    def test_failed_shape(self, store, pending_job, clock):
        job = store.update(
            pending_job.id,
            status=JobStatus.FAILED,
            error="Generator exploded",
            completed_at=clock(),
        )
        response = describe_job(job)
        assert response["error"] == "Generator exploded"
        assert response["completed_at"] is not None
        assert "progress" not in response
