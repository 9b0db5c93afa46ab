"""Tests for job row storage: expiry, write rules and file persistence."""

from __future__ import annotations

import json

import pytest

from kodapost.constants import JOB_TTL_SECONDS, JobStatus, PipelineStep
from kodapost.jobs import (
    CompositedSlide,
    GenerationResult,
    JobNotFoundError,
    JobStoreError,
    JsonFileJobStore,
    create_job,
)

from conftest import JPEG_STUB


def _result() -> GenerationResult:
    return GenerationResult(
        caption="hello",
        slides=(CompositedSlide(platform="instagram", slide_index=0, image_bytes=JPEG_STUB),),
        slide_count=1,
        platforms=("instagram",),
    )


class TestExpiry:
    """Expired rows read as not found, whatever their status."""

    def test_get_before_expiry(self, store, pending_job, clock):
        clock.advance(JOB_TTL_SECONDS - 1)
        assert store.get(pending_job.id).status == JobStatus.PENDING

    def test_get_after_expiry_is_not_found(self, store, pending_job, clock):
        clock.advance(JOB_TTL_SECONDS + 1)
        with pytest.raises(JobNotFoundError):
            store.get(pending_job.id)

    def test_completed_job_also_expires(self, store, pending_job, clock):
        store.update(pending_job.id, status=JobStatus.PROCESSING, started_at=clock())
        store.update(
            pending_job.id,
            status=JobStatus.COMPLETED,
            result=_result(),
            progress=100,
            current_step=PipelineStep.DONE,
            completed_at=clock(),
        )
        clock.advance(JOB_TTL_SECONDS + 1)
        with pytest.raises(JobNotFoundError):
            store.get(pending_job.id)

    def test_purge_removes_only_expired(self, store, generate_config, clock):
        old = create_job(store, "user_1", generate_config, image_count=2)
        clock.advance(JOB_TTL_SECONDS // 2)
        fresh = create_job(store, "user_1", generate_config, image_count=2)
        clock.advance(JOB_TTL_SECONDS // 2 + 1)

        assert store.purge_expired() == 1
        assert store._load(old.id) is None
        assert store.get(fresh.id).id == fresh.id

    def test_purge_drops_row_locks(self, store, generate_config, clock):
        old = create_job(store, "user_1", generate_config, image_count=2)
        clock.advance(JOB_TTL_SECONDS // 2)
        fresh = create_job(store, "user_1", generate_config, image_count=2)
        clock.advance(JOB_TTL_SECONDS // 2 + 1)

        store.purge_expired()

        assert old.id not in store._locks
        assert fresh.id in store._locks

    def test_missing_job(self, store):
        with pytest.raises(JobNotFoundError) as exc_info:
            store.get("job_nope")
        assert exc_info.value.job_id == "job_nope"


class TestWriteRules:
    """Updates respect the job lifecycle."""

    def test_duplicate_create_rejected(self, store, pending_job):
        with pytest.raises(JobStoreError):
            store.create(pending_job)

    def test_progress_cannot_decrease(self, store, pending_job):
        store.update(pending_job.id, status=JobStatus.PROCESSING, progress=40)
        with pytest.raises(JobStoreError, match="backwards"):
            store.update(pending_job.id, progress=30)

    def test_equal_progress_allowed(self, store, pending_job):
        store.update(pending_job.id, progress=40)
        assert store.update(pending_job.id, progress=40).progress == 40

    def test_started_at_written_once(self, store, pending_job, clock):
        store.update(pending_job.id, status=JobStatus.PROCESSING, started_at=clock())
        with pytest.raises(JobStoreError, match="already set"):
            store.update(pending_job.id, started_at=clock())

    def test_immutable_fields(self, store, pending_job):
        with pytest.raises(JobStoreError, match="owner_id"):
            store.update(pending_job.id, owner_id="someone_else")

    def test_terminal_job_is_read_only(self, store, pending_job, clock):
        store.update(pending_job.id, status=JobStatus.FAILED, error="boom", completed_at=clock())
        with pytest.raises(JobStoreError, match="can no longer change"):
            store.update(pending_job.id, error="other")

        # Re-reads return the same error every time
        assert store.get(pending_job.id).error == "boom"
        assert store.get(pending_job.id).error == "boom"

    def test_completed_requires_result(self, store, pending_job):
        with pytest.raises(ValueError):
            store.update(pending_job.id, status=JobStatus.COMPLETED, progress=100)

    def test_processing_cannot_reach_100(self, store, pending_job):
        with pytest.raises(ValueError):
            store.update(pending_job.id, status=JobStatus.PROCESSING, progress=100)

    def test_update_missing_job(self, store):
        with pytest.raises(JobNotFoundError):
            store.update("job_missing", progress=10)


class TestJsonFileJobStore:
    """Rows survive a new store instance over the same directory."""

    def test_round_trip_completed_job(self, tmp_path, generate_config, clock):
        store = JsonFileJobStore(tmp_path, clock=clock)
        job = create_job(store, "user_1", generate_config, image_count=1)
        store.update(job.id, status=JobStatus.PROCESSING, started_at=clock())
        store.update(
            job.id,
            status=JobStatus.COMPLETED,
            result=_result(),
            progress=100,
            current_step=PipelineStep.DONE,
            completed_at=clock(),
        )

        reopened = JsonFileJobStore(tmp_path, clock=clock)
        loaded = reopened.get(job.id)
        assert loaded.status == JobStatus.COMPLETED
        assert loaded.result.slides[0].image_bytes == JPEG_STUB

    def test_image_bytes_stored_as_base64(self, tmp_path, generate_config, clock):
        store = JsonFileJobStore(tmp_path, clock=clock)
        job = create_job(store, "user_1", generate_config, image_count=1)
        store.update(job.id, status=JobStatus.PROCESSING, started_at=clock())
        store.update(
            job.id,
            status=JobStatus.COMPLETED,
            result=_result(),
            progress=100,
            completed_at=clock(),
        )

        raw = json.loads((tmp_path / f"{job.id}.json").read_text(encoding="utf-8"))
        assert isinstance(raw["result"]["slides"][0]["image_bytes"], str)

    def test_no_temp_files_left(self, tmp_path, generate_config, clock):
        store = JsonFileJobStore(tmp_path, clock=clock)
        job = create_job(store, "user_1", generate_config, image_count=1)
        store.update(job.id, progress=10)
        assert not list(tmp_path.glob("*.tmp"))

    def test_path_like_ids_rejected(self, tmp_path, clock):
        store = JsonFileJobStore(tmp_path, clock=clock)
        with pytest.raises(JobNotFoundError):
            store.get("../etc/passwd")

    def test_purge_deletes_files(self, tmp_path, generate_config, clock):
        store = JsonFileJobStore(tmp_path, clock=clock)
        job = create_job(store, "user_1", generate_config, image_count=1)
        clock.advance(JOB_TTL_SECONDS + 1)

        assert store.purge_expired() == 1
        assert not (tmp_path / f"{job.id}.json").exists()
