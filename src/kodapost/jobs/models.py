"""Data models for generation jobs."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from ..constants import JOB_TTL_SECONDS, JobStatus, PipelineStep


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CompositedSlide(BaseModel):
    """A final, export-ready slide image for one platform."""

    model_config = ConfigDict(frozen=True)

    platform: str
    slide_index: int
    image_bytes: bytes
    format: Literal["jpeg", "png"] = "jpeg"

    @field_validator("image_bytes", mode="before")
    @classmethod
    def _decode_base64(cls, value: Any) -> Any:
        # Persisted rows carry the image as base64 text
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    @field_serializer("image_bytes", when_used="json")
    def _encode_base64(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class GenerationResult(BaseModel):
    """Output of a completed job. Built once at the final stage."""

    model_config = ConfigDict(frozen=True)

    caption: str | None = None
    slides: tuple[CompositedSlide, ...] = ()
    slide_count: int
    platforms: tuple[str, ...] = ()


class JobInputConfig(BaseModel):
    """Normalized copy of the caller's request, kept for audit."""

    model_config = ConfigDict(frozen=True)

    theme: str
    platforms: tuple[str, ...]
    slide_count: int | None = None
    keywords: tuple[str, ...] = ()
    image_count: int = 0


class Job(BaseModel):
    """One execution of the generation pipeline.

    Exactly one of ``result`` / ``error`` / neither is set, matching
    ``status``: completed has a result, failed has an error, pending and
    processing have neither.
    """

    id: str
    owner_id: str
    status: JobStatus = JobStatus.PENDING
    current_step: PipelineStep | None = None
    progress: int = Field(default=0, ge=0, le=100)
    input_config: JobInputConfig
    result: GenerationResult | None = None
    error: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Job":
        if self.expires_at is None:
            self.expires_at = self.created_at + timedelta(seconds=JOB_TTL_SECONDS)

        if self.status == JobStatus.COMPLETED:
            if self.result is None or self.error is not None:
                raise ValueError("completed job must carry a result and no error")
            if self.progress != 100:
                raise ValueError("completed job must be at 100% progress")
        elif self.status == JobStatus.FAILED:
            if self.error is None or self.result is not None:
                raise ValueError("failed job must carry an error and no result")
        else:
            if self.result is not None or self.error is not None:
                raise ValueError(f"{self.status.value} job cannot carry a result or error")
            if self.progress == 100:
                raise ValueError("only a completed job reaches 100% progress")
        return self

    @property
    def is_terminal(self) -> bool:
        """Whether the job reached completed or failed."""
        return self.status.is_terminal

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the job is past its expiry instant."""
        now = now or utc_now()
        return now > self.expires_at
