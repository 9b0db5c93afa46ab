"""Job creation, request validation and the job read contract.

These are the operations the HTTP layer calls around the pipeline:
validate a generation request, create the pending job row, and later
read it back in the shape callers poll.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..constants import (
    ACCEPTED_IMAGE_TYPES,
    CAPTION_STYLES,
    GENERATION_PLATFORMS,
    JOB_ID_PREFIX,
    JOB_TTL_SECONDS,
    MAX_UPLOAD_FILE_SIZE,
    MAX_UPLOAD_IMAGES,
    PREDEFINED_FILTERS,
    SLIDE_COUNT_MAX,
    SLIDE_COUNT_MIN,
    JobStatus,
)
from .models import Job, JobInputConfig
from .store import JobNotFoundError, JobStore


class ConfigValidationError(ValueError):
    """Generation request failed validation."""

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Validation failed: {summary}")


class FilterOptions(BaseModel):
    """Camera filter selection."""

    predefined_filter: str = "none"
    custom_params: dict[str, float] = Field(default_factory=dict)

    @field_validator("predefined_filter")
    @classmethod
    def _known_filter(cls, value: str) -> str:
        if value not in PREDEFINED_FILTERS:
            raise ValueError(f"Invalid filter. Valid: {', '.join(PREDEFINED_FILTERS)}")
        return value


class GenerateConfig(BaseModel):
    """Simplified generation request received from API consumers."""

    theme: str
    platforms: list[str]
    slide_count: int | None = None
    keywords: list[str] = Field(default_factory=list)
    caption_style: str | None = None
    camera_profile_id: int = 0
    filter: FilterOptions | None = None
    overlay_style: dict[str, Any] | None = None

    @field_validator("theme")
    @classmethod
    def _non_empty_theme(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("theme is required and must be a non-empty string")
        return value

    @field_validator("platforms")
    @classmethod
    def _known_platforms(cls, value: list[str]) -> list[str]:
        valid = ", ".join(GENERATION_PLATFORMS)
        if not value:
            raise ValueError(f"platforms must be a non-empty array. Valid: {valid}")
        for platform in value:
            if platform not in GENERATION_PLATFORMS:
                raise ValueError(f'Invalid platform: "{platform}". Valid: {valid}')
        return value

    @field_validator("slide_count")
    @classmethod
    def _slide_count_range(cls, value: int | None) -> int | None:
        if value is not None and not SLIDE_COUNT_MIN <= value <= SLIDE_COUNT_MAX:
            raise ValueError(
                f"slideCount must be an integer between {SLIDE_COUNT_MIN} and {SLIDE_COUNT_MAX}"
            )
        return value

    @field_validator("caption_style")
    @classmethod
    def _known_caption_style(cls, value: str | None) -> str | None:
        if value is not None and value not in CAPTION_STYLES:
            raise ValueError(f"Invalid captionStyle. Valid: {', '.join(CAPTION_STYLES)}")
        return value

    @classmethod
    def parse(cls, raw: Any) -> "GenerateConfig":
        """Validate a raw request payload.

        Raises:
            ConfigValidationError: With one entry per invalid field.
        """
        if not isinstance(raw, dict):
            raise ConfigValidationError(
                [{"field": "config", "message": "Config must be a JSON object"}]
            )
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            errors = []
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "config"
                message = err["msg"].removeprefix("Value error, ")
                errors.append({"field": field, "message": message})
            raise ConfigValidationError(errors) from e


def validate_uploads(files: Sequence[tuple[str, str | None, int]]) -> None:
    """Check uploaded image count, sizes and types.

    Args:
        files: ``(filename, mime_type, size_bytes)`` per uploaded file.

    Raises:
        ConfigValidationError: On the first rule violated.
    """
    if not files:
        raise ConfigValidationError(
            [{"field": "images", "message": "No images provided"}]
        )
    if len(files) > MAX_UPLOAD_IMAGES:
        raise ConfigValidationError(
            [{"field": "images", "message": f"Too many images. Maximum is {MAX_UPLOAD_IMAGES}."}]
        )
    for filename, mime_type, size in files:
        if size > MAX_UPLOAD_FILE_SIZE:
            raise ConfigValidationError(
                [{"field": "images", "message": f'Image "{filename}" exceeds 10 MB limit'}]
            )
        if mime_type and mime_type not in ACCEPTED_IMAGE_TYPES:
            raise ConfigValidationError([{
                "field": "images",
                "message": (
                    f'Image "{filename}" has unsupported type "{mime_type}". '
                    "Accepted: JPEG, PNG, WebP."
                ),
            }])


def generate_id(prefix: str = "") -> str:
    """Generate an unguessable url-safe id, e.g. ``job_a1B2c3D4e5F6``."""
    token = secrets.token_urlsafe(9)
    return f"{prefix}_{token}" if prefix else token


def create_job(
    store: JobStore,
    owner_id: str,
    config: GenerateConfig,
    image_count: int,
    ttl_seconds: int = JOB_TTL_SECONDS,
) -> Job:
    """Create and persist a pending job for a validated request."""
    now = store.now()
    job = Job(
        id=generate_id(JOB_ID_PREFIX),
        owner_id=owner_id,
        status=JobStatus.PENDING,
        input_config=JobInputConfig(
            theme=config.theme,
            platforms=tuple(config.platforms),
            slide_count=config.slide_count,
            keywords=tuple(config.keywords),
            image_count=image_count,
        ),
        created_at=now,
        expires_at=now + timedelta(seconds=ttl_seconds),
    )
    store.create(job)
    return job


def get_job_for_owner(store: JobStore, job_id: str, owner_id: str) -> Job:
    """Read a job only its creator may see.

    Raises:
        JobNotFoundError: Missing, expired, or owned by someone else.
    """
    job = store.get(job_id)
    if job.owner_id != owner_id:
        raise JobNotFoundError(job_id)
    return job


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def describe_job(job: Job) -> dict[str, Any]:
    """Render a job in the shape returned to polling callers."""
    response: dict[str, Any] = {
        "job_id": job.id,
        "status": job.status.value,
        "created_at": _iso(job.created_at),
    }

    if job.status in (JobStatus.PENDING, JobStatus.PROCESSING):
        response["current_step"] = job.current_step.value if job.current_step else None
        response["progress"] = job.progress

    if job.status == JobStatus.COMPLETED:
        response["result"] = job.result.model_dump(mode="json")
        response["completed_at"] = _iso(job.completed_at)

    if job.status == JobStatus.FAILED:
        response["error"] = job.error
        response["completed_at"] = _iso(job.completed_at)

    return response
