"""Generation job records and their storage."""

from .models import (
    CompositedSlide,
    GenerationResult,
    Job,
    JobInputConfig,
    utc_now,
)
from .store import (
    InMemoryJobStore,
    JobNotFoundError,
    JobStore,
    JobStoreError,
    JsonFileJobStore,
)
from .service import (
    ConfigValidationError,
    FilterOptions,
    GenerateConfig,
    create_job,
    describe_job,
    generate_id,
    get_job_for_owner,
    validate_uploads,
)

__all__ = [
    "CompositedSlide",
    "GenerationResult",
    "Job",
    "JobInputConfig",
    "utc_now",
    "InMemoryJobStore",
    "JobNotFoundError",
    "JobStore",
    "JobStoreError",
    "JsonFileJobStore",
    "ConfigValidationError",
    "FilterOptions",
    "GenerateConfig",
    "create_job",
    "describe_job",
    "generate_id",
    "get_job_for_owner",
    "validate_uploads",
]
