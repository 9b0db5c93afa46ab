"""Status enums and state constants for KodaPost.

This module contains the status enums shared by the job pipeline and the
publish adapters:
- Job lifecycle states
- Pipeline step labels
- Publish failure categories

AI CONTEXT:
-----------
Job status is a small state machine:
  PENDING -> PROCESSING -> COMPLETED
                 |
                 v
               FAILED

COMPLETED and FAILED are terminal. A terminal job row is read-only.

MODIFICATION GUIDE:
------------------
- Add new enum values at the END to maintain backwards compatibility
- Values are persisted in job files, so never rename an existing value
"""

from enum import Enum
from typing import Final


# =============================================================================
# JOB LIFECYCLE STATUS
# =============================================================================

class JobStatus(str, Enum):
    """Status of a generation job.

    Workflow:
        PENDING -> PROCESSING -> COMPLETED
                       |
                       v
                    FAILED
    """

    PENDING = "pending"
    """Job row created, pipeline not started yet."""

    PROCESSING = "processing"
    """Pipeline is running one of its stages."""

    COMPLETED = "completed"
    """Pipeline finished, result is available."""

    FAILED = "failed"
    """Pipeline aborted, error is available."""

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_JOB_STATUSES


TERMINAL_JOB_STATUSES: Final[frozenset[JobStatus]] = frozenset(
    {JobStatus.COMPLETED, JobStatus.FAILED}
)


# =============================================================================
# PIPELINE STEP
# =============================================================================

class PipelineStep(str, Enum):
    """Label of the pipeline stage in progress.

    Informational only, shown to callers polling a job.
    """

    ANALYZING = "analyzing"
    GENERATING = "generating"
    COMPOSITING = "compositing"
    CAPTIONING = "captioning"
    DONE = "done"


# =============================================================================
# PUBLISH FAILURE KIND
# =============================================================================

class PublishErrorKind(str, Enum):
    """Category of a failed publish outcome."""

    VALIDATION = "validation"
    """Precondition failure, reported before any network call."""

    PROTOCOL = "protocol"
    """Platform replied with an error or an unusable response."""

    TIMEOUT = "timeout"
    """Polling ceiling exhausted; the post may still appear later."""

    UNSUPPORTED = "unsupported"
    """Platform adapter not implemented yet."""

    AUTH = "auth"
    """Platform not connected or credentials missing."""

    UNEXPECTED = "unexpected"
    """Any other exception raised while publishing."""
